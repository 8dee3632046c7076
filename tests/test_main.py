import json

import pytest
from typer.testing import CliRunner

from lp_oracle.main import app
from lp_oracle.pipeline import run as pipeline_run
from lp_oracle.pipeline.context import PipelineContext
from lp_oracle.report import PriceResult, generate_report

runner = CliRunner()


@pytest.fixture(autouse=True)
def no_config_file(tmp_path, monkeypatch):
    monkeypatch.setenv("LP_ORACLE_CONFIG", str(tmp_path / "missing.toml"))


def test_show_config_prints_settings(tmp_path):
    result = runner.invoke(app, ["--show-config", "--rpc-url", "https://rpc.example"])

    assert result.exit_code == 0
    data = json.loads(result.stdout)
    assert data["rpc_url"] == "https://rpc.example"
    assert data["reference_symbol"] == "BNB"


def test_successful_run_exits_zero_and_prints_table(tmp_path, monkeypatch):
    seen = {}

    async def fake_run_snapshot(state):
        seen["output_dir"] = state.settings.output_dir
        symbols = state.settings.tracked_symbols
        prices = {symbol: PriceResult.from_usd(1.5) for symbol in symbols}
        prices["XBNB"] = PriceResult.from_error("LP is not a pair")
        ctx = PipelineContext(state=state, feed=None, resolver=None, store=None)  # type: ignore[arg-type]
        ctx.report = generate_report(prices, symbols)
        return ctx

    monkeypatch.setattr(pipeline_run, "run_snapshot", fake_run_snapshot)

    result = runner.invoke(app, ["--output-dir", str(tmp_path), "--table"])

    assert result.exit_code == 0, result.output
    assert seen["output_dir"] == tmp_path
    assert "B4NK" in result.stdout
    assert "last-good kept" in result.stdout


def test_fatal_error_writes_fallback_and_exits_one(tmp_path, monkeypatch):
    async def exploding_run_snapshot(state):
        raise RuntimeError("orchestration exploded")

    monkeypatch.setattr(pipeline_run, "run_snapshot", exploding_run_snapshot)

    result = runner.invoke(app, ["--output-dir", str(tmp_path)])

    assert result.exit_code == 1
    current = json.loads((tmp_path / "price.json").read_text())
    assert set(current["prices"]) == {"BNB", "XBNB", "B4NK"}
    assert {entry["error"] for entry in current["prices"].values()} == {
        "orchestration exploded"
    }
    assert not (tmp_path / "price.last-good.json").exists()
