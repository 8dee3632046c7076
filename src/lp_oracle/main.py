"""CLI entrypoint for the LP price oracle."""

from __future__ import annotations

import asyncio
import json
import logging
import os
from pathlib import Path
from typing import Annotated

import typer

from .logger import setup_logging
from .settings import SnapshotSettings
from .state import AppState

app = typer.Typer(
    add_completion=False,
    no_args_is_help=False,
    add_help_option=True,
    pretty_exceptions_enable=True,
    pretty_exceptions_short=True,
    pretty_exceptions_show_locals=False,
    rich_markup_mode="rich",
    help="Liquidity-pool USD price snapshot tool.",
)


def _build_logger() -> logging.Logger:
    """Build a logger instance."""
    return logging.getLogger("lp_oracle")


@app.callback(invoke_without_command=True)
def snapshot(
    config_path: Annotated[
        Path | None,
        typer.Option(
            "--config",
            "-c",
            help="Path to a TOML config file (can include [lp_oracle] table).",
        ),
    ] = None,
    rpc_url: Annotated[
        str | None,
        typer.Option("--rpc-url", help="RPC endpoint of the chain hosting the pools."),
    ] = None,
    feed_url: Annotated[
        str | None,
        typer.Option("--feed-url", help="DexScreener pair endpoint for the reference asset."),
    ] = None,
    block_number: Annotated[
        int | None,
        typer.Option(
            "--block-number",
            help="Block number to use for rpc calls. If not provided, the latest block will be used.",
        ),
    ] = None,
    output_dir: Annotated[
        Path | None,
        typer.Option("--output-dir", "-o", help="Directory for the snapshot files."),
    ] = None,
    log_level: Annotated[
        str | None,
        typer.Option(
            "--log-level",
            help="Override logging verbosity (TRACE, DEBUG, INFO, WARNING, ERROR, CRITICAL).",
        ),
    ] = None,
    table: Annotated[
        bool,
        typer.Option("--table/--no-table", help="Print a summary table of the snapshot."),
    ] = False,
    show_config: Annotated[
        bool,
        typer.Option(
            "--show-config",
            help="Print effective config and exit.",
        ),
    ] = False,
):
    """Build a price snapshot and persist it.

    Writes the "current" snapshot every run and the "last-good" snapshot
    only when every symbol was priced. Exits 1 if the run itself fails,
    after a best-effort fallback "current" write.
    """
    if config_path:
        os.environ["LP_ORACLE_CONFIG"] = str(config_path)

    init_kwargs: dict[str, str | int | Path] = {}
    if rpc_url is not None:
        init_kwargs["rpc_url"] = rpc_url
    if feed_url is not None:
        init_kwargs["feed_url"] = feed_url
    if block_number is not None:
        init_kwargs["block_number"] = block_number
    if output_dir is not None:
        init_kwargs["output_dir"] = output_dir
    if log_level is not None:
        init_kwargs["log_level"] = log_level.upper()

    settings = SnapshotSettings(**init_kwargs)

    if show_config:
        typer.echo(json.dumps(settings.as_safe_dict(), indent=2))
        raise typer.Exit(code=0)

    setup_logging(settings.log_level)
    state = AppState(settings=settings, logger=_build_logger())

    from .pipeline.run import run_snapshot, write_fallback_snapshot

    try:
        ctx = asyncio.run(run_snapshot(state))
    except Exception as e:
        state.logger.critical("Fatal: %s", e, exc_info=True)
        write_fallback_snapshot(state, e)
        raise typer.Exit(code=1) from e

    if table:
        from .report import format_report_table

        format_report_table(ctx.report_required, ctx.last_good_updated)


def run() -> None:
    """Entrypoint used by the console script."""
    app()


if __name__ == "__main__":
    run()
