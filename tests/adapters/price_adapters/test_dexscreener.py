from unittest.mock import Mock

import pytest
import requests

from lp_oracle.adapters.price_adapters.base import (
    FeedUnavailableError,
    MissingFieldsError,
    NoPairDataError,
)
from lp_oracle.adapters.price_adapters.dexscreener import (
    DexScreenerFeed,
    select_pair,
    usd_per_native_unit,
)
from lp_oracle.settings import SnapshotSettings


@pytest.fixture
def config(tmp_path, monkeypatch):
    monkeypatch.setenv("LP_ORACLE_CONFIG", str(tmp_path / "missing.toml"))
    return SnapshotSettings(feed_url="https://feed.example/pair", feed_timeout=3.0)


@pytest.fixture
def feed(config):
    return DexScreenerFeed(config)


def _response(status_code=200, payload=None, json_error=None):
    response = Mock()
    response.status_code = status_code
    if json_error is not None:
        response.json.side_effect = json_error
    else:
        response.json.return_value = payload
    return response


def test_adapter_name(feed):
    assert feed.adapter_name == "dexscreener"


class TestSelectPair:
    def test_prefers_single_pair_object(self):
        data = {"pair": {"priceUsd": "1"}, "pairs": [{"priceUsd": "2"}]}
        assert select_pair(data) == {"priceUsd": "1"}

    def test_falls_back_to_first_list_entry(self):
        data = {"pairs": [{"priceUsd": "2"}, {"priceUsd": "3"}]}
        assert select_pair(data) == {"priceUsd": "2"}

    @pytest.mark.parametrize(
        "data", [{}, {"pair": None, "pairs": None}, {"pairs": []}, [], None]
    )
    def test_missing_pair_raises(self, data):
        with pytest.raises(NoPairDataError, match="No pair data"):
            select_pair(data)


class TestUsdPerNativeUnit:
    def test_inverts_native_price(self):
        pair = {"priceUsd": "0.9995", "priceNative": "0.001538"}
        assert usd_per_native_unit(pair) == pytest.approx(0.9995 / 0.001538)

    def test_accepts_numeric_fields(self):
        assert usd_per_native_unit({"priceUsd": 600, "priceNative": 2}) == 300.0

    @pytest.mark.parametrize(
        "pair",
        [
            {"priceNative": "1.0"},
            {"priceUsd": "600.0"},
            {"priceUsd": "0", "priceNative": "1.0"},
            {"priceUsd": "600.0", "priceNative": "0.0"},
            {"priceUsd": "abc", "priceNative": "1.0"},
            {"priceUsd": "600.0", "priceNative": None},
            {"priceUsd": "NaN", "priceNative": "1.0"},
        ],
    )
    def test_unusable_fields_raise(self, pair):
        with pytest.raises(MissingFieldsError, match="Missing fields"):
            usd_per_native_unit(pair)


@pytest.mark.asyncio
async def test_fetch_reference_usd_rate(monkeypatch, feed):
    get = Mock(
        return_value=_response(payload={"pair": {"priceUsd": "600.0", "priceNative": "1.0"}})
    )
    monkeypatch.setattr(requests, "get", get)

    assert await feed.fetch_reference_usd_rate() == 600.0
    get.assert_called_once_with("https://feed.example/pair", timeout=3.0)


@pytest.mark.asyncio
async def test_fetch_reference_usd_rate_uses_pairs_list(monkeypatch, feed):
    payload = {"pairs": [{"priceUsd": "1.0", "priceNative": "0.0016"}]}
    monkeypatch.setattr(requests, "get", Mock(return_value=_response(payload=payload)))

    assert await feed.fetch_reference_usd_rate() == pytest.approx(625.0)


@pytest.mark.asyncio
async def test_non_success_status_raises_feed_unavailable(monkeypatch, feed):
    monkeypatch.setattr(requests, "get", Mock(return_value=_response(status_code=503)))

    with pytest.raises(FeedUnavailableError, match="DexScreener HTTP 503"):
        await feed.fetch_reference_usd_rate()


@pytest.mark.asyncio
async def test_network_error_raises_feed_unavailable(monkeypatch, feed):
    monkeypatch.setattr(
        requests,
        "get",
        Mock(side_effect=requests.exceptions.ConnectionError("connection refused")),
    )

    with pytest.raises(FeedUnavailableError, match="connection refused"):
        await feed.fetch_reference_usd_rate()


@pytest.mark.asyncio
async def test_invalid_json_raises_no_pair_data(monkeypatch, feed):
    response = _response(json_error=ValueError("Expecting value"))
    monkeypatch.setattr(requests, "get", Mock(return_value=response))

    with pytest.raises(NoPairDataError, match="Invalid JSON"):
        await feed.fetch_reference_usd_rate()


@pytest.mark.asyncio
async def test_empty_payload_raises_no_pair_data(monkeypatch, feed):
    monkeypatch.setattr(
        requests, "get", Mock(return_value=_response(payload={"pairs": None}))
    )

    with pytest.raises(NoPairDataError):
        await feed.fetch_reference_usd_rate()
