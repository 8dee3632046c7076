from __future__ import annotations

import asyncio
import json
import logging
import math
from typing import Any

import requests

from ...settings import SnapshotSettings
from .base import (
    BaseReferenceFeed,
    FeedUnavailableError,
    MissingFieldsError,
    NoPairDataError,
)

logger = logging.getLogger(__name__)


def _positive_number(value: Any) -> float | None:
    """Parse a numeric or numeric-string field; None when unusable as a divisor."""
    if isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number) or number == 0:
        return None
    return number


def select_pair(data: Any) -> dict[str, Any]:
    """Pick the pair object from a DexScreener payload.

    A single ``pair`` object wins; otherwise the first entry of ``pairs``.

    Raises:
        NoPairDataError: If neither is present.
    """
    if isinstance(data, dict):
        pair = data.get("pair")
        if isinstance(pair, dict):
            return pair
        pairs = data.get("pairs")
        if isinstance(pairs, list) and pairs and isinstance(pairs[0], dict):
            return pairs[0]
    raise NoPairDataError("No pair data for reference asset")


def usd_per_native_unit(pair: dict[str, Any]) -> float:
    """Invert a pair's native-denominated price into USD per native unit.

    Raises:
        MissingFieldsError: If priceUsd or priceNative is absent, zero or
            non-numeric.
    """
    price_usd = _positive_number(pair.get("priceUsd"))
    price_native = _positive_number(pair.get("priceNative"))
    if price_usd is None or price_native is None:
        raise MissingFieldsError("Missing fields for reference asset price")
    return price_usd / price_native


class DexScreenerFeed(BaseReferenceFeed):
    """Reference USD feed backed by a single DexScreener pair endpoint.

    The configured pair quotes a USD stablecoin against the reference
    asset, so ``priceUsd / priceNative`` is the USD value of one unit of
    the reference asset.
    """

    def __init__(self, config: SnapshotSettings):
        self.config = config
        self.url = config.feed_url
        self.timeout = config.feed_timeout

    @property
    def adapter_name(self) -> str:
        return "dexscreener"

    async def _http_get(self, url: str) -> requests.Response:
        return await asyncio.to_thread(requests.get, url, timeout=self.timeout)

    async def fetch_reference_usd_rate(self) -> float:
        """Fetch the reference pair and derive USD per native unit.

        Raises:
            FeedUnavailableError: If the request fails or the status is not 2xx.
            NoPairDataError: If the payload carries no pair.
            MissingFieldsError: If the price fields are unusable.
        """
        logger.debug("Calling %s", self.url)
        try:
            response = await self._http_get(self.url)
        except requests.exceptions.RequestException as e:
            raise FeedUnavailableError(f"DexScreener request failed: {e}") from e

        if not 200 <= response.status_code < 300:
            raise FeedUnavailableError(f"DexScreener HTTP {response.status_code}")

        try:
            data = response.json()
        except (json.JSONDecodeError, ValueError) as e:
            raise NoPairDataError("Invalid JSON from DexScreener API") from e

        rate = usd_per_native_unit(select_pair(data))
        logger.debug("Reference USD rate from %s: %s", self.adapter_name, rate)
        return rate
