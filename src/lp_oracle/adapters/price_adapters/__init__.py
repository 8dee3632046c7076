from __future__ import annotations

from .base import (
    BasePoolReader,
    BaseReferenceFeed,
    FeedUnavailableError,
    MissingFieldsError,
    NoPairDataError,
    PairMismatchError,
    PricingError,
    ReserveSnapshot,
    RpcFailureError,
    ZeroReserveError,
)
from .dexscreener import DexScreenerFeed
from .uniswap_v2 import UniswapV2PriceResolver, Web3PoolReader

__all__ = [
    "BasePoolReader",
    "BaseReferenceFeed",
    "DexScreenerFeed",
    "FeedUnavailableError",
    "MissingFieldsError",
    "NoPairDataError",
    "PairMismatchError",
    "PricingError",
    "ReserveSnapshot",
    "RpcFailureError",
    "UniswapV2PriceResolver",
    "Web3PoolReader",
    "ZeroReserveError",
]
