from __future__ import annotations

from .price_adapters import DexScreenerFeed, Web3PoolReader

REFERENCE_FEED = DexScreenerFeed
POOL_READER = Web3PoolReader

__all__ = ["POOL_READER", "REFERENCE_FEED"]
