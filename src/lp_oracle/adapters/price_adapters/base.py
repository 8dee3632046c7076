from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass


class PricingError(Exception):
    """Raised when a price source cannot produce a usable value."""


class FeedUnavailableError(PricingError):
    """The reference feed could not be reached or answered with a non-2xx status."""


class NoPairDataError(PricingError):
    """The reference feed payload carries neither a pair nor a list of pairs."""


class MissingFieldsError(PricingError):
    """The selected pair lacks a usable priceUsd or priceNative value."""


class PairMismatchError(PricingError):
    """The pool does not contain exactly the expected token/quote pair."""

    def __init__(self, pool: str, token: str, quote: str):
        super().__init__(f"LP {pool} is not a {token} - {quote} pair")
        self.pool = pool
        self.token = token
        self.quote = quote


class RpcFailureError(PricingError):
    """A contract read against the blockchain node failed."""


class ZeroReserveError(PricingError):
    """A pool reserve is zero, so no rate can be derived."""


@dataclass(frozen=True)
class ReserveSnapshot:
    """Token addresses and raw reserves of a pool, read at one block."""

    token0: str
    token1: str
    reserve0: int
    reserve1: int


class BaseReferenceFeed(ABC):
    """Abstract source of the reference asset's USD rate."""

    @property
    @abstractmethod
    def adapter_name(self) -> str:
        """Return the name of this adapter."""
        ...

    @abstractmethod
    async def fetch_reference_usd_rate(self) -> float:
        """Return the USD value of one native unit of the reference asset."""
        ...


class BasePoolReader(ABC):
    """Abstract reader of pool composition and reserves."""

    @property
    @abstractmethod
    def adapter_name(self) -> str:
        """Return the name of this adapter."""
        ...

    @abstractmethod
    async def fetch_reserve_snapshot(self, pool_address: str) -> ReserveSnapshot:
        """Read both token addresses and both reserves from the same state.

        Raises:
            RpcFailureError: If any underlying contract read fails.
        """
        ...
