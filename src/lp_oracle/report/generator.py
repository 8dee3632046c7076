from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime, timezone
from types import MappingProxyType

from ..units import to_fixed_point_18


def utc_timestamp(now: datetime | None = None) -> str:
    """ISO-8601 UTC timestamp with millisecond precision and a ``Z`` suffix."""
    now = now or datetime.now(timezone.utc)
    return (
        now.astimezone(timezone.utc)
        .isoformat(timespec="milliseconds")
        .replace("+00:00", "Z")
    )


@dataclass(frozen=True)
class PriceResult:
    """USD price of one symbol, or the reason it could not be priced."""

    price_in_usd_float: float | None = None
    price_in_fixed_point_18: str | None = None
    error: str | None = None

    def __post_init__(self) -> None:
        if self.error is not None and self.price_in_usd_float is not None:
            raise ValueError("PriceResult cannot carry both a value and an error")

    @classmethod
    def from_usd(cls, value: float) -> "PriceResult":
        """Build a priced result; rejects negative or non-finite values."""
        fixed = to_fixed_point_18(value)
        return cls(price_in_usd_float=float(value), price_in_fixed_point_18=fixed)

    @classmethod
    def from_error(cls, message: str) -> "PriceResult":
        return cls(error=message)

    @property
    def ok(self) -> bool:
        return self.error is None and self.price_in_usd_float is not None

    def to_dict(self) -> dict[str, object]:
        return {
            "priceInUsdFloat": self.price_in_usd_float,
            "priceInFixedPoint18": self.price_in_fixed_point_18,
            "error": self.error,
        }


@dataclass(frozen=True)
class SnapshotReport:
    """Timestamped prices for the reference asset and every tracked token."""

    updated_at: str
    prices: Mapping[str, PriceResult] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "prices", MappingProxyType(dict(self.prices)))

    @property
    def has_errors(self) -> bool:
        return not all(result.ok for result in self.prices.values())

    def to_dict(self) -> dict[str, object]:
        """Convert report to the persisted JSON layout."""
        return {
            "updatedAt": self.updated_at,
            "prices": {
                symbol: result.to_dict() for symbol, result in self.prices.items()
            },
        }


def generate_report(
    prices: Mapping[str, PriceResult],
    symbols: list[str],
    updated_at: str | None = None,
) -> SnapshotReport:
    """Assemble the report, ordered by ``symbols``.

    Symbols missing from ``prices`` are recorded as unpriced errors so the
    report always covers the full symbol set.
    """
    ordered = {
        symbol: prices.get(symbol) or PriceResult.from_error("price not computed")
        for symbol in symbols
    }
    return SnapshotReport(updated_at=updated_at or utc_timestamp(), prices=ordered)


def generate_fallback_report(
    message: str, symbols: list[str], updated_at: str | None = None
) -> SnapshotReport:
    """Report marking every symbol with the same run-level error."""
    return SnapshotReport(
        updated_at=updated_at or utc_timestamp(),
        prices={symbol: PriceResult.from_error(message) for symbol in symbols},
    )
