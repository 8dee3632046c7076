from __future__ import annotations

from .formatter import format_report_table
from .generator import (
    PriceResult,
    SnapshotReport,
    generate_fallback_report,
    generate_report,
    utc_timestamp,
)
from .publisher import SnapshotStore

__all__ = [
    "PriceResult",
    "SnapshotReport",
    "SnapshotStore",
    "format_report_table",
    "generate_fallback_report",
    "generate_report",
    "utc_timestamp",
]
