from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any

from ..settings import SnapshotSettings
from .generator import SnapshotReport, generate_fallback_report

logger = logging.getLogger(__name__)


def write_json_atomic(path: Path, payload: dict[str, Any]) -> None:
    """Write ``payload`` to ``path`` via a temp file and ``os.replace``.

    Readers never observe a half-written document.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp = path.with_name(f".{path.name}.tmp")
    try:
        with tmp.open("w") as f:
            json.dump(payload, f, indent=2)
            f.write("\n")
        os.replace(tmp, path)
    finally:
        if tmp.exists():
            tmp.unlink()


class SnapshotStore:
    """Persists the "current" and "last-good" snapshot documents.

    "current" is overwritten on every run. "last-good" is overwritten only
    by reports in which every symbol is priced, so it never reflects a run
    that contained an error.
    """

    def __init__(self, current_path: Path, last_good_path: Path):
        self.current_path = Path(current_path)
        self.last_good_path = Path(last_good_path)

    @classmethod
    def from_settings(cls, config: SnapshotSettings) -> "SnapshotStore":
        return cls(config.current_path, config.last_good_path)

    def write_current(self, report: SnapshotReport) -> None:
        write_json_atomic(self.current_path, report.to_dict())
        logger.info("Wrote %s", self.current_path)

    def write_last_good(self, report: SnapshotReport) -> None:
        write_json_atomic(self.last_good_path, report.to_dict())
        logger.info("Wrote %s", self.last_good_path)

    def publish(self, report: SnapshotReport) -> bool:
        """Persist a report; returns True when last-good was updated too."""
        self.write_current(report)
        if report.has_errors:
            errored = [s for s, r in report.prices.items() if not r.ok]
            logger.warning(
                "Keeping previous %s; errors for: %s",
                self.last_good_path.name,
                ", ".join(errored),
            )
            return False
        self.write_last_good(report)
        return True

    def write_fallback(self, message: str, symbols: list[str]) -> SnapshotReport:
        """Overwrite "current" with every symbol marked by ``message``."""
        report = generate_fallback_report(message, symbols)
        self.write_current(report)
        return report

    @staticmethod
    def load(path: Path) -> dict[str, Any] | None:
        """Read a persisted snapshot, or None if it does not exist."""
        path = Path(path)
        if not path.exists():
            return None
        with path.open() as f:
            return json.load(f)
