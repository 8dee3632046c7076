from __future__ import annotations

from dataclasses import dataclass, field

from ..adapters.price_adapters.base import BaseReferenceFeed
from ..adapters.price_adapters.uniswap_v2 import UniswapV2PriceResolver
from ..report import PriceResult, SnapshotReport, SnapshotStore
from ..state import AppState


@dataclass
class PipelineContext:
    state: AppState
    feed: BaseReferenceFeed
    resolver: UniswapV2PriceResolver
    store: SnapshotStore
    reference_usd_rate: float | None = None
    prices: dict[str, PriceResult] = field(default_factory=dict)
    report: SnapshotReport | None = None
    last_good_updated: bool = False

    @property
    def report_required(self) -> SnapshotReport:
        if self.report is None:
            raise RuntimeError(
                "Report has not been set. Ensure build_report() is called before accessing this property."
            )
        return self.report
