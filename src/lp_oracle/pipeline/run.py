"""High-level pipeline orchestration."""

from __future__ import annotations

from ..adapters import POOL_READER, REFERENCE_FEED
from ..adapters.price_adapters.base import BasePoolReader, BaseReferenceFeed
from ..adapters.price_adapters.uniswap_v2 import UniswapV2PriceResolver
from ..report import SnapshotReport, SnapshotStore
from ..state import AppState
from .context import PipelineContext
from .pricing import price_reference_asset, price_tokens
from .report import build_report, publish_report


async def run_snapshot(
    state: AppState,
    feed: BaseReferenceFeed | None = None,
    reader: BasePoolReader | None = None,
    store: SnapshotStore | None = None,
) -> PipelineContext:
    """Execute one snapshot run.

    This is a thin orchestrator that sequences the pipeline steps:
    1. Reference USD rate (once)
    2. Per-token pool pricing
    3. Report generation
    4. Persistence of "current" and, when error-free, "last-good"

    Per-symbol failures are recorded in the report. Anything raised from
    here is a run-level failure.

    Args:
        state: Application state containing settings and logger
        feed: Reference USD feed; defaults to the configured DexScreener pair
        reader: Pool reader; defaults to a web3 reader on the configured RPC
        store: Snapshot store; defaults to the configured output paths
    """
    s = state.settings
    log = state.logger

    log.info("Starting snapshot", extra={"tokens": list(s.tokens)})

    ctx = PipelineContext(
        state=state,
        feed=feed or REFERENCE_FEED(s),
        resolver=UniswapV2PriceResolver(reader or POOL_READER(s)),
        store=store or SnapshotStore.from_settings(s),
    )

    await price_reference_asset(ctx)
    await price_tokens(ctx)
    await build_report(ctx)
    await publish_report(ctx)

    log.info("Snapshot completed", extra={"last_good_updated": ctx.last_good_updated})
    return ctx


def write_fallback_snapshot(
    state: AppState, exc: BaseException, store: SnapshotStore | None = None
) -> SnapshotReport | None:
    """Best-effort "current" write marking every symbol with ``exc``.

    Returns the fallback report, or None when it could not be written.
    """
    s = state.settings
    log = state.logger
    store = store or SnapshotStore.from_settings(s)
    message = str(exc) or type(exc).__name__

    try:
        return store.write_fallback(message, s.tracked_symbols)
    except OSError as write_exc:
        # Ignore write failure here; the caller still exits non-zero.
        log.error("Fallback snapshot write failed: %s", write_exc)
        return None
