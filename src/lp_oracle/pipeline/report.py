"""Report generation and persistence."""

from __future__ import annotations

from ..report import generate_report
from .context import PipelineContext


async def build_report(ctx: PipelineContext) -> None:
    """Stamp the collected prices into an immutable report."""
    s = ctx.state.settings
    log = ctx.state.logger

    log.info("Generating report...")
    ctx.report = generate_report(ctx.prices, s.tracked_symbols)


async def publish_report(ctx: PipelineContext) -> None:
    """Write "current" always and "last-good" only for error-free reports."""
    report = ctx.report_required
    log = ctx.state.logger

    log.info("Publishing report (has_errors=%s)...", report.has_errors)
    ctx.last_good_updated = ctx.store.publish(report)
