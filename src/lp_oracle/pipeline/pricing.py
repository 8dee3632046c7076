"""Reference rate and per-token price derivation."""

from __future__ import annotations

import asyncio

from ..constants import REFERENCE_UNAVAILABLE_MESSAGE
from ..report import PriceResult
from ..settings import TokenSettings
from .context import PipelineContext


async def price_reference_asset(ctx: PipelineContext) -> None:
    """Fetch the reference USD rate exactly once.

    Sets ``ctx.reference_usd_rate`` on success. On failure the reference
    symbol carries the error and the rate stays None.
    """
    s = ctx.state.settings
    log = ctx.state.logger

    log.info("Fetching %s USD rate from %s...", s.reference_symbol, ctx.feed.adapter_name)
    try:
        rate = await ctx.feed.fetch_reference_usd_rate()
        result = PriceResult.from_usd(rate)
    except Exception as e:
        log.error("%s USD rate unavailable: %s", s.reference_symbol, e)
        ctx.prices[s.reference_symbol] = PriceResult.from_error(str(e))
        return

    log.info("%s = %s USD", s.reference_symbol, rate)
    ctx.reference_usd_rate = rate
    ctx.prices[s.reference_symbol] = result


async def _price_token(
    ctx: PipelineContext, symbol: str, token: TokenSettings, reference_usd_rate: float
) -> PriceResult:
    s = ctx.state.settings
    log = ctx.state.logger
    try:
        pool_rate = await ctx.resolver.resolve(
            token.pool,
            token.address,
            token.decimals,
            s.quote_token.address,
            s.quote_token.decimals,
        )
        usd = pool_rate * reference_usd_rate
        result = PriceResult.from_usd(usd)
    except Exception as e:
        log.error("Failed to price %s: %s", symbol, e)
        return PriceResult.from_error(str(e))

    log.info("%s = %s quote = %s USD", symbol, pool_rate, usd)
    return result


async def price_tokens(ctx: PipelineContext) -> None:
    """Price every tracked token as pool rate x reference USD rate.

    Without a reference rate no pool is queried and every token is marked
    unavailable. Tokens resolve concurrently; one failure only affects its
    own symbol.
    """
    s = ctx.state.settings
    log = ctx.state.logger
    reference_usd_rate = ctx.reference_usd_rate

    if reference_usd_rate is None:
        log.warning(
            "Skipping %d token(s): %s", len(s.tokens), REFERENCE_UNAVAILABLE_MESSAGE
        )
        for symbol in s.tokens:
            ctx.prices[symbol] = PriceResult.from_error(REFERENCE_UNAVAILABLE_MESSAGE)
        return

    log.info("Resolving %d token(s) from pool reserves...", len(s.tokens))
    symbols = list(s.tokens)
    results = await asyncio.gather(
        *[
            _price_token(ctx, symbol, s.tokens[symbol], reference_usd_rate)
            for symbol in symbols
        ]
    )
    for symbol, result in zip(symbols, results):
        ctx.prices[symbol] = result
