"""Assemble per-symbol (current, base, market cap) inputs from the price store.

Shared by the live path and the historical replay so both feed the
valuator identical inputs; only the price lookup differs (latest vs. as of a
day).
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import date

from aiindex.domain.models.index import ConstituentQuote
from aiindex.domain.repositories import PriceRepository


async def gather_quotes(
    prices: PriceRepository,
    symbols: Iterable[str],
    as_of: date | None = None,
) -> dict[str, ConstituentQuote]:
    """Read current and base prices for each symbol.

    With as_of None the latest observation is used; otherwise the most
    recent observation on or before that day, which carries the last known
    close across holidays and provider gaps.  Symbols lacking either price
    are left out; eligibility of the rest is decided by the valuator.
    """
    quotes: dict[str, ConstituentQuote] = {}
    for symbol in symbols:
        if as_of is None:
            current = await prices.latest_price(symbol)
        else:
            current = await prices.price_as_of_or_before(symbol, as_of)
        if current is None:
            continue
        base = await prices.base_price(symbol)
        if base is None:
            continue
        quotes[symbol] = ConstituentQuote(
            current_price=current.price,
            base_price=base,
            market_cap=current.market_cap,
        )
    return quotes
