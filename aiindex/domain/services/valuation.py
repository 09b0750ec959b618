"""Index Valuator: one index value from per-symbol (current, base) prices.

    index_value = base_value · Σ_eligible weight(s) · current(s) / base(s)

Each symbol's own base price is its denominator, so the index is a weighted
average of per-symbol cumulative returns and a symbol added later starts at
"no change".  Weights are re-blended over the eligible subset only: a symbol
missing a positive current or base price drops out and its share is
redistributed instead of silently pulling the index toward zero.
"""

from __future__ import annotations

import math
from collections.abc import Mapping

from aiindex.domain.errors import NoEligibleQuotesError
from aiindex.domain.models.index import ConstituentQuote, IndexValuation

from .weights import blend


def eligible_quotes(
    quotes: Mapping[str, ConstituentQuote],
) -> dict[str, ConstituentQuote]:
    """Return the quotes with both a positive current and a positive base price."""
    return {s: q for s, q in quotes.items() if q.is_eligible}


def has_eligible_quotes(quotes: Mapping[str, ConstituentQuote]) -> bool:
    """True when at least one symbol can contribute to the index value."""
    return any(q.is_eligible for q in quotes.values())


def valuate(
    quotes: Mapping[str, ConstituentQuote],
    mcap_fraction: float,
    base_value: float,
    *,
    strict: bool = False,
) -> IndexValuation | None:
    """Compute the index value and the weights used for it.

    Returns None when no symbol is eligible; callers must treat that as
    "nothing to compute", which is distinct from an index worth 0.

    Raises:
        NoEligibleQuotesError: Instead of returning None, when strict is set.
    """
    eligible = eligible_quotes(quotes)
    if not eligible:
        if strict:
            raise NoEligibleQuotesError(
                f"No eligible quotes among {len(quotes)} symbols"
            )
        return None

    weights = blend({s: q.market_cap for s, q in eligible.items()}, mcap_fraction)
    total = math.fsum(weights[s] * eligible[s].relative_price for s in sorted(eligible))
    return IndexValuation(value=base_value * total, weights=weights)


def value(
    quotes: Mapping[str, ConstituentQuote],
    mcap_fraction: float,
    base_value: float,
) -> float | None:
    """Scalar form of valuate()."""
    valuation = valuate(quotes, mcap_fraction, base_value)
    return valuation.value if valuation is not None else None
