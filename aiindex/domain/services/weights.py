"""Weight Blender: interpolates between market-cap and equal weighting.

    equal_weight   = 1 / n
    mcap_weight(s) = cap(s) / Σ cap          (equal_weight when Σ cap == 0)
    weight(s)      = f · mcap_weight(s) + (1 − f) · equal_weight

where f is the market-cap fraction in [0, 1].  A symbol with an unknown cap
is blended as if its cap were MCAP_UNKNOWN_DEFAULT, so it keeps a nominal
share instead of collapsing to zero.
"""

from __future__ import annotations

from collections.abc import Mapping

import numpy as np

from aiindex.domain.errors import EmptyBasketError

MCAP_UNKNOWN_DEFAULT = 1.0


def resolve_market_cap(market_cap: float | None) -> float:
    """Map an optional market cap onto the figure used for blending.

    None becomes MCAP_UNKNOWN_DEFAULT; negative figures are treated as 0.0.
    """
    if market_cap is None:
        return MCAP_UNKNOWN_DEFAULT
    return max(float(market_cap), 0.0)


def blend(
    basket: Mapping[str, float | None],
    mcap_fraction: float,
) -> dict[str, float]:
    """Compute the blended weight of every symbol in the basket.

    Symbols are processed in sorted order so the result never depends on the
    insertion order of the mapping.

    Args:
        basket: symbol -> market cap, None when the cap is unknown.
        mcap_fraction: share of each weight taken from market-cap weighting.

    Returns:
        symbol -> weight; weights are non-negative and sum to 1.0.

    Raises:
        EmptyBasketError: If the basket has no symbols.
    """
    if not basket:
        raise EmptyBasketError("Cannot blend weights for an empty basket")

    symbols = sorted(basket)
    n = len(symbols)
    equal_weight = 1.0 / n

    caps = np.array([resolve_market_cap(basket[s]) for s in symbols], dtype=float)
    total_mcap = float(caps.sum())
    if total_mcap > 0.0:
        mcap_weights = caps / total_mcap
    else:
        mcap_weights = np.full(n, equal_weight)

    weights = mcap_fraction * mcap_weights + (1.0 - mcap_fraction) * equal_weight
    return dict(zip(symbols, weights.tolist()))
