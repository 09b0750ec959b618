"""Index domain models.

IndexSettings    — base value, market-cap blend fraction and recompute guard
ConstituentQuote — (current price, base price, market cap) for one symbol
IndexValuation   — a computed index value with the weights actually used
IndexSnapshot    — one timestamped index value plus its day-over-day change
RecordOutcome    — a recorded snapshot and whether the store accepted it
BackfillSettings — row-count threshold and lookback of the backfill
"""

from __future__ import annotations

from datetime import datetime, timedelta

from pydantic import BaseModel, ConfigDict, Field, model_validator


class IndexSettings(BaseModel):
    """Index-wide parameters.

    mcap_fraction is the share of each weight taken from market-cap
    weighting; the remainder comes from equal weighting.
    """

    model_config = ConfigDict(frozen=True)

    base_value: float = Field(default=1000.0, gt=0.0)
    mcap_fraction: float = Field(default=0.5, ge=0.0, le=1.0)
    min_recompute_interval: timedelta = timedelta(seconds=60)


class ConstituentQuote(BaseModel):
    """Prices for one basket symbol at one point in time.

    A symbol is eligible for valuation only when both prices are positive.
    market_cap None means unknown.
    """

    model_config = ConfigDict(frozen=True)

    current_price: float
    base_price: float
    market_cap: float | None = None

    @property
    def is_eligible(self) -> bool:
        return self.current_price > 0.0 and self.base_price > 0.0

    @property
    def relative_price(self) -> float:
        return self.current_price / self.base_price


class IndexValuation(BaseModel):
    """Index value for one point in time and the blended weights behind it."""

    model_config = ConfigDict(frozen=True)

    value: float
    weights: dict[str, float]

    @property
    def eligible_symbols(self) -> list[str]:
        return sorted(self.weights)


class IndexSnapshot(BaseModel):
    """One point of the index time series.

    daily_change and daily_change_pct are either both set or both None.
    They are None on the first point of the series and whenever the
    previous value was not strictly positive.
    """

    model_config = ConfigDict(frozen=True)

    value: float
    daily_change: float | None = None
    daily_change_pct: float | None = None
    timestamp: datetime

    @model_validator(mode="after")
    def _changes_set_together(self) -> IndexSnapshot:
        if (self.daily_change is None) != (self.daily_change_pct is None):
            raise ValueError(
                "daily_change and daily_change_pct must both be set or both be None"
            )
        return self


class RecordOutcome(BaseModel):
    """Result of recording a snapshot.

    persisted is False when the store rejected the append (timestamp not after
    the latest stored snapshot) or was unavailable.  The snapshot is returned
    either way so an immediate caller can still use the computed value.
    """

    model_config = ConfigDict(frozen=True)

    snapshot: IndexSnapshot
    persisted: bool


class BackfillSettings(BaseModel):
    """Parameters of the one-time historical backfill.

    row_threshold is a heuristic guard: the backfill is skipped when the
    store already holds more price rows than this.
    """

    model_config = ConfigDict(frozen=True)

    row_threshold: int = Field(default=100, ge=0)
    lookback_days: int = Field(default=365, gt=0)
