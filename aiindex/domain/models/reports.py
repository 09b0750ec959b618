"""Progress reports for ingestion and backfill sweeps.

Per-symbol failures are collected here instead of being raised, so a single
bad symbol never aborts a sweep.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class RefreshReport(BaseModel):
    """Outcome of one quote or profile refresh cycle."""

    attempted: list[str] = Field(default_factory=list)
    succeeded: list[str] = Field(default_factory=list)
    skipped: dict[str, str] = Field(default_factory=dict)
    failures: dict[str, str] = Field(default_factory=dict)

    @property
    def success_count(self) -> int:
        return len(self.succeeded)

    @property
    def failure_count(self) -> int:
        return len(self.failures)

    def add_attempt(self, symbol: str) -> None:
        self.attempted.append(symbol)

    def add_success(self, symbol: str) -> None:
        self.succeeded.append(symbol)

    def add_skip(self, symbol: str, reason: str) -> None:
        self.skipped[symbol] = reason

    def add_failure(self, symbol: str, error: str) -> None:
        self.failures[symbol] = error


class BackfillReport(BaseModel):
    """Outcome of the one-time historical backfill.

    skipped is True when the store was judged already populated; in that case
    nothing was fetched or written.
    """

    skipped: bool = False
    skip_reason: str | None = None
    candles: dict[str, int] = Field(default_factory=dict)
    failures: dict[str, str] = Field(default_factory=dict)
    days_processed: int = 0
    snapshots_written: int = 0
    failed_days: list[str] = Field(default_factory=list)

    @property
    def symbols_backfilled(self) -> int:
        return len(self.candles)

    def add_candles(self, symbol: str, count: int) -> None:
        self.candles[symbol] = count

    def add_failure(self, symbol: str, error: str) -> None:
        self.failures[symbol] = error
