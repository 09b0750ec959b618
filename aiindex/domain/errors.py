"""Domain error taxonomy.

EmptyBasketError and NoEligibleQuotesError describe "no data" conditions;
callers surface them as an absent value rather than a failure.  valuate()
returns None for the latter unless called with strict=True.
StoreUnavailableError wraps any read/write failure against the price store.
MarketDataError covers a single symbol's provider failure and is always
isolated to that symbol.
"""


class AIIndexError(Exception):
    """Base class for all domain errors."""


class EmptyBasketError(AIIndexError):
    """No symbols were supplied to an index computation."""


class NoEligibleQuotesError(AIIndexError):
    """Basket is configured but no symbol has a positive current and base price."""


class StoreUnavailableError(AIIndexError):
    """A read or write against the price store failed."""


class MarketDataError(AIIndexError):
    """The market-data provider failed to return usable data for one symbol."""

    def __init__(self, symbol: str, reason: str) -> None:
        super().__init__(f"{symbol}: {reason}")
        self.symbol = symbol
        self.reason = reason
