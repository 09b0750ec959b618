"""Domain model package.

All domain objects are pure Python / Pydantic models with no ORM or
infrastructure dependencies.  Import from this package to avoid coupling
application code to individual module paths.
"""

from .basket import Basket, Sector, SectorRef
from .index import (
    BackfillSettings,
    ConstituentQuote,
    IndexSettings,
    IndexSnapshot,
    IndexValuation,
    RecordOutcome,
)
from .market_data import (
    BasePrice,
    CompanyProfile,
    DailyClose,
    HistoricalPrice,
    LatestPrice,
    PriceObservation,
    Quote,
)
from .reports import BackfillReport, RefreshReport
from .views import ConfigInfo, SectorSummary, StockDetail

__all__ = [
    # basket
    "Basket",
    "Sector",
    "SectorRef",
    # index
    "BackfillSettings",
    "ConstituentQuote",
    "IndexSettings",
    "IndexSnapshot",
    "IndexValuation",
    "RecordOutcome",
    # market data
    "BasePrice",
    "CompanyProfile",
    "DailyClose",
    "HistoricalPrice",
    "LatestPrice",
    "PriceObservation",
    "Quote",
    # reports
    "BackfillReport",
    "RefreshReport",
    # views
    "ConfigInfo",
    "SectorSummary",
    "StockDetail",
]
