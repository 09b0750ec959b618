"""Domain services package."""

from .index import IndexService
from .ingestion import QuoteIngestionService
from .reconstruction import HistoricalReconstructor
from .snapshots import SnapshotRecorder, compute_daily_change
from .valuation import has_eligible_quotes, valuate, value
from .weights import MCAP_UNKNOWN_DEFAULT, blend

__all__ = [
    "IndexService",
    "QuoteIngestionService",
    "HistoricalReconstructor",
    "SnapshotRecorder",
    "compute_daily_change",
    "has_eligible_quotes",
    "valuate",
    "value",
    "MCAP_UNKNOWN_DEFAULT",
    "blend",
]
