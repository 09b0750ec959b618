"""Market-data provider implementations."""

from .finnhub import FinnhubProvider
from .rate_limiter import FinnhubRateLimiter

__all__ = ["FinnhubProvider", "FinnhubRateLimiter"]
