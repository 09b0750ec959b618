import asyncio
import time
from collections.abc import Awaitable, Callable


class FinnhubRateLimiter:
    """
    Finnhub free tier limits:
    - 60 API calls/minute, 30 calls/second burst
    - Every outbound call waits until min_interval has passed since the last
    """

    def __init__(
        self,
        min_interval: float = 0.05,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.min_interval = min_interval
        self.last_request: float | None = None
        self._clock = clock
        self._sleep = sleep
        self._lock = asyncio.Lock()

    async def wait_if_needed(self) -> None:
        async with self._lock:
            if self.last_request is not None:
                elapsed = self._clock() - self.last_request
                if elapsed < self.min_interval:
                    await self._sleep(self.min_interval - elapsed)
            self.last_request = self._clock()
