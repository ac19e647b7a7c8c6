import asyncio
import time
from collections import OrderedDict, deque
from collections.abc import Callable

from loguru import logger

from src.analysis.exceptions import RateLimitExceeded


class SlidingWindowRateLimiter:
    """Per-client admission control over a trailing time window.

    A client is denied while it already has `max_requests` admissions inside
    the window. Denied calls are not recorded, so the client is admitted again
    as soon as its oldest admission slides out. Tracked clients are capped;
    the least recently seen client is dropped first.
    """

    def __init__(
        self,
        max_requests: int = 100,
        window_sec: float = 60.0,
        *,
        max_clients: int = 10_000,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._max_requests = max_requests
        self._window = window_sec
        self._max_clients = max_clients
        self._clock = clock
        self._windows: OrderedDict[str, deque[float]] = OrderedDict()
        self._lock = asyncio.Lock()

    @property
    def tracked_clients(self) -> int:
        return len(self._windows)

    async def admit(self, client_id: str) -> None:
        """Record an admission or raise RateLimitExceeded."""
        async with self._lock:
            now = self._clock()
            window = self._windows.get(client_id)
            if window is None:
                window = deque()
                self._windows[client_id] = window
                self._evict_idle()
            else:
                self._windows.move_to_end(client_id)

            cutoff = now - self._window
            while window and window[0] <= cutoff:
                window.popleft()

            if len(window) >= self._max_requests:
                logger.info(f"[RATE_LIMIT] client {client_id[:32]} denied ({len(window)} in window)")
                raise RateLimitExceeded(client_id, self._max_requests, self._window)
            window.append(now)

    def _evict_idle(self) -> None:
        while len(self._windows) > self._max_clients:
            evicted, _ = self._windows.popitem(last=False)
            logger.debug(f"[RATE_LIMIT] dropped idle client {evicted[:32]}")
