import asyncio
import time


class ProviderThrottle:
    """Minimum spacing between outbound calls to one provider.

    One instance per API key. Concurrent fetches for the same provider queue
    on the lock so the process never exceeds the provider's free-tier RPS.
    """

    def __init__(self, max_rps: float) -> None:
        self._min_interval = 1.0 / max_rps if max_rps > 0 else 0.0
        self._next_slot = 0.0
        self._lock = asyncio.Lock()

    async def acquire(self) -> None:
        if self._min_interval == 0.0:
            return
        async with self._lock:
            now = time.monotonic()
            wait = self._next_slot - now
            if wait > 0:
                await asyncio.sleep(wait)
                now = time.monotonic()
            self._next_slot = now + self._min_interval
