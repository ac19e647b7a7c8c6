import asyncio
import hashlib
import time
from collections.abc import Callable
from dataclasses import dataclass

from src.analysis.types import AnalysisResult, AssetIdentity


def cache_key(identity: AssetIdentity) -> str:
    """SHA-256 of the canonical triple, case-normalized."""
    raw = f"{identity.coin_id or ''}:{identity.contract_address or ''}:{identity.chain}"
    return hashlib.sha256(raw.lower().encode()).hexdigest()


@dataclass(frozen=True)
class CacheEntry:
    value: AnalysisResult
    created_at: float


class ResultCache:
    """In-process TTL memo of analysis results.

    Expired entries are never served: a lookup evicts them on the spot, and
    purge_expired() sweeps the rest.
    """

    def __init__(self, ttl_sec: float = 300.0, clock: Callable[[], float] = time.monotonic) -> None:
        self._ttl = ttl_sec
        self._clock = clock
        self._entries: dict[str, CacheEntry] = {}
        self._lock = asyncio.Lock()

    def __len__(self) -> int:
        return len(self._entries)

    def _expired(self, entry: CacheEntry, now: float) -> bool:
        return now - entry.created_at >= self._ttl

    async def get(self, key: str) -> AnalysisResult | None:
        async with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            if self._expired(entry, self._clock()):
                del self._entries[key]
                return None
            return entry.value

    async def put(self, key: str, value: AnalysisResult) -> None:
        async with self._lock:
            self._entries[key] = CacheEntry(value=value, created_at=self._clock())

    async def purge_expired(self) -> int:
        async with self._lock:
            now = self._clock()
            stale = [k for k, e in self._entries.items() if self._expired(e, now)]
            for key in stale:
                del self._entries[key]
            return len(stale)
