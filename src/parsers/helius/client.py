"""Helius API client: recent SPL token transfers as a Solana activity proxy.

Solana has no cheap holder-percentile endpoint, so the chain fetcher for
`sol` reports 24h transfer activity and leaves the percentile fields at zero.
"""

import time

from src.analysis.types import HolderDistribution
from src.parsers.base import ProviderClient
from src.parsers.helius.models import HeliusTokenTransfer, HeliusTransferList
from src.parsers.throttle import ProviderThrottle

BASE_URL = "https://api.helius.xyz"
TRANSFER_LIMIT = 1000
ACTIVITY_WINDOW_SEC = 86_400


class HeliusClient(ProviderClient):
    """Async HTTP client for the Helius v0 REST API."""

    provider = "helius"

    def __init__(
        self,
        api_key: str = "",
        *,
        timeout: float = 10.0,
        throttle: ProviderThrottle | None = None,
        max_rps: float = 10.0,
        max_retries: int = 0,
    ) -> None:
        super().__init__(
            BASE_URL, timeout=timeout, throttle=throttle, max_rps=max_rps, max_retries=max_retries,
        )
        self._api_key = api_key

    async def get_token_transfers(
        self, mint: str, *, limit: int = TRANSFER_LIMIT,
    ) -> list[HeliusTokenTransfer]:
        params = {"token": mint, "limit": str(limit)}
        if self._api_key:
            params["api-key"] = self._api_key
        data = await self._get_json("/v0/token-transfers", params=params)
        return self._parse(HeliusTransferList, data).root

    async def get_activity(self, mint: str) -> HolderDistribution:
        transfers = await self.get_token_transfers(mint)
        return summarize_activity(transfers)


def summarize_activity(
    transfers: list[HeliusTokenTransfer], now: float | None = None,
) -> HolderDistribution:
    """Count 24h senders, transfers and receivers; percentile fields stay zero."""
    cutoff = (time.time() if now is None else now) - ACTIVITY_WINDOW_SEC
    recent = [t for t in transfers if t.timestamp > cutoff]
    return HolderDistribution(
        active_wallets_24h=len({t.from_user_account for t in recent if t.from_user_account}),
        tx_count_24h=len(recent),
        unique_receivers_24h=len({t.to_user_account for t in recent if t.to_user_account}),
    )
