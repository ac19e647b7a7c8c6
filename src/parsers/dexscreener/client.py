from src.analysis.exceptions import UpstreamError
from src.analysis.types import Chain, LiquiditySnapshot
from src.parsers.base import ProviderClient
from src.parsers.dexscreener.models import DexScreenerPair, DexScreenerPairList
from src.parsers.throttle import ProviderThrottle

BASE_URL = "https://api.dexscreener.com"
TOP_POOLS = 5

CHAIN_IDS = {
    Chain.ETH: "ethereum",
    Chain.SOL: "solana",
}


class DexScreenerClient(ProviderClient):
    """Async REST client for DexScreener public API (no auth required)."""

    provider = "dexscreener"

    def __init__(
        self,
        *,
        timeout: float = 10.0,
        throttle: ProviderThrottle | None = None,
        max_rps: float = 4.0,
        max_retries: int = 0,
    ) -> None:
        super().__init__(
            BASE_URL, timeout=timeout, throttle=throttle, max_rps=max_rps, max_retries=max_retries,
        )

    async def get_token_pairs(self, chain: Chain, token_address: str) -> list[DexScreenerPair]:
        """Get all pools trading the token on the given chain."""
        chain_id = CHAIN_IDS.get(chain)
        if chain_id is None:
            raise ValueError(f"DexScreener has no chain id for {chain!r}")
        data = await self._get_json(f"/token-pairs/v1/{chain_id}/{token_address}")
        if isinstance(data, dict):
            # legacy shape: {"pairs": [...] | null}
            if "pairs" not in data:
                raise UpstreamError(self.provider, "response has no pairs list")
            data = data["pairs"] or []
        return self._parse(DexScreenerPairList, data).root

    async def get_liquidity(self, chain: Chain, token_address: str) -> LiquiditySnapshot:
        pairs = await self.get_token_pairs(chain, token_address)
        return summarize_liquidity(pairs)


def summarize_liquidity(pairs: list[DexScreenerPair]) -> LiquiditySnapshot:
    """Total USD liquidity and the share of it sitting in the top 5 pools."""
    pools = sorted((p.liquidity_usd for p in pairs), reverse=True)
    total = sum(pools)
    top = sum(pools[:TOP_POOLS])
    return LiquiditySnapshot(
        liquidity_usd=total,
        top_5_pool_concentration=top / total if total > 0 else 0.0,
        pool_count=len(pools),
    )
