"""CoinGecko API v3 client: search, asset detail, contract lookup, market chart.

Used twice per analysis: by the identity resolver (slug/contract mapping) and
by the market fetcher (price, cap, volume, supply, 7d averages).
"""

import asyncio

from loguru import logger

from src.analysis.exceptions import UpstreamError
from src.analysis.types import Chain, MarketSnapshot
from src.parsers.base import ProviderClient
from src.parsers.coingecko.models import (
    CoinGeckoCoin,
    CoinGeckoMarketChart,
    CoinGeckoSearchCoin,
    CoinGeckoSearchResult,
)
from src.parsers.throttle import ProviderThrottle

PUBLIC_URL = "https://api.coingecko.com/api/v3"
PRO_URL = "https://pro-api.coingecko.com/api/v3"

PLATFORM_IDS = {
    Chain.ETH: "ethereum",
    Chain.SOL: "solana",
}

COIN_DETAIL_PARAMS = {
    "localization": "false",
    "tickers": "false",
    "market_data": "true",
    "community_data": "false",
    "developer_data": "false",
    "sparkline": "false",
}


class CoinGeckoClient(ProviderClient):
    """Async client for CoinGecko. Empty api_key = unauthenticated public tier."""

    provider = "coingecko"

    def __init__(
        self,
        api_key: str = "",
        *,
        pro: bool = False,
        timeout: float = 10.0,
        throttle: ProviderThrottle | None = None,
        max_rps: float = 0.5,
        max_retries: int = 0,
        market_chart_enabled: bool = True,
    ) -> None:
        headers: dict[str, str] = {}
        if api_key:
            headers["x-cg-pro-api-key" if pro else "x-cg-demo-api-key"] = api_key
        super().__init__(
            PRO_URL if pro else PUBLIC_URL,
            timeout=timeout,
            headers=headers,
            throttle=throttle,
            max_rps=max_rps,
            max_retries=max_retries,
        )
        self._market_chart_enabled = market_chart_enabled

    async def search(self, query: str) -> list[CoinGeckoSearchCoin]:
        """Free-text search; coins come back ordered by relevance."""
        data = await self._get_json("/search", params={"query": query})
        return self._parse(CoinGeckoSearchResult, data).coins

    async def get_coin(self, coin_id: str) -> CoinGeckoCoin:
        data = await self._get_json(f"/coins/{coin_id}", params=COIN_DETAIL_PARAMS)
        return self._parse(CoinGeckoCoin, data)

    async def get_coin_by_contract(self, chain: Chain, address: str) -> CoinGeckoCoin:
        platform = PLATFORM_IDS.get(chain)
        if platform is None:
            raise ValueError(f"no contract platform for chain {chain!r}")
        data = await self._get_json(f"/coins/{platform}/contract/{address}")
        return self._parse(CoinGeckoCoin, data)

    async def get_market_chart(self, coin_id: str, days: int = 7) -> CoinGeckoMarketChart:
        data = await self._get_json(
            f"/coins/{coin_id}/market_chart",
            params={"vs_currency": "usd", "days": str(days), "interval": "daily"},
        )
        return self._parse(CoinGeckoMarketChart, data)

    async def get_market_snapshot(
        self, coin_id: str, coin: CoinGeckoCoin | None = None,
    ) -> MarketSnapshot:
        """Fetch the market snapshot, with 7d averages when the chart is enabled.

        A coin already fetched by the caller (with market_data) is reused
        instead of requesting /coins/{id} again.
        """
        if coin is not None and coin.market_data is None:
            coin = None

        if not self._market_chart_enabled:
            return build_market_snapshot(coin or await self.get_coin(coin_id))
        if coin is not None:
            return build_market_snapshot(coin, await self.get_market_chart(coin_id))

        coin_task = asyncio.create_task(self.get_coin(coin_id))
        chart_task = asyncio.create_task(self.get_market_chart(coin_id))
        tasks = [coin_task, chart_task]
        try:
            done, pending = await asyncio.wait(tasks, return_when=asyncio.FIRST_EXCEPTION)
        except asyncio.CancelledError:
            for task in tasks:
                task.cancel()
            raise

        failed = next((t for t in tasks if t in done and t.exception() is not None), None)
        if failed is not None:
            for task in pending:
                task.cancel()
            await asyncio.gather(*pending, return_exceptions=True)
            raise failed.exception()
        return build_market_snapshot(coin_task.result(), chart_task.result())


def _usd(values: dict[str, float | None], field: str) -> float:
    value = values.get("usd")
    if value is None:
        raise UpstreamError(CoinGeckoClient.provider, f"market_data.{field}.usd missing")
    return float(value)


def _mean(points: list[list[float]]) -> float | None:
    values = [p[1] for p in points if len(p) >= 2 and p[1] is not None]
    if not values:
        return None
    return sum(values) / len(values)


def build_market_snapshot(
    coin: CoinGeckoCoin, chart: CoinGeckoMarketChart | None = None,
) -> MarketSnapshot:
    """Map a /coins/{id} payload (and optional 7d chart) onto MarketSnapshot.

    Without a chart the averages degrade to spot values and the snapshot is
    tagged averages_source="spot", which zeroes the greed spike/surge terms.
    """
    md = coin.market_data
    if md is None:
        raise UpstreamError(CoinGeckoClient.provider, f"no market_data for {coin.id}")

    price = _usd(md.current_price, "current_price")
    volume_24h = _usd(md.total_volume, "total_volume")
    market_cap = float(md.market_cap.get("usd") or 0.0)

    avg_price = _mean(chart.prices) if chart is not None else None
    avg_volume = _mean(chart.total_volumes) if chart is not None else None
    if avg_price is None or avg_volume is None:
        if chart is not None:
            logger.debug(f"[COINGECKO] empty market_chart for {coin.id}, using spot values")
        avg_price, avg_volume, source = price, volume_24h, "spot"
    else:
        source = "market_chart"

    return MarketSnapshot(
        price=price,
        price_change_24h_pct=float(md.price_change_percentage_24h or 0.0),
        market_cap=market_cap,
        volume_24h=volume_24h,
        circulating_supply=md.circulating_supply,
        total_supply=md.total_supply,
        avg_volume_7d=avg_volume,
        avg_price_7d=avg_price,
        averages_source=source,
    )
