"""Pydantic models for CoinGecko API v3 responses."""

from pydantic import BaseModel


class CoinGeckoSearchCoin(BaseModel):
    """One entry of /search `coins`."""

    id: str
    name: str = ""
    symbol: str = ""
    market_cap_rank: int | None = None

    model_config = {"extra": "ignore"}


class CoinGeckoSearchResult(BaseModel):
    coins: list[CoinGeckoSearchCoin] = []

    model_config = {"extra": "ignore"}


class CoinGeckoMarketData(BaseModel):
    """`market_data` block of /coins/{id}. Currency maps keyed by vs-currency."""

    current_price: dict[str, float | None] = {}
    market_cap: dict[str, float | None] = {}
    total_volume: dict[str, float | None] = {}
    price_change_percentage_24h: float | None = None
    circulating_supply: float | None = None
    total_supply: float | None = None

    model_config = {"extra": "ignore"}


class CoinGeckoCoin(BaseModel):
    """Response from /coins/{id} and /coins/{platform}/contract/{address}."""

    id: str
    symbol: str = ""
    name: str = ""
    # platform id -> contract address; native coins carry {"": ""} or nothing
    platforms: dict[str, str | None] = {}
    market_data: CoinGeckoMarketData | None = None

    model_config = {"extra": "ignore"}

    def platform_address(self, platform: str) -> str | None:
        address = self.platforms.get(platform)
        return address.strip() if address and address.strip() else None


class CoinGeckoMarketChart(BaseModel):
    """Response from /coins/{id}/market_chart as [timestamp_ms, value] pairs."""

    prices: list[list[float]] = []
    market_caps: list[list[float]] = []
    total_volumes: list[list[float]] = []

    model_config = {"extra": "ignore"}
