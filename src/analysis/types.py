"""Types flowing through the analysis pipeline.

Snapshots are frozen dataclasses produced once per request by the fetchers.
AnalysisResult / AnalysisErrorResult are pydantic models because they are the
JSON artifact handed back to callers.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Literal

from pydantic import BaseModel
from pydantic.alias_generators import to_camel


class Chain(StrEnum):
    ETH = "eth"
    SOL = "sol"
    NONE = "none"  # native coin, no token contract


@dataclass(frozen=True)
class AssetIdentity:
    """Canonical (coin_id, contract_address, chain) triple."""

    coin_id: str | None = None
    contract_address: str | None = None
    chain: Chain = Chain.NONE

    @property
    def has_contract(self) -> bool:
        return bool(self.contract_address) and self.chain is not Chain.NONE


@dataclass(frozen=True)
class MarketSnapshot:
    price: float = 0.0
    price_change_24h_pct: float = 0.0
    market_cap: float = 0.0
    volume_24h: float = 0.0
    circulating_supply: float | None = None
    total_supply: float | None = None
    avg_volume_7d: float = 0.0
    avg_price_7d: float = 0.0
    averages_source: Literal["market_chart", "spot"] = "spot"


@dataclass(frozen=True)
class HolderDistribution:
    """Supply concentration stats (percent values, 0-100).

    Solana sources only expose transfer activity, so the percentile fields
    stay at zero and the activity counters are filled instead.
    """

    top_1_pct: float = 0.0
    top_10_pct: float = 0.0
    top_100_pct: float = 0.0
    top_10_holders: float = 0.0
    retail_pct: float = 0.0
    total_holders: int = 0
    active_wallets_24h: int = 0
    tx_count_24h: int = 0
    unique_receivers_24h: int = 0


@dataclass(frozen=True)
class LiquiditySnapshot:
    liquidity_usd: float = 0.0
    top_5_pool_concentration: float = 0.0  # 0.0-1.0
    pool_count: int = 0


@dataclass(frozen=True)
class AggregatedRecord:
    market: MarketSnapshot
    holders: HolderDistribution = field(default_factory=HolderDistribution)
    liquidity: LiquiditySnapshot = field(default_factory=LiquiditySnapshot)


class ScoreSet(BaseModel):
    model_config = {"frozen": True}

    greed: int
    decentralization: int
    retail: int
    volatility: int
    liquidity: int


class BasicInfo(BaseModel):
    model_config = {"frozen": True}

    coin_id: str | None
    contract_address: str | None
    chain: Chain
    price: float
    price_change_24h: float
    market_cap: float
    volume_24h: float
    circulating_supply: float | None = None
    total_supply: float | None = None


class AnalysisRequest(BaseModel):
    """Inbound request as handed over by the front controller.

    Accepts both snake_case and the camelCase keys of the JSON body.
    """

    model_config = {
        "extra": "ignore",
        "str_strip_whitespace": True,
        "alias_generator": to_camel,
        "populate_by_name": True,
    }

    coin_name: str | None = None
    coin_id: str | None = None
    contract_address: str | None = None
    chain: str | None = None
    client_id: str = "default"


class AnalysisResult(BaseModel):
    model_config = {"frozen": True}

    error: Literal[False] = False
    basic: BasicInfo
    scores: ScoreSet
    processing_time_ms: int
    timestamp: str
    from_cache: bool = False


class AnalysisErrorResult(BaseModel):
    model_config = {"frozen": True}

    error: Literal[True] = True
    error_type: str
    message: str
    processing_time_ms: int
    timestamp: str
