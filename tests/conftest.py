"""Shared test fixtures."""

import pytest

from src.analysis.types import HolderDistribution, LiquiditySnapshot, MarketSnapshot
from tests.helpers import FakeClock


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def uniswap_market() -> MarketSnapshot:
    return MarketSnapshot(
        price=10.0,
        price_change_24h_pct=5.0,
        market_cap=5e9,
        volume_24h=2e8,
        avg_volume_7d=1.5e8,
        avg_price_7d=9.0,
        averages_source="market_chart",
    )


@pytest.fixture
def uniswap_holders() -> HolderDistribution:
    return HolderDistribution(
        top_1_pct=20.0,
        top_10_pct=40.0,
        top_100_pct=60.0,
        top_10_holders=15.0,
        retail_pct=30.0,
        total_holders=50_000,
    )


@pytest.fixture
def uniswap_liquidity() -> LiquiditySnapshot:
    return LiquiditySnapshot(liquidity_usd=1e7, top_5_pool_concentration=0.9, pool_count=12)
