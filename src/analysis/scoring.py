"""Risk/sentiment scores for an aggregated record.

Five pure functions, each returning an int in [0, 100]. A zero or missing
denominator zeroes the component that needs it, so no NaN/inf can leak out.
"""

import math

from src.analysis.types import (
    AggregatedRecord,
    HolderDistribution,
    LiquiditySnapshot,
    MarketSnapshot,
    ScoreSet,
)

SMALL_CAP_USD = 1e8
LARGE_CAP_USD = 1e9


def _clamp(value: float, low: float = 0.0, high: float = 100.0) -> float:
    if not math.isfinite(value):
        return low
    return max(low, min(high, value))


def _round(value: float) -> int:
    """Round half up (2.5 -> 3), not banker's rounding."""
    return int(math.floor(_clamp(value) + 0.5))


def _ratio(numerator: float | None, denominator: float | None) -> float | None:
    if numerator is None or not math.isfinite(numerator):
        return None
    if not denominator or not math.isfinite(denominator):
        return None
    return numerator / denominator


def greed_score(market: MarketSnapshot, holders: HolderDistribution) -> int:
    volume_ratio = _ratio(market.volume_24h, market.avg_volume_7d)
    price_ratio = _ratio(market.price, market.avg_price_7d)

    volume_spike = _clamp((volume_ratio - 1) * 40) if volume_ratio is not None else 0.0
    price_surge = _clamp((price_ratio - 1) * 100) if price_ratio is not None else 0.0
    whale_dominance = _clamp(holders.top_10_holders * 1.5)

    return _round(volume_spike * 0.25 + price_surge * 0.30 + whale_dominance * 0.25)


def decentralization_score(holders: HolderDistribution) -> int:
    weighted = holders.top_1_pct * 0.65 + holders.top_10_pct * 0.25 + holders.top_100_pct * 0.10
    return _round(100 - weighted)


def retail_score(holders: HolderDistribution) -> int:
    holder_factor = min(10.0, math.log10(max(holders.total_holders, 1))) * 2
    return _round(holders.retail_pct * 1.5 - holders.top_1_pct * 0.8 + holder_factor)


def volatility_score(market: MarketSnapshot) -> int:
    turnover = _ratio(market.volume_24h, market.market_cap)
    turnover_term = (1 - turnover) * 30 if turnover is not None else 0.0
    return _round(abs(market.price_change_24h_pct or 0.0) * 1.5 + turnover_term)


def tier_multiplier(market_cap: float) -> int:
    if market_cap < SMALL_CAP_USD:
        return 200
    if market_cap > LARGE_CAP_USD:
        return 150
    return 175


def liquidity_score(market: MarketSnapshot, liquidity: LiquiditySnapshot) -> int:
    depth = _ratio(liquidity.liquidity_usd, market.market_cap)
    if depth is None:
        return 0
    return _round(depth * tier_multiplier(market.market_cap))


def compute_scores(record: AggregatedRecord) -> ScoreSet:
    return ScoreSet(
        greed=greed_score(record.market, record.holders),
        decentralization=decentralization_score(record.holders),
        retail=retail_score(record.holders),
        volatility=volatility_score(record.market),
        liquidity=liquidity_score(record.market, record.liquidity),
    )
