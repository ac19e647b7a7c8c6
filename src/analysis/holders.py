"""Holder distribution statistics from a holder balance list."""

import math

from src.analysis.types import HolderDistribution

RETAIL_MAX_SHARE = 0.001  # holders below 0.1% of supply count as retail


def _share_pct(balances: list[float], count: int, total: float) -> float:
    return sum(balances[:count]) / total * 100


def compute_holder_distribution(balances: list[float]) -> HolderDistribution:
    """Compute concentration percentages over the given holders.

    Supply is the sum of the listed balances, so shares are relative to the
    page the provider returned. Top-1% / top-10% groups are ceil(n * f)
    holders, always at least one.
    """
    ordered = sorted((b for b in balances if b > 0), reverse=True)
    n = len(ordered)
    total = sum(ordered)
    if n == 0 or total <= 0:
        return HolderDistribution(total_holders=n)

    retail = [b for b in ordered if b / total < RETAIL_MAX_SHARE]

    return HolderDistribution(
        top_1_pct=_share_pct(ordered, math.ceil(n * 0.01), total),
        top_10_pct=_share_pct(ordered, math.ceil(n * 0.10), total),
        top_100_pct=_share_pct(ordered, 100, total),
        top_10_holders=_share_pct(ordered, 10, total),
        retail_pct=_share_pct(retail, len(retail), total),
        total_holders=n,
    )
