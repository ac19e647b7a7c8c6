"""Tests for per-client sliding window admission."""

import asyncio

import pytest

from src.analysis.exceptions import RateLimitExceeded
from src.analysis.rate_limit import SlidingWindowRateLimiter


@pytest.mark.asyncio
async def test_101st_call_denied(clock):
    limiter = SlidingWindowRateLimiter(100, 60.0, clock=clock)
    for _ in range(100):
        await limiter.admit("client-a")
        clock.advance(0.1)

    with pytest.raises(RateLimitExceeded) as exc:
        await limiter.admit("client-a")
    assert exc.value.limit == 100


@pytest.mark.asyncio
async def test_admitted_again_after_window_slides(clock):
    limiter = SlidingWindowRateLimiter(100, 60.0, clock=clock)
    start = clock.now
    for _ in range(100):
        await limiter.admit("client-a")
        clock.advance(0.1)

    with pytest.raises(RateLimitExceeded):
        await limiter.admit("client-a")

    # first admission was at `start`; slide just past it
    clock.now = start + 60.0 + 0.01
    await limiter.admit("client-a")

    with pytest.raises(RateLimitExceeded):
        await limiter.admit("client-a")


@pytest.mark.asyncio
async def test_clients_are_independent(clock):
    limiter = SlidingWindowRateLimiter(2, 60.0, clock=clock)
    await limiter.admit("a")
    await limiter.admit("a")
    with pytest.raises(RateLimitExceeded):
        await limiter.admit("a")
    await limiter.admit("b")


@pytest.mark.asyncio
async def test_idle_clients_capped(clock):
    limiter = SlidingWindowRateLimiter(5, 60.0, max_clients=3, clock=clock)
    for client in ("a", "b", "c"):
        await limiter.admit(client)
    await limiter.admit("a")  # refresh a, b is now least recently seen
    await limiter.admit("d")

    assert limiter.tracked_clients == 3
    assert "b" not in limiter._windows
    assert "a" in limiter._windows


@pytest.mark.asyncio
async def test_concurrent_admissions_count_exactly(clock):
    limiter = SlidingWindowRateLimiter(50, 60.0, clock=clock)

    async def attempt() -> bool:
        try:
            await limiter.admit("burst")
        except RateLimitExceeded:
            return False
        return True

    outcomes = await asyncio.gather(*(attempt() for _ in range(80)))
    assert sum(outcomes) == 50
