"""Concurrent fan-out to the market, chain and liquidity fetchers."""

import asyncio
from collections.abc import Coroutine
from typing import Any

from loguru import logger

from src.analysis.types import (
    AggregatedRecord,
    AssetIdentity,
    Chain,
    HolderDistribution,
    LiquiditySnapshot,
)
from src.parsers.coingecko.client import CoinGeckoClient
from src.parsers.coingecko.models import CoinGeckoCoin
from src.parsers.dexscreener.client import DexScreenerClient
from src.parsers.etherscan.client import EtherscanClient
from src.parsers.helius.client import HeliusClient


class Aggregator:
    """Run the source fetchers in parallel and assemble one record.

    Fail-fast: the first fetcher error cancels the others and propagates,
    there are no partial records.
    """

    def __init__(
        self,
        coingecko: CoinGeckoClient,
        etherscan: EtherscanClient,
        helius: HeliusClient,
        dexscreener: DexScreenerClient,
    ) -> None:
        self._coingecko = coingecko
        self._etherscan = etherscan
        self._helius = helius
        self._dexscreener = dexscreener

    def _holder_fetch(self, identity: AssetIdentity) -> Coroutine[Any, Any, HolderDistribution]:
        if identity.chain is Chain.ETH:
            return self._etherscan.get_holder_distribution(identity.contract_address)
        return self._helius.get_activity(identity.contract_address)

    async def aggregate(
        self, identity: AssetIdentity, coin: CoinGeckoCoin | None = None,
    ) -> AggregatedRecord:
        """Fetch every source for identity; coin is a detail payload already on hand."""
        if identity.coin_id is None:
            raise ValueError("identity must be resolved before aggregation")

        coros: dict[str, Coroutine[Any, Any, Any]] = {
            "market": self._coingecko.get_market_snapshot(identity.coin_id, coin=coin),
        }
        if identity.has_contract:
            coros["holders"] = self._holder_fetch(identity)
            coros["liquidity"] = self._dexscreener.get_liquidity(
                identity.chain, identity.contract_address,
            )

        tasks = {label: asyncio.create_task(coro) for label, coro in coros.items()}
        try:
            done, pending = await asyncio.wait(
                tasks.values(), return_when=asyncio.FIRST_EXCEPTION,
            )
        except asyncio.CancelledError:
            for task in tasks.values():
                task.cancel()
            raise

        errored = [t for t in done if not t.cancelled() and t.exception() is not None]
        if errored:
            failed = errored[0]
            for task in pending:
                task.cancel()
            await asyncio.gather(*pending, return_exceptions=True)
            label = next(k for k, t in tasks.items() if t is failed)
            logger.warning(f"[AGGREGATE] {identity.coin_id}: {label} fetch failed: {failed.exception()}")
            raise failed.exception()

        results = {label: task.result() for label, task in tasks.items()}
        return AggregatedRecord(
            market=results["market"],
            holders=results.get("holders", HolderDistribution()),
            liquidity=results.get("liquidity", LiquiditySnapshot()),
        )
