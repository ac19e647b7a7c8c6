"""Analysis orchestrator: the single public entry point.

admission -> identity resolution -> cache -> aggregation -> scoring -> cache.
analyze() never raises: every failure becomes an AnalysisErrorResult.
"""

from __future__ import annotations

import time
from datetime import UTC, datetime

from loguru import logger

from config.settings import Settings
from src.analysis.aggregator import Aggregator
from src.analysis.cache import ResultCache, cache_key
from src.analysis.exceptions import AnalysisError
from src.analysis.rate_limit import SlidingWindowRateLimiter
from src.analysis.resolver import IdentityResolver
from src.analysis.scoring import compute_scores
from src.analysis.types import (
    AggregatedRecord,
    AnalysisErrorResult,
    AnalysisRequest,
    AnalysisResult,
    AssetIdentity,
    BasicInfo,
)
from src.parsers.coingecko.client import CoinGeckoClient
from src.parsers.dexscreener.client import DexScreenerClient
from src.parsers.etherscan.client import EtherscanClient
from src.parsers.helius.client import HeliusClient


def _utc_now_iso() -> str:
    return datetime.now(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _elapsed_ms(start: float) -> int:
    return int((time.perf_counter() - start) * 1000)


def build_basic(identity: AssetIdentity, record: AggregatedRecord) -> BasicInfo:
    m = record.market
    return BasicInfo(
        coin_id=identity.coin_id,
        contract_address=identity.contract_address,
        chain=identity.chain,
        price=m.price,
        price_change_24h=m.price_change_24h_pct,
        market_cap=m.market_cap,
        volume_24h=m.volume_24h,
        circulating_supply=m.circulating_supply,
        total_supply=m.total_supply,
    )


class RiskAnalyzer:
    """Owns the shared cache and rate limiter plus the provider clients."""

    def __init__(
        self,
        resolver: IdentityResolver,
        aggregator: Aggregator,
        cache: ResultCache,
        rate_limiter: SlidingWindowRateLimiter,
        clients: list | None = None,
    ) -> None:
        self._resolver = resolver
        self._aggregator = aggregator
        self._cache = cache
        self._rate_limiter = rate_limiter
        self._clients = clients or []

    @classmethod
    def from_settings(cls, cfg: Settings) -> RiskAnalyzer:
        common = {"timeout": cfg.api_timeout_sec, "max_retries": cfg.upstream_max_retries}
        coingecko = CoinGeckoClient(
            cfg.coingecko_api_key,
            pro=cfg.coingecko_pro,
            max_rps=cfg.coingecko_max_rps,
            market_chart_enabled=cfg.market_chart_enabled,
            **common,
        )
        etherscan = EtherscanClient(
            cfg.etherscan_api_key,
            max_rps=cfg.etherscan_max_rps,
            page_size=cfg.etherscan_holder_page_size,
            **common,
        )
        helius = HeliusClient(cfg.helius_api_key, max_rps=cfg.helius_max_rps, **common)
        dexscreener = DexScreenerClient(max_rps=cfg.dexscreener_max_rps, **common)

        for name, key in (
            ("CoinGecko", cfg.coingecko_api_key),
            ("Etherscan", cfg.etherscan_api_key),
            ("Helius", cfg.helius_api_key),
        ):
            if not key:
                logger.warning(f"[ANALYZE] {name} API key not set, using unauthenticated tier")

        return cls(
            resolver=IdentityResolver(coingecko),
            aggregator=Aggregator(coingecko, etherscan, helius, dexscreener),
            cache=ResultCache(ttl_sec=cfg.cache_ttl_sec),
            rate_limiter=SlidingWindowRateLimiter(
                cfg.rate_limit_max_requests,
                cfg.rate_limit_window_sec,
                max_clients=cfg.rate_limit_max_clients,
            ),
            clients=[coingecko, etherscan, helius, dexscreener],
        )

    async def close(self) -> None:
        for client in self._clients:
            await client.close()

    async def analyze(self, request: AnalysisRequest) -> AnalysisResult | AnalysisErrorResult:
        start = time.perf_counter()
        try:
            return await self._analyze(request, start)
        except AnalysisError as e:
            logger.info(f"[ANALYZE] {e.error_type}: {e}")
            return AnalysisErrorResult(
                error_type=e.error_type,
                message=str(e),
                processing_time_ms=_elapsed_ms(start),
                timestamp=_utc_now_iso(),
            )
        except Exception as e:
            logger.exception(f"[ANALYZE] unexpected failure: {e}")
            return AnalysisErrorResult(
                error_type="internal",
                message="Internal error while analyzing asset",
                processing_time_ms=_elapsed_ms(start),
                timestamp=_utc_now_iso(),
            )

    async def _analyze(self, request: AnalysisRequest, start: float) -> AnalysisResult:
        await self._rate_limiter.admit(request.client_id or "default")

        identity, coin = await self._resolver.resolve_with_coin(
            name=request.coin_name,
            coin_id=request.coin_id,
            contract_address=request.contract_address,
            chain=request.chain,
        )

        key = cache_key(identity)
        cached = await self._cache.get(key)
        if cached is not None:
            logger.debug(f"[ANALYZE] cache hit for {identity.coin_id}")
            return cached.model_copy(
                update={"from_cache": True, "processing_time_ms": _elapsed_ms(start)},
            )

        record = await self._aggregator.aggregate(identity, coin=coin)
        scores = compute_scores(record)
        result = AnalysisResult(
            basic=build_basic(identity, record),
            scores=scores,
            processing_time_ms=_elapsed_ms(start),
            timestamp=_utc_now_iso(),
        )
        await self._cache.purge_expired()
        await self._cache.put(key, result)
        logger.info(
            f"[ANALYZE] {identity.coin_id} ({identity.chain}) scored in "
            f"{result.processing_time_ms}ms: {scores.model_dump()}"
        )
        return result
