"""Tests for the Etherscan, Helius and DexScreener clients."""

from decimal import Decimal

import pytest

from src.analysis.exceptions import UpstreamError
from src.analysis.types import Chain
from src.parsers.dexscreener.client import DexScreenerClient, summarize_liquidity
from src.parsers.dexscreener.models import DexScreenerLiquidity, DexScreenerPair
from src.parsers.etherscan.client import EtherscanClient
from src.parsers.helius.client import HeliusClient, summarize_activity
from src.parsers.helius.models import HeliusTokenTransfer
from tests.helpers import make_response, route_client

UNI = "0x1f9840a85d5af5bf1d1762f925bdaddc4201f984"
BONK = "DezXAZ8z7PnrnRJjz3wXBoRgixCa6xjnB7YaB1pPB263"


def _pair(usd: float | None) -> DexScreenerPair:
    return DexScreenerPair(liquidity=DexScreenerLiquidity(usd=Decimal(str(usd)) if usd is not None else None))


class TestEtherscan:
    @pytest.mark.asyncio
    async def test_holder_distribution(self) -> None:
        client = EtherscanClient("key", max_rps=0)
        route_client(client, {
            "/v2/api": {
                "status": "1",
                "message": "OK",
                "result": [
                    {"TokenHolderAddress": "0xaaa", "TokenHolderQuantity": "600"},
                    {"TokenHolderAddress": "0xbbb", "TokenHolderQuantity": "300"},
                    {"TokenHolderAddress": "0xccc", "TokenHolderQuantity": "100"},
                ],
            },
        })

        dist = await client.get_holder_distribution(UNI)

        assert dist.total_holders == 3
        assert dist.top_1_pct == pytest.approx(60.0)
        assert dist.top_10_holders == pytest.approx(100.0)

    @pytest.mark.asyncio
    async def test_request_params(self) -> None:
        client = EtherscanClient("key", max_rps=0, page_size=50)
        get = route_client(client, {"/v2/api": {"status": "1", "message": "OK", "result": []}})

        await client.get_token_holders(UNI)

        params = get.await_args.kwargs["params"]
        assert params["action"] == "tokenholderlist"
        assert params["contractaddress"] == UNI
        assert params["offset"] == "50"
        assert params["apikey"] == "key"

    @pytest.mark.asyncio
    async def test_api_error_status_raises(self) -> None:
        client = EtherscanClient(max_rps=0)
        route_client(client, {
            "/v2/api": {"status": "0", "message": "NOTOK", "result": "Invalid API Key"},
        })
        with pytest.raises(UpstreamError) as exc:
            await client.get_holder_distribution(UNI)
        assert exc.value.provider == "etherscan"
        assert "Invalid API Key" in str(exc.value)


class TestHelius:
    def test_summarize_activity_24h_window(self) -> None:
        now = 1_700_000_000.0
        transfers = [
            HeliusTokenTransfer(timestamp=int(now) - 60, fromUserAccount="a", toUserAccount="x"),
            HeliusTokenTransfer(timestamp=int(now) - 120, fromUserAccount="a", toUserAccount="y"),
            HeliusTokenTransfer(timestamp=int(now) - 3600, fromUserAccount="b", toUserAccount="x"),
            HeliusTokenTransfer(timestamp=int(now) - 90_000, fromUserAccount="c", toUserAccount="z"),
        ]

        dist = summarize_activity(transfers, now=now)

        assert dist.tx_count_24h == 3
        assert dist.active_wallets_24h == 2
        assert dist.unique_receivers_24h == 2
        assert dist.top_1_pct == 0.0
        assert dist.total_holders == 0

    @pytest.mark.asyncio
    async def test_get_activity_parses_camel_case(self) -> None:
        client = HeliusClient("key", max_rps=0)
        route_client(client, {
            "/v0/token-transfers": [
                {"timestamp": 4_000_000_000, "fromUserAccount": "s1", "toUserAccount": "r1", "tokenAmount": 5},
            ],
        })
        dist = await client.get_activity(BONK)
        assert dist.tx_count_24h == 1
        assert dist.active_wallets_24h == 1

    @pytest.mark.asyncio
    async def test_non_list_payload_is_upstream_error(self) -> None:
        client = HeliusClient(max_rps=0)
        route_client(client, {"/v0/token-transfers": {"error": "invalid api key"}})
        with pytest.raises(UpstreamError):
            await client.get_activity(BONK)


class TestDexScreener:
    def test_summarize_liquidity_top5(self) -> None:
        pairs = [_pair(v) for v in (100, 50, 10, 10, 10, 10, 10)] + [_pair(None)]
        snap = summarize_liquidity(pairs)
        assert snap.liquidity_usd == 200
        assert snap.top_5_pool_concentration == pytest.approx(0.9)
        assert snap.pool_count == 8

    def test_summarize_no_pools(self) -> None:
        snap = summarize_liquidity([])
        assert snap.liquidity_usd == 0
        assert snap.top_5_pool_concentration == 0

    @pytest.mark.asyncio
    async def test_get_liquidity_uses_chain_id(self) -> None:
        client = DexScreenerClient(max_rps=0)
        route_client(client, {
            f"/token-pairs/v1/solana/{BONK}": [
                {"chainId": "solana", "pairAddress": "p1", "liquidity": {"usd": 1500000}},
                {"chainId": "solana", "pairAddress": "p2", "liquidity": {"usd": 500000}},
            ],
        })
        snap = await client.get_liquidity(Chain.SOL, BONK)
        assert snap.liquidity_usd == 2_000_000
        assert snap.top_5_pool_concentration == 1.0

    @pytest.mark.asyncio
    async def test_legacy_null_pairs_is_empty(self) -> None:
        client = DexScreenerClient(max_rps=0)
        route_client(client, {f"/token-pairs/v1/ethereum/{UNI}": {"schemaVersion": "1.0.0", "pairs": None}})
        snap = await client.get_liquidity(Chain.ETH, UNI)
        assert snap.liquidity_usd == 0

    @pytest.mark.asyncio
    async def test_server_error_raises(self) -> None:
        client = DexScreenerClient(max_rps=0)
        route_client(client, {f"/token-pairs/v1/ethereum/{UNI}": make_response(None, status_code=503)})
        with pytest.raises(UpstreamError) as exc:
            await client.get_liquidity(Chain.ETH, UNI)
        assert exc.value.status_code == 503
        assert exc.value.provider == "dexscreener"
