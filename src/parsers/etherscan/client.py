"""Etherscan client: ERC-20 holder list for holder distribution."""

from loguru import logger

from src.analysis.exceptions import UpstreamError
from src.analysis.holders import compute_holder_distribution
from src.analysis.types import HolderDistribution
from src.parsers.base import ProviderClient
from src.parsers.etherscan.models import EtherscanHolderListResponse, EtherscanTokenHolder
from src.parsers.throttle import ProviderThrottle

BASE_URL = "https://api.etherscan.io"
ETHEREUM_CHAIN_ID = "1"


class EtherscanClient(ProviderClient):
    """Async client for Etherscan API v2 (Ethereum mainnet)."""

    provider = "etherscan"

    def __init__(
        self,
        api_key: str = "",
        *,
        timeout: float = 10.0,
        throttle: ProviderThrottle | None = None,
        max_rps: float = 5.0,
        max_retries: int = 0,
        page_size: int = 100,
    ) -> None:
        super().__init__(
            BASE_URL, timeout=timeout, throttle=throttle, max_rps=max_rps, max_retries=max_retries,
        )
        self._api_key = api_key
        self._page_size = page_size

    async def get_token_holders(
        self, contract_address: str, *, page: int = 1,
    ) -> list[EtherscanTokenHolder]:
        """Fetch one page of the holder list, largest balances first."""
        params = {
            "chainid": ETHEREUM_CHAIN_ID,
            "module": "token",
            "action": "tokenholderlist",
            "contractaddress": contract_address,
            "page": str(page),
            "offset": str(self._page_size),
        }
        if self._api_key:
            params["apikey"] = self._api_key

        data = await self._get_json("/v2/api", params=params)
        resp = self._parse(EtherscanHolderListResponse, data)
        if resp.status != "1" or isinstance(resp.result, str):
            detail = resp.result if isinstance(resp.result, str) else resp.message
            logger.debug(f"[ETHERSCAN] holder list rejected for {contract_address[:12]}: {detail}")
            raise UpstreamError(self.provider, f"API error: {detail or resp.message}", status_code=200)
        return resp.result

    async def get_holder_distribution(self, contract_address: str) -> HolderDistribution:
        holders = await self.get_token_holders(contract_address)
        return compute_holder_distribution([float(h.TokenHolderQuantity) for h in holders])
