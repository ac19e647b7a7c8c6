"""Identity resolution: name / slug / contract address -> canonical triple."""

import re

from loguru import logger

from src.analysis.exceptions import NotFound, ResolutionError, UpstreamError, ValidationError
from src.analysis.types import AssetIdentity, Chain
from src.parsers.coingecko.client import PLATFORM_IDS, CoinGeckoClient
from src.parsers.coingecko.models import CoinGeckoCoin

ETH_ADDRESS_RE = re.compile(r"^0x[a-fA-F0-9]{40}$")
SOL_ADDRESS_RE = re.compile(r"^[1-9A-HJ-NP-Za-km-z]{32,44}$")
COIN_ID_RE = re.compile(r"^[a-z0-9-]+$")

ADDRESS_PATTERNS = {
    Chain.ETH: (ETH_ADDRESS_RE, "Invalid Ethereum contract address"),
    Chain.SOL: (SOL_ADDRESS_RE, "Invalid Solana token address"),
}


def infer_chain(address: str) -> Chain | None:
    if ETH_ADDRESS_RE.match(address):
        return Chain.ETH
    if SOL_ADDRESS_RE.match(address):
        return Chain.SOL
    return None


def validate_identity_input(
    coin_id: str | None, contract_address: str | None, chain: str | None,
) -> Chain | None:
    """Check raw fields, collecting every violation. Returns the effective chain."""
    errors: list[str] = []
    resolved_chain: Chain | None = None

    if coin_id and not COIN_ID_RE.match(coin_id):
        errors.append("Invalid coin ID format")

    if chain:
        if chain in (Chain.ETH, Chain.SOL):
            resolved_chain = Chain(chain)
        else:
            errors.append(f"Unsupported chain '{chain}' (expected eth or sol)")

    if contract_address:
        if resolved_chain is not None:
            pattern, message = ADDRESS_PATTERNS[resolved_chain]
            if not pattern.match(contract_address):
                errors.append(message)
        elif not chain:
            resolved_chain = infer_chain(contract_address)
            if resolved_chain is None:
                errors.append("Contract address matches neither Ethereum nor Solana format")
    elif resolved_chain is not None:
        # chain without an address carries no information
        resolved_chain = None

    if errors:
        raise ValidationError(errors)
    return resolved_chain


def identity_from_coin(coin: CoinGeckoCoin) -> AssetIdentity:
    """Pick the contract mapping from a coin's platforms: ethereum, then solana, else native.

    Platform addresses that do not match their chain's format are skipped.
    """
    for chain in (Chain.ETH, Chain.SOL):
        address = coin.platform_address(PLATFORM_IDS[chain])
        if not address:
            continue
        pattern, _ = ADDRESS_PATTERNS[chain]
        if not pattern.match(address):
            logger.debug(f"[RESOLVE] {coin.id}: ignoring malformed {chain} address {address!r}")
            continue
        return AssetIdentity(coin_id=coin.id, contract_address=address, chain=chain)
    return AssetIdentity(coin_id=coin.id, contract_address=None, chain=Chain.NONE)


class IdentityResolver:
    def __init__(self, coingecko: CoinGeckoClient) -> None:
        self._coingecko = coingecko

    async def resolve(
        self,
        name: str | None = None,
        coin_id: str | None = None,
        contract_address: str | None = None,
        chain: str | None = None,
    ) -> AssetIdentity:
        """Resolve loose input to a complete identity.

        A supplied contract address decides chain/contract; the name is only
        consulted when no slug could be derived otherwise.
        """
        identity, _ = await self.resolve_with_coin(name, coin_id, contract_address, chain)
        return identity

    async def resolve_with_coin(
        self,
        name: str | None = None,
        coin_id: str | None = None,
        contract_address: str | None = None,
        chain: str | None = None,
    ) -> tuple[AssetIdentity, CoinGeckoCoin | None]:
        """Like resolve(), also returning the coin detail fetched on the way (if any).

        The market fetcher reuses it so /coins/{id} is requested once per analysis.
        """
        name = (name or "").strip() or None
        coin_id = (coin_id or "").strip() or None
        contract_address = (contract_address or "").strip() or None
        chain = (chain or "").strip().lower() or None

        effective_chain = validate_identity_input(coin_id, contract_address, chain)
        if effective_chain is None:
            contract_address = None

        coin: CoinGeckoCoin | None = None
        if coin_id is None and contract_address and effective_chain is not None:
            coin = await self._lookup_contract(effective_chain, contract_address)
            if coin is not None:
                coin_id = coin.id

        if coin_id is None and name:
            coin_id = await self._search(name)

        if coin_id is None:
            if contract_address:
                raise NotFound(f"No listed asset for contract {contract_address}")
            raise ResolutionError("Provide a coin name, coin ID or contract address")

        if not COIN_ID_RE.match(coin_id):
            raise ResolutionError(f"Provider returned a malformed coin ID: {coin_id!r}")

        if contract_address and effective_chain is not None:
            identity = AssetIdentity(
                coin_id=coin_id, contract_address=contract_address, chain=effective_chain,
            )
            return identity, coin

        coin = await self._get_coin(coin_id)
        identity = identity_from_coin(coin)
        logger.debug(
            f"[RESOLVE] {coin_id} -> chain={identity.chain} contract={identity.contract_address}"
        )
        return identity, coin

    async def _search(self, name: str) -> str:
        coins = await self._coingecko.search(name)
        if not coins:
            raise NotFound(f"No asset matches '{name}'")
        logger.debug(f"[RESOLVE] search '{name}' -> {coins[0].id}")
        return coins[0].id

    async def _get_coin(self, coin_id: str) -> CoinGeckoCoin:
        try:
            return await self._coingecko.get_coin(coin_id)
        except UpstreamError as e:
            if e.status_code == 404:
                raise NotFound(f"Unknown coin ID '{coin_id}'") from e
            raise

    async def _lookup_contract(self, chain: Chain, address: str) -> CoinGeckoCoin | None:
        """Reverse-resolve a contract to its coin; None when the provider has no listing."""
        try:
            return await self._coingecko.get_coin_by_contract(chain, address)
        except UpstreamError as e:
            if e.status_code == 404:
                logger.debug(f"[RESOLVE] no listing for {chain} contract {address[:12]}")
                return None
            raise
