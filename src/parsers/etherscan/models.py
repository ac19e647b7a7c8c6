"""Pydantic models for Etherscan API responses."""

from decimal import Decimal

from pydantic import BaseModel


class EtherscanTokenHolder(BaseModel):
    """One row of module=token&action=tokenholderlist."""

    TokenHolderAddress: str
    TokenHolderQuantity: Decimal  # raw units, decimals not applied

    model_config = {"extra": "ignore"}


class EtherscanHolderListResponse(BaseModel):
    status: str
    message: str = ""
    # list on success, error string when status == "0"
    result: list[EtherscanTokenHolder] | str = []

    model_config = {"extra": "ignore"}
