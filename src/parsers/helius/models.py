"""Pydantic models for Helius token-transfer API responses."""

from decimal import Decimal

from pydantic import BaseModel, Field, RootModel


class HeliusTokenTransfer(BaseModel):
    """Single SPL token transfer."""

    signature: str = ""
    timestamp: int = 0  # unix seconds
    from_user_account: str = Field("", alias="fromUserAccount")
    to_user_account: str = Field("", alias="toUserAccount")
    token_amount: Decimal = Field(Decimal("0"), alias="tokenAmount")
    mint: str = ""

    model_config = {"extra": "ignore", "populate_by_name": True}


class HeliusTransferList(RootModel[list[HeliusTokenTransfer]]):
    pass
