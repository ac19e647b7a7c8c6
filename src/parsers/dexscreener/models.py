from decimal import Decimal

from pydantic import BaseModel, RootModel


class DexScreenerToken(BaseModel):
    address: str
    name: str | None = None
    symbol: str | None = None

    model_config = {"extra": "ignore"}


class DexScreenerLiquidity(BaseModel):
    usd: Decimal | None = None
    base: Decimal | None = None
    quote: Decimal | None = None

    model_config = {"extra": "ignore"}


class DexScreenerPair(BaseModel):
    chainId: str = ""
    dexId: str = ""
    pairAddress: str = ""
    baseToken: DexScreenerToken | None = None
    quoteToken: DexScreenerToken | None = None
    priceUsd: str | None = None
    liquidity: DexScreenerLiquidity | None = None
    fdv: Decimal | None = None

    model_config = {"extra": "ignore"}

    @property
    def liquidity_usd(self) -> float:
        if self.liquidity is None or self.liquidity.usd is None:
            return 0.0
        return float(self.liquidity.usd)


class DexScreenerPairList(RootModel[list[DexScreenerPair]]):
    pass
