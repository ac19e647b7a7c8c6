from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    # CoinGecko (market data + identity resolution)
    coingecko_api_key: str = ""  # empty = public demo tier
    coingecko_pro: bool = False  # pro key uses pro-api host + x-cg-pro-api-key header
    coingecko_max_rps: float = 0.5  # free tier ~30 calls/min

    # Etherscan (ERC-20 holder list)
    etherscan_api_key: str = ""
    etherscan_max_rps: float = 5.0
    etherscan_holder_page_size: int = 100

    # Helius (Solana token transfers)
    helius_api_key: str = ""
    helius_max_rps: float = 10.0

    # DexScreener (no auth)
    dexscreener_max_rps: float = 4.0

    # Upstream call discipline
    api_timeout_sec: float = 10.0
    upstream_max_retries: int = 0  # 0 = fail on first error; >0 retries 429/timeout/connect only

    # Market snapshot: real 7d averages from /market_chart (one extra call)
    market_chart_enabled: bool = True

    # Admission control (sliding window per client id)
    rate_limit_max_requests: int = 100
    rate_limit_window_sec: float = 60.0
    rate_limit_max_clients: int = 10_000

    # Result cache
    cache_ttl_sec: float = 300.0

    # Logging
    log_level: str = "INFO"
    json_logs: bool = False
    log_dir: str = ""  # empty = console only; set e.g. "logs" for a rotating DEBUG file


settings = Settings()
