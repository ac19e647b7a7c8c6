"""Test helpers for mocking provider HTTP traffic."""

from typing import Any
from unittest.mock import AsyncMock, MagicMock


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def make_response(payload: Any = None, status_code: int = 200) -> MagicMock:
    resp = MagicMock()
    resp.status_code = status_code
    resp.headers = {}
    resp.json.return_value = payload
    return resp


def route_client(client: Any, routes: dict[str, Any]) -> AsyncMock:
    """Replace client._client with a mock answering GETs by path.

    Route values are payloads (200), MagicMock responses, or exceptions.
    Unknown paths answer 404.
    """

    async def fake_get(path: str, params: dict | None = None) -> MagicMock:
        if path not in routes:
            return make_response({"error": "coin not found"}, status_code=404)
        value = routes[path]
        if isinstance(value, Exception):
            raise value
        if isinstance(value, MagicMock):
            return value
        return make_response(value)

    client._client = AsyncMock()
    client._client.get = AsyncMock(side_effect=fake_get)
    return client._client.get


def coin_payload(
    coin_id: str,
    *,
    platforms: dict[str, str] | None = None,
    price: float = 10.0,
    change_24h: float = 5.0,
    market_cap: float = 5e9,
    volume_24h: float = 2e8,
) -> dict[str, Any]:
    """Minimal /coins/{id} payload."""
    return {
        "id": coin_id,
        "symbol": coin_id[:3],
        "name": coin_id.title(),
        "platforms": platforms if platforms is not None else {"": ""},
        "market_data": {
            "current_price": {"usd": price},
            "market_cap": {"usd": market_cap},
            "total_volume": {"usd": volume_24h},
            "price_change_percentage_24h": change_24h,
            "circulating_supply": 6e8,
            "total_supply": 1e9,
        },
    }
