"""Shared HTTP plumbing for the upstream provider clients.

Every call is bounded by a total wall-clock timeout and every failure is
reported as UpstreamError tagged with the provider name and HTTP status.
Retries are opt-in (max_retries > 0): only GETs, only on 429, timeouts and
connection errors, with fixed backoff delays.
"""

import asyncio
from typing import Any, TypeVar

import httpx
from loguru import logger
from pydantic import BaseModel
from pydantic import ValidationError as PayloadError

from src.analysis.exceptions import UpstreamError
from src.parsers.throttle import ProviderThrottle

RETRY_DELAYS = [1.0, 2.0, 4.0]

ModelT = TypeVar("ModelT", bound=BaseModel)


class ProviderClient:
    provider = "upstream"

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = 10.0,
        headers: dict[str, str] | None = None,
        throttle: ProviderThrottle | None = None,
        max_rps: float = 1.0,
        max_retries: int = 0,
    ) -> None:
        self._timeout = timeout
        self._max_retries = max(0, max_retries)
        self._throttle = throttle or ProviderThrottle(max_rps)
        self._client = httpx.AsyncClient(
            base_url=base_url,
            timeout=timeout,
            headers={"Accept": "application/json", **(headers or {})},
        )

    @property
    def _tag(self) -> str:
        return f"[{self.provider.upper()}]"

    async def close(self) -> None:
        await self._client.aclose()

    async def _send(self, path: str, params: dict[str, Any] | None) -> httpx.Response:
        await self._throttle.acquire()
        return await self._client.get(path, params=params)

    async def _get_json(self, path: str, params: dict[str, Any] | None = None) -> Any:
        """GET path and return the decoded JSON body.

        The timeout covers the wait for a throttle slot as well as the request.
        """
        for attempt in range(self._max_retries + 1):
            can_retry = attempt < self._max_retries
            delay = RETRY_DELAYS[min(attempt, len(RETRY_DELAYS) - 1)]
            try:
                resp = await asyncio.wait_for(self._send(path, params), timeout=self._timeout)
            except (TimeoutError, httpx.TimeoutException) as e:
                if can_retry:
                    logger.debug(f"{self._tag} timeout, retry {attempt + 1} in {delay}s: {path}")
                    await asyncio.sleep(delay)
                    continue
                raise UpstreamError(self.provider, f"timed out after {self._timeout:g}s") from e
            except httpx.ConnectError as e:
                if can_retry:
                    logger.debug(f"{self._tag} connect error, retry {attempt + 1} in {delay}s: {path}")
                    await asyncio.sleep(delay)
                    continue
                raise UpstreamError(self.provider, f"connection failed: {e}") from e
            except httpx.RequestError as e:
                raise UpstreamError(self.provider, f"request failed: {e}") from e

            if resp.status_code == 429:
                if not can_retry:
                    raise UpstreamError(
                        self.provider, f"rate limited after {attempt + 1} attempts", status_code=429,
                    )
                retry_after = resp.headers.get("Retry-After")
                if retry_after and retry_after.isdigit():
                    delay = max(float(retry_after), delay)
                logger.debug(f"{self._tag} 429 rate limited, retry {attempt + 1} in {delay}s: {path}")
                await asyncio.sleep(delay)
                continue

            if resp.status_code != 200:
                logger.debug(f"{self._tag} HTTP {resp.status_code} for {path}")
                raise UpstreamError(
                    self.provider, f"unexpected response for {path}", status_code=resp.status_code,
                )

            try:
                return resp.json()
            except ValueError as e:
                raise UpstreamError(
                    self.provider, "response is not valid JSON", status_code=resp.status_code,
                ) from e

    def _parse(self, model: type[ModelT], data: Any) -> ModelT:
        """Validate a payload against its schema; schema drift is an upstream failure."""
        try:
            return model.model_validate(data)
        except PayloadError as e:
            logger.debug(f"{self._tag} malformed {model.__name__}: {e}")
            raise UpstreamError(self.provider, f"malformed {model.__name__} payload") from e
