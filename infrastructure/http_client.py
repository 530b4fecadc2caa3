"""Shared async HTTP client for upstream providers."""

from typing import Any, Optional

import httpx

from shared.logging import get_logger

log = get_logger(__name__)


class HttpClient:
    """Thin async wrapper around httpx.AsyncClient.

    One instance per upstream (license provider, email provider) so each keeps
    its own timeout. There is no retry layer: transport errors are logged with
    the upstream name and re-raised to the caller.
    """

    def __init__(self, upstream: str, timeout: float = 5.0) -> None:
        self.upstream = upstream
        self._client = httpx.AsyncClient(timeout=timeout)

    async def request(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        try:
            return await self._client.request(method, url, **kwargs)
        except httpx.HTTPError as e:
            log.error(
                "upstream_request_failed",
                upstream=self.upstream,
                method=method,
                error=str(e),
                error_type=type(e).__name__,
            )
            raise

    async def get(
        self, url: str, *, params: Optional[dict] = None, **kwargs: Any
    ) -> httpx.Response:
        return await self.request("GET", url, params=params, **kwargs)

    async def post(self, url: str, **kwargs: Any) -> httpx.Response:
        return await self.request("POST", url, **kwargs)

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "HttpClient":
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.aclose()
