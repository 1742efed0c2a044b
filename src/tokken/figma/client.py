"""
Async client for the Figma REST API.

Every call goes through the shared :class:`RetryPolicy`. Failures leave this
module as :class:`FigmaAPIError`; callers never see raw ``httpx`` exceptions.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from tokken.core.errors import FigmaAPIError

from .retry import RetryPolicy

logger = logging.getLogger(__name__)

FIGMA_API_URL = "https://api.figma.com/v1"
DEFAULT_TIMEOUT = 60.0

# Variables API answers 403 on plans without it and 404 on files without any.
_VARIABLES_UNAVAILABLE = {403, 404}


class FigmaClient:
    """Read-only access to one design file.

    Use as an async context manager so the underlying connection pool is
    closed::

        async with FigmaClient(token, file_key) as client:
            file_data = await client.get_file()

    Args:
        access_token: Personal access token, sent as ``X-Figma-Token``.
        file_key: Key of the file every call targets.
        base_url: API root, overridable for tests.
        timeout: Per-request timeout in seconds.
        retry_policy: Retry behaviour for every API call.
        transport: Optional ``httpx`` transport (``httpx.MockTransport`` in tests).
    """

    def __init__(
        self,
        access_token: str,
        file_key: str,
        *,
        base_url: str = FIGMA_API_URL,
        timeout: float = DEFAULT_TIMEOUT,
        retry_policy: RetryPolicy | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.file_key = file_key
        self.retry_policy = retry_policy or RetryPolicy()
        self._http = httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            headers={"X-Figma-Token": access_token},
            timeout=timeout,
            transport=transport,
            follow_redirects=True,
        )
        # Export URLs point at a CDN; the token is not sent there.
        self._downloads = httpx.AsyncClient(
            timeout=timeout, transport=transport, follow_redirects=True
        )

    async def __aenter__(self) -> FigmaClient:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()
        await self._downloads.aclose()

    async def _send(
        self,
        url: str,
        params: dict[str, Any] | None = None,
        *,
        http: httpx.AsyncClient | None = None,
    ) -> httpx.Response:
        try:
            response = await (http or self._http).get(url, params=params)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise FigmaAPIError(
                f"Figma API error {e.response.status_code} for {e.request.url.path}",
                status_code=e.response.status_code,
            ) from e
        except httpx.HTTPError as e:
            raise FigmaAPIError(f"Request to {url} failed: {e}") from e
        return response

    async def _get_json(self, path: str, params: dict[str, Any] | None = None) -> Any:
        async def call() -> Any:
            response = await self._send(path, params)
            try:
                return response.json()
            except ValueError as e:
                raise FigmaAPIError(
                    f"Figma API returned a non-JSON body for {path}",
                    status_code=response.status_code,
                ) from e

        return await self.retry_policy.run(call, description=f"GET {path}")

    async def get_file(self) -> dict[str, Any]:
        """Full file payload: ``document``, ``styles``, ``components``, ``componentSets``."""
        logger.info("Fetching file %s", self.file_key)
        return await self._get_json(f"/files/{self.file_key}")

    async def get_nodes(self, node_ids: list[str]) -> dict[str, Any]:
        """Fetch nodes by id; returns ``{id: document}`` for ids that resolved."""
        if not node_ids:
            return {}
        data = await self._get_json(
            f"/files/{self.file_key}/nodes", params={"ids": ",".join(node_ids)}
        )
        nodes = (data or {}).get("nodes") or {}
        return {
            node_id: entry["document"]
            for node_id, entry in nodes.items()
            if isinstance(entry, dict) and entry.get("document")
        }

    async def get_variables(self) -> dict[str, Any] | None:
        """Local variables, or ``None`` when the variables API is unavailable."""
        try:
            return await self._get_json(f"/files/{self.file_key}/variables/local")
        except FigmaAPIError as e:
            if e.status_code in _VARIABLES_UNAVAILABLE:
                logger.warning("Variables API not available (status %s)", e.status_code)
                return None
            raise

    async def export_images(
        self, node_ids: list[str], format: str = "png", scale: float | None = 2
    ) -> dict[str, str | None]:
        """Request rendered images; returns ``{id: url}`` (url may be ``None``)."""
        if not node_ids:
            return {}
        params: dict[str, Any] = {"ids": ",".join(node_ids), "format": format}
        if scale is not None:
            params["scale"] = scale
        data = await self._get_json(f"/images/{self.file_key}", params=params)
        return (data or {}).get("images") or {}

    async def download(self, url: str) -> bytes:
        """Download an exported image from its (absolute, short-lived) URL."""
        response = await self._send(url, http=self._downloads)
        return response.content
