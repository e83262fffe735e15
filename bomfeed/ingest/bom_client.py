"""Bureau of Meteorology feed client (async httpx)."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import httpx

logger = logging.getLogger(__name__)

BOM_BASE_URL = "http://reg.bom.gov.au"
DEFAULT_USER_AGENT = "bomfeed/0.1.0"
DEFAULT_CHUNK_SIZE = 16 * 1024


class BomClient:
    """Thin wrapper over one shared ``httpx.AsyncClient``.

    Use as an async context manager so the connection pool is released::

        async with BomClient() as bom:
            async with bom.stream_forecast("IDV10753") as chunks:
                ...
    """

    def __init__(
        self,
        base_url: str = BOM_BASE_URL,
        user_agent: str = DEFAULT_USER_AGENT,
        timeout: float = 30.0,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
    ):
        self.base_url = base_url.rstrip("/")
        self.user_agent = user_agent
        self.timeout = timeout
        self.chunk_size = chunk_size
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> "BomClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self.timeout,
                headers={"User-Agent": self.user_agent},
                follow_redirects=True,
            )
        return self._client

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    def forecast_url(self, product_id: str) -> str:
        return f"{self.base_url}/fwo/{product_id}.xml"

    def observation_url(self, product_id: str, wmo_id: str) -> str:
        return f"{self.base_url}/fwo/{product_id}/{product_id}.{wmo_id}.json"

    @asynccontextmanager
    async def stream_forecast(self, product_id: str) -> AsyncIterator[AsyncIterator[bytes]]:
        """Open a forecast product and yield its body as a chunk iterator.

        Raises ``httpx.HTTPStatusError`` on a non-success status. The response
        and its connection are released when the block exits, however it exits.
        """
        url = self.forecast_url(product_id)
        async with self.client.stream("GET", url) as resp:
            resp.raise_for_status()
            logger.debug("Streaming %s (%s)", url, resp.headers.get("content-length", "?"))
            yield resp.aiter_bytes(self.chunk_size)

    async def get_observations(self, product_id: str, wmo_id: str) -> dict:
        """Fetch one station's observation JSON document."""
        resp = await self.client.get(self.observation_url(product_id, wmo_id))
        resp.raise_for_status()
        return resp.json()
