"""
Lazily loaded, process-lifetime cache of the logo index.

The collection is fetched on the first request that needs it and kept for
the lifetime of the process. There is no TTL: a new process re-fetches.

Load is all-or-nothing. A failed fetch or parse raises SourceUnavailable
and leaves the cache empty, so the next request simply tries again.
Concurrent first requests share a single fetch (asyncio.Lock).
"""

import asyncio
import logging
from typing import Optional
from urllib.parse import urljoin, urlparse

import httpx

from .errors import SourceUnavailable
from .models import LogoIndex

logger = logging.getLogger(__name__)


class IndexCache:
    """Owns the loaded LogoIndex for one application instance."""

    def __init__(
        self,
        source_url: str = "/logos/index.json",
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Args:
            source_url: Absolute URL of index.json, or a path resolved against
                the origin of the first request
            timeout: HTTP timeout in seconds for the fetch
            transport: Optional httpx transport (tests inject MockTransport)
        """
        self.source_url = source_url
        self.timeout = timeout
        self._transport = transport
        self._index: Optional[LogoIndex] = None
        self._lock = asyncio.Lock()

    @property
    def is_loaded(self) -> bool:
        return self._index is not None

    @property
    def size(self) -> int:
        return len(self._index) if self._index is not None else 0

    def resolve_source(self, base_url: Optional[str] = None) -> str:
        """Absolute URL of the index for a request arriving at base_url."""
        if urlparse(self.source_url).scheme:
            return self.source_url
        if not base_url:
            raise SourceUnavailable(self.source_url, "relative index location and no request URL to resolve it against")
        return urljoin(base_url, self.source_url)

    async def ensure_loaded(self, base_url: Optional[str] = None) -> LogoIndex:
        """
        Return the loaded index, fetching it on first use.

        Args:
            base_url: URL of the current request (only used for relative sources)

        Raises:
            SourceUnavailable: If the fetch or parse fails
        """
        if self._index is not None:
            return self._index

        async with self._lock:
            # Another request may have finished the load while we waited
            if self._index is not None:
                return self._index

            url = self.resolve_source(base_url)
            logger.info(f"Loading logo index from {url}")
            index = await self._fetch(url)
            self._index = index
            logger.info(f"Logo index loaded: {len(index)} records")
            return index

    async def _fetch(self, url: str) -> LogoIndex:
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.get(url, headers={"Accept": "application/json"})
                response.raise_for_status()
                payload = response.json()
        except httpx.HTTPStatusError as e:
            logger.error(f"Index fetch failed: HTTP {e.response.status_code} from {url}")
            raise SourceUnavailable(url, f"HTTP {e.response.status_code}")
        except httpx.HTTPError as e:
            logger.error(f"Index fetch failed: {type(e).__name__}: {e}")
            raise SourceUnavailable(url, f"{type(e).__name__}: {e}")
        except ValueError as e:
            logger.error(f"Index is not valid JSON: {e}")
            raise SourceUnavailable(url, f"invalid JSON: {e}")

        try:
            return LogoIndex.from_json(payload)
        except ValueError as e:
            logger.error(f"Index has unexpected shape: {e}")
            raise SourceUnavailable(url, str(e))
