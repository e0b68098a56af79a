"""
Unit tests for the lazily loaded index cache.

The index endpoint is an httpx.MockTransport; no network access.
"""

import asyncio

import httpx
import pytest

from logo_search.errors import SourceUnavailable
from index_server import IndexServer
from logo_search.index_cache import IndexCache

pytestmark = pytest.mark.unit


class TestEnsureLoaded:
    """Load-once semantics"""

    @pytest.mark.asyncio
    async def test_first_call_fetches(self, index_server):
        cache = IndexCache("https://logos.test/logos/index.json", transport=index_server.transport)
        assert not cache.is_loaded

        index = await cache.ensure_loaded()

        assert len(index) == 5
        assert cache.is_loaded
        assert cache.size == 5
        assert str(index_server.requests[0].url) == "https://logos.test/logos/index.json"

    @pytest.mark.asyncio
    async def test_subsequent_calls_reuse(self, index_server):
        cache = IndexCache("https://logos.test/logos/index.json", transport=index_server.transport)
        first = await cache.ensure_loaded()
        second = await cache.ensure_loaded()
        assert first is second
        assert len(index_server.requests) == 1

    @pytest.mark.asyncio
    async def test_concurrent_first_calls_fetch_once(self, index_server):
        cache = IndexCache("https://logos.test/logos/index.json", transport=index_server.transport)
        results = await asyncio.gather(*[cache.ensure_loaded() for _ in range(10)])
        assert all(r is results[0] for r in results)
        assert len(index_server.requests) == 1

    @pytest.mark.asyncio
    async def test_relative_source_resolved_against_request(self, index_server):
        cache = IndexCache("/logos/index.json", transport=index_server.transport)
        await cache.ensure_loaded("https://site.test/search")
        assert str(index_server.requests[0].url) == "https://site.test/logos/index.json"

    @pytest.mark.asyncio
    async def test_relative_source_without_base(self, index_server):
        cache = IndexCache("/logos/index.json", transport=index_server.transport)
        with pytest.raises(SourceUnavailable):
            await cache.ensure_loaded()
        assert index_server.requests == []


class TestLoadFailures:
    """Failures surface as SourceUnavailable and are not cached"""

    @pytest.mark.asyncio
    async def test_http_error_status(self):
        server = IndexServer(payload={"error": "nope"}, status_code=500)
        cache = IndexCache("https://logos.test/index.json", transport=server.transport)
        with pytest.raises(SourceUnavailable) as exc_info:
            await cache.ensure_loaded()
        assert exc_info.value.status_code == 502
        assert "HTTP 500" in exc_info.value.detail
        assert not cache.is_loaded

    @pytest.mark.asyncio
    async def test_invalid_json(self):
        server = IndexServer(content=b"<html>not json</html>")
        cache = IndexCache("https://logos.test/index.json", transport=server.transport)
        with pytest.raises(SourceUnavailable, match="invalid JSON"):
            await cache.ensure_loaded()

    @pytest.mark.asyncio
    async def test_not_an_array(self):
        server = IndexServer(payload={"logos": []})
        cache = IndexCache("https://logos.test/index.json", transport=server.transport)
        with pytest.raises(SourceUnavailable, match="JSON array"):
            await cache.ensure_loaded()

    @pytest.mark.asyncio
    async def test_transport_error(self):
        def refuse(request):
            raise httpx.ConnectError("connection refused", request=request)

        cache = IndexCache("https://logos.test/index.json", transport=httpx.MockTransport(refuse))
        with pytest.raises(SourceUnavailable, match="ConnectError"):
            await cache.ensure_loaded()

    @pytest.mark.asyncio
    async def test_failure_retried_on_next_call(self, sample_payload):
        server = IndexServer(payload=sample_payload, status_code=503)
        cache = IndexCache("https://logos.test/index.json", transport=server.transport)

        with pytest.raises(SourceUnavailable):
            await cache.ensure_loaded()

        server.status_code = 200
        index = await cache.ensure_loaded()

        assert len(index) == 5
        assert len(server.requests) == 2
