"""
Unit tests for the content API client.
"""

import pytest
import httpx
from prometheus_client import CollectorRegistry
from unittest.mock import AsyncMock, patch

from shared.config import WurdConfig
from shared.errors import AuthorizationError, RemoteError
from shared.metrics import MetricsCollector
from shared.test_helpers import FakeContentApi, FakeClock
from wurd_client.adapters.content_api_client import ContentApiClient
from wurd_client.caching.content_cache import ContentCache


class TestContentApiClient:
    """Test cases for ContentApiClient."""

    @pytest.fixture
    def config(self):
        return WurdConfig(api_url="https://api.wurd.test/", http_timeout_seconds=2.0)

    @pytest.fixture
    def cache(self):
        return ContentCache(60.0, clock=FakeClock())

    @pytest.fixture
    def api(self):
        return FakeContentApi()

    @pytest.fixture
    def fetcher(self, api, cache, config):
        return ContentApiClient("acme-site", cache, config=config, http_client=api.client())

    def test_build_url(self, fetcher):
        """Test pages are joined with commas under the app path."""
        url = fetcher.build_url(["home", "about"])

        assert url == "https://api.wurd.test/v2/content/acme-site/home,about"

    def test_build_url_escapes_names(self, cache, config):
        """Test app and page names are percent-encoded."""
        fetcher = ContentApiClient("my site", cache, config=config)

        assert fetcher.build_url(["a/b", "c d"]) == "https://api.wurd.test/v2/content/my%20site/a%2Fb,c%20d"

    @pytest.mark.asyncio
    async def test_fetch_batches_pages_in_one_request(self, fetcher, api):
        """Test several pages are fetched with a single request."""
        result = await fetcher.fetch(["home", "about"])

        assert api.call_count == 1
        assert set(result) == {"home", "about"}
        assert api.requested_pages(api.requests[0]) == ["home", "about"]

    @pytest.mark.asyncio
    async def test_fetch_sends_query_parameters(self, fetcher, api):
        """Test draft and lang are sent only when set."""
        await fetcher.fetch(["home"], language="fr", draft=True)
        await fetcher.fetch(["home"])

        first, second = api.requests
        assert first.url.params["draft"] == "1"
        assert first.url.params["lang"] == "fr"
        assert "draft" not in second.url.params
        assert "lang" not in second.url.params

    @pytest.mark.asyncio
    async def test_fetch_sends_headers(self, fetcher, api, config):
        """Test the user agent and accept headers."""
        await fetcher.fetch(["home"])

        request = api.requests[0]
        assert request.headers["User-Agent"] == config.user_agent
        assert request.headers["Accept"] == "application/json"

    @pytest.mark.asyncio
    async def test_fetch_writes_every_page_to_cache(self, fetcher, cache):
        """Test returned pages are cached under the request language."""
        await fetcher.fetch(["home", "common"], language="en")

        assert cache.get("home", "en") == {"title": "Welcome", "intro": "Hello"}
        assert cache.get("common", "en")["brand"] == "Acme"
        assert cache.get("home", None) is None

    @pytest.mark.asyncio
    async def test_fetch_empty_pages_makes_no_request(self, fetcher, api):
        """Test an empty batch short-circuits."""
        assert await fetcher.fetch([]) == {}
        assert api.call_count == 0

    @pytest.mark.asyncio
    async def test_fetch_unauthorized(self, cache, config):
        """Test a 401 raises AuthorizationError and caches nothing."""
        api = FakeContentApi(status_code=401, payload={"error": "Unknown app"})
        fetcher = ContentApiClient("nope", cache, config=config, http_client=api.client())

        with pytest.raises(AuthorizationError) as exc_info:
            await fetcher.fetch(["home"])

        assert exc_info.value.code == "AUTHORIZATION_ERROR"
        assert exc_info.value.details == {"app": "nope"}
        assert len(cache) == 0

    @pytest.mark.asyncio
    async def test_fetch_remote_error_carries_payload(self, cache, config):
        """Test other error statuses raise RemoteError with the payload."""
        api = FakeContentApi(status_code=500, payload={"message": "Boom"})
        fetcher = ContentApiClient("acme-site", cache, config=config, http_client=api.client())

        with pytest.raises(RemoteError) as exc_info:
            await fetcher.fetch(["home"])

        error = exc_info.value
        assert error.status_code == 500
        assert error.payload == {"message": "Boom"}
        assert error.message == "Boom"
        assert error.details["status_code"] == 500

    @pytest.mark.asyncio
    async def test_fetch_missing_page_is_remote_404(self, fetcher):
        """Test a missing page surfaces as a RemoteError with status 404."""
        with pytest.raises(RemoteError) as exc_info:
            await fetcher.fetch(["nonexistent"])

        assert exc_info.value.status_code == 404

    @pytest.mark.asyncio
    async def test_fetch_rejects_non_object_body(self, cache, config):
        """Test a JSON array body is treated as a remote error."""
        transport = httpx.MockTransport(lambda request: httpx.Response(200, json=["home"]))
        fetcher = ContentApiClient(
            "acme-site", cache, config=config, http_client=httpx.AsyncClient(transport=transport)
        )

        with pytest.raises(RemoteError):
            await fetcher.fetch(["home"])

    @pytest.mark.asyncio
    async def test_fetch_transport_error_propagates(self, cache, config):
        """Test connection failures pass through unchanged."""
        def refuse(request):
            raise httpx.ConnectError("connection refused", request=request)

        fetcher = ContentApiClient(
            "acme-site", cache, config=config,
            http_client=httpx.AsyncClient(transport=httpx.MockTransport(refuse))
        )

        with pytest.raises(httpx.ConnectError):
            await fetcher.fetch(["home"])
        assert len(cache) == 0

    @pytest.mark.asyncio
    async def test_fetch_without_injected_client(self, cache, config):
        """Test a short-lived client is opened with the configured timeout."""
        response = httpx.Response(
            200, json={"home": {"title": "Hi"}},
            request=httpx.Request("GET", "https://api.wurd.test/v2/content/acme-site/home")
        )
        fetcher = ContentApiClient("acme-site", cache, config=config)

        with patch("httpx.AsyncClient.get", new_callable=AsyncMock) as mock_get:
            mock_get.return_value = response
            result = await fetcher.fetch(["home"])

        assert result == {"home": {"title": "Hi"}}
        mock_get.assert_called_once()

    @pytest.mark.asyncio
    async def test_fetch_records_metrics(self, api, cache, config):
        """Test request outcome, page count and duration are recorded."""
        registry = CollectorRegistry()
        fetcher = ContentApiClient(
            "acme-site", cache, config=config,
            http_client=api.client(), metrics=MetricsCollector(registry)
        )

        await fetcher.fetch(["home", "about"])

        assert registry.get_sample_value("wurd_fetch_requests_total", {"status": "ok"}) == 1.0
        assert registry.get_sample_value("wurd_fetch_pages_total") == 2.0
        assert registry.get_sample_value("wurd_fetch_duration_seconds_count") == 1.0
