"""
Content API client for Wurd.
"""

import time
from typing import Any, Dict, Optional, Sequence, TYPE_CHECKING
from urllib.parse import quote

import httpx

from shared.config import WurdConfig, get_config
from shared.errors import AuthorizationError, RemoteError
from shared.logging import get_logger
from ..caching.content_cache import ContentCache

if TYPE_CHECKING:  # pragma: no cover - imported for typing only
    from shared.metrics import MetricsCollector


class ContentApiClient:
    """Fetches page content from the content API and stores it in the cache."""

    def __init__(
        self,
        app: str,
        cache: ContentCache,
        *,
        config: Optional[WurdConfig] = None,
        http_client: Optional[httpx.AsyncClient] = None,
        metrics: Optional["MetricsCollector"] = None,
    ):
        self.app = app
        self.cache = cache
        self.config = config or get_config()
        self.base_url = self.config.api_url.rstrip('/')
        self.http_client = http_client
        self.metrics = metrics
        self.logger = get_logger("wurd.content_api")

    def build_url(self, pages: Sequence[str]) -> str:
        """Resource address for a batch of pages."""
        return f"{self.base_url}/v2/content/{quote(self.app, safe='')}/{quote(','.join(pages), safe=',')}"

    async def fetch(
        self,
        pages: Sequence[str],
        *,
        language: Optional[str] = None,
        draft: bool = False,
    ) -> Dict[str, Any]:
        """Fetch several pages in one request and cache each returned page.

        Raises:
            httpx.TransportError: the request never got a response.
            AuthorizationError: the API answered 401.
            RemoteError: any other non-2xx answer, or a body that is not a JSON object.
        """
        if not pages:
            return {}

        url = self.build_url(pages)
        params: Dict[str, str] = {}
        if draft:
            params["draft"] = "1"
        if language:
            params["lang"] = language

        self.logger.debug("Fetching content", app=self.app, pages=list(pages), language=language, draft=draft)
        start = time.perf_counter()
        try:
            response = await self._get(url, params)
        except httpx.TransportError as exc:
            self._record_fetch("transport_error", len(pages), start)
            self.logger.error("Content API unreachable", url=url, error=str(exc))
            raise

        if response.status_code == 401:
            self._record_fetch("unauthorized", len(pages), start)
            self.logger.error("Content API rejected app", app=self.app, url=url)
            raise AuthorizationError(details={"app": self.app})

        if not response.is_success:
            self._record_fetch("error", len(pages), start)
            payload = self._error_payload(response)
            self.logger.error(
                "Content API request failed",
                url=url,
                params=params,
                status_code=response.status_code,
                response=payload
            )
            raise RemoteError(response.status_code, payload)

        try:
            content = response.json()
        except ValueError:
            content = None
        if not isinstance(content, dict):
            self._record_fetch("error", len(pages), start)
            raise RemoteError(response.status_code, response.text, message="Content API returned a non-object body")

        for page, page_content in content.items():
            self.cache.put(page, language, page_content)

        self._record_fetch("ok", len(pages), start)
        self.logger.info("Content fetched", app=self.app, pages=sorted(content), language=language, draft=draft)
        return content

    async def _get(self, url: str, params: Dict[str, str]) -> httpx.Response:
        headers = {"User-Agent": self.config.user_agent, "Accept": "application/json"}
        if self.http_client is not None:
            return await self.http_client.get(url, params=params, headers=headers)

        async with httpx.AsyncClient(timeout=self.config.http_timeout_seconds) as client:
            return await client.get(url, params=params, headers=headers)

    @staticmethod
    def _error_payload(response: httpx.Response) -> Any:
        try:
            return response.json()
        except ValueError:
            return response.text

    def _record_fetch(self, status: str, page_count: int, start: float) -> None:
        if not self.metrics:
            return
        self.metrics.increment_counter("wurd_fetch_requests_total", status=status)
        self.metrics.increment_counter("wurd_fetch_pages_total", page_count)
        self.metrics.observe_histogram("wurd_fetch_duration_seconds", time.perf_counter() - start)
