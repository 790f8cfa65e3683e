"""
Wurd client instance: the public entry point of the library.
"""

import asyncio
from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple, TYPE_CHECKING

import httpx

from shared.config import WurdConfig, get_config
from shared.errors import ConfigurationError
from shared.logging import get_logger
from . import view_helpers
from .adapters.content_api_client import ContentApiClient
from .caching.content_cache import ContentCache, default_cache
from .domain.content_loader import ContentLoader, ContentOptions, Pages, normalize_pages
from .domain.content_middleware import ContentDependency, content_dependency, param_content_dependency

if TYPE_CHECKING:  # pragma: no cover - imported for typing only
    from shared.metrics import MetricsCollector


@dataclass(frozen=True)
class ClientOptions:
    """Instance-wide defaults, overridable per call."""

    language: Optional[str] = "default"
    draft: bool = False
    preload: Optional[Tuple[str, ...]] = None


class Wurd:
    """Content client bound to one Wurd app.

    Example:
        wurd = Wurd("my-site", language="en", preload=["common"])
        content = await wurd.load(["home", "nav"])

        app = FastAPI(dependencies=[Depends(wurd.middleware("common"))])
    """

    t = staticmethod(view_helpers.t)

    def __init__(
        self,
        app: str,
        *,
        draft: bool = False,
        language: Optional[str] = "default",
        preload: Optional[Pages] = None,
        cache: Optional[ContentCache] = None,
        fetcher: Optional[ContentApiClient] = None,
        http_client: Optional[httpx.AsyncClient] = None,
        config: Optional[WurdConfig] = None,
        metrics: Optional["MetricsCollector"] = None,
    ):
        if not isinstance(app, str) or not app.strip():
            raise ConfigurationError('Missing required option "app"', details={"option": "app"})

        self.app = app
        self.config = config or get_config()
        self.options = ClientOptions(
            language=language,
            draft=draft,
            preload=tuple(normalize_pages(preload)) if preload else None,
        )
        self.logger = get_logger("wurd.client")

        self.cache = cache if cache is not None else default_cache
        if metrics is not None and self.cache.metrics is None:
            self.cache.metrics = metrics
        self.fetcher = fetcher if fetcher is not None else ContentApiClient(
            app,
            self.cache,
            config=self.config,
            http_client=http_client,
            metrics=metrics,
        )
        self.loader = ContentLoader(self.fetcher, self.cache)

        self._preload_task: Optional["asyncio.Task[None]"] = None
        self._preload_pending = False
        if self.options.preload:
            self._schedule_preload()

        if draft:
            self.logger.warning("Wurd is in draft mode, disable it in production", app=app)

    @classmethod
    def connect(cls, app: str, **options: Any) -> "Wurd":
        """Create a client; same as calling the class."""
        return cls(app, **options)

    async def load(
        self,
        pages: Pages,
        *,
        language: Optional[str] = None,
        draft: Optional[bool] = None,
    ) -> Dict[str, Any]:
        """Load content for one or more pages.

        Returns a mapping of page name to content. Any fetch failure is
        raised and no partial mapping is returned.
        """
        options = ContentOptions(
            language=language or self.options.language,
            draft=self.options.draft if draft is None else draft,
        )
        return await self.loader.load(pages, options)

    def middleware(self, pages: Pages, *, language: Optional[str] = None) -> ContentDependency:
        """FastAPI dependency loading ``pages`` into ``request.state.wurd``."""
        return content_dependency(self, pages, language=language)

    def load_by_param(
        self,
        param_name: str,
        *,
        content_name: Optional[str] = None,
        language: Optional[str] = None,
    ) -> ContentDependency:
        """FastAPI dependency loading the page named by path parameter ``param_name``."""
        return param_content_dependency(self, param_name, content_name=content_name, language=language)

    async def warmup(self) -> None:
        """Run the preload if it could not be scheduled at construction.

        Call from an application startup hook. Safe to call more than once.
        """
        if self._preload_task is not None:
            await self._preload_task
            return
        if self._preload_pending:
            self._preload_pending = False
            await self._preload()

    def _schedule_preload(self) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            self._preload_pending = True
            self.logger.debug("No running event loop, preload deferred to warmup", app=self.app)
            return
        self._preload_task = loop.create_task(self._preload())

    async def _preload(self) -> None:
        pages = list(self.options.preload or ())
        try:
            await self.load(pages)
            self.logger.info("Content preloaded", app=self.app, pages=pages)
        except Exception as exc:
            self.logger.warning("Error preloading Wurd content", app=self.app, pages=pages, error=str(exc))


def connect(app: str, **options: Any) -> Wurd:
    """Create a Wurd client; same as ``Wurd(app, **options)``."""
    return Wurd(app, **options)
