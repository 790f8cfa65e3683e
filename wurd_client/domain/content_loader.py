"""
Cache/fetch policy for loading page content.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, Union

from shared.errors import RemoteError
from shared.logging import get_logger
from ..adapters.content_api_client import ContentApiClient
from ..caching.content_cache import ContentCache

Pages = Union[str, Sequence[str]]

_MISS = object()


@dataclass(frozen=True)
class ContentOptions:
    """Effective options for a single load."""

    language: Optional[str] = "default"
    draft: bool = False


def normalize_pages(pages: Pages) -> List[str]:
    """Turn a page name or a sequence of names into a de-duplicated list."""
    if isinstance(pages, str):
        return [pages]
    return list(dict.fromkeys(pages))


class ContentLoader:
    """Decides which pages come from the cache and which from the API.

    Draft loads always go to the API. Published loads read the cache first
    and fetch only the misses, in one batched request. A failed fetch fails
    the whole load; cache hits gathered before it are discarded. The result
    holds exactly the requested pages.
    """

    def __init__(self, fetcher: ContentApiClient, cache: ContentCache):
        self.fetcher = fetcher
        self.cache = cache
        self.logger = get_logger("wurd.loader")

    async def load(self, pages: Pages, options: ContentOptions) -> Dict[str, Any]:
        page_names = normalize_pages(pages)

        if options.draft:
            fetched = await self.fetcher.fetch(page_names, language=options.language, draft=True)
            return self._select(page_names, fetched)

        result: Dict[str, Any] = {}
        uncached: List[str] = []
        for page in page_names:
            content = self.cache.get(page, options.language, _MISS)
            if content is not _MISS:
                result[page] = content
            else:
                uncached.append(page)

        if not uncached:
            return result

        self.logger.debug(
            "Loading uncached pages",
            cached=sorted(result),
            uncached=uncached,
            language=options.language,
        )
        fetched = self._select(
            uncached,
            await self.fetcher.fetch(uncached, language=options.language, draft=False),
        )
        return {page: result[page] if page in result else fetched[page] for page in page_names}

    def _select(self, page_names: List[str], fetched: Dict[str, Any]) -> Dict[str, Any]:
        """Requested pages from a fetch; a page the API left out fails the load."""
        missing = [page for page in page_names if page not in fetched]
        if missing:
            self.logger.error("Content API response is missing pages", missing=missing, returned=sorted(fetched))
            raise RemoteError(
                200,
                fetched,
                message=f"Content API response is missing pages: {', '.join(missing)}",
            )
        return {page: fetched[page] for page in page_names}
