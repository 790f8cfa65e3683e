"""
Language detection for incoming requests.

The preferred language comes from, in order: a ``?lang=`` query parameter,
a cookie left by an earlier visit, the browser's ``Accept-Language``
header, and finally the first supported language. Whatever is chosen is
matched against the supported languages and stored on
``request.state.language``, where the content adapters pick it up.
"""

from __future__ import annotations

from typing import List, Optional, Sequence, Tuple

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

from shared.errors import ConfigurationError
from shared.logging import get_logger

ONE_YEAR_SECONDS = 365 * 24 * 60 * 60

logger = get_logger("wurd.language")


def parse_accept_language(value: Optional[str]) -> List[str]:
    """
    Parse an Accept-Language header into language tags ordered by preference.

    Respects ``q=`` weights; entries with ``q=0`` and the ``*`` wildcard are
    dropped. Ties keep header order.
    """
    if not value:
        return []

    weighted: List[Tuple[float, str]] = []
    for part in value.split(","):
        part = part.strip()
        if not part:
            continue
        tag, _, params = part.partition(";")
        tag = tag.strip()
        q = 1.0
        params = params.strip()
        if params.startswith("q="):
            try:
                q = float(params[2:])
            except ValueError:
                q = 1.0
        if tag and tag != "*" and q > 0:
            weighted.append((q, tag))

    weighted.sort(key=lambda item: item[0], reverse=True)
    return [tag for _, tag in weighted]


def match_language(candidate: Optional[str], supported_languages: Sequence[str]) -> Optional[str]:
    """Closest supported language for a tag: exact match first, then primary subtag."""
    if not candidate:
        return None

    wanted = candidate.strip().lower().replace("_", "-")
    lowered = {lang.lower(): lang for lang in supported_languages}
    if wanted in lowered:
        return lowered[wanted]

    primary = wanted.split("-", 1)[0]
    for lang in supported_languages:
        if lang.lower().split("-", 1)[0] == primary:
            return lang
    return None


def resolve_language(
    supported_languages: Sequence[str],
    *,
    query_value: Optional[str] = None,
    cookie_value: Optional[str] = None,
    accept_language: Optional[str] = None,
) -> str:
    """Pick the language for a request from its query, cookie and header values."""
    if not supported_languages:
        raise ConfigurationError("At least one supported language is required")

    for candidate in (query_value, cookie_value):
        if candidate:
            return match_language(candidate, supported_languages) or supported_languages[0]

    for candidate in parse_accept_language(accept_language):
        matched = match_language(candidate, supported_languages)
        if matched:
            return matched

    return supported_languages[0]


class LanguageDetectionMiddleware(BaseHTTPMiddleware):
    """Stores the visitor's language on ``request.state.language``.

    When the language was forced with the query parameter, a cookie is set
    so the choice sticks on later visits.
    """

    def __init__(
        self,
        app: ASGIApp,
        supported_languages: Sequence[str],
        query_param: str = "lang",
        cookie_name: str = "lang",
        cookie_max_age: int = ONE_YEAR_SECONDS,
    ):
        super().__init__(app)
        if not supported_languages:
            raise ConfigurationError("At least one supported language is required")
        self.supported_languages = list(supported_languages)
        self.query_param = query_param
        self.cookie_name = cookie_name
        self.cookie_max_age = cookie_max_age

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        query_value = request.query_params.get(self.query_param)
        language = resolve_language(
            self.supported_languages,
            query_value=query_value,
            cookie_value=request.cookies.get(self.cookie_name),
            accept_language=request.headers.get("accept-language"),
        )
        request.state.language = language
        logger.debug("Request language detected", path=request.url.path, language=language)

        response = await call_next(request)

        if query_value:
            response.set_cookie(self.cookie_name, query_value, max_age=self.cookie_max_age)
        return response
