"""
FastAPI integration for loading page content onto requests.
"""

from typing import Any, Awaitable, Callable, Dict, Optional, TYPE_CHECKING

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, Response

from shared.errors import PageNotFound, RemoteError, WurdException
from shared.logging import get_logger
from .content_loader import Pages

if TYPE_CHECKING:  # pragma: no cover - imported for typing only
    from ..client import Wurd

# Attribute of request.state that collects loaded content.
CONTENT_NAMESPACE = "wurd"

ContentDependency = Callable[[Request], Awaitable[Any]]
NotFoundHandler = Callable[[Request, PageNotFound], Awaitable[Response]]

logger = get_logger("wurd.middleware")


def get_content_namespace(request: Request) -> Dict[str, Any]:
    """Return the request's content namespace, creating it if needed."""
    namespace = getattr(request.state, CONTENT_NAMESPACE, None)
    if namespace is None:
        namespace = {}
        setattr(request.state, CONTENT_NAMESPACE, namespace)
    return namespace


def resolve_request_language(request: Request, language: Optional[str], default: Optional[str]) -> Optional[str]:
    """Language detected on the request, then the adapter's, then the client default."""
    return getattr(request.state, "language", None) or language or default


async def load_into_request(
    client: "Wurd",
    request: Request,
    pages: Pages,
    language: Optional[str] = None,
) -> Dict[str, Any]:
    """Load pages for a request, merge them into its namespace and return just the loaded mapping."""
    effective_language = resolve_request_language(request, language, client.options.language)
    try:
        content = await client.load(pages, language=effective_language)
    except Exception as exc:
        logger.warning("Loading request content failed", path=request.url.path, pages=pages, error=str(exc))
        raise

    get_content_namespace(request).update(content)
    return content


def content_dependency(client: "Wurd", pages: Pages, *, language: Optional[str] = None) -> ContentDependency:
    """Build a dependency that loads ``pages`` into ``request.state.wurd``.

    Errors are raised so FastAPI's exception handlers deal with them.
    """

    async def load_content(request: Request) -> Dict[str, Any]:
        await load_into_request(client, request, pages, language)
        return get_content_namespace(request)

    return load_content


def param_content_dependency(
    client: "Wurd",
    param_name: str,
    *,
    content_name: Optional[str] = None,
    language: Optional[str] = None,
) -> ContentDependency:
    """Build a dependency that loads the page named by a path parameter.

    The content lands under the page name and under ``content_name``
    (defaults to ``param_name``), so one template can serve many pages.
    Raises PageNotFound when the page does not exist.
    """
    key = content_name or param_name

    async def load_param_content(request: Request) -> Any:
        page = request.path_params.get(param_name)
        if not page:
            raise PageNotFound(None, details={"param": param_name})

        try:
            content = await load_into_request(client, request, page, language)
        except RemoteError as exc:
            if exc.status_code == 404:
                raise PageNotFound(page) from exc
            raise

        if page not in content:
            raise PageNotFound(page)

        get_content_namespace(request)[key] = content[page]
        return content[page]

    return load_param_content


def install_exception_handlers(app: FastAPI, *, not_found_handler: Optional[NotFoundHandler] = None) -> None:
    """Register handlers that turn client errors into HTTP responses.

    PageNotFound goes to ``not_found_handler`` when one is given, otherwise it
    gets the same plain 404 the router answers for unmatched paths.
    """

    @app.exception_handler(PageNotFound)
    async def page_not_found_handler(request: Request, exc: PageNotFound) -> Response:
        logger.info("Page not found, falling through", page=exc.page, path=request.url.path)
        if not_found_handler is not None:
            return await not_found_handler(request, exc)
        return JSONResponse(status_code=404, content={"detail": "Not Found"})

    @app.exception_handler(WurdException)
    async def wurd_exception_handler(request: Request, exc: WurdException) -> Response:
        logger.error(
            "Content client error",
            code=exc.code,
            message=exc.message,
            details=exc.details
        )
        return JSONResponse(
            status_code=exc.http_status,
            content=exc.to_response().model_dump()
        )
