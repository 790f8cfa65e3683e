"""
Unit tests for the FastAPI content dependencies and exception handlers.
"""

import pytest
from fastapi import Depends, FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.testclient import TestClient
from unittest.mock import AsyncMock, MagicMock

from shared.config import WurdConfig
from shared.errors import PageNotFound, RemoteError
from shared.test_helpers import FakeContentApi, FakeClock
from wurd_client import LanguageDetectionMiddleware, Wurd, install_exception_handlers
from wurd_client.caching.content_cache import ContentCache
from wurd_client.domain.content_middleware import CONTENT_NAMESPACE, content_dependency, get_content_namespace


def make_request(path: str = "/", path_params=None) -> Request:
    """Bare ASGI request for calling dependencies directly."""
    return Request({
        "type": "http",
        "method": "GET",
        "path": path,
        "query_string": b"",
        "headers": [],
        "path_params": path_params or {},
    })


def build_app(wurd: Wurd, **handler_options) -> FastAPI:
    app = FastAPI(dependencies=[Depends(wurd.middleware("common"))])
    install_exception_handlers(app, **handler_options)

    @app.get("/")
    async def home(request: Request, content=Depends(wurd.middleware("home"))):
        return {"namespace": content, "same_object": content is request.state.wurd}

    @app.get("/docs/{slug}")
    async def doc(request: Request, content=Depends(wurd.load_by_param("slug", content_name="doc"))):
        return {"content": content, "namespace": request.state.wurd}

    @app.get("/{page}")
    async def page(request: Request, content=Depends(wurd.load_by_param("page"))):
        return {"content": content, "namespace": request.state.wurd}

    return app


@pytest.fixture
def api():
    return FakeContentApi()


@pytest.fixture
def wurd(api):
    return Wurd(
        "acme-site",
        cache=ContentCache(60.0, clock=FakeClock()),
        config=WurdConfig(api_url="https://api.wurd.test"),
        http_client=api.client(),
    )


class TestBatchAdapter:
    """Test cases for Wurd.middleware."""

    def test_route_and_app_wide_content(self, wurd):
        """Test app-wide and per-route content share the namespace."""
        client = TestClient(build_app(wurd))

        response = client.get("/")

        assert response.status_code == 200
        data = response.json()
        assert set(data["namespace"]) == {"common", "home"}
        assert data["namespace"]["home"]["title"] == "Welcome"
        assert data["same_object"] is True

    @pytest.mark.asyncio
    async def test_merge_keeps_unrelated_keys(self, wurd):
        """Test loading merges into an existing namespace."""
        request = make_request()
        setattr(request.state, CONTENT_NAMESPACE, {"other": {"kept": True}})

        namespace = await wurd.middleware(["home", "about"])(request)

        assert set(namespace) == {"other", "home", "about"}
        assert request.state.wurd is namespace

    def test_namespace_created_when_absent(self):
        """Test the namespace is created on first use."""
        request = make_request()

        namespace = get_content_namespace(request)

        assert namespace == {}
        assert get_content_namespace(request) is namespace

    @pytest.mark.asyncio
    async def test_request_language_wins(self):
        """Test a detected request language beats adapter and instance languages."""
        wurd = MagicMock()
        wurd.options.language = "default"
        wurd.load = AsyncMock(return_value={})

        request = make_request()
        request.state.language = "fr"
        await content_dependency(wurd, "home", language="en")(request)
        wurd.load.assert_called_with("home", language="fr")

        await content_dependency(wurd, "home", language="en")(make_request())
        wurd.load.assert_called_with("home", language="en")

        await content_dependency(wurd, "home")(make_request())
        wurd.load.assert_called_with("home", language="default")

    def test_language_from_detection_middleware(self, wurd, api):
        """Test the language detection middleware drives the fetched language."""
        app = build_app(wurd)
        app.add_middleware(LanguageDetectionMiddleware, supported_languages=["en", "fr"])
        client = TestClient(app)

        response = client.get("/?lang=fr")

        assert response.status_code == 200
        assert response.json()["namespace"]["home"]["title"] == "Bienvenue"
        assert {request.url.params["lang"] for request in api.requests} == {"fr"}

    def test_remote_error_rendered_as_error_response(self):
        """Test upstream failures reach the exception handler."""
        api = FakeContentApi(status_code=500, payload={"message": "Boom"})
        wurd = Wurd(
            "acme-site",
            cache=ContentCache(60.0),
            config=WurdConfig(api_url="https://api.wurd.test"),
            http_client=api.client(),
        )
        client = TestClient(build_app(wurd))

        response = client.get("/")

        assert response.status_code == 502
        body = response.json()
        assert body["code"] == "REMOTE_ERROR"
        assert body["message"] == "Boom"
        assert body["details"]["status_code"] == 500

    def test_authorization_error_rendered(self):
        """Test a rejected app surfaces as an authorization error."""
        api = FakeContentApi(status_code=401, payload={"error": "Unknown app"})
        wurd = Wurd(
            "unknown",
            cache=ContentCache(60.0),
            config=WurdConfig(api_url="https://api.wurd.test"),
            http_client=api.client(),
        )
        client = TestClient(build_app(wurd))

        response = client.get("/")

        assert response.status_code == 502
        assert response.json()["code"] == "AUTHORIZATION_ERROR"


class TestParamAdapter:
    """Test cases for Wurd.load_by_param."""

    def test_content_stored_under_page_and_param_name(self, wurd):
        """Test the page lands under its own name and the parameter name."""
        client = TestClient(build_app(wurd))

        response = client.get("/about")

        assert response.status_code == 200
        data = response.json()
        assert data["content"] == {"title": "About us", "text": "We make things"}
        assert data["namespace"]["about"] == data["content"]
        assert data["namespace"]["page"] == data["content"]
        assert "common" in data["namespace"]

    def test_content_name_overrides_output_key(self, wurd):
        """Test content_name picks the output key."""
        client = TestClient(build_app(wurd))

        response = client.get("/docs/contact")

        data = response.json()
        assert data["namespace"]["doc"] == {"title": "Contact", "email": "hello@acme.test"}
        assert data["namespace"]["contact"] == data["namespace"]["doc"]
        assert "slug" not in data["namespace"]

    def test_missing_page_falls_through_to_404(self, wurd):
        """Test a page the API does not know gives the router's plain 404."""
        client = TestClient(build_app(wurd))

        response = client.get("/nonexistent")

        assert response.status_code == 404
        assert response.json() == {"detail": "Not Found"}

    def test_missing_page_uses_alternate_handler(self, wurd):
        """Test the not-found handler receives the fall-through."""
        async def not_found(request, exc):
            return JSONResponse(status_code=404, content={"missing": exc.page})

        client = TestClient(build_app(wurd, not_found_handler=not_found))

        response = client.get("/nonexistent")

        assert response.status_code == 404
        assert response.json() == {"missing": "nonexistent"}

    @pytest.mark.asyncio
    async def test_missing_path_param(self, wurd):
        """Test a route without the parameter falls through."""
        with pytest.raises(PageNotFound):
            await wurd.load_by_param("page")(make_request())

    @pytest.mark.asyncio
    async def test_other_errors_propagate(self, wurd):
        """Test non-404 remote errors are not turned into fall-through."""
        wurd.load = AsyncMock(side_effect=RemoteError(500, {"message": "Boom"}))

        with pytest.raises(RemoteError):
            await wurd.load_by_param("page")(make_request(path_params={"page": "about"}))

    @pytest.mark.asyncio
    async def test_page_absent_from_response(self, wurd):
        """Test a successful response without the page still falls through."""
        wurd.load = AsyncMock(return_value={})

        with pytest.raises(PageNotFound) as exc_info:
            await wurd.load_by_param("page")(make_request(path_params={"page": "about"}))

        assert exc_info.value.page == "about"

    @pytest.mark.asyncio
    async def test_existing_namespace_key_does_not_hide_missing_page(self, wurd):
        """Test a page key set by earlier content does not count as loaded."""
        wurd.load = AsyncMock(return_value={})
        request = make_request(path_params={"page": "about"})
        setattr(request.state, CONTENT_NAMESPACE, {"about": {"title": "From common content"}})

        with pytest.raises(PageNotFound):
            await wurd.load_by_param("page")(request)

        assert "page" not in request.state.wurd
