"""
Example site: shared content on every page, per-route content and a
catch-all route that serves any page by name.
"""

from html import escape
from typing import Any, Dict, Optional

from fastapi import Depends, FastAPI, Request
from fastapi.responses import HTMLResponse

from shared.config import get_config
from shared.logging import configure_logging
from shared.metrics import get_metrics_collector
from wurd_client import Wurd, install_exception_handlers, t


def render(content: Dict[str, Any], title_path: str, body_path: str) -> HTMLResponse:
    """Minimal page layout around loaded content."""
    return HTMLResponse(
        "<html><head><title>{brand}</title></head><body>"
        "<nav>{brand} | <a href=\"/\">{home}</a> | <a href=\"/about\">{about}</a></nav>"
        "<h1>{title}</h1><p>{body}</p></body></html>".format(
            brand=escape(str(t(content, "common.brand"))),
            home=escape(str(t(content, "common.nav.home", "Home"))),
            about=escape(str(t(content, "common.nav.about", "About"))),
            title=escape(str(t(content, title_path))),
            body=escape(str(t(content, body_path, ""))),
        )
    )


def create_app(wurd: Optional[Wurd] = None) -> FastAPI:
    """Create the example application."""
    config = get_config()
    wurd = wurd or Wurd.connect(
        "wurd-example-simple",
        # Draft changes show up instantly, without publishing
        draft=config.env == "development",
        preload=["common"],
        metrics=get_metrics_collector(),
    )

    # Common content is loaded for every route
    app = FastAPI(title="Wurd simple example", dependencies=[Depends(wurd.middleware("common"))])
    install_exception_handlers(app)

    @app.on_event("startup")
    async def _startup():
        await wurd.warmup()

    @app.get("/", response_class=HTMLResponse)
    async def home(content: dict = Depends(wurd.middleware("home"))):
        return render(content, "home.title", "home.intro")

    # One template serves any page, content is loaded by name
    @app.get("/{page}", response_class=HTMLResponse)
    async def text_page(request: Request, _: dict = Depends(wurd.load_by_param("page"))):
        return render(request.state.wurd, "page.title", "page.text")

    return app


if __name__ == "__main__":
    import uvicorn

    configure_logging("wurd.example.simple", get_config().log_level)
    uvicorn.run(create_app(), host="0.0.0.0", port=3000)
