"""
Example site serving content in the visitor's language.

The language comes from ``?lang=xx`` (remembered in a cookie), then the
browser's Accept-Language header, then English.
"""

from html import escape
from typing import Optional

from fastapi import Depends, FastAPI
from fastapi.responses import HTMLResponse

from shared.config import get_config
from shared.logging import configure_logging
from shared.metrics import get_metrics_collector
from wurd_client import LanguageDetectionMiddleware, Wurd, install_exception_handlers, t

SUPPORTED_LANGUAGES = ["en", "fr", "es"]


def create_app(wurd: Optional[Wurd] = None) -> FastAPI:
    """Create the example application."""
    config = get_config()
    wurd = wurd or Wurd(
        "wurd-example-languages",
        draft=config.env == "development",
        metrics=get_metrics_collector(),
    )

    app = FastAPI(title="Wurd languages example")
    app.add_middleware(LanguageDetectionMiddleware, supported_languages=SUPPORTED_LANGUAGES)
    install_exception_handlers(app)

    @app.get("/", response_class=HTMLResponse)
    async def main(content: dict = Depends(wurd.middleware(["langs", "main", "common"]))):
        links = " | ".join(
            f"<a href=\"/?lang={escape(code)}\">{escape(str(t(content, f'langs.{code}', code)))}</a>"
            for code in ("en", "fr", "es")
        )
        return HTMLResponse(
            f"<html><body><nav>{links}</nav>"
            f"<h1>{escape(str(t(content, 'main.title')))}</h1>"
            f"<p>{escape(str(t(content, 'common.brand')))}</p></body></html>"
        )

    return app


if __name__ == "__main__":
    import uvicorn

    configure_logging("wurd.example.languages", get_config().log_level)
    uvicorn.run(create_app(), host="0.0.0.0", port=3000)
