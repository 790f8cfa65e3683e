"""
Mock Wurd content API serving published and draft page content.
"""

from typing import Dict, Any, List, Optional

from fastapi import FastAPI, Query
from fastapi.responses import JSONResponse

from shared.logging import get_logger


class MockContentApiServer:
    """Mock content API implementation."""

    def __init__(self, port: int = 8090, apps: Optional[Dict[str, Dict[str, Any]]] = None):
        self.port = port
        self.logger = get_logger("mock.content_api")
        self.app = FastAPI(title="Mock Wurd Content API", version="1.0.0")

        # app -> {"published"|"draft": {language: {page: content}}}
        self.apps = apps if apps is not None else self._default_apps()
        self.request_log: List[Dict[str, Any]] = []

        self._setup_routes()

    @staticmethod
    def _default_apps() -> Dict[str, Dict[str, Any]]:
        common = {
            "default": {"brand": "Wurd Example", "nav": {"home": "Home", "about": "About"}},
            "fr": {"brand": "Exemple Wurd", "nav": {"home": "Accueil", "about": "A propos"}},
            "es": {"brand": "Ejemplo Wurd", "nav": {"home": "Inicio", "about": "Acerca de"}},
        }
        return {
            "wurd-example-simple": {
                "published": {
                    "default": {
                        "common": common["default"],
                        "home": {"title": "Welcome", "intro": "Content managed with Wurd"},
                        "about": {"title": "About", "text": "All text on this site is editable"},
                        "terms": {"title": "Terms", "text": "Be nice"},
                    },
                },
                "draft": {
                    "default": {
                        "home": {"title": "Welcome (draft)", "intro": "Content managed with Wurd"},
                    },
                },
            },
            "wurd-example-languages": {
                "published": {
                    language: {
                        "common": common[language],
                        "langs": {"en": "English", "fr": "Francais", "es": "Espanol"},
                        "main": {
                            "default": {"title": "Hello"},
                            "fr": {"title": "Bonjour"},
                            "es": {"title": "Hola"},
                        }[language],
                    }
                    for language in ("default", "fr", "es")
                },
                "draft": {},
            },
        }

    def _setup_routes(self):
        """Set up mock content API routes."""

        @self.app.get("/")
        async def root():
            return {"service": "Mock Wurd Content API", "apps": sorted(self.apps)}

        @self.app.get("/v2/content/{app_name}/{pages}")
        async def get_content(
            app_name: str,
            pages: str,
            draft: Optional[str] = Query(None),
            lang: Optional[str] = Query(None),
        ):
            page_names = [page for page in pages.split(",") if page]
            is_draft = draft == "1"
            self.request_log.append({"app": app_name, "pages": page_names, "lang": lang, "draft": is_draft})

            app_content = self.apps.get(app_name)
            if app_content is None:
                self.logger.warning("Unknown app", app=app_name)
                return JSONResponse(status_code=401, content={"error": "Unauthorized", "app": app_name})

            content = self._lookup(app_content, page_names, lang or "default", is_draft)
            missing = [page for page in page_names if page not in content]
            if missing:
                return JSONResponse(status_code=404, content={"error": "Page not found", "pages": missing})

            self.logger.info("Serving content", app=app_name, pages=page_names, lang=lang, draft=is_draft)
            return content

    @staticmethod
    def _lookup(app_content: Dict[str, Any], pages: List[str], language: str, draft: bool) -> Dict[str, Any]:
        published = app_content["published"]
        by_language = published.get(language) or published.get("default", {})
        drafts = app_content.get("draft", {}).get(language, {}) if draft else {}

        result = {}
        for page in pages:
            if page in drafts:
                result[page] = drafts[page]
            elif page in by_language:
                result[page] = by_language[page]
        return result


def create_app():
    """Create mock content API application."""
    server = MockContentApiServer()
    return server.app


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(create_app(), host="0.0.0.0", port=8090)
