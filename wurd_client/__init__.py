"""
Wurd content client.

Loads page content from the Wurd content API, caches published content in
memory and exposes it to FastAPI request handlers.
"""

from shared import __version__
from .client import ClientOptions, Wurd, connect
from .domain.content_middleware import install_exception_handlers
from .domain.language import LanguageDetectionMiddleware
from .view_helpers import t

__all__ = [
    "ClientOptions",
    "LanguageDetectionMiddleware",
    "Wurd",
    "__version__",
    "connect",
    "install_exception_handlers",
    "t",
]
