"""
Domain package for the Wurd client.

- content_loader: cache-first, batched loading of page content
- content_middleware: FastAPI dependencies and exception handlers
- language: request language detection
"""

from .content_loader import ContentLoader, ContentOptions, normalize_pages
from .content_middleware import (
    CONTENT_NAMESPACE,
    content_dependency,
    get_content_namespace,
    install_exception_handlers,
    param_content_dependency,
)
from .language import LanguageDetectionMiddleware, parse_accept_language, resolve_language

__all__ = [
    "CONTENT_NAMESPACE",
    "ContentLoader",
    "ContentOptions",
    "LanguageDetectionMiddleware",
    "content_dependency",
    "get_content_namespace",
    "install_exception_handlers",
    "normalize_pages",
    "param_content_dependency",
    "parse_accept_language",
    "resolve_language",
]
