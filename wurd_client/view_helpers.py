"""
Template helpers for reading loaded content.
"""

from typing import Any, Mapping, Optional

from shared.logging import get_logger

logger = get_logger("wurd.view_helpers")

_MISSING = object()


def _get_path(content: Any, path: str) -> Any:
    value = content
    for key in path.split("."):
        if isinstance(value, Mapping):
            value = value.get(key, _MISSING)
        elif isinstance(value, (list, tuple)) and key.isdigit() and int(key) < len(value):
            value = value[int(key)]
        else:
            return _MISSING
        if value is _MISSING:
            return _MISSING
    return value


def t(content: Optional[Mapping[str, Any]], path: str, default: Any = None) -> Any:
    """
    Look up a dotted path such as ``"main.nav.brand"`` in loaded content.

    Args:
        content: The request's content namespace (``request.state.wurd``)
        path: Dot-separated keys; numeric parts index into lists
        default: Returned when the value is missing or empty; the path itself when not given

    Returns:
        The content at ``path`` or the fallback
    """
    fallback = default or path

    if content is None:
        logger.error("Content has not been loaded", path=path)
        return fallback

    value = _get_path(content, path)
    if value is _MISSING or not value:
        return fallback
    return value
