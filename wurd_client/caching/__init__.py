"""
Content caching package.

Holds the in-memory page cache shared by client instances. Entries are
short-lived and idempotent (same page and language always map to the same
upstream content), so concurrent writers simply overwrite each other.
"""

from .content_cache import CacheEntry, ContentCache, default_cache

__all__ = ["CacheEntry", "ContentCache", "default_cache"]
