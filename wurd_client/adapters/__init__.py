"""
Adapters package for the Wurd client.

Contains the HTTP client for the remote content API. The adapter
encapsulates:

- Base URL and request shape (batched page names, draft/lang parameters)
- Mapping of error statuses onto shared errors
- Writing successful responses into the content cache

No retries: a failed fetch surfaces to the caller immediately.
"""

from .content_api_client import ContentApiClient

__all__ = ["ContentApiClient"]
