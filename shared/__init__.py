"""
Shared utilities for the Wurd content client.

This package aggregates the cross-cutting building blocks used by
``wurd_client``, the mock content API and the scripts:

- config: Client configuration via pydantic-settings
- logging: Structured logging with trace correlation
- metrics: Prometheus metrics helpers
- errors: Canonical error types and responses
- test_helpers: Factories shared by the test suites

Nothing in here may import from ``wurd_client``.
"""

__version__ = "1.0.0"
