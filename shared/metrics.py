"""
Shared metrics configuration for the Wurd content client.
"""

from prometheus_client import Counter, Histogram, CollectorRegistry, REGISTRY
from typing import Dict, Any, Optional
import threading


class MetricsCollector:
    """Prometheus metrics for content cache lookups and API fetches."""

    def __init__(self, registry: Optional[CollectorRegistry] = None):
        self.registry = registry if registry is not None else REGISTRY
        self._metrics: Dict[str, Any] = {}
        self._setup_metrics()

    def _setup_metrics(self):
        """Set up client metrics."""

        self._metrics["wurd_cache_lookups_total"] = Counter(
            "wurd_cache_lookups_total",
            "Content cache lookups",
            ["result"],
            registry=self.registry
        )

        self._metrics["wurd_fetch_requests_total"] = Counter(
            "wurd_fetch_requests_total",
            "Requests sent to the content API",
            ["status"],
            registry=self.registry
        )

        self._metrics["wurd_fetch_pages_total"] = Counter(
            "wurd_fetch_pages_total",
            "Pages requested from the content API",
            registry=self.registry
        )

        self._metrics["wurd_fetch_duration_seconds"] = Histogram(
            "wurd_fetch_duration_seconds",
            "Content API request duration in seconds",
            registry=self.registry
        )

    def get_metric(self, name: str):
        """Get a metric by name."""
        return self._metrics.get(name)

    def increment_counter(self, metric_name: str, amount: float = 1, **labels):
        """Increment a counter metric."""
        metric = self._metrics.get(metric_name)
        if metric is None:
            return
        if labels:
            metric = metric.labels(**labels)
        metric.inc(amount)

    def observe_histogram(self, metric_name: str, value: float, **labels):
        """Observe a histogram metric."""
        metric = self._metrics.get(metric_name)
        if metric is None:
            return
        if labels:
            metric = metric.labels(**labels)
        metric.observe(value)


_collector: Optional[MetricsCollector] = None
_collector_lock = threading.Lock()


def get_metrics_collector() -> MetricsCollector:
    """Get the process-wide collector registered on the default registry."""
    global _collector
    with _collector_lock:
        if _collector is None:
            _collector = MetricsCollector()
        return _collector
