"""Metrics collection for the catalog search service.

Provides a thin convenience wrapper around ``prometheus_client`` so HTTP and
catalog store activity is recorded with consistent label sets.

Design notes
- Metrics and labels are predeclared to avoid cardinality explosions
- A single registry is kept per service (can be injected for testing)
"""

from typing import Optional

from prometheus_client import CollectorRegistry, Counter, Histogram, generate_latest
import structlog

logger = structlog.get_logger("metrics")


class MetricsCollector:
    """Centralized metrics collection.

    Parameters
    - service_name: Logical name of the service owning the registry
    - registry: Optional custom ``CollectorRegistry`` (e.g. for testing)
    """

    def __init__(self, service_name: str, registry: Optional[CollectorRegistry] = None):
        self.service_name = service_name
        self.registry = registry or CollectorRegistry()

        self.request_count = Counter(
            'http_requests_total',
            'Total HTTP requests',
            ['method', 'endpoint', 'status'],
            registry=self.registry
        )

        self.request_duration = Histogram(
            'http_request_duration_seconds',
            'HTTP request duration',
            ['method', 'endpoint'],
            registry=self.registry
        )

        self.store_operations = Counter(
            'catalog_store_operations_total',
            'Total catalog store operations partitioned by outcome.',
            ['operation', 'outcome'],
            registry=self.registry
        )

        self.store_duration = Histogram(
            'catalog_store_operation_duration_seconds',
            'Catalog store operation duration',
            ['operation'],
            registry=self.registry
        )

        self.search_results = Histogram(
            'catalog_search_results',
            'Number of products returned per search',
            buckets=(0, 1, 5, 10, 25, 50, 100),
            registry=self.registry
        )

    def record_http_request(
        self,
        method: str,
        endpoint: str,
        status: int,
        duration: float
    ) -> None:
        """Record HTTP request metrics.

        duration is expected in seconds to match Prometheus histogram units.
        """
        self.request_count.labels(method=method, endpoint=endpoint, status=status).inc()
        self.request_duration.labels(method=method, endpoint=endpoint).observe(duration)

    def record_store_operation(
        self,
        operation: str,
        outcome: str,
        duration: float
    ) -> None:
        """Record a catalog store call.

        ``outcome`` is ``success`` or the error class name.
        """
        self.store_operations.labels(operation=operation, outcome=outcome).inc()
        self.store_duration.labels(operation=operation).observe(duration)

    def record_search_results(self, count: int) -> None:
        """Record how many products a search returned."""
        self.search_results.observe(count)

    def get_metrics(self) -> str:
        """Get metrics in Prometheus exposition format for scraping."""
        return generate_latest(self.registry).decode('utf-8')


_metrics_collector: Optional[MetricsCollector] = None


def get_metrics_collector(service_name: str) -> MetricsCollector:
    """Get or create metrics collector for a service.

    Returns a process-wide singleton to avoid duplicate collectors/labels.
    """
    global _metrics_collector
    if _metrics_collector is None:
        _metrics_collector = MetricsCollector(service_name)
        logger.info("Metrics collector created", service=service_name)
    return _metrics_collector
