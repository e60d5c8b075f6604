"""
Monitoring and metrics collection for the hop crawler.
"""

import logging
import time
from typing import Any, Dict

from prometheus_client import CollectorRegistry, Counter, Gauge, Histogram, start_http_server


class MetricsCollector:
    """Holds the crawler's Prometheus metrics in a private registry."""

    def __init__(self, enable_server: bool = False, prometheus_port: int = 8000):
        self.logger = logging.getLogger(__name__)
        self.enable_server = enable_server
        self.prometheus_port = prometheus_port
        self.registry = CollectorRegistry()

        self.pages_visited = Counter(
            'crawler_pages_visited_total',
            'Pages fetched with status 200',
            registry=self.registry
        )
        self.redirects = Counter(
            'crawler_redirects_total',
            'Redirect responses received',
            registry=self.registry
        )
        self.errors = Counter(
            'crawler_errors_total',
            'Crawl errors',
            ['error_type'],
            registry=self.registry
        )
        self.retries = Counter(
            'crawler_retries_total',
            'Server errors queued for another attempt',
            registry=self.registry
        )
        self.retry_cap_skips = Counter(
            'crawler_retry_cap_skips_total',
            'Iterations skipped because the retry cap was reached',
            registry=self.registry
        )
        self.response_time = Histogram(
            'crawler_response_time_seconds',
            'Response time for HTTP requests',
            registry=self.registry
        )
        self.frontier_size = Gauge(
            'crawler_frontier_size',
            'Number of URLs in the frontier',
            registry=self.registry
        )
        self.visited_size = Gauge(
            'crawler_visited_size',
            'Number of URLs in the visited set',
            registry=self.registry
        )

    def start_server(self):
        """Start the Prometheus metrics HTTP server if enabled."""
        if not self.enable_server:
            return

        start_http_server(self.prometheus_port, registry=self.registry)
        self.logger.info(f"Prometheus metrics server started on port {self.prometheus_port}")

    def get_current_values(self) -> Dict[str, float]:
        """Get current values of all samples, keyed by sample name and labels."""
        values = {}
        for metric in self.registry.collect():
            for sample in metric.samples:
                if sample.name.endswith('_created'):
                    continue
                key = sample.name
                if sample.labels:
                    labels = ','.join(f"{k}={v}" for k, v in sorted(sample.labels.items()))
                    key = f"{key}{{{labels}}}"
                values[key] = sample.value
        return values


class CrawlerMonitor:
    """High-level monitoring interface for the crawler."""

    def __init__(self, metrics_collector: MetricsCollector):
        self.metrics = metrics_collector
        self.start_time = time.time()

    def record_page_visited(self, response_time: float):
        self.metrics.pages_visited.inc()
        self.metrics.response_time.observe(response_time)

    def record_redirect(self):
        self.metrics.redirects.inc()

    def record_error(self, error_type: str):
        self.metrics.errors.labels(error_type=error_type).inc()

    def record_retry(self):
        self.metrics.retries.inc()

    def record_retry_cap_skip(self):
        self.metrics.retry_cap_skips.inc()

    def update_sizes(self, frontier_size: int, visited_size: int):
        self.metrics.frontier_size.set(frontier_size)
        self.metrics.visited_size.set(visited_size)

    def get_summary(self) -> Dict[str, Any]:
        """Get a summary of all metrics."""
        return {
            'runtime_seconds': time.time() - self.start_time,
            'metrics': self.metrics.get_current_values()
        }


def initialize_monitoring(enable_server: bool = False, prometheus_port: int = 8000) -> CrawlerMonitor:
    """Create a monitor, starting the exposition server when enabled."""
    metrics_collector = MetricsCollector(enable_server, prometheus_port)
    metrics_collector.start_server()
    return CrawlerMonitor(metrics_collector)
