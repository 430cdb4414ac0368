"""Prometheus metrics for storage and trip synchronization."""

from prometheus_client import Counter, Histogram

# Storage metrics
storage_latency_ms = Histogram(
    "storage_latency_ms",
    "Document store operation latency in milliseconds",
    ["backend", "op"],
    buckets=[1, 5, 10, 50, 100, 200, 500, 1000, 2000, 4000],
)

storage_ops_total = Counter(
    "storage_ops_total",
    "Total document store operations",
    ["backend", "op", "outcome"],
)

storage_fallbacks_total = Counter(
    "storage_fallbacks_total",
    "Total operations served by the local cache after a primary failure",
    ["op"],
)

# Synchronizer metrics
trip_sync_writes_total = Counter(
    "trip_sync_writes_total",
    "Total debounced write-throughs of the live trip",
    ["outcome"],
)

trip_sync_coalesced_total = Counter(
    "trip_sync_coalesced_total",
    "Total pending writes superseded by a newer mutation",
)


class PrometheusStorageMetrics:
    """Prometheus-based storage metrics implementation."""

    def record_op(self, backend: str, op: str, outcome: str, latency_ms: float) -> None:
        """Record one store operation."""
        storage_latency_ms.labels(backend=backend, op=op).observe(latency_ms)
        storage_ops_total.labels(backend=backend, op=op, outcome=outcome).inc()

    def inc_fallback(self, op: str) -> None:
        """Increment fallback counter."""
        storage_fallbacks_total.labels(op=op).inc()

    def inc_sync_write(self, outcome: str) -> None:
        """Increment write-through counter."""
        trip_sync_writes_total.labels(outcome=outcome).inc()

    def inc_coalesced(self) -> None:
        """Increment superseded-write counter."""
        trip_sync_coalesced_total.inc()
