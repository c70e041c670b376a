"""
Observability — Logging and metrics for validation runs.

Provides:
- Structured logging with per-run IDs
- Metrics collection (counters, gauges, histograms)
"""

from doa.observability.logging import (
    get_run_id,
    configure_logging,
    get_logger,
    RunContext,
    RunIdFilter,
    JSONFormatter,
    ReadableFormatter,
)
from doa.observability.metrics import (
    Counter,
    Gauge,
    Histogram,
    MetricsRegistry,
    get_metrics,
    reset_metrics,
)

__all__ = [
    # Logging
    "get_run_id",
    "configure_logging",
    "get_logger",
    "RunContext",
    "RunIdFilter",
    "JSONFormatter",
    "ReadableFormatter",
    # Metrics
    "Counter",
    "Gauge",
    "Histogram",
    "MetricsRegistry",
    "get_metrics",
    "reset_metrics",
]
