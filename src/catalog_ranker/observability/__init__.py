"""Observability module for OpenTelemetry-aligned tracing, metrics, and logging."""

from catalog_ranker.observability.context import (
    bind_snapshot,
    bind_span,
    current_snapshot,
    get_trace_context,
    restore_trace_context,
    set_trace_context,
    trace_context,
)
from catalog_ranker.observability.logging import JsonFormatter, configure_logging, configure_logging_from_settings
from catalog_ranker.observability.metrics import (
    CATALOG_FIT_LATENCY,
    CATALOG_ITEM_COUNT,
    RANKING_LATENCY,
    RANKING_REQUESTS,
    RANKING_RESULT_COUNT,
    get_metrics,
    get_metrics_content_type,
    init_metrics,
    track_latency,
)
from catalog_ranker.observability.tracing import create_span, get_tracer, init_tracing


__all__ = [
    "CATALOG_FIT_LATENCY",
    "CATALOG_ITEM_COUNT",
    "RANKING_LATENCY",
    "RANKING_REQUESTS",
    "RANKING_RESULT_COUNT",
    "JsonFormatter",
    "bind_snapshot",
    "bind_span",
    "configure_logging",
    "configure_logging_from_settings",
    "create_span",
    "current_snapshot",
    "get_metrics",
    "get_metrics_content_type",
    "get_trace_context",
    "get_tracer",
    "init_metrics",
    "init_tracing",
    "restore_trace_context",
    "set_trace_context",
    "trace_context",
    "track_latency",
]
