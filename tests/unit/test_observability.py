"""Unit tests for observability module."""

import json
import logging
import sys

import numpy as np
from opentelemetry import trace as trace_api
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import SimpleSpanProcessor
from opentelemetry.sdk.trace.export.in_memory_span_exporter import InMemorySpanExporter
from opentelemetry.trace import StatusCode
from prometheus_client import REGISTRY, Counter
import pytest

from catalog_ranker.observability import (
    RANKING_LATENCY,
    JsonFormatter,
    bind_snapshot,
    configure_logging,
    configure_logging_from_settings,
    create_span,
    current_snapshot,
    get_metrics,
    get_metrics_content_type,
    get_trace_context,
    init_metrics,
    init_tracing,
    metrics as metrics_module,
    set_trace_context,
    track_latency,
)
from catalog_ranker.observability.context import bind_span, restore_trace_context, trace_context
from catalog_ranker.observability.metrics import MetricBridge
from catalog_ranker.ranking import RecommendationEngine


def _record(msg: str = "test message", level: int = logging.INFO) -> logging.LogRecord:
    return logging.LogRecord(
        name="catalog_ranker.ranking.engine",
        level=level,
        pathname="engine.py",
        lineno=1,
        msg=msg,
        args=(),
        exc_info=None,
    )


class _SnapshotCapture(logging.Handler):
    def __init__(self) -> None:
        super().__init__()
        self.snapshots: list[str | None] = []

    def emit(self, record: logging.LogRecord) -> None:
        self.snapshots.append(current_snapshot())


@pytest.fixture(autouse=True)
def reset_trace_context():
    token = trace_context.set(None)
    yield
    trace_context.reset(token)


@pytest.mark.unit
class TestJsonFormatter:
    """Tests for structured JSON logging."""

    def test_format_includes_trace_context(self):
        data = json.loads(JsonFormatter().format(_record()))

        assert data["message"] == "test message"
        assert data["level"] == "INFO"
        assert data["component"] == "engine"
        assert "timestamp" in data
        assert len(data["trace_id"]) == 32
        assert len(data["span_id"]) == 16

    def test_format_includes_extra_fields(self):
        record = _record()
        record.items = 42
        record.vocabulary_size = np.int64(7)

        data = json.loads(JsonFormatter().format(record))

        assert data["items"] == 42
        assert data["vocabulary_size"] == 7
        assert "pathname" not in data

    def test_format_includes_snapshot_from_context(self):
        set_trace_context("aa" * 16, "bb" * 8, snapshot="abc123")

        data = json.loads(JsonFormatter().format(_record()))

        assert data["snapshot"] == "abc123"
        assert data["trace_id"] == "aa" * 16

    def test_format_truncates_and_redacts(self):
        record = _record("x" * 5000)
        record.api_key = "secret"
        record.query = "q" * 900

        data = json.loads(JsonFormatter().format(record))

        assert data["message"].endswith("...")
        assert len(data["message"]) == JsonFormatter.MAX_MESSAGE_LEN + 3
        assert data["api_key"] == "[REDACTED]"
        assert len(data["query"]) == 503

    def test_format_includes_exception(self):
        try:
            raise ValueError("boom")
        except ValueError:
            record = logging.LogRecord("catalog_ranker", logging.ERROR, "x.py", 1, "failed", (), sys.exc_info())

        data = json.loads(JsonFormatter().format(record))

        assert "ValueError: boom" in data["exception"]

    def test_json_default_handles_set_bytes_and_numpy(self):
        formatter = JsonFormatter()

        assert formatter._json_default({3, 1, 2}) == [1, 2, 3]
        assert formatter._json_default(b"ok") == "ok"
        assert formatter._json_default(np.float64(0.5)) == 0.5

    def test_json_default_summarizes_large_arrays(self):
        formatter = JsonFormatter()

        assert formatter._json_default(np.arange(3)) == [0, 1, 2]
        assert formatter._json_default(np.zeros((2, 40))) == {"shape": [2, 40], "dtype": "float64"}

    def test_json_default_handles_unorderable_set(self):
        value = JsonFormatter()._json_default({1, "a"})

        assert isinstance(value, list)
        assert len(value) == 2


@pytest.mark.unit
class TestTraceContext:
    """Tests for trace context propagation."""

    def test_get_trace_context_generates_ids(self):
        ctx = get_trace_context()

        assert len(ctx["trace_id"]) == 32
        assert len(ctx["span_id"]) == 16
        assert get_trace_context() is ctx

    def test_bind_span_keeps_extra_fields_and_restores(self):
        set_trace_context("aa" * 16, "bb" * 8, snapshot="s1")

        token = bind_span("dd" * 16, "cc" * 8)
        ctx = get_trace_context()
        assert ctx["trace_id"] == "dd" * 16
        assert ctx["span_id"] == "cc" * 8
        assert ctx["snapshot"] == "s1"

        restore_trace_context(token)
        assert get_trace_context()["span_id"] == "bb" * 8

    def test_bind_snapshot_keeps_trace_ids(self):
        ctx = get_trace_context()

        token = bind_snapshot("snap-1")

        assert current_snapshot() == "snap-1"
        assert get_trace_context()["trace_id"] == ctx["trace_id"]
        restore_trace_context(token)
        assert current_snapshot() is None

    def test_no_snapshot_outside_queries(self):
        assert current_snapshot() is None

    def test_ranking_query_tags_logs_with_snapshot_then_clears_it(self, phone_catalog):
        engine = RecommendationEngine(phone_catalog)
        handler = _SnapshotCapture()
        engine_logger = logging.getLogger("catalog_ranker.ranking.engine")
        level = engine_logger.level
        engine_logger.addHandler(handler)
        engine_logger.setLevel(logging.DEBUG)
        try:
            engine.get_recommendations("Samsung")
        finally:
            engine_logger.removeHandler(handler)
            engine_logger.setLevel(level)

        assert handler.snapshots == [engine.snapshot.snapshot_id]
        assert current_snapshot() is None


@pytest.mark.unit
class TestMetrics:
    def test_get_metrics_returns_bytes(self):
        output = get_metrics()

        assert isinstance(output, bytes)
        assert b"ranking_latency_seconds" in output

    def test_get_metrics_content_type(self):
        assert get_metrics_content_type() == metrics_module.CONTENT_TYPE_LATEST

    def test_track_latency_records_histogram(self):
        labels = {"engine": "latency-test"}

        with track_latency(RANKING_LATENCY, **labels):
            pass

        assert REGISTRY.get_sample_value("ranking_latency_seconds_count", labels) == 1

    def test_track_latency_records_on_error(self):
        labels = {"engine": "latency-error-test"}

        with pytest.raises(RuntimeError), track_latency(RANKING_LATENCY, **labels):
            raise RuntimeError("fail")

        assert REGISTRY.get_sample_value("ranking_latency_seconds_count", labels) == 1

    def test_init_metrics_is_idempotent(self):
        assert init_metrics() is init_metrics()

    def test_bridge_rejects_unknown_kind(self):
        prom = Counter("bridge_kind_test_total", "test", ["engine"])
        bridge = MetricBridge(prom, otel_name="bridge_kind_test", otel_description="test", otel_kind="summary")

        with pytest.raises(ValueError, match="Unknown metric kind"):
            bridge.labels(engine="x").inc()


@pytest.mark.unit
class TestTracing:
    @staticmethod
    def _setup_exporter() -> InMemorySpanExporter:
        exporter = InMemorySpanExporter()
        provider = trace_api.get_tracer_provider()
        if not isinstance(provider, TracerProvider):
            provider = init_tracing("test-service")
        provider.add_span_processor(SimpleSpanProcessor(exporter))
        return exporter

    def test_create_span_records_attributes_and_span_id(self):
        exporter = self._setup_exporter()

        with create_span("unit.span", attributes={"catalog.items": 3}):
            inside = dict(get_trace_context())

        spans = [s for s in exporter.get_finished_spans() if s.name == "unit.span"]
        assert len(spans) == 1
        assert spans[0].attributes["catalog.items"] == 3
        assert inside["span_id"] == format(spans[0].context.span_id, "016x")
        assert inside["trace_id"] == format(spans[0].context.trace_id, "032x")

    def test_create_span_restores_outer_context(self):
        self._setup_exporter()
        set_trace_context("aa" * 16, "bb" * 8, snapshot="s1")

        with create_span("unit.nested"):
            assert get_trace_context()["snapshot"] == "s1"

        ctx = get_trace_context()
        assert ctx["trace_id"] == "aa" * 16
        assert ctx["span_id"] == "bb" * 8

    def test_json_log_carries_span_ids(self):
        exporter = self._setup_exporter()

        with create_span("unit.logged"):
            data = json.loads(JsonFormatter().format(_record()))

        span = next(s for s in exporter.get_finished_spans() if s.name == "unit.logged")
        assert data["span_id"] == format(span.context.span_id, "016x")
        assert data["trace_id"] == format(span.context.trace_id, "032x")

    def test_create_span_marks_error(self):
        exporter = self._setup_exporter()

        with pytest.raises(ValueError, match="boom"), create_span("unit.failing"):
            raise ValueError("boom")

        spans = [s for s in exporter.get_finished_spans() if s.name == "unit.failing"]
        assert spans[0].status.status_code == StatusCode.ERROR

    def test_engine_emits_fit_and_query_spans(self, phone_catalog):
        exporter = self._setup_exporter()

        engine = RecommendationEngine(phone_catalog)
        engine.get_recommendations("Samsung")

        names = [s.name for s in exporter.get_finished_spans()]
        assert "catalog.fit" in names
        assert "ranking.query" in names


@pytest.mark.unit
class TestConfigureLogging:
    """Tests for logging configuration."""

    @pytest.fixture(autouse=True)
    def restore_root_logger(self):
        root = logging.getLogger()
        handlers = root.handlers[:]
        level = root.level
        yield
        root.handlers[:] = handlers
        root.setLevel(level)

    def test_configure_logging_sets_level_and_json_handler(self):
        configure_logging(level="DEBUG")

        root = logging.getLogger()
        assert root.level == logging.DEBUG
        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0].formatter, JsonFormatter)

    def test_configure_logging_plain_text(self):
        configure_logging(level="warning", json_output=False)

        root = logging.getLogger()
        assert root.level == logging.WARNING
        assert not isinstance(root.handlers[0].formatter, JsonFormatter)

    def test_configure_logging_per_logger_levels(self):
        configure_logging(logger_levels={"catalog_ranker.search": "error"})

        assert logging.getLogger("catalog_ranker.search").level == logging.ERROR
        logging.getLogger("catalog_ranker.search").setLevel(logging.NOTSET)

    def test_configure_logging_from_settings(self, test_settings):
        configure_logging_from_settings(test_settings.model_copy(update={"log_level": "error", "log_json": False}))

        root = logging.getLogger()
        assert root.level == logging.ERROR
        assert not isinstance(root.handlers[0].formatter, JsonFormatter)
