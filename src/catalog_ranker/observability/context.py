"""Per-query correlation state shared by log records and spans.

Each thread or task carries its own dict in ``trace_context``:
``trace_id``/``span_id`` for log-to-span correlation and, while a query runs,
the id of the catalog snapshot answering it.
"""

from __future__ import annotations

from contextvars import ContextVar, Token
from uuid import uuid4


trace_context: ContextVar[dict | None] = ContextVar("trace_context", default=None)


def generate_trace_id() -> str:
    """Generate a 32-char hex trace ID."""
    return uuid4().hex


def generate_span_id() -> str:
    """Generate a 16-char hex span ID."""
    return uuid4().hex[:16]


def get_trace_context() -> dict:
    """Return the current context, creating fresh ids on first use."""
    ctx = trace_context.get()
    if ctx is None or not ctx.get("trace_id"):
        ctx = {"trace_id": generate_trace_id(), "span_id": generate_span_id()}
        trace_context.set(ctx)
    return ctx


def set_trace_context(trace_id: str, span_id: str, **extra: object) -> None:
    trace_context.set({"trace_id": trace_id, "span_id": span_id, **extra})


def bind_span(trace_id: str, span_id: str) -> Token:
    """Point the context at an active span, keeping any other fields.

    Returns the token that restores the previous context.
    """
    ctx = trace_context.get() or {}
    return trace_context.set({**ctx, "trace_id": trace_id, "span_id": span_id})


def bind_snapshot(snapshot_id: str) -> Token:
    """Tag the current context with the catalog snapshot serving the query."""
    return trace_context.set({**get_trace_context(), "snapshot": snapshot_id})


def restore_trace_context(token: Token) -> None:
    trace_context.reset(token)


def current_snapshot() -> str | None:
    ctx = trace_context.get()
    return ctx.get("snapshot") if ctx else None
