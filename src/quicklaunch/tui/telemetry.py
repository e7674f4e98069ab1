"""Tracing and JSON-lines logging for the launcher overlay.

While the overlay runs the terminal belongs to Textual, so diagnostics go
to two places: OpenTelemetry spans around open/close/dispatch, and a log
file where every ``quicklaunch.*`` record is one JSON object carrying the
ids of the span it was logged under.
"""

from __future__ import annotations

import json
import logging
import os
from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from datetime import datetime

from opentelemetry import trace
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import SimpleSpanProcessor
from opentelemetry.sdk.trace.export.in_memory_span_exporter import InMemorySpanExporter

LOGGER_NAME = "quicklaunch"
TRACER_NAME = "quicklaunch.tui"

_NO_TRACE = "0" * 32
_NO_SPAN = "0" * 16


def _current_ids() -> tuple[str, str]:
    ctx = trace.get_current_span().get_span_context()
    if not ctx.is_valid:
        return _NO_TRACE, _NO_SPAN
    return format(ctx.trace_id, "032x"), format(ctx.span_id, "016x")


class _Span:
    """Span handle for overlay code. Setters never raise."""

    def __init__(self, span: object) -> None:
        self._span = span

    def set_attribute(self, key: str, value: object) -> None:
        self.set_attributes({key: value})

    def set_attributes(self, attributes: Mapping[str, object]) -> None:
        for key, value in attributes.items():
            try:
                self._span.set_attribute(key, value)  # type: ignore[attr-defined]
            except Exception:
                pass

    def record_exception(self, exc: BaseException) -> None:
        try:
            self._span.record_exception(exc)  # type: ignore[attr-defined]
        except Exception:
            pass


class _SpanLogAdapter(logging.LoggerAdapter):
    def process(self, msg: str, kwargs: dict) -> tuple[str, dict]:  # type: ignore[override]
        trace_id, span_id = _current_ids()
        extra = kwargs.setdefault("extra", {})
        extra.setdefault("trace_id", trace_id)
        extra.setdefault("span_id", span_id)
        return msg, kwargs


class Telemetry:
    """Spans for overlay lifecycle events plus a span-aware logger.

    Usage::

        with telemetry.span("launcher.dispatch", {"dispatch.index": 0}) as span:
            span.set_attribute("dispatch.closed", True)
            telemetry.log.info("dispatched")
    """

    def __init__(self, tracer: object) -> None:
        self._tracer = tracer
        self.log = _SpanLogAdapter(logging.getLogger(TRACER_NAME), {})

    @contextmanager
    def span(
        self, name: str, attributes: Mapping[str, object] | None = None
    ) -> Iterator[_Span]:
        with self._tracer.start_as_current_span(name) as otel_span:  # type: ignore[attr-defined]
            span = _Span(otel_span)
            if attributes:
                span.set_attributes(attributes)
            yield span

    @classmethod
    def for_testing(cls) -> tuple[Telemetry, InMemorySpanExporter]:
        """Telemetry whose finished spans land in the returned exporter."""
        exporter = InMemorySpanExporter()
        provider = TracerProvider()
        provider.add_span_processor(SimpleSpanProcessor(exporter))
        return cls(provider.get_tracer(TRACER_NAME)), exporter

    @classmethod
    def noop(cls) -> Telemetry:
        """Telemetry with no span processors; spans are dropped."""
        return cls(TracerProvider().get_tracer(TRACER_NAME))


_singleton: Telemetry | None = None


def get_telemetry() -> Telemetry:
    """Telemetry for widgets, which have no App handle at construction."""
    global _singleton
    if _singleton is None:
        _singleton = Telemetry.noop()
    return _singleton


def set_telemetry(tel: Telemetry) -> None:
    global _singleton
    _singleton = tel


class _JsonLineFormatter(logging.Formatter):
    """``{"ts", "level", "logger", "trace", "span", "msg"[, "exc"]}`` per line.

    Records logged outside a span (or through a plain module logger)
    get all-zero trace and span ids.
    """

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "ts": self.formatTime(record, "%Y-%m-%dT%H:%M:%S"),
            "level": record.levelname,
            "logger": record.name,
            "trace": getattr(record, "trace_id", _NO_TRACE),
            "span": getattr(record, "span_id", _NO_SPAN),
            "msg": record.getMessage(),
        }
        if record.exc_info:
            entry["exc"] = self.formatException(record.exc_info)
        return json.dumps(entry, ensure_ascii=False)


def log_file_path(log_dir: str, day: datetime | None = None) -> str:
    """``{log_dir}/launcher-YYYYMMDD.log`` for *day* (default today)."""
    stamp = (day or datetime.now()).strftime("%Y%m%d")
    return os.path.join(log_dir, f"launcher-{stamp}.log")


def configure_file_logging(log_dir: str) -> str:
    """Attach the JSON-lines file handler to the ``quicklaunch`` logger.

    Covers the engine, session, scripting and hotkey loggers as well as
    the TUI. Idempotent: a second call keeps the existing handler.

    Returns:
        Path of today's log file.
    """
    os.makedirs(log_dir, exist_ok=True)
    log_path = log_file_path(log_dir)

    root = logging.getLogger(LOGGER_NAME)
    if not any(isinstance(h, logging.FileHandler) for h in root.handlers):
        handler = logging.FileHandler(log_path, encoding="utf-8")
        handler.setFormatter(_JsonLineFormatter())
        root.addHandler(handler)
        root.setLevel(logging.DEBUG)
    return log_path
