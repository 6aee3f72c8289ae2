"""Infrastructure layer - cross-cutting concerns."""

from authz_engine.infrastructure.config import Config, get_config
from authz_engine.infrastructure.logging import setup_logging, get_logger
from authz_engine.infrastructure.metrics import setup_metrics, get_metrics, MetricsRegistry
from authz_engine.infrastructure.tracing import setup_tracing, get_tracer, trace_span, annotate_decision

__all__ = [
    "Config",
    "get_config",
    "setup_logging",
    "get_logger",
    "setup_metrics",
    "get_metrics",
    "MetricsRegistry",
    "setup_tracing",
    "get_tracer",
    "trace_span",
    "annotate_decision",
]
