"""OpenTelemetry tracing for authorization decisions.

Spans are exported over OTLP/gRPC when an endpoint is configured. Without
one the provider still records spans, so in-process processors (tests,
debugging) can observe them.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import TYPE_CHECKING, Any, Generator

from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor
from opentelemetry.sdk.trace.sampling import ParentBased, TraceIdRatioBased
from opentelemetry.trace import Status, StatusCode

if TYPE_CHECKING:
    from authz_engine.domain.entities.decision import AuthorizationDecision

_tracer: trace.Tracer | None = None


def setup_tracing(
    service_name: str = "authz_engine",
    otlp_endpoint: str | None = None,
    sample_ratio: float = 1.0,
) -> trace.Tracer:
    """Install a tracer provider for the engine.

    Args:
        service_name: ``service.name`` resource attribute.
        otlp_endpoint: OTLP gRPC collector; spans are not exported if None.
        sample_ratio: Fraction of root traces to sample (0.0 to 1.0).
    """
    global _tracer
    from authz_engine import __version__

    resource = Resource.create({"service.name": service_name, "service.version": __version__})
    provider = TracerProvider(resource=resource, sampler=ParentBased(TraceIdRatioBased(sample_ratio)))

    if otlp_endpoint:
        provider.add_span_processor(BatchSpanProcessor(OTLPSpanExporter(endpoint=otlp_endpoint, insecure=True)))

    trace.set_tracer_provider(provider)
    _tracer = provider.get_tracer("authz_engine", __version__)
    return _tracer


def get_tracer() -> trace.Tracer:
    """Get the engine tracer, falling back to the global provider."""
    return _tracer or trace.get_tracer("authz_engine")


@contextmanager
def trace_span(name: str, attributes: dict[str, Any] | None = None) -> Generator[trace.Span, None, None]:
    """Run a block inside a span; exceptions are recorded and re-raised."""
    with get_tracer().start_as_current_span(name, attributes=attributes) as span:
        yield span


def annotate_decision(span: trace.Span, decision: AuthorizationDecision) -> None:
    """Attach the outcome of an evaluation to a span.

    Denials are normal outcomes and mark the span OK. Only
    faults (raised exceptions) mark a span as an error.
    """
    span.set_attribute("authz.allowed", decision.allowed)
    span.set_attribute("authz.reason", decision.deny_reason.value)
    if decision.matched_role is not None:
        span.set_attribute("authz.matched_role", str(decision.matched_role))
    if decision.matched_permission is not None:
        span.set_attribute("authz.matched_permission", str(decision.matched_permission))
    span.set_status(Status(StatusCode.OK))
