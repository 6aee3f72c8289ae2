"""Decision observer feeding Prometheus metrics and structured logs."""

from __future__ import annotations

from typing import Any

from authz_engine.domain.entities.decision import AuthorizationDecision
from authz_engine.domain.entities.request import AuthorizationRequest
from authz_engine.infrastructure.logging import get_logger
from authz_engine.infrastructure.metrics import MetricsRegistry, get_metrics


class TelemetryDecisionObserver:
    """DecisionObserver that counts decisions and logs them at debug level.

    Only the request coordinates and the deny reason are logged; attribute
    values and condition faults are not.
    """

    def __init__(self, metrics: MetricsRegistry | None = None, logger: Any = None) -> None:
        self._metrics = metrics or get_metrics()
        self._logger = logger or get_logger(__name__)

    def record(
        self,
        request: AuthorizationRequest,
        decision: AuthorizationDecision,
        elapsed_seconds: float,
    ) -> None:
        outcome = "allow" if decision.allowed else "deny"
        self._metrics.decisions_total.labels(outcome=outcome, reason=decision.deny_reason.value).inc()
        self._metrics.evaluation_latency_seconds.observe(elapsed_seconds)
        self._logger.debug(
            "authorization_decided",
            principal=str(request.principal),
            permission=str(request.permission),
            scope=dict(request.scope),
            outcome=outcome,
            reason=decision.deny_reason.value,
            matched_role=None if decision.matched_role is None else str(decision.matched_role),
            elapsed_ms=round(elapsed_seconds * 1000, 3),
        )
