"""Domain services: matching primitives and the decision engine."""

from authz_engine.domain.services.evaluator import (
    AuthorizationCheck,
    AuthorizationEngine,
    Clock,
    utc_now,
)
from authz_engine.domain.services.matching import (
    ConditionOutcome,
    evaluate_condition,
    permission_matches,
    scope_satisfies,
)

__all__ = [
    "AuthorizationCheck",
    "AuthorizationEngine",
    "Clock",
    "utc_now",
    "ConditionOutcome",
    "evaluate_condition",
    "permission_matches",
    "scope_satisfies",
]
