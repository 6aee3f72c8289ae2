"""Grant matching primitives.

Pure functions used by the evaluator: permission matching with
whole-component wildcards, subset scope matching, and fault-tolerant
condition evaluation.
"""

from __future__ import annotations

from collections.abc import Mapping
from enum import Enum
from typing import Optional

from authz_engine.domain.entities.role import Condition
from authz_engine.domain.value_objects.bags import AttributeBag
from authz_engine.domain.value_objects.identifiers import WILDCARD, PermissionId


class ConditionOutcome(Enum):
    """Result of evaluating an ABAC condition."""
    PASSED = "passed"
    FAILED = "failed"    # returned a falsy value
    FAULTED = "faulted"  # raised


def permission_matches(granted: PermissionId, requested: PermissionId) -> bool:
    """Check whether a granted permission covers a requested one.

    Resource and action are matched independently. Each is an exact string
    comparison unless the granted component is the literal ``*``; there is
    no prefix or substring wildcarding, so ``invoice:*`` does not cover
    ``invoices:read``.

    Args:
        granted: Permission offered by a grant.
        requested: Permission being checked.

    Returns:
        True if the grant covers the request.
    """
    resource_ok = granted.resource == WILDCARD or granted.resource == requested.resource
    action_ok = granted.action == WILDCARD or granted.action == requested.action
    return resource_ok and action_ok


def scope_satisfies(grant_scope: Mapping[str, str], requested_scope: Mapping[str, str]) -> bool:
    """Check whether a requested scope satisfies a grant's scope.

    Every grant key must be present in the request with an identical
    value. The request may be more specific (extra keys). An empty grant
    scope is satisfied by any request, including an empty one.
    """
    for key, value in grant_scope.items():
        if key not in requested_scope:
            return False
        if requested_scope[key] != value:
            return False
    return True


def evaluate_condition(condition: Optional[Condition], attributes: AttributeBag) -> ConditionOutcome:
    """Evaluate a grant condition, converting faults into an outcome.

    A missing condition passes. Any ``Exception`` raised by the condition,
    including KeyError from a missing attribute, yields FAULTED.
    BaseExceptions such as cancellation are not intercepted.
    """
    if condition is None:
        return ConditionOutcome.PASSED
    try:
        passed = bool(condition(attributes))
    except Exception:
        return ConditionOutcome.FAULTED
    return ConditionOutcome.PASSED if passed else ConditionOutcome.FAILED
