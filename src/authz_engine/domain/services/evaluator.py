"""Authorization decision engine (RBAC + ABAC + scopes).

Evaluates one request in a single pass over the principal's active
assignments:

    1. no assignments                        -> deny NO_ASSIGNMENTS
    2. none active at ``now``                -> deny ASSIGNMENT_NOT_ACTIVE
    3. first grant matching permission+scope
         condition fails or raises           -> deny ATTRIBUTE_EVALUATION_FAILED
         otherwise                           -> allow (role, grant permission)
    4. some grant matched permission only    -> deny SCOPE_MISMATCH
    5. otherwise                             -> deny NO_MATCHING_PERMISSION

Step 3 is fail-fast: once a grant matches structurally its condition
decides the outcome, even if a later role would allow unconditionally.
Callers that need "any role may unlock" semantics must order roles and
grants accordingly.

References:
    - NIST SP 800-162 (ABAC Guide)
"""

from __future__ import annotations

import time
from collections.abc import Mapping
from dataclasses import replace
from datetime import datetime, timezone
from typing import Any, Callable, Optional

from authz_engine.domain.entities.decision import AuthorizationDecision, DenyReason
from authz_engine.domain.entities.request import AuthorizationRequest
from authz_engine.domain.entities.role import Role
from authz_engine.domain.errors import ClockError, PermissionNotSpecifiedError
from authz_engine.domain.services.matching import (
    ConditionOutcome,
    evaluate_condition,
    permission_matches,
    scope_satisfies,
)
from authz_engine.domain.value_objects.bags import as_attributes, as_scope
from authz_engine.domain.value_objects.identifiers import (
    PermissionId,
    PrincipalId,
    RoleId,
    create_principal_id,
)
from authz_engine.ports.outbound import AssignmentStore, DecisionObserver, RoleStore

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    """Default clock: current UTC time."""
    return datetime.now(timezone.utc)


class AuthorizationEngine:
    """Stateless, re-entrant decision engine.

    Holds only references to its collaborators, so one instance may serve
    any number of concurrent evaluations provided the stores tolerate
    concurrent reads.
    """

    def __init__(
        self,
        role_store: RoleStore,
        assignment_store: AssignmentStore,
        clock: Optional[Clock] = None,
        observer: Optional[DecisionObserver] = None,
    ) -> None:
        self._roles = role_store
        self._assignments = assignment_store
        self._clock = clock or utc_now
        self._observer = observer

    @property
    def role_store(self) -> RoleStore:
        return self._roles

    @property
    def assignment_store(self) -> AssignmentStore:
        return self._assignments

    def for_principal(self, principal: str) -> AuthorizationCheck:
        """Begin a fluent authorization check.

        Args:
            principal: Principal being authorized.

        Returns:
            Check to configure with on(), in_scope(), with_attributes().

        Raises:
            ValueError: If principal is blank.
        """
        return AuthorizationCheck(self, create_principal_id(principal))

    async def evaluate(self, request: AuthorizationRequest) -> AuthorizationDecision:
        """Evaluate a request.

        Args:
            request: Fully specified authorization request.

        Returns:
            The decision. Denials are returned, never raised.

        Raises:
            PermissionNotSpecifiedError: If the request has no permission.
            ClockError: If the clock returns a naive datetime.
        """
        if request.permission is None:
            raise PermissionNotSpecifiedError(
                "Permission must be specified with on() before evaluating"
            )

        start = time.perf_counter()
        decision = await self._decide(request, request.permission)
        if self._observer is not None:
            self._observer.record(request, decision, time.perf_counter() - start)
        return decision

    async def _decide(self, request: AuthorizationRequest, requested: PermissionId) -> AuthorizationDecision:
        assignments = await self._assignments.get_assignments_for_principal(request.principal)
        if not assignments:
            return AuthorizationDecision.deny(DenyReason.NO_ASSIGNMENTS)

        # One snapshot so every assignment is judged at the same instant.
        now = self._now()
        active = [a for a in assignments if a.is_active_at(now)]
        if not active:
            return AuthorizationDecision.deny(DenyReason.ASSIGNMENT_NOT_ACTIVE)

        resolved: dict[RoleId, Optional[Role]] = {}
        permission_seen = False

        for assignment in active:
            role = await self._resolve_role(assignment.role, resolved)
            if role is None:
                continue

            for grant in role.grants:
                if not permission_matches(grant.permission, requested):
                    continue
                permission_seen = True
                if not scope_satisfies(grant.scope, request.scope):
                    continue

                outcome = evaluate_condition(grant.condition, request.attributes)
                if outcome is not ConditionOutcome.PASSED:
                    return AuthorizationDecision.deny(DenyReason.ATTRIBUTE_EVALUATION_FAILED)
                return AuthorizationDecision.allow(role.role_id, grant.permission)

        if permission_seen:
            return AuthorizationDecision.deny(DenyReason.SCOPE_MISMATCH)
        return AuthorizationDecision.deny(DenyReason.NO_MATCHING_PERMISSION)

    async def _resolve_role(
        self,
        role_id: RoleId,
        resolved: dict[RoleId, Optional[Role]],
    ) -> Optional[Role]:
        if role_id not in resolved:
            resolved[role_id] = await self._roles.get_role(role_id)
        return resolved[role_id]

    def _now(self) -> datetime:
        now = self._clock()
        if now.tzinfo is None or now.utcoffset() is None:
            raise ClockError("Engine clock must return a timezone-aware datetime")
        return now


class AuthorizationCheck:
    """Fluent builder for one authorization request.

    Example:
        decision = await (
            engine.for_principal("user:42")
            .on("invoice:read")
            .in_scope({"tenant": "acme"})
            .with_attributes({"department": "finance"})
            .evaluate()
        )
    """

    def __init__(self, engine: AuthorizationEngine, principal: PrincipalId) -> None:
        self._engine = engine
        self._request = AuthorizationRequest(principal=principal)

    @property
    def request(self) -> AuthorizationRequest:
        return self._request

    def on(self, permission: PermissionId | str) -> AuthorizationCheck:
        """Set the permission to check. Strings are parsed explicitly.

        Raises:
            InvalidPermissionError: If a string does not parse.
        """
        if isinstance(permission, str):
            permission = PermissionId.parse(permission)
        elif not isinstance(permission, PermissionId):
            raise TypeError(f"permission must be a PermissionId or str, got {type(permission).__name__}")
        self._request = replace(self._request, permission=permission)
        return self

    def in_scope(self, scope: Optional[Mapping[str, str]]) -> AuthorizationCheck:
        """Set the requested scope (default: empty)."""
        self._request = replace(self._request, scope=as_scope(scope))
        return self

    def with_attributes(self, attributes: Optional[Mapping[str, Any]]) -> AuthorizationCheck:
        """Set the runtime attributes for conditions (default: empty)."""
        self._request = replace(self._request, attributes=as_attributes(attributes))
        return self

    async def evaluate(self) -> AuthorizationDecision:
        """Evaluate the configured request.

        Raises:
            PermissionNotSpecifiedError: If on() was never called.
        """
        return await self._engine.evaluate(self._request)
