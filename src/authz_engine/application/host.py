"""Authorization host.

Owns the configured stores and the engine, and exposes the runtime
management operations (add role, add assignment, revoke). Management
operations are defined only for the in-memory reference stores; against
any other store they raise UnsupportedOperationError instead of silently
doing nothing.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Optional

from authz_engine.adapters.outbound.memory_stores import InMemoryAssignmentStore, InMemoryRoleStore
from authz_engine.domain.entities.assignment import Assignment
from authz_engine.domain.entities.decision import AuthorizationDecision
from authz_engine.domain.entities.role import Role
from authz_engine.domain.errors import UnsupportedOperationError
from authz_engine.domain.services.evaluator import AuthorizationCheck, AuthorizationEngine, Clock
from authz_engine.domain.value_objects.identifiers import (
    PermissionId,
    create_principal_id,
    create_role_id,
)
from authz_engine.infrastructure.logging import get_logger
from authz_engine.infrastructure.tracing import annotate_decision, trace_span
from authz_engine.ports.outbound import AssignmentStore, DecisionObserver, RoleStore

logger = get_logger(__name__)


class AuthorizationHost:
    """Hosts the authorization engine and its stores."""

    def __init__(
        self,
        role_store: RoleStore,
        assignment_store: AssignmentStore,
        clock: Optional[Clock] = None,
        observer: Optional[DecisionObserver] = None,
    ) -> None:
        self._role_store = role_store
        self._assignment_store = assignment_store
        self._engine = AuthorizationEngine(role_store, assignment_store, clock=clock, observer=observer)

    @property
    def engine(self) -> AuthorizationEngine:
        return self._engine

    @property
    def role_store(self) -> RoleStore:
        return self._role_store

    @property
    def assignment_store(self) -> AssignmentStore:
        return self._assignment_store

    @property
    def supports_management(self) -> bool:
        """True if both stores accept runtime management operations."""
        return isinstance(self._role_store, InMemoryRoleStore) and isinstance(
            self._assignment_store, InMemoryAssignmentStore
        )

    def for_principal(self, principal: str) -> AuthorizationCheck:
        """Shortcut for ``host.engine.for_principal(principal)``."""
        return self._engine.for_principal(principal)

    async def authorize(
        self,
        principal: str,
        permission: PermissionId | str,
        scope: Optional[Mapping[str, str]] = None,
        attributes: Optional[Mapping[str, Any]] = None,
    ) -> AuthorizationDecision:
        """Evaluate one request inside a trace span.

        Args:
            principal: Principal being authorized.
            permission: Permission to check (strings are parsed).
            scope: Optional requested scope.
            attributes: Optional runtime attributes.

        Returns:
            The decision.

        Raises:
            InvalidPermissionError: If permission does not parse.
            ValueError: If principal is blank.
        """
        check = self._engine.for_principal(principal).on(permission).in_scope(scope).with_attributes(attributes)
        with trace_span(
            "authz.evaluate",
            {"authz.principal": str(check.request.principal), "authz.permission": str(check.request.permission)},
        ) as span:
            decision = await check.evaluate()
            annotate_decision(span, decision)
        return decision

    # -- Runtime management ----------------------------------------------------

    def add_role(self, role: Role) -> None:
        """Add or replace a role at runtime.

        Raises:
            UnsupportedOperationError: If the role store is not in-memory.
        """
        store = self._require(self._role_store, InMemoryRoleStore, "add_role")
        store.add(role)
        logger.info("role_added", role_id=str(role.role_id), grants=len(role.grants))

    def add_assignment(self, assignment: Assignment) -> None:
        """Add an assignment at runtime.

        Raises:
            UnsupportedOperationError: If the assignment store is not in-memory.
        """
        store = self._require(self._assignment_store, InMemoryAssignmentStore, "add_assignment")
        store.add(assignment)
        logger.info(
            "assignment_added",
            principal=str(assignment.principal),
            role_id=str(assignment.role),
            not_before=assignment.not_before.isoformat() if assignment.not_before else None,
            not_after=assignment.not_after.isoformat() if assignment.not_after else None,
        )

    def revoke(self, principal: str, role: str) -> int:
        """Revoke a role from a principal at runtime. Idempotent.

        Returns:
            Number of assignments newly revoked.

        Raises:
            UnsupportedOperationError: If the assignment store is not in-memory.
        """
        store = self._require(self._assignment_store, InMemoryAssignmentStore, "revoke")
        revoked = store.revoke(create_principal_id(principal), create_role_id(role))
        logger.info("assignment_revoked", principal=principal, role_id=role, revoked=revoked)
        return revoked

    @staticmethod
    def _require(store: Any, expected: type, operation: str) -> Any:
        if not isinstance(store, expected):
            raise UnsupportedOperationError(
                f"{operation} is only supported with {expected.__name__}, "
                f"not {type(store).__name__}"
            )
        return store
