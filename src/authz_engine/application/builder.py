"""Fluent configuration surface for assembling an AuthorizationHost.

Usage:
    host = (
        AuthorizationBuilder.create()
        .add_role("role:reader", lambda r: r.grant("invoice:read"))
        .add_role("role:approver", lambda r: r.grant(
            "invoice:approve",
            scope={"tenant": "acme"},
            condition=lambda attrs: attrs["amount"] < 10_000,
        ))
        .assign("user:42", "role:reader")
        .build()
    )
    decision = await host.engine.for_principal("user:42").on("invoice:read").evaluate()
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime
from typing import Callable, Optional

from authz_engine.adapters.outbound.memory_stores import InMemoryAssignmentStore, InMemoryRoleStore
from authz_engine.application.host import AuthorizationHost
from authz_engine.domain.entities.assignment import Assignment
from authz_engine.domain.entities.role import Condition, PermissionGrant, Role
from authz_engine.domain.errors import UnsupportedOperationError
from authz_engine.domain.services.evaluator import Clock
from authz_engine.domain.value_objects.bags import as_scope
from authz_engine.domain.value_objects.identifiers import (
    PermissionId,
    PrincipalId,
    RoleId,
    create_principal_id,
    create_role_id,
)
from authz_engine.infrastructure.logging import get_logger
from authz_engine.ports.outbound import AssignmentStore, DecisionObserver, RoleStore

logger = get_logger(__name__)


class RoleBuilder:
    """Collects the grants of one role in declaration order."""

    def __init__(self, role_id: RoleId, name: str) -> None:
        self._role_id = role_id
        self._name = name
        self._grants: list[PermissionGrant] = []

    def grant(
        self,
        permission: PermissionId | str,
        scope: Optional[Mapping[str, str]] = None,
        condition: Optional[Condition] = None,
    ) -> RoleBuilder:
        """Add a grant.

        Args:
            permission: Permission string (``resource:action``) or PermissionId.
            scope: Optional scope constraints.
            condition: Optional ABAC predicate over the request attributes.

        Returns:
            This builder.

        Raises:
            InvalidPermissionError: If the permission string does not parse.
        """
        if isinstance(permission, str):
            permission = PermissionId.parse(permission)
        self._grants.append(PermissionGrant(permission, as_scope(scope), condition))
        return self

    def build(self) -> Role:
        return Role(role_id=self._role_id, name=self._name, grants=tuple(self._grants))


class AuthorizationBuilder:
    """Assembles roles, assignments and stores into an AuthorizationHost.

    Pending roles, assignments and revocations are written into the
    in-memory stores at build time. Revocations apply after all pending
    assignments, so ``assign(...).revoke(...)`` yields a revoked
    assignment regardless of call order.
    """

    def __init__(self) -> None:
        self._role_store: RoleStore | None = None
        self._assignment_store: AssignmentStore | None = None
        self._clock: Clock | None = None
        self._observer: DecisionObserver | None = None
        self._pending_roles: list[Role] = []
        self._pending_assignments: list[Assignment] = []
        self._pending_revocations: list[tuple[PrincipalId, RoleId]] = []

    @classmethod
    def create(cls) -> AuthorizationBuilder:
        return cls()

    def add_role(
        self,
        role_id: str,
        configure: Callable[[RoleBuilder], object],
        name: str | None = None,
    ) -> AuthorizationBuilder:
        """Define a role.

        Args:
            role_id: Stable role id.
            configure: Callback that adds grants to the RoleBuilder.
            name: Display name (defaults to the role id).
        """
        rid = create_role_id(role_id)
        builder = RoleBuilder(rid, name or rid)
        configure(builder)
        self._pending_roles.append(builder.build())
        return self

    def assign(
        self,
        principal: str,
        role: str,
        not_before: datetime | None = None,
        not_after: datetime | None = None,
    ) -> AuthorizationBuilder:
        """Assign a role to a principal with an optional validity window."""
        self._pending_assignments.append(
            Assignment(create_principal_id(principal), create_role_id(role), not_before, not_after)
        )
        return self

    def revoke(self, principal: str, role: str) -> AuthorizationBuilder:
        """Revoke a pending assignment at build time."""
        self._pending_revocations.append((create_principal_id(principal), create_role_id(role)))
        return self

    def use_role_store(self, store: RoleStore) -> AuthorizationBuilder:
        self._role_store = store
        return self

    def use_assignment_store(self, store: AssignmentStore) -> AuthorizationBuilder:
        self._assignment_store = store
        return self

    def use_clock(self, clock: Clock) -> AuthorizationBuilder:
        """Override the engine clock (must return timezone-aware datetimes)."""
        self._clock = clock
        return self

    def observe_with(self, observer: DecisionObserver) -> AuthorizationBuilder:
        """Attach a decision observer (metrics, logging)."""
        self._observer = observer
        return self

    def build(self) -> AuthorizationHost:
        """Build the host, seeding the in-memory stores.

        Raises:
            UnsupportedOperationError: If pending roles or assignments were
                declared for a custom store that cannot be seeded.
        """
        role_store = self._role_store if self._role_store is not None else InMemoryRoleStore()
        assignment_store = (
            self._assignment_store if self._assignment_store is not None else InMemoryAssignmentStore()
        )

        if self._pending_roles:
            if not isinstance(role_store, InMemoryRoleStore):
                raise UnsupportedOperationError(
                    f"Cannot seed {len(self._pending_roles)} roles into {type(role_store).__name__}; "
                    "add them through the custom store instead"
                )
            for role in self._pending_roles:
                role_store.add(role)

        if self._pending_assignments or self._pending_revocations:
            if not isinstance(assignment_store, InMemoryAssignmentStore):
                raise UnsupportedOperationError(
                    f"Cannot seed assignments into {type(assignment_store).__name__}; "
                    "add them through the custom store instead"
                )
            for assignment in self._pending_assignments:
                assignment_store.add(assignment)
            for principal, role in self._pending_revocations:
                assignment_store.revoke(principal, role)

        logger.info(
            "authorization_host_built",
            role_store=type(role_store).__name__,
            assignment_store=type(assignment_store).__name__,
            roles=len(self._pending_roles),
            assignments=len(self._pending_assignments),
            revocations=len(self._pending_revocations),
        )
        return AuthorizationHost(role_store, assignment_store, clock=self._clock, observer=self._observer)
