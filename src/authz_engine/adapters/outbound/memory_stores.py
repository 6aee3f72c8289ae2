"""In-memory role and assignment store adapters.

Reference implementations of RoleStore and AssignmentStore for
deployments that need no external persistence, and for tests.

Synchronization:
    Each store guards its state with a ``threading.RLock``. Every read
    returns a snapshot (a copied list), so an evaluation enumerating
    assignments never observes a concurrent add. Revocation flips the
    flag on the shared Assignment object in place; an evaluation that
    already took its snapshot may still see the pre-revocation value.

Usage:
    roles = InMemoryRoleStore()
    roles.add(Role.of(RoleId("role:reader"), [PermissionGrant(PermissionId.parse("invoice:read"))]))
    assignments = InMemoryAssignmentStore()
    assignments.add(Assignment(PrincipalId("user:42"), RoleId("role:reader")))
"""

from __future__ import annotations

import logging
import threading
from typing import Optional

from authz_engine.domain.entities.assignment import Assignment
from authz_engine.domain.entities.role import Role
from authz_engine.domain.value_objects.identifiers import PrincipalId, RoleId
from authz_engine.infrastructure.metrics import MetricsRegistry

logger = logging.getLogger(__name__)


class InMemoryRoleStore:
    """In-memory implementation of RoleStore keyed by role id."""

    def __init__(self, metrics: MetricsRegistry | None = None) -> None:
        self._roles: dict[RoleId, Role] = {}
        self._lock = threading.RLock()
        self._metrics = metrics

    async def get_role(self, role_id: RoleId) -> Optional[Role]:
        """Look up a role by id.

        Args:
            role_id: Role to resolve.

        Returns:
            The role, or None if not found.
        """
        with self._lock:
            return self._roles.get(role_id)

    def add(self, role: Role) -> None:
        """Add a role, replacing any existing role with the same id.

        Args:
            role: Role to store.
        """
        with self._lock:
            replaced = role.role_id in self._roles
            self._roles[role.role_id] = role
        self._count("add")
        logger.debug(f"{'Replaced' if replaced else 'Added'} role {role.role_id} ({len(role.grants)} grants)")

    def remove(self, role_id: RoleId) -> bool:
        """Remove a role.

        Args:
            role_id: Role to remove.

        Returns:
            True if the role was removed.
        """
        with self._lock:
            removed = self._roles.pop(role_id, None) is not None
        if removed:
            self._count("remove")
            logger.debug(f"Removed role {role_id}")
        return removed

    def list_roles(self) -> list[Role]:
        """Snapshot of all stored roles in insertion order."""
        with self._lock:
            return list(self._roles.values())

    def __len__(self) -> int:
        with self._lock:
            return len(self._roles)

    def _count(self, operation: str) -> None:
        if self._metrics is not None:
            self._metrics.store_mutations_total.labels(store="role", operation=operation).inc()


class InMemoryAssignmentStore:
    """In-memory implementation of AssignmentStore.

    Assignments are returned in insertion order, which is the order the
    engine uses to pick the first matching assignment.
    """

    def __init__(self, metrics: MetricsRegistry | None = None) -> None:
        self._assignments: list[Assignment] = []
        self._lock = threading.RLock()
        self._metrics = metrics

    async def get_assignments_for_principal(self, principal: PrincipalId) -> list[Assignment]:
        """Return a snapshot of the principal's assignments.

        Args:
            principal: Principal to look up.

        Returns:
            Assignments in insertion order; empty if none.
        """
        with self._lock:
            return [a for a in self._assignments if a.principal == principal]

    def add(self, assignment: Assignment) -> None:
        """Append an assignment.

        Args:
            assignment: Assignment to store.
        """
        with self._lock:
            self._assignments.append(assignment)
        self._count("add")
        logger.debug(f"Assigned role {assignment.role} to {assignment.principal}")

    def revoke(self, principal: PrincipalId, role: RoleId) -> int:
        """Revoke every assignment of ``role`` to ``principal``.

        Idempotent: revoking an already revoked or unknown pair is a no-op.

        Args:
            principal: Principal holding the role.
            role: Role to revoke.

        Returns:
            Number of assignments newly revoked.
        """
        revoked = 0
        with self._lock:
            for assignment in self._assignments:
                if assignment.matches(principal, role) and not assignment.revoked:
                    assignment.revoke()
                    revoked += 1
        if revoked:
            self._count("revoke")
            logger.debug(f"Revoked role {role} from {principal} ({revoked} assignments)")
        return revoked

    def __len__(self) -> int:
        with self._lock:
            return len(self._assignments)

    def _count(self, operation: str) -> None:
        if self._metrics is not None:
            self._metrics.store_mutations_total.labels(store="assignment", operation=operation).inc()
