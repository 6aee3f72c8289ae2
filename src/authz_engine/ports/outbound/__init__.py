"""Outbound ports - collaborators the authorization engine depends on.

The engine queries roles and assignments through these protocols and
never implements persistence itself. Reference in-memory implementations
live in ``authz_engine.adapters.outbound``.

Cancellation:
    Store methods are coroutines. Cancelling the evaluating task raises
    asyncio.CancelledError inside the pending store call, which
    propagates unchanged. Evaluation has no side effects to roll back.
"""

from __future__ import annotations

from abc import abstractmethod
from typing import Optional, Protocol, Sequence, runtime_checkable

from authz_engine.domain.entities.assignment import Assignment
from authz_engine.domain.entities.decision import AuthorizationDecision
from authz_engine.domain.entities.request import AuthorizationRequest
from authz_engine.domain.entities.role import Role
from authz_engine.domain.value_objects.identifiers import PrincipalId, RoleId


# =============================================================================
# Role Store Port
# =============================================================================


@runtime_checkable
class RoleStore(Protocol):
    """Protocol for role definition lookup.

    Thread Safety:
        Implementations must be safe for concurrent reads.

    Example:
        role = await store.get_role(RoleId("role:reader"))
        if role is None:
            ...  # unknown role contributes nothing
    """

    @abstractmethod
    async def get_role(self, role_id: RoleId) -> Optional[Role]:
        """Look up a role by id.

        Args:
            role_id: Role to resolve.

        Returns:
            The role, or None if it does not exist.
        """
        ...


# =============================================================================
# Assignment Store Port
# =============================================================================


@runtime_checkable
class AssignmentStore(Protocol):
    """Protocol for role assignment lookup.

    Thread Safety:
        Implementations must be safe for concurrent reads.
    """

    @abstractmethod
    async def get_assignments_for_principal(self, principal: PrincipalId) -> Sequence[Assignment]:
        """Return every assignment for a principal, active or not.

        Order matters: the engine grants through the first matching
        assignment in the returned order.

        Args:
            principal: Principal to look up.

        Returns:
            Ordered assignments; empty if the principal has none.
        """
        ...


# =============================================================================
# Decision Observer Port
# =============================================================================


@runtime_checkable
class DecisionObserver(Protocol):
    """Receives every completed decision (metrics, logging, tracing)."""

    @abstractmethod
    def record(
        self,
        request: AuthorizationRequest,
        decision: AuthorizationDecision,
        elapsed_seconds: float,
    ) -> None:
        """Record a completed evaluation.

        Args:
            request: The evaluated request.
            decision: The decision returned to the caller.
            elapsed_seconds: Wall-clock evaluation time.
        """
        ...


__all__ = [
    "RoleStore",
    "AssignmentStore",
    "DecisionObserver",
]
