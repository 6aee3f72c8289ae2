"""Role assignment entity.

An assignment binds a role to a principal for an optional validity
window. It is the only time-varying element of the authorization model.

Validity is half-open: an assignment with both bounds is active iff
``not_before <= now < not_after``. Revocation is monotonic.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional

from authz_engine.domain.value_objects.identifiers import PrincipalId, RoleId


class InactiveReason(Enum):
    """Why an assignment is not active at a given instant."""
    REVOKED = "revoked"
    NOT_YET_VALID = "not_yet_valid"
    EXPIRED = "expired"


def _require_aware(name: str, value: Optional[datetime]) -> None:
    if value is None:
        return
    if not isinstance(value, datetime):
        raise TypeError(f"{name} must be a datetime, got {type(value).__name__}")
    if value.tzinfo is None or value.utcoffset() is None:
        raise ValueError(f"{name} must be timezone-aware")


@dataclass
class Assignment:
    """Binding of a role to a principal."""
    principal: PrincipalId
    role: RoleId
    not_before: Optional[datetime] = None
    not_after: Optional[datetime] = None
    _revoked: bool = field(default=False, init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        if not self.principal:
            raise ValueError("Assignment principal cannot be empty")
        if not self.role:
            raise ValueError("Assignment role cannot be empty")
        _require_aware("not_before", self.not_before)
        _require_aware("not_after", self.not_after)
        if (
            self.not_before is not None
            and self.not_after is not None
            and self.not_after < self.not_before
        ):
            raise ValueError(
                f"not_after ({self.not_after.isoformat()}) precedes "
                f"not_before ({self.not_before.isoformat()})"
            )

    @property
    def revoked(self) -> bool:
        """True once revoke() has been called. Never reset."""
        return self._revoked

    def revoke(self) -> None:
        """Permanently deactivate this assignment. Idempotent."""
        self._revoked = True

    def matches(self, principal: PrincipalId, role: RoleId) -> bool:
        return self.principal == principal and self.role == role

    def inactive_reasons(self, now: datetime) -> frozenset[InactiveReason]:
        """Evaluate every activity check at ``now``.

        All checks run even when an earlier one fails, so the result lists
        each reason that applies.

        Args:
            now: Timezone-aware instant to evaluate at.

        Returns:
            Empty set if the assignment is active.
        """
        reasons: set[InactiveReason] = set()
        if self._revoked:
            reasons.add(InactiveReason.REVOKED)
        if self.not_before is not None and now < self.not_before:
            reasons.add(InactiveReason.NOT_YET_VALID)
        if self.not_after is not None and now >= self.not_after:
            reasons.add(InactiveReason.EXPIRED)
        return frozenset(reasons)

    def is_active_at(self, now: datetime) -> bool:
        """Check whether the assignment is active at ``now``.

        Args:
            now: Timezone-aware instant to evaluate at.

        Returns:
            True if not revoked and within the validity window.
        """
        return not self.inactive_reasons(now)
