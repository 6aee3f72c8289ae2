"""Authorization decision entity."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

from authz_engine.domain.value_objects.identifiers import PermissionId, RoleId


class DenyReason(Enum):
    """Machine-readable explanation of a decision."""
    NONE = "none"  # allowed
    NO_ASSIGNMENTS = "no_assignments"
    NO_MATCHING_PERMISSION = "no_matching_permission"
    SCOPE_MISMATCH = "scope_mismatch"  # right permission, wrong context
    ASSIGNMENT_NOT_ACTIVE = "assignment_not_active"
    ATTRIBUTE_EVALUATION_FAILED = "attribute_evaluation_failed"


@dataclass(frozen=True)
class AuthorizationDecision:
    """Result of an authorization evaluation.

    ``deny_reason`` is NONE iff ``allowed``; the matched role and
    permission are populated only for allowed decisions.
    """
    allowed: bool
    deny_reason: DenyReason
    matched_role: Optional[RoleId] = None
    matched_permission: Optional[PermissionId] = None

    def __post_init__(self) -> None:
        if self.allowed != (self.deny_reason is DenyReason.NONE):
            raise ValueError(
                f"Inconsistent decision: allowed={self.allowed} with reason {self.deny_reason.value}"
            )
        if not self.allowed and (self.matched_role is not None or self.matched_permission is not None):
            raise ValueError("Denied decisions cannot carry a matched role or permission")

    @classmethod
    def allow(cls, role: RoleId, permission: PermissionId) -> AuthorizationDecision:
        return cls(True, DenyReason.NONE, role, permission)

    @classmethod
    def deny(cls, reason: DenyReason) -> AuthorizationDecision:
        if reason is DenyReason.NONE:
            raise ValueError("A denial needs a reason other than NONE")
        return cls(False, reason)

    def __bool__(self) -> bool:
        return self.allowed

    def to_dict(self) -> dict[str, Any]:
        """Serialize for JSON surfaces."""
        return {
            "allowed": self.allowed,
            "deny_reason": self.deny_reason.value,
            "matched_role": None if self.matched_role is None else str(self.matched_role),
            "matched_permission": None if self.matched_permission is None else str(self.matched_permission),
        }
