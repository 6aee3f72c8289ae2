"""Domain entities: roles, grants, assignments and decisions."""

from authz_engine.domain.entities.assignment import Assignment, InactiveReason
from authz_engine.domain.entities.decision import AuthorizationDecision, DenyReason
from authz_engine.domain.entities.request import AuthorizationRequest
from authz_engine.domain.entities.role import Condition, PermissionGrant, Role

__all__ = [
    "Assignment",
    "InactiveReason",
    "AuthorizationDecision",
    "DenyReason",
    "AuthorizationRequest",
    "Condition",
    "PermissionGrant",
    "Role",
]
