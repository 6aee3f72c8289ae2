"""Authorization engine domain layer."""

from authz_engine.domain.entities import (
    Assignment,
    AuthorizationDecision,
    AuthorizationRequest,
    Condition,
    DenyReason,
    InactiveReason,
    PermissionGrant,
    Role,
)
from authz_engine.domain.errors import (
    AuthorizationError,
    ClockError,
    InvalidPermissionError,
    PermissionNotSpecifiedError,
    UnsupportedOperationError,
)
from authz_engine.domain.services import (
    AuthorizationCheck,
    AuthorizationEngine,
    ConditionOutcome,
    evaluate_condition,
    permission_matches,
    scope_satisfies,
)
from authz_engine.domain.value_objects import (
    WILDCARD,
    AttributeBag,
    PermissionId,
    PrincipalId,
    RoleId,
    ScopeBag,
    create_principal_id,
    create_role_id,
)

__all__ = [
    # Value objects
    "WILDCARD",
    "AttributeBag",
    "PermissionId",
    "PrincipalId",
    "RoleId",
    "ScopeBag",
    "create_principal_id",
    "create_role_id",
    # Entities
    "Assignment",
    "AuthorizationDecision",
    "AuthorizationRequest",
    "Condition",
    "DenyReason",
    "InactiveReason",
    "PermissionGrant",
    "Role",
    # Errors
    "AuthorizationError",
    "ClockError",
    "InvalidPermissionError",
    "PermissionNotSpecifiedError",
    "UnsupportedOperationError",
    # Services
    "AuthorizationCheck",
    "AuthorizationEngine",
    "ConditionOutcome",
    "evaluate_condition",
    "permission_matches",
    "scope_satisfies",
]
