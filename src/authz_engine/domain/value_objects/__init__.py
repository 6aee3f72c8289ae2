"""Domain value objects: identifiers and read-only bags."""

from authz_engine.domain.value_objects.bags import (
    EMPTY_ATTRIBUTES,
    EMPTY_SCOPE,
    AttributeBag,
    ScopeBag,
    as_attributes,
    as_scope,
)
from authz_engine.domain.value_objects.identifiers import (
    WILDCARD,
    PermissionId,
    PrincipalId,
    RoleId,
    create_principal_id,
    create_role_id,
)

__all__ = [
    "WILDCARD",
    "PermissionId",
    "PrincipalId",
    "RoleId",
    "create_principal_id",
    "create_role_id",
    "AttributeBag",
    "ScopeBag",
    "EMPTY_ATTRIBUTES",
    "EMPTY_SCOPE",
    "as_attributes",
    "as_scope",
]
