"""Role and permission grant entities.

A Role is a named, reusable bundle of grants. Each grant offers one
permission, optionally narrowed by a scope and guarded by an
attribute-based condition.

References:
    - NIST SP 800-162 (ABAC Guide)
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Optional, Protocol

from authz_engine.domain.value_objects.bags import EMPTY_SCOPE, AttributeBag, ScopeBag
from authz_engine.domain.value_objects.identifiers import PermissionId, RoleId


class Condition(Protocol):
    """Boolean predicate over runtime attributes.

    Any callable taking an AttributeBag and returning a bool qualifies,
    including plain functions and lambdas. It must not have side effects
    the engine depends on; raising is treated as a failed condition.
    """

    def __call__(self, attributes: AttributeBag) -> bool: ...


@dataclass(frozen=True)
class PermissionGrant:
    """One permission offered by a role."""
    permission: PermissionId
    scope: ScopeBag = EMPTY_SCOPE
    condition: Optional[Condition] = None

    def __post_init__(self) -> None:
        if not isinstance(self.permission, PermissionId):
            raise TypeError(
                f"permission must be a PermissionId, got {type(self.permission).__name__}; "
                "use PermissionId.parse() for strings"
            )
        if not isinstance(self.scope, ScopeBag):
            object.__setattr__(self, "scope", ScopeBag(self.scope))
        if self.condition is not None and not callable(self.condition):
            raise TypeError("condition must be callable")

    @property
    def is_conditional(self) -> bool:
        return self.condition is not None


@dataclass(frozen=True)
class Role:
    """Named authority bundle.

    Grant order is significant: the engine commits to the first grant
    whose permission and scope both match.
    """
    role_id: RoleId
    name: str
    grants: tuple[PermissionGrant, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        if not self.role_id:
            raise ValueError("Role id cannot be empty")
        # Accept any iterable but freeze it so the role stays immutable.
        object.__setattr__(self, "grants", tuple(self.grants))

    @classmethod
    def of(cls, role_id: RoleId, grants: Iterable[PermissionGrant], name: str | None = None) -> Role:
        """Create a role whose display name defaults to its id."""
        return cls(role_id=role_id, name=name or str(role_id), grants=tuple(grants))

    def __len__(self) -> int:
        return len(self.grants)
