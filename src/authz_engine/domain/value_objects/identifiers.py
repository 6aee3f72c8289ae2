"""Authorization identifiers (type-safe).

Principal and role identifiers use NewType for type checking without
runtime overhead. Permissions carry structure (resource + action) and
are modelled as a frozen value object with an explicit parser.

Permission grammar:
    resource:action      e.g. "invoice:read"
    a:b:action           resource "a:b" (split on the last colon)
    resource:*           every action on one resource
    *:action             one action on every resource
    *                    everything (same as "*:*")
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import NewType, Optional

from authz_engine.domain.errors import InvalidPermissionError

PrincipalId = NewType("PrincipalId", str)
RoleId = NewType("RoleId", str)

WILDCARD = "*"
"""Whole-component wildcard token. Never a substring or prefix glob."""

_SEPARATOR = ":"


def _require_text(value: object, kind: str) -> str:
    if not isinstance(value, str):
        raise ValueError(f"{kind} must be a string, got {type(value).__name__}")
    if not value.strip():
        raise ValueError(f"{kind} cannot be empty")
    return value


def create_principal_id(value: str) -> PrincipalId:
    """Create a principal ID.

    Args:
        value: Opaque principal identifier (e.g., "user:42").

    Returns:
        Principal ID.

    Raises:
        ValueError: If value is not a non-blank string.
    """
    return PrincipalId(_require_text(value, "Principal id"))


def create_role_id(value: str) -> RoleId:
    """Create a role ID.

    Args:
        value: Stable role name (e.g., "role:reader").

    Returns:
        Role ID.

    Raises:
        ValueError: If value is not a non-blank string.
    """
    return RoleId(_require_text(value, "Role id"))


@dataclass(frozen=True, slots=True)
class PermissionId:
    """An action on a resource.

    Either component may be the literal wildcard ``*``. Equality is by
    value, so parsed and directly constructed permissions compare equal.

    Example:
        >>> PermissionId.parse("project:task:read")
        PermissionId(resource='project:task', action='read')
        >>> str(PermissionId("*", "*"))
        '*'
    """

    resource: str
    action: str

    def __post_init__(self) -> None:
        for name in ("resource", "action"):
            component = getattr(self, name)
            if not isinstance(component, str) or not component.strip():
                raise InvalidPermissionError(
                    f"{self.resource!r}:{self.action!r}",
                    f"{name} must be a non-empty string",
                )

    @classmethod
    def parse(cls, text: str) -> PermissionId:
        """Parse a permission string.

        The action is everything after the last ':'; the resource is
        everything before it and may itself contain colons.

        Args:
            text: Permission string.

        Returns:
            Parsed permission.

        Raises:
            InvalidPermissionError: If the string is blank, has no ':' or
                has an empty resource or action segment.
        """
        if not isinstance(text, str) or not text.strip():
            raise InvalidPermissionError(text, "permission string cannot be empty")

        if text == WILDCARD:
            return cls(WILDCARD, WILDCARD)

        resource, sep, action = text.rpartition(_SEPARATOR)
        if not sep:
            raise InvalidPermissionError(text, "expected 'resource:action'")
        if not resource.strip() or not action.strip():
            raise InvalidPermissionError(text, "resource and action must be non-empty")

        return cls(resource, action)

    @classmethod
    def try_parse(cls, text: str) -> Optional[PermissionId]:
        """Parse a permission string, returning None instead of raising."""
        try:
            return cls.parse(text)
        except InvalidPermissionError:
            return None

    @property
    def is_wildcard(self) -> bool:
        """True if either component is the wildcard token."""
        return self.resource == WILDCARD or self.action == WILDCARD

    @property
    def value(self) -> str:
        """Canonical string form (same as str())."""
        return str(self)

    def __str__(self) -> str:
        if self.resource == WILDCARD and self.action == WILDCARD:
            return WILDCARD
        return f"{self.resource}{_SEPARATOR}{self.action}"
