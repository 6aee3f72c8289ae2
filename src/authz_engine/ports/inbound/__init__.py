"""Inbound ports - API contracts for the authorization engine.

Callers depend on these protocols rather than on the concrete engine,
so a remote or cached implementation can be substituted.
"""

from __future__ import annotations

from abc import abstractmethod
from collections.abc import Mapping
from typing import Any, Optional, Protocol, runtime_checkable

from authz_engine.domain.entities.decision import AuthorizationDecision
from authz_engine.domain.value_objects.identifiers import PermissionId


@runtime_checkable
class AuthorizationCheckPort(Protocol):
    """Fluent, single-use authorization request."""

    @abstractmethod
    def on(self, permission: PermissionId | str) -> AuthorizationCheckPort:
        """Set the permission to check (required)."""
        ...

    @abstractmethod
    def in_scope(self, scope: Optional[Mapping[str, str]]) -> AuthorizationCheckPort:
        """Set the requested scope. The request may be more specific than a grant."""
        ...

    @abstractmethod
    def with_attributes(self, attributes: Optional[Mapping[str, Any]]) -> AuthorizationCheckPort:
        """Set runtime attributes passed to grant conditions."""
        ...

    @abstractmethod
    async def evaluate(self) -> AuthorizationDecision:
        """Evaluate and return a decision.

        Raises:
            PermissionNotSpecifiedError: If on() was never called.
        """
        ...


@runtime_checkable
class AuthorizationEnginePort(Protocol):
    """Entry point for authorization checks."""

    @abstractmethod
    def for_principal(self, principal: str) -> AuthorizationCheckPort:
        """Begin a check for a principal."""
        ...


__all__ = [
    "AuthorizationCheckPort",
    "AuthorizationEnginePort",
]
