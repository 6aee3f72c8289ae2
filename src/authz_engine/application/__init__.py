"""Application layer for the authorization engine."""

from authz_engine.application.builder import AuthorizationBuilder, RoleBuilder
from authz_engine.application.host import AuthorizationHost

__all__ = [
    "AuthorizationBuilder",
    "AuthorizationHost",
    "RoleBuilder",
]
