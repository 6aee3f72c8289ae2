"""Usage faults raised by the authorization engine.

Denials are never raised: they are ordinary AuthorizationDecision values.
Only caller programming errors cross the engine boundary as exceptions.
"""

from __future__ import annotations


class AuthorizationError(Exception):
    """Base class for authorization engine usage faults."""
    pass


class InvalidPermissionError(AuthorizationError, ValueError):
    """Permission string does not follow the ``resource:action`` grammar."""

    def __init__(self, text: object, detail: str) -> None:
        self.text = text
        super().__init__(f"Invalid permission {text!r}: {detail}")


class PermissionNotSpecifiedError(AuthorizationError):
    """An authorization check was evaluated before a permission was given."""
    pass


class UnsupportedOperationError(AuthorizationError):
    """Management operation is not supported by the configured store."""
    pass


class ClockError(AuthorizationError):
    """The engine clock returned a naive datetime (a deployment fault)."""
    pass
