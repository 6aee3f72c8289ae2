"""Authorization request entity."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from authz_engine.domain.value_objects.bags import (
    EMPTY_ATTRIBUTES,
    EMPTY_SCOPE,
    AttributeBag,
    ScopeBag,
)
from authz_engine.domain.value_objects.identifiers import PermissionId, PrincipalId


@dataclass(frozen=True)
class AuthorizationRequest:
    """May ``principal`` perform ``permission`` in ``scope`` given ``attributes``?

    ``permission`` is optional only so that a partially built fluent check
    can be represented; evaluating a request without one is a usage fault.
    """
    principal: PrincipalId
    permission: Optional[PermissionId] = None
    scope: ScopeBag = EMPTY_SCOPE
    # AttributeBag values need not hash, so the bag itself is unhashable.
    attributes: AttributeBag = field(default_factory=lambda: EMPTY_ATTRIBUTES)
