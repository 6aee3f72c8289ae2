"""Read-only key/value bags used as matching and condition input.

ScopeBag narrows where a grant applies (tenant, project, ...).
AttributeBag carries runtime facts for attribute-based conditions.

Both copy their input on construction so later mutation of the source
mapping by the caller is never observed during an evaluation.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from typing import Any, Optional


class _FrozenBag(Mapping[str, Any]):
    """Immutable mapping with value equality against any Mapping."""

    __slots__ = ("_items",)

    def __init__(self, items: Optional[Mapping[str, Any]] = None, **kwargs: Any) -> None:
        data = dict(items or {})
        data.update(kwargs)
        for key in data:
            if not isinstance(key, str):
                raise TypeError(f"{type(self).__name__} keys must be strings, got {key!r}")
        self._items = data

    def __getitem__(self, key: str) -> Any:
        return self._items[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._items!r})"


class ScopeBag(_FrozenBag):
    """Context constraint: string keys to string values.

    An empty bag is unconstrained and is satisfied by any requested scope.
    """

    __slots__ = ()

    def __init__(self, items: Optional[Mapping[str, str]] = None, **kwargs: str) -> None:
        super().__init__(items, **kwargs)
        for key, value in self._items.items():
            if not isinstance(value, str):
                raise TypeError(f"Scope value for {key!r} must be a string, got {value!r}")

    def __hash__(self) -> int:
        return hash(frozenset(self._items.items()))


class AttributeBag(_FrozenBag):
    """Runtime facts for ABAC conditions.

    Reading a missing key raises KeyError. Conditions that index a
    missing attribute therefore fault, which the engine turns into a deny.
    """

    __slots__ = ()


EMPTY_SCOPE = ScopeBag()
EMPTY_ATTRIBUTES = AttributeBag()


def as_scope(scope: Optional[Mapping[str, str]]) -> ScopeBag:
    """Coerce an optional mapping into a ScopeBag."""
    if scope is None:
        return EMPTY_SCOPE
    if isinstance(scope, ScopeBag):
        return scope
    return ScopeBag(scope)


def as_attributes(attributes: Optional[Mapping[str, Any]]) -> AttributeBag:
    """Coerce an optional mapping into an AttributeBag."""
    if attributes is None:
        return EMPTY_ATTRIBUTES
    if isinstance(attributes, AttributeBag):
        return attributes
    return AttributeBag(attributes)
