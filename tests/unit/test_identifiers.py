"""Unit tests for identifier value objects."""

from __future__ import annotations

import pytest

from authz_engine.domain.errors import InvalidPermissionError
from authz_engine.domain.value_objects import (
    WILDCARD,
    PermissionId,
    PrincipalId,
    RoleId,
    create_principal_id,
    create_role_id,
)


@pytest.mark.unit
class TestPrincipalAndRoleIds:
    """Tests for opaque string identifiers."""

    def test_equality_by_value(self) -> None:
        """Identifiers built from equal strings are equal."""
        assert PrincipalId("user:42") == PrincipalId("user:42")
        assert RoleId("role:reader") == create_role_id("role:reader")

    def test_create_principal_id(self) -> None:
        """create_principal_id returns the wrapped value."""
        assert create_principal_id("user:42") == "user:42"

    @pytest.mark.parametrize("bad", ["", "   ", None, 42])
    def test_create_principal_id_rejects_invalid(self, bad) -> None:
        """Blank or non-string principal ids are rejected."""
        with pytest.raises(ValueError):
            create_principal_id(bad)

    def test_create_role_id_rejects_blank(self) -> None:
        """Blank role ids are rejected."""
        with pytest.raises(ValueError):
            create_role_id("")


@pytest.mark.unit
class TestPermissionParse:
    """Tests for permission string grammar."""

    def test_simple(self) -> None:
        """resource:action splits into two components."""
        perm = PermissionId.parse("invoice:read")
        assert perm.resource == "invoice"
        assert perm.action == "read"

    def test_hierarchical_resource_splits_on_last_colon(self) -> None:
        """Resource may contain colons; action is after the last one."""
        perm = PermissionId.parse("project:task:read")
        assert perm == PermissionId("project:task", "read")

    def test_hierarchical_wildcard_action(self) -> None:
        """Wildcard action on a hierarchical resource."""
        assert PermissionId.parse("project:task:*") == PermissionId("project:task", WILDCARD)

    def test_bare_wildcard(self) -> None:
        """Bare * means all resources and all actions."""
        assert PermissionId.parse("*") == PermissionId("*", "*")

    def test_wildcard_resource(self) -> None:
        """*:action is a wildcard resource."""
        assert PermissionId.parse("*:read") == PermissionId("*", "read")

    def test_dotted_action_is_opaque(self) -> None:
        """Dots carry no meaning in the grammar."""
        perm = PermissionId.parse("invoice:approval.submit")
        assert perm.resource == "invoice"
        assert perm.action == "approval.submit"

    @pytest.mark.parametrize(
        "text",
        ["", "   ", "invoice", "invoice.read", ":read", "invoice:", " :read", "invoice: "],
    )
    def test_malformed_strings_rejected(self, text: str) -> None:
        """Missing colon or empty segments raise InvalidPermissionError."""
        with pytest.raises(InvalidPermissionError):
            PermissionId.parse(text)

    def test_error_is_value_error_with_message(self) -> None:
        """InvalidPermissionError is a ValueError naming the input."""
        with pytest.raises(ValueError, match="invoice.read"):
            PermissionId.parse("invoice.read")

    def test_non_string_rejected(self) -> None:
        """Non-string input is a grammar fault."""
        with pytest.raises(InvalidPermissionError):
            PermissionId.parse(None)  # type: ignore[arg-type]

    def test_try_parse(self) -> None:
        """try_parse returns None instead of raising."""
        assert PermissionId.try_parse("invoice:read") == PermissionId("invoice", "read")
        assert PermissionId.try_parse("invoice") is None

    def test_direct_construction_rejects_empty_component(self) -> None:
        """Components must be non-empty."""
        with pytest.raises(InvalidPermissionError):
            PermissionId("", "read")


@pytest.mark.unit
class TestPermissionFormat:
    """Tests for the canonical string form."""

    @pytest.mark.parametrize(
        "text",
        ["invoice:read", "project:task:read", "a::b", "tenant:acme:invoice:approve"],
    )
    def test_round_trip(self, text: str) -> None:
        """parse then str yields the original for wildcard-free strings."""
        assert str(PermissionId.parse(text)) == text

    def test_bare_wildcard_canonical(self) -> None:
        """Both *:* and * format as *."""
        assert str(PermissionId.parse("*:*")) == "*"
        assert str(PermissionId.parse("*")) == "*"

    def test_partial_wildcards_format(self) -> None:
        """Single-component wildcards keep the colon form."""
        assert str(PermissionId.parse("invoice:*")) == "invoice:*"
        assert str(PermissionId.parse("*:read")) == "*:read"

    def test_value_property(self) -> None:
        """value is the same as str()."""
        perm = PermissionId("invoice", "read")
        assert perm.value == "invoice:read"

    def test_is_wildcard(self) -> None:
        """is_wildcard reports either component being *."""
        assert PermissionId.parse("invoice:*").is_wildcard
        assert not PermissionId.parse("invoice:read").is_wildcard

    def test_hashable(self) -> None:
        """Permissions can be used as dict keys and set members."""
        assert len({PermissionId.parse("a:b"), PermissionId("a", "b")}) == 1
