"""Unit tests for grant matching primitives."""

from __future__ import annotations

import pytest

from authz_engine.domain.services.matching import (
    ConditionOutcome,
    evaluate_condition,
    permission_matches,
    scope_satisfies,
)
from authz_engine.domain.value_objects import AttributeBag, PermissionId, ScopeBag


def perm(text: str) -> PermissionId:
    return PermissionId.parse(text)


@pytest.mark.unit
class TestPermissionMatches:
    """Tests for wildcard-capable permission matching."""

    def test_exact_match(self) -> None:
        assert permission_matches(perm("invoice:read"), perm("invoice:read"))

    def test_different_action(self) -> None:
        assert not permission_matches(perm("invoice:read"), perm("invoice:delete"))

    @pytest.mark.parametrize("action", ["read", "write", "approval.submit", "*"])
    def test_wildcard_action_covers_every_action(self, action: str) -> None:
        """R:* matches every action under R."""
        assert permission_matches(perm("invoice:*"), PermissionId("invoice", action))

    @pytest.mark.parametrize("resource", ["invoice", "order", "project:task"])
    def test_wildcard_resource_covers_every_resource(self, resource: str) -> None:
        """*:A matches A under every resource."""
        assert permission_matches(perm("*:read"), PermissionId(resource, "read"))
        assert not permission_matches(perm("*:read"), PermissionId(resource, "write"))

    @pytest.mark.parametrize("requested", ["invoice:read", "project:task:delete", "x:y"])
    def test_bare_wildcard_covers_everything(self, requested: str) -> None:
        assert permission_matches(perm("*"), perm(requested))

    def test_resource_is_not_prefix_matched(self) -> None:
        """invoice:* does not cover invoices:read."""
        assert not permission_matches(perm("invoice:*"), perm("invoices:read"))

    def test_asterisk_inside_text_is_literal(self) -> None:
        """invoice.* is a literal resource, not a glob."""
        assert not permission_matches(PermissionId("invoice.*", "read"), perm("invoices:read"))
        assert not permission_matches(PermissionId("invoice.*", "submit"), perm("invoice.approval:submit"))

    def test_hierarchical_resource_exact(self) -> None:
        """Hierarchical resources compare as whole strings."""
        assert permission_matches(perm("project:task:*"), perm("project:task:read"))
        assert not permission_matches(perm("project:task:*"), perm("project:read"))
        assert not permission_matches(perm("project:*"), perm("project:task:read"))

    def test_requested_wildcard_is_literal(self) -> None:
        """A requested * only matches a granted * or an identical literal."""
        assert not permission_matches(perm("invoice:read"), perm("invoice:*"))
        assert permission_matches(perm("invoice:*"), perm("invoice:*"))


@pytest.mark.unit
class TestScopeSatisfies:
    """Tests for subset scope matching."""

    def test_empty_grant_scope_satisfied_by_anything(self) -> None:
        assert scope_satisfies(ScopeBag(), ScopeBag())
        assert scope_satisfies(ScopeBag(), ScopeBag({"tenant": "acme"}))

    def test_exact(self) -> None:
        assert scope_satisfies(ScopeBag({"tenant": "acme"}), ScopeBag({"tenant": "acme"}))

    def test_different_value(self) -> None:
        assert not scope_satisfies(ScopeBag({"tenant": "acme"}), ScopeBag({"tenant": "other"}))

    def test_missing_key(self) -> None:
        assert not scope_satisfies(ScopeBag({"tenant": "acme"}), ScopeBag())
        assert not scope_satisfies(ScopeBag({"tenant": "acme"}), ScopeBag({"project": "alpha"}))

    def test_more_specific_request_is_fine(self) -> None:
        grant = ScopeBag({"tenant": "acme"})
        assert scope_satisfies(grant, ScopeBag({"tenant": "acme", "project": "alpha"}))

    def test_monotone_under_added_keys(self) -> None:
        """Adding keys keeps satisfaction; removing a required key breaks it."""
        grant = {"tenant": "acme", "project": "alpha"}
        requested = {"tenant": "acme", "project": "alpha"}
        assert scope_satisfies(grant, requested)
        for extra in ("region", "team", "env"):
            requested = {**requested, extra: "x"}
            assert scope_satisfies(grant, requested)
        for required in grant:
            reduced = {k: v for k, v in requested.items() if k != required}
            assert not scope_satisfies(grant, reduced)


@pytest.mark.unit
class TestEvaluateCondition:
    """Tests for fault-tolerant condition evaluation."""

    def test_no_condition_passes(self) -> None:
        assert evaluate_condition(None, AttributeBag()) is ConditionOutcome.PASSED

    def test_true_passes(self) -> None:
        outcome = evaluate_condition(lambda a: a["department"] == "finance", AttributeBag(department="finance"))
        assert outcome is ConditionOutcome.PASSED

    def test_false_fails(self) -> None:
        outcome = evaluate_condition(lambda a: a["department"] == "finance", AttributeBag(department="sales"))
        assert outcome is ConditionOutcome.FAILED

    def test_missing_attribute_faults(self) -> None:
        outcome = evaluate_condition(lambda a: a["department"] == "finance", AttributeBag())
        assert outcome is ConditionOutcome.FAULTED

    def test_arbitrary_exception_faults(self) -> None:
        def boom(attributes: AttributeBag) -> bool:
            raise RuntimeError("backend down")

        assert evaluate_condition(boom, AttributeBag()) is ConditionOutcome.FAULTED

    def test_type_error_faults(self) -> None:
        """Comparing incompatible types inside a condition is a fault."""
        outcome = evaluate_condition(lambda a: a["amount"] < 100, AttributeBag(amount="lots"))
        assert outcome is ConditionOutcome.FAULTED

    def test_truthiness(self) -> None:
        """Non-bool results are judged by truthiness."""
        assert evaluate_condition(lambda a: 1, AttributeBag()) is ConditionOutcome.PASSED
        assert evaluate_condition(lambda a: [], AttributeBag()) is ConditionOutcome.FAILED

    def test_base_exceptions_propagate(self) -> None:
        """KeyboardInterrupt and friends are not swallowed."""
        def interrupt(attributes: AttributeBag) -> bool:
            raise KeyboardInterrupt

        with pytest.raises(KeyboardInterrupt):
            evaluate_condition(interrupt, AttributeBag())
