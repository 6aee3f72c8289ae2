"""Unit tests for the in-memory role and assignment stores."""

from __future__ import annotations

import threading

import pytest

from authz_engine.adapters.outbound.memory_stores import InMemoryAssignmentStore, InMemoryRoleStore
from authz_engine.domain.entities import Assignment, PermissionGrant, Role
from authz_engine.domain.value_objects import PermissionId, PrincipalId, RoleId

ALICE = PrincipalId("user:alice")
BOB = PrincipalId("user:bob")
READER = RoleId("role:reader")
WRITER = RoleId("role:writer")


def make_role(role_id: RoleId, *permissions: str) -> Role:
    return Role.of(role_id, [PermissionGrant(PermissionId.parse(p)) for p in permissions])


@pytest.mark.unit
class TestInMemoryRoleStore:
    """Tests for InMemoryRoleStore."""

    @pytest.mark.asyncio
    async def test_add_and_get(self, role_store: InMemoryRoleStore) -> None:
        role = make_role(READER, "invoice:read")
        role_store.add(role)
        assert await role_store.get_role(READER) is role
        assert len(role_store) == 1

    @pytest.mark.asyncio
    async def test_get_unknown_returns_none(self, role_store: InMemoryRoleStore) -> None:
        assert await role_store.get_role(RoleId("role:ghost")) is None

    @pytest.mark.asyncio
    async def test_add_replaces_by_id(self, role_store: InMemoryRoleStore) -> None:
        role_store.add(make_role(READER, "invoice:read"))
        replacement = make_role(READER, "invoice:read", "report:read")
        role_store.add(replacement)
        assert len(role_store) == 1
        assert await role_store.get_role(READER) is replacement

    def test_remove(self, role_store: InMemoryRoleStore) -> None:
        role_store.add(make_role(READER, "invoice:read"))
        assert role_store.remove(READER)
        assert not role_store.remove(READER)
        assert len(role_store) == 0

    def test_list_roles_is_snapshot(self, role_store: InMemoryRoleStore) -> None:
        role_store.add(make_role(READER, "invoice:read"))
        snapshot = role_store.list_roles()
        role_store.add(make_role(WRITER, "invoice:write"))
        assert [r.role_id for r in snapshot] == [READER]
        assert [r.role_id for r in role_store.list_roles()] == [READER, WRITER]

    def test_mutations_counted(self, metrics_registry) -> None:
        store = InMemoryRoleStore(metrics=metrics_registry)
        store.add(make_role(READER, "invoice:read"))
        store.add(make_role(WRITER, "invoice:write"))
        store.remove(WRITER)
        store.remove(WRITER)

        registry = metrics_registry.registry
        assert registry.get_sample_value(
            "authz_store_mutations_total", {"store": "role", "operation": "add"}
        ) == 2
        assert registry.get_sample_value(
            "authz_store_mutations_total", {"store": "role", "operation": "remove"}
        ) == 1


@pytest.mark.unit
class TestInMemoryAssignmentStore:
    """Tests for InMemoryAssignmentStore."""

    @pytest.mark.asyncio
    async def test_lookup_filters_by_principal_in_insertion_order(
        self, assignment_store: InMemoryAssignmentStore
    ) -> None:
        assignment_store.add(Assignment(ALICE, WRITER))
        assignment_store.add(Assignment(BOB, READER))
        assignment_store.add(Assignment(ALICE, READER))

        found = await assignment_store.get_assignments_for_principal(ALICE)
        assert [a.role for a in found] == [WRITER, READER]
        assert len(assignment_store) == 3

    @pytest.mark.asyncio
    async def test_unknown_principal_is_empty(self, assignment_store: InMemoryAssignmentStore) -> None:
        assert await assignment_store.get_assignments_for_principal(ALICE) == []

    @pytest.mark.asyncio
    async def test_lookup_returns_snapshot(self, assignment_store: InMemoryAssignmentStore) -> None:
        assignment_store.add(Assignment(ALICE, READER))
        snapshot = await assignment_store.get_assignments_for_principal(ALICE)
        assignment_store.add(Assignment(ALICE, WRITER))
        snapshot.clear()

        assert len(await assignment_store.get_assignments_for_principal(ALICE)) == 2

    def test_revoke_marks_every_matching_record(self, assignment_store: InMemoryAssignmentStore) -> None:
        first = Assignment(ALICE, READER)
        second = Assignment(ALICE, READER)
        other = Assignment(ALICE, WRITER)
        for a in (first, second, other):
            assignment_store.add(a)

        assert assignment_store.revoke(ALICE, READER) == 2
        assert first.revoked and second.revoked
        assert not other.revoked

    def test_revoke_is_idempotent(self, assignment_store: InMemoryAssignmentStore) -> None:
        assignment_store.add(Assignment(ALICE, READER))
        assert assignment_store.revoke(ALICE, READER) == 1
        assert assignment_store.revoke(ALICE, READER) == 0

    def test_revoke_unknown_pair_is_noop(self, assignment_store: InMemoryAssignmentStore) -> None:
        assignment_store.add(Assignment(ALICE, READER))
        assert assignment_store.revoke(BOB, READER) == 0
        assert assignment_store.revoke(ALICE, WRITER) == 0

    def test_mutations_counted(self, metrics_registry) -> None:
        store = InMemoryAssignmentStore(metrics=metrics_registry)
        store.add(Assignment(ALICE, READER))
        store.revoke(ALICE, READER)
        store.revoke(ALICE, READER)

        registry = metrics_registry.registry
        assert registry.get_sample_value(
            "authz_store_mutations_total", {"store": "assignment", "operation": "add"}
        ) == 1
        assert registry.get_sample_value(
            "authz_store_mutations_total", {"store": "assignment", "operation": "revoke"}
        ) == 1

    def test_concurrent_adds(self, assignment_store: InMemoryAssignmentStore) -> None:
        """Concurrent writers never lose an assignment."""
        workers = 8
        per_worker = 250

        def writer(index: int) -> None:
            principal = PrincipalId(f"user:{index}")
            for _ in range(per_worker):
                assignment_store.add(Assignment(principal, READER))

        threads = [threading.Thread(target=writer, args=(i,)) for i in range(workers)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(assignment_store) == workers * per_worker
