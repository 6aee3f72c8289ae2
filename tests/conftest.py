"""Pytest configuration and shared fixtures for authz_engine tests."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Generator

import pytest
from prometheus_client import CollectorRegistry

from authz_engine.adapters.outbound.memory_stores import InMemoryAssignmentStore, InMemoryRoleStore
from authz_engine.domain.services.evaluator import AuthorizationEngine
from authz_engine.infrastructure.container import Container, reset_container
from authz_engine.infrastructure.metrics import MetricsRegistry

FIXED_NOW = datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)


class MutableClock:
    """Test clock that returns a settable instant."""

    def __init__(self, now: datetime = FIXED_NOW) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, delta: timedelta) -> None:
        self.now = self.now + delta


@pytest.fixture
def clock() -> MutableClock:
    """Provide a clock frozen at FIXED_NOW."""
    return MutableClock()


@pytest.fixture
def role_store() -> InMemoryRoleStore:
    return InMemoryRoleStore()


@pytest.fixture
def assignment_store() -> InMemoryAssignmentStore:
    return InMemoryAssignmentStore()


@pytest.fixture
def engine(
    role_store: InMemoryRoleStore,
    assignment_store: InMemoryAssignmentStore,
    clock: MutableClock,
) -> AuthorizationEngine:
    """Provide an engine over empty in-memory stores and the test clock."""
    return AuthorizationEngine(role_store, assignment_store, clock=clock)


@pytest.fixture
def metrics_registry() -> MetricsRegistry:
    """Provide a fresh metrics registry for each test."""
    # Use a separate registry to avoid conflicts between tests
    registry = CollectorRegistry(auto_describe=True)
    return MetricsRegistry(registry=registry)


@pytest.fixture
def container() -> Generator[Container, None, None]:
    """Provide a fresh DI container for each test."""
    reset_container()
    c = Container()
    yield c
    c.clear()


# Markers for test categories
def pytest_configure(config: pytest.Config) -> None:
    """Configure custom pytest markers."""
    config.addinivalue_line("markers", "unit: mark test as unit test")
    config.addinivalue_line("markers", "integration: mark test as integration test")
