"""Outbound adapters: reference in-memory stores and telemetry."""

from authz_engine.adapters.outbound.memory_stores import InMemoryAssignmentStore, InMemoryRoleStore
from authz_engine.adapters.outbound.telemetry import TelemetryDecisionObserver

__all__ = [
    "InMemoryAssignmentStore",
    "InMemoryRoleStore",
    "TelemetryDecisionObserver",
]
