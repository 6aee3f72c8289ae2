"""Dependency injection container.

Holds the process-wide singletons of an authorization deployment: the
Config, the MetricsRegistry, and the AuthorizationHost with its engine.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Callable, Optional, TypeVar

from authz_engine.infrastructure.config import Config, get_config
from authz_engine.infrastructure.logging import get_logger, setup_logging
from authz_engine.infrastructure.metrics import MetricsRegistry, get_metrics, setup_metrics
from authz_engine.infrastructure.tracing import setup_tracing

if TYPE_CHECKING:
    from authz_engine.application.builder import AuthorizationBuilder
    from authz_engine.application.host import AuthorizationHost
    from authz_engine.ports.outbound import AssignmentStore, RoleStore

T = TypeVar("T")


class Container:
    """Registry of singletons keyed by type."""

    def __init__(self) -> None:
        self._instances: dict[type, Any] = {}

    def register_singleton(self, interface: type[T], instance: T) -> None:
        """Register ``instance`` for ``interface``, replacing any earlier one."""
        self._instances[interface] = instance

    def resolve(self, interface: type[T]) -> T:
        try:
            return self._instances[interface]
        except KeyError:
            raise KeyError(f"Nothing registered for {interface.__name__}") from None

    def is_registered(self, interface: type) -> bool:
        return interface in self._instances

    def clear(self) -> None:
        self._instances.clear()


_container: Container | None = None


def get_container() -> Container:
    """Process-wide container used when bootstrap() is given none."""
    global _container
    if _container is None:
        _container = Container()
    return _container


def reset_container() -> None:
    global _container
    if _container is not None:
        _container.clear()
    _container = None


def bootstrap(config: Config | None = None, container: Container | None = None) -> Container:
    """Configure logging, tracing and metrics from config and register them.

    The Prometheus exporter is started only when ``config.metrics.enabled``.
    """
    config = config or get_config()
    container = container or get_container()

    obs = config.observability
    setup_logging(obs.log_level, obs.log_format, service=obs.otel_service_name)
    setup_tracing(obs.otel_service_name, obs.otel_endpoint, obs.otel_sample_ratio)
    metrics = setup_metrics(config.metrics.port) if config.metrics.enabled else get_metrics()

    container.register_singleton(Config, config)
    container.register_singleton(MetricsRegistry, metrics)
    get_logger(__name__).info("authz_engine_bootstrapped", metrics_enabled=config.metrics.enabled)
    return container


def register_authorization(
    container: Container,
    configure: Optional[Callable[[AuthorizationBuilder], object]] = None,
    role_store: RoleStore | None = None,
    assignment_store: AssignmentStore | None = None,
) -> AuthorizationHost:
    """Build an AuthorizationHost and register it with its engine.

    Args:
        container: Container to register into.
        configure: Optional callback adding roles/assignments to the builder.
        role_store: Optional custom role store.
        assignment_store: Optional custom assignment store.

    Returns:
        The registered host.
    """
    from authz_engine.adapters.outbound.telemetry import TelemetryDecisionObserver
    from authz_engine.application.builder import AuthorizationBuilder
    from authz_engine.application.host import AuthorizationHost
    from authz_engine.domain.services.evaluator import AuthorizationEngine

    builder = AuthorizationBuilder.create()
    if role_store is not None:
        builder.use_role_store(role_store)
    if assignment_store is not None:
        builder.use_assignment_store(assignment_store)
    if container.is_registered(MetricsRegistry):
        builder.observe_with(TelemetryDecisionObserver(container.resolve(MetricsRegistry)))
    if configure is not None:
        configure(builder)

    host = builder.build()
    container.register_singleton(AuthorizationHost, host)
    container.register_singleton(AuthorizationEngine, host.engine)
    return host
