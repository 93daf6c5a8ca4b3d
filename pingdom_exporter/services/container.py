"""Dependency injection container for the exporter."""

from dependency_injector import containers, providers

from pingdom_exporter.config import Settings
from pingdom_exporter.services.metrics_service import MetricsService
from pingdom_exporter.services.pingdom_client import PingdomClient, PingdomCredentials
from pingdom_exporter.services.poller_service import PollerService
from pingdom_exporter.utils.lifecycle_coordinator import LifecycleCoordinator


class ServiceContainer(containers.DeclarativeContainer):
    """Container for service dependency injection."""

    # Configuration providers
    config = providers.Dependency(instance_of=Settings)
    credentials = providers.Dependency(instance_of=PingdomCredentials)

    # Lifecycle coordinator - signal handling and shutdown sequencing
    lifecycle_coordinator = providers.Singleton(
        LifecycleCoordinator,
        graceful_shutdown_timeout=config.provided.graceful_shutdown_timeout,
    )

    # Metrics service - owns the exporter's CollectorRegistry
    metrics_service = providers.Singleton(MetricsService)

    # Pingdom API client - serves both checks and transactions
    pingdom_client = providers.Singleton(
        PingdomClient,
        credentials=credentials,
        base_url=config.provided.pingdom_api_url,
        http_timeout=config.provided.pingdom_http_timeout,
    )

    # Poller - background thread writing Pingdom state into metrics_service
    poller_service = providers.Singleton(
        PollerService,
        checks_provider=pingdom_client,
        transactions_provider=pingdom_client,
        metrics_service=metrics_service,
        lifecycle_coordinator=lifecycle_coordinator,
        wait_seconds=config.provided.wait_seconds,
    )
