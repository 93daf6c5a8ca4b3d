"""Pytest configuration and fixtures."""

from collections.abc import Generator

import pytest
from dependency_injector import providers
from flask import Flask
from flask.testing import FlaskClient

from pingdom_exporter import create_app
from pingdom_exporter.config import Settings
from pingdom_exporter.services.container import ServiceContainer
from pingdom_exporter.services.metrics_service import MetricsService
from pingdom_exporter.services.poller_service import PollerService
from tests.testing_utils import StubLifecycleCoordinator, StubPingdomClient


def _build_test_settings() -> Settings:
    """Construct base Settings object for tests."""
    return Settings(
        wait_seconds=1,
        pingdom_api_url="https://pingdom.invalid/api/2.1",
        pingdom_http_timeout=2.0,
        host="127.0.0.1",
        port=9158,
        waitress_threads=2,
        graceful_shutdown_timeout=5,
        log_level="DEBUG",
    )


@pytest.fixture
def test_settings() -> Settings:
    """Create test settings."""
    return _build_test_settings()


@pytest.fixture
def lifecycle_coordinator() -> StubLifecycleCoordinator:
    return StubLifecycleCoordinator()


@pytest.fixture
def pingdom_client() -> StubPingdomClient:
    return StubPingdomClient()


@pytest.fixture
def metrics_service() -> MetricsService:
    """Metrics service on its own registry, isolated per test."""
    return MetricsService()


@pytest.fixture
def poller(
    pingdom_client: StubPingdomClient,
    metrics_service: MetricsService,
    lifecycle_coordinator: StubLifecycleCoordinator,
) -> Generator[PollerService, None, None]:
    service = PollerService(
        checks_provider=pingdom_client,
        transactions_provider=pingdom_client,
        metrics_service=metrics_service,
        lifecycle_coordinator=lifecycle_coordinator,
        wait_seconds=1,
    )
    yield service
    service.stop()


@pytest.fixture
def container(
    pingdom_client: StubPingdomClient,
    metrics_service: MetricsService,
    lifecycle_coordinator: StubLifecycleCoordinator,
) -> ServiceContainer:
    """Service container with Pingdom and signal handling stubbed out."""
    container = ServiceContainer()
    container.lifecycle_coordinator.override(providers.Object(lifecycle_coordinator))
    container.pingdom_client.override(providers.Object(pingdom_client))
    container.metrics_service.override(providers.Object(metrics_service))
    return container


@pytest.fixture
def app(test_settings: Settings, container: ServiceContainer) -> Generator[Flask, None, None]:
    """Create Flask app for testing, without the poller thread."""
    app = create_app(test_settings, container=container, skip_background_services=True)

    yield app

    container.poller_service().stop()
    container.unwire()


@pytest.fixture
def client(app: Flask) -> FlaskClient:
    """Create test client."""
    return app.test_client()
