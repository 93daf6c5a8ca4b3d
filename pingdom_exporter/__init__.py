"""Prometheus exporter for Pingdom checks and transactions."""

from pingdom_exporter.app import App
from pingdom_exporter.config import Settings
from pingdom_exporter.services.container import ServiceContainer
from pingdom_exporter.services.pingdom_client import PingdomCredentials

__version__ = "1.0.0"


def create_app(
    settings: "Settings | None" = None,
    credentials: "PingdomCredentials | None" = None,
    container: "ServiceContainer | None" = None,
    skip_background_services: bool = False,
) -> App:
    """Create and configure the exposition application.

    Args:
        settings: Settings instance (loaded from the environment if omitted)
        credentials: Pingdom credentials; required unless a pre-built
            container already provides the Pingdom client
        container: Optional pre-built container (tests override providers)
        skip_background_services: Don't start the poller thread

    Returns:
        Configured Flask application instance
    """
    app = App(__name__)

    if settings is None:
        settings = Settings.load()

    settings.validate_config()

    if container is None:
        container = ServiceContainer()
    container.config.override(settings)
    if credentials is not None:
        container.credentials.override(credentials)

    # Wire container to all API modules via package scanning
    container.wire(packages=["pingdom_exporter.api"])

    app.container = container

    from pingdom_exporter.api.metrics import metrics_bp
    from pingdom_exporter.api.root import root_bp

    app.register_blueprint(root_bp)
    app.register_blueprint(metrics_bp)

    # Registering the gauges here surfaces duplicate registrations at startup
    container.metrics_service()

    if not skip_background_services:
        container.poller_service().start()
        app.logger.info("Pingdom poller started")

    return app
