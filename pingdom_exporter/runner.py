"""Exporter runner with signal-driven shutdown."""

import logging
import threading

from paste.translogger import TransLogger  # type: ignore[import-untyped]
from waitress import create_server

from pingdom_exporter import create_app
from pingdom_exporter.config import Settings
from pingdom_exporter.services.pingdom_client import PingdomCredentials

logger = logging.getLogger(__name__)


def run(settings: Settings, credentials: PingdomCredentials) -> int:
    """Run the exporter until SIGINT or SIGTERM.

    The listening socket is bound on the calling thread so a port that is
    already taken fails fast, before any polling starts. The waitress
    server and the poller then run on daemon threads while this thread
    waits for the lifecycle coordinator to finish shutting down.

    Returns:
        Process exit code: 0 after a signal, 1 if the port can't be bound.
    """
    app = create_app(settings, credentials, skip_background_services=True)
    container = app.container

    lifecycle_coordinator = container.lifecycle_coordinator()
    # Build the poller first so its stop hooks exist before any signal can land
    poller = container.poller_service()
    lifecycle_coordinator.initialize()

    wsgi = TransLogger(app, setup_console_handler=False)
    try:
        server = create_server(
            wsgi,
            host=settings.host,
            port=settings.port,
            threads=settings.waitress_threads,
        )
    except OSError as e:
        logger.error(f"Failed to listen on {settings.host}:{settings.port}: {e}")
        return 1

    logger.info(f"Using Waitress WSGI server with {settings.waitress_threads} threads")
    thread = threading.Thread(target=server.run, daemon=True, name="waitress")
    thread.start()
    logger.info(f"Listening on: {settings.port}")

    poller.start()

    lifecycle_coordinator.wait_for_shutdown()

    container.pingdom_client().close()
    return 0
