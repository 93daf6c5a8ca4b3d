"""Periodic poller feeding Pingdom state into the metrics registry.

Each tick lists checks and transactions, maps them through the status
mapper and upserts the results. A failed provider call leaves the existing
series untouched and only drops pingdom_up to 0; there is no backoff, the
next attempt simply happens on the next tick.
"""

import logging
import threading
from typing import TYPE_CHECKING

from pingdom_exporter.exceptions import ProviderError
from pingdom_exporter.services.status_mapper import (
    check_labels,
    is_known_check_status,
    map_check_status,
    map_transaction_status,
    transaction_labels,
)
from pingdom_exporter.utils.lifecycle_coordinator import LifecycleEvent

if TYPE_CHECKING:
    from pingdom_exporter.services.metrics_service import MetricsServiceProtocol
    from pingdom_exporter.services.pingdom_client import ChecksProvider, TransactionsProvider
    from pingdom_exporter.utils.lifecycle_coordinator import LifecycleCoordinatorProtocol

logger = logging.getLogger(__name__)


class PollerService:
    """Polls Pingdom on a fixed interval in a background thread.

    Example usage:
        poller = container.poller_service()
        poller.start()

    Tests call poll_once() directly instead of starting the thread.
    """

    def __init__(
        self,
        checks_provider: "ChecksProvider",
        transactions_provider: "TransactionsProvider",
        metrics_service: "MetricsServiceProtocol",
        lifecycle_coordinator: "LifecycleCoordinatorProtocol",
        wait_seconds: int = 10,
    ):
        """Initialize the poller.

        Args:
            checks_provider: Source of uptime checks
            transactions_provider: Source of transaction checks
            metrics_service: Registry the results are written to
            lifecycle_coordinator: Coordinator for shutdown integration
            wait_seconds: Time to sleep between ticks
        """
        self.checks_provider = checks_provider
        self.transactions_provider = transactions_provider
        self.metrics_service = metrics_service
        self.wait_seconds = wait_seconds
        self.lifecycle_coordinator = lifecycle_coordinator

        self._stop_event = threading.Event()
        self._thread: threading.Thread | None = None

        lifecycle_coordinator.register_lifecycle_notification(self._on_lifecycle_event)
        lifecycle_coordinator.register_shutdown_waiter("PollerService", self._wait_for_stop)

    def start(self) -> None:
        """Start the background poll loop."""
        if self._thread is not None and self._thread.is_alive():
            logger.warning("Poller already running")
            return

        # Clear before checking: a PREPARE_SHUTDOWN landing after this point
        # sets the event again, one landing before it is seen by the check
        self._stop_event.clear()
        if self.lifecycle_coordinator.is_shutting_down():
            self._stop_event.set()
            logger.info("Shutdown in progress, not starting Pingdom poller")
            return

        self._thread = threading.Thread(
            target=self._poll_loop,
            daemon=True,
            name="PollerService",
        )
        self._thread.start()
        logger.info(f"Started Pingdom poller (interval: {self.wait_seconds}s)")

    def stop(self, timeout: float = 5.0) -> bool:
        """Stop the background poll loop.

        Returns:
            True if the poll thread is no longer running.
        """
        self._stop_event.set()
        stopped = self._wait_for_stop(timeout)
        if stopped:
            self._thread = None
            logger.info("Stopped Pingdom poller")
        return stopped

    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def poll_once(self) -> bool:
        """Run a single poll tick.

        Returns:
            True if every Pingdom call in this tick succeeded. The same
            value is written to pingdom_up.
        """
        checks_ok = self._collect_checks()
        transactions_ok = self._collect_transactions()

        ok = checks_ok and transactions_ok
        self.metrics_service.set_liveness(ok)
        return ok

    def _collect_checks(self) -> bool:
        try:
            checks = self.checks_provider.list_checks()
        except ProviderError as e:
            logger.error(f"Error getting checks: {e}")
            return False

        for check in checks:
            if not is_known_check_status(check.status):
                logger.warning(
                    f"Check '{check.name}' reported unknown status '{check.status}'"
                )

            self.metrics_service.set_check_metrics(
                check_labels(check),
                map_check_status(check.status),
                float(check.last_response_time),
            )

        logger.debug(f"Updated metrics for {len(checks)} checks")
        return True

    def _collect_transactions(self) -> bool:
        try:
            transactions = self.transactions_provider.list_transactions()
        except ProviderError as e:
            logger.error(f"Error getting transactions: {e}")
            return False

        for transaction in transactions:
            self.metrics_service.set_transaction_metrics(
                transaction_labels(transaction),
                map_transaction_status(transaction.status),
            )

        logger.debug(f"Updated metrics for {len(transactions)} transactions")
        return True

    def _poll_loop(self) -> None:
        """Background loop: poll, then sleep until the next tick or stop."""
        while not self._stop_event.is_set():
            try:
                self.poll_once()
            except Exception:
                logger.error("Unexpected error while polling Pingdom", exc_info=True)
                self.metrics_service.set_liveness(False)

            if self._stop_event.wait(self.wait_seconds):
                break

    def _wait_for_stop(self, timeout: float) -> bool:
        thread = self._thread
        if thread is None:
            return True
        thread.join(timeout=timeout)
        return not thread.is_alive()

    def _on_lifecycle_event(self, event: LifecycleEvent) -> None:
        if event == LifecycleEvent.PREPARE_SHUTDOWN:
            self._stop_event.set()
