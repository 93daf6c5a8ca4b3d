"""Prometheus metrics registry for the Pingdom exporter.

This service owns the exporter's CollectorRegistry and every series the
exporter publishes. The poller is the only writer; the /metrics endpoint
is the only reader.

Each gauge child is updated under prometheus_client's own value lock, so a
scrape never observes a half-written sample. Series are keyed by their full
label tuple: re-polling a check overwrites its previous sample, and series
for checks that disappear from Pingdom are left in place.
"""

from abc import ABC, abstractmethod

from prometheus_client import CollectorRegistry, Gauge, generate_latest

from pingdom_exporter.exceptions import ConfigurationError
from pingdom_exporter.services.status_mapper import CheckLabels, TransactionLabels

CHECK_LABEL_NAMES = list(CheckLabels._fields)
TRANSACTION_LABEL_NAMES = list(TransactionLabels._fields)


class MetricsServiceProtocol(ABC):
    """Protocol for metrics registry implementations."""

    @abstractmethod
    def set_liveness(self, ok: bool) -> None:
        """Record whether the last poll against Pingdom succeeded."""
        pass

    @abstractmethod
    def set_check_metrics(
        self, labels: CheckLabels, status: float, response_time: float
    ) -> None:
        """Upsert the status and response time samples of one check."""
        pass

    @abstractmethod
    def set_transaction_metrics(self, labels: TransactionLabels, status: float) -> None:
        """Upsert the status sample of one transaction."""
        pass

    @abstractmethod
    def render(self) -> str:
        """Get metrics in Prometheus text format."""
        pass


class MetricsService(MetricsServiceProtocol):
    """Metrics registry backed by a private CollectorRegistry."""

    content_type = "text/plain; version=0.0.4; charset=utf-8"

    def __init__(self, registry: CollectorRegistry | None = None):
        """Initialize metrics service.

        Args:
            registry: Registry to register the exporter's gauges with. A
                fresh one is created when omitted.

        Raises:
            ConfigurationError: If a metric name is already registered.
        """
        self.registry = registry if registry is not None else CollectorRegistry()

        try:
            self._initialize_metrics()
        except ValueError as e:
            raise ConfigurationError(f"Failed to register exporter metrics: {e}") from e

    def _initialize_metrics(self) -> None:
        """Initialize Prometheus metric objects."""
        self.pingdom_up = Gauge(
            "pingdom_up",
            "Whether the last pingdom scrape was successfull (1: up, 0: down)",
            registry=self.registry,
        )

        self.pingdom_uptime_status = Gauge(
            "pingdom_uptime_status",
            "The current status of the check (1: up, 0: down)",
            CHECK_LABEL_NAMES,
            registry=self.registry,
        )

        self.pingdom_uptime_response_time = Gauge(
            "pingdom_uptime_response_time",
            "The response time of last test in milliseconds",
            CHECK_LABEL_NAMES,
            registry=self.registry,
        )

        self.pingdom_transaction_status = Gauge(
            "pingdom_transaction_status",
            "The current status of the transaction (1: successful, 0: failing)",
            TRANSACTION_LABEL_NAMES,
            registry=self.registry,
        )

    def set_liveness(self, ok: bool) -> None:
        self.pingdom_up.set(1 if ok else 0)

    def set_check_metrics(
        self, labels: CheckLabels, status: float, response_time: float
    ) -> None:
        self.pingdom_uptime_status.labels(*labels).set(status)
        self.pingdom_uptime_response_time.labels(*labels).set(response_time)

    def set_transaction_metrics(self, labels: TransactionLabels, status: float) -> None:
        self.pingdom_transaction_status.labels(*labels).set(status)

    def render(self) -> str:
        """Generate metrics in Prometheus text format."""
        return generate_latest(self.registry).decode("utf-8")
