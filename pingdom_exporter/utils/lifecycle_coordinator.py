"""Signal-driven shutdown sequencing for the exporter process.

The main thread parks in wait_for_shutdown() while waitress and the poller
run on daemon threads. A SIGINT or SIGTERM walks the registered listeners
through PREPARE_SHUTDOWN, SHUTDOWN and AFTER_SHUTDOWN and then releases the
main thread. Completion is latched, so a signal that lands before the main
thread starts waiting is not lost.
"""

import logging
import signal
import threading
import time
from abc import ABC, abstractmethod
from collections.abc import Callable
from enum import Enum

logger = logging.getLogger(__name__)


class LifecycleEvent(str, Enum):
    PREPARE_SHUTDOWN = "prepare-shutdown"
    SHUTDOWN = "shutdown"
    AFTER_SHUTDOWN = "after-shutdown"


class LifecycleCoordinatorProtocol(ABC):
    """Protocol for lifecycle coordinator implementations."""

    @abstractmethod
    def initialize(self) -> None: ...

    @abstractmethod
    def register_lifecycle_notification(self, callback: Callable[[LifecycleEvent], None]) -> None: ...

    @abstractmethod
    def register_shutdown_waiter(self, name: str, handler: Callable[[float], bool]) -> None: ...

    @abstractmethod
    def is_shutting_down(self) -> bool: ...

    @abstractmethod
    def shutdown(self) -> None: ...

    @abstractmethod
    def wait_for_shutdown(self, timeout: float | None = None) -> bool:
        """Block until AFTER_SHUTDOWN has been raised.

        Returns:
            True once shutdown has completed, False on timeout.
        """
        ...


class LifecycleCoordinator(LifecycleCoordinatorProtocol):
    """Coordinator for SIGINT/SIGTERM driven shutdown.

    Waiters share a single deadline of graceful_shutdown_timeout seconds,
    counted from PREPARE_SHUTDOWN. A waiter that is still running when the
    deadline passes is reported and the remaining ones are skipped.
    """

    def __init__(self, graceful_shutdown_timeout: int):
        self._graceful_shutdown_timeout = graceful_shutdown_timeout
        self._shutting_down = False
        self._lock = threading.RLock()
        self._listeners: list[Callable[[LifecycleEvent], None]] = []
        self._waiters: dict[str, Callable[[float], bool]] = {}
        self._shutdown_complete = threading.Event()
        self.received_signal: str | None = None

    def initialize(self) -> None:
        """Install the SIGINT/SIGTERM handlers. Must run on the main thread."""
        for signum in (signal.SIGINT, signal.SIGTERM):
            signal.signal(signum, self._handle_signal)
        logger.debug("Installed SIGINT/SIGTERM handlers")

    def register_lifecycle_notification(self, callback: Callable[[LifecycleEvent], None]) -> None:
        with self._lock:
            self._listeners.append(callback)

    def register_shutdown_waiter(self, name: str, handler: Callable[[float], bool]) -> None:
        with self._lock:
            self._waiters[name] = handler

    def is_shutting_down(self) -> bool:
        with self._lock:
            return self._shutting_down

    def wait_for_shutdown(self, timeout: float | None = None) -> bool:
        return self._shutdown_complete.wait(timeout)

    def _handle_signal(self, signum: int, frame: object) -> None:
        self.received_signal = signal.Signals(signum).name
        logger.info(f"Received {self.received_signal}, exiting")
        self.shutdown()

    def shutdown(self) -> None:
        with self._lock:
            if self._shutting_down:
                return
            self._shutting_down = True
            waiters = list(self._waiters.items())

        deadline = time.monotonic() + self._graceful_shutdown_timeout

        self._notify(LifecycleEvent.PREPARE_SHUTDOWN)
        self._drain(waiters, deadline)
        self._notify(LifecycleEvent.SHUTDOWN)
        self._notify(LifecycleEvent.AFTER_SHUTDOWN)

        self._shutdown_complete.set()

    def _drain(self, waiters: list[tuple[str, Callable[[float], bool]]], deadline: float) -> None:
        for name, waiter in waiters:
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                logger.warning(f"Graceful shutdown timeout reached, not waiting for {name}")
                return
            try:
                if not waiter(remaining):
                    logger.warning(f"{name} still running after {remaining:.1f}s")
            except Exception as e:
                logger.error(f"Shutdown waiter {name} failed: {e}")

    def _notify(self, event: LifecycleEvent) -> None:
        with self._lock:
            listeners = list(self._listeners)

        for listener in listeners:
            try:
                listener(event)
            except Exception as e:
                logger.error(f"Lifecycle listener failed on {event.value}: {e}")
