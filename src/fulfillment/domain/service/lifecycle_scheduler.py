"""Domain service: Lifecycle Scheduler.

A single background thread that, once per tick, moves every order whose
dwell time has run out one step along Pending -> Shipped -> Delivered,
then writes the batch. Two steps are never taken in one tick, however
long the order has waited.
"""

from __future__ import annotations

import threading
from datetime import timedelta

import structlog

from fulfillment.domain.exceptions import PersistenceError, ValidationError
from fulfillment.domain.service.order_ledger import OrderLedger

logger = structlog.get_logger(__name__)

DEFAULT_TICK_SECONDS = 1.0
DEFAULT_PENDING_TO_SHIPPED_SECONDS = 10
DEFAULT_SHIPPED_TO_DELIVERED_SECONDS = 20


class LifecycleScheduler:

    def __init__(
        self,
        ledger: OrderLedger,
        pending_to_shipped_seconds: float = DEFAULT_PENDING_TO_SHIPPED_SECONDS,
        shipped_to_delivered_seconds: float = DEFAULT_SHIPPED_TO_DELIVERED_SECONDS,
        tick_seconds: float = DEFAULT_TICK_SECONDS,
    ) -> None:
        if tick_seconds <= 0:
            raise ValidationError("Scheduler tick must be positive")
        self._ledger = ledger
        self._tick_seconds = tick_seconds
        self._set_durations(pending_to_shipped_seconds, shipped_to_delivered_seconds)
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None
        self._control_lock = threading.Lock()

    @property
    def is_enabled(self) -> bool:
        thread = self._thread
        return thread is not None and thread.is_alive() and not self._stop.is_set()

    @property
    def pending_to_shipped(self) -> timedelta:
        return self._pending_to_shipped

    @property
    def shipped_to_delivered(self) -> timedelta:
        return self._shipped_to_delivered

    def enable(
        self,
        pending_to_shipped_seconds: float | None = None,
        shipped_to_delivered_seconds: float | None = None,
    ) -> bool:
        """Start the background thread, optionally with new durations.

        Returns the state before the call: True means the scheduler was
        already running and nothing changed.
        """
        with self._control_lock:
            if self.is_enabled:
                logger.info("Lifecycle scheduler already enabled")
                return True

            self._set_durations(
                self._pending_to_shipped.total_seconds()
                if pending_to_shipped_seconds is None
                else pending_to_shipped_seconds,
                self._shipped_to_delivered.total_seconds()
                if shipped_to_delivered_seconds is None
                else shipped_to_delivered_seconds,
            )
            self._stop.clear()
            self._thread = threading.Thread(
                target=self._run, name="lifecycle-scheduler", daemon=True
            )
            self._thread.start()

        logger.info(
            "Lifecycle scheduler enabled",
            pending_to_shipped_seconds=self._pending_to_shipped.total_seconds(),
            shipped_to_delivered_seconds=self._shipped_to_delivered.total_seconds(),
            tick_seconds=self._tick_seconds,
        )
        return False

    def disable(self) -> None:
        """Stop the background thread and wait for it to exit.

        Returns within one tick; the wait is interrupted by the stop event.
        """
        with self._control_lock:
            thread = self._thread
            if thread is None:
                return
            self._stop.set()
            thread.join()
            self._thread = None
        logger.info("Lifecycle scheduler disabled")

    def run_once(self) -> int:
        """One scan of the ledger; persists if anything moved."""
        changed = self._ledger.advance_lifecycle(
            self._pending_to_shipped, self._shipped_to_delivered
        )
        if changed:
            logger.info("Lifecycle batch applied", changed=changed)
            try:
                self._ledger.persist()
            except PersistenceError as exc:
                # The next batch rewrites the whole collection.
                logger.error("Failed to persist lifecycle batch", error=str(exc))
        return changed

    # --- Internal logic -------------------------------------------------------

    def _run(self) -> None:
        while not self._stop.wait(self._tick_seconds):
            self.run_once()

    def _set_durations(
        self,
        pending_to_shipped_seconds: float,
        shipped_to_delivered_seconds: float,
    ) -> None:
        if pending_to_shipped_seconds < 0 or shipped_to_delivered_seconds < 0:
            raise ValidationError("Lifecycle durations cannot be negative")
        self._pending_to_shipped = timedelta(seconds=pending_to_shipped_seconds)
        self._shipped_to_delivered = timedelta(seconds=shipped_to_delivered_seconds)
