# =============================================================================
# inventory_core/offline/sync_queue.py
# Persisted Retry Queue for Remote Mirror Deliveries
# =============================================================================
"""
SyncQueueService - eventual delivery of mutations to the remote mirror.

Features:
- Entries persisted in the local store under "syncQueue"
- Single-flight drain: one pass at a time per service, extra triggers are no-ops
- Bounded retry: an entry is dropped once attempts exceeds max_attempts
- Unknown actions dropped unconditionally
- One drain shortly after start, optional periodic drain thread
- Sync state tracking and callbacks

Entry lifecycle:
    PENDING -> DELIVERED (removed)
            -> RETRY_PENDING (attempts + 1, kept)
            -> DROPPED (attempts > max_attempts, removed)
"""

from __future__ import annotations
import threading
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Callable, Dict, List, Optional
import logging

from inventory_core.api import RemoteGateway, RemoteResult
from inventory_core.config import RemoteConfig
from inventory_core.errors import RetryExhaustedError, handle_error
from inventory_core.models import SyncQueueEntry
from inventory_core.offline.local_store import SYNC_QUEUE_KEY, LocalStore
from inventory_core.ui.presenter import (
    LoggingPresenter,
    Presenter,
    SYNC_DELIVERED_MESSAGE,
    SYNC_DROPPED_MESSAGE,
    SYNC_QUEUED_MESSAGE,
)

logger = logging.getLogger(__name__)


class EntryTransition(Enum):
    """What a drain pass did with one entry."""
    DELIVERED = "delivered"
    RETRY_PENDING = "retry_pending"
    DROPPED = "dropped"


@dataclass
class DrainReport:
    """Summary of one drain pass."""
    delivered: int = 0
    retried: int = 0
    dropped: int = 0
    remaining: int = 0
    transitions: Dict[str, EntryTransition] = field(default_factory=dict)


@dataclass
class SyncState:
    """Current sync state."""
    is_syncing: bool = False
    last_sync: Optional[datetime] = None
    last_sync_success: Optional[datetime] = None
    pending_count: int = 0
    total_synced: int = 0
    dropped_count: int = 0


class SyncQueueService:
    """
    Background retry queue in front of the remote gateway.

    Usage:
        queue = SyncQueueService(store, gateway, config)
        queue.start()                       # drain leftovers from last session
        queue.enqueue("resetPassword", {"email": e, "newPassword": p})
    """

    def __init__(
        self,
        local_store: LocalStore,
        gateway: RemoteGateway,
        config: Optional[RemoteConfig] = None,
        presenter: Optional[Presenter] = None,
        background: bool = True,
    ):
        """
        Args:
            local_store: Store holding the persisted queue
            gateway: Gateway used for deliveries
            config: Timeouts and retry limit (default: gateway.config)
            presenter: Receives queued/delivered/dropped notifications
            background: Run drains triggered by enqueue() on a daemon thread
        """
        self.local_store = local_store
        self.gateway = gateway
        self.config = config or gateway.config
        self.presenter = presenter or LoggingPresenter()
        self.background = background

        self._state = SyncState()
        self._is_draining = False
        self._drain_lock = threading.Lock()
        self._queue_lock = threading.Lock()
        self._callbacks: List[Callable[[SyncState], None]] = []

        self._startup_timer: Optional[threading.Timer] = None
        self._sync_thread: Optional[threading.Thread] = None
        self._stop_sync = threading.Event()

        self._handlers: Dict[str, Callable[[SyncQueueEntry], RemoteResult]] = {
            "resetPassword": self._deliver_reset_password,
            "register": self._deliver_register,
        }

    @property
    def state(self) -> SyncState:
        return self._state

    @property
    def is_draining(self) -> bool:
        return self._is_draining

    @property
    def pending_count(self) -> int:
        return len(self.local_store.get(SYNC_QUEUE_KEY))

    def pending_entries(self) -> List[SyncQueueEntry]:
        return [SyncQueueEntry.from_dict(r) for r in self.local_store.get(SYNC_QUEUE_KEY)]

    # =========================================================================
    # ENQUEUE
    # =========================================================================

    def enqueue(self, action: str, payload: Optional[Dict[str, Any]] = None) -> SyncQueueEntry:
        """
        Append a pending mutation and trigger a drain.

        Returns:
            The persisted entry (attempts=0, ts=now)
        """
        entry = SyncQueueEntry(action=action, payload=dict(payload or {}))

        with self._queue_lock:
            records = self.local_store.get(SYNC_QUEUE_KEY)
            records.append(entry.to_dict())
            self.local_store.put(SYNC_QUEUE_KEY, records)

        logger.info(f"Queued '{action}' for background sync ({entry.id})")
        self.trigger_drain()
        self.presenter.toast(SYNC_QUEUED_MESSAGE)
        return entry

    def trigger_drain(self) -> None:
        """Start a drain pass; a no-op while one is already running."""
        if self._is_draining:
            return
        if self.background:
            threading.Thread(
                target=self.process_queue,
                daemon=True,
                name="SyncQueueDrain",
            ).start()
        else:
            self.process_queue()

    # =========================================================================
    # DRAIN
    # =========================================================================

    def process_queue(self) -> Optional[DrainReport]:
        """
        Run one drain pass over the persisted queue.

        Returns:
            DrainReport, or None if another pass was already running
        """
        with self._drain_lock:
            if self._is_draining:
                logger.debug("Drain already in progress, skipping trigger")
                return None
            self._is_draining = True

        self._state.is_syncing = True
        self._state.last_sync = datetime.now()
        self._notify_callbacks()

        try:
            return self._drain_pass()
        finally:
            with self._drain_lock:
                self._is_draining = False
            self._state.is_syncing = False
            self._state.pending_count = self.pending_count
            self._notify_callbacks()

    def _drain_pass(self) -> DrainReport:
        report = DrainReport()
        snapshot = self.pending_entries()

        if not snapshot:
            return report

        if not self.gateway.is_configured:
            logger.debug("Remote endpoint not configured, leaving queue untouched")
            report.remaining = len(snapshot)
            return report

        logger.info(f"Draining {len(snapshot)} queued operations")

        # Newest first; survivors are rebuilt rather than spliced out
        survivors: List[SyncQueueEntry] = []
        for entry in reversed(snapshot):
            transition = self._process_entry(entry)
            report.transitions[entry.id] = transition
            if transition == EntryTransition.DELIVERED:
                report.delivered += 1
            elif transition == EntryTransition.DROPPED:
                report.dropped += 1
            else:
                report.retried += 1
                survivors.append(entry)
        survivors.reverse()

        with self._queue_lock:
            # Keep entries enqueued while this pass was running
            seen = {entry.id for entry in snapshot}
            added = [r for r in self.local_store.get(SYNC_QUEUE_KEY) if r.get("id") not in seen]
            self.local_store.put(SYNC_QUEUE_KEY, [e.to_dict() for e in survivors] + added)
            report.remaining = len(survivors) + len(added)

        self._state.total_synced += report.delivered
        self._state.dropped_count += report.dropped
        if report.retried == 0 and report.dropped == 0:
            self._state.last_sync_success = datetime.now()

        logger.info(
            f"Drain complete: {report.delivered} delivered, "
            f"{report.retried} pending retry, {report.dropped} dropped"
        )
        return report

    def _process_entry(self, entry: SyncQueueEntry) -> EntryTransition:
        handler = self._handlers.get(entry.action)
        if handler is None:
            logger.warning(f"Unknown sync action '{entry.action}', dropping {entry.id}")
            return EntryTransition.DROPPED

        try:
            result = handler(entry)
            error = result.error()
        except Exception as e:
            logger.error(f"Error delivering '{entry.action}' ({entry.id}): {e}", exc_info=True)
            error = e

        if error is None:
            self.presenter.toast(SYNC_DELIVERED_MESSAGE)
            return EntryTransition.DELIVERED

        entry.attempts += 1
        if entry.attempts > self.config.max_attempts:
            handle_error(
                RetryExhaustedError(entry.action, entry.attempts, details={"id": entry.id}),
                notify=True,
                user_message=SYNC_DROPPED_MESSAGE,
                presenter=self.presenter,
            )
            return EntryTransition.DROPPED

        logger.info(f"Delivery of '{entry.action}' failed (attempt {entry.attempts}): {error}")
        return EntryTransition.RETRY_PENDING

    def _deliver_reset_password(self, entry: SyncQueueEntry) -> RemoteResult:
        return self.gateway.invoke(
            "resetPassword",
            {
                "email": entry.payload.get("email"),
                "newPassword": entry.payload.get("newPassword"),
            },
            timeout=self.config.queue_timeout,
        )

    def _deliver_register(self, entry: SyncQueueEntry) -> RemoteResult:
        return self.gateway.dispatch_opaque(
            "register", entry.payload, timeout=self.config.queue_timeout
        )

    # =========================================================================
    # SCHEDULING
    # =========================================================================

    def start(self) -> None:
        """Schedule the startup drain and, if configured, the periodic drain loop."""
        if self._startup_timer is None:
            self._startup_timer = threading.Timer(
                self.config.startup_drain_delay, self.process_queue
            )
            self._startup_timer.daemon = True
            self._startup_timer.start()

        interval = self.config.sync_interval
        if interval and (self._sync_thread is None or not self._sync_thread.is_alive()):
            self._stop_sync.clear()
            self._sync_thread = threading.Thread(
                target=self._sync_loop,
                args=(interval,),
                daemon=True,
                name="SyncQueueLoop",
            )
            self._sync_thread.start()
            logger.info(f"Periodic drain every {interval}s")

    def stop(self) -> None:
        """Cancel scheduled drains."""
        if self._startup_timer is not None:
            self._startup_timer.cancel()
            self._startup_timer = None
        self._stop_sync.set()
        if self._sync_thread:
            self._sync_thread.join(timeout=10)
            self._sync_thread = None

    def _sync_loop(self, interval: float) -> None:
        while not self._stop_sync.wait(timeout=interval):
            try:
                self.process_queue()
            except Exception as e:
                logger.error(f"Periodic drain error: {e}", exc_info=True)

    # =========================================================================
    # STATUS
    # =========================================================================

    def register_callback(self, callback: Callable[[SyncState], None]) -> None:
        """Register a callback for sync state changes."""
        if callback not in self._callbacks:
            self._callbacks.append(callback)

    def unregister_callback(self, callback: Callable[[SyncState], None]) -> None:
        if callback in self._callbacks:
            self._callbacks.remove(callback)

    def _notify_callbacks(self) -> None:
        for callback in self._callbacks:
            try:
                callback(self._state)
            except Exception as e:
                logger.error(f"Error in sync callback: {e}")

    def get_status_display(self) -> Dict[str, Any]:
        """Get sync status for UI display."""
        return {
            "is_syncing": self._state.is_syncing,
            "last_sync": self._state.last_sync.isoformat() if self._state.last_sync else None,
            "last_success": self._state.last_sync_success.isoformat() if self._state.last_sync_success else None,
            "pending_count": self.pending_count,
            "total_synced": self._state.total_synced,
            "dropped_count": self._state.dropped_count,
        }


# Singleton accessor
_sync_queue: Optional[SyncQueueService] = None
_lock = threading.Lock()


def get_sync_queue() -> SyncQueueService:
    """Get the global SyncQueueService, starting its startup drain on first use."""
    global _sync_queue
    if _sync_queue is None:
        with _lock:
            if _sync_queue is None:
                from inventory_core.config import load_config
                from inventory_core.offline.local_store import get_local_store

                config = load_config()
                _sync_queue = SyncQueueService(
                    get_local_store(config.db_path),
                    RemoteGateway(config),
                    config,
                )
                _sync_queue.start()
    return _sync_queue
