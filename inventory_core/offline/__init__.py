# =============================================================================
# inventory_core/offline/__init__.py
# Local-First Storage and Background Sync
# =============================================================================
"""
Local-first persistence.

    LocalStore          durable collections, source of truth for reads
    SyncQueueService    persisted retry queue draining to the remote mirror

Usage:
------
from inventory_core.offline import get_sync_queue

queue = get_sync_queue()
queue.enqueue("resetPassword", {"email": "a@x.com", "newPassword": "pw2"})
print(queue.pending_count)
"""

from inventory_core.offline.local_store import (
    LocalStore,
    get_local_store,
    USERS_KEY,
    SYNC_QUEUE_KEY,
)

from inventory_core.offline.sync_queue import (
    SyncQueueService,
    get_sync_queue,
    DrainReport,
    EntryTransition,
    SyncState,
)

__all__ = [
    # Local Store
    "LocalStore",
    "get_local_store",
    "USERS_KEY",
    "SYNC_QUEUE_KEY",
    # Sync Queue
    "SyncQueueService",
    "get_sync_queue",
    "DrainReport",
    "EntryTransition",
    "SyncState",
]
