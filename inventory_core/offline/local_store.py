# =============================================================================
# inventory_core/offline/local_store.py
# Durable Local Collection Store
# =============================================================================
"""
LocalStore - SQLite-backed store of whole collections of records.

Each collection (accounts under "users", pending mutations under
"syncQueue") is one JSON list kept under a fixed key. get() returns the
whole list and put() replaces it in a single transaction; read-modify-write
is the caller's job and concurrent writers can lose updates (last put wins).

Unparseable stored state is treated as an empty collection, never raised.
"""

from __future__ import annotations
import json
import sqlite3
import threading
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional
import logging

import pandas as pd

logger = logging.getLogger(__name__)


USERS_KEY = "users"
SYNC_QUEUE_KEY = "syncQueue"


class LocalStore:
    """
    Local durable store, source of truth for reads.

    Usage:
        store = LocalStore(Path("local_data/inventory.db"))
        users = store.get(USERS_KEY)
        users.append({...})
        store.put(USERS_KEY, users)
    """

    SCHEMA = """
        CREATE TABLE IF NOT EXISTS collections (
            key TEXT PRIMARY KEY,
            value TEXT NOT NULL,
            updated_at TEXT DEFAULT CURRENT_TIMESTAMP
        )
    """

    def __init__(self, db_path: Path):
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._local = threading.local()
        self.initialize()

    def _get_connection(self) -> sqlite3.Connection:
        """Get thread-local database connection."""
        if getattr(self._local, "connection", None) is None:
            self._local.connection = sqlite3.connect(str(self.db_path), timeout=5.0)
            self._local.connection.row_factory = sqlite3.Row
        return self._local.connection

    @contextmanager
    def transaction(self):
        """Context manager for database transactions."""
        conn = self._get_connection()
        try:
            yield conn
            conn.commit()
        except Exception:
            conn.rollback()
            raise

    def initialize(self) -> None:
        with self.transaction() as conn:
            conn.execute(self.SCHEMA)
        logger.debug(f"Local store ready at: {self.db_path}")

    def close(self) -> None:
        conn = getattr(self._local, "connection", None)
        if conn is not None:
            conn.close()
            self._local.connection = None

    # =========================================================================
    # COLLECTION ACCESS
    # =========================================================================

    def get(self, collection: str) -> List[Dict[str, Any]]:
        """
        Read a whole collection.

        Returns:
            Records in stored order; [] if missing or unparseable
        """
        row = self._get_connection().execute(
            "SELECT value FROM collections WHERE key = ?", [collection]
        ).fetchone()
        if row is None:
            return []

        try:
            records = json.loads(row["value"])
        except ValueError:
            logger.warning(f"Collection '{collection}' is corrupt, treating as empty")
            return []

        if not isinstance(records, list):
            logger.warning(f"Collection '{collection}' is not a list, treating as empty")
            return []

        return [r for r in records if isinstance(r, dict)]

    def put(self, collection: str, records: List[Dict[str, Any]]) -> None:
        """Replace a whole collection."""
        value = json.dumps(list(records))
        with self.transaction() as conn:
            conn.execute(
                "INSERT OR REPLACE INTO collections (key, value, updated_at) VALUES (?, ?, ?)",
                [collection, value, datetime.now().isoformat()],
            )

    def clear(self, collection: str) -> None:
        with self.transaction() as conn:
            conn.execute("DELETE FROM collections WHERE key = ?", [collection])

    # =========================================================================
    # PANDAS INTEGRATION
    # =========================================================================

    def to_dataframe(self, collection: str) -> pd.DataFrame:
        """
        Load a collection into a pandas DataFrame, one row per record.

        Nested payloads (queue entries) are flattened with dotted columns.
        """
        records = self.get(collection)
        if not records:
            return pd.DataFrame()
        return pd.json_normalize(records)


# Singleton accessor
_local_store: Optional[LocalStore] = None
_lock = threading.Lock()


def get_local_store(db_path: Optional[Path] = None) -> LocalStore:
    """Get the global LocalStore instance."""
    global _local_store
    if _local_store is None:
        with _lock:
            if _local_store is None:
                if db_path is None:
                    from inventory_core.config import load_config
                    db_path = load_config().db_path
                _local_store = LocalStore(db_path)
    return _local_store
