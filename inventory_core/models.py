# =============================================================================
# inventory_core/models.py
# Record Types for Accounts, Items, Stock Requests and the Sync Queue
# =============================================================================

from __future__ import annotations
import time
import uuid
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, Optional


def now_ms() -> int:
    """Current epoch time in milliseconds."""
    return int(time.time() * 1000)


@dataclass
class Account:
    """A user account. The email is the case-insensitive unique key."""
    name: str
    email: str
    password: str
    hint: str = ""

    def matches_email(self, email: str) -> bool:
        return self.email.strip().lower() == email.strip().lower()

    def public_view(self) -> Dict[str, str]:
        return {"name": self.name, "email": self.email}

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Account:
        return cls(
            name=str(data.get("name", "")),
            email=str(data.get("email", "")),
            password=str(data.get("password", "")),
            hint=str(data.get("hint") or ""),
        )


@dataclass
class Item:
    """An inventory item keyed by name."""
    name: str
    stock: int

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Item:
        return cls(name=str(data.get("name", "")), stock=int(data.get("stock") or 0))


@dataclass
class StockRequest:
    """A teacher's request for stock of one item."""
    teacher_email: str
    teacher_name: str
    item: str
    qty: int
    status: str = "pending"
    reason: str = ""
    timestamp: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> StockRequest:
        return cls(
            teacher_email=str(data.get("teacherEmail", "")),
            teacher_name=str(data.get("teacherName", "")),
            item=str(data.get("item", "")),
            qty=int(data.get("qty") or 0),
            status=str(data.get("status") or "pending"),
            reason=str(data.get("reason") or ""),
            timestamp=data.get("timestamp"),
        )


@dataclass
class SyncQueueEntry:
    """
    A pending mutation waiting for delivery to the remote mirror.

    attempts starts at 0 and only the queue processor increments it, once
    per failed delivery.
    """
    action: str
    payload: Dict[str, Any] = field(default_factory=dict)
    attempts: int = 0
    ts: int = field(default_factory=now_ms)
    id: str = field(default_factory=lambda: uuid.uuid4().hex)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> SyncQueueEntry:
        payload = data.get("payload")
        if not isinstance(payload, dict):
            # Entries persisted with their fields at the top level
            payload = {
                k: v for k, v in data.items()
                if k not in ("action", "payload", "attempts", "ts", "id")
            }
        return cls(
            action=str(data.get("action", "")),
            payload=payload,
            attempts=int(data.get("attempts") or 0),
            ts=int(data.get("ts") or now_ms()),
            id=str(data.get("id") or uuid.uuid4().hex),
        )
