# =============================================================================
# inventory_core/services/inventory_service.py
# Items, Stock Requests and Orders on the Remote Mirror
# =============================================================================
"""
InventoryService - remote-only operations.

Items, stock requests and orders have no local cache: listings read
through to the remote mirror and return None when it is unavailable.
Query-encoded mutations accept plain-text acknowledgements as success;
delete operations for items and orders are fire-and-forget posts.
"""

from __future__ import annotations
from typing import Any, Dict, List, Optional

from inventory_core.models import Item, StockRequest
from inventory_core.services.base_service import RemoteBackedService, ServiceResult


class InventoryService(RemoteBackedService):
    """
    Usage:
        inventory = InventoryService(gateway)
        inventory.add_item("Pencil", 10)
        items = inventory.get_items()  # list of dicts, or None
    """

    # =========================================================================
    # ITEMS
    # =========================================================================

    def get_items(self) -> Optional[List[Dict[str, Any]]]:
        return self._listing("getItems", "items")

    def get_item_records(self) -> Optional[List[Item]]:
        items = self.get_items()
        if items is None:
            return None
        return [Item.from_dict(i) for i in items]

    def add_item(self, name: str, stock: int) -> ServiceResult:
        self.logger.info(f"Adding item: {name} ({stock})")
        return self._mutation("addItem", {"name": name, "stock": stock})

    def update_item(self, name: str, stock: int) -> ServiceResult:
        self.logger.info(f"Updating item: {name} ({stock})")
        return self._mutation("updateItem", {"name": name, "stock": stock})

    def delete_item(self, name: str) -> ServiceResult:
        return self._dispatch("deleteItem", {"name": name})

    # =========================================================================
    # STOCK REQUESTS
    # =========================================================================

    def request_stock(
        self,
        teacher_email: str,
        teacher_name: str,
        item: str,
        qty: int,
    ) -> ServiceResult:
        return self._mutation(
            "requestStock",
            {
                "teacherEmail": teacher_email,
                "teacherName": teacher_name,
                "item": item,
                "qty": qty,
            },
        )

    def get_teacher_stock_requests(self) -> Optional[List[Dict[str, Any]]]:
        return self._listing("getTeacherStockRequests", "requests")

    def get_stock_request_records(self) -> Optional[List[StockRequest]]:
        requests = self.get_teacher_stock_requests()
        if requests is None:
            return None
        return [StockRequest.from_dict(r) for r in requests]

    def update_request_status(
        self,
        email: str,
        item: str,
        status: str,
        reason: str = "",
    ) -> ServiceResult:
        self.logger.info(f"Updating request status: {email} / {item} -> {status}")
        return self._mutation(
            "updateRequestStatus",
            {"email": email, "item": item, "status": status, "reason": reason or ""},
        )

    # =========================================================================
    # ORDERS
    # =========================================================================

    def delete_order(self, email: str, item: str, date: str) -> ServiceResult:
        return self._dispatch("deleteOrder", {"email": email, "item": item, "date": date})

    def delete_all_orders(self) -> ServiceResult:
        return self._dispatch("deleteAllOrders", {})
