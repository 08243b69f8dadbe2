# =============================================================================
# inventory_core/services/__init__.py
# Data Access Operations for the Inventory Sync Client
# =============================================================================
"""
Data access layer.

Usage Example:
-------------
    from inventory_core.services import create_services

    services = create_services()
    services.sync_queue.start()

    result = services.accounts.register_user("Ana", "a@x.com", "pw1")
    login = services.accounts.login_user("a@x.com", "pw1")
    print(login.to_dict())

    items = services.inventory.get_items()   # None when unconfigured/offline
    services.inventory.add_item("Pencil", 10)
"""

from __future__ import annotations
from typing import NamedTuple, Optional

from inventory_core.api import RemoteGateway
from inventory_core.config import RemoteConfig, load_config
from inventory_core.offline import LocalStore, SyncQueueService
from inventory_core.ui.presenter import LoggingPresenter, Presenter

from .base_service import (
    BaseService,
    RemoteBackedService,
    RemotePolicy,
    ServiceResult,
    DEFAULT_POLICIES,
)
from .account_service import AccountService
from .inventory_service import InventoryService


class Services(NamedTuple):
    local_store: LocalStore
    gateway: RemoteGateway
    sync_queue: SyncQueueService
    accounts: AccountService
    inventory: InventoryService


def create_services(
    config: Optional[RemoteConfig] = None,
    presenter: Optional[Presenter] = None,
    gateway: Optional[RemoteGateway] = None,
    background: bool = True,
) -> Services:
    """
    Wire the local store, gateway, sync queue and services together.

    The sync queue is not started; call services.sync_queue.start() to
    schedule the startup drain.
    """
    config = config or load_config()
    presenter = presenter or LoggingPresenter()
    gateway = gateway or RemoteGateway(config)

    local_store = LocalStore(config.db_path)
    sync_queue = SyncQueueService(local_store, gateway, config, presenter, background=background)

    return Services(
        local_store=local_store,
        gateway=gateway,
        sync_queue=sync_queue,
        accounts=AccountService(local_store, gateway, sync_queue, presenter),
        inventory=InventoryService(gateway, presenter),
    )


__all__ = [
    "BaseService",
    "RemoteBackedService",
    "RemotePolicy",
    "ServiceResult",
    "DEFAULT_POLICIES",
    "AccountService",
    "InventoryService",
    "Services",
    "create_services",
]
