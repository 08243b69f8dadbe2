# =============================================================================
# inventory_core/services/base_service.py
# Base Service Classes and Remote Call Policies
# =============================================================================

from __future__ import annotations
from abc import ABC
from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Optional

from inventory_core.api import RemoteGateway, RemoteResult
from inventory_core.errors import (
    InventorySyncError,
    RemoteParseError,
    UnconfiguredError,
    handle_error,
)
from inventory_core.logging import get_logger, LogContext
from inventory_core.ui.presenter import LoggingPresenter, Presenter, loading


@dataclass
class ServiceResult:
    """
    Standard result container for data access operations.

    to_dict() gives the wire shape {success, message, **data}.
    """
    success: bool
    message: Optional[str] = None
    data: Dict[str, Any] = field(default_factory=dict)
    error_code: Optional[str] = None
    metadata: Optional[Dict[str, Any]] = None

    def __bool__(self) -> bool:
        return self.success

    def to_dict(self) -> Dict[str, Any]:
        result = {"success": self.success, "message": self.message}
        result.update(self.data)
        return result

    @classmethod
    def ok(
        cls,
        message: Optional[str] = None,
        data: Optional[Dict[str, Any]] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> ServiceResult:
        """Create a successful result"""
        return cls(success=True, message=message, data=data or {}, metadata=metadata)

    @classmethod
    def fail(cls, message: str, error_code: str = "UNKNOWN") -> ServiceResult:
        """Create a failed result"""
        return cls(success=False, message=message, error_code=error_code)

    @classmethod
    def from_exception(cls, e: Exception) -> ServiceResult:
        """Create a failed result from an exception"""
        if isinstance(e, InventorySyncError):
            return cls(
                success=False,
                message=e.message,
                error_code=e.code,
                metadata=e.details,
            )
        return cls(success=False, message=str(e), error_code="EXCEPTION")

    @classmethod
    def from_body(cls, body: Dict[str, Any]) -> ServiceResult:
        """Wrap a parsed remote body, keeping its action-specific fields."""
        data = {k: v for k, v in body.items() if k not in ("success", "message")}
        return cls(success=bool(body.get("success")), message=body.get("message"), data=data)


@dataclass(frozen=True)
class RemotePolicy:
    """How an operation treats its remote call."""
    action: str
    loading_message: str
    success_message: Optional[str] = None
    assume_success_on_unparseable_body: bool = False


DEFAULT_POLICIES: Dict[str, RemotePolicy] = {
    policy.action: policy
    for policy in [
        RemotePolicy("login", "Looking up account..."),
        RemotePolicy("findUser", "Checking user..."),
        RemotePolicy("getUsers", "Loading users..."),
        RemotePolicy("getItems", "Loading items..."),
        RemotePolicy("getTeacherStockRequests", "Loading requests..."),
        RemotePolicy("addItem", "Adding item...", "Item added", True),
        RemotePolicy("updateItem", "Updating stock...", "Stock updated", True),
        RemotePolicy("requestStock", "Sending request...", "Request sent", True),
        RemotePolicy("updateRequestStatus", "Updating status...", "Status updated", True),
        RemotePolicy("deleteUser", "Deleting user...", "User deleted", True),
        RemotePolicy("deleteItem", "Deleting item...", "Item deleted"),
        RemotePolicy("deleteOrder", "Deleting order...", "Order deleted"),
        RemotePolicy("deleteAllOrders", "Deleting all orders...", "All orders deleted"),
    ]
}


class BaseService(ABC):
    """
    Abstract base class for all services.

    Provides logging and result standardization.
    """

    def __init__(self):
        self.logger = get_logger(self.__class__.__name__)

    def log_operation(self, operation: str, slow_after: Optional[float] = None) -> LogContext:
        """
        Create a logging context for an operation.

        Usage:
            with self.log_operation("Registering a@x.com"):
                ...
        """
        return LogContext(self.logger, operation, slow_after)


class RemoteBackedService(BaseService):
    """
    Base for services whose operations talk to the remote mirror.

    Every remote call first checks that the gateway is configured; transport
    failures come back as failed ServiceResults instead of exceptions.
    """

    def __init__(
        self,
        gateway: RemoteGateway,
        presenter: Optional[Presenter] = None,
        policies: Optional[Dict[str, RemotePolicy]] = None,
    ):
        super().__init__()
        self.gateway = gateway
        self.presenter = presenter or LoggingPresenter()
        self.policies = dict(DEFAULT_POLICIES)
        self.policies.update(policies or {})

    @property
    def is_configured(self) -> bool:
        return self.gateway.is_configured

    def policy(self, action: str) -> RemotePolicy:
        return self.policies.get(action) or RemotePolicy(action, "Please wait...")

    def set_assume_success(self, action: str, enabled: bool) -> None:
        """Toggle implicit success on unparseable bodies for one action."""
        self.policies[action] = replace(
            self.policy(action), assume_success_on_unparseable_body=enabled
        )

    def _unconfigured(self, action: str) -> ServiceResult:
        error = UnconfiguredError(details={"action": action})
        self.logger.error(f"{action}: remote endpoint not configured")
        return ServiceResult.from_exception(error)

    @staticmethod
    def _parse_object(result: RemoteResult) -> Dict[str, Any]:
        body = result.json()
        if not isinstance(body, dict):
            raise RemoteParseError(f"Expected a JSON object for {result.action}", body=result.body)
        return body

    def _mutation(self, action: str, params: Dict[str, Any]) -> ServiceResult:
        """Synchronous query-encoded call whose body reports the outcome."""
        if not self.is_configured:
            return self._unconfigured(action)

        policy = self.policy(action)
        with loading(self.presenter, policy.loading_message), \
                self.log_operation(action, slow_after=self.gateway.config.sync_timeout):
            result = self.gateway.invoke(action, params)

        error = result.error()
        if error is not None:
            handle_error(error)
            return ServiceResult.from_exception(error)

        try:
            return ServiceResult.from_body(self._parse_object(result))
        except RemoteParseError as e:
            if policy.assume_success_on_unparseable_body:
                self.logger.warning(f"{action}: could not parse response, assuming success")
                return ServiceResult.ok(policy.success_message)
            handle_error(e)
            return ServiceResult.from_exception(e)

    def _listing(self, action: str, key: str) -> Optional[List[Dict[str, Any]]]:
        """Read-through listing; None on any failure or when unconfigured."""
        if not self.is_configured:
            self.logger.error(f"{action}: remote endpoint not configured")
            return None

        with loading(self.presenter, self.policy(action).loading_message):
            result = self.gateway.invoke(action)

        error = result.error()
        if error is not None:
            handle_error(error)
            return None

        try:
            body = self._parse_object(result)
        except RemoteParseError as e:
            handle_error(e)
            return None

        if not body.get("success"):
            self.logger.error(f"Error in {action}: {body.get('message')}")
            return None
        return body.get(key) or []

    def _dispatch(self, action: str, fields: Dict[str, Any]) -> ServiceResult:
        """
        Fire-and-forget opaque post.

        Success only means the request was dispatched; the remote mutation
        is unverified and the result carries metadata {"unverified": True}.
        """
        if not self.is_configured:
            return self._unconfigured(action)

        policy = self.policy(action)
        with loading(self.presenter, policy.loading_message):
            result = self.gateway.dispatch_opaque(action, fields)

        error = result.error()
        if error is not None:
            handle_error(error)
            return ServiceResult.from_exception(error)

        return ServiceResult.ok(policy.success_message, metadata={"unverified": True})
