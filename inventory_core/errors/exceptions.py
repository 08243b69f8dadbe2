# =============================================================================
# inventory_core/errors/exceptions.py
# Exception Hierarchy for the Inventory Sync Client
# =============================================================================

from typing import Optional, Dict, Any


class InventorySyncError(Exception):
    """
    Base exception for all inventory sync client errors.

    Attributes:
        message: Human-readable error description
        code: Machine-readable error code (e.g., "REMOTE_001")
        details: Additional context as a dictionary
        recoverable: Whether the application can keep running locally
    """

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        recoverable: bool = True,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or "INV_000"
        self.details = details or {}
        self.recoverable = recoverable

    def __str__(self) -> str:
        base = f"[{self.code}] {self.message}"
        if self.details:
            base += f" | Details: {self.details}"
        return base

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for logging/serialization"""
        return {
            "error_type": self.__class__.__name__,
            "code": self.code,
            "message": self.message,
            "details": self.details,
            "recoverable": self.recoverable,
        }


# =============================================================================
# CONFIGURATION EXCEPTIONS
# =============================================================================

class ConfigurationError(InventorySyncError):
    """Raised when configuration is invalid"""

    def __init__(
        self,
        message: str,
        config_key: Optional[str] = None,
        expected_type: Optional[str] = None,
        **kwargs,
    ):
        details = kwargs.pop("details", {})
        if config_key:
            details["config_key"] = config_key
        if expected_type:
            details["expected_type"] = expected_type

        super().__init__(
            message=message,
            code="CONFIG_001",
            details=details,
            recoverable=False,
            **kwargs,
        )


class UnconfiguredError(InventorySyncError):
    """Raised when a remote call is attempted without a remote endpoint"""

    def __init__(self, message: str = "Configuration not set", **kwargs):
        super().__init__(message=message, code="CONFIG_002", **kwargs)


# =============================================================================
# ACCOUNT EXCEPTIONS
# =============================================================================

class DuplicateAccountError(InventorySyncError):
    """Raised when registering an email that already exists locally"""

    def __init__(self, email: str, message: str = "Email already in use", **kwargs):
        details = kwargs.pop("details", {})
        details["email"] = email
        super().__init__(message=message, code="ACCOUNT_001", details=details, **kwargs)


class InvalidCredentialsError(InventorySyncError):
    """Raised when neither the local store nor the remote mirror accepts a login"""

    def __init__(self, message: str = "Invalid email or password", **kwargs):
        super().__init__(message=message, code="ACCOUNT_002", **kwargs)


# =============================================================================
# REMOTE GATEWAY EXCEPTIONS
# =============================================================================

class RemoteNetworkError(InventorySyncError):
    """Raised when the transport fails before a response arrives"""

    def __init__(self, message: str, action: Optional[str] = None, **kwargs):
        details = kwargs.pop("details", {})
        if action:
            details["action"] = action
        super().__init__(message=message, code="REMOTE_001", details=details, **kwargs)


class RemoteTimeoutError(InventorySyncError):
    """Raised when a remote call exceeds its deadline"""

    def __init__(
        self,
        message: str = "Request timeout",
        action: Optional[str] = None,
        timeout: Optional[float] = None,
        **kwargs,
    ):
        details = kwargs.pop("details", {})
        if action:
            details["action"] = action
        if timeout is not None:
            details["timeout"] = timeout
        super().__init__(message=message, code="REMOTE_002", details=details, **kwargs)


class RemoteHttpError(InventorySyncError):
    """Raised when the remote endpoint answers with a non-2xx status"""

    def __init__(self, status: int, action: Optional[str] = None, **kwargs):
        message = kwargs.pop("message", f"Remote responded with HTTP {status}")
        details = kwargs.pop("details", {})
        details["status"] = status
        if action:
            details["action"] = action
        super().__init__(
            message=message,
            code="REMOTE_003",
            details=details,
            **kwargs,
        )
        self.status = status


class RemoteParseError(InventorySyncError):
    """Raised when a response body is not the expected JSON structure"""

    def __init__(self, message: str, body: Optional[str] = None, **kwargs):
        details = kwargs.pop("details", {})
        if body is not None:
            details["body"] = body[:200]
        super().__init__(message=message, code="REMOTE_004", details=details, **kwargs)


# =============================================================================
# SYNC QUEUE EXCEPTIONS
# =============================================================================

class RetryExhaustedError(InventorySyncError):
    """Describes a queue entry dropped after exceeding its attempt limit"""

    def __init__(self, action: str, attempts: int, **kwargs):
        details = kwargs.pop("details", {})
        details["action"] = action
        details["attempts"] = attempts
        super().__init__(
            message=f"Dropped '{action}' after {attempts} attempts",
            code="SYNC_001",
            details=details,
            **kwargs,
        )
