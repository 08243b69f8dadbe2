# =============================================================================
# inventory_core/errors/__init__.py
# Centralized Error Handling for the Inventory Sync Client
# =============================================================================

from .exceptions import (
    InventorySyncError,
    ConfigurationError,
    UnconfiguredError,
    DuplicateAccountError,
    InvalidCredentialsError,
    RemoteNetworkError,
    RemoteTimeoutError,
    RemoteHttpError,
    RemoteParseError,
    RetryExhaustedError,
)

from .handlers import handle_error

__all__ = [
    # Exceptions
    "InventorySyncError",
    "ConfigurationError",
    "UnconfiguredError",
    "DuplicateAccountError",
    "InvalidCredentialsError",
    "RemoteNetworkError",
    "RemoteTimeoutError",
    "RemoteHttpError",
    "RemoteParseError",
    "RetryExhaustedError",
    # Handlers
    "handle_error",
]
