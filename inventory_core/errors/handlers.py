# =============================================================================
# inventory_core/errors/handlers.py
# Error Handling Utilities for the Inventory Sync Client
# =============================================================================

from __future__ import annotations
import traceback
from typing import Optional

from inventory_core.logging import get_logger
from .exceptions import InventorySyncError

logger = get_logger(__name__)


def handle_error(
    error: Exception,
    notify: bool = False,
    log_error: bool = True,
    user_message: Optional[str] = None,
    presenter=None,
) -> None:
    """
    Centralized error handling function.

    Args:
        error: The exception to handle
        notify: Whether to raise a toast through the presenter
        log_error: Whether to log the error
        user_message: Custom message to show the user (uses error message if None)
        presenter: Presentation hooks used when notify is set
    """
    if isinstance(error, InventorySyncError):
        message = user_message or error.message
        code = error.code
        details = error.details
        recoverable = error.recoverable
    else:
        message = user_message or str(error)
        code = "UNKNOWN"
        details = {"traceback": traceback.format_exc()}
        recoverable = True

    if log_error:
        # Remote trouble is routine for an offline-first client
        if recoverable:
            logger.warning(f"[{code}] {message}", extra={"details": details})
        else:
            logger.error(f"[{code}] {message}", extra={"details": details}, exc_info=True)

    if notify and presenter is not None:
        presenter.toast(message)
