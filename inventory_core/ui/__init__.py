# =============================================================================
# inventory_core/ui/__init__.py
# Presentation Hooks
# =============================================================================

from .presenter import (
    Presenter,
    LoggingPresenter,
    loading,
    SYNC_QUEUED_MESSAGE,
    SYNC_DELIVERED_MESSAGE,
    SYNC_DROPPED_MESSAGE,
)

__all__ = [
    "Presenter",
    "LoggingPresenter",
    "loading",
    "SYNC_QUEUED_MESSAGE",
    "SYNC_DELIVERED_MESSAGE",
    "SYNC_DROPPED_MESSAGE",
]
