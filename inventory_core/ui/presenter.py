# =============================================================================
# inventory_core/ui/presenter.py
# Presentation Hooks Signalled by Data Access Operations
# =============================================================================
"""
Operations signal begin/end of remote work and background sync events
through a Presenter. Rendering is left to the implementation: the default
LoggingPresenter only logs, StreamlitPresenter draws spinners and toasts.
"""

from __future__ import annotations
from contextlib import contextmanager
from typing import Iterator, Protocol
import logging

logger = logging.getLogger(__name__)


# User-visible texts for background sync events
SYNC_QUEUED_MESSAGE = "Changes will be saved in the background"
SYNC_DELIVERED_MESSAGE = "Sync succeeded"
SYNC_DROPPED_MESSAGE = "Sync failed: dropped after several attempts"


class Presenter(Protocol):
    """Side-effect contract for loading state and notifications."""

    def show_loading(self, message: str, delay: float = 0.3, blocking: bool = True) -> None:
        ...

    def hide_loading(self) -> None:
        ...

    def toast(self, message: str, timeout: float = 4.0) -> None:
        ...


class LoggingPresenter:
    """Presenter for headless use; every hook becomes a log line."""

    def show_loading(self, message: str, delay: float = 0.3, blocking: bool = True) -> None:
        logger.debug(f"Loading: {message}")

    def hide_loading(self) -> None:
        logger.debug("Loading finished")

    def toast(self, message: str, timeout: float = 4.0) -> None:
        logger.info(f"Notice: {message}")


@contextmanager
def loading(presenter: Presenter, message: str, suppress: bool = False) -> Iterator[None]:
    """
    Show a loading state for the duration of the block.

    Usage:
        with loading(presenter, "Loading items..."):
            result = gateway.invoke("getItems")
    """
    if suppress:
        yield
        return

    presenter.show_loading(message)
    try:
        yield
    finally:
        presenter.hide_loading()
