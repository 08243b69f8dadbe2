# =============================================================================
# inventory_core/logging/config.py
# Logging Configuration for the Inventory Sync Client
# =============================================================================

import logging
import sys
import time
from logging.handlers import RotatingFileHandler
from pathlib import Path
from datetime import datetime
from typing import Optional, Union


# Drains run on worker threads, so the thread name is part of every line
LOG_FORMAT = "%(asctime)s | %(threadName)s | %(name)s | %(levelname)s | %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Kept beside the local store so one directory holds all client state
LOG_DIR = Path("local_data") / "logs"
LOG_MAX_BYTES = 1_000_000
LOG_BACKUP_COUNT = 3

QUIET_LOGGERS = ("urllib3", "requests")


def _resolve_level(level: Union[int, str]) -> int:
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(str(level).strip().upper())
    if not isinstance(resolved, int):
        raise ValueError(f"Unknown log level: {level!r}")
    return resolved


def setup_logging(
    level: Union[int, str] = logging.INFO,
    log_to_file: bool = False,
    log_filename: Optional[str] = None,
    log_dir: Optional[Path] = None,
) -> None:
    """
    Configure logging for the client and its background drains.

    Args:
        level: Logging level, as a number or a name such as "DEBUG"
        log_to_file: Also write a size-rotated file
        log_filename: File name (default: inventory_sync_YYYY-MM-DD.log)
        log_dir: Directory for the file (default: local_data/logs)
    """
    handlers = [logging.StreamHandler(sys.stdout)]

    if log_to_file:
        directory = Path(log_dir or LOG_DIR)
        directory.mkdir(parents=True, exist_ok=True)
        if log_filename is None:
            log_filename = f"inventory_sync_{datetime.now().strftime('%Y-%m-%d')}.log"
        handlers.append(
            RotatingFileHandler(
                directory / log_filename,
                maxBytes=LOG_MAX_BYTES,
                backupCount=LOG_BACKUP_COUNT,
                encoding="utf-8",
            )
        )

    logging.basicConfig(
        level=_resolve_level(level),
        format=LOG_FORMAT,
        datefmt=LOG_DATE_FORMAT,
        handlers=handlers,
        force=True,
    )

    # The gateway logs its own outcomes; connection pool chatter is noise
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    logging.getLogger("inventory_core").info("Logging initialized")


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


class LogContext:
    """
    Times a local write or a remote call.

    Completion is logged at DEBUG, or at WARNING when it took longer than
    slow_after seconds. A failure is logged with its traceback and re-raised.

    Usage:
        with LogContext(logger, "addItem", slow_after=8.0) as ctx:
            gateway.invoke("addItem", {...})
        ctx.elapsed  # 0.41
    """

    def __init__(self, logger: logging.Logger, operation: str, slow_after: Optional[float] = None):
        self.logger = logger
        self.operation = operation
        self.slow_after = slow_after
        self.elapsed: Optional[float] = None
        self._started: Optional[float] = None

    def __enter__(self):
        self._started = time.monotonic()
        self.logger.debug(f"{self.operation}: started")
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.elapsed = time.monotonic() - self._started

        if exc_type is not None:
            self.logger.error(
                f"{self.operation}: failed after {self.elapsed:.2f}s: {exc_val}",
                exc_info=True,
            )
        elif self.slow_after is not None and self.elapsed > self.slow_after:
            self.logger.warning(
                f"{self.operation}: slow, took {self.elapsed:.2f}s (limit {self.slow_after}s)"
            )
        else:
            self.logger.debug(f"{self.operation}: completed in {self.elapsed:.2f}s")

        return False
