# =============================================================================
# tests/unit/test_logging.py
# Unit Tests for Logging Configuration
# =============================================================================

import logging
from types import SimpleNamespace

import pytest

from inventory_core.logging import LogContext, get_logger, setup_logging
from inventory_core.logging import config as log_config


@pytest.fixture
def restore_root_handlers():
    yield
    for handler in list(logging.getLogger().handlers):
        handler.close()
        logging.getLogger().removeHandler(handler)


class TestSetupLogging:

    def test_file_handler_written(self, tmp_path, restore_root_handlers):
        setup_logging(
            level=logging.DEBUG, log_to_file=True,
            log_filename="sync.log", log_dir=tmp_path / "logs",
        )
        get_logger("inventory_core.test").info("drain started")
        for handler in logging.getLogger().handlers:
            handler.flush()

        line = (tmp_path / "logs" / "sync.log").read_text()
        assert "drain started" in line
        assert "| MainThread |" in line
        assert logging.getLogger("urllib3").level == logging.WARNING

    def test_level_by_name(self, restore_root_handlers):
        setup_logging(level="debug")

        assert logging.getLogger().level == logging.DEBUG

    def test_unknown_level_name_rejected(self):
        with pytest.raises(ValueError):
            setup_logging(level="chatty")


class TestLogContext:

    def test_completion_logged(self, caplog):
        logger = get_logger("inventory_core.test")

        with caplog.at_level(logging.DEBUG, logger="inventory_core.test"):
            with LogContext(logger, "Saving account") as ctx:
                pass

        assert "Saving account: completed" in caplog.text
        assert ctx.elapsed is not None

    def test_slow_operation_warns(self, caplog, monkeypatch):
        logger = get_logger("inventory_core.test")
        ticks = iter([100.0, 109.5])
        monkeypatch.setattr(log_config, "time", SimpleNamespace(monotonic=lambda: next(ticks)))

        with caplog.at_level(logging.DEBUG, logger="inventory_core.test"):
            with LogContext(logger, "addItem", slow_after=8.0):
                pass

        warnings = [r for r in caplog.records if r.levelno == logging.WARNING]
        assert len(warnings) == 1
        assert "addItem: slow, took 9.50s" in warnings[0].getMessage()

    def test_failure_logged_and_reraised(self, caplog):
        logger = get_logger("inventory_core.test")

        with caplog.at_level(logging.DEBUG, logger="inventory_core.test"):
            with pytest.raises(ValueError):
                with LogContext(logger, "Saving account"):
                    raise ValueError("disk full")

        assert "Saving account: failed" in caplog.text
