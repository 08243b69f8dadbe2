# =============================================================================
# inventory_core/config.py
# Remote Endpoint and Sync Configuration
# =============================================================================
"""
Configuration for the remote spreadsheet mirror and the local store.

Resolution order for every setting:
    1. Environment variables (a .env file is loaded first when present)
    2. .streamlit/secrets.toml, table [remote]
    3. Built-in defaults

Expected secrets.toml format:
    [remote]
    web_app_url = "https://script.google.com/macros/s/<deployment>/exec"
    db_path = "local_data/inventory.db"
    sync_timeout = 8
    queue_timeout = 10
"""

from __future__ import annotations
import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Dict, Optional
import logging

import toml
from dotenv import load_dotenv

from inventory_core.errors import ConfigurationError

logger = logging.getLogger(__name__)


PLACEHOLDER_URL = "YOUR_WEB_APP_URL_HERE"

DEFAULT_DB_PATH = Path("local_data") / "inventory.db"
DEFAULT_SECRETS_PATH = Path(".streamlit") / "secrets.toml"

ENV_PREFIX = "INVENTORY_"


@dataclass(frozen=True)
class RemoteConfig:
    """Settings shared by the gateway, the sync queue and the services."""
    web_app_url: str = PLACEHOLDER_URL
    sync_timeout: float = 8.0           # Seconds, synchronous operations
    queue_timeout: float = 10.0         # Seconds, queued deliveries
    max_attempts: int = 3               # Retries after the first failure
    startup_drain_delay: float = 1.0    # Seconds after start before first drain
    sync_interval: Optional[float] = None  # Periodic drain, off by default
    db_path: Path = DEFAULT_DB_PATH

    @property
    def is_configured(self) -> bool:
        """True when the remote endpoint is set to a real deployment URL."""
        url = (self.web_app_url or "").strip()
        return bool(url) and url != PLACEHOLDER_URL

    def with_url(self, web_app_url: str) -> RemoteConfig:
        return replace(self, web_app_url=web_app_url)


def _read_secrets(secrets_path: Path) -> Dict[str, Any]:
    if not secrets_path.exists():
        return {}
    try:
        secrets = toml.load(secrets_path)
    except toml.TomlDecodeError as e:
        raise ConfigurationError(
            f"Could not parse {secrets_path}: {e}",
            config_key="remote",
        )
    return dict(secrets.get("remote", {}))


def _as_float(key: str, value: Any) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        raise ConfigurationError(
            f"Invalid value for {key}: {value!r}",
            config_key=key,
            expected_type="float",
        )


def _as_int(key: str, value: Any) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ConfigurationError(
            f"Invalid value for {key}: {value!r}",
            config_key=key,
            expected_type="int",
        )


def load_config(
    secrets_path: Optional[Path] = None,
    dotenv: bool = True,
) -> RemoteConfig:
    """
    Build a RemoteConfig from the environment, secrets.toml and defaults.

    Args:
        secrets_path: Location of secrets.toml (default: .streamlit/secrets.toml)
        dotenv: Whether to load a .env file into the environment first

    Returns:
        RemoteConfig; an unset endpoint yields the placeholder URL
    """
    if dotenv:
        load_dotenv()

    file_values = _read_secrets(Path(secrets_path or DEFAULT_SECRETS_PATH))

    def lookup(name: str, default: Any = None) -> Any:
        env_value = os.getenv(f"{ENV_PREFIX}{name.upper()}")
        if env_value not in (None, ""):
            return env_value
        return file_values.get(name, default)

    defaults = RemoteConfig()
    interval = lookup("sync_interval")

    config = RemoteConfig(
        web_app_url=str(lookup("web_app_url", defaults.web_app_url)),
        sync_timeout=_as_float("sync_timeout", lookup("sync_timeout", defaults.sync_timeout)),
        queue_timeout=_as_float("queue_timeout", lookup("queue_timeout", defaults.queue_timeout)),
        max_attempts=_as_int("max_attempts", lookup("max_attempts", defaults.max_attempts)),
        startup_drain_delay=_as_float(
            "startup_drain_delay",
            lookup("startup_drain_delay", defaults.startup_drain_delay),
        ),
        sync_interval=_as_float("sync_interval", interval) if interval is not None else None,
        db_path=Path(lookup("db_path", defaults.db_path)),
    )

    if not config.is_configured:
        logger.warning("Remote endpoint not configured; running against the local store only")

    return config
