# =============================================================================
# tests/unit/test_config.py
# Unit Tests for Configuration Loading
# =============================================================================

import pytest

from inventory_core.config import PLACEHOLDER_URL, RemoteConfig, load_config
from inventory_core.errors import ConfigurationError


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in (
        "WEB_APP_URL", "DB_PATH", "SYNC_TIMEOUT", "QUEUE_TIMEOUT",
        "MAX_ATTEMPTS", "STARTUP_DRAIN_DELAY", "SYNC_INTERVAL",
    ):
        monkeypatch.delenv(f"INVENTORY_{name}", raising=False)


@pytest.fixture
def secrets_file(tmp_path):
    path = tmp_path / "secrets.toml"
    path.write_text(
        '[remote]\n'
        'web_app_url = "https://script.example.com/exec"\n'
        'sync_timeout = 9\n'
        'db_path = "data/store.db"\n'
    )
    return path


class TestRemoteConfig:

    def test_defaults_are_unconfigured(self):
        config = RemoteConfig()

        assert config.web_app_url == PLACEHOLDER_URL
        assert not config.is_configured
        assert config.sync_timeout == 8.0
        assert config.queue_timeout == 10.0
        assert config.max_attempts == 3

    @pytest.mark.parametrize("url", ["", "   ", PLACEHOLDER_URL])
    def test_placeholder_or_blank_is_unconfigured(self, url):
        assert not RemoteConfig(web_app_url=url).is_configured

    def test_real_url_is_configured(self):
        assert RemoteConfig().with_url("https://script.example.com/exec").is_configured


class TestLoadConfig:

    def test_missing_sources_give_defaults(self, tmp_path):
        config = load_config(secrets_path=tmp_path / "absent.toml", dotenv=False)

        assert config == RemoteConfig()

    def test_secrets_file(self, secrets_file):
        config = load_config(secrets_path=secrets_file, dotenv=False)

        assert config.web_app_url == "https://script.example.com/exec"
        assert config.sync_timeout == 9.0
        assert str(config.db_path).replace("\\", "/") == "data/store.db"
        assert config.is_configured

    def test_environment_overrides_secrets(self, secrets_file, monkeypatch):
        monkeypatch.setenv("INVENTORY_WEB_APP_URL", "https://other.example.com/exec")
        monkeypatch.setenv("INVENTORY_SYNC_INTERVAL", "30")

        config = load_config(secrets_path=secrets_file, dotenv=False)

        assert config.web_app_url == "https://other.example.com/exec"
        assert config.sync_interval == 30.0

    def test_invalid_number_raises(self, tmp_path, monkeypatch):
        monkeypatch.setenv("INVENTORY_QUEUE_TIMEOUT", "soon")

        with pytest.raises(ConfigurationError) as exc_info:
            load_config(secrets_path=tmp_path / "absent.toml", dotenv=False)

        assert exc_info.value.details["config_key"] == "queue_timeout"

    def test_malformed_secrets_raise(self, tmp_path):
        path = tmp_path / "secrets.toml"
        path.write_text("[remote\nweb_app_url = ")

        with pytest.raises(ConfigurationError):
            load_config(secrets_path=path, dotenv=False)
