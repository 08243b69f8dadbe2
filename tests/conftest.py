# =============================================================================
# tests/conftest.py
# Pytest Configuration and Fixtures
# =============================================================================

import io
import json
import sys
from typing import List, Tuple
from unittest.mock import MagicMock

import pytest
import requests

from inventory_core.api import RemoteGateway
from inventory_core.config import RemoteConfig
from inventory_core.offline import LocalStore, SyncQueueService
from inventory_core.services import AccountService, InventoryService


FIXED_TIMESTAMP = 1700000000000
WEB_APP_URL = "https://script.example.com/macros/s/test-deployment/exec"


# =============================================================================
# PRESENTATION FIXTURES
# =============================================================================

class RecordingPresenter:
    """Presenter that records every hook invocation"""

    def __init__(self):
        self.calls: List[Tuple[str, str]] = []

    def show_loading(self, message, delay=0.3, blocking=True):
        self.calls.append(("show_loading", message))

    def hide_loading(self):
        self.calls.append(("hide_loading", ""))

    def toast(self, message, timeout=4.0):
        self.calls.append(("toast", message))

    @property
    def toasts(self) -> List[str]:
        return [message for kind, message in self.calls if kind == "toast"]

    @property
    def loading_messages(self) -> List[str]:
        return [message for kind, message in self.calls if kind == "show_loading"]


@pytest.fixture
def presenter():
    return RecordingPresenter()


# =============================================================================
# CONFIGURATION / STORAGE FIXTURES
# =============================================================================

@pytest.fixture
def config(tmp_path):
    """Configured remote endpoint with a temporary database"""
    return RemoteConfig(web_app_url=WEB_APP_URL, db_path=tmp_path / "inventory.db")


@pytest.fixture
def unconfigured_config(tmp_path):
    """Remote endpoint left at the placeholder"""
    return RemoteConfig(db_path=tmp_path / "inventory.db")


@pytest.fixture
def store(tmp_path):
    local_store = LocalStore(tmp_path / "inventory.db")
    yield local_store
    local_store.close()


# =============================================================================
# HTTP FIXTURES
# =============================================================================

@pytest.fixture
def fixed_timestamp():
    return FIXED_TIMESTAMP


@pytest.fixture
def make_response():
    """Factory for requests.Response objects with a given status and body"""

    def _make(status: int = 200, body="") -> requests.Response:
        response = requests.Response()
        response.status_code = status
        if not isinstance(body, str):
            body = json.dumps(body)
        response._content = body.encode("utf-8")
        response.raw = io.BytesIO(response._content)
        response.encoding = "utf-8"
        return response

    return _make


@pytest.fixture
def session(make_response):
    """Mock requests session answering every call with HTTP 200 {"success": true}"""
    mock_session = MagicMock(spec=requests.Session)
    mock_session.get.return_value = make_response(200, {"success": True})
    mock_session.post.return_value = make_response(200, "")
    return mock_session


@pytest.fixture
def gateway(config, session):
    return RemoteGateway(config, session=session, clock=lambda: FIXED_TIMESTAMP)


@pytest.fixture
def unconfigured_gateway(unconfigured_config, session):
    return RemoteGateway(unconfigured_config, session=session, clock=lambda: FIXED_TIMESTAMP)


# =============================================================================
# SERVICE FIXTURES
# =============================================================================

@pytest.fixture
def sync_queue(store, gateway, config, presenter):
    """Queue that drains inline instead of on a background thread"""
    return SyncQueueService(store, gateway, config, presenter, background=False)


@pytest.fixture
def accounts(store, gateway, sync_queue, presenter):
    return AccountService(store, gateway, sync_queue, presenter)


@pytest.fixture
def unconfigured_accounts(store, unconfigured_gateway, unconfigured_config, presenter):
    queue = SyncQueueService(
        store, unconfigured_gateway, unconfigured_config, presenter, background=False
    )
    return AccountService(store, unconfigured_gateway, queue, presenter)


@pytest.fixture
def inventory(gateway, presenter):
    return InventoryService(gateway, presenter)


@pytest.fixture
def unconfigured_inventory(unconfigured_gateway, presenter):
    return InventoryService(unconfigured_gateway, presenter)


@pytest.fixture
def mock_streamlit(monkeypatch):
    """Mock Streamlit for testing"""
    mock_st = MagicMock()
    mock_st.session_state = {}
    monkeypatch.setitem(sys.modules, "streamlit", mock_st)
    return mock_st

