# =============================================================================
# inventory_core/api/remote_gateway.py
# HTTP Gateway to the Spreadsheet-Backed Remote Mirror
# =============================================================================
"""
RemoteGateway - issues every request to the single configured endpoint.

Two encodings are supported:
- Query encoding: GET ?action=<name>&<params>&timestamp=<epoch ms>
- Opaque post: POST with a JSON body whose response is never inspected.
  A DISPATCHED outcome only means the request left the client; it is not
  a confirmation that the remote mutation happened.

Transport problems never raise. Each call returns a RemoteResult that
classifies the outcome; RemoteResult.error() maps a failure onto the
exception taxonomy in inventory_core.errors.
"""

from __future__ import annotations
import json
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, Optional
import logging

import requests

from inventory_core.config import RemoteConfig
from inventory_core.errors import (
    InventorySyncError,
    RemoteHttpError,
    RemoteNetworkError,
    RemoteParseError,
    RemoteTimeoutError,
    UnconfiguredError,
)
from inventory_core.models import now_ms

logger = logging.getLogger(__name__)


class RemoteOutcome(Enum):
    """Classification of a remote call."""
    OK = "ok"                       # HTTP 2xx, body available
    DISPATCHED = "dispatched"       # Opaque post sent, response not consulted
    HTTP_ERROR = "http_error"       # Non-2xx status
    NETWORK_ERROR = "network_error" # Transport failure
    TIMEOUT = "timeout"             # Deadline exceeded, request abandoned


@dataclass
class RemoteResult:
    """Outcome of one gateway call."""
    outcome: RemoteOutcome
    action: str
    body: Optional[str] = None
    status: Optional[int] = None
    cause: Optional[str] = None
    timeout: Optional[float] = None

    @property
    def ok(self) -> bool:
        return self.outcome in (RemoteOutcome.OK, RemoteOutcome.DISPATCHED)

    def json(self) -> Any:
        """
        Parse the body as JSON.

        Raises:
            RemoteParseError: body missing or not valid JSON
        """
        if self.body is None:
            raise RemoteParseError(f"No body for {self.action}")
        try:
            return json.loads(self.body)
        except ValueError as e:
            raise RemoteParseError(f"Unparseable response for {self.action}: {e}", body=self.body)

    def error(self) -> Optional[InventorySyncError]:
        """Exception describing a failed outcome, None on success."""
        if self.outcome == RemoteOutcome.TIMEOUT:
            return RemoteTimeoutError(action=self.action, timeout=self.timeout)
        if self.outcome == RemoteOutcome.NETWORK_ERROR:
            return RemoteNetworkError(f"Failed to connect: {self.cause}", action=self.action)
        if self.outcome == RemoteOutcome.HTTP_ERROR:
            return RemoteHttpError(self.status or 0, action=self.action)
        return None

    def raise_for_failure(self) -> RemoteResult:
        error = self.error()
        if error is not None:
            raise error
        return self


class RemoteGateway:
    """
    Client for the remote mirror endpoint.

    Usage:
        gateway = RemoteGateway(config)
        result = gateway.invoke("getItems")
        if result.ok:
            items = result.json().get("items", [])
    """

    def __init__(
        self,
        config: RemoteConfig,
        session: Optional[requests.Session] = None,
        clock: Callable[[], int] = now_ms,
    ):
        self.config = config
        self.session = session or requests.Session()
        self._clock = clock

    @property
    def is_configured(self) -> bool:
        return self.config.is_configured

    def _require_configured(self, action: str) -> None:
        if not self.is_configured:
            raise UnconfiguredError(details={"action": action})

    def invoke(
        self,
        action: str,
        params: Optional[Dict[str, Any]] = None,
        timeout: Optional[float] = None,
    ) -> RemoteResult:
        """
        Query-encoded call: GET ?action=...&<params>&timestamp=<epoch ms>.

        Args:
            action: Remote action name
            params: Query parameters (None values are sent as empty strings)
            timeout: Seconds allowed for connecting and for each read of the
                response. requests applies it per socket operation, so a
                server that keeps trickling bytes can run past it.

        Returns:
            RemoteResult with outcome OK, HTTP_ERROR, NETWORK_ERROR or TIMEOUT
        """
        self._require_configured(action)
        timeout = timeout if timeout is not None else self.config.sync_timeout

        query: Dict[str, Any] = {"action": action}
        for key, value in (params or {}).items():
            query[key] = "" if value is None else value
        query["timestamp"] = self._clock()

        try:
            response = self.session.get(
                self.config.web_app_url,
                params=query,
                headers={"Cache-Control": "no-cache"},
                allow_redirects=True,
                timeout=timeout,
            )
        except requests.exceptions.Timeout:
            logger.warning(f"{action}: request timed out after {timeout}s")
            return RemoteResult(RemoteOutcome.TIMEOUT, action, timeout=timeout)
        except requests.exceptions.RequestException as e:
            logger.warning(f"{action}: request failed: {e}")
            return RemoteResult(RemoteOutcome.NETWORK_ERROR, action, cause=str(e))

        body = response.text
        if not response.ok:
            logger.warning(f"{action}: HTTP {response.status_code}")
            return RemoteResult(
                RemoteOutcome.HTTP_ERROR, action, body=body, status=response.status_code
            )

        logger.debug(f"{action} response: {body[:200]}")
        return RemoteResult(RemoteOutcome.OK, action, body=body, status=response.status_code)

    def dispatch_opaque(
        self,
        action: str,
        fields: Optional[Dict[str, Any]] = None,
        timeout: Optional[float] = None,
    ) -> RemoteResult:
        """
        Opaque post: POST a JSON body and ignore the response.

        Returns:
            RemoteResult with outcome DISPATCHED, NETWORK_ERROR or TIMEOUT
        """
        self._require_configured(action)
        timeout = timeout if timeout is not None else self.config.sync_timeout

        body = dict(fields or {})
        body["action"] = action

        try:
            response = self.session.post(
                self.config.web_app_url,
                json=body,
                headers={"Content-Type": "application/json"},
                timeout=timeout,
                stream=True,
            )
            response.close()
        except requests.exceptions.Timeout:
            logger.warning(f"{action}: dispatch timed out after {timeout}s")
            return RemoteResult(RemoteOutcome.TIMEOUT, action, timeout=timeout)
        except requests.exceptions.RequestException as e:
            logger.warning(f"{action}: dispatch failed: {e}")
            return RemoteResult(RemoteOutcome.NETWORK_ERROR, action, cause=str(e))

        logger.debug(f"{action}: dispatched (response not inspected)")
        return RemoteResult(RemoteOutcome.DISPATCHED, action)
