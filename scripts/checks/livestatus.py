"""
scripts/checks/livestatus.py — Livestatus API query adapter.

Issues one GET against the Livestatus REST API and returns the decoded
``content`` rows. Every failure surfaces as a LivestatusError subclass so
callers decide whether it sinks a single partition or the whole check.

Expected response shape:
    {"success": true, "content": [{"name": "web01", "state": 0}, ...]}
"""

from __future__ import annotations

import http.client
import json
import ssl
import urllib.error
import urllib.parse
import urllib.request
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from config.settings import Settings


class LivestatusError(Exception):
    """Base class for a query that produced no usable rows."""

    def __init__(self, uri: str, reason: str):
        super().__init__(reason)
        self.uri = uri
        self.reason = reason


class TransportFailure(LivestatusError):
    """Request could not be built or sent (bad URI, DNS, TLS, timeout)."""


class ProtocolFailure(LivestatusError):
    """Server answered, but not with a successful Livestatus payload."""


def hosts_uri(base_url: str, filter_expr: str, columns: list[str]) -> str:
    """Build a /hosts query, e.g. ``hosts?Filter=name%20%3D%20web01&Columns=state``."""
    return (
        f"{base_url.rstrip('/')}/hosts"
        f"?Filter={urllib.parse.quote(filter_expr)}"
        f"&Columns={','.join(columns)}"
    )


def build_ssl_context(verify_tls: bool) -> ssl.SSLContext:
    context = ssl.create_default_context()
    if not verify_tls:
        context.check_hostname = False
        context.verify_mode = ssl.CERT_NONE
    return context


def status_accepted(status: int, accept_any_2xx: bool) -> bool:
    if accept_any_2xx:
        return 200 <= status < 300
    # Historical rule: anything above 200 is rejected, including 201-299.
    return status <= 200


def fetch(
    uri: str,
    *,
    timeout_seconds: float = 10.0,
    verify_tls: bool = True,
    accept_any_2xx: bool = False,
) -> list[dict[str, Any]]:
    """GET ``uri`` and return the ``content`` rows (possibly empty).

    Raises:
        TransportFailure: the request could not be built or completed.
        ProtocolFailure: rejected status, malformed JSON, ``success: false``
            or a missing/non-list ``content`` field.
    """
    try:
        request = urllib.request.Request(uri, method="GET")
    except ValueError as e:
        raise TransportFailure(uri, f"invalid request: {e}") from e

    try:
        with urllib.request.urlopen(
            request, timeout=timeout_seconds, context=build_ssl_context(verify_tls)
        ) as resp:
            status = resp.status
            body = resp.read()
    except urllib.error.HTTPError as e:
        raise ProtocolFailure(uri, f"HTTP {e.code}") from e
    except urllib.error.URLError as e:
        raise TransportFailure(uri, f"not reachable: {e.reason}") from e
    except http.client.HTTPException as e:
        raise ProtocolFailure(uri, f"bad HTTP response: {e!r}") from e
    except (TimeoutError, OSError) as e:
        raise TransportFailure(uri, f"request failed: {e}") from e

    if not status_accepted(status, accept_any_2xx):
        raise ProtocolFailure(uri, f"unexpected status {status}")

    try:
        payload = json.loads(body)
    except ValueError as e:
        raise ProtocolFailure(uri, f"invalid JSON: {e}") from e

    if not isinstance(payload, dict):
        raise ProtocolFailure(uri, f"expected a JSON object, got {type(payload).__name__}")
    if payload.get("success") is False:
        raise ProtocolFailure(uri, "Livestatus reported success=false")

    content = payload.get("content")
    if not isinstance(content, list):
        raise ProtocolFailure(uri, "response has no 'content' list")
    return content


def fetch_with(cfg: Settings, uri: str) -> list[dict[str, Any]]:
    """fetch() using the transport options from ``cfg``."""
    return fetch(
        uri,
        timeout_seconds=cfg.LIVESTATUS_TIMEOUT_SECONDS,
        verify_tls=cfg.LIVESTATUS_VERIFY_TLS,
        accept_any_2xx=cfg.LIVESTATUS_ACCEPT_ANY_2XX,
    )
