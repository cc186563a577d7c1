"""Minimal HTTP helpers for the CLI.

The implementation uses :mod:`urllib` from the Python standard library.
Failures are raised as the typed errors from :mod:`.errors`; deciding whether
a failure is fatal is left to the caller.
"""

from __future__ import annotations

import http.client
import json
import logging
import socket
from typing import Any, Dict
from urllib.error import HTTPError, URLError
from urllib.request import Request, urlopen

from .config import REQUEST_TIMEOUT
from .errors import AuthRejected, NetworkError

logger = logging.getLogger(__name__)


def http_request(
    method: str,
    url: str,
    token: str,
    *,
    accept: str = "application/json",
    timeout: float = REQUEST_TIMEOUT,
) -> tuple[str, bytes]:
    """Perform an HTTP request and return ``(content_type, body)``."""

    headers = {"Accept": accept, "Authorization": f"Bearer {token}"}
    req = Request(url=url, method=method.upper(), headers=headers)
    logger.debug("%s %s", method.upper(), url)
    try:
        with urlopen(req, timeout=timeout) as resp:
            ctype = (resp.headers.get("Content-Type") or "").lower()
            return ctype, resp.read()
    except HTTPError as e:
        raise _error_from_http(e) from e
    except URLError as e:
        if isinstance(e.reason, socket.timeout):
            raise NetworkError(f"Request timed out after {timeout:g}s: {url}") from e
        raise NetworkError(f"Network error: {e.reason}") from e
    except (socket.timeout, TimeoutError) as e:
        raise NetworkError(f"Request timed out after {timeout:g}s: {url}") from e
    except (OSError, http.client.HTTPException) as e:
        # dropped connections and truncated bodies surface here, not as URLError
        raise NetworkError(f"Network error: {e!r}") from e


def http_json(method: str, url: str, token: str, **kwargs) -> Dict[str, Any]:
    """Perform a request and return the parsed JSON object."""
    _, raw = http_request(method, url, token, **kwargs)
    try:
        data = json.loads(raw.decode("utf-8"))
    except ValueError as e:
        raise NetworkError(f"Invalid JSON response from {url}") from e
    if not isinstance(data, dict):
        raise NetworkError(f"Unexpected response from {url}: expected a JSON object")
    return data


def _error_message(body: str) -> str:
    """Extract a readable message from a Graph error body."""
    try:
        data = json.loads(body)
    except ValueError:
        return body.strip()
    if isinstance(data, dict):
        err = data.get("error")
        if isinstance(err, dict) and err.get("message"):
            return str(err["message"])
        if isinstance(err, str) and err:
            return err
    return body.strip()


def _error_from_http(e: HTTPError) -> Exception:
    try:
        body = e.read().decode("utf-8", errors="ignore")
    except Exception:
        body = ""
    message = _error_message(body) or str(e.reason)
    if e.code == 401:
        return AuthRejected(f"Authentication failed: {message}")
    if e.code == 403:
        return AuthRejected(f"Forbidden: {message} (does the token have Notes.Read scope?)")
    return NetworkError(f"[HTTP {e.code}] {message}", status=e.code)


class GraphClient:
    """Explicit API context passed to every operation.

    Holds the base URL, bearer token and request timeout.  ``target`` arguments
    may be a path relative to the base URL or an absolute URL (continuation
    links are absolute).
    """

    def __init__(self, token: str, base_url: str, timeout: float = REQUEST_TIMEOUT):
        self.token = token
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    def url_for(self, target: str) -> str:
        if target.startswith("http://") or target.startswith("https://"):
            return target
        return f"{self.base_url}/{target.lstrip('/')}"

    def get_json(self, target: str, *, timeout: float | None = None) -> Dict[str, Any]:
        return http_json(
            "GET",
            self.url_for(target),
            self.token,
            timeout=self.timeout if timeout is None else timeout,
        )

    def get_text(self, target: str, *, timeout: float | None = None) -> str:
        _, raw = http_request(
            "GET",
            self.url_for(target),
            self.token,
            accept="text/html",
            timeout=self.timeout if timeout is None else timeout,
        )
        return raw.decode("utf-8", errors="replace")
