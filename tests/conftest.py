"""Shared pytest fixtures for onenote CLI tests."""

from __future__ import annotations

import pytest

from onenote_cli.core.errors import NetworkError


class FakeClient:
    """Stand-in for :class:`GraphClient` answering from scripted responses.

    ``json`` maps a target (path or URL) to a dict, an exception instance, or
    a list of those consumed one per call.  ``text`` does the same for
    content requests.  Every call is recorded in ``calls``.
    """

    base_url = "https://graph.example/v1.0"
    timeout = 60.0

    def __init__(self, json=None, text=None):
        self.json = dict(json or {})
        self.text = dict(text or {})
        self.calls = []

    def _answer(self, table, target):
        if target not in table:
            raise NetworkError(f"[HTTP 404] no fake response for {target}", status=404)
        value = table[target]
        if isinstance(value, list):
            value = value.pop(0) if len(value) > 1 else value[0]
        if isinstance(value, Exception):
            raise value
        return value

    def get_json(self, target, *, timeout=None):
        self.calls.append(("json", target))
        return self._answer(self.json, target)

    def get_text(self, target, *, timeout=None):
        self.calls.append(("text", target))
        return self._answer(self.text, target)


@pytest.fixture
def fake_client():
    return FakeClient


@pytest.fixture(autouse=True)
def no_sleep(monkeypatch):
    """Skip the rate-limit pauses between requests."""
    monkeypatch.setattr("time.sleep", lambda s: None)


@pytest.fixture
def isolated_home(tmp_path, monkeypatch):
    """Point config and token paths at a temporary directory."""
    import onenote_cli.core.config as config

    monkeypatch.setattr(config, "CONFIG_PATH", tmp_path / ".onenote-cli.json")
    monkeypatch.setattr(config, "TOKEN_PATH", tmp_path / ".onenote-access-token.txt")
    for var in ("ONENOTE_BASE_URL", "ONENOTE_TOKEN_FILE", "ONENOTE_REQUEST_TIMEOUT_MS", "GRAPH_ACCESS_TOKEN"):
        monkeypatch.delenv(var, raising=False)
    return tmp_path
