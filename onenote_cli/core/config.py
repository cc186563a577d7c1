"""Configuration helpers for onenote CLI."""

from __future__ import annotations

import json
import logging
import os
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict

logger = logging.getLogger(__name__)

CONFIG_PATH = Path(os.path.expanduser("~")) / ".onenote-cli.json"
TOKEN_PATH = Path(os.path.expanduser("~")) / ".onenote-access-token.txt"
# Default API endpoint used when no base URL is configured
DEFAULT_BASE = "https://graph.microsoft.com/v1.0"
# Server maximum for the ``$top`` parameter
API_MAX_LIMIT = 999

# Per-request timeout in seconds
REQUEST_TIMEOUT = 60.0
# Pause between continuation fetches and between exported pages
PAGE_DELAY = 0.1
REQUEST_DELAY = 0.1

MAX_CONSECUTIVE_FAILURES = 10
MAX_ATTEMPTS = 2
FAST_MODE_DAYS = 30

EXCLUDED_KEYWORDS = ("private", "(old)")
CUTOFF_DATE = datetime(2022, 1, 1, tzinfo=timezone.utc)


def load_config() -> Dict[str, Any]:
    """Load configuration from disk and environment."""
    cfg: Dict[str, Any] = {}
    if CONFIG_PATH.exists():
        try:
            cfg = json.loads(CONFIG_PATH.read_text(encoding="utf-8"))
        except ValueError:
            cfg = {}
        if not isinstance(cfg, dict):
            cfg = {}
    if os.getenv("ONENOTE_BASE_URL"):
        cfg["base_url"] = os.getenv("ONENOTE_BASE_URL")
    if os.getenv("ONENOTE_TOKEN_FILE"):
        cfg["token_file"] = os.getenv("ONENOTE_TOKEN_FILE")
    if os.getenv("ONENOTE_REQUEST_TIMEOUT_MS"):
        try:
            cfg["request_timeout"] = int(os.getenv("ONENOTE_REQUEST_TIMEOUT_MS")) / 1000.0
        except ValueError:
            logger.warning(
                "Ignoring ONENOTE_REQUEST_TIMEOUT_MS=%r: not an integer", os.getenv("ONENOTE_REQUEST_TIMEOUT_MS")
            )
    return cfg


def get_base_url(cfg: Dict[str, Any] | None = None) -> str:
    cfg = load_config() if cfg is None else cfg
    return (cfg.get("base_url") or DEFAULT_BASE).rstrip("/")


def get_token_path(cfg: Dict[str, Any] | None = None) -> Path:
    cfg = load_config() if cfg is None else cfg
    if cfg.get("token_file"):
        return Path(os.path.expanduser(cfg["token_file"]))
    return TOKEN_PATH


def get_request_timeout(cfg: Dict[str, Any] | None = None) -> float:
    cfg = load_config() if cfg is None else cfg
    try:
        value = float(cfg.get("request_timeout") or REQUEST_TIMEOUT)
    except (TypeError, ValueError):
        return REQUEST_TIMEOUT
    return value if value > 0 else REQUEST_TIMEOUT
