"""Access token storage.

The token file comes in two encodings: the structured form written by
``onenote auth set`` (``{"token": "..."}``) and a bare token pasted into the
file by hand.  Decoding tries the structured form first and falls back to the
raw text.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Tuple

from .errors import CredentialMissing, FilesystemError

logger = logging.getLogger(__name__)

STRUCTURED = "structured"
RAW = "raw"

# Field names accepted in the structured encoding, in order of preference
TOKEN_FIELDS = ("token", "access_token")
ENV_TOKEN = "GRAPH_ACCESS_TOKEN"


def _try_structured(text: str) -> str | None:
    """Return the token from a JSON object, or ``None`` if *text* isn't one."""
    try:
        data = json.loads(text)
    except ValueError:
        return None
    if not isinstance(data, dict):
        return None
    for field in TOKEN_FIELDS:
        value = data.get(field)
        if isinstance(value, str) and value.strip():
            return value
    return ""


def decode_token(text: str) -> Tuple[str, str]:
    """Decode token file contents into ``(encoding, token)``.

    ``encoding`` is :data:`STRUCTURED` or :data:`RAW`.  A JSON object with no
    usable token field decodes to an empty structured token.
    """
    token = _try_structured(text)
    if token is not None:
        return STRUCTURED, token.strip()
    return RAW, text.strip()


def load_token(path: Path, *, use_env: bool = True) -> str:
    """Return the bearer token stored at *path*.

    When the file is missing or holds no token the ``GRAPH_ACCESS_TOKEN``
    environment variable is used instead.  Raises :class:`CredentialMissing`
    if neither yields a token.
    """
    token = ""
    if path.exists():
        try:
            text = path.read_text(encoding="utf-8")
        except OSError as e:
            raise FilesystemError(f"Cannot read token file {path}: {e}") from e
        encoding, token = decode_token(text)
        logger.debug("Read %s token from %s", encoding, path)
    if not token and use_env:
        token = (os.getenv(ENV_TOKEN) or "").strip()
    if not token:
        raise CredentialMissing(
            f"Access token not found in {path}. Run: onenote auth set --token <token>"
        )
    return token


def save_token(path: Path, token: str) -> None:
    """Persist *token* to *path* in the structured encoding."""
    token = (token or "").strip()
    if not token:
        raise CredentialMissing("Refusing to save an empty access token")
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps({"token": token}), encoding="utf-8")
    except OSError as e:
        raise FilesystemError(f"Cannot write token file {path}: {e}") from e
