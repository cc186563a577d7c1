"""Error types raised by the core helpers.

Low-level helpers raise these instead of exiting so that callers decide what
a failure means.  The CLI entry point turns them into a message and exit code;
the bulk export driver records them as per-page outcomes.
"""

from __future__ import annotations


class OneNoteError(Exception):
    """Base class for all errors raised by onenote CLI."""


class CredentialMissing(OneNoteError):
    """No usable access token was found."""


class AuthRejected(OneNoteError):
    """The API refused the access token (HTTP 401/403)."""


class NetworkError(OneNoteError):
    """A request failed, timed out or returned a non-2xx status."""

    def __init__(self, message: str, status: int | None = None):
        super().__init__(message)
        self.status = status


class InvalidContinuationToken(OneNoteError):
    """A continuation link was malformed or no longer accepted by the server."""


class FilesystemError(OneNoteError):
    """Reading or writing a local file failed."""
