"""Core utilities for onenote CLI."""

from .config import (
    CONFIG_PATH,
    TOKEN_PATH,
    DEFAULT_BASE,
    API_MAX_LIMIT,
    load_config,
    get_base_url,
    get_token_path,
    get_request_timeout,
)
from .errors import (
    OneNoteError,
    CredentialMissing,
    AuthRejected,
    NetworkError,
    InvalidContinuationToken,
    FilesystemError,
)
from .credentials import load_token, save_token, decode_token
from .http import GraphClient, http_json, http_request
from .pagination import CollectionPage, fetch_collection
from .filters import SkipDecision, should_skip, title_excluded_keyword, parse_timestamp
from .utils import format_rows, safe_name, date_stamp, export_filename, html_snippet
from .pages import (
    RetrievedPage,
    list_notebooks,
    get_notebook,
    list_sections,
    list_pages,
    search_pages,
    resolve_default_section,
    retrieve_page,
    save_page,
)
from .interactive import interactive_pick_section


def get_client(cfg: dict | None = None) -> GraphClient:
    """Build a :class:`GraphClient` from the stored token and configuration."""
    cfg = load_config() if cfg is None else cfg
    token = load_token(get_token_path(cfg))
    return GraphClient(token, get_base_url(cfg), timeout=get_request_timeout(cfg))


__all__ = [
    "CONFIG_PATH", "TOKEN_PATH", "DEFAULT_BASE", "API_MAX_LIMIT",
    "load_config", "get_base_url", "get_token_path", "get_request_timeout",
    "OneNoteError", "CredentialMissing", "AuthRejected", "NetworkError",
    "InvalidContinuationToken", "FilesystemError",
    "load_token", "save_token", "decode_token",
    "GraphClient", "http_json", "http_request", "get_client",
    "CollectionPage", "fetch_collection",
    "SkipDecision", "should_skip", "title_excluded_keyword", "parse_timestamp",
    "format_rows", "safe_name", "date_stamp", "export_filename", "html_snippet",
    "RetrievedPage", "list_notebooks", "get_notebook", "list_sections", "list_pages", "search_pages",
    "resolve_default_section", "retrieve_page", "save_page",
    "interactive_pick_section",
]
