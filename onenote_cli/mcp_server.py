"""FastMCP server exposing OneNote read tools to agents.

Tools:
- save_access_token(token) - store a Graph access token for later calls
- list_notebooks() - list all notebooks
- get_notebook(notebook_id) - details of one notebook
- list_sections(notebook_id) - list sections of a notebook, or all sections
- list_pages(section_id, top, next_link, fetch_all) - list pages with pagination
- search_pages(search_term, section_id) - find pages by title
- get_page(page_id) - HTML content of a page, unless excluded by the filter rules
- download_page(page_id, file_path) - save the HTML content of a page to a file

Every tool builds its own client from the stored token, so a token saved with
``save_access_token`` is picked up by the next call.  The server talks on
stdout; diagnostics go to the log on stderr.
"""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path
from typing import Optional

from .core import (
    GraphClient,
    get_client,
    get_notebook as _get_notebook,
    get_token_path,
    list_pages as _list_pages,
    list_notebooks as _list_notebooks,
    list_sections as _list_sections,
    retrieve_page,
    save_token,
    search_pages as _search_pages,
)
from .core.pages import write_page

logger = logging.getLogger(__name__)

SERVER_NAME = "OneNote MCP Server"


def _client() -> GraphClient:
    return get_client()


def _dump(value) -> str:
    return json.dumps(value, ensure_ascii=False)


def validate_required_param(value: Optional[str], param_name: str) -> str:
    """Validate that a parameter is provided and not empty."""
    if not value or not value.strip():
        raise ValueError(f"{param_name} parameter is required and cannot be empty")
    return value.strip()


def save_access_token(token: str) -> str:
    """Save a Microsoft Graph access token for later use."""
    path = get_token_path()
    save_token(path, validate_required_param(token, "token"))
    logger.info("Access token saved to %s", path)
    return "Access token saved successfully"


def list_notebooks() -> str:
    """List all OneNote notebooks."""
    return _dump(_list_notebooks(_client()))


def get_notebook(notebook_id: str) -> str:
    """Get the details of a notebook by its ID."""
    notebook_id = validate_required_param(notebook_id, "notebook_id")
    return _dump(_get_notebook(_client(), notebook_id))


def list_sections(notebook_id: Optional[str] = None) -> str:
    """List sections in a notebook, or all sections when no notebook ID is given."""
    return _dump(_list_sections(_client(), notebook_id or None))


def list_pages(
    section_id: Optional[str] = None,
    top: Optional[int] = None,
    next_link: Optional[str] = None,
    fetch_all: bool = False,
) -> str:
    """List pages in a section.

    Use fetch_all to get every page, or top plus the returned nextLink to page
    through the results.  Without a section ID the first section is used.
    """
    client = _client()
    if not next_link and not section_id:
        sections = _list_sections(client)
        if not sections:
            return _dump({"value": [], "nextLink": None})
        section_id = sections[0].get("id")
    result = _list_pages(client, section_id, top=top, next_link=next_link or None, fetch_all=fetch_all)
    out = {"value": result.records, "nextLink": result.next_link}
    if result.error:
        out["error"] = result.error
    return _dump(out)


def search_pages(search_term: Optional[str] = None, section_id: Optional[str] = None) -> str:
    """Search pages by title across all sections or within one section."""
    pages = _search_pages(_client(), search_term, section_id or None)
    logger.info("Search %r matched %d pages", search_term, len(pages))
    return _dump(pages)


def get_page(page_id: str) -> str:
    """Get the HTML content of a page.

    Pages with 'private' or '(old)' in the title, or last modified before
    2022-01-01, are skipped.
    """
    page_id = validate_required_param(page_id, "page_id")
    result = retrieve_page(_client(), page_id)
    if result.skipped:
        return f"Page skipped: {result.skip_reason}"
    return result.content or ""


def download_page(page_id: str, file_path: str) -> str:
    """Download the HTML content of a page to an absolute file path.

    Excluded pages are skipped like in get_page.
    """
    page_id = validate_required_param(page_id, "page_id")
    path = Path(validate_required_param(file_path, "file_path")).expanduser()
    result = retrieve_page(_client(), page_id)
    if result.skipped:
        return f"Page skipped: {result.skip_reason}"
    content = result.content or ""
    write_page(path, content)
    return f'Page "{result.page.get("title")}" successfully downloaded to {path} ({len(content)} characters)'


TOOLS = (
    save_access_token,
    list_notebooks,
    get_notebook,
    list_sections,
    list_pages,
    search_pages,
    get_page,
    download_page,
)


def build_server():
    """Create the FastMCP server with every tool registered."""
    try:
        from fastmcp import FastMCP
    except ImportError:
        print(
            "The tool server requires fastmcp. Install:\n  pip install 'onenote-cli[mcp]'",
            file=sys.stderr,
        )
        sys.exit(2)

    mcp = FastMCP(SERVER_NAME)
    for func in TOOLS:
        mcp.tool()(func)
    return mcp


def cmd_mcp(_args):
    mcp = build_server()
    logger.info("Starting %s on stdio", SERVER_NAME)
    mcp.run(transport="stdio")
    return 0
