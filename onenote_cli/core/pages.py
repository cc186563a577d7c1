"""Notebook, section and page operations shared by the CLI and the tool server."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, NamedTuple

from .errors import FilesystemError
from .filters import should_skip
from .http import GraphClient
from .pagination import CollectionPage, fetch_collection
from .utils import export_filename

logger = logging.getLogger(__name__)


class RetrievedPage(NamedTuple):
    page: dict
    content: str | None = None
    skip_reason: str | None = None

    @property
    def skipped(self) -> bool:
        return self.skip_reason is not None


def list_notebooks(client: GraphClient) -> List[dict]:
    return fetch_collection(client, "/me/onenote/notebooks", fetch_all=True).records


def get_notebook(client: GraphClient, notebook_id: str) -> dict:
    return client.get_json(f"/me/onenote/notebooks/{notebook_id}")


def list_sections(client: GraphClient, notebook_id: str | None = None) -> List[dict]:
    if notebook_id:
        path = f"/me/onenote/notebooks/{notebook_id}/sections"
    else:
        path = "/me/onenote/sections"
    return fetch_collection(client, path, fetch_all=True).records


def pick_notebook(notebooks: List[dict], name: str | None = None) -> dict | None:
    """Return the first notebook whose display name contains *name*.

    Without *name* the first notebook is returned.
    """
    if not name:
        return notebooks[0] if notebooks else None
    needle = name.lower()
    for nb in notebooks:
        if needle in (nb.get("displayName") or "").lower():
            return nb
    return None


def resolve_default_section(client: GraphClient, notebook_name: str | None = None) -> dict | None:
    """Return the first section of the configured (or first) notebook."""
    notebook = pick_notebook(list_notebooks(client), notebook_name)
    if notebook is None:
        return None
    logger.info("Using notebook %r", notebook.get("displayName"))
    sections = list_sections(client, notebook.get("id"))
    return sections[0] if sections else None


def list_pages(
    client: GraphClient,
    section_id: str | None = None,
    *,
    top: int | None = None,
    next_link: str | None = None,
    fetch_all: bool = False,
    desc: str | None = None,
) -> CollectionPage:
    """List pages of a section, or continue from *next_link*.

    Without *section_id* and *next_link* the pages of every section are
    listed.
    """
    if next_link:
        target = next_link
    elif section_id:
        target = f"/me/onenote/sections/{section_id}/pages"
    else:
        target = "/me/onenote/pages"
    return fetch_collection(client, target, top=top, fetch_all=fetch_all, desc=desc)


def search_pages(
    client: GraphClient,
    term: str | None = None,
    section_id: str | None = None,
    *,
    desc: str | None = None,
) -> List[dict]:
    """Return all pages whose title contains *term* (case-insensitive)."""
    result = list_pages(client, section_id, fetch_all=True, desc=desc)
    pages = result.records
    if result.error:
        logger.warning("Search covers only %d pages: %s", len(pages), result.error)
    needle = (term or "").strip().lower()
    if not needle:
        return pages
    return [p for p in pages if needle in (p.get("title") or "").lower()]


def get_page_metadata(client: GraphClient, page_id: str) -> dict:
    return client.get_json(f"/me/onenote/pages/{page_id}")


def retrieve_page(client: GraphClient, page_id: str, *, timeout: float | None = None) -> RetrievedPage:
    """Fetch metadata for *page_id* and, unless it is excluded, its HTML body.

    The metadata request is always issued first; the content request is
    skipped for excluded pages.
    """
    page = get_page_metadata(client, page_id)
    decision = should_skip(page)
    if decision.skip:
        logger.info("Skipping page %s: %s", page_id, decision.reason)
        return RetrievedPage(page, None, decision.reason)
    content = client.get_text(f"/me/onenote/pages/{page_id}/content", timeout=timeout)
    logger.debug("Received %d characters for page %s", len(content), page_id)
    return RetrievedPage(page, content)


def write_page(path: Path, content: str) -> None:
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
    except OSError as e:
        raise FilesystemError(f"Cannot write {path}: {e}") from e


def save_page(
    client: GraphClient,
    page_id: str,
    out_dir: Path,
    *,
    timeout: float | None = None,
) -> tuple[RetrievedPage, Path | None]:
    """Retrieve *page_id* and write it under *out_dir*.

    Returns the retrieval result and the written path (``None`` when the page
    was skipped).
    """
    result = retrieve_page(client, page_id, timeout=timeout)
    if result.skipped:
        return result, None
    title = result.page.get("title") or page_id
    path = out_dir / export_filename(title, result.page.get("lastModifiedDateTime"))
    write_page(path, result.content or "")
    return result, path
