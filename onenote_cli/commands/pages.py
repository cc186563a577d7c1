"""Page listing, search and download commands."""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import List

from ..core import (
    get_client,
    html_snippet,
    interactive_pick_section,
    list_notebooks,
    list_pages,
    list_sections,
    load_config,
    resolve_default_section,
    save_page,
    search_pages,
)


def manifest_line(index: int, page: dict) -> str:
    """Format *page* as a manifest line accepted by ``onenote export``."""
    created = page.get("createdDateTime") or "-"
    stamp = f"Created: {created}"
    if page.get("lastModifiedDateTime"):
        stamp += f", Modified: {page['lastModifiedDateTime']}"
    return f"{index}. {page.get('title') or '(untitled)'} ({stamp}) -- {page.get('id')}"


def print_pages(pages: List[dict]) -> None:
    if not pages:
        print("No pages found.")
        return
    for i, page in enumerate(pages, 1):
        print(manifest_line(i, page))


def _pick_section_id(client, args) -> str | None:
    if args.pick:
        notebooks = {nb.get("id"): nb for nb in list_notebooks(client)}
        return interactive_pick_section(list_sections(client), notebooks)
    section = resolve_default_section(client, load_config().get("notebook"))
    if section is None:
        print("No section found.", file=sys.stderr)
        return None
    print(f"Using section: {section.get('displayName')}", file=sys.stderr)
    return section.get("id")


def cmd_pages_list(args):
    client = get_client()
    section_id = args.section_id
    if not section_id and not args.next_link:
        section_id = _pick_section_id(client, args)
        if not section_id:
            return 1

    result = list_pages(
        client,
        section_id,
        top=args.top,
        next_link=args.next_link,
        fetch_all=args.fetch_all,
        desc="Pages" if args.fetch_all else None,
    )
    if args.json:
        out = {"value": result.records, "nextLink": result.next_link}
        if result.error:
            out["error"] = result.error
        print(json.dumps(out, ensure_ascii=False, indent=2))
    else:
        print_pages(result.records)
        if result.next_link:
            print("\nMore results available. Run with:")
            print(f'  onenote pages list --next-link="{result.next_link}"')
    if result.error:
        print(f"Listing incomplete: {result.error}", file=sys.stderr)
        return 1
    return 0


def cmd_pages_search(args):
    client = get_client()
    pages = search_pages(client, args.term, args.section_id, desc="Pages")
    if args.json:
        print(json.dumps(pages, ensure_ascii=False, indent=2))
        return 0
    where = f" (section {args.section_id})" if args.section_id else ""
    if args.term and args.term.strip():
        print(f'Search: "{args.term}"{where}')
    else:
        print(f"All pages{where}:")
    print("=====================")
    print_pages(pages)
    if pages:
        print(f"\nTotal: {len(pages)} page(s)")
    return 0


def cmd_pages_get(args):
    client = get_client()
    out_dir = Path(args.out_dir).expanduser().resolve()
    print(f'Fetching page with ID: "{args.page_id}"...')
    result, path = save_page(client, args.page_id, out_dir)
    print(f'Found page: "{result.page.get("title")}" (ID: {result.page.get("id")})')
    if result.skipped:
        print(f"Skipping page: {result.skip_reason}")
        print("Page will not be downloaded due to filtering rules.")
        return 0
    print(f"Content received! Length: {len(result.content or '')} characters")
    print(f"Full content saved to: {path}")
    if args.snippet:
        print("\n--- PAGE CONTENT SNIPPET ---\n")
        print(html_snippet(result.content or ""))
        print("\n--- END OF SNIPPET ---")
    return 0
