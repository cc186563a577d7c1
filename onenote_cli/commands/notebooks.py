"""Notebook and section listing commands."""

from __future__ import annotations

import json

from ..core import format_rows, get_client, list_notebooks, list_sections


def cmd_notebooks_list(args):
    client = get_client()
    notebooks = list_notebooks(client)
    if args.json:
        print(json.dumps(notebooks, ensure_ascii=False, indent=2))
        return 0
    rows = [
        {
            "id": nb.get("id"),
            "displayName": nb.get("displayName"),
            "lastModifiedDateTime": nb.get("lastModifiedDateTime") or "",
        }
        for nb in notebooks
    ]
    format_rows(rows, ["id", "displayName", "lastModifiedDateTime"])
    return 0


def cmd_sections_list(args):
    client = get_client()
    sections = list_sections(client, args.notebook_id)
    if args.json:
        print(json.dumps(sections, ensure_ascii=False, indent=2))
        return 0
    if not sections:
        print("No sections found.")
        return 0
    for i, section in enumerate(sections, 1):
        print(f"{i}. {section.get('displayName')} -- {section.get('id')}")
    return 0
