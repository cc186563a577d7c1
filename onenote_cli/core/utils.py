"""Utility functions for onenote CLI."""

from __future__ import annotations

import re
from datetime import date
from typing import Any, Dict, List

from .filters import parse_timestamp

__all__ = [
    "format_rows",
    "safe_name",
    "date_stamp",
    "export_filename",
    "stamp_to_date",
    "html_snippet",
]

_UNSAFE_RE = re.compile(r'[<>:"/\\|?*]')
_TAG_RE = re.compile(r"<[^>]*>?")
_SPACE_RE = re.compile(r"\s+")


def format_rows(rows: List[Dict[str, Any]], fields: List[str]) -> None:
    if not rows:
        print("(no data)")
        return
    widths = [max(len(str(r.get(f, ""))) for r in rows + [dict(zip(fields, fields))]) for f in fields]
    header = " | ".join(f.ljust(w) for f, w in zip(fields, widths))
    sep = "-+-".join("-" * w for w in widths)
    print(header)
    print(sep)
    for r in rows:
        print(" | ".join(str(r.get(f, "")).ljust(w) for f, w in zip(fields, widths)))


def safe_name(name: str) -> str:
    """Return *name* with filesystem-unsafe characters replaced by ``_``."""
    return _UNSAFE_RE.sub("_", name or "")


def date_stamp(value: str | None) -> str:
    """Format a timestamp as ``YYYYMMDD``; unknown dates give ``00000000``."""
    parsed = parse_timestamp(value)
    if parsed is None:
        return "00000000"
    return parsed.strftime("%Y%m%d")


def export_filename(title: str, modified: str | None) -> str:
    return f"{safe_name(title)}--{date_stamp(modified)}.html"


def stamp_to_date(stamp: str) -> date | None:
    try:
        return date(int(stamp[:4]), int(stamp[4:6]), int(stamp[6:8]))
    except ValueError:
        return None


def html_snippet(content: str, limit: int = 500) -> str:
    """Return the visible text of *content*, cut to *limit* characters."""
    text = _SPACE_RE.sub(" ", _TAG_RE.sub(" ", content or "")).strip()
    if len(text) > limit:
        return text[:limit] + "..."
    return text
