"""Rules deciding which pages are fetched and exported."""

from __future__ import annotations

import re
from datetime import datetime, timezone
from typing import NamedTuple

from .config import CUTOFF_DATE, EXCLUDED_KEYWORDS

_FRACTION_RE = re.compile(r"\.(\d+)")


class SkipDecision(NamedTuple):
    skip: bool
    reason: str | None = None


def parse_timestamp(value: str | None) -> datetime | None:
    """Parse an ISO-8601 timestamp as returned by Graph.

    Accepts a trailing ``Z`` and fractional seconds of any precision
    (Graph sends up to seven digits).  Naive values are taken as UTC.
    Returns ``None`` for empty or unparseable input.
    """
    if not value or not isinstance(value, str):
        return None
    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    text = _FRACTION_RE.sub(lambda m: "." + m.group(1)[:6].ljust(6, "0"), text, count=1)
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def title_excluded_keyword(title: str | None) -> str | None:
    """Return the excluded keyword found in *title*, if any."""
    lowered = (title or "").lower()
    for keyword in EXCLUDED_KEYWORDS:
        if keyword in lowered:
            return keyword
    return None


def should_skip(page: dict) -> SkipDecision:
    """Decide whether *page* must not be fetched or exported.

    The title keyword rule is checked before the modification date rule.
    A page without a last-modified timestamp is never excluded by date.
    """
    title = page.get("title") or ""
    keyword = title_excluded_keyword(title)
    if keyword:
        return SkipDecision(True, f'Title contains excluded keyword "{keyword}": "{title}"')

    modified = parse_timestamp(page.get("lastModifiedDateTime"))
    if modified is not None and modified < CUTOFF_DATE:
        return SkipDecision(
            True,
            f"Last modified date ({modified.isoformat()}) is older than "
            f"{CUTOFF_DATE.date().isoformat()}",
        )
    return SkipDecision(False)
