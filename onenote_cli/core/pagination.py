"""Follow continuation links of Graph collection endpoints."""

from __future__ import annotations

import logging
import time
from typing import Any, Dict, List, NamedTuple

from tqdm import tqdm

from .config import API_MAX_LIMIT, PAGE_DELAY
from .errors import InvalidContinuationToken, NetworkError
from .http import GraphClient

logger = logging.getLogger(__name__)

# Statuses a stale or mangled continuation link comes back with
_BAD_LINK_STATUSES = (400, 404, 410)


class CollectionPage(NamedTuple):
    records: List[dict]
    next_link: str | None = None
    error: str | None = None


def is_continuation_link(target: str) -> bool:
    return target.startswith("https://") or target.startswith("http://")


def clamp_top(top: int | None) -> int | None:
    """Return a valid ``$top`` value, or ``None`` when no hint should be sent."""
    if top is None or top <= 0:
        return None
    return min(int(top), API_MAX_LIMIT)


def with_top(path: str, top: int | None) -> str:
    top = clamp_top(top)
    if top is None:
        return path
    sep = "&" if "?" in path else "?"
    return f"{path}{sep}$top={top}"


def _split(data: Dict[str, Any]) -> tuple[List[dict], str | None]:
    records = data.get("value")
    if records is None:
        records = data.get("records") or []
    link = data.get("@odata.nextLink") or data.get("continuationToken") or None
    return list(records), link


def _fetch_link(client: GraphClient, link: str) -> Dict[str, Any]:
    if not is_continuation_link(link):
        raise InvalidContinuationToken(f"Malformed continuation link: {link!r}")
    try:
        return client.get_json(link)
    except NetworkError as e:
        if e.status in _BAD_LINK_STATUSES:
            raise InvalidContinuationToken(f"Continuation link rejected: {e}") from e
        raise


def fetch_collection(
    client: GraphClient,
    target: str,
    *,
    top: int | None = None,
    fetch_all: bool = False,
    delay: float = PAGE_DELAY,
    desc: str | None = None,
) -> CollectionPage:
    """Fetch one page, or every page, of the collection behind *target*.

    *target* is either a collection path or a continuation link returned by a
    previous call.  With ``fetch_all`` the continuation links are followed
    until the server stops returning one and the records are concatenated in
    the order received.  A failing continuation fetch ends the loop; the
    records gathered so far are returned with ``error`` set.  Errors on the
    first request, and :class:`AuthRejected` at any point, propagate.
    """
    if is_continuation_link(target):
        data = _fetch_link(client, target)
    else:
        data = client.get_json(with_top(target, top))
    records, link = _split(data)

    if not fetch_all:
        return CollectionPage(records, link)

    error = None
    resume = None
    with tqdm(total=None, unit="pg", desc=desc, disable=desc is None) as bar:
        bar.update(1)
        while link:
            if delay:
                time.sleep(delay)
            try:
                data = _fetch_link(client, link)
            except InvalidContinuationToken as e:
                error = str(e) or type(e).__name__
                logger.warning("Stopped paging after %d records: %s", len(records), error)
                break
            except NetworkError as e:
                # a transient failure leaves the link usable for a later resume
                error = str(e) or type(e).__name__
                resume = link
                logger.warning("Stopped paging after %d records: %s", len(records), error)
                break
            page_records, link = _split(data)
            records.extend(page_records)
            bar.update(1)
    return CollectionPage(records, resume, error)
