"""Bulk export of pages listed in a manifest file."""

from __future__ import annotations

import re
import sys
import time
from datetime import date, timedelta
from pathlib import Path
from typing import Iterable, List, NamedTuple

from tqdm import tqdm

from ..core import (
    AuthRejected,
    FilesystemError,
    GraphClient,
    InvalidContinuationToken,
    NetworkError,
    export_filename,
    get_client,
    retrieve_page,
    safe_name,
    title_excluded_keyword,
)
from ..core.config import FAST_MODE_DAYS, MAX_ATTEMPTS, MAX_CONSECUTIVE_FAILURES, REQUEST_DELAY
from ..core.pages import write_page
from ..core.utils import stamp_to_date

DOWNLOADED = "downloaded"
SKIPPED = "skipped"
FAILED = "failed"

# "12. Title (Created: 2023-01-01T10:00:00Z, Modified: ...) -- 1-abc"
_MANIFEST_RE = re.compile(r"^\d+\.\s+(.+?)\s+\((Created:.*?)\)\s+--\s+(.+)$")
_MODIFIED_RE = re.compile(r"Modified:\s*([^,)\s]+)")


class ManifestEntry(NamedTuple):
    title: str
    page_id: str
    modified: str | None = None


class ExportOutcome(NamedTuple):
    status: str
    title: str
    page_id: str
    detail: str | None = None


class ExportReport(NamedTuple):
    outcomes: List[ExportOutcome]
    total: int
    skipped_by_title: int
    aborted: str | None = None

    def count(self, status: str) -> int:
        return sum(1 for o in self.outcomes if o.status == status)

    @property
    def failures(self) -> List[ExportOutcome]:
        return [o for o in self.outcomes if o.status == FAILED]


def parse_manifest(lines: Iterable[str]) -> List[ManifestEntry]:
    entries = []
    for line in lines:
        m = _MANIFEST_RE.match(line.strip())
        if not m:
            continue
        mod = _MODIFIED_RE.search(m.group(2))
        entries.append(ManifestEntry(m.group(1).strip(), m.group(3).strip(), mod.group(1) if mod else None))
    return entries


def read_manifest(path: Path) -> List[ManifestEntry]:
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise FilesystemError(f"Cannot read manifest {path}: {e}") from e
    return parse_manifest(text.splitlines())


def find_recent_file(out_dir: Path, title: str, days: int, today: date) -> str | None:
    """Return an export of *title* whose date stamp is within *days* of *today*."""
    if not out_dir.is_dir():
        return None
    pattern = re.compile(rf"^{re.escape(safe_name(title))}--(\d{{8}})\.html$")
    cutoff = today - timedelta(days=days)
    for path in sorted(out_dir.iterdir()):
        m = pattern.match(path.name)
        if not m:
            continue
        stamp = stamp_to_date(m.group(1))
        if stamp is not None and stamp >= cutoff:
            return path.name
    return None


def export_entry(
    client: GraphClient,
    entry: ManifestEntry,
    out_dir: Path,
    *,
    fast: bool = False,
    fast_days: int = FAST_MODE_DAYS,
    today: date | None = None,
) -> ExportOutcome:
    """Export a single manifest entry.

    Raises :class:`NetworkError`, :class:`InvalidContinuationToken` or
    :class:`AuthRejected` when a request fails; the caller decides whether to
    retry.
    """
    title, page_id = entry.title, entry.page_id

    if fast:
        recent = find_recent_file(out_dir, title, fast_days, today or date.today())
        if recent:
            return ExportOutcome(SKIPPED, title, page_id, f"fast mode: recent file exists ({recent})")

    if entry.modified:
        known = out_dir / export_filename(title, entry.modified)
        if known.exists():
            return ExportOutcome(SKIPPED, title, page_id, f"already exists: {known.name}")

    result = retrieve_page(client, page_id)
    if result.skipped:
        return ExportOutcome(SKIPPED, title, page_id, result.skip_reason)

    path = out_dir / export_filename(title, result.page.get("lastModifiedDateTime"))
    if path.exists():
        # metadata was fetched, but the content is already on disk
        return ExportOutcome(SKIPPED, title, page_id, f"already exists: {path.name}")
    write_page(path, result.content or "")
    return ExportOutcome(DOWNLOADED, title, page_id, path.name)


def export_with_retry(client: GraphClient, entry: ManifestEntry, out_dir: Path, **kwargs) -> ExportOutcome:
    """Run :func:`export_entry` for at most ``MAX_ATTEMPTS`` attempts."""
    attempt = 0
    while True:
        attempt += 1
        try:
            return export_entry(client, entry, out_dir, **kwargs)
        except (NetworkError, InvalidContinuationToken) as e:
            if attempt >= MAX_ATTEMPTS:
                tqdm.write(f"  failed after {attempt} attempts: {entry.title}: {e}", file=sys.stderr)
                return ExportOutcome(FAILED, entry.title, entry.page_id, str(e))
            tqdm.write(f"  error, retrying {entry.title}: {e}", file=sys.stderr)


def write_failure_log(path: Path, failures: List[ExportOutcome]) -> None:
    lines = [f"{o.title} -- {o.page_id} (Error: {o.detail})" for o in failures]
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text("\n".join(lines), encoding="utf-8")
    except OSError as e:
        raise FilesystemError(f"Cannot write failure log {path}: {e}") from e


def run_export(
    client: GraphClient,
    entries: List[ManifestEntry],
    out_dir: Path,
    *,
    fast: bool = False,
    fast_days: int = FAST_MODE_DAYS,
    max_failures: int = MAX_CONSECUTIVE_FAILURES,
    failed_log: Path | None = None,
    delay: float = REQUEST_DELAY,
    today: date | None = None,
) -> ExportReport:
    """Export every manifest entry not excluded by title.

    Failures are recorded as outcomes instead of propagating.  The run stops
    after ``max_failures`` consecutive failures, or at the first rejected
    token.  Failed entries are written to *failed_log*.
    """
    todo = [e for e in entries if not title_excluded_keyword(e.title)]
    skipped_by_title = len(entries) - len(todo)
    outcomes: List[ExportOutcome] = []
    consecutive = 0
    aborted = None

    with tqdm(total=len(todo), unit="page", desc="Exporting") as bar:
        for i, entry in enumerate(todo):
            if i and delay:
                time.sleep(delay)
            try:
                outcome = export_with_retry(
                    client, entry, out_dir, fast=fast, fast_days=fast_days, today=today
                )
            except AuthRejected as e:
                outcomes.append(ExportOutcome(FAILED, entry.title, entry.page_id, str(e)))
                aborted = f"authentication rejected: {e}"
                bar.update(1)
                break
            outcomes.append(outcome)
            bar.update(1)
            bar.set_postfix(status=outcome.status)

            if outcome.status == FAILED:
                consecutive += 1
                if consecutive >= max_failures:
                    aborted = f"{consecutive} consecutive failures"
                    break
            else:
                consecutive = 0

    report = ExportReport(outcomes, len(entries), skipped_by_title, aborted)
    if report.failures:
        write_failure_log(failed_log or out_dir / "failed-downloads.txt", report.failures)
    return report


def print_summary(report: ExportReport) -> None:
    print("=== Summary ===")
    print(f"Total pages in manifest: {report.total}")
    print(f"Skipped by title (old/private): {report.skipped_by_title}")
    print(f"Skipped (date, existing or recent file): {report.count(SKIPPED)}")
    print(f"Downloaded: {report.count(DOWNLOADED)}")
    print(f"Failed: {report.count(FAILED)}")
    if report.failures:
        for o in report.failures[:10]:
            print(f"  {o.title} -- {o.page_id}: {o.detail}")
        if len(report.failures) > 10:
            print(f"  ... and {len(report.failures) - 10} more")
    if report.aborted:
        print(f"Stopped early: {report.aborted}", file=sys.stderr)


def cmd_export(args):
    out_dir = Path(args.out_dir).expanduser().resolve()
    out_dir.mkdir(parents=True, exist_ok=True)
    entries = read_manifest(Path(args.manifest).expanduser())
    client = get_client()

    if args.fast:
        print(f"Fast mode: skipping pages with an export dated within {args.fast_days} days")
    print(f"Found {len(entries)} pages in manifest")

    failed_log = Path(args.failed_log).expanduser() if args.failed_log else out_dir / "failed-downloads.txt"
    report = run_export(
        client,
        entries,
        out_dir,
        fast=args.fast,
        fast_days=args.fast_days,
        max_failures=args.max_failures,
        failed_log=failed_log,
    )
    print_summary(report)
    if report.failures:
        print(f"Failed downloads logged to: {failed_log}")
    return 1 if (report.failures or report.aborted) else 0
