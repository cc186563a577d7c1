from datetime import datetime, timezone

import pytest

from onenote_cli.core.filters import parse_timestamp, should_skip, title_excluded_keyword


def test_private_title_excluded():
    decision = should_skip({"title": "Private Notes"})
    assert decision.skip
    assert '"private"' in decision.reason
    assert "Private Notes" in decision.reason


def test_old_title_excluded_with_distinct_reason():
    private = should_skip({"title": "Private Notes"})
    old = should_skip({"title": "project (OLD)"})
    assert old.skip
    assert '"(old)"' in old.reason
    assert "project (OLD)" in old.reason
    assert old.reason != private.reason


@pytest.mark.parametrize("title", ["Meeting notes", "", None, "old stuff", "privacy policy"])
def test_other_titles_kept(title):
    assert not should_skip({"title": title, "lastModifiedDateTime": "2023-03-01T00:00:00Z"}).skip


def test_old_modification_date_excluded():
    decision = should_skip({"title": "Plan", "lastModifiedDateTime": "2021-06-01T00:00:00Z"})
    assert decision.skip
    assert "2021-06-01" in decision.reason
    assert "2022-01-01" in decision.reason


def test_recent_modification_date_kept():
    assert not should_skip({"title": "Plan", "lastModifiedDateTime": "2022-06-01T00:00:00Z"}).skip


def test_missing_modification_date_kept():
    assert not should_skip({"title": "Plan"}).skip
    assert not should_skip({"title": "Plan", "lastModifiedDateTime": None}).skip


def test_unparseable_date_kept():
    assert not should_skip({"title": "Plan", "lastModifiedDateTime": "yesterday"}).skip


def test_cutoff_is_strict():
    assert not should_skip({"title": "Plan", "lastModifiedDateTime": "2022-01-01T00:00:00Z"}).skip
    assert should_skip({"title": "Plan", "lastModifiedDateTime": "2021-12-31T23:59:59.9999999Z"}).skip


def test_title_rule_checked_first():
    decision = should_skip({"title": "private", "lastModifiedDateTime": "2020-01-01T00:00:00Z"})
    assert "keyword" in decision.reason


def test_decision_is_idempotent():
    page = {"title": "Notes (old)", "lastModifiedDateTime": "2020-01-01T00:00:00Z"}
    assert should_skip(page) == should_skip(page)


def test_title_excluded_keyword():
    assert title_excluded_keyword("My PRIVATE diary") == "private"
    assert title_excluded_keyword("draft (Old)") == "(old)"
    assert title_excluded_keyword("draft") is None
    assert title_excluded_keyword(None) is None


def test_parse_timestamp_variants():
    expected = datetime(2023, 5, 4, 3, 2, 1, 123456, tzinfo=timezone.utc)
    assert parse_timestamp("2023-05-04T03:02:01.1234567Z") == expected
    assert parse_timestamp("2023-05-04T03:02:01.123456+00:00") == expected
    assert parse_timestamp("2023-05-04T03:02:01") == datetime(2023, 5, 4, 3, 2, 1, tzinfo=timezone.utc)
    assert parse_timestamp("") is None
    assert parse_timestamp("nope") is None
