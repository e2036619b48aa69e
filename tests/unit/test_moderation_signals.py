"""Unit tests for the pure moderation signal extractors."""

from __future__ import annotations

import datetime as dt

import pytest

from warden.moderation.signals import (
    account_age_days,
    contains_any_keyword,
    count_links,
)

NOW = dt.datetime(2025, 6, 1, 12, 0, tzinfo=dt.UTC)


class TestAccountAgeDays:
    """Tests for ``account_age_days``."""

    @pytest.mark.parametrize("days", [0, 1, 2, 30, 365])
    def test_whole_days(self, days: int) -> None:
        """An account created exactly N days ago is N days old."""
        created = NOW - dt.timedelta(days=days)
        assert account_age_days(created, now=NOW) == days

    def test_partial_days_round_up(self) -> None:
        """Any partial day counts as a full day."""
        created = NOW - dt.timedelta(hours=1)
        assert account_age_days(created, now=NOW) == 1

    def test_future_creation_uses_absolute_difference(self) -> None:
        """Clock skew never yields a negative age."""
        created = NOW + dt.timedelta(days=2)
        assert account_age_days(created, now=NOW) == 2

    def test_other_timezones_are_normalised(self) -> None:
        """Aware datetimes in any zone compare on the same instant."""
        tz = dt.timezone(dt.timedelta(hours=5))
        created = (NOW - dt.timedelta(days=3)).astimezone(tz)
        assert account_age_days(created, now=NOW) == 3

    def test_rejects_naive_datetimes(self) -> None:
        """Naive datetimes raise ValueError."""
        with pytest.raises(ValueError, match="timezone-aware"):
            account_age_days(dt.datetime(2025, 1, 1), now=NOW)  # noqa: DTZ001


class TestContainsAnyKeyword:
    """Tests for ``contains_any_keyword``."""

    @pytest.mark.parametrize(
        ("text", "expected"),
        [
            ("Cheap Meds for you", True),
            ("BUY NOW!", True),
            ("Legitimate bug report", False),
            ("", False),
        ],
    )
    def test_case_insensitive(self, text: str, *, expected: bool) -> None:
        """Keywords match regardless of case."""
        keywords = ["spam", "buy now", "cheap meds"]
        assert contains_any_keyword(text, keywords) is expected

    def test_matches_inside_words(self) -> None:
        """Keywords are substrings, not whole words."""
        assert contains_any_keyword("the spammer strikes", ["spam"])

    def test_empty_keyword_list(self) -> None:
        """No keywords means no match."""
        assert not contains_any_keyword("spam", [])

    def test_empty_keywords_are_ignored(self) -> None:
        """An empty keyword does not match every text."""
        assert not contains_any_keyword("anything", [""])


class TestCountLinks:
    """Tests for ``count_links``."""

    def test_counts_http_and_https(self) -> None:
        """Both schemes count, other schemes do not."""
        text = "see http://a.example and https://b.example or ftp://c.example"
        assert count_links(text) == 2

    def test_counts_duplicates(self) -> None:
        """Repeated links are counted each time."""
        assert count_links("http://a.example http://a.example") == 2

    def test_no_links(self) -> None:
        """Plain text has no links."""
        assert count_links("nothing to see here") == 0

    def test_scheme_without_host_is_not_a_link(self) -> None:
        """A bare scheme followed by whitespace does not count."""
        assert count_links("https:// nothing") == 0
