"""Tests for due date parsing."""

from datetime import UTC, date, datetime, timedelta

import pytest

from docket.cli.dates import parse_due


class TestParseDue:
    def test_iso_date(self):
        assert parse_due("2025-03-05") == date(2025, 3, 5)

    def test_strips_whitespace(self):
        assert parse_due("  2025-03-05 ") == date(2025, 3, 5)

    @pytest.mark.parametrize("text", ["", "   "])
    def test_blank_is_none(self, text):
        assert parse_due(text) is None

    def test_relative_phrase(self):
        expected = datetime.now(UTC).date() + timedelta(days=3)
        assert parse_due("in 3 days", "UTC") == expected

    def test_tomorrow(self):
        expected = datetime.now(UTC).date() + timedelta(days=1)
        assert parse_due("tomorrow", "UTC") == expected

    def test_unparseable(self):
        assert parse_due("when pigs fly xyzzy") is None
