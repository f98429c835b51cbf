"""Unit tests for timestamp and text utilities."""

from datetime import datetime, timedelta, timezone

import pytest

from notification_service.utils.text import format_duration, mask_email, truncate_text
from notification_service.utils.timestamps import (
    ensure_utc,
    format_display_date,
    format_display_datetime,
    format_iso,
    parse_iso_datetime,
    utc_now,
)


class TestUtcNow:
    def test_utc_now_returns_aware_utc(self):
        before = datetime.now(timezone.utc)
        now = utc_now()
        after = datetime.now(timezone.utc)

        assert now.tzinfo == timezone.utc
        assert before <= now <= after


class TestEnsureUtc:
    """Tests for ensure_utc function."""

    def test_none(self):
        assert ensure_utc(None) is None

    def test_naive_datetime_is_treated_as_utc(self):
        result = ensure_utc(datetime(2026, 3, 4, 9, 15))

        assert result.tzinfo == timezone.utc
        assert result.hour == 9

    def test_other_timezone_is_converted(self):
        est = timezone(timedelta(hours=-5))

        result = ensure_utc(datetime(2026, 3, 4, 12, 0, tzinfo=est))

        assert result.tzinfo == timezone.utc
        assert result.hour == 17


class TestParseIsoDatetime:
    """Tests for parse_iso_datetime function."""

    def test_z_suffix(self):
        assert parse_iso_datetime("2026-03-04T09:15:00Z") == datetime(
            2026, 3, 4, 9, 15, tzinfo=timezone.utc
        )

    def test_offset_is_converted(self):
        assert parse_iso_datetime("2026-03-04T09:15:00+02:00").hour == 7

    def test_bare_date(self):
        assert parse_iso_datetime("2026-03-04") == datetime(2026, 3, 4, tzinfo=timezone.utc)

    @pytest.mark.parametrize("value", [None, "", "   ", "next tuesday"])
    def test_blank_or_unparseable(self, value):
        assert parse_iso_datetime(value) is None


class TestFormatting:
    def test_format_iso_round_trip(self):
        dt = datetime(2026, 3, 4, 9, 15, 30, 123456, tzinfo=timezone.utc)

        text = format_iso(dt)

        assert text == "2026-03-04T09:15:30.123456Z"
        assert parse_iso_datetime(text) == dt

    def test_format_iso_none(self):
        assert format_iso(None) is None

    def test_display_date(self):
        assert format_display_date("2026-03-04T23:59:00Z") == "March 4, 2026"

    def test_display_date_passes_through_free_text(self):
        assert format_display_date("in 7 days") == "in 7 days"
        assert format_display_date(None) is None

    def test_display_datetime(self):
        assert format_display_datetime("2026-03-04T09:15:00Z") == "2026-03-04 09:15 UTC"


class TestTextHelpers:
    def test_truncate_short_text_unchanged(self):
        assert truncate_text("short", max_length=10) == "short"

    def test_truncate_breaks_at_word(self):
        result = truncate_text("This is a very long text that needs truncating", max_length=30)

        assert result == "This is a very long text..."
        assert len(result) <= 30

    @pytest.mark.parametrize(
        "email,masked",
        [("jane.doe@example.com", "j***@example.com"), ("", "***"), (None, "***"), ("nobody", "***")],
    )
    def test_mask_email(self, email, masked):
        assert mask_email(email) == masked

    @pytest.mark.parametrize(
        "seconds,expected",
        [(125, "2m 5s"), (3725, "1h 2m 5s"), (0, "0s"), ("90", "1m 30s"), (-5, "0s"), (None, "-"), ("soon", "soon")],
    )
    def test_format_duration(self, seconds, expected):
        assert format_duration(seconds) == expected
