"""Tests for week arithmetic."""

import locale
from datetime import date, datetime, timedelta, timezone

import pytest

from weekly_budget.ledger import format_week_range, get_week_end, get_week_start, weeks_between


class TestWeekStart:
    """Tests for get_week_start."""

    def test_sunday_belongs_to_previous_monday(self):
        """Test Sunday 2024-03-17 maps to Monday 2024-03-11."""
        assert get_week_start(datetime(2024, 3, 17, 22, 15)) == datetime(2024, 3, 11)

    def test_monday_midnight_is_its_own_week_start(self):
        """Test a week start maps to itself."""
        monday = datetime(2024, 3, 11)
        assert get_week_start(monday) == monday

    def test_idempotent(self):
        """Test applying get_week_start twice changes nothing."""
        for day in range(11, 18):
            once = get_week_start(datetime(2024, 3, day, 9, 41, 7, 123000))
            assert get_week_start(once) == once
            assert once.weekday() == 0
            assert (once.hour, once.minute, once.second, once.microsecond) == (0, 0, 0, 0)

    def test_accepts_date(self):
        """Test plain dates are accepted."""
        assert get_week_start(date(2024, 3, 13)) == datetime(2024, 3, 11)

    def test_crosses_month_and_year(self):
        """Test a week that starts in the previous year."""
        assert get_week_start(datetime(2025, 1, 1)) == datetime(2024, 12, 30)

    def test_aware_instant_becomes_local_naive(self):
        """Test an aware instant yields a naive local week start."""
        instant = datetime(2024, 3, 13, 12, 0, tzinfo=timezone.utc)
        expected = get_week_start(instant.astimezone().replace(tzinfo=None))
        result = get_week_start(instant)
        assert result.tzinfo is None
        assert result == expected

    def test_aware_and_naive_weeks_compare_equal(self):
        """Test a naive week start from storage matches an aware clock reading."""
        aware = datetime(2024, 3, 13, 12, 0, tzinfo=timezone(timedelta(hours=2)))
        assert get_week_start(aware) == get_week_start(get_week_start(aware))

    def test_defaults_to_now(self):
        """Test the default instant is the current time."""
        assert get_week_start() == get_week_start(datetime.now())


class TestWeekEnd:
    """Tests for get_week_end."""

    def test_sunday_end_of_day(self):
        """Test the week ends on Sunday at 23:59:59.999."""
        assert get_week_end(datetime(2024, 3, 13)) == datetime(2024, 3, 17, 23, 59, 59, 999000)


class TestFormatWeekRange:
    """Tests for format_week_range."""

    def test_same_month(self):
        """Test the display label within one month."""
        assert format_week_range(datetime(2024, 3, 11)) == "Mar 11 - Mar 17, 2024"

    def test_spanning_years(self):
        """Test the year shown is the end year."""
        assert format_week_range(datetime(2024, 12, 30)) == "Dec 30 - Jan 5, 2025"

    def test_every_month_is_english(self):
        """Test month labels for a full year."""
        labels = [format_week_range(datetime(2024, month, 1))[:3] for month in range(1, 13)]
        assert labels == ["Jan", "Feb", "Mar", "Apr", "May", "Jun",
                          "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"]

    def test_independent_of_locale(self):
        """Test the label stays English under another time locale."""
        previous = locale.setlocale(locale.LC_TIME)
        try:
            locale.setlocale(locale.LC_TIME, "de_DE.UTF-8")
        except locale.Error:
            pytest.skip("de_DE.UTF-8 locale not installed")
        try:
            assert format_week_range(datetime(2024, 5, 6)) == "May 6 - May 12, 2024"
            assert format_week_range(datetime(2024, 10, 7)) == "Oct 7 - Oct 13, 2024"
        finally:
            locale.setlocale(locale.LC_TIME, previous)


class TestWeeksBetween:
    """Tests for weeks_between."""

    def test_consecutive_weeks(self):
        """Test adjacent weeks are one apart."""
        assert weeks_between(datetime(2024, 3, 4), datetime(2024, 3, 11)) == 1

    def test_same_week(self):
        """Test a week is zero weeks from itself."""
        assert weeks_between(datetime(2024, 3, 11), datetime(2024, 3, 11)) == 0
