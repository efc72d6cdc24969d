"""Tests for enumerating matching instants."""

import logging
from datetime import datetime, timedelta, timezone
from zoneinfo import ZoneInfo

import pytest

from cronmatch import (
    CronArgumentError,
    CronIterator,
    CronPattern,
    configure,
    matched_dates,
    next_date_after,
)

UTC = timezone.utc
TOKYO = timezone(timedelta(hours=9))


# =============================================================================
# matched_dates Tests
# =============================================================================


class TestMatchedDates:
    """Tests for bounded enumeration."""

    def test_collects_in_order(self):
        result = matched_dates(
            "*/15 * * * *",
            datetime(2024, 1, 15, 9, 0),
            datetime(2024, 1, 15, 10, 0),
            10,
        )
        assert result == [
            datetime(2024, 1, 15, 9, 0),
            datetime(2024, 1, 15, 9, 15),
            datetime(2024, 1, 15, 9, 30),
            datetime(2024, 1, 15, 9, 45),
        ]

    def test_count_limits_results(self):
        result = matched_dates(
            "* * * * *", datetime(2024, 1, 15, 9, 0), datetime(2024, 1, 16), 3
        )
        assert result == [
            datetime(2024, 1, 15, 9, 0),
            datetime(2024, 1, 15, 9, 1),
            datetime(2024, 1, 15, 9, 2),
        ]

    def test_end_is_exclusive(self):
        result = matched_dates(
            "0 * * * *", datetime(2024, 1, 15, 9, 0), datetime(2024, 1, 15, 10, 0), 5
        )
        assert result == [datetime(2024, 1, 15, 9, 0)]

    def test_count_one_returns_earliest_at_or_after_start(self):
        pattern = CronPattern("30 9 * * *")
        assert matched_dates(pattern, datetime(2024, 1, 15, 9, 30), datetime(2024, 1, 20), 1) == [
            datetime(2024, 1, 15, 9, 30)
        ]
        assert matched_dates(pattern, datetime(2024, 1, 15, 9, 31), datetime(2024, 1, 20), 1) == [
            datetime(2024, 1, 16, 9, 30)
        ]

    def test_count_one_none_before_end(self):
        result = matched_dates(
            "0 9 * * *", datetime(2024, 1, 15, 10, 0), datetime(2024, 1, 15, 11, 0), 1
        )
        assert result == []

    def test_idempotent(self):
        pattern = CronPattern("0 0 15 * 1")
        start, end = datetime(2024, 1, 1), datetime(2024, 6, 1)
        first = matched_dates(pattern, start, end, 5, False)
        second = matched_dates(pattern, start, end, 5, False)
        assert first == second
        assert first == [
            datetime(2024, 1, 1),
            datetime(2024, 1, 8),
            datetime(2024, 1, 15),
            datetime(2024, 1, 22),
            datetime(2024, 1, 29),
        ]

    def test_match_seconds_scans_per_second(self):
        result = matched_dates(
            "*/20 * * * * *",
            datetime(2024, 1, 15, 9, 0, 0),
            datetime(2024, 1, 15, 9, 1, 0),
            10,
            True,
        )
        assert result == [
            datetime(2024, 1, 15, 9, 0, 0),
            datetime(2024, 1, 15, 9, 0, 20),
            datetime(2024, 1, 15, 9, 0, 40),
        ]

    def test_match_seconds_default_from_settings(self):
        configure(match_seconds=True)
        pattern = CronPattern("*/20 * * * * *")
        start, end = datetime(2024, 1, 15, 9, 0, 0), datetime(2024, 1, 15, 9, 1, 0)
        assert pattern.enumerate(start, end, 10) == [
            datetime(2024, 1, 15, 9, 0, 0),
            datetime(2024, 1, 15, 9, 0, 20),
            datetime(2024, 1, 15, 9, 0, 40),
        ]
        assert matched_dates(pattern, start, end, 10, False) == [start]

    def test_ticks_keep_start_offset(self):
        result = matched_dates(
            "* * * * *", datetime(2024, 1, 15, 9, 0, 30), datetime(2024, 1, 15, 10, 0), 2
        )
        assert result == [datetime(2024, 1, 15, 9, 0, 30), datetime(2024, 1, 15, 9, 1, 30)]

    def test_skipped_days_keep_start_offset(self):
        result = matched_dates(
            "0 0 * * *", datetime(2024, 1, 15, 10, 0, 30), datetime(2024, 1, 20), 1
        )
        assert result == [datetime(2024, 1, 16, 0, 0, 30)]

    def test_last_day_across_months(self):
        result = matched_dates("0 0 L * *", datetime(2024, 1, 1), datetime(2024, 5, 1), 10)
        assert result == [
            datetime(2024, 1, 31),
            datetime(2024, 2, 29),
            datetime(2024, 3, 31),
            datetime(2024, 4, 30),
        ]

    def test_last_friday_across_months(self):
        result = matched_dates("0 17 * * 5L", datetime(2024, 1, 1), datetime(2024, 4, 1), 10)
        assert result == [
            datetime(2024, 1, 26, 17, 0),
            datetime(2024, 2, 23, 17, 0),
            datetime(2024, 3, 29, 17, 0),
        ]

    def test_alternatives_merged_in_time_order(self):
        result = matched_dates(
            "0 18 * * * | 0 9 * * *", datetime(2024, 1, 15), datetime(2024, 1, 17), 10
        )
        assert result == [
            datetime(2024, 1, 15, 9, 0),
            datetime(2024, 1, 15, 18, 0),
            datetime(2024, 1, 16, 9, 0),
            datetime(2024, 1, 16, 18, 0),
        ]

    def test_end_defaults_to_end_of_year(self):
        result = matched_dates("0 0 1 * *", datetime(2024, 10, 15), count=10)
        assert result == [datetime(2024, 11, 1), datetime(2024, 12, 1)]

    def test_method_form(self):
        pattern = CronPattern("0 12 * * *")
        assert pattern.enumerate(datetime(2024, 1, 15), datetime(2024, 1, 17), 5) == [
            datetime(2024, 1, 15, 12, 0),
            datetime(2024, 1, 16, 12, 0),
        ]


class TestMatchedDatesArguments:
    """Tests for argument validation."""

    def test_start_after_end(self):
        with pytest.raises(CronArgumentError):
            matched_dates("* * * * *", datetime(2024, 1, 2), datetime(2024, 1, 1), 1)

    def test_start_equals_end(self):
        with pytest.raises(CronArgumentError):
            matched_dates("* * * * *", datetime(2024, 1, 1), datetime(2024, 1, 1), 1)

    @pytest.mark.parametrize("count", [0, -1])
    def test_non_positive_count(self, count):
        with pytest.raises(CronArgumentError):
            matched_dates("* * * * *", datetime(2024, 1, 1), datetime(2024, 1, 2), count)

    def test_mixed_naive_and_aware(self):
        with pytest.raises(CronArgumentError):
            matched_dates(
                "* * * * *", datetime(2024, 1, 1), datetime(2024, 1, 2, tzinfo=UTC), 1
            )

    def test_non_datetime_start(self):
        with pytest.raises(CronArgumentError):
            matched_dates("* * * * *", 0, datetime(2024, 1, 2), 1)  # type: ignore[arg-type]


class TestMatchedDatesTimezones:
    """Tests for enumeration with aware datetimes."""

    def test_results_in_start_timezone(self):
        start = datetime(2024, 1, 15, 0, 0, tzinfo=TOKYO)
        result = matched_dates("0 9 * * *", start, start + timedelta(days=1), 1)
        assert result == [datetime(2024, 1, 15, 9, 0, tzinfo=TOKYO)]
        assert result[0].tzinfo is TOKYO

    def test_results_satisfy_match(self):
        pattern = CronPattern("0 9 * * * | 30 17 * * FRI")
        start = datetime(2024, 1, 15, 0, 0, tzinfo=ZoneInfo("Asia/Tokyo"))
        result = matched_dates(pattern, start, start + timedelta(days=7), 10)
        assert len(result) == 8
        assert all(pattern.match(dt) for dt in result)
        assert all(pattern.matches(dt) for dt in result)

    def test_explicit_timezone(self):
        start = datetime(2024, 1, 15, 0, 0, tzinfo=TOKYO)
        result = matched_dates("0 9 * * *", start, start + timedelta(days=1), 1, timezone="UTC")
        assert result == [datetime(2024, 1, 15, 18, 0, tzinfo=TOKYO)]

    def test_dst_spring_forward(self):
        # 2024-03-10 02:00 does not exist in New York; hours are absolute
        start = datetime(2024, 3, 10, 0, 0, tzinfo=UTC)
        result = matched_dates(
            "0 * 10 3 *", start, start + timedelta(days=1), 10, timezone="America/New_York"
        )
        new_york = ZoneInfo("America/New_York")
        assert [dt.astimezone(new_york).hour for dt in result] == [0, 1, 3, 4, 5, 6, 7, 8, 9, 10]
        assert result[2] - result[1] == timedelta(hours=1)
        assert all(dt.tzinfo is UTC for dt in result)


class TestScanLimit:
    """Tests for the max_scan_ticks setting."""

    def test_scan_stops_at_limit(self, caplog):
        configure(max_scan_ticks=10)
        with caplog.at_level(logging.WARNING, logger="cronmatch.pattern"):
            result = matched_dates(
                "0 12 * * *", datetime(2024, 1, 15), datetime(2024, 1, 16), 1
            )
        assert result == []
        assert "stopped after 10 ticks" in caplog.text

    def test_unlimited_by_default(self):
        result = matched_dates("0 12 * * *", datetime(2024, 1, 15), datetime(2024, 1, 16), 1)
        assert result == [datetime(2024, 1, 15, 12, 0)]


# =============================================================================
# next / iterator Tests
# =============================================================================


class TestNextDateAfter:
    """Tests for the first match up to the end of the year."""

    def test_finds_first_match(self):
        assert next_date_after("0 0 L * *", datetime(2024, 2, 1)) == datetime(2024, 2, 29)

    def test_includes_start(self):
        assert next_date_after("0 9 * * *", datetime(2024, 1, 15, 9, 0)) == datetime(
            2024, 1, 15, 9, 0
        )

    def test_none_after_year_end(self):
        assert next_date_after("0 0 1 1 *", datetime(2024, 3, 1)) is None


class TestCronPatternNext:
    """Tests for CronPattern.next."""

    def test_next_is_strictly_after(self):
        pattern = CronPattern("0 9 * * *")
        assert pattern.next(datetime(2024, 1, 15, 9, 0)) == datetime(2024, 1, 16, 9, 0)

    def test_next_same_hour(self):
        pattern = CronPattern("30 * * * *")
        assert pattern.next(datetime(2024, 1, 15, 9, 0)) == datetime(2024, 1, 15, 9, 30)

    def test_next_crosses_year(self):
        pattern = CronPattern("0 0 1 1 *")
        assert pattern.next(datetime(2024, 6, 15)) == datetime(2025, 1, 1)

    def test_next_leap_day(self):
        pattern = CronPattern("0 0 29 2 *")
        assert pattern.next(datetime(2025, 1, 1)) == datetime(2028, 2, 29)

    def test_next_with_seconds(self):
        pattern = CronPattern("*/10 * * * * *")
        assert pattern.next(datetime(2024, 1, 15, 9, 0, 5)) == datetime(2024, 1, 15, 9, 0, 10)

    def test_next_beyond_horizon(self):
        pattern = CronPattern("0 0 0 1 1 * 2099")
        assert pattern.next(datetime(2024, 1, 1)) is None

    def test_next_defaults_to_now(self):
        result = CronPattern("* * * * *").next()
        assert result is not None
        assert result > datetime.now() - timedelta(minutes=1)


class TestCronIterator:
    """Tests for lazy iteration."""

    def test_iterator_with_limit(self):
        it = CronPattern("0 * * * *").iter(after=datetime(2024, 1, 15, 9, 30), limit=3)
        assert isinstance(it, CronIterator)
        assert list(it) == [
            datetime(2024, 1, 15, 10, 0),
            datetime(2024, 1, 15, 11, 0),
            datetime(2024, 1, 15, 12, 0),
        ]

    def test_iterator_no_limit(self):
        it = CronPattern("0 0 * * *").iter(after=datetime(2024, 1, 15))
        assert next(it) == datetime(2024, 1, 16)
        assert next(it) == datetime(2024, 1, 17)

    def test_iterator_exhausts(self):
        it = CronPattern("0 0 0 1 1 * 2024").iter(after=datetime(2023, 6, 1))
        assert list(it) == [datetime(2024, 1, 1)]
        assert list(it) == []

    def test_remaining_counts_down(self):
        it = CronPattern("0 0 * * *").iter(after=datetime(2024, 1, 15), limit=2)
        assert it.remaining == 2
        next(it)
        assert it.remaining == 1
        next(it)
        assert it.remaining == 0
        with pytest.raises(StopIteration):
            next(it)

    def test_zero_limit(self):
        assert list(CronPattern("* * * * *").iter(after=datetime(2024, 1, 15), limit=0)) == []

    def test_negative_limit(self):
        with pytest.raises(CronArgumentError):
            CronPattern("* * * * *").iter(after=datetime(2024, 1, 15), limit=-1)

    def test_iterator_match_seconds(self):
        it = CronPattern("0 9 * * *").iter(
            after=datetime(2024, 1, 15, 8, 59, 58), limit=2, match_seconds=True
        )
        assert list(it) == [datetime(2024, 1, 15, 9, 0, 0), datetime(2024, 1, 15, 9, 0, 1)]
