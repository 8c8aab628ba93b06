"""
Tests for the Time Aggregator.

Covers:
- Net minutes with breaks and clamping
- Per-period regular/overtime split (including the two-short-periods case)
- Night window by clock hour
- Malformed periods skipped, never raised
- Bucket sums and audit lines
"""

from datetime import date, time
from decimal import Decimal

import pytest

from payroll_engines.time_aggregator import (
    aggregate_hours,
    is_night_period,
    net_work_minutes,
    split_regular_overtime,
)
from payroll_kernel.domain.rules import PayrollRules
from payroll_kernel.domain.values import WorkPeriod


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _period(
    start: str = "09:00",
    end: str = "18:00",
    break_duration: int = 0,
    work_date: date | None = date(2025, 3, 10),
    period_id: str | None = None,
) -> WorkPeriod:
    sh, sm = (int(x) for x in start.split(":"))
    eh, em = (int(x) for x in end.split(":"))
    return WorkPeriod(
        work_date=work_date,
        start_time=time(sh, sm),
        end_time=time(eh, em),
        break_duration=break_duration,
        period_id=period_id,
    )


# ===========================================================================
# Net minutes
# ===========================================================================


class TestNetWorkMinutes:

    def test_break_subtracted(self):
        assert net_work_minutes(_period("09:00", "18:00", break_duration=60)) == 480

    def test_same_start_and_end_is_zero(self):
        assert net_work_minutes(_period("10:00", "10:00")) == 0

    def test_break_longer_than_interval_clamps_to_zero(self):
        assert net_work_minutes(_period("09:00", "10:00", break_duration=90)) == 0

    def test_break_equal_to_interval_is_zero(self):
        assert net_work_minutes(_period("09:00", "10:00", break_duration=60)) == 0

    def test_end_before_start_is_zero(self):
        assert net_work_minutes(_period("18:00", "09:00")) == 0

    def test_minutes_are_respected(self):
        assert net_work_minutes(_period("09:15", "12:45")) == 210

    def test_incomplete_period_is_zero(self):
        period = WorkPeriod(work_date=date(2025, 3, 10), start_time=time(9, 0), end_time=None)
        assert net_work_minutes(period) == 0


# ===========================================================================
# Regular / overtime split
# ===========================================================================


class TestRegularOvertimeSplit:

    def test_under_threshold_all_regular(self):
        assert split_regular_overtime(300) == (300, 0)

    def test_exactly_threshold_all_regular(self):
        assert split_regular_overtime(480) == (480, 0)

    def test_over_threshold_splits(self):
        assert split_regular_overtime(660) == (480, 180)

    def test_custom_threshold(self):
        rules = PayrollRules(regular_hours_threshold=Decimal("7.5"))
        assert split_regular_overtime(500, rules) == (450, 50)


# ===========================================================================
# Night window
# ===========================================================================


class TestNightPeriod:

    def test_late_start_is_night(self):
        assert is_night_period(_period("22:00", "23:59"))

    def test_early_end_is_night(self):
        assert is_night_period(_period("01:00", "05:00"))

    def test_end_exactly_at_six_is_night(self):
        assert is_night_period(_period("03:00", "06:00"))

    def test_end_at_six_thirty_is_night_by_clock_hour(self):
        assert is_night_period(_period("03:00", "06:30"))

    def test_evening_spanning_into_night_is_not_night(self):
        assert not is_night_period(_period("20:00", "23:00"))

    def test_day_shift_is_not_night(self):
        assert not is_night_period(_period("09:00", "18:00"))

    def test_custom_window(self):
        rules = PayrollRules(night_start_hour=20, night_end_hour=5)
        assert is_night_period(_period("20:00", "23:00"), rules)
        assert not is_night_period(_period("03:00", "06:00"), rules)


# ===========================================================================
# Aggregation
# ===========================================================================


class TestAggregateHours:

    def test_single_eight_hour_day(self):
        hours = aggregate_hours(periods=[_period("09:00", "18:00", break_duration=60)])

        assert hours.total_hours == Decimal("8")
        assert hours.regular_hours == Decimal("8")
        assert hours.overtime_hours == Decimal("0")
        assert hours.night_hours == Decimal("0")

    def test_long_day_has_overtime(self):
        hours = aggregate_hours(periods=[_period("09:00", "20:00")])

        assert hours.total_hours == Decimal("11")
        assert hours.regular_hours == Decimal("8")
        assert hours.overtime_hours == Decimal("3")

    def test_two_short_periods_same_day_stay_regular(self):
        """Threshold is per period: 5 h + 5 h on one day is 10 h regular."""
        hours = aggregate_hours(periods=[
            _period("06:00", "11:00"),
            _period("13:00", "18:00"),
        ])

        assert hours.total_hours == Decimal("10")
        assert hours.regular_hours == Decimal("10")
        assert hours.overtime_hours == Decimal("0")

    def test_night_hours_overlap_regular(self):
        hours = aggregate_hours(periods=[_period("22:00", "23:30")])

        assert hours.total_hours == Decimal("1.5")
        assert hours.regular_hours == Decimal("1.5")
        assert hours.night_hours == Decimal("1.5")

    def test_sums_across_days(self):
        hours = aggregate_hours(periods=[
            _period("09:00", "18:00", break_duration=60, work_date=date(2025, 3, 10)),
            _period("09:00", "20:00", work_date=date(2025, 3, 11)),
            _period("23:00", "23:59", work_date=date(2025, 3, 12)),
        ])

        assert hours.total_minutes == 480 + 660 + 59
        assert hours.regular_minutes == 480 + 480 + 59
        assert hours.overtime_minutes == 180
        assert hours.night_minutes == 59
        assert hours.regular_minutes + hours.overtime_minutes == hours.total_minutes

    def test_thirds_of_hours_sum_exactly(self):
        hours = aggregate_hours(periods=[
            _period("09:00", "09:20"),
            _period("10:00", "10:20"),
            _period("11:00", "11:20"),
        ])

        assert hours.total_hours == Decimal("1")

    def test_empty_input_is_zero(self):
        hours = aggregate_hours(periods=[])

        assert hours.is_empty
        assert hours.total_hours == 0
        assert hours.period_lines == ()
        assert hours.skipped_periods == 0

    def test_order_does_not_matter(self):
        a = _period("09:00", "20:00", period_id="a")
        b = _period("22:00", "23:00", period_id="b")

        first = aggregate_hours(periods=[a, b])
        second = aggregate_hours(periods=[b, a])

        assert first.total_minutes == second.total_minutes
        assert first.overtime_minutes == second.overtime_minutes
        assert first.night_minutes == second.night_minutes

    def test_period_lines_record_each_period(self):
        hours = aggregate_hours(periods=[
            _period("09:00", "20:00", period_id="p1"),
            _period("22:00", "23:00", period_id="p2"),
        ])

        assert [line.period_id for line in hours.period_lines] == ["p1", "p2"]
        assert hours.period_lines[0].overtime_minutes == 180
        assert hours.period_lines[1].is_night
        assert hours.period_lines[1].net_hours == Decimal("1")


class TestMalformedPeriods:

    @pytest.mark.parametrize("period", [
        WorkPeriod(work_date=None, start_time=time(9, 0), end_time=time(17, 0)),
        WorkPeriod(work_date=date(2025, 3, 10), start_time=None, end_time=time(17, 0)),
        WorkPeriod(work_date=date(2025, 3, 10), start_time=time(9, 0), end_time=None),
        WorkPeriod(
            work_date=date(2025, 3, 10), start_time=time(9, 0), end_time=time(17, 0),
            break_duration=-1,
        ),
    ])
    def test_malformed_period_contributes_zero(self, period):
        hours = aggregate_hours(periods=[period, _period("09:00", "12:00")])

        assert hours.total_hours == Decimal("3")
        assert hours.skipped_periods == 1
        assert len(hours.period_lines) == 1

    def test_all_malformed_is_zero(self):
        hours = aggregate_hours(periods=[
            WorkPeriod(work_date=None, start_time=None, end_time=None),
            WorkPeriod(work_date=None, start_time=None, end_time=None),
        ])

        assert hours.is_empty
        assert hours.skipped_periods == 2

    def test_skip_is_logged(self, json_logs):
        aggregate_hours(periods=[
            WorkPeriod(work_date=date(2025, 3, 10), start_time=None, end_time=time(17, 0), period_id="bad"),
        ])

        skipped = [r for r in json_logs() if r["message"] == "work_period_skipped"]
        assert len(skipped) == 1
        assert skipped[0]["reason"] == "missing_start_time"
        assert skipped[0]["period_id"] == "bad"
        assert skipped[0]["level"] == "WARNING"
