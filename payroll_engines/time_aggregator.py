"""
Time Aggregator (``payroll_engines.time_aggregator``).

Responsibility
--------------
Turn a worker's work periods on one schedule into pay buckets:
total, regular, overtime and night hours.

Architecture position
---------------------
**Engines layer** -- pure functional core.  ZERO I/O, ZERO clock reads.
Imports only ``payroll_kernel``.  Rules are passed in explicitly.

Invariants enforced
-------------------
* ``regular + overtime == total`` for every period and for the sum.
* Net minutes are clamped at zero; a break longer than the interval
  never produces negative time.
* The overtime threshold is applied per contiguous period, never to the
  day's aggregate: two 5 h periods on one day are 10 h regular.
* Night hours overlap regular/overtime and are never added to the total.

Failure modes
-------------
* Never raises for a malformed period.  A period missing its date, start
  or end time, or carrying a negative break, contributes zero and is
  counted in ``HourBuckets.skipped_periods``.
"""

from __future__ import annotations

from collections.abc import Iterable
from decimal import Decimal

from payroll_engines.tracer import traced_engine
from payroll_kernel.domain.rules import DEFAULT_PAYROLL_RULES, PayrollRules
from payroll_kernel.domain.values import HourBuckets, PeriodHours, WorkPeriod
from payroll_kernel.logging_config import get_logger

logger = get_logger("engines.time_aggregator")


def _skip_reason(period: WorkPeriod) -> str | None:
    if period.work_date is None:
        return "missing_work_date"
    if period.start_time is None:
        return "missing_start_time"
    if period.end_time is None:
        return "missing_end_time"
    if period.break_duration < 0:
        return "invalid_break_duration"
    return None


def net_work_minutes(period: WorkPeriod) -> int:
    """(end - start) - break in whole minutes, never below zero.

    Incomplete periods yield zero.  Times are same-day clock times; an
    end before the start yields zero rather than wrapping past midnight.
    """
    if not period.is_complete:
        return 0
    start = period.start_time.hour * 60 + period.start_time.minute
    end = period.end_time.hour * 60 + period.end_time.minute
    return max(end - start - period.break_duration, 0)


def split_regular_overtime(
    net_minutes: int,
    rules: PayrollRules = DEFAULT_PAYROLL_RULES,
) -> tuple[int, int]:
    """Split one period's minutes into (regular, overtime)."""
    threshold = rules.regular_minutes_threshold
    if net_minutes <= threshold:
        return net_minutes, 0
    return threshold, net_minutes - threshold


def is_night_period(
    period: WorkPeriod,
    rules: PayrollRules = DEFAULT_PAYROLL_RULES,
) -> bool:
    """Night when the start hour is late or the end hour is early.

    Clock hours only: 20:00-23:00 is not night, 05:00-06:00 is.
    """
    if not period.is_complete:
        return False
    return (
        period.start_time.hour >= rules.night_start_hour
        or period.end_time.hour <= rules.night_end_hour
    )


def bucket_period(
    period: WorkPeriod,
    rules: PayrollRules = DEFAULT_PAYROLL_RULES,
) -> PeriodHours:
    """Bucket a single complete period into an audit line."""
    net = net_work_minutes(period)
    regular, overtime = split_regular_overtime(net, rules)
    return PeriodHours(
        period_id=period.period_id,
        work_date=period.work_date,
        net_minutes=net,
        regular_minutes=regular,
        overtime_minutes=overtime,
        is_night=is_night_period(period, rules),
    )


@traced_engine("time_aggregator", "1.0", fingerprint_fields=("periods", "rules"))
def aggregate_hours(
    *,
    periods: Iterable[WorkPeriod],
    rules: PayrollRules = DEFAULT_PAYROLL_RULES,
) -> HourBuckets:
    """
    Sum per-period buckets for one worker on one schedule.

    Args:
        periods: The worker's periods on the schedule, in any order.
        rules: Threshold and night-window rules.

    Returns:
        HourBuckets with one audit line per counted period.  An empty or
        all-malformed input returns all-zero buckets.
    """
    lines: list[PeriodHours] = []
    skipped = 0

    for period in periods:
        reason = _skip_reason(period)
        if reason is not None:
            skipped += 1
            logger.warning(
                "work_period_skipped",
                extra={
                    "period_id": period.period_id,
                    "work_date": period.work_date,
                    "reason": reason,
                },
            )
            continue
        lines.append(bucket_period(period, rules))

    total = sum(line.net_minutes for line in lines)
    regular = sum(line.regular_minutes for line in lines)
    overtime = sum(line.overtime_minutes for line in lines)
    night = sum(line.net_minutes for line in lines if line.is_night)

    buckets = HourBuckets(
        total_minutes=Decimal(total),
        regular_minutes=Decimal(regular),
        overtime_minutes=Decimal(overtime),
        night_minutes=Decimal(night),
        period_lines=tuple(lines),
        skipped_periods=skipped,
    )

    logger.debug(
        "hours_aggregated",
        extra={
            "period_count": len(lines),
            "skipped_periods": skipped,
            "total_hours": buckets.total_hours,
            "overtime_hours": buckets.overtime_hours,
            "night_hours": buckets.night_hours,
        },
    )
    return buckets
