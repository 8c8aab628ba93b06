"""
Payroll Summary (``payroll_engines.payroll_summary``).

Responsibility
--------------
Roll up per-schedule pay for the payroll and worker-report screens:

* ``summarize_payroll_period`` -- every schedule assignment whose date
  range overlaps a reporting window, with gross/tax/net totals and the
  net amount still owed (``wage_paid`` False).
* ``monthly_payroll`` -- detailed pay grouped by the month the schedule
  starts in.
* ``worker_payroll_stats`` -- per-worker hours, net pay, schedule count
  and last work date for schedules starting in a window, highest paid
  first, with the average net pay per hour.

Architecture position
---------------------
**Engines layer** -- pure functional core.  Composes the payroll
calculator; ZERO I/O, ZERO clock reads.

Invariants enforced
-------------------
* An overlapping schedule is included whole, never pro-rated to the
  window.  Allowances therefore stay once per assignment.
* Totals are sums of already-rounded line amounts, so a summary always
  adds up to the lines it shows.
* Output ordering is deterministic (schedule start date, schedule id,
  worker id for lines; month for monthly rows; net pay descending then
  worker id for worker rows).

Failure modes
-------------
* ``InvalidDateRangeError`` -- window start after end.
* Configuration errors from the calculator propagate unchanged.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from enum import Enum

from payroll_engines.payroll_calculator import PayrollCalculator
from payroll_engines.time_aggregator import aggregate_hours
from payroll_engines.tracer import traced_engine
from payroll_kernel.domain.rules import DEFAULT_PAYROLL_RULES, PayrollRules
from payroll_kernel.domain.values import ZERO, ScheduleWorkerConfig, WorkPeriod, round_currency
from payroll_kernel.exceptions import InvalidDateRangeError
from payroll_kernel.logging_config import get_logger

logger = get_logger("engines.payroll_summary")


class PayrollMode(str, Enum):
    """Which calculator path a summary uses."""

    DETAILED = "detailed"  # overtime, night pay, allowances
    QUICK_ESTIMATE = "quick_estimate"  # total hours x wage only


@dataclass(frozen=True)
class ScheduleAssignment:
    """One worker attached to one schedule, with their periods."""

    schedule_id: str
    start_date: date
    end_date: date
    config: ScheduleWorkerConfig
    periods: tuple[WorkPeriod, ...] = ()
    schedule_title: str = ""

    def overlaps(self, start: date, end: date) -> bool:
        return self.start_date <= end and self.end_date >= start


@dataclass(frozen=True)
class PayrollLine:
    """Pay for one assignment inside a summary."""

    schedule_id: str
    schedule_title: str
    worker_id: str | None
    hours: Decimal
    gross_pay: Decimal
    tax_amount: Decimal
    net_pay: Decimal
    fuel_allowance: Decimal
    other_allowance: Decimal
    wage_paid: bool


@dataclass(frozen=True)
class PayrollPeriodSummary:
    """Totals for a reporting window."""

    start: date
    end: date
    mode: PayrollMode
    lines: tuple[PayrollLine, ...] = field(default_factory=tuple)

    @property
    def schedule_ids(self) -> tuple[str, ...]:
        seen: dict[str, None] = {}
        for line in self.lines:
            seen.setdefault(line.schedule_id, None)
        return tuple(seen)

    @property
    def worker_ids(self) -> tuple[str, ...]:
        seen: dict[str, None] = {}
        for line in self.lines:
            if line.worker_id is not None:
                seen.setdefault(line.worker_id, None)
        return tuple(seen)

    @property
    def total_hours(self) -> Decimal:
        return sum((line.hours for line in self.lines), ZERO)

    @property
    def total_gross_pay(self) -> Decimal:
        return sum((line.gross_pay for line in self.lines), ZERO)

    @property
    def total_tax(self) -> Decimal:
        return sum((line.tax_amount for line in self.lines), ZERO)

    @property
    def total_net_pay(self) -> Decimal:
        return sum((line.net_pay for line in self.lines), ZERO)

    @property
    def outstanding_net_pay(self) -> Decimal:
        """Net pay on lines not yet marked as paid."""
        return sum((line.net_pay for line in self.lines if not line.wage_paid), ZERO)


@dataclass(frozen=True)
class MonthlyPayroll:
    """Detailed pay for one calendar month (``YYYY-MM``)."""

    month: str
    hours: Decimal
    net_pay: Decimal
    fuel_allowance: Decimal
    other_allowance: Decimal
    assignment_count: int


@dataclass(frozen=True)
class WorkerPayrollStats:
    """One worker's totals over a reporting window."""

    worker_id: str | None
    total_hours: Decimal
    total_net_pay: Decimal
    schedule_count: int
    last_work_date: date


@dataclass(frozen=True)
class WorkerPayrollReport:
    """Per-worker rows, highest net pay first, plus window totals."""

    start: date
    end: date
    mode: PayrollMode
    rows: tuple[WorkerPayrollStats, ...] = field(default_factory=tuple)

    @property
    def total_hours(self) -> Decimal:
        return sum((row.total_hours for row in self.rows), ZERO)

    @property
    def total_net_pay(self) -> Decimal:
        return sum((row.total_net_pay for row in self.rows), ZERO)

    @property
    def average_hourly_wage(self) -> Decimal:
        """Net pay per worked hour, whole units; zero when nothing was worked."""
        if self.total_hours == 0:
            return ZERO
        return round_currency(self.total_net_pay / self.total_hours)


def _line_for(
    assignment: ScheduleAssignment,
    calculator: PayrollCalculator,
    mode: PayrollMode,
) -> PayrollLine:
    config = assignment.config
    if mode == PayrollMode.QUICK_ESTIMATE:
        hours = aggregate_hours(periods=assignment.periods, rules=calculator.rules)
        estimate = calculator.quick_estimate(
            config.hourly_wage, hours.total_hours, config.tax_withheld,
        )
        return PayrollLine(
            schedule_id=assignment.schedule_id,
            schedule_title=assignment.schedule_title,
            worker_id=config.worker_id,
            hours=estimate.hours,
            gross_pay=estimate.gross_pay,
            tax_amount=estimate.tax_amount,
            net_pay=estimate.net_pay,
            fuel_allowance=ZERO,
            other_allowance=ZERO,
            wage_paid=config.wage_paid,
        )

    result = calculator.calculate_from_periods(config, assignment.periods)
    return PayrollLine(
        schedule_id=assignment.schedule_id,
        schedule_title=assignment.schedule_title,
        worker_id=config.worker_id,
        hours=result.hours.total_hours,
        gross_pay=result.total_gross_pay,
        tax_amount=result.tax_amount,
        net_pay=result.net_pay,
        fuel_allowance=result.fuel_allowance,
        other_allowance=result.other_allowance,
        wage_paid=config.wage_paid,
    )


def _sort_key(assignment: ScheduleAssignment) -> tuple[date, str, str]:
    return (
        assignment.start_date,
        assignment.schedule_id,
        assignment.config.worker_id or "",
    )


@traced_engine("payroll_summary", "1.0", fingerprint_fields=("start", "end", "mode"))
def summarize_payroll_period(
    *,
    assignments: Sequence[ScheduleAssignment],
    start: date,
    end: date,
    mode: PayrollMode = PayrollMode.DETAILED,
    rules: PayrollRules = DEFAULT_PAYROLL_RULES,
) -> PayrollPeriodSummary:
    """
    Summarize pay for every assignment overlapping ``[start, end]``.

    Args:
        assignments: Candidate assignments; non-overlapping ones are ignored.
        start: First day of the window (inclusive).
        end: Last day of the window (inclusive).
        mode: Detailed calculation or quick estimate per assignment.
        rules: Payroll rules shared by every line.

    Raises:
        InvalidDateRangeError: If ``start`` is after ``end``.
    """
    if start > end:
        raise InvalidDateRangeError(start, end)

    calculator = PayrollCalculator(rules)
    in_range = sorted(
        (a for a in assignments if a.overlaps(start, end)), key=_sort_key,
    )
    lines = tuple(_line_for(a, calculator, mode) for a in in_range)
    summary = PayrollPeriodSummary(start=start, end=end, mode=mode, lines=lines)

    logger.info("payroll_period_summarized", extra={
        "start": start,
        "end": end,
        "mode": mode.value,
        "assignment_count": len(lines),
        "total_net_pay": summary.total_net_pay,
        "outstanding_net_pay": summary.outstanding_net_pay,
    })
    return summary


@traced_engine("monthly_payroll", "1.0")
def monthly_payroll(
    *,
    assignments: Sequence[ScheduleAssignment],
    rules: PayrollRules = DEFAULT_PAYROLL_RULES,
) -> tuple[MonthlyPayroll, ...]:
    """Detailed pay grouped by the schedule's start month, oldest first."""
    calculator = PayrollCalculator(rules)
    buckets: dict[str, list[PayrollLine]] = {}
    for assignment in sorted(assignments, key=_sort_key):
        month = assignment.start_date.strftime("%Y-%m")
        buckets.setdefault(month, []).append(
            _line_for(assignment, calculator, PayrollMode.DETAILED)
        )

    return tuple(
        MonthlyPayroll(
            month=month,
            hours=sum((line.hours for line in lines), ZERO),
            net_pay=sum((line.net_pay for line in lines), ZERO),
            fuel_allowance=sum((line.fuel_allowance for line in lines), ZERO),
            other_allowance=sum((line.other_allowance for line in lines), ZERO),
            assignment_count=len(lines),
        )
        for month, lines in sorted(buckets.items())
    )


@traced_engine("worker_payroll_stats", "1.0", fingerprint_fields=("start", "end", "mode"))
def worker_payroll_stats(
    *,
    assignments: Sequence[ScheduleAssignment],
    start: date,
    end: date,
    mode: PayrollMode = PayrollMode.QUICK_ESTIMATE,
    rules: PayrollRules = DEFAULT_PAYROLL_RULES,
) -> WorkerPayrollReport:
    """
    Roll up pay per worker for schedules starting inside ``[start, end]``.

    Unlike ``summarize_payroll_period`` a schedule belongs to the window of
    its start date only.  Each worker's net pay is the sum of the rounded
    per-assignment net amounts.

    Raises:
        InvalidDateRangeError: If ``start`` is after ``end``.
    """
    if start > end:
        raise InvalidDateRangeError(start, end)

    calculator = PayrollCalculator(rules)
    grouped: dict[str | None, list[tuple[ScheduleAssignment, PayrollLine]]] = {}
    for assignment in sorted(assignments, key=_sort_key):
        if not start <= assignment.start_date <= end:
            continue
        grouped.setdefault(assignment.config.worker_id, []).append(
            (assignment, _line_for(assignment, calculator, mode))
        )

    rows = [
        WorkerPayrollStats(
            worker_id=worker_id,
            total_hours=sum((line.hours for _, line in entries), ZERO),
            total_net_pay=sum((line.net_pay for _, line in entries), ZERO),
            schedule_count=len(entries),
            last_work_date=max(a.start_date for a, _ in entries),
        )
        for worker_id, entries in grouped.items()
    ]
    rows.sort(key=lambda row: (-row.total_net_pay, row.worker_id or ""))
    report = WorkerPayrollReport(start=start, end=end, mode=mode, rows=tuple(rows))

    logger.info("worker_payroll_stats_computed", extra={
        "start": start,
        "end": end,
        "mode": mode.value,
        "worker_count": len(rows),
        "total_net_pay": report.total_net_pay,
        "average_hourly_wage": report.average_hourly_wage,
    })
    return report
