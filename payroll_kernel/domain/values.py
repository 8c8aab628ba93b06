"""
Payroll Value Objects (``payroll_kernel.domain.values``).

Responsibility
--------------
Frozen dataclass value objects for the nouns the payroll engines consume
and produce: work periods, schedule-worker terms, hour buckets, pay
breakdowns and quick estimates.

Architecture position
---------------------
**Kernel domain** -- pure data definitions with ZERO I/O.  Storage and UI
layers hand these to ``payroll_engines`` and receive them back.

Invariants enforced
-------------------
* All models are ``frozen=True`` (immutable after construction).
* All monetary fields use ``Decimal`` -- NEVER ``float``.
* Hour buckets are carried as minutes so that sums stay exact; hour
  properties divide by 60 on read.

Failure modes
-------------
* None at construction.  Range validation happens in the engines, where
  malformed periods are tolerated and invalid configuration is rejected.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, time
from decimal import ROUND_HALF_UP, Decimal

from payroll_kernel.domain.rules import DEFAULT_CURRENCY, MINUTES_PER_HOUR

ZERO = Decimal("0")
CURRENCY_QUANTUM = Decimal("1")


def to_decimal(value: Decimal | int | float | str) -> Decimal:
    """Coerce a caller-supplied number to Decimal; floats go through ``str``."""
    if isinstance(value, float):
        return Decimal(str(value))
    return Decimal(value)


def round_currency(amount: Decimal) -> Decimal:
    """Round a currency amount to the nearest whole unit (half-up)."""
    return Decimal(amount).quantize(CURRENCY_QUANTUM, rounding=ROUND_HALF_UP)


def minutes_to_hours(minutes: Decimal | int) -> Decimal:
    return Decimal(minutes) / MINUTES_PER_HOUR


# ---------------------------------------------------------------------------
# Inputs
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class WorkPeriod:
    """One contiguous block of work on a single calendar day.

    Any of the date/time fields may be ``None`` when the source record is
    incomplete; such periods are skipped by the time aggregator.
    """

    work_date: date | None
    start_time: time | None
    end_time: time | None
    break_duration: int = 0  # unpaid minutes
    period_id: str | None = None
    schedule_worker_id: str | None = None

    @property
    def is_complete(self) -> bool:
        return (
            self.work_date is not None
            and self.start_time is not None
            and self.end_time is not None
            and self.break_duration >= 0
        )


@dataclass(frozen=True)
class WorkInterval:
    """A timestamped work interval; may cross midnight."""

    start: datetime
    end: datetime


@dataclass(frozen=True)
class ScheduleWorkerConfig:
    """Financial terms for one worker on one schedule."""

    hourly_wage: Decimal
    fuel_allowance: Decimal = ZERO
    other_allowance: Decimal = ZERO
    overtime_enabled: bool = False
    night_shift_enabled: bool = False
    tax_withheld: bool = False
    # Settlement flag, set by the caller after payment
    wage_paid: bool = False
    schedule_worker_id: str | None = None
    schedule_id: str | None = None
    worker_id: str | None = None

    @property
    def total_allowances(self) -> Decimal:
        return self.fuel_allowance + self.other_allowance


# ---------------------------------------------------------------------------
# Time aggregation output
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class PeriodHours:
    """Audit line: how one work period was bucketed."""

    period_id: str | None
    work_date: date
    net_minutes: int
    regular_minutes: int
    overtime_minutes: int
    is_night: bool

    @property
    def net_hours(self) -> Decimal:
        return minutes_to_hours(self.net_minutes)


@dataclass(frozen=True)
class HourBuckets:
    """
    Worked time split into pay buckets.

    ``regular_minutes + overtime_minutes == total_minutes``.  Night minutes
    overlap the other buckets rather than adding to the total.  Minutes are
    whole when built by the aggregator and may be fractional from
    ``from_hours``.
    """

    total_minutes: Decimal = ZERO
    regular_minutes: Decimal = ZERO
    overtime_minutes: Decimal = ZERO
    night_minutes: Decimal = ZERO
    period_lines: tuple[PeriodHours, ...] = field(default_factory=tuple)
    skipped_periods: int = 0

    @classmethod
    def from_hours(
        cls,
        *,
        regular_hours: Decimal,
        overtime_hours: Decimal = ZERO,
        night_hours: Decimal = ZERO,
    ) -> HourBuckets:
        """Build buckets from hour totals the caller already holds."""
        regular = Decimal(regular_hours) * MINUTES_PER_HOUR
        overtime = Decimal(overtime_hours) * MINUTES_PER_HOUR
        return cls(
            total_minutes=regular + overtime,
            regular_minutes=regular,
            overtime_minutes=overtime,
            night_minutes=Decimal(night_hours) * MINUTES_PER_HOUR,
        )

    @property
    def total_hours(self) -> Decimal:
        return minutes_to_hours(self.total_minutes)

    @property
    def regular_hours(self) -> Decimal:
        return minutes_to_hours(self.regular_minutes)

    @property
    def overtime_hours(self) -> Decimal:
        return minutes_to_hours(self.overtime_minutes)

    @property
    def night_hours(self) -> Decimal:
        return minutes_to_hours(self.night_minutes)

    @property
    def is_empty(self) -> bool:
        return self.total_minutes == 0


# ---------------------------------------------------------------------------
# Pay outputs
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class PayrollResult:
    """
    Pay breakdown for one worker on one schedule.

    All amounts are rounded to whole currency units.  ``total_gross_pay``
    is rounded from the unrounded sum of its parts, so it may differ by
    one unit from adding the rounded parts.
    """

    regular_pay: Decimal
    overtime_pay: Decimal
    night_shift_pay: Decimal
    fuel_allowance: Decimal
    other_allowance: Decimal
    total_gross_pay: Decimal
    taxable_base: Decimal
    tax_amount: Decimal
    net_pay: Decimal
    hours: HourBuckets
    currency: str = DEFAULT_CURRENCY
    wage_paid: bool = False
    schedule_worker_id: str | None = None
    schedule_id: str | None = None
    worker_id: str | None = None

    @property
    def total_allowances(self) -> Decimal:
        return self.fuel_allowance + self.other_allowance


@dataclass(frozen=True)
class QuickEstimate:
    """Flat hours x wage estimate, without overtime, night pay or allowances."""

    hours: Decimal
    gross_pay: Decimal
    tax_amount: Decimal
    net_pay: Decimal
    currency: str = DEFAULT_CURRENCY
