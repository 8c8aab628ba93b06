"""
Payroll Calculator (``payroll_engines.payroll_calculator``).

Responsibility
--------------
Combine a worker's hour buckets with the schedule-worker terms to produce
a pay breakdown: regular, overtime and night-shift pay, flat allowances,
gross, withholding tax and net.

Two alternate entry points exist for callers that only hold a flat hour
total (``quick_estimate``) or raw start/end timestamps
(``estimate_pay_from_intervals``).  They skip overtime, night pay and
allowances entirely and therefore produce different figures from the
detailed calculation for the same worker.  Keep them apart.

Architecture position
---------------------
**Engines layer** -- pure functional core.  ZERO I/O, ZERO clock reads.

Invariants enforced
-------------------
* Decimal-only arithmetic; amounts are rounded half-up to whole currency
  units at output only.  Intermediate sums stay unrounded.
* ``total_gross_pay == round(regular + overtime + night + fuel + other)``.
* Allowances are excluded from the withholding base and applied once per
  calculation, never per period.
* ``net_pay == total_gross_pay - tax_amount``.

Failure modes
-------------
* ``InvalidWageError`` -- hourly wage is not positive.
* ``InvalidAllowanceError`` -- an allowance is negative.
* ``NegativeHoursError`` -- any hour bucket or flat hour total is negative.
* ``HourBucketsMismatchError`` -- regular + overtime != total.
* ``InvalidPayrollRulesError`` -- a per-call tax rate outside [0, 1].
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from decimal import Decimal

from payroll_engines.time_aggregator import aggregate_hours
from payroll_engines.tracer import traced_engine
from payroll_kernel.domain.rules import DEFAULT_PAYROLL_RULES, MINUTES_PER_HOUR, PayrollRules
from payroll_kernel.domain.values import (
    ZERO,
    HourBuckets,
    PayrollResult,
    QuickEstimate,
    ScheduleWorkerConfig,
    WorkInterval,
    WorkPeriod,
    round_currency,
    to_decimal,
)
from payroll_kernel.exceptions import (
    HourBucketsMismatchError,
    InvalidAllowanceError,
    InvalidPayrollRulesError,
    InvalidWageError,
    NegativeHoursError,
)
from payroll_kernel.logging_config import get_logger

logger = get_logger("engines.payroll_calculator")

SECONDS_PER_HOUR = 3600


def _validate_wage(hourly_wage: Decimal, schedule_worker_id: str | None = None) -> None:
    if hourly_wage is None or hourly_wage <= 0:
        logger.error("invalid_hourly_wage", extra={
            "hourly_wage": hourly_wage,
            "schedule_worker_id": schedule_worker_id,
        })
        raise InvalidWageError(hourly_wage, schedule_worker_id)


def _validate_hours(hours: HourBuckets) -> None:
    for bucket in ("total_minutes", "regular_minutes", "overtime_minutes", "night_minutes"):
        minutes = getattr(hours, bucket)
        if minutes < 0:
            raise NegativeHoursError(
                bucket.replace("_minutes", "_hours"), Decimal(minutes) / MINUTES_PER_HOUR,
            )
    if hours.regular_minutes + hours.overtime_minutes != hours.total_minutes:
        raise HourBucketsMismatchError(
            hours.total_minutes, hours.regular_minutes, hours.overtime_minutes,
        )


class PayrollCalculator:
    """
    Calculate pay for one worker on one schedule.

    Pure functions - no I/O, no storage access.  Rules are fixed at
    construction; one calculator can be shared by any number of callers.
    """

    def __init__(self, rules: PayrollRules = DEFAULT_PAYROLL_RULES):
        self.rules = rules

    def validate_config(self, config: ScheduleWorkerConfig) -> None:
        """Reject terms that cannot produce a meaningful payslip."""
        _validate_wage(config.hourly_wage, config.schedule_worker_id)
        if config.fuel_allowance < 0:
            raise InvalidAllowanceError("fuel_allowance", config.fuel_allowance)
        if config.other_allowance < 0:
            raise InvalidAllowanceError("other_allowance", config.other_allowance)

    def calculate(
        self,
        config: ScheduleWorkerConfig,
        hours: HourBuckets,
    ) -> PayrollResult:
        """
        Detailed pay breakdown from hour buckets.

        Args:
            config: Wage, allowances and enabled flags for the engagement.
            hours: Output of the time aggregator (or ``HourBuckets.from_hours``).

        Returns:
            PayrollResult with every amount rounded to whole units.
        """
        self.validate_config(config)
        _validate_hours(hours)

        wage = to_decimal(config.hourly_wage)
        fuel = to_decimal(config.fuel_allowance)
        other = to_decimal(config.other_allowance)
        rules = self.rules

        regular_pay = hours.regular_minutes * wage / MINUTES_PER_HOUR
        overtime_pay = ZERO
        if config.overtime_enabled:
            overtime_pay = hours.overtime_minutes * wage * rules.overtime_multiplier / MINUTES_PER_HOUR
        night_shift_pay = ZERO
        if config.night_shift_enabled:
            night_shift_pay = hours.night_minutes * wage * rules.night_shift_multiplier / MINUTES_PER_HOUR

        gross = (
            regular_pay
            + overtime_pay
            + night_shift_pay
            + fuel
            + other
        )
        taxable_base = gross - fuel - other

        tax_amount = ZERO
        if config.tax_withheld:
            tax_amount = round_currency(taxable_base * rules.withholding_tax_rate)

        total_gross_pay = round_currency(gross)
        result = PayrollResult(
            regular_pay=round_currency(regular_pay),
            overtime_pay=round_currency(overtime_pay),
            night_shift_pay=round_currency(night_shift_pay),
            fuel_allowance=round_currency(fuel),
            other_allowance=round_currency(other),
            total_gross_pay=total_gross_pay,
            taxable_base=round_currency(taxable_base),
            tax_amount=tax_amount,
            net_pay=total_gross_pay - tax_amount,
            hours=hours,
            currency=rules.currency,
            wage_paid=config.wage_paid,
            schedule_worker_id=config.schedule_worker_id,
            schedule_id=config.schedule_id,
            worker_id=config.worker_id,
        )

        logger.info("payroll_calculated", extra={
            "schedule_worker_id": config.schedule_worker_id,
            "total_hours": hours.total_hours,
            "total_gross_pay": result.total_gross_pay,
            "tax_amount": result.tax_amount,
            "net_pay": result.net_pay,
            "currency": result.currency,
        })
        return result

    def calculate_from_periods(
        self,
        config: ScheduleWorkerConfig,
        periods: Iterable[WorkPeriod],
    ) -> PayrollResult:
        """Aggregate periods, then calculate.  Config is checked first."""
        self.validate_config(config)
        hours = aggregate_hours(periods=tuple(periods), rules=self.rules)
        return self.calculate(config, hours)

    def quick_estimate(
        self,
        hourly_wage: Decimal,
        hours: Decimal,
        tax_withheld: bool = False,
    ) -> QuickEstimate:
        """
        Flat ``hours x wage`` estimate.

        No overtime, night pay or allowances.  Tax is the flat rate on the
        whole gross; net is rounded from the unrounded ``gross - tax``.
        """
        return self._estimate(hourly_wage, hours, tax_withheld, self.rules.withholding_tax_rate)

    def estimate_from_intervals(
        self,
        hourly_wage: Decimal,
        intervals: Sequence[WorkInterval],
        tax_withheld: bool = False,
        tax_rate: Decimal | None = None,
    ) -> QuickEstimate:
        """
        Estimate from raw start/end timestamps.

        Each interval contributes ``max(0, end - start)``; intervals may
        cross midnight.  No break is deducted.
        """
        rate = self.rules.withholding_tax_rate if tax_rate is None else to_decimal(tax_rate)
        if not Decimal("0") <= rate <= Decimal("1"):
            raise InvalidPayrollRulesError("tax_rate", rate, "must be between 0 and 1")

        seconds = sum(
            max(Decimal(str((i.end - i.start).total_seconds())), ZERO) for i in intervals
        )
        return self._estimate(hourly_wage, Decimal(seconds) / SECONDS_PER_HOUR, tax_withheld, rate)

    def _estimate(
        self,
        hourly_wage: Decimal,
        hours: Decimal,
        tax_withheld: bool,
        tax_rate: Decimal,
    ) -> QuickEstimate:
        _validate_wage(hourly_wage)
        wage = to_decimal(hourly_wage)
        hours = to_decimal(hours)
        if hours < 0:
            raise NegativeHoursError("hours", hours)

        gross = wage * hours
        tax = gross * tax_rate if tax_withheld else ZERO
        estimate = QuickEstimate(
            hours=hours,
            gross_pay=round_currency(gross),
            tax_amount=round_currency(tax),
            net_pay=round_currency(gross - tax),
            currency=self.rules.currency,
        )
        logger.debug("quick_estimate_calculated", extra={
            "hours": hours,
            "gross_pay": estimate.gross_pay,
            "net_pay": estimate.net_pay,
            "tax_withheld": tax_withheld,
        })
        return estimate


# ---------------------------------------------------------------------------
# Convenience entry points
# ---------------------------------------------------------------------------


@traced_engine("payroll_calculator", "1.0", fingerprint_fields=("config", "hours", "rules"))
def calculate_payroll(
    *,
    config: ScheduleWorkerConfig,
    hours: HourBuckets,
    rules: PayrollRules = DEFAULT_PAYROLL_RULES,
) -> PayrollResult:
    """Detailed calculation from already aggregated hours."""
    return PayrollCalculator(rules).calculate(config, hours)


@traced_engine("payroll_calculator", "1.0", fingerprint_fields=("config", "periods", "rules"))
def calculate_schedule_worker_payroll(
    *,
    config: ScheduleWorkerConfig,
    periods: Iterable[WorkPeriod],
    rules: PayrollRules = DEFAULT_PAYROLL_RULES,
) -> PayrollResult:
    """Detailed calculation straight from work periods."""
    return PayrollCalculator(rules).calculate_from_periods(config, periods)


@traced_engine("quick_estimate", "1.0", fingerprint_fields=("hourly_wage", "hours", "tax_withheld"))
def quick_estimate(
    *,
    hourly_wage: Decimal,
    hours: Decimal,
    tax_withheld: bool = False,
    rules: PayrollRules = DEFAULT_PAYROLL_RULES,
) -> QuickEstimate:
    """Simplified mode: flat hour total x wage, optional flat withholding."""
    return PayrollCalculator(rules).quick_estimate(hourly_wage, hours, tax_withheld)


@traced_engine(
    "interval_estimate", "1.0",
    fingerprint_fields=("hourly_wage", "intervals", "tax_withheld", "tax_rate"),
)
def estimate_pay_from_intervals(
    *,
    hourly_wage: Decimal,
    intervals: Sequence[WorkInterval],
    tax_withheld: bool = False,
    tax_rate: Decimal | None = None,
    rules: PayrollRules = DEFAULT_PAYROLL_RULES,
) -> QuickEstimate:
    """Simplified mode over timestamp intervals, with an optional rate override."""
    return PayrollCalculator(rules).estimate_from_intervals(
        hourly_wage, intervals, tax_withheld, tax_rate,
    )
