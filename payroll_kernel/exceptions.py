"""
Typed Exception Hierarchy for the Payroll Kernel.

===============================================================================
WHY TYPED EXCEPTIONS
===============================================================================

Pay figures end up on a worker's payslip. Callers (the schedule screens,
report builders, import jobs) must be able to tell a bad wage apart from a
broken hour breakdown without parsing message strings:

  1. Every error has a TYPED exception class (catch by type, not message)
  2. Every exception has a CODE attribute (machine-readable, API-safe)
  3. Exceptions carry structured DATA (not just a message string)

Example:
    try:
        result = calculate_payroll(config=config, hours=hours)
    except InvalidWageError as e:
        show_form_error(field="hourlyWage", value=e.hourly_wage)

===============================================================================
EXCEPTION HIERARCHY
===============================================================================

    PayrollKernelError (base)
    |
    +-- ConfigurationError
    |   +-- InvalidWageError
    |   +-- InvalidAllowanceError
    |
    +-- HoursError
    |   +-- NegativeHoursError
    |   +-- HourBucketsMismatchError
    |
    +-- RulesError
    |   +-- InvalidPayrollRulesError
    |
    +-- SummaryError
        +-- InvalidDateRangeError

===============================================================================
ERROR CODES - QUICK REFERENCE
===============================================================================

Category        | Code                        | When Raised
----------------|-----------------------------|-----------------------------------------
Configuration   | INVALID_HOURLY_WAGE         | Wage missing, unparseable, or <= 0
                | INVALID_ALLOWANCE           | Allowance unparseable or negative
----------------|-----------------------------|-----------------------------------------
Hours           | NEGATIVE_HOURS              | A bucket or override is below zero
                | HOUR_BUCKETS_MISMATCH       | regular + overtime != total
----------------|-----------------------------|-----------------------------------------
Rules           | INVALID_PAYROLL_RULES       | Threshold/multiplier/rate out of range
----------------|-----------------------------|-----------------------------------------
Summary         | INVALID_DATE_RANGE          | Summary window start after end

Malformed work periods are NOT errors. They contribute zero hours and are
counted in ``HourBuckets.skipped_periods``.
"""

from decimal import Decimal
from typing import Any


class PayrollKernelError(Exception):
    """
    Base exception for all payroll kernel errors.

    All subclasses must have a `code` class attribute for machine-readable
    error identification.
    """

    code: str = "PAYROLL_KERNEL_ERROR"


# Configuration-related exceptions


class ConfigurationError(PayrollKernelError):
    """Base exception for invalid schedule-worker configuration."""

    code: str = "CONFIGURATION_ERROR"


class InvalidWageError(ConfigurationError):
    """Hourly wage is missing, unparseable, or not positive."""

    code: str = "INVALID_HOURLY_WAGE"

    def __init__(self, hourly_wage: Any, schedule_worker_id: str | None = None):
        self.hourly_wage = hourly_wage
        self.schedule_worker_id = schedule_worker_id
        super().__init__(
            f"Hourly wage must be a positive amount, got {hourly_wage!r}"
            + (f" (schedule worker {schedule_worker_id})" if schedule_worker_id else "")
        )


class InvalidAllowanceError(ConfigurationError):
    """A flat allowance is unparseable or negative."""

    code: str = "INVALID_ALLOWANCE"

    def __init__(self, allowance_name: str, amount: Any):
        self.allowance_name = allowance_name
        self.amount = amount
        super().__init__(
            f"Allowance '{allowance_name}' must be a non-negative amount, got {amount!r}"
        )


# Hours-related exceptions


class HoursError(PayrollKernelError):
    """Base exception for inconsistent hour inputs."""

    code: str = "HOURS_ERROR"


class NegativeHoursError(HoursError):
    """An hour bucket (or flat hours override) is negative."""

    code: str = "NEGATIVE_HOURS"

    def __init__(self, bucket: str, hours: Decimal):
        self.bucket = bucket
        self.hours = hours
        super().__init__(f"Hours cannot be negative: {bucket}={hours}")


class HourBucketsMismatchError(HoursError):
    """Regular plus overtime minutes do not add up to the total."""

    code: str = "HOUR_BUCKETS_MISMATCH"

    def __init__(self, total_minutes: int, regular_minutes: int, overtime_minutes: int):
        self.total_minutes = total_minutes
        self.regular_minutes = regular_minutes
        self.overtime_minutes = overtime_minutes
        super().__init__(
            f"Hour buckets do not balance: regular {regular_minutes} + "
            f"overtime {overtime_minutes} != total {total_minutes} minutes"
        )


# Rules-related exceptions


class RulesError(PayrollKernelError):
    """Base exception for payroll rule definitions."""

    code: str = "RULES_ERROR"


class InvalidPayrollRulesError(RulesError):
    """A payroll rule value is out of its allowed range."""

    code: str = "INVALID_PAYROLL_RULES"

    def __init__(self, field_name: str, value: Any, reason: str):
        self.field_name = field_name
        self.value = value
        self.reason = reason
        super().__init__(f"Invalid payroll rule {field_name}={value!r}: {reason}")


# Summary-related exceptions


class SummaryError(PayrollKernelError):
    """Base exception for payroll summaries."""

    code: str = "SUMMARY_ERROR"


class InvalidDateRangeError(SummaryError):
    """Summary window starts after it ends."""

    code: str = "INVALID_DATE_RANGE"

    def __init__(self, start: Any, end: Any):
        self.start = start
        self.end = end
        super().__init__(f"Summary start {start} is after end {end}")
