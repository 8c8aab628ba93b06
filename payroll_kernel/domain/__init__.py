"""Pure domain values for the payroll kernel."""

from payroll_kernel.domain.rules import DEFAULT_PAYROLL_RULES, PayrollRules
from payroll_kernel.domain.values import (
    HourBuckets,
    PayrollResult,
    PeriodHours,
    QuickEstimate,
    ScheduleWorkerConfig,
    WorkInterval,
    WorkPeriod,
    round_currency,
)

__all__ = [
    "DEFAULT_PAYROLL_RULES",
    "PayrollRules",
    "HourBuckets",
    "PayrollResult",
    "PeriodHours",
    "QuickEstimate",
    "ScheduleWorkerConfig",
    "WorkInterval",
    "WorkPeriod",
    "round_currency",
]
