"""
Module: payroll_engines
Responsibility:
    Package entrypoint that re-exports the public symbols of the pure
    payroll calculation engines.  This is the canonical import surface for
    the storage and UI layers that consume the engine.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    May only import payroll_kernel (and sibling engine modules).
    MUST NOT import payroll_config; rules are passed in by the caller.

Invariants enforced:
    - Purity: engines NEVER call ``datetime.now()`` or ``date.today()``.
    - Decimal-only arithmetic: money and rates are ``Decimal``.
    - Determinism: identical inputs always produce identical outputs, so a
      pay preview can be recomputed safely after every edit.

Usage:
    from payroll_engines import aggregate_hours, calculate_payroll

    hours = aggregate_hours(periods=periods)
    result = calculate_payroll(config=config, hours=hours)
"""

from payroll_kernel.logging_config import get_logger

logger = get_logger("engines")

from payroll_engines.payroll_calculator import (
    PayrollCalculator,
    calculate_payroll,
    calculate_schedule_worker_payroll,
    estimate_pay_from_intervals,
    quick_estimate,
)
from payroll_engines.payroll_summary import (
    MonthlyPayroll,
    PayrollLine,
    PayrollMode,
    PayrollPeriodSummary,
    ScheduleAssignment,
    WorkerPayrollReport,
    WorkerPayrollStats,
    monthly_payroll,
    summarize_payroll_period,
    worker_payroll_stats,
)
from payroll_engines.time_aggregator import (
    aggregate_hours,
    bucket_period,
    is_night_period,
    net_work_minutes,
    split_regular_overtime,
)

__all__ = [
    # Time aggregation
    "aggregate_hours",
    "bucket_period",
    "is_night_period",
    "net_work_minutes",
    "split_regular_overtime",
    # Payroll calculation
    "PayrollCalculator",
    "calculate_payroll",
    "calculate_schedule_worker_payroll",
    "quick_estimate",
    "estimate_pay_from_intervals",
    # Summaries
    "MonthlyPayroll",
    "PayrollLine",
    "PayrollMode",
    "PayrollPeriodSummary",
    "ScheduleAssignment",
    "monthly_payroll",
    "summarize_payroll_period",
    "WorkerPayrollReport",
    "WorkerPayrollStats",
    "worker_payroll_stats",
]

logger.debug("engines_package_loaded", extra={
    "module_count": 3,
    "modules": ["time_aggregator", "payroll_calculator", "payroll_summary"],
})
