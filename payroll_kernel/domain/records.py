"""
Record boundary: loose storage/UI dicts to typed payroll values.

Storage adapters hand over plain records, camelCase from the app
(``workDate``, ``startTime``, ``hourlyWage``) or snake_case from SQL rows
(``work_date``, ``break_duration``).  Both spellings are accepted.  ZERO I/O.

Periods never fail here: an unparseable field becomes ``None`` and the
time aggregator skips the period.  Configuration does fail: a wage or
allowance that cannot be read raises the matching ``ConfigurationError``.
"""

from __future__ import annotations

from datetime import date, datetime, time
from decimal import Decimal, InvalidOperation
from typing import Any, Mapping

from payroll_kernel.domain.values import ZERO, ScheduleWorkerConfig, WorkPeriod
from payroll_kernel.exceptions import InvalidAllowanceError, InvalidWageError

_TRUE_STRINGS = ("true", "yes", "1", "on")


# -----------------------------------------------------------------------------
# Field lookup and coercion (pure)
# -----------------------------------------------------------------------------


def _pick(record: Mapping[str, Any], *keys: str) -> Any:
    """Return the first non-None value among *keys*."""
    for key in keys:
        value = record.get(key)
        if value is not None:
            return value
    return None


def parse_date_value(value: Any) -> date | None:
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return date.fromisoformat(value.strip()[:10])
        except ValueError:
            return None
    return None


def parse_time_value(value: Any) -> time | None:
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.time()
    if isinstance(value, time):
        return value
    if isinstance(value, str):
        s = value.strip()
        for fmt in ("%H:%M", "%H:%M:%S"):
            try:
                return datetime.strptime(s, fmt).time()
            except ValueError:
                continue
    return None


def parse_minutes_value(value: Any) -> int | None:
    """Whole minutes from an int, Decimal or numeric string; None otherwise."""
    if value is None:
        return 0
    if isinstance(value, bool):
        return None
    try:
        minutes = Decimal(value.strip() if isinstance(value, str) else value)
    except (InvalidOperation, TypeError, ValueError):
        return None
    if not minutes.is_finite() or minutes != minutes.to_integral_value():
        return None
    return int(minutes)


def parse_decimal_value(value: Any) -> Decimal | None:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, float):
        value = str(value)
    try:
        amount = Decimal(value.strip() if isinstance(value, str) else value)
    except (InvalidOperation, TypeError, ValueError):
        return None
    return amount if amount.is_finite() else None


def parse_bool_value(value: Any) -> bool:
    if value is None:
        return False
    if isinstance(value, str):
        return value.strip().lower() in _TRUE_STRINGS
    return bool(value)


def _optional_str(value: Any) -> str | None:
    return None if value is None else str(value)


# -----------------------------------------------------------------------------
# Record converters
# -----------------------------------------------------------------------------


def work_period_from_record(record: Mapping[str, Any]) -> WorkPeriod:
    """Build a ``WorkPeriod``; unreadable fields become ``None``.

    A break that cannot be read is stored as ``-1`` so the period is
    reported as incomplete rather than silently treated as break-free.
    """
    break_minutes = parse_minutes_value(
        _pick(record, "breakDuration", "break_duration", "break_minutes")
    )
    return WorkPeriod(
        work_date=parse_date_value(_pick(record, "workDate", "work_date")),
        start_time=parse_time_value(_pick(record, "startTime", "start_time")),
        end_time=parse_time_value(_pick(record, "endTime", "end_time")),
        break_duration=-1 if break_minutes is None else break_minutes,
        period_id=_optional_str(_pick(record, "id", "periodId", "period_id")),
        schedule_worker_id=_optional_str(
            _pick(record, "scheduleWorkerId", "schedule_worker_id")
        ),
    )


def work_periods_from_records(records: list[Mapping[str, Any]]) -> tuple[WorkPeriod, ...]:
    return tuple(work_period_from_record(r) for r in records)


def _allowance(record: Mapping[str, Any], name: str, *keys: str) -> Decimal:
    raw = _pick(record, *keys)
    if raw is None:
        return ZERO
    amount = parse_decimal_value(raw)
    if amount is None or amount < 0:
        raise InvalidAllowanceError(name, raw)
    return amount


def schedule_worker_config_from_record(record: Mapping[str, Any]) -> ScheduleWorkerConfig:
    """Build a ``ScheduleWorkerConfig`` from a loose record.

    Raises:
        InvalidWageError: wage missing, unreadable, or not positive.
        InvalidAllowanceError: an allowance is unreadable or negative.
    """
    schedule_worker_id = _optional_str(_pick(record, "id", "scheduleWorkerId", "schedule_worker_id"))
    raw_wage = _pick(record, "hourlyWage", "hourly_wage")
    wage = parse_decimal_value(raw_wage)
    if wage is None or wage <= 0:
        raise InvalidWageError(raw_wage, schedule_worker_id)

    return ScheduleWorkerConfig(
        hourly_wage=wage,
        fuel_allowance=_allowance(record, "fuel_allowance", "fuelAllowance", "fuel_allowance"),
        other_allowance=_allowance(record, "other_allowance", "otherAllowance", "other_allowance"),
        overtime_enabled=parse_bool_value(_pick(record, "overtimeEnabled", "overtime_enabled")),
        night_shift_enabled=parse_bool_value(
            _pick(record, "nightShiftEnabled", "night_shift_enabled")
        ),
        tax_withheld=parse_bool_value(_pick(record, "taxWithheld", "tax_withheld")),
        wage_paid=parse_bool_value(_pick(record, "wagePaid", "wage_paid", "paid")),
        schedule_worker_id=schedule_worker_id,
        schedule_id=_optional_str(_pick(record, "scheduleId", "schedule_id")),
        worker_id=_optional_str(_pick(record, "workerId", "worker_id")),
    )
