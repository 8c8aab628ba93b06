"""
Payroll Rules Loader (``payroll_config.loader``).

Responsibility
--------------
Loads a payroll rules YAML file and parses it into the kernel's frozen
``PayrollRules``.  The single public entry point for runtime rules is
``payroll_config.get_active_rules()``; these helpers are its internals and
test tooling.

Architecture position
---------------------
**Config layer** -- infrastructure tooling.  Depends on ``payroll_kernel``
only; engines never import this package.

Invariants enforced
-------------------
* Decimal fields are read from their string form, never through float.
* Missing sections fall back to the kernel defaults; present values are
  range-checked by ``PayrollRules`` itself.
* ``compute_checksum`` produces a deterministic SHA-256 hash for rules
  identity and change detection.

Failure modes
-------------
* Missing YAML file  -> ``FileNotFoundError`` propagates.
* Malformed YAML  -> ``yaml.YAMLError`` propagates.
* Non-numeric or out-of-range values -> ``InvalidPayrollRulesError``.
"""

from __future__ import annotations

import hashlib
import json
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any

import yaml

from payroll_kernel.domain.rules import (
    DEFAULT_CURRENCY,
    NIGHT_END_HOUR,
    NIGHT_SHIFT_MULTIPLIER,
    NIGHT_START_HOUR,
    OVERTIME_MULTIPLIER,
    REGULAR_HOURS_THRESHOLD,
    WITHHOLDING_TAX_RATE,
    PayrollRules,
)
from payroll_kernel.exceptions import InvalidPayrollRulesError


def load_yaml_file(path: Path) -> dict[str, Any]:
    """
    Load a single YAML file and return its contents as a dict.

    Raises:
        FileNotFoundError: if the file does not exist.
        yaml.YAMLError: if the file contains invalid YAML.
    """
    with open(path) as f:
        return yaml.safe_load(f) or {}


def parse_decimal(field_name: str, value: Any, default: Decimal) -> Decimal:
    """Parse a Decimal from YAML (string, int or float literal)."""
    if value is None:
        return default
    try:
        return Decimal(str(value))
    except InvalidOperation as exc:
        raise InvalidPayrollRulesError(field_name, value, "must be a number") from exc


def parse_hour(field_name: str, value: Any, default: int) -> int:
    if value is None:
        return default
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidPayrollRulesError(field_name, value, "must be a whole clock hour")
    return value


def parse_version(value: Any) -> int:
    if value is None:
        return 1
    if isinstance(value, bool):
        raise InvalidPayrollRulesError("version", value, "must be a whole number")
    try:
        return int(str(value))
    except ValueError as exc:
        raise InvalidPayrollRulesError("version", value, "must be a whole number") from exc


def parse_rules(data: dict[str, Any]) -> PayrollRules:
    """
    Parse ``PayrollRules`` from a dict.

    Expected shape::

        rules_id: default
        version: 1
        currency: KRW
        overtime:    {threshold_hours: "8", multiplier: "1.5"}
        night_shift: {start_hour: 22, end_hour: 6, multiplier: "1.5"}
        withholding: {rate: "0.033"}
    """
    overtime = data.get("overtime") or {}
    night = data.get("night_shift") or {}
    withholding = data.get("withholding") or {}

    return PayrollRules(
        rules_id=str(data.get("rules_id", "default")),
        version=parse_version(data.get("version")),
        currency=str(data.get("currency", DEFAULT_CURRENCY)),
        regular_hours_threshold=parse_decimal(
            "overtime.threshold_hours", overtime.get("threshold_hours"), REGULAR_HOURS_THRESHOLD,
        ),
        overtime_multiplier=parse_decimal(
            "overtime.multiplier", overtime.get("multiplier"), OVERTIME_MULTIPLIER,
        ),
        night_start_hour=parse_hour(
            "night_shift.start_hour", night.get("start_hour"), NIGHT_START_HOUR,
        ),
        night_end_hour=parse_hour(
            "night_shift.end_hour", night.get("end_hour"), NIGHT_END_HOUR,
        ),
        night_shift_multiplier=parse_decimal(
            "night_shift.multiplier", night.get("multiplier"), NIGHT_SHIFT_MULTIPLIER,
        ),
        withholding_tax_rate=parse_decimal(
            "withholding.rate", withholding.get("rate"), WITHHOLDING_TAX_RATE,
        ),
    )


def compute_checksum(data: dict[str, Any]) -> str:
    """
    Compute SHA-256 checksum of canonical JSON serialization.

    Identical ``data`` always produces identical checksums.
    """
    canonical = json.dumps(data, sort_keys=True, default=str)
    return hashlib.sha256(canonical.encode()).hexdigest()
