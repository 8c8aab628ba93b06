"""
Payroll Rules (``payroll_kernel.domain.rules``).

Responsibility
--------------
The business constants that drive hour bucketing and pay: the per-period
overtime threshold, the night-shift clock window, the extra-pay
multipliers and the flat withholding rate.

Architecture position
---------------------
**Kernel domain** -- pure value type.  Engines receive a ``PayrollRules``
as a parameter; ``payroll_config`` builds one from YAML.  This module
imports nothing from either.

Invariants enforced
-------------------
* ``regular_hours_threshold`` is positive and a whole number of minutes.
* Multipliers are positive.
* Night hours are clock hours in ``0..24``.
* ``withholding_tax_rate`` lies in ``[0, 1]``.

Failure modes
-------------
* Out-of-range values raise ``InvalidPayrollRulesError`` on construction.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from payroll_kernel.exceptions import InvalidPayrollRulesError

REGULAR_HOURS_THRESHOLD = Decimal("8")
OVERTIME_MULTIPLIER = Decimal("1.5")
NIGHT_SHIFT_MULTIPLIER = Decimal("1.5")
NIGHT_START_HOUR = 22
NIGHT_END_HOUR = 6
WITHHOLDING_TAX_RATE = Decimal("0.033")  # flat freelance withholding (3.3%)
DEFAULT_CURRENCY = "KRW"

MINUTES_PER_HOUR = 60


@dataclass(frozen=True)
class PayrollRules:
    """
    Immutable set of payroll business rules.

    Defaults match the standard freelance contract; override per
    deployment via ``payroll_config.get_active_rules()``.
    """

    rules_id: str = "default"
    version: int = 1
    currency: str = DEFAULT_CURRENCY

    # Overtime applies per contiguous work period, not per day
    regular_hours_threshold: Decimal = REGULAR_HOURS_THRESHOLD
    overtime_multiplier: Decimal = OVERTIME_MULTIPLIER

    # Clock-hour window: start hour >= night_start_hour or end hour <= night_end_hour
    night_start_hour: int = NIGHT_START_HOUR
    night_end_hour: int = NIGHT_END_HOUR
    night_shift_multiplier: Decimal = NIGHT_SHIFT_MULTIPLIER

    withholding_tax_rate: Decimal = WITHHOLDING_TAX_RATE

    def __post_init__(self) -> None:
        if self.regular_hours_threshold <= 0:
            raise InvalidPayrollRulesError(
                "regular_hours_threshold", self.regular_hours_threshold, "must be positive",
            )
        threshold_minutes = self.regular_hours_threshold * MINUTES_PER_HOUR
        if threshold_minutes != threshold_minutes.to_integral_value():
            raise InvalidPayrollRulesError(
                "regular_hours_threshold",
                self.regular_hours_threshold,
                "must be a whole number of minutes",
            )
        for name in ("overtime_multiplier", "night_shift_multiplier"):
            if getattr(self, name) <= 0:
                raise InvalidPayrollRulesError(name, getattr(self, name), "must be positive")
        for name in ("night_start_hour", "night_end_hour"):
            hour = getattr(self, name)
            if not 0 <= hour <= 24:
                raise InvalidPayrollRulesError(name, hour, "must be a clock hour between 0 and 24")
        if not Decimal("0") <= self.withholding_tax_rate <= Decimal("1"):
            raise InvalidPayrollRulesError(
                "withholding_tax_rate", self.withholding_tax_rate, "must be between 0 and 1",
            )
        if not self.currency:
            raise InvalidPayrollRulesError("currency", self.currency, "must not be empty")

    @property
    def regular_minutes_threshold(self) -> int:
        """Overtime threshold expressed in whole minutes."""
        return int(self.regular_hours_threshold * MINUTES_PER_HOUR)


DEFAULT_PAYROLL_RULES = PayrollRules()
