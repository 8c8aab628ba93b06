"""
payroll_config -- single public entrypoint for payroll rules.

Responsibility:
    Provides the ONLY way to obtain payroll rules at runtime through
    ``get_active_rules()``.  Returns a frozen ``PayrollRules`` that callers
    hand to the engines.  YAML loading is internal tooling.

Architecture position:
    Configuration -- YAML-driven rules.  Sits above ``payroll_kernel``;
    the kernel and the engines MUST NEVER import from ``payroll_config``.

Invariants enforced:
    - Single entrypoint: all runtime rules flow through ``get_active_rules()``.
    - Deterministic: the same YAML always yields the same rules and checksum.

Failure modes:
    - ``FileNotFoundError`` -- no rules file for the requested id.
    - ``yaml.YAMLError`` -- malformed YAML.
    - ``InvalidPayrollRulesError`` -- out-of-range rule values.

Audit relevance:
    Every successful ``get_active_rules()`` call emits a
    ``PAYROLL_CONFIG_TRACE`` log entry with the rules id, version,
    checksum and the rates in force, tying each payslip run to the exact
    rules that governed it.
"""

from __future__ import annotations

from pathlib import Path

from payroll_config.loader import compute_checksum, load_yaml_file, parse_rules
from payroll_kernel.domain.rules import PayrollRules
from payroll_kernel.logging_config import get_logger

_logger = get_logger("config")

# Default rules directory
_DEFAULT_RULES_DIR = Path(__file__).parent / "rules"


def get_active_rules(
    rules_id: str = "default",
    rules_dir: Path | None = None,
) -> PayrollRules:
    """The ONLY public rules entrypoint.

    Args:
        rules_id: Name of the rules file (without ``.yaml``).
        rules_dir: Override path to the rules directory.
            Defaults to payroll_config/rules/.

    Returns:
        PayrollRules parsed from ``<rules_dir>/<rules_id>.yaml``.

    Raises:
        FileNotFoundError: If the rules file does not exist.
        InvalidPayrollRulesError: If a value is out of range.
    """
    path = (rules_dir or _DEFAULT_RULES_DIR) / f"{rules_id}.yaml"
    if not path.is_file():
        raise FileNotFoundError(f"Payroll rules not found: {path}")

    data = load_yaml_file(path)
    rules = parse_rules(data)

    _logger.info(
        "PAYROLL_CONFIG_TRACE",
        extra={
            "trace_type": "PAYROLL_CONFIG_TRACE",
            "rules_id": rules.rules_id,
            "rules_version": rules.version,
            "checksum": compute_checksum(data),
            "currency": rules.currency,
            "regular_hours_threshold": rules.regular_hours_threshold,
            "withholding_tax_rate": rules.withholding_tax_rate,
        },
    )
    return rules


__all__ = ["get_active_rules"]
