"""
Payroll Kernel

Shared foundation for the schedule payroll engines:
- Typed, coded exceptions
- Structured JSON logging with request-scoped context
- Immutable Decimal-based domain values and payroll rules
- Boundary conversion from loose storage records
"""

__version__ = "0.1.0"
