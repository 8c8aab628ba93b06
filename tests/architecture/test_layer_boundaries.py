"""
Import-boundary enforcement for the payroll packages.

1. Kernel purity       -- payroll_kernel/** may not import engines or config.
2. Engine purity       -- payroll_engines/** may not import config, DB
                          drivers or an ORM.
3. Engine no-impure    -- payroll_engines/** may not read the wall clock
                          or the environment.
4. Config centralisation -- only payroll_config/ may import
                          payroll_config.loader.

All scanning is done via AST -- these tests are read-only.
"""

import ast
from pathlib import Path

_ROOT = Path(__file__).resolve().parents[2]

_SOURCE_PACKAGES = ("payroll_kernel", "payroll_engines", "payroll_config")


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _python_files(package: str) -> list[Path]:
    """Return all .py files under *package*, sorted for deterministic order."""
    return sorted((_ROOT / package).rglob("*.py"))


def _parse(filepath: Path) -> ast.AST | None:
    try:
        return ast.parse(filepath.read_text(), filename=str(filepath))
    except (SyntaxError, UnicodeDecodeError):
        return None


def _extract_imports(filepath: Path) -> list[tuple[int, str]]:
    """Return (line_number, module_string) for every import in *filepath*."""
    tree = _parse(filepath)
    if tree is None:
        return []

    results: list[tuple[int, str]] = []
    for node in ast.walk(tree):
        if isinstance(node, ast.Import):
            for alias in node.names:
                results.append((node.lineno, alias.name))
        elif isinstance(node, ast.ImportFrom):
            if node.module:
                results.append((node.lineno, node.module))
    return results


def _extract_attribute_calls(filepath: Path) -> list[tuple[int, str]]:
    """Return (line_number, 'receiver.attr') for two-level attribute references."""
    tree = _parse(filepath)
    if tree is None:
        return []

    return [
        (node.lineno, f"{node.value.id}.{node.attr}")
        for node in ast.walk(tree)
        if isinstance(node, ast.Attribute) and isinstance(node.value, ast.Name)
    ]


def _matches_any(module: str, prefixes: tuple[str, ...]) -> bool:
    """True if *module* equals or is a child of any prefix."""
    return any(module == p or module.startswith(f"{p}.") for p in prefixes)


def _rel(filepath: Path) -> str:
    return filepath.relative_to(_ROOT).as_posix()


# ---------------------------------------------------------------------------
# Tests
# ---------------------------------------------------------------------------

class TestPackagesPresent:

    def test_source_packages_found(self):
        for package in _SOURCE_PACKAGES:
            assert _python_files(package), f"no sources found under {package}/"


class TestKernelPurity:
    """payroll_kernel/** is the bottom layer."""

    FORBIDDEN_PREFIXES = ("payroll_engines", "payroll_config", "yaml")

    def test_kernel_has_no_upward_imports(self):
        violations = [
            f"  {_rel(f)}:{lineno} imports '{module}'"
            for f in _python_files("payroll_kernel")
            for lineno, module in _extract_imports(f)
            if _matches_any(module, self.FORBIDDEN_PREFIXES)
        ]

        assert not violations, (
            "Kernel purity violation -- payroll_kernel/** must not import "
            "engines or config:\n" + "\n".join(violations)
        )


class TestEnginePurity:
    """payroll_engines/** receive rules as parameters and touch no storage."""

    FORBIDDEN_PREFIXES = (
        "payroll_config",
        "yaml",
        "sqlalchemy",
        "psycopg",
        "psycopg2",
        "sqlite3",
    )

    def test_engine_files_have_no_forbidden_imports(self):
        violations = [
            f"  {_rel(f)}:{lineno} imports '{module}'"
            for f in _python_files("payroll_engines")
            for lineno, module in _extract_imports(f)
            if _matches_any(module, self.FORBIDDEN_PREFIXES)
        ]

        assert not violations, (
            "Engine purity violation -- payroll_engines/** must not import "
            "config or storage:\n" + "\n".join(violations)
        )


class TestEngineNoImpureFunctions:
    """Forbidden: datetime.now, datetime.utcnow, date.today, time.time,
    os.environ, os.getenv.  Allowed (observational-only): time.monotonic."""

    FORBIDDEN_CALLS = frozenset({
        "datetime.now",
        "datetime.utcnow",
        "date.today",
        "time.time",
        "os.environ",
        "os.getenv",
    })

    def test_no_impure_calls_in_engines(self):
        violations = [
            f"  {_rel(f)}:{lineno} calls '{qualname}'"
            for f in _python_files("payroll_engines")
            for lineno, qualname in _extract_attribute_calls(f)
            if qualname in self.FORBIDDEN_CALLS
        ]

        assert not violations, (
            "Engine impurity violation -- payroll_engines/** must not read "
            "the clock or the environment:\n" + "\n".join(violations)
        )


class TestConfigCentralization:
    """Only payroll_config/ may import payroll_config.loader."""

    def test_no_external_import_of_loader(self):
        violations = [
            f"  {_rel(f)}:{lineno} imports '{module}'"
            for package in ("payroll_kernel", "payroll_engines")
            for f in _python_files(package)
            for lineno, module in _extract_imports(f)
            if _matches_any(module, ("payroll_config.loader",))
        ]

        assert not violations, "\n".join(violations)
