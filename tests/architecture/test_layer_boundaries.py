"""
Import-boundary enforcement.

1. Kernel independence  -- lcms_kernel/** never imports lcms_ingestion or lcms_config.
2. Domain purity        -- lcms_kernel/domain/** never imports SQLAlchemy, db, models or services.
3. Adapter isolation    -- lcms_ingestion/adapters/** is file I/O only (no DB, no kernel).
4. Selector read-only   -- lcms_kernel/selectors/** never imports services.

All scanning is done via AST -- these tests are read-only.
"""

import ast
import glob
from pathlib import Path

ROOT = Path(__file__).resolve().parent.parent.parent


def _python_files(root: str) -> list[str]:
    """Return all .py files under *root*, sorted for deterministic order."""
    return sorted(glob.glob(str(ROOT / root / "**" / "*.py"), recursive=True))


def _extract_imports(filepath: str) -> list[tuple[int, str]]:
    """Return (line_number, module_string) for every import in *filepath*."""
    tree = ast.parse(Path(filepath).read_text(), filename=filepath)
    results: list[tuple[int, str]] = []
    for node in ast.walk(tree):
        if isinstance(node, ast.Import):
            for alias in node.names:
                results.append((node.lineno, alias.name))
        elif isinstance(node, ast.ImportFrom):
            if node.module:
                results.append((node.lineno, node.module))
    return results


def _matches_any(module: str, prefixes: tuple[str, ...]) -> bool:
    """True if *module* equals or is a child of any prefix."""
    return any(module == p or module.startswith(f"{p}.") for p in prefixes)


def _violations(root: str, forbidden: tuple[str, ...]) -> list[str]:
    found = []
    for path in _python_files(root):
        for lineno, module in _extract_imports(path):
            if _matches_any(module, forbidden):
                found.append(f"{Path(path).relative_to(ROOT)}:{lineno} imports {module}")
    return found


def test_files_are_scanned():
    assert _python_files("lcms_kernel")
    assert _python_files("lcms_ingestion/adapters")


def test_kernel_does_not_import_outer_layers():
    assert _violations("lcms_kernel", ("lcms_ingestion", "lcms_config")) == []


def test_domain_is_pure():
    forbidden = (
        "sqlalchemy",
        "lcms_kernel.db",
        "lcms_kernel.models",
        "lcms_kernel.services",
        "lcms_kernel.selectors",
    )
    assert _violations("lcms_kernel/domain", forbidden) == []


def test_adapters_are_file_io_only():
    assert _violations("lcms_ingestion/adapters", ("sqlalchemy", "lcms_kernel", "lcms_config")) == []


def test_selectors_do_not_import_services():
    assert _violations("lcms_kernel/selectors", ("lcms_kernel.services",)) == []
