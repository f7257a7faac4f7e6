import ast
import sys
from pathlib import Path

import pytest

PASSKIT_DIR = Path(__file__).resolve().parents[1] / "passkit"


def _imported_roots(path: Path) -> set[str]:
    tree = ast.parse(path.read_text(encoding="utf-8"), filename=str(path))
    roots: set[str] = set()
    for node in ast.walk(tree):
        if isinstance(node, ast.Import):
            roots.update(alias.name.split(".")[0] for alias in node.names)
        elif isinstance(node, ast.ImportFrom) and node.level == 0 and node.module:
            roots.add(node.module.split(".")[0])
    return roots


@pytest.mark.parametrize(
    "path", sorted(PASSKIT_DIR.rglob("*.py")), ids=lambda p: str(p.relative_to(PASSKIT_DIR))
)
def test_passkit_modules_only_import_stdlib_and_passkit(path):
    allowed = set(sys.stdlib_module_names) | {"passkit", "__future__"}

    outside = sorted(_imported_roots(path) - allowed)

    assert outside == [], f"{path.name} imports {outside}"
