"""Hexagonal import rules for the pushwatch package.

- domain/ imports nothing from other pushwatch layers
- config/ imports from domain/ only
- application/ imports from domain/ and config/
- infrastructure/ imports from domain/, config/ and application/
- bootstrap/ and cli may import anything
"""

from __future__ import annotations

import ast
from pathlib import Path

import pytest

import pushwatch

PACKAGE_ROOT = Path(pushwatch.__file__).parent

ALLOWED_IMPORTS: dict[str, set[str]] = {
    "domain": set(),
    "config": {"domain"},
    "application": {"domain", "config"},
    "infrastructure": {"domain", "config", "application"},
}


def _imported_layers(path: Path) -> set[str]:
    """pushwatch layers imported by a module."""
    tree = ast.parse(path.read_text(encoding="utf-8"))
    layers: set[str] = set()
    for node in ast.walk(tree):
        if isinstance(node, ast.ImportFrom) and node.module:
            names = [node.module]
        elif isinstance(node, ast.Import):
            names = [alias.name for alias in node.names]
        else:
            continue
        for name in names:
            parts = name.split(".")
            if parts[0] == "pushwatch" and len(parts) > 1:
                layers.add(parts[1])
    return layers


def _modules(layer: str) -> list[Path]:
    return sorted((PACKAGE_ROOT / layer).rglob("*.py"))


class TestLayerBoundaries:
    """Each layer only reaches inward."""

    @pytest.mark.parametrize("layer", sorted(ALLOWED_IMPORTS))
    def test_layer_imports(self, layer: str) -> None:
        modules = _modules(layer)
        assert modules, f"no modules found for layer {layer}"

        violations = []
        for path in modules:
            forbidden = _imported_layers(path) - ALLOWED_IMPORTS[layer] - {layer}
            if forbidden:
                violations.append(f"{path.relative_to(PACKAGE_ROOT)}: {sorted(forbidden)}")

        assert violations == []

    def test_detects_outward_import(self, tmp_path: Path) -> None:
        module = tmp_path / "bad.py"
        module.write_text(
            "from pushwatch.infrastructure.stubs import NotificationDeliveryStub\n",
            encoding="utf-8",
        )

        assert _imported_layers(module) == {"infrastructure"}
