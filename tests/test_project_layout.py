from __future__ import annotations

from pathlib import Path


def test_required_package_paths_exist() -> None:
    root = Path(__file__).resolve().parents[1]
    required = [
        "src/readme_mcp/server.py",
        "src/readme_mcp/config.py",
        "src/readme_mcp/tools/__init__.py",
        "src/readme_mcp/index/__init__.py",
        "src/readme_mcp/editing/__init__.py",
        "src/readme_mcp/validation/__init__.py",
        "src/readme_mcp/detection/__init__.py",
        "src/readme_mcp/security/__init__.py",
        "src/readme_mcp/logging/__init__.py",
    ]
    for rel in required:
        assert (root / rel).exists(), rel
