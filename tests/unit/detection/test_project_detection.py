from __future__ import annotations

import json
from pathlib import Path

from readme_mcp.detection import detect_project


def test_empty_directory_uses_defaults(tmp_path: Path) -> None:
    info = detect_project(tmp_path)

    assert info.project_name == "Project"
    assert info.project_type == "unknown"
    assert info.framework is None
    assert info.package_manager is None
    assert info.main_dirs == []


def test_package_json_library_with_lock_file(tmp_path: Path) -> None:
    (tmp_path / "package.json").write_text(
        json.dumps(
            {
                "name": "@acme/ui",
                "main": "dist/index.js",
                "dependencies": {
                    "vue": "3",
                    "a": "1",
                    "b": "1",
                    "c": "1",
                    "d": "1",
                    "e": "1",
                },
            }
        ),
        encoding="utf-8",
    )
    (tmp_path / "pnpm-lock.yaml").write_text("", encoding="utf-8")

    info = detect_project(tmp_path)

    assert info.project_name == "@acme/ui"
    assert info.project_type == "library"
    assert info.framework == "Vue"
    assert info.package_manager == "pnpm"
    assert info.dependencies == ["vue", "a", "b", "c", "d"]


def test_workspaces_mark_monorepo(tmp_path: Path) -> None:
    (tmp_path / "package.json").write_text(
        json.dumps({"name": "root", "workspaces": ["apps/*"]}), encoding="utf-8"
    )
    (tmp_path / "apps").mkdir()
    (tmp_path / "tests").mkdir()

    info = detect_project(tmp_path)

    assert info.project_type == "monorepo"
    assert info.has_tests is True
    assert info.main_dirs == ["apps"]


def test_pyproject_sets_python_language_and_name(tmp_path: Path) -> None:
    (tmp_path / "pyproject.toml").write_text(
        '[project]\nname = "svc"\ndependencies = ["httpx", "pydantic"]\n', encoding="utf-8"
    )

    info = detect_project(tmp_path)

    assert info.language == "Python"
    assert info.project_name == "svc"
    assert info.dependencies == ["httpx", "pydantic"]


def test_marker_files_select_language(tmp_path: Path) -> None:
    (tmp_path / "go.mod").write_text("module example.com/x\n", encoding="utf-8")

    assert detect_project(tmp_path).language == "Go"


def test_malformed_manifest_is_ignored(tmp_path: Path) -> None:
    (tmp_path / "package.json").write_text("{not json", encoding="utf-8")

    info = detect_project(tmp_path)

    assert info.project_name == "Project"
    assert info.to_dict()["language"] == "JavaScript"
