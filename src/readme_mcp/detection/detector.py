"""Lightweight project metadata heuristics used to seed new documents."""

from __future__ import annotations

import json
import tomllib
from dataclasses import asdict, dataclass, field
from pathlib import Path

SOURCE_DIR_NAMES = ("src", "lib", "app", "pages", "components", "api", "server", "client")
TEST_DIR_NAMES = ("test", "tests", "__tests__", "spec")
MONOREPO_DIR_NAMES = ("apps", "packages", "modules")

# Checked in order; the first dependency present wins.
FRAMEWORKS = (
    ("react", "React"),
    ("vue", "Vue"),
    ("@angular/core", "Angular"),
    ("next", "Next.js"),
    ("express", "Express"),
    ("@nestjs/core", "NestJS"),
)
LOCK_FILES = (
    ("pnpm-lock.yaml", "pnpm"),
    ("yarn.lock", "yarn"),
    ("bun.lockb", "bun"),
    ("package-lock.json", "npm"),
)
LANGUAGE_MARKERS = (
    (("requirements.txt", "setup.py", "pyproject.toml"), "Python"),
    (("go.mod",), "Go"),
    (("Cargo.toml",), "Rust"),
    (("pom.xml", "build.gradle"), "Java"),
)


@dataclass(slots=True)
class ProjectInfo:
    """Detected project characteristics."""

    project_name: str = "Project"
    project_type: str = "unknown"
    language: str = "JavaScript"
    framework: str | None = None
    package_manager: str | None = None
    has_tests: bool = False
    main_dirs: list[str] = field(default_factory=list)
    dependencies: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, object]:
        return asdict(self)


def detect_project(target: Path) -> ProjectInfo:
    """Inspect manifests and top-level directories of ``target``."""
    info = ProjectInfo()
    package_json = target / "package.json"
    if package_json.is_file():
        _analyze_package_json(target, package_json, info)

    for markers, language in LANGUAGE_MARKERS:
        if any((target / marker).exists() for marker in markers):
            info.language = language

    pyproject = target / "pyproject.toml"
    if pyproject.is_file() and info.project_name == "Project":
        _analyze_pyproject(pyproject, info)

    _analyze_structure(target, info)
    return info


def _analyze_package_json(target: Path, path: Path, info: ProjectInfo) -> None:
    try:
        manifest = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError):
        return
    if not isinstance(manifest, dict):
        return

    dependencies = _as_dict(manifest.get("dependencies"))
    dev_dependencies = _as_dict(manifest.get("devDependencies"))
    name = manifest.get("name")
    if isinstance(name, str) and name:
        info.project_name = name
    if "typescript" in dependencies or "typescript" in dev_dependencies:
        info.language = "TypeScript"
    for package, framework in FRAMEWORKS:
        if package in dependencies or package in dev_dependencies:
            info.framework = framework
            break

    for lock_file, manager in LOCK_FILES:
        if (target / lock_file).exists():
            info.package_manager = manager
            break

    if manifest.get("workspaces") or (target / "pnpm-workspace.yaml").exists():
        info.project_type = "monorepo"
    elif manifest.get("main") or manifest.get("exports"):
        info.project_type = "library"
    else:
        info.project_type = "application"
    info.dependencies = list(dependencies)[:5]


def _analyze_pyproject(path: Path, info: ProjectInfo) -> None:
    try:
        with path.open("rb") as handle:
            payload = tomllib.load(handle)
    except (OSError, tomllib.TOMLDecodeError):
        return
    project = _as_dict(payload.get("project"))
    name = project.get("name")
    if isinstance(name, str) and name:
        info.project_name = name
    raw_dependencies = project.get("dependencies")
    if isinstance(raw_dependencies, list) and not info.dependencies:
        info.dependencies = [str(item) for item in raw_dependencies[:5]]


def _analyze_structure(target: Path, info: ProjectInfo) -> None:
    try:
        children = sorted(target.iterdir(), key=lambda item: item.name)
    except OSError:
        return
    for child in children:
        try:
            if not child.is_dir():
                continue
        except OSError:
            continue
        name = child.name
        if name in SOURCE_DIR_NAMES:
            info.main_dirs.append(name)
        if name in TEST_DIR_NAMES:
            info.has_tests = True
        if name in MONOREPO_DIR_NAMES:
            info.project_type = "monorepo"
            info.main_dirs.append(name)


def _as_dict(value: object) -> dict[str, object]:
    return value if isinstance(value, dict) else {}
