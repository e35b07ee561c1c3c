"""Create starter convention documents."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from readme_mcp.detection import ProjectInfo, detect_project

# Documents shorter than this (ignoring surrounding whitespace) count as empty.
MIN_MEANINGFUL_CHARS = 50

BASIC_TEMPLATE = """# {project_name}

## Architecture

- [Describe the high-level structure]

## Coding Conventions

- [Add naming and style rules]

## Testing

- Run: [Add test command]

## Important Notes

- [Add critical information assistants should know]
"""


@dataclass(slots=True, frozen=True)
class InitResult:
    """Outcome of a document initialization request."""

    success: bool
    path: str
    action: str | None
    message: str
    project_info: dict[str, object] | None = None


def init_readme(
    target_dir: Path,
    filename: str,
    project_name: str | None = None,
    overwrite: bool = False,
    smart: bool = True,
    stop_at: Path | None = None,
) -> InitResult:
    """Write a starter document into ``target_dir``.

    Existing documents with real content are kept unless ``overwrite`` is set.
    """
    document = target_dir / filename
    if not target_dir.is_dir():
        return InitResult(
            success=False,
            path=str(document),
            action=None,
            message=f"Target directory does not exist: {target_dir}",
        )

    exists = document.is_file()
    is_empty = False
    if exists:
        try:
            existing = document.read_text(encoding="utf-8", errors="replace")
        except OSError as error:
            return InitResult(
                success=False,
                path=str(document),
                action=None,
                message=f"Cannot read {document}: {error}",
            )
        is_empty = len(existing.strip()) < MIN_MEANINGFUL_CHARS
        if not is_empty and not overwrite:
            return InitResult(
                success=False,
                path=str(document),
                action=None,
                message=f"{filename} already exists at {document}. Use overwrite to replace it.",
            )

    info: ProjectInfo | None = None
    if smart:
        info = detect_project(target_dir)
        if project_name:
            info.project_name = project_name
        parent = find_parent_document(target_dir, filename, stop_at=stop_at)
        content = render_smart_document(info, target_dir, parent)
    else:
        content = BASIC_TEMPLATE.format(project_name=project_name or "Project Name")

    try:
        document.write_text(content, encoding="utf-8")
    except OSError as error:
        return InitResult(
            success=False,
            path=str(document),
            action=None,
            message=f"Cannot write {document}: {error}",
        )
    action = "created"
    if exists:
        action = "filled" if is_empty else "overwritten"
    return InitResult(
        success=True,
        path=str(document),
        action=action,
        message=f"Successfully {action} {filename} at {document}.",
        project_info=info.to_dict() if info is not None else None,
    )


def find_parent_document(
    target_dir: Path, filename: str, stop_at: Path | None = None
) -> Path | None:
    """Nearest ancestor directory holding a non-empty document, if any."""
    resolved = target_dir.resolve()
    boundary = stop_at.resolve() if stop_at is not None else None
    for ancestor in resolved.parents:
        if boundary is not None and not ancestor.is_relative_to(boundary):
            break
        candidate = ancestor / filename
        if candidate.is_file():
            text = candidate.read_text(encoding="utf-8", errors="replace")
            if len(text.strip()) > MIN_MEANINGFUL_CHARS:
                return ancestor
    return None


def render_smart_document(info: ProjectInfo, target_dir: Path, parent: Path | None) -> str:
    lines = [f"# {info.project_name}", ""]
    if parent is not None:
        relative = target_dir.resolve().relative_to(parent).as_posix()
        lines.extend([f"> Extends the parent document with {relative}-specific conventions.", ""])

    lines.extend(["## Architecture", ""])
    lines.append(f"- **Type:** {info.project_type}")
    lines.append(f"- **Language:** {info.language}")
    if info.framework:
        lines.append(f"- **Framework:** {info.framework}")
    lines.append("")

    if info.main_dirs:
        lines.extend(["## Directory Structure", ""])
        lines.extend(f"- {name}/ - [Add description]" for name in info.main_dirs)
        lines.append("")

    lines.extend(["## Coding Conventions", "", "### File Naming"])
    lines.extend(["- [Add your file naming conventions here]", "", "### Code Style"])
    if info.language == "TypeScript":
        lines.extend(["- Use TypeScript strict mode", "- Prefer interfaces for object shapes"])
    elif info.language == "Python":
        lines.extend(["- Follow PEP 8", "- Use type hints"])
    lines.extend(["- [Add more style guidelines]", ""])

    if info.framework:
        lines.append(f"### {info.framework} Conventions")
        if info.framework == "React":
            lines.extend(
                [
                    "- Component naming: PascalCase",
                    "- Hooks naming: use prefix 'use'",
                    "- Prefer functional components",
                ]
            )
        elif info.framework == "Vue":
            lines.extend(["- Component naming: PascalCase or kebab-case", "- Use Composition API"])
        lines.append("")

    lines.extend(["## Testing", ""])
    if info.has_tests:
        lines.append("- Tests are located in test directories")
    if info.package_manager:
        lines.append(f"- Run: `{info.package_manager} test`")
    else:
        lines.append("- Run: [Add test command]")
    lines.extend(['- Coverage target: [Add target or "not enforced"]', ""])

    if info.dependencies:
        lines.extend(["## Key Dependencies", ""])
        lines.extend(f"- {name} - [Add purpose]" for name in info.dependencies)
        lines.append("")

    lines.extend(["## Development", ""])
    if info.package_manager:
        manager = info.package_manager
        lines.append(f"- Install: `{manager} install`")
        lines.append(f"- Dev: `{manager} run dev`")
        lines.append(f"- Build: `{manager} run build`")
    lines.append("")

    lines.extend(
        [
            "## Important Notes",
            "",
            "- [Add critical information assistants should know]",
            "- [Security considerations]",
            "- [Performance considerations]",
        ]
    )
    return "\n".join(lines) + "\n"
