"""Path resolution helpers for project-scoped document access."""

from __future__ import annotations

import re
from pathlib import Path
from typing import Final

WINDOWS_ABSOLUTE_PATTERN: Final[re.Pattern[str]] = re.compile(r"^[a-zA-Z]:[\\/]")


class PathBlockedError(Exception):
    """Raised when a requested path escapes the project root."""

    def __init__(self, reason: str, hint: str) -> None:
        super().__init__(reason)
        self.reason = reason
        self.hint = hint


def _normalize_candidate(candidate: str) -> tuple[str, bool]:
    """Normalize separators and report whether the input is absolute-style."""
    normalized = candidate.replace("\\", "/")
    if normalized.startswith("/"):
        return normalized, True
    if WINDOWS_ABSOLUTE_PATTERN.match(normalized):
        return normalized, True
    return normalized, False


def resolve_project_path(project_root: Path, candidate: str) -> Path:
    """Resolve a document or directory path under the project root."""
    root = project_root.resolve()
    normalized, is_absolute_style = _normalize_candidate(candidate)

    if not normalized.strip():
        raise PathBlockedError(
            reason="Path is empty.",
            hint="Provide a project-relative path such as 'apps/web/AI_README.md'.",
        )

    if is_absolute_style:
        resolved_absolute = Path(normalized).resolve(strict=False)
        if not resolved_absolute.is_relative_to(root):
            raise PathBlockedError(
                reason="Absolute path is outside project_root.",
                hint="Use a path located under the configured project root.",
            )
        return resolved_absolute

    parts = [part for part in normalized.split("/") if part not in ("", ".")]
    if any(part == ".." for part in parts):
        raise PathBlockedError(
            reason="Path traversal is blocked.",
            hint="Remove '..' segments and use a project-relative path.",
        )

    resolved = (root / Path(*parts)).resolve(strict=False) if parts else root
    if not resolved.is_relative_to(root):
        raise PathBlockedError(
            reason="Resolved path escapes project_root.",
            hint="Use a path located under the configured project root.",
        )
    return resolved


def project_relative(project_root: Path, resolved_path: Path) -> str:
    """Return the forward-slash project-relative form of a resolved path."""
    relative = resolved_path.relative_to(project_root.resolve()).as_posix()
    return "" if relative == "." else relative
