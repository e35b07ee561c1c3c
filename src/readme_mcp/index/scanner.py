"""Deterministic discovery of convention documents."""

from __future__ import annotations

import os
from dataclasses import dataclass
from datetime import UTC, datetime
from pathlib import Path

from readme_mcp.config import ScanOptions
from readme_mcp.index.models import ReadmeEntry, ReadmeIndex
from readme_mcp.index.paths import should_exclude


class ScanRootNotFoundError(FileNotFoundError):
    """Raised when the scan root is missing or is not a directory."""

    def __init__(self, root: Path) -> None:
        super().__init__(f"Project root not found: {root}")
        self.root = root


@dataclass(slots=True, frozen=True)
class _ScanResult:
    """Matched documents and per-file degradations of one walk."""

    paths: tuple[str, ...]
    warnings: tuple[str, ...]


def scan(root: Path | str, options: ScanOptions | None = None) -> ReadmeIndex:
    """Scan ``root`` for convention documents and return a fresh index."""
    resolved = Path(root).resolve()
    if not resolved.is_dir():
        raise ScanRootNotFoundError(resolved)
    opts = options or ScanOptions()

    walked = _find_documents(
        root=resolved,
        filename=opts.readme_filename,
        exclude_globs=opts.exclude_globs,
        excluded_dir_names=_excluded_dir_names(opts.exclude_globs),
    )
    warnings = list(walked.warnings)
    entries: list[ReadmeEntry] = []
    for relative in walked.paths:
        content: str | None = None
        if opts.cache_content:
            try:
                content = (resolved / relative).read_text(encoding="utf-8")
            except (OSError, UnicodeDecodeError) as error:
                warnings.append(f"Failed to read {relative}: {error}")
        entries.append(ReadmeEntry.from_path(relative, content=content))

    entries.sort(key=lambda item: (item.level, item.path))
    return ReadmeIndex(
        project_root=str(resolved),
        entries=tuple(entries),
        built_at=_utc_now_iso(),
        warnings=tuple(warnings),
    )


class ReadmeScanner:
    """Scanner bound to one project root and option set."""

    def __init__(self, project_root: Path | str, options: ScanOptions | None = None) -> None:
        self._project_root = Path(project_root)
        self._options = options or ScanOptions()

    @property
    def project_root(self) -> Path:
        return self._project_root

    @property
    def options(self) -> ScanOptions:
        return self._options

    def scan(self) -> ReadmeIndex:
        return scan(self._project_root, self._options)

    def refresh(self) -> ReadmeIndex:
        """Full re-scan with the same parameters."""
        return self.scan()


def _excluded_dir_names(exclude_globs: tuple[str, ...]) -> set[str]:
    """Extract directory-name prunes from **/name/** glob patterns."""
    output: set[str] = set()
    for pattern in exclude_globs:
        if not pattern.startswith("**/") or not pattern.endswith("/**"):
            continue
        name = pattern[3:-3].strip("/")
        if not name:
            continue
        if any(char in name for char in "*?[]{}/"):
            continue
        output.add(name)
    return output


def _find_documents(
    *,
    root: Path,
    filename: str,
    exclude_globs: tuple[str, ...],
    excluded_dir_names: set[str],
) -> _ScanResult:
    """Walk the tree in sorted order, pruning excluded directories."""
    found: list[str] = []
    warnings: list[str] = []
    stack: list[Path] = [root]
    while stack:
        current = stack.pop()
        try:
            with os.scandir(current) as entries:
                ordered_entries = sorted(entries, key=lambda item: item.name)
        except OSError as error:
            warnings.append(f"Failed to list {current.relative_to(root).as_posix()}: {error}")
            continue
        for entry in reversed(ordered_entries):
            full_path = Path(entry.path)
            relative = full_path.relative_to(root).as_posix()
            if entry.is_dir(follow_symlinks=False):
                if entry.name in excluded_dir_names or should_exclude(
                    f"{relative}/", exclude_globs
                ):
                    continue
                stack.append(full_path)
                continue
            if entry.name != filename or not entry.is_file(follow_symlinks=False):
                continue
            if should_exclude(relative, exclude_globs):
                continue
            found.append(relative)
    return _ScanResult(paths=tuple(sorted(found)), warnings=tuple(warnings))


def _utc_now_iso() -> str:
    return datetime.now(tz=UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")
