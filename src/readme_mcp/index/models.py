"""Typed models for the convention document index."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from readme_mcp.index.paths import directory_of, split_segments

ROOT_SCOPE = "root"

Relevance = Literal["root", "direct", "parent"]


def coverage_patterns(directory: str) -> tuple[str, ...]:
    """Glob patterns claimed by a document living in ``directory``."""
    if not directory:
        return ("**/*",)
    return (f"{directory}/**/*", f"{directory}/*")


@dataclass(slots=True, frozen=True)
class ReadmeEntry:
    """One discovered convention document."""

    path: str
    scope: str
    level: int
    content: str | None = None

    @property
    def directory(self) -> str:
        """Containing directory; empty for the project root."""
        return directory_of(self.path)

    @property
    def patterns(self) -> tuple[str, ...]:
        """Coverage globs, always derived from ``path``."""
        return coverage_patterns(self.directory)

    @property
    def is_root(self) -> bool:
        return not self.directory

    @classmethod
    def from_path(cls, path: str, content: str | None = None) -> ReadmeEntry:
        """Build an entry, deriving scope and level from the path."""
        directory = directory_of(path)
        segments = split_segments(directory)
        return cls(
            path=path,
            scope="-".join(segments) if segments else ROOT_SCOPE,
            level=len(segments),
            content=content,
        )

    def to_dict(self, include_content: bool = False) -> dict[str, object]:
        payload: dict[str, object] = {
            "path": self.path,
            "scope": self.scope,
            "level": self.level,
            "patterns": list(self.patterns),
        }
        if include_content:
            payload["content"] = self.content
        return payload


@dataclass(slots=True, frozen=True)
class ReadmeIndex:
    """Immutable snapshot of all convention documents under a root."""

    project_root: str
    entries: tuple[ReadmeEntry, ...]
    built_at: str
    warnings: tuple[str, ...] = ()

    def get(self, path: str) -> ReadmeEntry | None:
        """Return the entry with the given project-relative path."""
        for entry in self.entries:
            if entry.path == path:
                return entry
        return None


@dataclass(slots=True, frozen=True)
class ReadmeContext:
    """One applicable document for a resolved target path."""

    path: str
    content: str
    relevance: Relevance
    distance: int
