"""Resolve the convention documents that apply to a target path."""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

from readme_mcp.index.models import ReadmeContext, ReadmeEntry, ReadmeIndex, Relevance
from readme_mcp.index.paths import (
    directory_distance,
    is_ancestor_or_equal,
    matches_glob,
    normalize_path,
    target_directory,
)

RELEVANCE_ORDER: dict[str, int] = {"direct": 0, "parent": 1, "root": 2}


def resolve_for(
    index: ReadmeIndex,
    target_path: str,
    include_root: bool = True,
) -> list[ReadmeContext]:
    """Return applicable documents for ``target_path``, closest first.

    The target may name a file (its parent directory is used) or a
    directory, and does not need to exist on disk.
    """
    normalized = normalize_path(target_path)
    target_dir = target_directory(target_path)
    contexts: list[ReadmeContext] = []
    for entry in index.entries:
        if not _matches(entry, normalized, target_dir):
            continue
        if entry.is_root and not include_root:
            continue
        contexts.append(
            ReadmeContext(
                path=entry.path,
                content=read_entry_content(index, entry),
                relevance=classify_relevance(entry, target_dir),
                distance=directory_distance(target_dir, entry.directory),
            )
        )
    contexts.sort(key=lambda item: (item.distance, RELEVANCE_ORDER[item.relevance], item.path))
    return contexts


def resolve_for_many(
    index: ReadmeIndex,
    paths: Iterable[str],
    include_root: bool = True,
) -> dict[str, list[ReadmeContext]]:
    """Resolve each path independently, keyed by the caller's path string."""
    return {path: resolve_for(index, path, include_root=include_root) for path in paths}


def classify_relevance(entry: ReadmeEntry, target_dir: str) -> Relevance:
    if entry.is_root:
        return "root"
    if entry.directory == target_dir:
        return "direct"
    return "parent"


def read_entry_content(index: ReadmeIndex, entry: ReadmeEntry) -> str:
    """Cached body when present, otherwise a fresh read from disk."""
    if entry.content is not None:
        return entry.content
    try:
        return (Path(index.project_root) / entry.path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError):
        return f"[Error: Could not read {entry.path}]"


def _matches(entry: ReadmeEntry, normalized_target: str, target_dir: str) -> bool:
    if is_ancestor_or_equal(entry.directory, target_dir):
        return True
    return any(matches_glob(normalized_target, pattern) for pattern in entry.patterns)


class ContextRouter:
    """Holds an index snapshot and answers context lookups against it."""

    def __init__(self, index: ReadmeIndex) -> None:
        self._index = index

    @property
    def index(self) -> ReadmeIndex:
        return self._index

    def update_index(self, index: ReadmeIndex) -> None:
        """Swap in a freshly scanned snapshot."""
        self._index = index

    def context_for(self, target_path: str, include_root: bool = True) -> list[ReadmeContext]:
        return resolve_for(self._index, target_path, include_root=include_root)

    def context_for_many(
        self, paths: Iterable[str], include_root: bool = True
    ) -> dict[str, list[ReadmeContext]]:
        return resolve_for_many(self._index, paths, include_root=include_root)


def format_context_prompt(target_path: str, contexts: list[ReadmeContext]) -> str:
    """Render resolved contexts as a markdown briefing for an assistant."""
    lines = [f"## Project Context for: {target_path}", ""]
    if not contexts:
        lines.extend(
            [
                "**No convention documents apply to this path.**",
                "",
                "Consider creating one to document:",
                "- Project architecture and conventions",
                "- Coding standards",
                "- Testing requirements",
                "- Common patterns to follow",
                "",
                "Use the `readme.init` tool to generate a starter document.",
            ]
        )
        return "\n".join(lines) + "\n"

    headings = {
        "root": "Root Conventions",
        "direct": "Direct Module Conventions",
        "parent": "Parent Module Conventions",
    }
    for context in contexts:
        lines.append(f"### {headings[context.relevance]} ({context.path})")
        lines.append("")
        lines.append(context.content.rstrip("\n"))
        lines.append("")
    lines.extend(
        [
            "---",
            "**Important:**",
            "- Follow the above conventions when making changes",
            "- When establishing new conventions: update the document first, "
            "then get context, then write code",
            "- When discovering patterns in existing code: document them afterward",
        ]
    )
    return "\n".join(lines) + "\n"
