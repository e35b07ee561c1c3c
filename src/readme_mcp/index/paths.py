"""Pure path arithmetic over forward-slash project-relative paths.

The project root directory is represented by the empty string. Every
function here is side-effect free and never touches the filesystem.
"""

from __future__ import annotations

import fnmatch
from pathlib import PurePosixPath

ROOT_DIRECTORY = ""


def normalize_path(path: str) -> str:
    """Normalize separators and drop empty or '.' segments."""
    parts = [part for part in path.replace("\\", "/").split("/") if part not in ("", ".")]
    return "/".join(parts)


def split_segments(directory: str) -> list[str]:
    """Split a normalized directory into segments; root yields no segments."""
    if not directory:
        return []
    return directory.split("/")


def directory_of(path: str) -> str:
    """Return the containing directory of a normalized path."""
    normalized = normalize_path(path)
    if "/" not in normalized:
        return ROOT_DIRECTORY
    return normalized.rsplit("/", 1)[0]


def looks_like_file(path: str) -> bool:
    """Return True when the final segment carries a file-type suffix."""
    if path.replace("\\", "/").endswith("/"):
        return False
    normalized = normalize_path(path)
    if not normalized:
        return False
    name = normalized.rsplit("/", 1)[-1]
    return bool(PurePosixPath(name).suffix)


def target_directory(path: str) -> str:
    """Directory used for matching: the parent of a file, or the path itself."""
    if looks_like_file(path):
        return directory_of(path)
    return normalize_path(path)


def is_ancestor_or_equal(ancestor: str, directory: str) -> bool:
    """Return True when ``ancestor`` contains or equals ``directory``."""
    if not ancestor:
        return True
    return directory == ancestor or directory.startswith(f"{ancestor}/")


def common_depth(first: str, second: str) -> int:
    """Number of leading segments two directories share."""
    depth = 0
    for left, right in zip(split_segments(first), split_segments(second)):
        if left != right:
            break
        depth += 1
    return depth


def directory_distance(target_dir: str, entry_dir: str) -> int:
    """Directory levels separating a target directory from an entry directory."""
    target_parts = split_segments(target_dir)
    if not entry_dir:
        return len(target_parts)
    if target_dir == entry_dir:
        return 0
    entry_parts = split_segments(entry_dir)
    if is_ancestor_or_equal(entry_dir, target_dir):
        return len(target_parts) - len(entry_parts)
    shared = common_depth(target_dir, entry_dir)
    return (len(target_parts) - shared) + (len(entry_parts) - shared)


def matches_glob(path: str, pattern: str) -> bool:
    """Match a relative path against a glob, also trying its '/'-anchored form.

    Matching is plain ``fnmatch``: ``*`` also crosses ``/``, so ``*.md`` matches
    documents at every depth and ``apps/*`` matches everything below ``apps/``.
    """
    return fnmatch.fnmatchcase(path, pattern) or fnmatch.fnmatchcase(f"/{path}", pattern)


def should_exclude(relative_path: str, exclude_globs: tuple[str, ...]) -> bool:
    """Return True when a path matches configured ignore globs."""
    return any(matches_glob(relative_path, pattern) for pattern in exclude_globs)
