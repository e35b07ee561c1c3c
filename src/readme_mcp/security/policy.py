"""Document policy and request limits for safe edits."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


@dataclass(slots=True, frozen=True)
class SecurityLimits:
    """Runtime limits for tool requests and responses."""

    max_file_bytes: int = 256 * 1024
    max_total_bytes_per_response: int = 512 * 1024
    max_operations: int = 50
    max_batch_paths: int = 50


@dataclass(slots=True, frozen=True)
class PolicyBlockedError(Exception):
    """Raised when document policy or limits block an operation."""

    reason: str
    hint: str


def is_protected(project_root: Path, resolved_path: Path) -> bool:
    """Return True for paths inside version-control metadata."""
    relative = resolved_path.relative_to(project_root.resolve()).as_posix().lower()
    return "/.git/" in f"/{relative}/"


def enforce_document_policy(
    project_root: Path,
    resolved_path: Path,
    readme_filename: str,
    limits: SecurityLimits,
) -> None:
    """Raise PolicyBlockedError when a path may not be edited as a convention document."""
    if is_protected(project_root=project_root, resolved_path=resolved_path):
        raise PolicyBlockedError(
            reason="Path is inside protected version-control metadata.",
            hint="Target a convention document in the working tree.",
        )
    if resolved_path.name != readme_filename:
        raise PolicyBlockedError(
            reason=f"Only {readme_filename} documents can be edited.",
            hint=f"Point the request at a file named {readme_filename}.",
        )
    if resolved_path.exists() and resolved_path.is_file():
        if resolved_path.stat().st_size > limits.max_file_bytes:
            raise PolicyBlockedError(
                reason="Document exceeds max_file_bytes limit.",
                hint="Split the document or raise the limit via configuration.",
            )


def enforce_operation_limit(operation_count: int, limits: SecurityLimits) -> None:
    """Raise PolicyBlockedError when an edit batch is too large."""
    if operation_count > limits.max_operations:
        raise PolicyBlockedError(
            reason="Requested operations exceed max_operations limit.",
            hint="Split the edit into smaller batches.",
        )


def enforce_batch_path_limit(path_count: int, limits: SecurityLimits) -> None:
    """Raise PolicyBlockedError when a multi-path lookup is too large."""
    if path_count > limits.max_batch_paths:
        raise PolicyBlockedError(
            reason="Requested paths exceed max_batch_paths limit.",
            hint="Request context for fewer paths at once.",
        )
