"""Discovery and resolution of convention documents."""

from .models import ROOT_SCOPE, ReadmeContext, ReadmeEntry, ReadmeIndex, coverage_patterns
from .paths import (
    directory_distance,
    directory_of,
    is_ancestor_or_equal,
    looks_like_file,
    matches_glob,
    normalize_path,
    target_directory,
)
from .router import (
    ContextRouter,
    classify_relevance,
    format_context_prompt,
    read_entry_content,
    resolve_for,
    resolve_for_many,
)
from .scanner import ReadmeScanner, ScanRootNotFoundError, scan

__all__ = [
    "ContextRouter",
    "ROOT_SCOPE",
    "ReadmeContext",
    "ReadmeEntry",
    "ReadmeIndex",
    "ReadmeScanner",
    "ScanRootNotFoundError",
    "classify_relevance",
    "coverage_patterns",
    "directory_distance",
    "directory_of",
    "format_context_prompt",
    "is_ancestor_or_equal",
    "looks_like_file",
    "matches_glob",
    "normalize_path",
    "read_entry_content",
    "resolve_for",
    "resolve_for_many",
    "scan",
    "target_directory",
]
