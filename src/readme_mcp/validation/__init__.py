"""Content-quality validation of convention documents."""

from .validator import (
    DocumentStats,
    ReadmeValidator,
    ValidationIssue,
    ValidationResult,
    ValidationSummary,
    estimate_tokens,
    validate_index,
)

__all__ = [
    "DocumentStats",
    "ReadmeValidator",
    "ValidationIssue",
    "ValidationResult",
    "ValidationSummary",
    "estimate_tokens",
    "validate_index",
]
