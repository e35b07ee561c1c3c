"""Sandboxing and document policy primitives."""

from .paths import PathBlockedError, project_relative, resolve_project_path
from .policy import (
    PolicyBlockedError,
    SecurityLimits,
    enforce_batch_path_limit,
    enforce_document_policy,
    enforce_operation_limit,
    is_protected,
)

__all__ = [
    "PathBlockedError",
    "PolicyBlockedError",
    "SecurityLimits",
    "enforce_batch_path_limit",
    "enforce_document_policy",
    "enforce_operation_limit",
    "is_protected",
    "project_relative",
    "resolve_project_path",
]
