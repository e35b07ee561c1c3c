"""Structured edits and initialization of convention documents."""

from .init import InitResult, find_parent_document, init_readme, render_smart_document
from .operations import (
    OPERATION_KINDS,
    AppendOperation,
    ChangeRecord,
    EditError,
    EditOperation,
    EditResult,
    InsertAfterOperation,
    InsertBeforeOperation,
    OperationInputError,
    PrependOperation,
    ReplaceOperation,
    parse_operation,
)
from .updater import (
    apply_operations,
    find_section_end,
    find_section_index,
    heading_level,
    update_document,
)

__all__ = [
    "OPERATION_KINDS",
    "AppendOperation",
    "ChangeRecord",
    "EditError",
    "EditOperation",
    "EditResult",
    "InitResult",
    "InsertAfterOperation",
    "InsertBeforeOperation",
    "OperationInputError",
    "PrependOperation",
    "ReplaceOperation",
    "apply_operations",
    "find_parent_document",
    "find_section_end",
    "find_section_index",
    "heading_level",
    "init_readme",
    "parse_operation",
    "render_smart_document",
    "update_document",
]
