"""Typed edit operations and results for convention documents."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import ClassVar

OPERATION_KINDS = ("append", "prepend", "replace", "insert-after", "insert-before")


@dataclass(slots=True, frozen=True)
class AppendOperation:
    """Add a blank separator line and ``content`` at the end."""

    kind: ClassVar[str] = "append"
    content: str


@dataclass(slots=True, frozen=True)
class PrependOperation:
    """Add ``content`` and a blank separator line at the start."""

    kind: ClassVar[str] = "prepend"
    content: str


@dataclass(slots=True, frozen=True)
class ReplaceOperation:
    """Replace the first exact occurrence of ``search_text``."""

    kind: ClassVar[str] = "replace"
    search_text: str
    content: str


@dataclass(slots=True, frozen=True)
class InsertAfterOperation:
    """Insert at the end of the scope of heading ``section``."""

    kind: ClassVar[str] = "insert-after"
    section: str
    content: str


@dataclass(slots=True, frozen=True)
class InsertBeforeOperation:
    """Insert directly above heading ``section``."""

    kind: ClassVar[str] = "insert-before"
    section: str
    content: str


EditOperation = (
    AppendOperation
    | PrependOperation
    | ReplaceOperation
    | InsertAfterOperation
    | InsertBeforeOperation
)


@dataclass(slots=True, frozen=True)
class ChangeRecord:
    """Line accounting for one applied operation."""

    kind: str
    section: str | None
    lines_added: int
    lines_removed: int

    def to_dict(self) -> dict[str, object]:
        payload: dict[str, object] = {
            "operation": self.kind,
            "lines_added": self.lines_added,
            "lines_removed": self.lines_removed,
        }
        if self.section is not None:
            payload["section"] = self.section
        return payload


@dataclass(slots=True, frozen=True)
class EditError:
    """Why and where an edit batch was aborted."""

    operation_index: int | None
    kind: str | None
    code: str
    message: str

    def to_dict(self) -> dict[str, object]:
        return {
            "operation_index": self.operation_index,
            "operation": self.kind,
            "code": self.code,
            "message": self.message,
        }


@dataclass(slots=True, frozen=True)
class EditResult:
    """Outcome of an all-or-nothing edit batch."""

    success: bool
    content: str
    changes: tuple[ChangeRecord, ...]
    error: EditError | None = None

    def to_dict(self) -> dict[str, object]:
        payload: dict[str, object] = {
            "success": self.success,
            "changes": [change.to_dict() for change in self.changes],
        }
        if self.error is not None:
            payload["error"] = self.error.to_dict()
        return payload


class OperationInputError(ValueError):
    """Raised when a raw operation payload is malformed."""

    def __init__(self, message: str, kind: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.kind = kind


def parse_operation(payload: Mapping[str, object]) -> EditOperation:
    """Build a typed operation from a request mapping.

    Accepts ``type`` or ``kind`` for the operation name and ``searchText``
    or ``search_text`` for the replace needle.
    """
    kind = payload.get("type", payload.get("kind"))
    if not isinstance(kind, str) or kind not in OPERATION_KINDS:
        raise OperationInputError(f"Unknown operation type: {kind}")
    content = payload.get("content")
    if not isinstance(content, str):
        raise OperationInputError(f"content is required for {kind} operation", kind)

    if kind == "append":
        return AppendOperation(content=content)
    if kind == "prepend":
        return PrependOperation(content=content)
    if kind == "replace":
        search_text = payload.get("searchText", payload.get("search_text"))
        if not isinstance(search_text, str) or not search_text:
            raise OperationInputError("searchText is required for replace operation", kind)
        return ReplaceOperation(search_text=search_text, content=content)

    section = payload.get("section")
    if not isinstance(section, str) or not section.strip():
        raise OperationInputError(f"section is required for {kind} operation", kind)
    if kind == "insert-after":
        return InsertAfterOperation(section=section, content=content)
    return InsertBeforeOperation(section=section, content=content)
