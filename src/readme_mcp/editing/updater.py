"""Heading-aware, all-or-nothing edits of convention documents.

Documents are handled as lists of lines. Operations apply in order to an
in-memory copy; the first failure discards the copy and the caller gets the
original text back together with the failing operation's index. CRLF documents
keep their line endings; operation content is converted to match.
"""

from __future__ import annotations

import re
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Final

from readme_mcp.editing.operations import (
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

HEADING_PATTERN: Final[re.Pattern[str]] = re.compile(r"^(#{1,6})\s")
FENCE_PATTERN: Final[re.Pattern[str]] = re.compile(r"^(```|~~~)")


@dataclass(slots=True, frozen=True)
class _EditFailure(Exception):
    code: str
    message: str


def heading_level(line: str) -> int:
    """ATX heading level of a line, or 0 when it is not a heading."""
    match = HEADING_PATTERN.match(line.strip())
    return len(match.group(1)) if match else 0


def fenced_lines(lines: Sequence[str]) -> set[int]:
    """Indexes of lines that sit inside (or delimit) fenced code blocks."""
    inside: set[int] = set()
    fence: str | None = None
    for index, line in enumerate(lines):
        match = FENCE_PATTERN.match(line.strip())
        if fence is None:
            if match:
                fence = match.group(1)
                inside.add(index)
            continue
        inside.add(index)
        if match and match.group(1) == fence:
            fence = None
    return inside


def find_section_index(lines: Sequence[str], section: str) -> int:
    """Index of the first line whose trimmed text equals ``section``, else -1."""
    wanted = section.strip()
    fenced = fenced_lines(lines)
    for index, line in enumerate(lines):
        if index not in fenced and line.strip() == wanted:
            return index
    return -1


def find_section_end(lines: Sequence[str], start_index: int) -> int:
    """Index of the first heading at or above the start heading's level.

    Returns ``len(lines)`` when the section runs to the end of the document.
    """
    if start_index >= len(lines):
        return len(lines)
    level = heading_level(lines[start_index])
    fenced = fenced_lines(lines)
    for index in range(start_index + 1, len(lines)):
        if index in fenced:
            continue
        candidate = heading_level(lines[index])
        if candidate and candidate <= level:
            return index
    return len(lines)


def apply_operations(
    text: str,
    operations: Sequence[EditOperation | Mapping[str, object]],
) -> EditResult:
    """Apply every operation or none of them.

    ``text`` is never modified; on failure the result carries it unchanged.
    """
    newline = "\r\n" if "\r\n" in text else "\n"
    lines = text.split(newline)
    changes: list[ChangeRecord] = []
    for index, raw in enumerate(operations):
        try:
            operation = raw if not isinstance(raw, Mapping) else parse_operation(raw)
        except OperationInputError as error:
            return _aborted(text, index, error.kind, "INVALID_OPERATION", error.message)
        try:
            lines, change = _apply_one(lines, operation)
        except _EditFailure as failure:
            kind = getattr(operation, "kind", None)
            return _aborted(text, index, kind, failure.code, failure.message)
        changes.append(change)
    return EditResult(success=True, content=newline.join(lines), changes=tuple(changes))


def update_document(
    path: Path,
    operations: Sequence[EditOperation | Mapping[str, object]],
) -> EditResult:
    """Edit a document on disk; it is written only when every operation succeeds."""
    try:
        original = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return _aborted("", None, None, "DOCUMENT_NOT_FOUND", f"Document not found: {path}")
    except (OSError, UnicodeDecodeError) as error:
        return _aborted("", None, None, "DOCUMENT_UNREADABLE", f"Cannot read {path}: {error}")
    result = apply_operations(original, operations)
    if not result.success or result.content == original:
        return result
    tmp = path.with_name(path.name + ".tmp")
    try:
        with tmp.open("w", encoding="utf-8", newline="") as handle:
            handle.write(result.content)
        tmp.replace(path)
    except OSError as error:
        tmp.unlink(missing_ok=True)
        return _aborted(original, None, None, "WRITE_FAILED", f"Cannot write {path}: {error}")
    return result


def _aborted(
    text: str, index: int | None, kind: str | None, code: str, message: str
) -> EditResult:
    return EditResult(
        success=False,
        content=text,
        changes=(),
        error=EditError(operation_index=index, kind=kind, code=code, message=message),
    )


def _apply_one(
    lines: list[str], operation: EditOperation
) -> tuple[list[str], ChangeRecord]:
    if isinstance(operation, AppendOperation):
        block = ["", *_split_lines(operation.content)]
        if lines and lines[-1] == "":
            updated = [*lines[:-1], *block, ""]
        else:
            updated = [*lines, *block]
        return updated, _change(operation.kind, None, len(block), 0)

    if isinstance(operation, PrependOperation):
        block = [*_split_lines(operation.content), ""]
        return [*block, *lines], _change(operation.kind, None, len(block), 0)

    if isinstance(operation, ReplaceOperation):
        joined = "\n".join(lines)
        search_text = _normalize_newlines(operation.search_text)
        if search_text not in joined:
            raise _EditFailure("TEXT_NOT_FOUND", f"Text not found: {operation.search_text}")
        replaced = joined.replace(search_text, _normalize_newlines(operation.content), 1)
        return replaced.split("\n"), _change(
            operation.kind,
            None,
            operation.content.count("\n") + 1,
            operation.search_text.count("\n") + 1,
        )

    if isinstance(operation, InsertAfterOperation):
        start = _require_section(lines, operation.section)
        boundary = find_section_end(lines, start)
        while boundary - 1 > start and not lines[boundary - 1].strip():
            boundary -= 1
        block = ["", *_split_lines(operation.content)]
        updated = [*lines[:boundary], *block, *lines[boundary:]]
        return updated, _change(operation.kind, operation.section, len(block), 0)

    if isinstance(operation, InsertBeforeOperation):
        start = _require_section(lines, operation.section)
        block = [*_split_lines(operation.content), ""]
        updated = [*lines[:start], *block, *lines[start:]]
        return updated, _change(operation.kind, operation.section, len(block), 0)

    raise _EditFailure("INVALID_OPERATION", f"Unknown operation type: {operation!r}")


def _require_section(lines: list[str], section: str) -> int:
    index = find_section_index(lines, section)
    if index == -1:
        raise _EditFailure("SECTION_NOT_FOUND", f"Section not found: {section}")
    return index


def _change(kind: str, section: str | None, added: int, removed: int) -> ChangeRecord:
    return ChangeRecord(kind=kind, section=section, lines_added=added, lines_removed=removed)


def _normalize_newlines(text: str) -> str:
    return text.replace("\r\n", "\n")


def _split_lines(text: str) -> list[str]:
    return _normalize_newlines(text).split("\n")
