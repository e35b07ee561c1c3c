"""Content-quality checks for convention documents."""

from __future__ import annotations

import re
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Final, Literal

from readme_mcp.config import ValidationConfig
from readme_mcp.index.models import ReadmeIndex

H1_PATTERN: Final[re.Pattern[str]] = re.compile(r"^#\s+[^#]")
TOKENS_PER_WORD = 1.3
LONG_LINE_TOLERANCE = 3

Severity = Literal["error", "warning", "info"]
SEVERITY_PENALTY: dict[str, int] = {"error": 20, "warning": 10, "info": 2}


@dataclass(slots=True, frozen=True)
class ValidationIssue:
    """One rule finding."""

    type: Severity
    rule: str
    message: str
    suggestion: str | None = None
    line: int | None = None


@dataclass(slots=True, frozen=True)
class DocumentStats:
    tokens: int
    lines: int
    characters: int


@dataclass(slots=True, frozen=True)
class ValidationResult:
    """Validation outcome for one document."""

    valid: bool
    file_path: str
    issues: tuple[ValidationIssue, ...]
    score: int | None = None
    stats: DocumentStats | None = None

    def to_dict(self) -> dict[str, object]:
        return {
            "valid": self.valid,
            "file_path": self.file_path,
            "issues": [asdict(issue) for issue in self.issues],
            "score": self.score,
            "stats": asdict(self.stats) if self.stats is not None else None,
        }


@dataclass(slots=True, frozen=True)
class ValidationSummary:
    """Aggregate over every document of an index."""

    total_files: int
    valid_files: int
    invalid_files: int
    total_issues: int
    average_score: int
    issues_by_severity: dict[str, int] = field(default_factory=dict)


def estimate_tokens(text: str) -> int:
    """Word count scaled by an approximate token-per-word ratio."""
    return round(len(text.split()) * TOKENS_PER_WORD)


class ReadmeValidator:
    """Applies the configured rule set to document text."""

    def __init__(self, config: ValidationConfig | None = None) -> None:
        self._config = config or ValidationConfig()

    @property
    def config(self) -> ValidationConfig:
        return self._config

    def validate(self, path: Path, display_path: str | None = None) -> ValidationResult:
        """Validate a document on disk; a missing file is a single error."""
        shown = display_path or str(path)
        try:
            text = path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return ValidationResult(
                valid=False,
                file_path=shown,
                issues=(
                    ValidationIssue(
                        type="error", rule="structure", message=f"File not found: {shown}"
                    ),
                ),
            )
        except (OSError, UnicodeDecodeError) as error:
            return ValidationResult(
                valid=False,
                file_path=shown,
                issues=(
                    ValidationIssue(
                        type="error", rule="structure", message=f"Cannot read {shown}: {error}"
                    ),
                ),
            )
        return self.validate_text(text, shown)

    def validate_text(self, text: str, file_path: str) -> ValidationResult:
        issues: list[ValidationIssue] = []
        if not text.strip():
            issues.append(
                ValidationIssue(
                    type="error",
                    rule="empty-content",
                    message="Document is empty",
                    suggestion="Add content to the document",
                )
            )
        lines = text.split("\n")
        tokens = estimate_tokens(text)
        self._check_token_count(tokens, issues)
        self._check_structure(lines, issues)
        self._check_line_length(lines, issues)
        self._check_code_blocks(text, issues)
        return ValidationResult(
            valid=not any(issue.type == "error" for issue in issues),
            file_path=file_path,
            issues=tuple(issues),
            score=self._score(issues, tokens),
            stats=DocumentStats(tokens=tokens, lines=len(lines), characters=len(text)),
        )

    def _check_token_count(self, tokens: int, issues: list[ValidationIssue]) -> None:
        limits = self._config.token_limits
        if tokens > limits.error:
            issues.append(
                ValidationIssue(
                    type="error",
                    rule="token-count",
                    message=(
                        f"Document is too long ({tokens} tokens). "
                        f"Maximum recommended: {self._config.max_tokens} tokens."
                    ),
                    suggestion=(
                        "Remove unnecessary content, use bullet points instead of "
                        "paragraphs, and avoid code examples."
                    ),
                )
            )
        elif tokens > limits.warning:
            issues.append(
                ValidationIssue(
                    type="warning",
                    rule="token-count",
                    message=(
                        f"Document is quite long ({tokens} tokens). "
                        f"Consider keeping it under {limits.good} tokens."
                    ),
                    suggestion="Simplify content and remove redundant information.",
                )
            )
        elif tokens > limits.good:
            issues.append(
                ValidationIssue(
                    type="info",
                    rule="token-count",
                    message=f"Document length is acceptable ({tokens} tokens).",
                )
            )

    def _check_structure(self, lines: list[str], issues: list[ValidationIssue]) -> None:
        rules = self._config.rules
        stripped = [line.strip() for line in lines]
        if rules.require_h1 and not any(H1_PATTERN.match(line) for line in stripped):
            issues.append(
                ValidationIssue(
                    type="error",
                    rule="require-h1",
                    message="Document must have a H1 heading (# Title)",
                    suggestion="Add a title at the beginning of the file: # Project Name",
                )
            )
        for section in rules.require_sections:
            if section.strip() not in stripped:
                issues.append(
                    ValidationIssue(
                        type="warning",
                        rule="require-sections",
                        message=f"Missing required section: {section}",
                        suggestion=f"Add section: {section}",
                    )
                )

    def _check_line_length(self, lines: list[str], issues: list[ValidationIssue]) -> None:
        limit = self._config.rules.max_line_length
        long_lines = [number for number, line in enumerate(lines, start=1) if len(line) > limit]
        if len(long_lines) > LONG_LINE_TOLERANCE:
            issues.append(
                ValidationIssue(
                    type="info",
                    rule="line-length",
                    message=f"{len(long_lines)} lines exceed {limit} characters",
                    suggestion="Consider breaking long lines for better readability",
                    line=long_lines[0],
                )
            )

    def _check_code_blocks(self, text: str, issues: list[ValidationIssue]) -> None:
        if self._config.rules.allow_code_blocks:
            return
        block_count = text.count("```") // 2
        if block_count > 0:
            issues.append(
                ValidationIssue(
                    type="warning",
                    rule="code-blocks",
                    message=f"Found {block_count} code blocks. Code examples consume many tokens.",
                    suggestion="Remove code examples or move them to separate documentation.",
                )
            )

    def _score(self, issues: list[ValidationIssue], tokens: int) -> int:
        score = 100
        for issue in issues:
            score -= SEVERITY_PENALTY[issue.type]
        limits = self._config.token_limits
        if tokens > limits.error:
            score -= 30
        elif tokens > limits.warning:
            score -= 15
        elif tokens < limits.excellent:
            score += 10
        return max(0, min(100, score))


def validate_index(
    index: ReadmeIndex, validator: ReadmeValidator
) -> tuple[list[ValidationResult], ValidationSummary]:
    """Validate every indexed document and summarize the results."""
    root = Path(index.project_root)
    results = [
        validator.validate(root / entry.path, display_path=entry.path) for entry in index.entries
    ]
    by_severity = {"error": 0, "warning": 0, "info": 0}
    for result in results:
        for issue in result.issues:
            by_severity[issue.type] += 1
    total = len(results)
    valid = sum(1 for result in results if result.valid)
    average = round(sum(result.score or 0 for result in results) / total) if total else 0
    summary = ValidationSummary(
        total_files=total,
        valid_files=valid,
        invalid_files=total - valid,
        total_issues=sum(by_severity.values()),
        average_score=average,
        issues_by_severity=by_severity,
    )
    return results, summary
