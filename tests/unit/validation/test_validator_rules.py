from __future__ import annotations

from pathlib import Path

from readme_mcp.config import ValidationConfig, ValidationRules
from readme_mcp.index import scan
from readme_mcp.validation import (
    ReadmeValidator,
    ValidationResult,
    estimate_tokens,
    validate_index,
)


def _rules(result: ValidationResult) -> list[str]:
    return [issue.rule for issue in result.issues]


def test_estimate_tokens_scales_word_count() -> None:
    assert estimate_tokens("") == 0
    assert estimate_tokens("one two three four five six seven eight nine ten") == 13


def test_short_well_formed_document_scores_full_marks() -> None:
    result = ReadmeValidator().validate_text("# Title\n\n- Use tabs\n", "AI_README.md")

    assert result.valid is True
    assert result.issues == ()
    assert result.score == 100
    assert result.stats is not None
    assert result.stats.lines == 4


def test_missing_h1_is_an_error() -> None:
    result = ReadmeValidator().validate_text("## Only a subsection\n", "AI_README.md")

    assert result.valid is False
    assert _rules(result) == ["require-h1"]
    assert result.score == 90


def test_empty_document_reports_empty_content() -> None:
    result = ReadmeValidator().validate_text("   \n", "AI_README.md")

    assert result.valid is False
    assert _rules(result) == ["empty-content", "require-h1"]


def test_token_thresholds_map_to_severities() -> None:
    validator = ReadmeValidator()
    long_text = "# Title\n" + "word " * 500
    huge_text = "# Title\n" + "word " * 800

    long_result = validator.validate_text(long_text, "long.md")
    huge_result = validator.validate_text(huge_text, "huge.md")

    assert [(i.rule, i.type) for i in long_result.issues] == [("token-count", "warning")]
    assert long_result.score == 100 - 10 - 15
    assert [(i.rule, i.type) for i in huge_result.issues] == [("token-count", "error")]
    assert huge_result.valid is False
    assert huge_result.score == 100 - 20 - 30


def test_code_blocks_and_required_sections() -> None:
    config = ValidationConfig(rules=ValidationRules(require_sections=("## Testing",)))
    text = "# Title\n\n```\ncode\n```\n"

    result = ReadmeValidator(config).validate_text(text, "AI_README.md")

    assert _rules(result) == ["require-sections", "code-blocks"]
    assert result.valid is True
    assert "Found 1 code blocks" in result.issues[1].message


def test_more_than_three_long_lines_is_info() -> None:
    long_line = "x" * 151
    text = "\n".join(["# Title", long_line, long_line, long_line, long_line])

    result = ReadmeValidator().validate_text(text, "AI_README.md")

    assert _rules(result) == ["line-length"]
    assert result.issues[0].type == "info"
    assert result.issues[0].line == 2


def test_missing_file_is_single_structure_error(tmp_path: Path) -> None:
    result = ReadmeValidator().validate(tmp_path / "AI_README.md", display_path="AI_README.md")

    assert result.valid is False
    assert [issue.message for issue in result.issues] == ["File not found: AI_README.md"]
    assert result.to_dict()["stats"] is None


def test_validate_index_summarizes_results(tmp_path: Path) -> None:
    (tmp_path / "AI_README.md").write_text("# Root\n", encoding="utf-8")
    (tmp_path / "pkg").mkdir()
    (tmp_path / "pkg" / "AI_README.md").write_text("no heading\n", encoding="utf-8")

    results, summary = validate_index(scan(tmp_path), ReadmeValidator())

    assert [result.file_path for result in results] == ["AI_README.md", "pkg/AI_README.md"]
    assert summary.total_files == 2
    assert summary.valid_files == 1
    assert summary.invalid_files == 1
    assert summary.issues_by_severity == {"error": 1, "warning": 0, "info": 0}
    assert summary.average_score == 95
