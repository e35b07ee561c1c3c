from __future__ import annotations

from readme_mcp.editing import (
    AppendOperation,
    InsertAfterOperation,
    InsertBeforeOperation,
    PrependOperation,
    ReplaceOperation,
    apply_operations,
    find_section_end,
    find_section_index,
    heading_level,
)

DOCUMENT = "\n".join(
    [
        "# Title",
        "",
        "## A",
        "alpha",
        "",
        "### A.1",
        "nested",
        "",
        "## B",
        "beta",
        "",
    ]
)


def test_heading_level_requires_space_after_hashes() -> None:
    assert heading_level("## Section") == 2
    assert heading_level("#hashtag") == 0
    assert heading_level("plain") == 0


def test_section_end_includes_deeper_subsections() -> None:
    lines = DOCUMENT.split("\n")

    start = find_section_index(lines, "## A")

    assert start == 2
    assert find_section_end(lines, start) == lines.index("## B")
    assert find_section_index(lines, "## Z") == -1


def test_insert_after_places_content_after_subsections() -> None:
    result = apply_operations(DOCUMENT, [InsertAfterOperation(section="## A", content="added")])

    lines = result.content.split("\n")
    assert result.success is True
    assert lines.index("added") > lines.index("nested")
    assert lines.index("added") < lines.index("## B")
    assert lines[lines.index("added") - 1] == ""
    assert result.changes[0].to_dict() == {
        "operation": "insert-after",
        "section": "## A",
        "lines_added": 2,
        "lines_removed": 0,
    }


def test_insert_after_last_section_appends_at_end() -> None:
    result = apply_operations(DOCUMENT, [InsertAfterOperation(section="## B", content="tail")])

    assert result.content.split("\n")[-2:] == ["tail", ""]
    assert "beta\n\ntail\n" in result.content


def test_insert_before_missing_section_leaves_text_unchanged() -> None:
    result = apply_operations(
        DOCUMENT,
        [
            AppendOperation(content="appended"),
            InsertBeforeOperation(section="## Z", content="never"),
        ],
    )

    assert result.success is False
    assert result.content == DOCUMENT
    assert result.error is not None
    assert result.error.to_dict() == {
        "operation_index": 1,
        "operation": "insert-before",
        "code": "SECTION_NOT_FOUND",
        "message": "Section not found: ## Z",
    }


def test_insert_before_puts_block_above_heading() -> None:
    result = apply_operations(DOCUMENT, [InsertBeforeOperation(section="## B", content="pre")])

    lines = result.content.split("\n")
    assert lines[lines.index("## B") - 2 : lines.index("## B")] == ["pre", ""]


def test_append_twice_keeps_both_blocks_in_order() -> None:
    result = apply_operations(
        "# Title\n",
        [AppendOperation(content="one"), AppendOperation(content="two")],
    )

    assert result.content == "# Title\n\none\n\ntwo\n"
    assert len(result.changes) == 2


def test_prepend_adds_block_and_blank_line() -> None:
    result = apply_operations("# Title\n", [PrependOperation(content="> note")])

    assert result.content == "> note\n\n# Title\n"


def test_replace_changes_first_occurrence_only_and_round_trips() -> None:
    original = "use tabs\nuse tabs\n"

    forward = apply_operations(original, [ReplaceOperation(search_text="tabs", content="spaces")])
    back = apply_operations(
        forward.content, [ReplaceOperation(search_text="spaces", content="tabs")]
    )

    assert forward.content == "use spaces\nuse tabs\n"
    assert back.content == original


def test_replace_missing_text_reports_text_not_found() -> None:
    result = apply_operations(DOCUMENT, [ReplaceOperation(search_text="gamma", content="x")])

    assert result.success is False
    assert result.error is not None
    assert result.error.code == "TEXT_NOT_FOUND"


def test_headings_inside_fenced_code_are_ignored() -> None:
    document = "\n".join(["## A", "```", "## B", "```", "text", "## C", "end"])

    result = apply_operations(document, [InsertAfterOperation(section="## A", content="x")])
    lines = result.content.split("\n")
    missing = apply_operations(document, [InsertBeforeOperation(section="## B", content="x")])

    assert lines.index("x") == lines.index("## C") - 1
    assert missing.success is False


def test_insert_after_nested_heading_stops_at_shallower_heading() -> None:
    lines = DOCUMENT.split("\n")
    start = find_section_index(lines, "### A.1")

    result = apply_operations(DOCUMENT, [InsertAfterOperation(section="### A.1", content="deep")])

    assert find_section_end(lines, start) == lines.index("## B")
    assert result.success is True
    assert "nested\n\ndeep\n\n## B\nbeta" in result.content


def test_crlf_document_keeps_its_line_endings() -> None:
    document = "# T\r\n\r\n## A\r\nbody\r\n\r\n## B\r\n"

    result = apply_operations(
        document,
        [
            InsertAfterOperation(section="## A", content="x"),
            AppendOperation(content="one\r\ntwo"),
        ],
    )

    assert result.success is True
    assert result.content == "# T\r\n\r\n## A\r\nbody\r\n\r\nx\r\n\r\n## B\r\n\r\none\r\ntwo\r\n"
    assert "\n" not in result.content.replace("\r\n", "")
