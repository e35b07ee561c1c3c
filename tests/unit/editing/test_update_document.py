from __future__ import annotations

from pathlib import Path

from readme_mcp.editing import update_document


def test_update_document_writes_only_on_success(tmp_path: Path) -> None:
    document = tmp_path / "AI_README.md"
    document.write_text("# Title\n\n## Rules\n- one\n", encoding="utf-8")

    ok = update_document(
        document, [{"type": "insert-after", "section": "## Rules", "content": "- two"}]
    )
    failed = update_document(
        document,
        [
            {"type": "append", "content": "lost"},
            {"type": "insert-after", "section": "## Missing", "content": "x"},
        ],
    )

    assert ok.success is True
    assert failed.success is False
    assert document.read_text(encoding="utf-8") == "# Title\n\n## Rules\n- one\n\n- two\n"
    assert not (tmp_path / "AI_README.md.tmp").exists()


def test_update_document_missing_file_is_reported(tmp_path: Path) -> None:
    result = update_document(tmp_path / "AI_README.md", [{"type": "append", "content": "x"}])

    assert result.success is False
    assert result.error is not None
    assert result.error.code == "DOCUMENT_NOT_FOUND"
    assert not (tmp_path / "AI_README.md").exists()


def test_update_document_writes_plain_newlines(tmp_path: Path) -> None:
    document = tmp_path / "AI_README.md"
    document.write_bytes(b"# Title\n")

    update_document(document, [{"type": "append", "content": "x"}])

    assert document.read_bytes() == b"# Title\n\nx\n"
