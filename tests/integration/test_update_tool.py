from __future__ import annotations

from pathlib import Path

from readme_mcp.server import StdioServer, create_server

DOCUMENT = "# Frontend\n\n## Conventions\n- Use hooks\n\n## Testing\n- Run vitest\n"


def _server_with_document(root: Path) -> StdioServer:
    target = root / "apps" / "web"
    target.mkdir(parents=True)
    (target / "AI_README.md").write_text(DOCUMENT, encoding="utf-8")
    return create_server(repo_root=str(root))


def test_update_applies_operations_and_reports_validation(tmp_path: Path) -> None:
    server = _server_with_document(tmp_path)

    response = server.handle_payload(
        {
            "id": "u-1",
            "method": "readme.update",
            "params": {
                "readme_path": "apps/web/AI_README.md",
                "operations": [
                    {
                        "type": "insert-after",
                        "section": "## Conventions",
                        "content": "- Prefer named exports",
                    },
                    {"type": "replace", "searchText": "vitest", "content": "vitest --run"},
                ],
            },
        }
    )
    result = response["result"]
    text = (tmp_path / "apps" / "web" / "AI_README.md").read_text(encoding="utf-8")

    assert response["ok"] is True
    assert result["success"] is True
    assert result["readme_path"] == "apps/web/AI_README.md"
    assert result["summary"] == "Applied 2 operations to apps/web/AI_README.md."
    assert [change["operation"] for change in result["changes"]] == ["insert-after", "replace"]
    assert result["validation"]["valid"] is True
    assert result["validation"]["score"] == 100
    assert result["validation"]["warnings"] == []
    assert response["warnings"] == []
    assert text == (
        "# Frontend\n\n## Conventions\n- Use hooks\n\n- Prefer named exports\n\n"
        "## Testing\n- Run vitest --run\n"
    )


def test_failed_operation_leaves_document_untouched(tmp_path: Path) -> None:
    server = _server_with_document(tmp_path)

    response = server.handle_payload(
        {
            "id": "u-2",
            "method": "readme.update",
            "params": {
                "readme_path": "apps/web/AI_README.md",
                "operations": [
                    {"type": "append", "content": "- appended"},
                    {"type": "insert-before", "section": "## Missing", "content": "x"},
                ],
            },
        }
    )
    result = response["result"]

    assert response["ok"] is True
    assert result["success"] is False
    assert result["changes"] == []
    assert result["error"] == {
        "operation_index": 1,
        "operation": "insert-before",
        "code": "SECTION_NOT_FOUND",
        "message": "Section not found: ## Missing",
    }
    assert "validation" not in result
    text = (tmp_path / "apps" / "web" / "AI_README.md").read_text(encoding="utf-8")
    assert text == DOCUMENT


def test_missing_document_reports_not_found(tmp_path: Path) -> None:
    server = create_server(repo_root=str(tmp_path))

    response = server.handle_payload(
        {
            "id": "u-3",
            "method": "readme.update",
            "params": {
                "readme_path": "AI_README.md",
                "operations": [{"type": "append", "content": "x"}],
            },
        }
    )

    assert response["result"]["success"] is False
    assert response["result"]["error"]["code"] == "DOCUMENT_NOT_FOUND"
    assert not (tmp_path / "AI_README.md").exists()


def test_validation_issues_surface_as_warnings(tmp_path: Path) -> None:
    server = _server_with_document(tmp_path)

    response = server.handle_payload(
        {
            "id": "u-4",
            "method": "readme.update",
            "params": {
                "readme_path": "apps/web/AI_README.md",
                "operations": [{"type": "append", "content": "```\nnpm test\n```"}],
            },
        }
    )

    assert response["ok"] is True
    assert response["result"]["success"] is True
    assert response["result"]["validation"]["valid"] is True
    assert response["warnings"] == [
        "apps/web/AI_README.md: warning: Found 1 code blocks. "
        "Code examples consume many tokens."
    ]


def test_update_requires_operations(tmp_path: Path) -> None:
    server = _server_with_document(tmp_path)

    response = server.handle_payload(
        {
            "id": "u-5",
            "method": "readme.update",
            "params": {"readme_path": "apps/web/AI_README.md", "operations": []},
        }
    )

    assert response["error"] == {
        "code": "INVALID_PARAMS",
        "message": "readme.update operations must be a non-empty list.",
    }
