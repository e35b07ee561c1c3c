from __future__ import annotations

import io
import json
from pathlib import Path

from readme_mcp.server import build_arg_parser, create_server


def test_stdio_server_routes_multiple_requests(tmp_path: Path) -> None:
    (tmp_path / "AI_README.md").write_text("# Root\n", encoding="utf-8")
    server = create_server(repo_root=str(tmp_path))
    in_stream = io.StringIO(
        "\n".join(
            [
                json.dumps({"id": "req-1", "method": "readme.status", "params": {}}),
                "",
                json.dumps(
                    {
                        "id": "req-2",
                        "method": "tools/call",
                        "params": {
                            "name": "readme.get_context",
                            "arguments": {"path": "src/main.py"},
                        },
                    }
                ),
            ]
        )
        + "\n"
    )
    out_stream = io.StringIO()

    server.serve(in_stream=in_stream, out_stream=out_stream)
    lines = [line for line in out_stream.getvalue().splitlines() if line]

    assert len(lines) == 2
    first = json.loads(lines[0])
    second = json.loads(lines[1])

    assert first["request_id"] == "req-1"
    assert first["ok"] is True
    assert first["result"]["document_count"] == 1

    assert second["request_id"] == "req-2"
    assert second["ok"] is True
    assert second["result"]["contexts"][0]["path"] == "AI_README.md"


def test_tools_list_reports_registration_order(tmp_path: Path) -> None:
    server = create_server(repo_root=str(tmp_path))

    response = server.handle_payload({"id": "list", "method": "tools/list", "params": {}})

    assert [tool["name"] for tool in response["result"]["tools"]] == [
        "readme.status",
        "readme.discover",
        "readme.get_context",
        "readme.get_context_many",
        "readme.update",
        "readme.validate",
        "readme.init",
        "readme.audit_log",
    ]
    assert all(tool["description"] for tool in response["result"]["tools"])


def test_arg_parser_flags() -> None:
    args = build_arg_parser().parse_args(
        [
            "--repo-root",
            "/tmp/project",
            "--readme-filename",
            "CONVENTIONS.md",
            "--max-operations",
            "5",
            "--no-cache-content",
        ]
    )

    assert args.repo_root == "/tmp/project"
    assert args.readme_filename == "CONVENTIONS.md"
    assert args.max_operations == 5
    assert args.no_cache_content is True
    assert build_arg_parser().parse_args([]).no_cache_content is False
