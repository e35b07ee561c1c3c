"""Built-in convention document tools."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

from readme_mcp.config import ServerConfig
from readme_mcp.editing import init_readme, update_document
from readme_mcp.index import ReadmeContext, ReadmeIndex, format_context_prompt, resolve_for
from readme_mcp.security import (
    PolicyBlockedError,
    enforce_batch_path_limit,
    enforce_document_policy,
    enforce_operation_limit,
    is_protected,
    project_relative,
    resolve_project_path,
)
from readme_mcp.tools.registry import ToolDispatchError, ToolHandler, ToolRegistry
from readme_mcp.validation import ReadmeValidator, validate_index

IndexProvider = Callable[[tuple[str, ...] | None, bool], ReadmeIndex]
AuditReader = Callable[[str | None, int], list[dict[str, object]]]

DEFAULT_AUDIT_LIMIT = 50
MAX_AUDIT_LIMIT = 500


def register_builtin_tools(
    registry: ToolRegistry,
    config: ServerConfig,
    scan_index: IndexProvider,
    read_audit_entries: AuditReader,
    validator: ReadmeValidator,
) -> None:
    """Register the convention document tool set in a stable order."""
    registry.register(
        "readme.status",
        _status_handler(config, scan_index, registry),
        "Report the project root, effective configuration and document count.",
    )
    registry.register(
        "readme.discover",
        _discover_handler(config, scan_index),
        "Scan the project for convention documents.",
    )
    registry.register(
        "readme.get_context",
        _get_context_handler(config, scan_index),
        "Return the documents that apply to one file or directory.",
    )
    registry.register(
        "readme.get_context_many",
        _get_context_many_handler(config, scan_index),
        "Return the documents that apply to each of several paths.",
    )
    registry.register(
        "readme.update",
        _update_handler(config, validator),
        "Apply structured edit operations to a convention document.",
    )
    registry.register(
        "readme.validate",
        _validate_handler(config, scan_index, validator),
        "Check every convention document against the quality rules.",
    )
    registry.register(
        "readme.init",
        _init_handler(config),
        "Create a starter convention document in a directory.",
    )
    registry.register(
        "readme.audit_log",
        _audit_log_handler(read_audit_entries),
        "Read recent entries from the request audit log.",
    )


def _status_handler(
    config: ServerConfig,
    scan_index: IndexProvider,
    registry: ToolRegistry,
) -> ToolHandler:
    def handler(_: dict[str, object]) -> dict[str, object]:
        index = scan_index(None, False)
        return {
            "repo_root": str(config.repo_root),
            "readme_filename": config.scan.readme_filename,
            "document_count": len(index.entries),
            "tools": registry.describe(),
            "effective_config": config.to_public_dict(),
        }

    return handler


def _discover_handler(config: ServerConfig, scan_index: IndexProvider) -> ToolHandler:
    def handler(arguments: dict[str, object]) -> dict[str, object]:
        exclude_globs = _optional_globs(arguments, "readme.discover")
        include_content = _optional_bool(arguments, "include_content", False, "readme.discover")
        index = scan_index(exclude_globs, include_content)
        result: dict[str, object] = {
            "project_root": index.project_root,
            "readme_filename": config.scan.readme_filename,
            "total_found": len(index.entries),
            "readme_files": [
                entry.to_dict(include_content=include_content) for entry in index.entries
            ],
            "last_updated": index.built_at,
        }
        if index.warnings:
            result["__warnings__"] = list(index.warnings)
        return result

    return handler


def _get_context_handler(config: ServerConfig, scan_index: IndexProvider) -> ToolHandler:
    def handler(arguments: dict[str, object]) -> dict[str, object]:
        path_value = arguments.get("path")
        if not isinstance(path_value, str) or not path_value.strip():
            raise ToolDispatchError(
                code="INVALID_PARAMS",
                message="readme.get_context path must be a non-empty string.",
            )
        include_root = _optional_bool(arguments, "include_root", True, "readme.get_context")
        exclude_globs = _optional_globs(arguments, "readme.get_context")

        target = _target_path(config.repo_root, path_value)
        index = scan_index(exclude_globs, True)
        contexts = resolve_for(index, target, include_root=include_root)
        return {
            "path": path_value,
            "total_contexts": len(contexts),
            "contexts": [_context_to_dict(context) for context in contexts],
            "formatted_prompt": format_context_prompt(path_value, contexts),
        }

    return handler


def _get_context_many_handler(config: ServerConfig, scan_index: IndexProvider) -> ToolHandler:
    def handler(arguments: dict[str, object]) -> dict[str, object]:
        paths_value = arguments.get("paths")
        if not isinstance(paths_value, list) or not paths_value:
            raise ToolDispatchError(
                code="INVALID_PARAMS",
                message="readme.get_context_many paths must be a non-empty list of strings.",
            )
        if any(not isinstance(item, str) or not item.strip() for item in paths_value):
            raise ToolDispatchError(
                code="INVALID_PARAMS",
                message="readme.get_context_many paths must contain only non-empty strings.",
            )
        enforce_batch_path_limit(len(paths_value), config.limits)
        include_root = _optional_bool(
            arguments, "include_root", True, "readme.get_context_many"
        )
        exclude_globs = _optional_globs(arguments, "readme.get_context_many")

        targets = {path: _target_path(config.repo_root, path) for path in paths_value}
        index = scan_index(exclude_globs, True)
        results: dict[str, object] = {}
        for path, target in targets.items():
            contexts = resolve_for(index, target, include_root=include_root)
            results[path] = [_context_to_dict(context) for context in contexts]
        return {"total_paths": len(results), "results": results}

    return handler


def _update_handler(config: ServerConfig, validator: ReadmeValidator) -> ToolHandler:
    def handler(arguments: dict[str, object]) -> dict[str, object]:
        path_value = arguments.get("readme_path")
        if not isinstance(path_value, str) or not path_value.strip():
            raise ToolDispatchError(
                code="INVALID_PARAMS",
                message="readme.update readme_path must be a non-empty string.",
            )
        operations_value = arguments.get("operations")
        if not isinstance(operations_value, list) or not operations_value:
            raise ToolDispatchError(
                code="INVALID_PARAMS",
                message="readme.update operations must be a non-empty list.",
            )
        enforce_operation_limit(len(operations_value), config.limits)

        resolved = resolve_project_path(project_root=config.repo_root, candidate=path_value)
        enforce_document_policy(
            project_root=config.repo_root,
            resolved_path=resolved,
            readme_filename=config.scan.readme_filename,
            limits=config.limits,
        )
        relative = project_relative(config.repo_root, resolved)
        outcome = update_document(resolved, operations_value)
        result: dict[str, object] = {"readme_path": relative, **outcome.to_dict()}
        if not outcome.success:
            result["summary"] = "No changes were written."
            return result

        count = len(outcome.changes)
        result["summary"] = f"Applied {count} operation{'s' if count != 1 else ''} to {relative}."
        validation = validator.validate(resolved, display_path=relative)
        warnings = [
            f"{issue.type}: {issue.message}" for issue in validation.issues if issue.type != "info"
        ]
        result["validation"] = {
            "valid": validation.valid,
            "score": validation.score,
            "warnings": warnings,
            "stats": (
                {
                    "tokens": validation.stats.tokens,
                    "lines": validation.stats.lines,
                    "characters": validation.stats.characters,
                }
                if validation.stats is not None
                else None
            ),
        }
        if warnings:
            result["__warnings__"] = [f"{relative}: {warning}" for warning in warnings]
        return result

    return handler


def _validate_handler(
    config: ServerConfig,
    scan_index: IndexProvider,
    validator: ReadmeValidator,
) -> ToolHandler:
    def handler(arguments: dict[str, object]) -> dict[str, object]:
        exclude_globs = _optional_globs(arguments, "readme.validate")
        index = scan_index(exclude_globs, False)
        results, summary = validate_index(index, validator)
        if not results:
            message = f"No {config.scan.readme_filename} files found to validate."
        elif summary.invalid_files:
            message = f"{summary.invalid_files} of {summary.total_files} documents have errors."
        else:
            message = f"All {summary.total_files} documents passed validation."
        return {
            "message": message,
            "summary": {
                "total_files": summary.total_files,
                "valid_files": summary.valid_files,
                "invalid_files": summary.invalid_files,
                "total_issues": summary.total_issues,
                "average_score": summary.average_score,
                "issues_by_severity": dict(summary.issues_by_severity),
            },
            "results": [result.to_dict() for result in results],
            "config": validator.config.to_public_dict(),
        }

    return handler


def _init_handler(config: ServerConfig) -> ToolHandler:
    def handler(arguments: dict[str, object]) -> dict[str, object]:
        target_value = arguments.get("target_path", ".")
        if not isinstance(target_value, str) or not target_value.strip():
            raise ToolDispatchError(
                code="INVALID_PARAMS",
                message="readme.init target_path must be a non-empty string.",
            )
        name_value = arguments.get("project_name")
        if name_value is not None and not isinstance(name_value, str):
            raise ToolDispatchError(
                code="INVALID_PARAMS",
                message="readme.init project_name must be a string.",
            )
        overwrite = _optional_bool(arguments, "overwrite", False, "readme.init")
        smart = _optional_bool(arguments, "smart", True, "readme.init")

        target_dir = resolve_project_path(project_root=config.repo_root, candidate=target_value)
        if is_protected(config.repo_root, target_dir / config.scan.readme_filename):
            raise PolicyBlockedError(
                reason="Path is inside protected version-control metadata.",
                hint="Initialize documents in the working tree.",
            )
        outcome = init_readme(
            target_dir,
            config.scan.readme_filename,
            project_name=name_value or None,
            overwrite=overwrite,
            smart=smart,
            stop_at=config.repo_root,
        )
        document = Path(outcome.path)
        return {
            "success": outcome.success,
            "readme_path": project_relative(config.repo_root, document),
            "action": outcome.action,
            "message": outcome.message,
            "project_info": outcome.project_info,
        }

    return handler


def _audit_log_handler(read_audit_entries: AuditReader) -> ToolHandler:
    def handler(arguments: dict[str, object]) -> dict[str, object]:
        since_value = arguments.get("since")
        limit_value = arguments.get("limit", DEFAULT_AUDIT_LIMIT)

        since: str | None = since_value if isinstance(since_value, str) else None
        limit = limit_value if isinstance(limit_value, int) else DEFAULT_AUDIT_LIMIT
        limit = max(1, min(limit, MAX_AUDIT_LIMIT))
        return {"entries": read_audit_entries(since, limit)}

    return handler


def _target_path(repo_root: Path, candidate: str) -> str:
    """Sandbox a caller path and return its project-relative routing form.

    A trailing separator is kept so the router still treats it as a directory.
    """
    resolved = resolve_project_path(project_root=repo_root, candidate=candidate)
    relative = project_relative(repo_root, resolved)
    if candidate.replace("\\", "/").endswith("/") and relative:
        return f"{relative}/"
    return relative


def _context_to_dict(context: ReadmeContext) -> dict[str, object]:
    return {
        "path": context.path,
        "relevance": context.relevance,
        "distance": context.distance,
        "content": context.content,
    }


def _optional_bool(
    arguments: dict[str, object], key: str, default: bool, tool_name: str
) -> bool:
    value = arguments.get(key, default)
    if not isinstance(value, bool):
        raise ToolDispatchError(
            code="INVALID_PARAMS",
            message=f"{tool_name} {key} must be a boolean.",
        )
    return value


def _optional_globs(arguments: dict[str, object], tool_name: str) -> tuple[str, ...] | None:
    value = arguments.get("exclude_patterns")
    if value is None:
        return None
    if not isinstance(value, list) or any(not isinstance(item, str) for item in value):
        raise ToolDispatchError(
            code="INVALID_PARAMS",
            message=f"{tool_name} exclude_patterns must be a list of strings.",
        )
    return tuple(value)

