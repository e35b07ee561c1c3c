"""Configuration loading and deterministic merge order."""

from __future__ import annotations

import tomllib
from dataclasses import dataclass, field
from pathlib import Path

from readme_mcp.security import SecurityLimits

CONFIG_FILENAME = "readme_mcp.toml"

MAX_FILE_BYTES_CAP = 4 * 1024 * 1024
MAX_TOTAL_BYTES_PER_RESPONSE_CAP = 4 * 1024 * 1024
MAX_OPERATIONS_CAP = 500
MAX_BATCH_PATHS_CAP = 500

DEFAULT_README_FILENAME = "AI_README.md"
DEFAULT_EXCLUDE_GLOBS = (
    "**/node_modules/**",
    "**/.git/**",
    "**/dist/**",
    "**/build/**",
    "**/.next/**",
    "**/coverage/**",
    "**/__pycache__/**",
    "**/.venv/**",
)


@dataclass(slots=True, frozen=True)
class ScanOptions:
    """Settings for one convention document scan."""

    readme_filename: str = DEFAULT_README_FILENAME
    exclude_globs: tuple[str, ...] = DEFAULT_EXCLUDE_GLOBS
    cache_content: bool = True


@dataclass(slots=True, frozen=True)
class ValidationRules:
    """Structural rules checked by the validator."""

    require_h1: bool = True
    require_sections: tuple[str, ...] = ()
    allow_code_blocks: bool = False
    max_line_length: int = 150


@dataclass(slots=True, frozen=True)
class TokenLimits:
    """Estimated token thresholds, ascending."""

    excellent: int = 300
    good: int = 400
    warning: int = 600
    error: int = 1000


@dataclass(slots=True, frozen=True)
class ValidationConfig:
    """Fully resolved validator settings."""

    max_tokens: int = 400
    rules: ValidationRules = field(default_factory=ValidationRules)
    token_limits: TokenLimits = field(default_factory=TokenLimits)

    def to_public_dict(self) -> dict[str, object]:
        """Return serializable validation settings."""
        return {
            "max_tokens": self.max_tokens,
            "rules": {
                "require_h1": self.rules.require_h1,
                "require_sections": list(self.rules.require_sections),
                "allow_code_blocks": self.rules.allow_code_blocks,
                "max_line_length": self.rules.max_line_length,
            },
            "token_limits": {
                "excellent": self.token_limits.excellent,
                "good": self.token_limits.good,
                "warning": self.token_limits.warning,
                "error": self.token_limits.error,
            },
        }


@dataclass(slots=True, frozen=True)
class ServerConfig:
    """Fully merged server configuration."""

    repo_root: Path
    data_dir: Path
    limits: SecurityLimits
    scan: ScanOptions
    validation: ValidationConfig

    def to_public_dict(self) -> dict[str, object]:
        """Return serializable config snapshot for tool responses."""
        return {
            "repo_root": str(self.repo_root),
            "data_dir": str(self.data_dir),
            "limits": {
                "max_file_bytes": self.limits.max_file_bytes,
                "max_total_bytes_per_response": self.limits.max_total_bytes_per_response,
                "max_operations": self.limits.max_operations,
                "max_batch_paths": self.limits.max_batch_paths,
            },
            "scan": {
                "readme_filename": self.scan.readme_filename,
                "exclude_globs": list(self.scan.exclude_globs),
                "cache_content": self.scan.cache_content,
            },
            "validation": self.validation.to_public_dict(),
        }


@dataclass(slots=True, frozen=True)
class CliOverrides:
    """Optional startup overrides applied at highest precedence."""

    data_dir: Path | None = None
    readme_filename: str | None = None
    cache_content: bool | None = None
    max_file_bytes: int | None = None
    max_total_bytes_per_response: int | None = None
    max_operations: int | None = None


def default_config(repo_root: Path) -> ServerConfig:
    """Build default config for a given project root."""
    resolved_root = repo_root.resolve()
    return ServerConfig(
        repo_root=resolved_root,
        data_dir=resolved_root / ".readme_mcp",
        limits=SecurityLimits(),
        scan=ScanOptions(),
        validation=ValidationConfig(),
    )


def load_repo_config_file(repo_root: Path) -> dict[str, object]:
    """Load optional readme_mcp.toml from the project root."""
    config_path = repo_root / CONFIG_FILENAME
    if not config_path.exists():
        return {}
    with config_path.open("rb") as handle:
        payload = tomllib.load(handle)
    if not isinstance(payload, dict):
        raise ValueError(f"{CONFIG_FILENAME} must contain a top-level table.")
    return payload


def _get_table(payload: dict[str, object], key: str, prefix: str = "") -> dict[str, object]:
    value = payload.get(key, {})
    if not isinstance(value, dict):
        raise ValueError(f"Config section '{prefix}{key}' must be a table.")
    return value


def _tuple_of_strings(value: object, name: str) -> tuple[str, ...]:
    if not isinstance(value, list):
        raise ValueError(f"Config field '{name}' must be a list of strings.")
    output: list[str] = []
    for item in value:
        if not isinstance(item, str):
            raise ValueError(f"Config field '{name}' must contain only strings.")
        output.append(item)
    return tuple(output)


def _optional_bool(value: object, name: str, default: bool) -> bool:
    if value is None:
        return default
    if not isinstance(value, bool):
        raise ValueError(f"Config field '{name}' must be a boolean.")
    return value


def _optional_filename(value: object, name: str, default: str) -> str:
    if value is None:
        return default
    if not isinstance(value, str) or not value.strip():
        raise ValueError(f"Config field '{name}' must be a non-empty string.")
    if "/" in value or "\\" in value:
        raise ValueError(f"Config field '{name}' must be a bare filename.")
    return value


def merge_config(
    base: ServerConfig, repo_payload: dict[str, object], overrides: CliOverrides
) -> ServerConfig:
    """Merge defaults, repo config, then CLI/startup overrides."""
    limits_payload = _get_table(repo_payload, "limits")
    scan_payload = _get_table(repo_payload, "scan")
    validation_payload = _get_table(repo_payload, "validation")
    rules_payload = _get_table(validation_payload, "rules", prefix="validation.")
    token_payload = _get_table(validation_payload, "token_limits", prefix="validation.")

    limits = SecurityLimits(
        max_file_bytes=_optional_positive_int_with_cap(
            limits_payload.get("max_file_bytes"),
            "limits.max_file_bytes",
            base.limits.max_file_bytes,
            MAX_FILE_BYTES_CAP,
        ),
        max_total_bytes_per_response=_optional_positive_int_with_cap(
            limits_payload.get("max_total_bytes_per_response"),
            "limits.max_total_bytes_per_response",
            base.limits.max_total_bytes_per_response,
            MAX_TOTAL_BYTES_PER_RESPONSE_CAP,
        ),
        max_operations=_optional_positive_int_with_cap(
            limits_payload.get("max_operations"),
            "limits.max_operations",
            base.limits.max_operations,
            MAX_OPERATIONS_CAP,
        ),
        max_batch_paths=_optional_positive_int_with_cap(
            limits_payload.get("max_batch_paths"),
            "limits.max_batch_paths",
            base.limits.max_batch_paths,
            MAX_BATCH_PATHS_CAP,
        ),
    )

    exclude_globs = base.scan.exclude_globs
    if "exclude_globs" in scan_payload:
        exclude_globs = _tuple_of_strings(scan_payload["exclude_globs"], "scan.exclude_globs")
    scan = ScanOptions(
        readme_filename=_optional_filename(
            scan_payload.get("readme_filename"),
            "scan.readme_filename",
            base.scan.readme_filename,
        ),
        exclude_globs=exclude_globs,
        cache_content=_optional_bool(
            scan_payload.get("cache_content"), "scan.cache_content", base.scan.cache_content
        ),
    )

    base_rules = base.validation.rules
    require_sections = base_rules.require_sections
    if "require_sections" in rules_payload:
        require_sections = _tuple_of_strings(
            rules_payload["require_sections"], "validation.rules.require_sections"
        )
    rules = ValidationRules(
        require_h1=_optional_bool(
            rules_payload.get("require_h1"), "validation.rules.require_h1", base_rules.require_h1
        ),
        require_sections=require_sections,
        allow_code_blocks=_optional_bool(
            rules_payload.get("allow_code_blocks"),
            "validation.rules.allow_code_blocks",
            base_rules.allow_code_blocks,
        ),
        max_line_length=_optional_positive_int(
            rules_payload.get("max_line_length"),
            "validation.rules.max_line_length",
            base_rules.max_line_length,
        ),
    )
    base_tokens = base.validation.token_limits
    token_limits = TokenLimits(
        excellent=_optional_positive_int(
            token_payload.get("excellent"),
            "validation.token_limits.excellent",
            base_tokens.excellent,
        ),
        good=_optional_positive_int(
            token_payload.get("good"), "validation.token_limits.good", base_tokens.good
        ),
        warning=_optional_positive_int(
            token_payload.get("warning"), "validation.token_limits.warning", base_tokens.warning
        ),
        error=_optional_positive_int(
            token_payload.get("error"), "validation.token_limits.error", base_tokens.error
        ),
    )
    validation = ValidationConfig(
        max_tokens=_optional_positive_int(
            validation_payload.get("max_tokens"),
            "validation.max_tokens",
            base.validation.max_tokens,
        ),
        rules=rules,
        token_limits=token_limits,
    )

    merged = ServerConfig(
        repo_root=base.repo_root,
        data_dir=base.data_dir,
        limits=limits,
        scan=scan,
        validation=validation,
    )
    return apply_cli_overrides(merged, overrides)


def apply_cli_overrides(config: ServerConfig, overrides: CliOverrides) -> ServerConfig:
    """Apply startup overrides at highest precedence."""
    limits = SecurityLimits(
        max_file_bytes=_optional_positive_int_with_cap(
            overrides.max_file_bytes,
            "overrides.max_file_bytes",
            config.limits.max_file_bytes,
            MAX_FILE_BYTES_CAP,
        ),
        max_total_bytes_per_response=_optional_positive_int_with_cap(
            overrides.max_total_bytes_per_response,
            "overrides.max_total_bytes_per_response",
            config.limits.max_total_bytes_per_response,
            MAX_TOTAL_BYTES_PER_RESPONSE_CAP,
        ),
        max_operations=_optional_positive_int_with_cap(
            overrides.max_operations,
            "overrides.max_operations",
            config.limits.max_operations,
            MAX_OPERATIONS_CAP,
        ),
        max_batch_paths=config.limits.max_batch_paths,
    )
    scan = ScanOptions(
        readme_filename=_optional_filename(
            overrides.readme_filename, "overrides.readme_filename", config.scan.readme_filename
        ),
        exclude_globs=config.scan.exclude_globs,
        cache_content=(
            overrides.cache_content
            if overrides.cache_content is not None
            else config.scan.cache_content
        ),
    )
    data_dir = overrides.data_dir or config.data_dir
    return ServerConfig(
        repo_root=config.repo_root,
        data_dir=data_dir.resolve(),
        limits=limits,
        scan=scan,
        validation=config.validation,
    )


def load_effective_config(repo_root: Path, overrides: CliOverrides | None = None) -> ServerConfig:
    """Load effective config using merge order defaults -> repo config -> overrides."""
    resolved_root = repo_root.resolve()
    base = default_config(resolved_root)
    payload = load_repo_config_file(resolved_root)
    return merge_config(base, payload, overrides or CliOverrides())


def _optional_positive_int(value: object, name: str, default: int) -> int:
    return _optional_positive_int_with_cap(value, name, default, cap=None)


def _optional_positive_int_with_cap(
    value: object,
    name: str,
    default: int,
    cap: int | None,
) -> int:
    if value is None:
        return default
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise ValueError(f"Config field '{name}' must be a positive integer.")
    if cap is not None and value > cap:
        raise ValueError(f"Config field '{name}' must be <= {cap}.")
    return value
