from __future__ import annotations

from readme_mcp.index import (
    directory_distance,
    directory_of,
    is_ancestor_or_equal,
    looks_like_file,
    matches_glob,
    normalize_path,
    target_directory,
)


def test_normalize_path_converts_separators_and_drops_dot_segments() -> None:
    assert normalize_path("apps\\web\\./src/") == "apps/web/src"
    assert normalize_path("./") == ""


def test_directory_of_root_level_file_is_root() -> None:
    assert directory_of("AI_README.md") == ""
    assert directory_of("apps/web/AI_README.md") == "apps/web"


def test_target_directory_dual_mode() -> None:
    assert looks_like_file("src/components/Button.tsx") is True
    assert target_directory("src/components/Button.tsx") == "src/components"
    assert looks_like_file("src/components") is False
    assert target_directory("src/components") == "src/components"
    assert target_directory("src/components.v2/") == "src/components.v2"


def test_ancestor_checks_respect_segment_boundaries() -> None:
    assert is_ancestor_or_equal("", "apps/web") is True
    assert is_ancestor_or_equal("apps", "apps/web") is True
    assert is_ancestor_or_equal("apps/web", "apps/web") is True
    assert is_ancestor_or_equal("apps/we", "apps/web") is False


def test_directory_distance_cases() -> None:
    assert directory_distance("", "") == 0
    assert directory_distance("apps/frontend/src/components/atoms", "") == 5
    assert directory_distance("apps/frontend", "apps/frontend") == 0
    assert directory_distance("apps/frontend/src/components/atoms", "apps/frontend") == 3
    assert directory_distance("apps/frontend/src", "apps/backend") == 3
    assert directory_distance("apps/frontend", "apps/backend") == 2


def test_matches_glob_tries_anchored_form() -> None:
    assert matches_glob("node_modules/pkg/AI_README.md", "**/node_modules/**") is True
    assert matches_glob("src/AI_README.md", "**/node_modules/**") is False


def test_matches_glob_star_crosses_directory_separators() -> None:
    assert matches_glob("apps/web/AI_README.md", "*.md") is True
    assert matches_glob("apps/web/src/AI_README.md", "apps/*") is True
    assert matches_glob("packages/AI_README.md", "apps/*") is False
