from __future__ import annotations

import pytest

from rusty_refactor.core.paths import (
    breadcrumb,
    is_same_path,
    join_path,
    normalize_path,
    parent_path,
)


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("src/models", "src/models"),
        ("src\\models\\user", "src/models/user"),
        ("/src//models/", "src/models"),
        (" src / models ", "src/models"),
        ("", ""),
    ],
)
def test_normalize_path(raw: str, expected: str) -> None:
    assert normalize_path(raw) == expected


def test_normalize_is_idempotent() -> None:
    once = normalize_path("\\src\\\\a/b/")
    assert normalize_path(once) == once


def test_join_path_drops_empty_parts() -> None:
    assert join_path("", "src", "models/", "user.rs") == "src/models/user.rs"


class TestParentPath:
    def test_nested(self) -> None:
        assert parent_path("src/models/user") == "src/models"

    def test_source_root_ascends_to_workspace(self) -> None:
        assert parent_path("src") == ""

    def test_workspace_root_stays(self) -> None:
        assert parent_path("") == ""

    def test_custom_source_root(self) -> None:
        assert parent_path("crates/core", source_root="crates/core") == ""


def test_breadcrumb() -> None:
    assert breadcrumb("src/models/user") == ["src", "models", "user"]
    assert breadcrumb("") == []


def test_is_same_path_ignores_separators() -> None:
    assert is_same_path("src\\models", "/src/models/")
    assert not is_same_path("src/models", "src/model")
