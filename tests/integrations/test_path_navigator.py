"""Tests for dotted-path resolution (src.integrations.path_navigator)."""

from __future__ import annotations

from src.integrations.path_navigator import resolve_path, split_path


class TestSplitPath:
    def test_empty_path_has_no_segments(self) -> None:
        assert split_path("") == []

    def test_splits_on_dots(self) -> None:
        assert split_path("data.users.items") == ["data", "users", "items"]


class TestResolvePath:
    """Tests for resolve_path()."""

    def test_empty_path_returns_root(self) -> None:
        root = {"a": 1}
        assert resolve_path(root, "") is root

    def test_empty_path_returns_list_root(self) -> None:
        root = [1, 2, 3]
        assert resolve_path(root, "") is root

    def test_single_segment(self) -> None:
        assert resolve_path({"collection": [1, 2]}, "collection") == [1, 2]

    def test_nested_segments(self) -> None:
        root = {"user": {"profile": {"name": "Alice"}}}
        assert resolve_path(root, "user.profile.name") == "Alice"

    def test_returns_nested_container(self) -> None:
        inner = {"name": "Alice"}
        assert resolve_path({"resource": inner}, "resource") is inner

    def test_missing_key_returns_none(self) -> None:
        assert resolve_path({"data": {}}, "data.users") is None

    def test_missing_first_segment_returns_none(self) -> None:
        assert resolve_path({"data": []}, "items") is None

    def test_list_mid_path_returns_none(self) -> None:
        """Array-index segments are not supported."""
        root = {"data": [{"name": "Alice"}]}
        assert resolve_path(root, "data.0") is None
        assert resolve_path(root, "data.name") is None

    def test_scalar_mid_path_returns_none(self) -> None:
        assert resolve_path({"name": "Alice"}, "name.first") is None

    def test_non_dict_root_returns_none(self) -> None:
        assert resolve_path("text", "a") is None
        assert resolve_path(None, "a") is None

    def test_json_null_treated_as_absent(self) -> None:
        assert resolve_path({"a": None}, "a") is None
        assert resolve_path({"a": None}, "a.b") is None

    def test_falsy_values_are_returned(self) -> None:
        root = {"count": 0, "flag": False, "label": ""}
        assert resolve_path(root, "count") == 0
        assert resolve_path(root, "flag") is False
        assert resolve_path(root, "label") == ""

    def test_keys_are_case_sensitive(self) -> None:
        assert resolve_path({"Name": "Alice"}, "name") is None
