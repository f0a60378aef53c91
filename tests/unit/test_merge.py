"""Tests for settings document merging and ownership detection."""

from __future__ import annotations

import copy

import pytest

from glaze.core.errors import SettingsStoreError
from glaze.settings.merge import (
    MARKER_KEY,
    documents_equal,
    has_managed_keys_without_marker,
    is_managed_key,
    merge,
    owned_theme,
    remove,
    theme_block_key,
)

PALETTE = {
    "titleBar.activeBackground": "#112233",
    "statusBar.background": "#445566",
}


class TestOwnership:
    def test_block_key(self) -> None:
        assert theme_block_key("Nord") == "[Nord]"

    def test_managed_keys(self) -> None:
        assert is_managed_key("statusBar.background")
        assert is_managed_key(MARKER_KEY)
        assert is_managed_key("patina.active")
        assert not is_managed_key("editor.background")

    def test_owned_theme(self) -> None:
        assert owned_theme(None) is None
        assert owned_theme({}) is None
        assert owned_theme({MARKER_KEY: "Nord"}) == "Nord"

    def test_legacy_marker(self) -> None:
        assert owned_theme({"patina.activeTheme": "Monokai"}) == "Monokai"
        assert owned_theme({"patina.active": "Monokai"}) == "Monokai"

    def test_canonical_marker_first(self) -> None:
        doc = {"patina.activeTheme": "Old", MARKER_KEY: "New"}
        assert owned_theme(doc) == "New"


class TestMerge:
    def test_into_empty(self) -> None:
        result = merge(None, PALETTE, "Nord")
        assert result == {"[Nord]": PALETTE, MARKER_KEY: "Nord"}

    def test_preserves_foreign_keys(self) -> None:
        existing = {
            "editor.background": "#000000",
            "[Nord]": {"editorCursor.foreground": "#FFFFFF"},
            "[Monokai]": {"statusBar.background": "#999999"},
        }
        result = merge(existing, PALETTE, "Nord")
        assert result["editor.background"] == "#000000"
        assert result["[Nord]"]["editorCursor.foreground"] == "#FFFFFF"
        assert result["[Nord]"]["statusBar.background"] == "#445566"
        # Unowned block for another theme is never touched
        assert result["[Monokai]"] == {"statusBar.background": "#999999"}

    def test_marker_only_at_root(self) -> None:
        result = merge(None, PALETTE, "Nord")
        assert MARKER_KEY not in result["[Nord]"]
        assert result[MARKER_KEY] == "Nord"

    def test_theme_switch_moves_colors(self) -> None:
        first = merge(None, PALETTE, "Nord")
        second = merge(first, {"statusBar.background": "#ABCDEF"}, "Monokai")
        assert "[Nord]" not in second
        assert second["[Monokai]"] == {"statusBar.background": "#ABCDEF"}
        assert second[MARKER_KEY] == "Monokai"

    def test_theme_switch_keeps_foreign_keys_in_old_block(self) -> None:
        existing = {
            MARKER_KEY: "Nord",
            "[Nord]": {"statusBar.background": "#445566", "editorCursor.foreground": "#FFFFFF"},
        }
        result = merge(existing, PALETTE, "Monokai")
        assert result["[Nord]"] == {"editorCursor.foreground": "#FFFFFF"}

    def test_drops_root_managed_keys_and_legacy_markers(self) -> None:
        existing = {"statusBar.background": "#000000", "patina.activeTheme": "Nord"}
        result = merge(existing, PALETTE, "Nord")
        assert "statusBar.background" not in result
        assert "patina.activeTheme" not in result
        assert result[MARKER_KEY] == "Nord"

    def test_stale_managed_keys_removed_from_target(self) -> None:
        existing = merge(None, {**PALETTE, "sideBar.background": "#010101"}, "Nord")
        result = merge(existing, PALETTE, "Nord")
        assert result["[Nord]"] == PALETTE

    def test_does_not_mutate_input(self) -> None:
        existing = {"[Nord]": {"editorCursor.foreground": "#FFFFFF"}, MARKER_KEY: "Nord"}
        snapshot = copy.deepcopy(existing)
        merge(existing, PALETTE, "Nord")
        assert existing == snapshot

    def test_idempotent(self) -> None:
        once = merge({"editor.background": "#000000"}, PALETTE, "Nord")
        twice = merge(once, PALETTE, "Nord")
        assert documents_equal(once, twice)

    def test_refuses_non_object_theme_key(self) -> None:
        existing = {"[Nord]": "#abcdef", "editor.background": "#000000"}
        with pytest.raises(SettingsStoreError, match=r"\[Nord\]"):
            merge(existing, PALETTE, "Nord")

    def test_null_theme_key_is_replaced(self) -> None:
        result = merge({"[Nord]": None}, PALETTE, "Nord")
        assert result["[Nord]"] == PALETTE

    def test_non_object_values_elsewhere_pass_through(self) -> None:
        result = merge({"[Dracula]": "#abcdef"}, PALETTE, "Nord")
        assert result["[Dracula]"] == "#abcdef"
        assert result["[Nord]"] == PALETTE


class TestRemove:
    def test_empty(self) -> None:
        assert remove(None) is None
        assert remove({}) is None

    def test_only_managed_content(self) -> None:
        assert remove(merge(None, PALETTE, "Nord")) is None

    def test_keeps_foreign_content(self) -> None:
        existing = merge(
            {"editor.background": "#000000", "[Nord]": {"editorCursor.foreground": "#FFFFFF"}},
            PALETTE,
            "Nord",
        )
        assert remove(existing) == {
            "editor.background": "#000000",
            "[Nord]": {"editorCursor.foreground": "#FFFFFF"},
        }

    def test_leaves_unowned_blocks(self) -> None:
        existing = {MARKER_KEY: "Nord", "[Nord]": dict(PALETTE), "[Monokai]": dict(PALETTE)}
        assert remove(existing) == {"[Monokai]": PALETTE}

    def test_strips_root_managed_keys(self) -> None:
        assert remove({"statusBar.background": "#000000", "foo": "bar"}) == {"foo": "bar"}


class TestTamperDetection:
    def test_empty(self) -> None:
        assert not has_managed_keys_without_marker(None, "Nord")
        assert not has_managed_keys_without_marker({}, "Nord")

    def test_root_keys_without_marker(self) -> None:
        assert has_managed_keys_without_marker({"statusBar.background": "#000000"}, "Nord")

    def test_root_keys_with_marker(self) -> None:
        doc = {"statusBar.background": "#000000", MARKER_KEY: "Nord"}
        assert not has_managed_keys_without_marker(doc, "Nord")

    def test_block_without_marker(self) -> None:
        doc = {"[Nord]": {"statusBar.background": "#000000"}}
        assert has_managed_keys_without_marker(doc, "Nord")

    def test_block_owned_by_other_theme(self) -> None:
        doc = {"[Nord]": {"statusBar.background": "#000000"}, MARKER_KEY: "Monokai"}
        assert has_managed_keys_without_marker(doc, "Nord")

    def test_own_block(self) -> None:
        assert not has_managed_keys_without_marker(merge(None, PALETTE, "Nord"), "Nord")

    def test_legacy_marker_counts(self) -> None:
        doc = {"[Nord]": dict(PALETTE), "patina.activeTheme": "Nord"}
        assert not has_managed_keys_without_marker(doc, "Nord")

    def test_foreign_only_block(self) -> None:
        doc = {"[Nord]": {"editorCursor.foreground": "#FFFFFF"}}
        assert not has_managed_keys_without_marker(doc, "Nord")


class TestDocumentsEqual:
    def test_empty_equals_missing(self) -> None:
        assert documents_equal(None, {})
        assert documents_equal({}, None)

    def test_block_order_ignored(self) -> None:
        a = {"[Nord]": {"a": "1", "b": "2"}, "x": "y"}
        b = {"x": "y", "[Nord]": {"b": "2", "a": "1"}}
        assert documents_equal(a, b)

    def test_differences(self) -> None:
        assert not documents_equal({"x": "1"}, {"x": "2"})
        assert not documents_equal({"x": "1"}, {"y": "1"})
        assert not documents_equal({"[N]": {"a": "1"}}, {"[N]": {"a": "2"}})
        assert not documents_equal(None, {"x": "1"})
