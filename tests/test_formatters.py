"""Tests for zktree.formatters."""

from __future__ import annotations

from rich.console import Console
from rich.table import Table
from rich.tree import Tree

from zktree.formatters import (
    _truncate,
    render_import_plan,
    render_leaves,
    render_listing,
    render_tree,
)
from zktree.models import MASKED_VALUE, DeleteEntry, ImportEntry, LeafBean
from zktree.paths import split_path
from zktree.tree import build_tree


def _leaf(path: str, value: bytes = b"val") -> LeafBean:
    parent, name = split_path(path)
    return LeafBean(name=name, path=parent, value=value)


def _render_to_str(rich_obj) -> str:
    """Render a Rich renderable to a plain string."""
    console = Console(force_terminal=False, width=200)
    with console.capture() as cap:
        console.print(rich_obj)
    return cap.get()


class TestTruncate:
    def test_short_value_unchanged(self):
        assert _truncate("hello") == "hello"

    def test_exact_max_unchanged(self):
        v = "x" * 60
        assert _truncate(v) == v

    def test_long_value_truncated(self):
        v = "x" * 61
        result = _truncate(v)
        assert result.endswith("…")
        assert len(result) == 61  # 60 chars + ellipsis

    def test_empty_string(self):
        assert _truncate("") == ""


class TestRenderTree:
    def test_returns_rich_tree(self):
        root = build_tree([_leaf("/app/key")], root_path="/app")
        assert isinstance(render_tree(root), Tree)

    def test_tree_contains_leaf_name(self):
        root = build_tree([_leaf("/app/key", b"myvalue")], root_path="/app")
        assert "key" in _render_to_str(render_tree(root))

    def test_tree_shows_value_by_default(self):
        root = build_tree([_leaf("/app/key", b"myvalue")], root_path="/app")
        assert "myvalue" in _render_to_str(render_tree(root))

    def test_tree_hides_value_when_requested(self):
        root = build_tree([_leaf("/app/key", b"myvalue")], root_path="/app")
        assert "myvalue" not in _render_to_str(render_tree(root, show_values=False))

    def test_masked_value_shows_redacted(self):
        root = build_tree([_leaf("/app/password", MASKED_VALUE)], root_path="/app")
        output = _render_to_str(render_tree(root, show_values=True))
        assert "[redacted]" in output
        assert MASKED_VALUE.decode() not in output

    def test_masked_value_hidden_entirely_when_show_values_false(self):
        root = build_tree([_leaf("/app/password", MASKED_VALUE)], root_path="/app")
        output = _render_to_str(render_tree(root, show_values=False))
        assert "[redacted]" not in output

    def test_multiline_value_rendered_escaped(self):
        root = build_tree([_leaf("/app/motd", b"one\ntwo")], root_path="/app")
        assert "one\\ntwo" in _render_to_str(render_tree(root))

    def test_folder_node_appears_in_output(self):
        root = build_tree([_leaf("/app/db/host")], root_path="/app")
        output = _render_to_str(render_tree(root))
        assert "db" in output
        assert "host" in output

    def test_empty_tree_renders(self):
        assert isinstance(render_tree(build_tree([], root_path="/")), Tree)


class TestRenderLeaves:
    def test_returns_table(self):
        assert isinstance(render_leaves([], title="Search: x"), Table)

    def test_paths_and_values_shown(self):
        output = _render_to_str(render_leaves([_leaf("/app/db/host", b"db1")], title="t"))
        assert "/app/db/host" in output
        assert "db1" in output

    def test_values_hidden(self):
        output = _render_to_str(
            render_leaves([_leaf("/app/db/host", b"db1")], title="t", show_values=False)
        )
        assert "db1" not in output

    def test_masked_value_redacted(self):
        output = _render_to_str(render_leaves([_leaf("/app/pwd", MASKED_VALUE)], title="t"))
        assert "[redacted]" in output


class TestRenderListing:
    def test_folders_and_leaves_shown(self):
        table = render_listing("/app", ["db"], [_leaf("/app/name", b"demo")])
        output = _render_to_str(table)
        assert "folder" in output
        assert "db" in output
        assert "demo" in output


class TestRenderImportPlan:
    def test_returns_table(self):
        assert isinstance(render_import_plan([]), Table)

    def test_actions_shown(self):
        entries = [
            ImportEntry(parent="/a", name="b", value="hello", lineno=1),
            DeleteEntry(path="/old/key", lineno=2),
        ]
        output = _render_to_str(render_import_plan(entries))
        assert "/a/b" in output
        assert "hello" in output
        assert "delete" in output
        assert "/old/key" in output
