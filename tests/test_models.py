"""Tests for zktree.models."""

from __future__ import annotations

from zktree.models import DeleteEntry, ImportEntry, LeafBean, LeafLookup, TreeNode


class TestLeafBean:
    def test_full_path_under_root(self):
        assert LeafBean(name="top", path="/").full_path == "/top"

    def test_full_path_nested(self):
        assert LeafBean(name="host", path="/app/db").full_path == "/app/db/host"

    def test_equality_ignores_value(self):
        a = LeafBean(name="host", path="/app", value=b"one")
        b = LeafBean(name="host", path="/app", value=b"two")
        assert a == b
        assert len({a, b}) == 1

    def test_different_parent_not_equal(self):
        assert LeafBean(name="host", path="/a") != LeafBean(name="host", path="/b")

    def test_orders_by_name_then_path(self):
        leaves = [
            LeafBean(name="b", path="/a"),
            LeafBean(name="a", path="/z"),
            LeafBean(name="a", path="/b"),
        ]
        ordered = sorted(leaves)
        assert [(l.name, l.path) for l in ordered] == [("a", "/b"), ("a", "/z"), ("b", "/a")]

    def test_text_decodes_value(self):
        assert LeafBean(name="k", path="/", value="héllo".encode()).text == "héllo"


class TestLeafLookup:
    def test_ok_with_leaf(self):
        lookup = LeafLookup("/a", leaf=LeafBean(name="a", path="/"))
        assert lookup.ok

    def test_skipped_has_reason(self):
        lookup = LeafLookup("/a", reason="gone")
        assert not lookup.ok
        assert lookup.reason == "gone"


class TestImportEntries:
    def test_full_path_at_root(self):
        assert ImportEntry(parent="", name="top", value="v").full_path == "/top"

    def test_full_path_nested(self):
        assert ImportEntry(parent="/a/b", name="c", value="v").full_path == "/a/b/c"

    def test_delete_entry_keeps_path(self):
        assert DeleteEntry(path="/a/b").path == "/a/b"


class TestTreeNode:
    def test_leaf_node(self):
        node = TreeNode(name="key", path="/app/key")
        assert node.is_leaf
        assert not node.is_folder

    def test_folder_node(self):
        child = TreeNode(name="host", path="/app/host")
        node = TreeNode(name="app", path="/app", children={"host": child})
        assert node.is_folder
        assert not node.is_leaf

    def test_default_children_empty(self):
        node = TreeNode(name="x", path="/x")
        assert node.children == {}
        assert node.leaf is None
