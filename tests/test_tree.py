"""Tests for zktree.tree."""

from __future__ import annotations

from zktree.models import LeafBean
from zktree.paths import split_path
from zktree.tree import build_tree


def _leaf(path: str, value: bytes = b"v") -> LeafBean:
    parent, name = split_path(path)
    return LeafBean(name=name, path=parent, value=value)


class TestBuildTree:
    def test_empty_list_returns_root(self):
        root = build_tree([], root_path="/")
        assert root.path == "/"
        assert root.children == {}

    def test_single_leaf_creates_path(self):
        root = build_tree([_leaf("/app/key")], root_path="/")
        assert "app" in root.children
        assert "key" in root.children["app"].children
        assert root.children["app"].children["key"].leaf is not None

    def test_root_level_leaf(self):
        root = build_tree([_leaf("/top")], root_path="/")
        assert root.children["top"].leaf.name == "top"

    def test_nested_leaves(self):
        leaves = [_leaf("/app/prod/db/host"), _leaf("/app/prod/db/port")]
        root = build_tree(leaves, root_path="/")

        db_node = root.children["app"].children["prod"].children["db"]
        assert "host" in db_node.children
        assert "port" in db_node.children

    def test_intermediate_node_without_leaf(self):
        root = build_tree([_leaf("/app/prod/key")], root_path="/app")

        prod_node = root.children["prod"]
        assert prod_node.leaf is None
        assert "key" in prod_node.children

    def test_root_path_prefix(self):
        root = build_tree([_leaf("/app/prod/db/host")], root_path="/app/prod")

        assert "db" in root.children
        assert "host" in root.children["db"].children

    def test_trailing_slash_on_root_path(self):
        root = build_tree([_leaf("/app/key")], root_path="/app/")
        assert root.path == "/app"
        assert "key" in root.children

    def test_node_paths_accumulate(self):
        root = build_tree([_leaf("/x/y/z")], root_path="/")

        assert root.children["x"].path == "/x"
        assert root.children["x"].children["y"].path == "/x/y"
        assert root.children["x"].children["y"].children["z"].path == "/x/y/z"

    def test_leaves_outside_root_ignored(self):
        leaves = [_leaf("/app/prod/key"), _leaf("/other/key"), _leaf("/app/production/key")]
        root = build_tree(leaves, root_path="/app/prod")
        assert set(root.children) == {"key"}

    def test_leaf_node_is_leaf(self):
        root = build_tree([_leaf("/app/key")], root_path="/app")
        assert root.children["key"].is_leaf

    def test_folder_node_is_folder(self):
        root = build_tree([_leaf("/app/db/host")], root_path="/app")
        assert root.children["db"].is_folder
