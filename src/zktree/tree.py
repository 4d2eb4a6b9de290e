"""Build a display tree from a flat collection of exported leaves."""

from __future__ import annotations

from collections.abc import Iterable

from zktree.models import ROOT_PATH, LeafBean, TreeNode


def build_tree(leaves: Iterable[LeafBean], root_path: str = ROOT_PATH) -> TreeNode:
    """Build a :class:`TreeNode` tree from exported leaves.

    The *root_path* becomes the root node.  Every intermediate path segment
    becomes a ``TreeNode`` with ``leaf=None``.

    Args:
        leaves: Leaves as returned by :func:`~zktree.walker.export_tree`.
        root_path: The path that forms the root of the returned tree.

    Returns:
        Root :class:`TreeNode`.  Leaves outside *root_path* are ignored.
    """
    root_path = root_path.rstrip("/") or ROOT_PATH
    root = TreeNode(name=root_path, path=root_path)

    for leaf in leaves:
        _insert(root, leaf, root_path)

    return root


def _insert(root: TreeNode, leaf: LeafBean, root_path: str) -> None:
    """Insert *leaf* into the tree rooted at *root*."""
    path = leaf.full_path

    if root_path == ROOT_PATH:
        relative = path.lstrip("/")
    elif path.startswith(root_path + "/"):
        relative = path[len(root_path) + 1 :]
    else:
        return  # leaf is outside the root subtree

    current = root
    accumulated_path = root_path.rstrip("/")
    for segment in relative.split("/"):
        accumulated_path = f"{accumulated_path}/{segment}"
        if segment not in current.children:
            current.children[segment] = TreeNode(name=segment, path=accumulated_path)
        current = current.children[segment]
    current.leaf = leaf
