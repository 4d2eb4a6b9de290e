"""Substring search over the whole tree."""

from __future__ import annotations

from typing import TYPE_CHECKING

from zktree.models import ROLE_USER, ROOT_PATH, LeafBean
from zktree.paths import externalize
from zktree.walker import export_tree

if TYPE_CHECKING:
    from kazoo.client import KazooClient


def leaf_matches(leaf: LeafBean, query: str) -> bool:
    return (
        query in leaf.path
        or query in leaf.name
        or query in externalize(leaf.value)
    )


def search_tree(
    client: KazooClient, query: str, role: str = ROLE_USER
) -> tuple[LeafBean, ...]:
    """Export the full tree and keep leaves whose parent path, name or value contains *query*.

    Matching is a plain, case-sensitive substring test.  Values are matched
    in their externalized form, after masking for *role*, so masked secrets
    are never searchable by non-admins.
    """
    return tuple(leaf for leaf in export_tree(client, ROOT_PATH, role) if leaf_matches(leaf, query))
