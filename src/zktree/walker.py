"""Walk the ZooKeeper tree, classifying nodes as folders or leaves."""

from __future__ import annotations

import logging
import time
from collections.abc import Iterator
from typing import TYPE_CHECKING

from zktree.models import MASKED_VALUE, ROLE_ADMIN, ROLE_USER, ROOT_PATH, LeafBean, LeafLookup
from zktree.paths import is_system_path, join_path
from zktree.store import NotFoundError, StoreError, get_children, get_data

if TYPE_CHECKING:
    from kazoo.client import KazooClient

logger = logging.getLogger(__name__)

_PASSWORD_MARKERS = ("PWD", "pwd", "PASSWORD", "password")


def is_password_field(name: str) -> bool:
    """True when *name* looks like it holds a secret (case-sensitive markers)."""
    return any(marker in name for marker in _PASSWORD_MARKERS)


def mask_value(name: str, value: bytes, role: str) -> bytes:
    """Return *value*, or the masked sentinel for password fields seen by non-admins."""
    if role != ROLE_ADMIN and is_password_field(name):
        return MASKED_VALUE
    return value


def read_leaf(client: KazooClient, parent: str, name: str, role: str) -> LeafLookup:
    """Read the value of ``parent/name`` and mask it for *role*.

    A failed read does not raise; it comes back as a skipped lookup carrying
    the reason, so one bad node never hides the rest of the tree.
    """
    child_path = join_path(parent, name)
    logger.debug("Lookup: path=%s, child=%s, role=%s", parent, name, role)
    try:
        value = get_data(client, child_path)
    except StoreError as exc:
        return LeafLookup(child_path, reason=str(exc))
    return LeafLookup(child_path, leaf=LeafBean(name=name, path=parent, value=mask_value(name, value, role)))


def _visible_children(client: KazooClient, path: str) -> Iterator[tuple[str, str]]:
    for name in get_children(client, path):
        child_path = join_path(path, name)
        if is_system_path(child_path):
            continue
        yield name, child_path


def list_folders(client: KazooClient, path: str) -> list[str]:
    """Return the sorted names of children of *path* that have children themselves.

    Args:
        client: Connected kazoo client.
        path: Absolute path of the node to inspect.

    Returns:
        Folder names, lexicographically sorted.  The system node is never listed,
        nor is a child whose own children cannot be read.

    Raises:
        StoreError: If the children of *path* cannot be read.
    """
    folders: list[str] = []
    for name, child_path in _visible_children(client, path):
        try:
            if get_children(client, child_path):
                folders.append(name)
        except NotFoundError:
            logger.debug("Node %s vanished during listing", child_path)
        except StoreError as exc:
            logger.warning("Skipping %s: %s", child_path, exc)
    return sorted(folders)


def lookup_leaves(client: KazooClient, path: str, role: str) -> Iterator[LeafLookup]:
    """Yield a :class:`LeafLookup` for every childless child of *path*."""
    for name, child_path in _visible_children(client, path):
        try:
            if get_children(client, child_path):
                continue
        except StoreError as exc:
            yield LeafLookup(child_path, reason=str(exc))
            continue
        yield read_leaf(client, path, name, role)


def list_leaves(client: KazooClient, path: str, role: str = ROLE_USER) -> list[LeafBean]:
    """Return the leaves directly under *path*, sorted by name.

    Values of password fields are masked unless *role* is ADMIN.  Children
    that cannot be read are logged and left out.

    Raises:
        StoreError: If the children of *path* cannot be read.
    """
    leaves: list[LeafBean] = []
    for lookup in lookup_leaves(client, path, role):
        if lookup.ok:
            leaves.append(lookup.leaf)
        else:
            logger.warning("Skipping %s: %s", lookup.path, lookup.reason)
    return sorted(leaves, key=lambda leaf: leaf.name)


def _walk(client: KazooClient, path: str, role: str) -> Iterator[LeafBean]:
    """Depth-first, pre-order: leaves of *path* first, then each folder."""
    yield from list_leaves(client, path, role)
    for folder in list_folders(client, path):
        yield from _walk(client, join_path(path, folder), role)


def export_tree(
    client: KazooClient,
    path: str = ROOT_PATH,
    role: str = ROLE_USER,
) -> tuple[LeafBean, ...]:
    """Collect every leaf under *path*.

    The walk is not transactional: nodes changing mid-walk may or may not be
    reflected.  The system namespace is never entered.

    Args:
        client: Connected kazoo client.
        path: Absolute path to export from; ``"/"`` exports everything.
        role: ``"USER"`` (password fields masked) or ``"ADMIN"``.

    Returns:
        Unique leaves ordered by name, then parent path.
    """
    if is_system_path(path):
        return ()
    started = time.monotonic()
    leaves = set(_walk(client, path, role))
    logger.debug(
        "Exported %d leaves under %s in %.3fs", len(leaves), path, time.monotonic() - started
    )
    return tuple(sorted(leaves))
