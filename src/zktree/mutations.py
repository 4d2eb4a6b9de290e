"""Create, update and delete nodes."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import TYPE_CHECKING

from zktree import store
from zktree.models import ROOT_PATH
from zktree.paths import is_system_path, join_path
from zktree.store import ReservedPathError

if TYPE_CHECKING:
    from kazoo.client import KazooClient

logger = logging.getLogger(__name__)


def encode_value(value: str | bytes | None) -> bytes:
    if value is None:
        return b""
    if isinstance(value, bytes):
        return value
    return value.encode("utf-8")


def _check_writable(path: str) -> None:
    if is_system_path(path):
        raise ReservedPathError(f"Refusing to modify system path {path}")


def create_node(client: KazooClient, parent: str, name: str, value: str | bytes | None) -> str:
    """Create ``parent/name`` holding *value* and return its path.

    Raises:
        AlreadyExistsError: If the node exists.
        NotFoundError: If *parent* does not exist.
        ReservedPathError: If the path lies in the system namespace.
    """
    node_path = join_path(parent, name)
    _check_writable(node_path)
    logger.debug("Creating node %s", node_path)
    store.create(client, node_path, encode_value(value))
    return node_path


def create_folder(
    client: KazooClient,
    folder_path: str,
    property_name: str,
    property_value: str | bytes | None,
) -> None:
    """Create an empty folder node together with its first property.

    A folder only counts as a folder while it has children, so it is never
    created alone.
    """
    _check_writable(folder_path)
    logger.debug("Creating folder %s with property %s", folder_path, property_name)
    store.create(client, folder_path, b"")
    store.create(client, join_path(folder_path, property_name), encode_value(property_value))


def set_property_value(client: KazooClient, parent: str, name: str, value: str | bytes | None) -> None:
    """Overwrite the value of ``parent/name`` regardless of its version."""
    node_path = join_path(parent, name)
    _check_writable(node_path)
    logger.debug("Setting property %s", node_path)
    store.set_data(client, node_path, encode_value(value))


def node_exists(client: KazooClient, path: str) -> bool:
    logger.debug("Checking if exists: %s", path)
    return store.exists(client, path)


def delete_leaves(client: KazooClient, paths: Iterable[str]) -> None:
    """Delete each path in *paths*, one call per entry.

    A leaf with children fails with a :class:`~zktree.store.StoreError`;
    use :func:`delete_folders` for subtrees.
    """
    for path in paths:
        _check_writable(path)
        logger.debug("Deleting leaf %s", path)
        store.delete(client, path)


def _delete_subtree(client: KazooClient, path: str) -> None:
    for name in store.get_children(client, path):
        child_path = join_path(path, name)
        if is_system_path(child_path):
            continue
        _delete_subtree(client, child_path)
    if path != ROOT_PATH:
        store.delete(client, path)


def delete_folders(client: KazooClient, paths: Iterable[str]) -> None:
    """Delete each folder in *paths* with everything beneath it.

    Children go before their parent.  Passing ``"/"`` empties the tree but
    keeps the root and the system namespace.
    """
    for path in paths:
        _check_writable(path)
        logger.debug("Deleting folder %s", path)
        _delete_subtree(client, path)
