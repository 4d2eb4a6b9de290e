"""Thin wrappers over the kazoo client primitives.

Every call goes through :func:`_translate`, which turns kazoo exceptions into
the zktree error taxonomy.  Writes and deletes always use version ``-1`` so
that no optimistic-concurrency check is made here.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from typing import TYPE_CHECKING

from kazoo.exceptions import KazooException, NodeExistsError, NoNodeError
from kazoo.handlers.threading import KazooTimeoutError

if TYPE_CHECKING:
    from kazoo.client import KazooClient

logger = logging.getLogger(__name__)

ANY_VERSION = -1


class ZkTreeError(Exception):
    """Base class for zktree errors."""


class StoreError(ZkTreeError):
    """Raised when a ZooKeeper call fails."""


class NotFoundError(StoreError):
    """Raised when an operation targets a node that does not exist."""


class AlreadyExistsError(StoreError):
    """Raised when creating a node that already exists."""


class StoreConnectionError(StoreError):
    """Raised when the session never became ready."""


class ReservedPathError(ZkTreeError):
    """Raised when asked to write inside the ZooKeeper system namespace."""


@contextmanager
def _translate(operation: str, path: str) -> Iterator[None]:
    try:
        yield
    except NoNodeError as exc:
        raise NotFoundError(f"{operation} {path}: node does not exist") from exc
    except NodeExistsError as exc:
        raise AlreadyExistsError(f"{operation} {path}: node already exists") from exc
    except (KazooException, KazooTimeoutError) as exc:
        detail = str(exc) or type(exc).__name__
        raise StoreError(f"{operation} {path} failed: {detail}") from exc


def get_children(client: KazooClient, path: str) -> list[str]:
    with _translate("get_children", path):
        return list(client.get_children(path) or [])


def get_data(client: KazooClient, path: str) -> bytes:
    with _translate("get", path):
        data, _stat = client.get(path)
    return data or b""


def create(client: KazooClient, path: str, value: bytes = b"") -> None:
    logger.debug("create %s", path)
    with _translate("create", path):
        client.create(path, value)


def set_data(client: KazooClient, path: str, value: bytes) -> None:
    logger.debug("set %s", path)
    with _translate("set", path):
        client.set(path, value, version=ANY_VERSION)


def delete(client: KazooClient, path: str) -> None:
    logger.debug("delete %s", path)
    with _translate("delete", path):
        client.delete(path, version=ANY_VERSION)


def exists(client: KazooClient, path: str) -> bool:
    with _translate("exists", path):
        return client.exists(path) is not None
