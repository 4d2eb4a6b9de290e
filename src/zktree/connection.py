"""Open and close ZooKeeper sessions."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Iterator
from contextlib import contextmanager

from kazoo.client import KazooClient

from zktree.config import CONNECT_BACKOFF, DEFAULT_CONNECT_ATTEMPTS, DEFAULT_TIMEOUT, Settings
from zktree.store import StoreConnectionError

logger = logging.getLogger(__name__)


def _log_state(state: str) -> None:
    logger.debug("ZooKeeper connection state: %s", state)


def connect(
    hosts: str,
    timeout: float = DEFAULT_TIMEOUT,
    max_attempts: int = DEFAULT_CONNECT_ATTEMPTS,
    backoff: float = CONNECT_BACKOFF,
    client_factory: Callable[..., KazooClient] = KazooClient,
) -> KazooClient:
    """Start a session against *hosts* and wait briefly for it to connect.

    The wait is best effort: after *max_attempts* polls spaced *backoff*
    seconds apart the client is returned whether or not it is connected.
    Use :func:`require_connected` when a ready session is needed.

    Args:
        hosts: ZooKeeper connect string, e.g. ``"zk1:2181,zk2:2181"``.
        timeout: Session timeout in seconds.
        max_attempts: Number of readiness polls.
        backoff: Delay between polls, in seconds.
        client_factory: Builds the client; defaults to :class:`KazooClient`.

    Returns:
        The started client, possibly not yet connected.
    """
    client = client_factory(hosts=hosts, timeout=timeout)
    client.add_listener(_log_state)
    client.start_async()

    attempt = 0
    while not client.connected:
        time.sleep(backoff)
        attempt += 1
        if attempt >= max_attempts:
            logger.warning(
                "Session to %s not ready after %d attempts; continuing anyway", hosts, attempt
            )
            break
    return client


def require_connected(client: KazooClient, hosts: str | None = None) -> None:
    """Raise :class:`StoreConnectionError` unless *client* is connected."""
    if not client.connected:
        where = f" to {hosts}" if hosts else ""
        raise StoreConnectionError(f"ZooKeeper session{where} is not connected")


def close_session(client: KazooClient | None) -> None:
    """Stop and close *client*.  Does nothing when there is no session."""
    if client is None:
        return
    logger.debug("Closing ZooKeeper session")
    client.stop()
    client.close()


@contextmanager
def open_session(
    settings: Settings,
    client_factory: Callable[..., KazooClient] = KazooClient,
) -> Iterator[KazooClient]:
    """Yield a connected client built from *settings*; always closes it."""
    client = connect(
        settings.hosts,
        timeout=settings.timeout,
        max_attempts=settings.connect_attempts,
        client_factory=client_factory,
    )
    try:
        require_connected(client, settings.hosts)
        yield client
    finally:
        close_session(client)
