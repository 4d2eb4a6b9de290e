"""Path helpers and the value escaping used by the export format."""

from __future__ import annotations

from zktree.models import ROOT_PATH, SYSTEM_NODE

_NEWLINE = "\n"
_ESCAPED_NEWLINE = "\\n"


def join_path(parent: str, name: str) -> str:
    """Join *parent* and *name* without doubling the slash at the root."""
    if parent == ROOT_PATH:
        return ROOT_PATH + name
    return f"{parent}/{name}"


def split_path(path: str) -> tuple[str, str]:
    """Split an absolute *path* into ``(parent, name)``.

    >>> split_path("/app/db/host")
    ('/app/db', 'host')
    >>> split_path("/app")
    ('/', 'app')
    """
    path = path.rstrip("/") or ROOT_PATH
    if path == ROOT_PATH:
        raise ValueError("The root path has no parent")
    parent, _, name = path.rpartition("/")
    return parent or ROOT_PATH, name


def segments(path: str) -> list[str]:
    return [s for s in path.split("/") if s]


def is_system_path(path: str) -> bool:
    """True when *path* lies in the ZooKeeper system namespace (``/zookeeper``)."""
    parts = segments(path)
    return bool(parts) and parts[0] == SYSTEM_NODE


def externalize(value: bytes | None) -> str:
    """Return *value* as single-line text, with newlines written as ``\\n``."""
    if value is None:
        return ""
    return value.decode("utf-8", errors="replace").replace(_NEWLINE, _ESCAPED_NEWLINE)


def internalize(text: str) -> str:
    """Reverse :func:`externalize`: turn literal ``\\n`` sequences back into newlines."""
    return text.replace(_ESCAPED_NEWLINE, _NEWLINE)
