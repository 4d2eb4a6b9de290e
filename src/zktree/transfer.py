"""Plain-text export and import of ZooKeeper leaves.

Each exported leaf is one line::

    <parent path>=<name>=<value>

The parent path is empty for children of the root and values have their
newlines escaped as ``\\n``.  On import, a line starting with ``-`` deletes
the path that follows it; every other line creates or updates a leaf.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Union

from zktree import store
from zktree.models import ROOT_PATH, DeleteEntry, ImportEntry, LeafBean
from zktree.mutations import encode_value
from zktree.paths import externalize, internalize, is_system_path, segments
from zktree.store import AlreadyExistsError, ZkTreeError

if TYPE_CHECKING:
    from kazoo.client import KazooClient

logger = logging.getLogger(__name__)

Entry = Union[ImportEntry, DeleteEntry]


class MalformedImportLine(ZkTreeError):
    """Raised when an import line cannot be parsed."""

    def __init__(self, lineno: int, line: str, problem: str) -> None:
        super().__init__(f"line {lineno}: {problem}: {line!r}")
        self.lineno = lineno
        self.line = line
        self.problem = problem


@dataclass
class ImportReport:
    """What an import did, path by path."""

    created: list[str] = field(default_factory=list)
    updated: list[str] = field(default_factory=list)
    deleted: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.created) + len(self.updated) + len(self.deleted) + len(self.skipped)


def format_leaf(leaf: LeafBean) -> str:
    parent = "" if leaf.path == ROOT_PATH else leaf.path
    return f"{parent}={leaf.name}={externalize(leaf.value)}"


def export_lines(leaves: Iterable[LeafBean]) -> list[str]:
    """Serialize *leaves* to import/export lines, preserving their order."""
    return [format_leaf(leaf) for leaf in leaves]


def parse_import_line(line: str, lineno: int = 0) -> Entry | None:
    """Parse one import line.

    Only the first two ``=`` characters are delimiters; anything after the
    second one, further ``=`` included, is the value.

    Args:
        line: The raw line; one trailing ``"\\n"`` is ignored.  Any other
            character, ``"\\r"`` included, belongs to the line.
        lineno: 1-based line number, used in error messages.

    Returns:
        A :class:`DeleteEntry`, an :class:`ImportEntry` with its value
        internalized, or ``None`` for a blank line.

    Raises:
        MalformedImportLine: On a missing delimiter, an empty or nested name,
            or a relative path.
    """
    line = line.removesuffix("\n")
    if not line.strip():
        return None

    if line.startswith("-"):
        path = line[1:]
        if not path.startswith("/"):
            raise MalformedImportLine(lineno, line, "path to delete must be absolute")
        if "//" in path:
            raise MalformedImportLine(lineno, line, "path to delete has an empty segment")
        return DeleteEntry(path=path, lineno=lineno)

    parent, sep, rest = line.partition("=")
    if not sep:
        raise MalformedImportLine(lineno, line, "missing '=' after the parent path")
    name, sep, raw_value = rest.partition("=")
    if not sep:
        raise MalformedImportLine(lineno, line, "missing '=' after the name")
    if not name or "/" in name:
        raise MalformedImportLine(lineno, line, "name must be a single path segment")
    if parent and not parent.startswith("/"):
        raise MalformedImportLine(lineno, line, "parent path must be absolute")
    if "//" in parent:
        raise MalformedImportLine(lineno, line, "parent path has an empty segment")

    return ImportEntry(
        parent=parent.rstrip("/"),
        name=name,
        value=internalize(raw_value),
        lineno=lineno,
    )


def parse_import(lines: Iterable[str]) -> list[Entry]:
    """Parse a whole import batch before anything is written."""
    entries: list[Entry] = []
    for lineno, line in enumerate(lines, start=1):
        entry = parse_import_line(line, lineno)
        if entry is not None:
            entries.append(entry)
    return entries


def create_if_absent(client: KazooClient, path: str, value: bytes, force: bool) -> bool:
    """Create *path* unless it exists; with *force*, replace an existing node.

    Returns:
        True if a node was written.

    Raises:
        StoreError: On any failure other than the node already existing,
            including replacing a node that has children.
    """
    try:
        store.create(client, path, value)
        return True
    except AlreadyExistsError:
        if not force:
            logger.debug("Node %s already exists, leaving it", path)
            return False
    logger.debug("Replacing existing node %s", path)
    store.delete(client, path)
    store.create(client, path, value)
    return True


def create_path_and_node(
    client: KazooClient,
    parent: str,
    name: str,
    value: bytes,
    force: bool = True,
) -> str:
    """Create ``parent/name``, first creating any missing folders of *parent*.

    Missing folders are created empty.  Returns the full path of the leaf.
    """
    current = ""
    for segment in segments(parent):
        current = f"{current}/{segment}"
        if not store.exists(client, current):
            create_if_absent(client, current, b"", force=False)

    leaf_path = f"{current}/{name}"
    create_if_absent(client, leaf_path, value, force)
    return leaf_path


def apply_import(
    client: KazooClient,
    entries: Iterable[Entry],
    overwrite: bool = False,
) -> ImportReport:
    """Apply parsed import *entries* in order.

    Deletes are unconditional, so deleting a missing node raises
    :class:`~zktree.store.NotFoundError`.  Existing leaves are only updated
    when *overwrite* is set.  Entries in the system namespace are skipped.
    """
    report = ImportReport()
    for entry in entries:
        if isinstance(entry, DeleteEntry):
            if is_system_path(entry.path):
                logger.debug("Skipping system node delete: %s", entry.path)
                report.skipped.append(entry.path)
                continue
            logger.debug("Deleting %s", entry.path)
            store.delete(client, entry.path)
            report.deleted.append(entry.path)
            continue

        full_path = entry.full_path
        if is_system_path(full_path):
            logger.debug("Skipping system node import: %s", full_path)
            report.skipped.append(full_path)
            continue

        value = encode_value(entry.value)
        if not store.exists(client, full_path):
            create_path_and_node(client, entry.parent, entry.name, value)
            report.created.append(full_path)
        elif overwrite:
            store.set_data(client, full_path, value)
            report.updated.append(full_path)
        else:
            logger.info(
                "Skipping update for existing property %s as overwrite is not enabled", full_path
            )
            report.skipped.append(full_path)
    return report


def import_data(
    client: KazooClient,
    lines: Iterable[str],
    overwrite: bool = False,
) -> ImportReport:
    """Parse and apply an import file given as *lines*.

    A malformed line aborts the import before any change is made; store
    failures abort it part way through.
    """
    return apply_import(client, parse_import(lines), overwrite=overwrite)
