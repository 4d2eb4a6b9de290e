"""Data models for zktree."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal, NamedTuple

ROOT_PATH = "/"
SYSTEM_NODE = "zookeeper"  # ZooKeeper's own quota/config namespace

ROLE_USER = "USER"
ROLE_ADMIN = "ADMIN"
ROLES = (ROLE_USER, ROLE_ADMIN)
Role = Literal["USER", "ADMIN"]

MASKED_VALUE = b"***REDACTED***"


@dataclass(frozen=True, order=True)
class LeafBean:
    """A node without children, as exported from the tree.

    Leaves sort by name, then by parent path.  The value takes no part in
    equality or ordering, so a leaf re-read with a different value is still
    the same leaf.
    """

    name: str                # last path segment, e.g. "password"
    path: str                # parent path, "/" for children of the root
    value: bytes = field(default=b"", compare=False, repr=False)

    @property
    def full_path(self) -> str:
        if self.path == ROOT_PATH:
            return ROOT_PATH + self.name
        return f"{self.path}/{self.name}"

    @property
    def text(self) -> str:
        return self.value.decode("utf-8", errors="replace")


class LeafLookup(NamedTuple):
    """Outcome of reading one child: either a leaf or the reason it was skipped."""

    path: str
    leaf: LeafBean | None = None
    reason: str | None = None

    @property
    def ok(self) -> bool:
        return self.leaf is not None


@dataclass(frozen=True)
class ImportEntry:
    """Create-or-update line: ``<parent>=<name>=<value>``."""

    parent: str   # "" for the root
    name: str
    value: str    # already internalized
    lineno: int = 0

    @property
    def full_path(self) -> str:
        return f"{self.parent}/{self.name}"


@dataclass(frozen=True)
class DeleteEntry:
    """Delete line: ``-<path>``."""

    path: str
    lineno: int = 0


@dataclass
class TreeNode:
    """A node in the display tree built from exported leaves."""

    name: str                          # display label for this path segment
    path: str                          # full path up to (and including) this segment
    children: dict[str, TreeNode] = field(default_factory=dict)
    leaf: LeafBean | None = None       # set if a leaf was exported at this exact path

    @property
    def is_leaf(self) -> bool:
        """True when this node has no children."""
        return len(self.children) == 0

    @property
    def is_folder(self) -> bool:
        """True when this node has children."""
        return len(self.children) > 0
