"""Rich-based formatters for zktree output."""

from __future__ import annotations

from collections.abc import Iterable

from rich.markup import escape
from rich.table import Table
from rich.text import Text
from rich.tree import Tree

from zktree.models import MASKED_VALUE, DeleteEntry, ImportEntry, LeafBean, TreeNode
from zktree.paths import externalize
from zktree.walker import is_password_field

_MAX_VALUE_LEN = 60
_REDACTED_LABEL = "[redacted]"


def _truncate(value: str) -> str:
    if len(value) <= _MAX_VALUE_LEN:
        return value
    return value[:_MAX_VALUE_LEN] + "…"


def _display_value(leaf: LeafBean) -> str:
    """Return the value to display, or the redacted placeholder for masked leaves."""
    if leaf.value == MASKED_VALUE:
        return _REDACTED_LABEL
    return _truncate(externalize(leaf.value))


def _leaf_label(leaf: LeafBean, show_values: bool) -> Text:
    """Build a Rich :class:`Text` label for a leaf."""
    name_style = "bold yellow" if is_password_field(leaf.name) else "bold green"
    label = Text()
    label.append(leaf.name, style=name_style)

    if show_values:
        display = _display_value(leaf)
        style = "dim red" if display == _REDACTED_LABEL else "italic"
        label.append(f"  {display}", style=style)

    return label


def _add_node(rich_tree: Tree, node: TreeNode, show_values: bool) -> None:
    """Recursively add *node*'s children to *rich_tree*."""
    for child in sorted(node.children.values(), key=lambda n: n.name):
        if child.is_folder:
            branch = rich_tree.add(Text(child.name, style="bold blue"))
            _add_node(branch, child, show_values)
        elif child.leaf is not None:
            rich_tree.add(_leaf_label(child.leaf, show_values))
        else:
            rich_tree.add(Text(child.name, style="dim"))


def render_tree(root: TreeNode, show_values: bool = True) -> Tree:
    """Render the ZooKeeper tree using Rich.

    Args:
        root: Root :class:`TreeNode` (as returned by :func:`~zktree.tree.build_tree`).
        show_values: When *False*, leaf values are hidden entirely.

    Returns:
        A :class:`rich.tree.Tree` ready to be printed.
    """
    rich_root = Tree(Text(root.path, style="bold white"))
    _add_node(rich_root, root, show_values)
    return rich_root


def render_leaves(leaves: Iterable[LeafBean], title: str, show_values: bool = True) -> Table:
    """Render leaves as a table of path and value."""
    table = Table(title=title, show_lines=False)
    table.add_column("Path", style="cyan")
    if show_values:
        table.add_column("Value")

    for leaf in leaves:
        if show_values:
            display = _display_value(leaf)
            style = "dim red" if display == _REDACTED_LABEL else ""
            table.add_row(Text(leaf.full_path), Text(display, style=style))
        else:
            table.add_row(Text(leaf.full_path))

    return table


def render_listing(path: str, folders: list[str], leaves: list[LeafBean]) -> Table:
    """Render the direct folders and leaves of one node."""
    table = Table(title=f"[bold]{escape(path)}[/]", show_lines=False)
    table.add_column("Name")
    table.add_column("Kind", style="dim")
    table.add_column("Value")

    for folder in folders:
        table.add_row(Text(folder, style="bold blue"), "folder", "")
    for leaf in leaves:
        name_style = "bold yellow" if is_password_field(leaf.name) else "bold green"
        table.add_row(Text(leaf.name, style=name_style), "leaf", Text(_display_value(leaf)))

    return table


def render_import_plan(entries: Iterable[ImportEntry | DeleteEntry]) -> Table:
    """Render a table showing what an import would do, line by line."""
    table = Table(title="[bold]Import plan[/]", show_lines=False)
    table.add_column("Line", style="dim", justify="right")
    table.add_column("Action")
    table.add_column("Path", style="cyan")
    table.add_column("Value")

    for entry in entries:
        if isinstance(entry, DeleteEntry):
            table.add_row(str(entry.lineno), Text("delete", style="bold red"), Text(entry.path), "")
        else:
            table.add_row(
                str(entry.lineno),
                Text("set", style="bold green"),
                Text(entry.full_path),
                Text(_truncate(externalize(entry.value.encode("utf-8")))),
            )

    return table
