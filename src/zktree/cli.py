"""CLI entry point for zktree."""

from __future__ import annotations

import json
import logging
import re
import sys

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.progress import track

from zktree import __version__
from zktree.config import (
    DEFAULT_CONNECT_ATTEMPTS,
    DEFAULT_HOSTS,
    DEFAULT_TIMEOUT,
    ENV_PREFIX,
    Settings,
)
from zktree.connection import open_session
from zktree.formatters import render_import_plan, render_leaves, render_listing, render_tree
from zktree.models import ROLE_USER, ROLES, ROOT_PATH, LeafBean
from zktree.mutations import (
    create_folder,
    create_node,
    delete_folders,
    delete_leaves,
    set_property_value,
)
from zktree.paths import externalize, split_path
from zktree.search import search_tree
from zktree.store import ZkTreeError
from zktree.transfer import MalformedImportLine, apply_import, export_lines, parse_import
from zktree.tree import build_tree
from zktree.walker import export_tree, list_folders, list_leaves

console = Console()
err_console = Console(stderr=True)

_ZK_PATH_RE = re.compile(r"^(/[^/\s]+)+$")


def _abort(msg: str) -> None:
    console.print(f"[bold red]Error:[/] {escape(msg)}")
    sys.exit(1)


def _validate_path(path: str) -> None:
    """Validate that *path* looks like an absolute ZooKeeper node path."""
    if path == ROOT_PATH:
        return
    if not path or not path.strip():
        _abort("Path must not be empty.")
    if not _ZK_PATH_RE.match(path):
        _abort(
            f"Invalid ZooKeeper path {path!r}. "
            "Paths must start with '/', contain no whitespace and no empty segments."
        )


def _split(path: str) -> tuple[str, str]:
    if path == ROOT_PATH:
        _abort("The root node cannot be used here.")
    return split_path(path)


def _require_admin(settings: Settings, command: str) -> None:
    if not settings.is_admin:
        _abort(f"The {command} command requires the ADMIN role (use --role ADMIN).")


def _setup_logging(verbose: int) -> None:
    if verbose >= 2:
        level = logging.DEBUG
    elif verbose == 1:
        level = logging.INFO
    else:
        level = logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )
    logging.getLogger("kazoo").setLevel(logging.DEBUG if verbose >= 3 else logging.WARNING)


def _leaf_dict(leaf: LeafBean) -> dict[str, str]:
    return {"path": leaf.full_path, "name": leaf.name, "value": externalize(leaf.value)}


class _DefaultPathGroup(click.Group):
    """Click Group that supports an optional PATH positional alongside subcommands.

    Routing strategy (decided by looking for a known command name among the
    arguments; node paths always start with "/" so they never collide):

    * **Subcommand mode** (a command name is present): stop option
      parsing at the subcommand token (``allow_interspersed_args=False``) so
      subcommand-specific options like ``--output`` are not consumed by the
      group parser.  The subcommand name goes into ``ctx._protected_args`` for
      standard Click routing.

    * **PATH mode** (no command name):
      allow the extra positional (``allow_extra_args=True``) so PATH ends up
      in ``ctx.args``.  ``ctx._protected_args`` is left empty so
      ``invoke_without_command=True`` triggers the group callback.
    """

    def parse_args(self, ctx: click.Context, args: list[str]) -> list[str]:
        command_name = next((a for a in args if a in self.commands), None)

        if command_name is not None:
            ctx.allow_interspersed_args = False
            rest = click.Command.parse_args(self, ctx, args)
            if rest:
                ctx._protected_args, ctx.args = rest[:1], rest[1:]
            else:
                ctx._protected_args, ctx.args = [], []
        else:
            ctx.allow_extra_args = True
            rest = click.Command.parse_args(self, ctx, args)
            ctx._protected_args = []
            ctx.args = rest

        return ctx.args


@click.group(
    cls=_DefaultPathGroup,
    invoke_without_command=True,
)
@click.pass_context
@click.option(
    "--hosts",
    envvar=f"{ENV_PREFIX}_HOSTS",
    default=DEFAULT_HOSTS,
    show_default=True,
    help="ZooKeeper connect string.",
)
@click.option(
    "--timeout",
    type=click.FloatRange(min=0, min_open=True),
    envvar=f"{ENV_PREFIX}_TIMEOUT",
    default=DEFAULT_TIMEOUT,
    show_default=True,
    help="Session timeout in seconds.",
)
@click.option(
    "--role",
    type=click.Choice(ROLES, case_sensitive=False),
    envvar=f"{ENV_PREFIX}_ROLE",
    default=ROLE_USER,
    show_default=True,
    help="Access role; USER masks password values.",
)
@click.option(
    "--connect-attempts",
    type=click.IntRange(min=1),
    envvar=f"{ENV_PREFIX}_CONNECT_ATTEMPTS",
    default=DEFAULT_CONNECT_ATTEMPTS,
    show_default=True,
    help="Readiness polls before giving up on the session.",
)
@click.option("--verbose", "-v", count=True, help="Log more (-v info, -vv debug).")
@click.option(
    "--show-values/--hide-values",
    default=False,
    help="Show or hide leaf values (default: hide).",
)
@click.option(
    "--output",
    type=click.Choice(["tree", "json"]),
    default="tree",
    help="Output format (default: tree).",
)
@click.version_option(__version__, "--version", "-V")
def main(
    ctx: click.Context,
    hosts: str,
    timeout: float,
    role: str,
    connect_attempts: int,
    verbose: int,
    show_values: bool,
    output: str,
) -> None:
    """Browse, export and edit a ZooKeeper tree from the terminal.

    PATH (optional positional argument) defaults to "/" (the root).

    \b
    Examples:
      zktree /app/prod
      zktree --show-values /app/prod
      zktree --role ADMIN --output json /app/prod
      zktree --hosts zk1:2181 search db.host
    """
    _setup_logging(verbose)
    ctx.obj = Settings(
        hosts=hosts, timeout=timeout, role=role.upper(), connect_attempts=connect_attempts
    )
    if ctx.invoked_subcommand is not None:
        return

    path = ctx.args[0] if ctx.args else ROOT_PATH
    _validate_path(path)

    try:
        with open_session(ctx.obj) as client:
            leaves = export_tree(client, path, ctx.obj.role)
    except ZkTreeError as exc:
        _abort(str(exc))
        return

    if output == "json":
        click.echo(json.dumps([_leaf_dict(leaf) for leaf in leaves], indent=2))
    else:
        console.print(render_tree(build_tree(leaves, root_path=path), show_values=show_values))


@main.command("ls")
@click.argument("path", default=ROOT_PATH)
@click.pass_obj
def ls_cmd(settings: Settings, path: str) -> None:
    """List the folders and leaves directly under PATH."""
    _validate_path(path)
    try:
        with open_session(settings) as client:
            folders = list_folders(client, path)
            leaves = list_leaves(client, path, settings.role)
    except ZkTreeError as exc:
        _abort(str(exc))
        return

    console.print(render_listing(path, folders, leaves))


@main.command("export")
@click.argument("path", default=ROOT_PATH)
@click.option(
    "--file",
    "-o",
    "output_file",
    type=click.File("wb"),
    default="-",
    help="Write to FILE instead of stdout.",
)
@click.pass_obj
def export_cmd(settings: Settings, path: str, output_file) -> None:
    """Export every leaf under PATH in the import/export line format.

    \b
    Examples:
      zktree --role ADMIN export / -o backup.txt
      zktree export /app/prod
    """
    _validate_path(path)
    if not settings.is_admin:
        err_console.print(
            "[bold yellow]WARNING:[/] Exporting as USER: password values are masked "
            "and will not survive a re-import."
        )

    try:
        with open_session(settings) as client:
            leaves = export_tree(client, path, settings.role)
    except ZkTreeError as exc:
        _abort(str(exc))
        return

    for line in export_lines(leaves):
        output_file.write(f"{line}\n".encode("utf-8"))
    output_file.flush()
    err_console.print(f"[bold green]Exported {len(leaves)} leaf(s)[/] from {escape(path)}")


@main.command("import")
@click.argument("import_file", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--overwrite/--no-overwrite",
    default=False,
    help="Overwrite existing leaves (default: no).",
)
@click.option(
    "--dry-run", is_flag=True, default=False, help="Show what would be imported without writing."
)
@click.option("--yes", "-y", is_flag=True, default=False, help="Skip confirmation prompt.")
@click.pass_obj
def import_cmd(settings: Settings, import_file: str, overwrite: bool, dry_run: bool, yes: bool) -> None:
    """Import IMPORT_FILE, creating, updating and deleting nodes.

    \b
    Lines look like:
      /app/prod/db=host=db.example.com   create or update /app/prod/db/host
      =top=value                         create or update /top
      -/app/old                          delete /app/old

    \b
    Examples:
      zktree --role ADMIN import --dry-run backup.txt
      zktree --role ADMIN import --yes --overwrite backup.txt
    """
    _require_admin(settings, "import")

    try:
        with open(import_file, encoding="utf-8", newline="") as fh:
            entries = parse_import(fh.read().split("\n"))
    except MalformedImportLine as exc:
        _abort(f"Malformed import file: {exc}")
        return

    if not entries:
        console.print("[yellow]Nothing to import.[/]")
        return

    if dry_run:
        console.print(render_import_plan(entries))
        console.print(f"\n[dim]Dry run: {len(entries)} line(s) would be applied.[/]")
        return

    if not yes:
        if overwrite:
            console.print(
                "[bold yellow]WARNING:[/] --overwrite is enabled. "
                "Existing values will be replaced."
            )
        if not click.confirm(f"Apply {len(entries)} line(s) to {settings.hosts}?"):
            console.print("[dim]Aborted.[/]")
            return

    try:
        with open_session(settings) as client:
            report = apply_import(
                client,
                track(entries, description="Importing…", console=console, transient=True),
                overwrite=overwrite,
            )
    except ZkTreeError as exc:
        _abort(str(exc))
        return

    console.print(
        f"[bold green]Imported {report.total} line(s):[/] "
        f"{len(report.created)} created, {len(report.updated)} updated, "
        f"{len(report.deleted)} deleted, {len(report.skipped)} skipped"
    )


@main.command("search")
@click.argument("query")
@click.option(
    "--show-values/--hide-values",
    default=True,
    help="Show or hide leaf values (default: show).",
)
@click.option(
    "--output",
    type=click.Choice(["table", "json"]),
    default="table",
    help="Output format (default: table).",
)
@click.pass_obj
def search_cmd(settings: Settings, query: str, show_values: bool, output: str) -> None:
    """Find leaves whose parent path, name or value contains QUERY.

    \b
    Examples:
      zktree search db.example.com
      zktree --role ADMIN search --output json password
    """
    try:
        with open_session(settings) as client:
            leaves = search_tree(client, query, settings.role)
    except ZkTreeError as exc:
        _abort(str(exc))
        return

    if output == "json":
        click.echo(json.dumps([_leaf_dict(leaf) for leaf in leaves], indent=2))
    elif not leaves:
        console.print(f"[yellow]No leaves match {escape(repr(query))}[/]")
    else:
        console.print(
            render_leaves(leaves, title=f"Search: {escape(query)}", show_values=show_values)
        )


@main.command("set")
@click.argument("path")
@click.argument("value")
@click.pass_obj
def set_cmd(settings: Settings, path: str, value: str) -> None:
    """Set the value of the existing leaf PATH."""
    _require_admin(settings, "set")
    _validate_path(path)
    parent, name = _split(path)
    try:
        with open_session(settings) as client:
            set_property_value(client, parent, name, value)
    except ZkTreeError as exc:
        _abort(str(exc))
        return

    console.print(f"[bold green]Updated[/] {escape(path)}")


@main.command("create")
@click.argument("path")
@click.argument("value", default="")
@click.pass_obj
def create_cmd(settings: Settings, path: str, value: str) -> None:
    """Create the leaf PATH holding VALUE.  Its parent must exist."""
    _require_admin(settings, "create")
    _validate_path(path)
    parent, name = _split(path)
    try:
        with open_session(settings) as client:
            create_node(client, parent, name, value)
    except ZkTreeError as exc:
        _abort(str(exc))
        return

    console.print(f"[bold green]Created[/] {escape(path)}")


@main.command("mkdir")
@click.argument("folder")
@click.argument("property_name")
@click.argument("property_value", default="")
@click.pass_obj
def mkdir_cmd(settings: Settings, folder: str, property_name: str, property_value: str) -> None:
    """Create FOLDER with its first property PROPERTY_NAME."""
    _require_admin(settings, "mkdir")
    _validate_path(folder)
    try:
        with open_session(settings) as client:
            create_folder(client, folder, property_name, property_value)
    except ZkTreeError as exc:
        _abort(str(exc))
        return

    console.print(f"[bold green]Created folder[/] {escape(folder)}")


@main.command("rm")
@click.argument("paths", nargs=-1, required=True)
@click.option(
    "--recursive", "-r", is_flag=True, default=False, help="Delete folders with their children."
)
@click.option("--yes", "-y", is_flag=True, default=False, help="Skip confirmation prompt.")
@click.pass_obj
def rm_cmd(settings: Settings, paths: tuple[str, ...], recursive: bool, yes: bool) -> None:
    """Delete PATHS; with --recursive, delete whole subtrees.

    \b
    Examples:
      zktree --role ADMIN rm /app/old/key
      zktree --role ADMIN rm --recursive --yes /app/old
    """
    _require_admin(settings, "rm")
    for path in paths:
        _validate_path(path)

    if not yes:
        what = "subtree(s)" if recursive else "node(s)"
        if not click.confirm(f"Delete {len(paths)} {what}?"):
            console.print("[dim]Aborted.[/]")
            return

    try:
        with open_session(settings) as client:
            if recursive:
                delete_folders(client, paths)
            else:
                delete_leaves(client, paths)
    except ZkTreeError as exc:
        _abort(str(exc))
        return

    console.print(f"[bold green]Deleted {len(paths)} path(s)[/]")
