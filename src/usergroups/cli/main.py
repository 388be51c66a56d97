"""CLI entry point for usergroups.

Invoked as::

    usergroups [OPTIONS] COMMAND [ARGS]...

or, during development::

    python -m usergroups.cli.main

Commands
--------
version     Show version information
config      Show the effective module configuration
cascade     Delete a group from a YAML fixture and show the cleanup
"""
from __future__ import annotations

import asyncio
import logging
import sys
from typing import TYPE_CHECKING

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

if TYPE_CHECKING:
    from usergroups.cascade.deleter import CascadeReport
    from usergroups.config import UserGroupsConfig
    from usergroups.core.ports import DiagnosticSink
    from usergroups.store.fixtures import Fixture

console = Console()
err_console = Console(stderr=True)


def _load_config_or_exit(path: str | None) -> "UserGroupsConfig":
    """Load configuration, exiting on error."""
    from usergroups import load_config
    from usergroups.core.errors import ConfigError

    try:
        return load_config(path)
    except ConfigError as exc:
        err_console.print(f"[red]Error:[/red] {escape(str(exc))}")
        sys.exit(1)


def _level_color(level_name: str) -> str:
    """Map a DiagnosticLevel value to a Rich color string."""
    colors = {
        "error": "red",
        "warn": "yellow",
        "success": "green",
        "info": "blue",
        "debug": "dim",
        "verbose": "dim",
    }
    return colors.get(level_name, "white")


# ---------------------------------------------------------------------------
# CLI group
# ---------------------------------------------------------------------------


@click.group()
@click.version_option(package_name="usergroups-cascade")
@click.option(
    "--log-level",
    type=click.Choice(["debug", "info", "warning", "error"], case_sensitive=False),
    default="warning",
    help="Level of log records written to stderr",
)
def cli(log_level: str) -> None:
    """Usergroup deletion with cascading reference cleanup."""
    logging.basicConfig(
        level=log_level.upper(),
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


# ---------------------------------------------------------------------------
# version command
# ---------------------------------------------------------------------------


@cli.command(name="version")
def version_command() -> None:
    """Show detailed version information."""
    from usergroups import __version__

    table = Table(show_header=False, box=None)
    table.add_row("[bold]usergroups-cascade[/bold]", f"v{__version__}")
    table.add_row("Python", f"{sys.version_info.major}.{sys.version_info.minor}.{sys.version_info.micro}")
    table.add_row("Platform", sys.platform)
    console.print(table)


# ---------------------------------------------------------------------------
# config command
# ---------------------------------------------------------------------------


@cli.command(name="config")
@click.option("--config", "config_path", default=None, help="YAML configuration file")
def config_command(config_path: str | None) -> None:
    """Show the effective module configuration."""
    config = _load_config_or_exit(config_path)

    table = Table(title="usergroups configuration")
    table.add_column("Key", style="bold")
    table.add_column("Value")
    for key, value in config.to_dict().items():
        shown = ", ".join(value) if isinstance(value, list) else str(value)
        table.add_row(key, shown)
    console.print(table)


# ---------------------------------------------------------------------------
# cascade command
# ---------------------------------------------------------------------------


async def _run_cascade(
    fixture: "Fixture",
    config: "UserGroupsConfig",
    group_id: str,
    sink: "DiagnosticSink",
) -> "CascadeReport":
    from usergroups.host import ModuleDirectory
    from usergroups.module import UserGroupsModule
    from usergroups.schema import SchemaCatalog

    app = ModuleDirectory()
    app.add("jsonschema", SchemaCatalog.with_defaults(config))
    for collection in fixture.collections:
        app.add(collection.name, collection)

    module = UserGroupsModule(app, base_delete=fixture.groups.delete, config=config, sink=sink)
    await module.init()
    for collection in fixture.collections:
        if collection.name not in config.builtin_registrants:
            await module.register_module(collection)

    return await module.delete_with_report({config.id_field: group_id})


def _print_report(report: "CascadeReport") -> None:
    table = Table(title="Reference cleanup", show_lines=False)
    table.add_column("Collection", style="bold")
    table.add_column("Document")
    table.add_column("Result")
    for per_registrant in report.outcomes:
        for outcome in per_registrant:
            result = (
                "[green]removed[/green]"
                if outcome.succeeded
                else f"[red]failed[/red] [dim]{escape(str(outcome.error))}[/dim]"
            )
            table.add_row(outcome.registrant, str(outcome.document_id), result)
    console.print(table)


@cli.command(name="cascade")
@click.argument("fixture_file", type=click.Path(exists=False))
@click.argument("group_id")
@click.option("--config", "config_path", default=None, help="YAML configuration file")
@click.option(
    "--report/--no-report",
    default=True,
    help="Print the per-document outcome table",
)
def cascade_command(
    fixture_file: str, group_id: str, config_path: str | None, report: bool
) -> None:
    """Delete GROUP_ID from a fixture and pull it from every collection.

    FIXTURE_FILE is a YAML document describing groups and collections.
    """
    from usergroups.core.errors import ConfigError, GroupNotFoundError, StoreError
    from usergroups.diagnostics import LoggingDiagnosticSink, RecordingDiagnosticSink
    from usergroups.store import load_fixture_file

    config = _load_config_or_exit(config_path)
    try:
        fixture = load_fixture_file(fixture_file, id_field=config.id_field)
    except ConfigError as exc:
        err_console.print(f"[red]Error:[/red] {escape(str(exc))}")
        sys.exit(1)

    names = {c.name for c in fixture.collections}
    missing = [name for name in config.builtin_registrants if name not in names]
    if missing:
        err_console.print(
            f"[red]Error:[/red] fixture has no collection for built-in "
            f"registrant(s): {', '.join(missing)}"
        )
        sys.exit(1)

    sink = RecordingDiagnosticSink(forward_to=LoggingDiagnosticSink())
    try:
        cascade_report = asyncio.run(_run_cascade(fixture, config, group_id, sink))
    except GroupNotFoundError as exc:
        err_console.print(f"[red]Error:[/red] {escape(str(exc))}")
        sys.exit(1)
    except StoreError as exc:
        err_console.print(f"[red]Cleanup aborted:[/red] {escape(str(exc))}")
        sys.exit(1)

    if report:
        _print_report(cascade_report)

    for diagnostic in sink.records:
        color = _level_color(diagnostic.level.value)
        console.print(f"[{color}]{diagnostic.level.value}[/{color}] {escape(diagnostic.message)}")

    console.print(f"\n[bold]Summary:[/bold] {cascade_report}")


if __name__ == "__main__":
    cli()
