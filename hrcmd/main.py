#!/usr/bin/env python3
"""
Main CLI entry point for hrcmd
"""

import typer
from rich.table import Table

from hrcmd import __version__
from hrcmd.commands.palette import app as palette_app
from hrcmd.config import get_env_info, get_log_level, validate_all_env_vars
from hrcmd.error_handling import safe_operation
from hrcmd.utils.logging import setup_logging
from hrcmd.utils.output import console


# Version command
def version():
    """Show hrcmd version"""
    typer.echo(f"hrcmd version {__version__}")
    typer.echo("Command palette for the HR workspace")


@safe_operation("show environment")
def env():
    """Show hrcmd environment variables and whether they are valid"""
    table = Table(title="hrcmd environment")
    table.add_column("Variable", style="cyan", no_wrap=True)
    table.add_column("Value")
    table.add_column("Default", style="dim")
    table.add_column("Description", style="dim")

    for name, info in get_env_info().items():
        if not info["is_set"]:
            value = "[dim]unset[/dim]"
        elif name == "HRCMD_API_TOKEN":
            value = "********"
        elif not info["is_valid"]:
            value = f"[red]{info['value']}[/red]"
        else:
            value = info["value"]
        table.add_row(name, value, str(info["default"] or ""), info["description"])

    console.print(table)

    errors = validate_all_env_vars()
    for error in errors:
        console.print(f"[red]• {error}[/red]")
    if errors:
        raise typer.Exit(1)


# Callback for global options
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose output"),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Suppress non-error output"),
):
    """
    hrcmd - Command palette for the HR workspace

    Search pages, people, jobs and candidates, and run workspace actions from
    the terminal or an interactive Ctrl+K palette.

    [bold]Examples:[/bold]

    Search within an organization:
        [cyan]hrcmd search "senior eng" --org acme[/cyan]

    Run an action:
        [cyan]hrcmd run generate-shortlist --org acme --param job_id=42[/cyan]

    Open the palette:
        [cyan]hrcmd tui --org acme --location /org/acme/hiring/jobs/42[/cyan]
    """
    if verbose and quiet:
        typer.echo("Error: --verbose and --quiet are mutually exclusive", err=True)
        raise typer.Exit(1)

    # An invalid HRCMD_LOG_LEVEL must not stop `hrcmd env` from reporting it
    level = None if validate_all_env_vars() else get_log_level()
    setup_logging(verbose=verbose, quiet=quiet, level=level)


def create_app() -> typer.Typer:
    """Create and configure the main CLI application"""
    app = typer.Typer(
        name="hrcmd",
        help="Command palette for the HR workspace",
        rich_markup_mode="rich",
    )

    # Palette commands are registered at the top level
    app.registered_commands.extend(palette_app.registered_commands)

    app.command()(version)
    app.command()(env)

    app.callback()(main)
    return app


# Create the app instance
app = create_app()


def run():
    """Entry point for the CLI"""
    app()


if __name__ == "__main__":
    run()
