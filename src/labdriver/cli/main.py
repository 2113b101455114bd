"""Main CLI implementation using Typer."""

from pathlib import Path
from typing import Any, Callable, Optional

import typer
from rich.console import Console

from labdriver.cli.commands import list_kinds, show_env, stage_nodes, validate_lab
from labdriver.errors import LabDriverError
from labdriver.nodes.registry import build_default_registry
from labdriver.utils.logging import resolve_log_level, setup_logging


# Create Typer app
app = typer.Typer(
    name="labdriverctl",
    help="labdriver - node kind drivers for containerized network labs",
    add_completion=False,
)

# Console for rich output
console = Console()


def _run_cli_command(handler: Callable[..., Any], **kwargs: Any):
    """Helper to run a CLI command with a node registry and error handling."""
    try:
        registry = build_default_registry()
        handler(registry, **kwargs)
    except LabDriverError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1) from e


@app.callback()
def main_callback(
    ctx: typer.Context,
    log_level: Optional[str] = typer.Option(
        None, "--log-level", "-l", help="Logging level (default: lab settings, else WARNING)"
    ),
):
    """Configure logging for all commands."""
    ctx.ensure_object(dict)["log_level"] = log_level
    setup_logging(resolve_log_level(log_level))


@app.command("kinds")
def kinds_command():
    """List registered node kinds and their default credentials."""
    _run_cli_command(list_kinds)


@app.command("env")
def env_command(
    ctx: typer.Context,
    lab_file: Path = typer.Argument(..., help="Lab file"),
    node: str = typer.Argument(..., help="Node name"),
):
    """Show the launch environment and command line of a node."""
    _run_cli_command(show_env, lab_file=lab_file, node=node, log_level=ctx.obj["log_level"])


@app.command("stage")
def stage_command(
    ctx: typer.Context,
    lab_file: Path = typer.Argument(..., help="Lab file"),
    node: Optional[str] = typer.Argument(None, help="Node name (default: all nodes)"),
    strict: bool = typer.Option(False, "--strict", help="Fail when a startup config does not render"),
):
    """Prepare lab directories and startup configs without starting containers."""
    _run_cli_command(
        stage_nodes, lab_file=lab_file, node=node, strict=strict, log_level=ctx.obj["log_level"]
    )


@app.command("validate")
def validate_command(
    ctx: typer.Context,
    lab_file: Path = typer.Argument(..., help="Lab file"),
):
    """Validate a lab file."""
    _run_cli_command(validate_lab, lab_file=lab_file, log_level=ctx.obj["log_level"])


def main():
    """Main entry point."""
    app()


if __name__ == "__main__":
    main()
