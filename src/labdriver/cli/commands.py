"""Command implementations for CLI."""

import asyncio
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from labdriver.config import ConfigManager
from labdriver.errors import LabConfigError
from labdriver.models.config import LabConfig
from labdriver.nodes.base import DriverOptions, NodeDriver
from labdriver.nodes.registry import NodeRegistry
from labdriver.nodes.staging import StageResult
from labdriver.utils.logging import resolve_log_level, setup_logging


console = Console()


def _load_lab(lab_file: Path, log_level: Optional[str] = None) -> ConfigManager:
    """Load a lab file and apply its log level unless one was given."""
    manager = ConfigManager(lab_file)
    asyncio.run(manager.load())
    setup_logging(resolve_log_level(log_level, manager.config.settings.log_level))
    return manager


def _init_driver(
    manager: ConfigManager,
    registry: NodeRegistry,
    name: str,
    strict_render: bool = False,
) -> NodeDriver:
    """Create a driver for one lab node and run init() on it."""
    spec = manager.get_node_spec(name)
    driver = registry.create(spec.kind)
    driver.init(spec, DriverOptions(mgmt=manager.config.mgmt, strict_render=strict_render))
    return driver


def list_kinds(registry: NodeRegistry):
    """List registered node kinds."""
    table = Table(title="Node kinds")
    table.add_column("Kind", style="cyan")
    table.add_column("Username")
    table.add_column("Password", style="dim")

    for kind in registry.list_kinds():
        creds = registry.get_default_credentials(kind)
        table.add_row(
            kind,
            creds.username if creds else "-",
            creds.password if creds else "-",
        )

    console.print(table)


def show_env(registry: NodeRegistry, lab_file: Path, node: str, log_level: Optional[str] = None):
    """Show the launch environment and command line a node would get."""
    manager = _load_lab(lab_file, log_level)
    driver = _init_driver(manager, registry, node)
    spec = driver.config

    table = Table(title=f"Environment for {spec.short_name}")
    table.add_column("Variable", style="cyan")
    table.add_column("Value", style="green")
    for key in sorted(spec.env):
        table.add_row(key, spec.env[key])
    console.print(table)

    console.print(f"[bold]Image:[/bold] {spec.image}")
    console.print(f"[bold]Command:[/bold] {spec.cmd}")
    for bind in spec.binds:
        console.print(f"[bold]Bind:[/bold] {bind}")


def stage_nodes(
    registry: NodeRegistry,
    lab_file: Path,
    node: Optional[str] = None,
    strict: bool = False,
    log_level: Optional[str] = None,
):
    """Run init and pre-deploy for lab nodes without starting containers."""
    manager = _load_lab(lab_file, log_level)
    names = [node] if node else list(manager.config.nodes)
    strict = strict or manager.config.settings.strict_render

    drivers = [(name, _init_driver(manager, registry, name, strict)) for name in names]

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        console=console,
    ) as progress:
        task = progress.add_task(f"Staging {len(drivers)} node(s)...", total=None)
        results = asyncio.run(_pre_deploy_all(drivers))
        progress.update(task, completed=True)

    _print_stage_results(results)

    if any(result.warnings for _, result in results):
        console.print("[yellow]Staging finished with warnings[/yellow]")
    else:
        console.print("[green]✓[/green] Staging complete")


async def _pre_deploy_all(drivers: List[Tuple[str, NodeDriver]]) -> List[Tuple[str, StageResult]]:
    results = []
    for name, driver in drivers:
        results.append((name, await driver.pre_deploy()))
    return results


def _print_stage_results(results: List[Tuple[str, StageResult]]):
    table = Table(title="Staged nodes")
    table.add_column("Node", style="cyan")
    table.add_column("Config dir")
    table.add_column("Startup config")
    table.add_column("Warnings", style="yellow")

    for name, result in results:
        table.add_row(
            name,
            str(result.config_dir),
            str(result.rendered) if result.rendered else "-",
            "\n".join(str(w) for w in result.warnings) or "-",
        )

    console.print(table)


def validate_lab(registry: NodeRegistry, lab_file: Path, log_level: Optional[str] = None):
    """Validate the lab file and the kinds it references."""
    manager = _load_lab(lab_file, log_level)
    config: LabConfig = manager.config

    errors: Dict[str, str] = {}
    for name, node in config.nodes.items():
        if node.kind not in registry.list_kinds():
            errors[name] = f"unknown kind {node.kind}"
        elif node.startup_config and not Path(manager.get_node_spec(name).startup_config).is_file():
            errors[name] = f"startup config {node.startup_config} not found"

    if errors:
        for name, message in errors.items():
            console.print(f"[red]✗[/red] {name}: {message}")
        raise LabConfigError(f"Lab {config.name} has {len(errors)} invalid node(s)")

    console.print(f"[green]✓[/green] Lab {config.name} is valid ({len(config.nodes)} node(s))")
