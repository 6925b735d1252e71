"""CLI interface for nuxt-scaffolder."""

import logging
import sys
from pathlib import Path

# Runtime version check - must be before other imports
if sys.version_info < (3, 11):
    print("Error: nuxt-scaffolder requires Python 3.11 or higher", file=sys.stderr)
    version = f"Python {sys.version_info.major}.{sys.version_info.minor}.{sys.version_info.micro}"
    print(f"Current version: {version}", file=sys.stderr)
    print("\nPlease upgrade your Python installation:", file=sys.stderr)
    print("  https://www.python.org/downloads/", file=sys.stderr)
    sys.exit(1)

import click
from rich.console import Console
from rich.table import Table

from . import __version__
from .commands import CreateHandler, CreateRequest
from .config import get_config_path, load_config
from .constants import LOG_DATE_FORMAT, LOG_FORMAT
from .display import display_layout
from .error_guidance import GuidanceProvider
from .errors import ProjectNameError
from .layout import inspect_layout
from .tool_invoker import verify_tool_available

console = Console()


def _configure_logging(verbose: bool) -> None:
    """Enable debug logging of commands run and their captured output."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format=LOG_FORMAT, datefmt=LOG_DATE_FORMAT)


@click.group()
@click.version_option(version=__version__)
@click.option(
    "--config",
    type=click.Path(exists=True, path_type=Path),
    help="Custom config file path",
)
@click.option("-v", "--verbose", is_flag=True, help="Log commands run and their output")
@click.pass_context
def cli(ctx: click.Context, config: Path | None, verbose: bool) -> None:
    """nuxt-scaffolder: Create Nuxt 4 projects with Tailwind CSS, Pinia and shadcn-nuxt."""
    ctx.ensure_object(dict)
    _configure_logging(verbose)

    # Load configuration
    try:
        ctx.obj["config_path"] = config or get_config_path()
        ctx.obj["config"] = load_config(config)
    except (FileNotFoundError, ValueError, OSError, PermissionError) as e:
        console.print(f"[red]Error:[/red] Configuration: {e}")
        sys.exit(1)


@cli.command()
@click.argument("name", required=False)
@click.option(
    "--dir",
    "parent_dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=Path("."),
    help="Directory the project is created in (default: current directory)",
)
@click.option("-y", "--yes", "assume_yes", is_flag=True, help="Use the default name without prompting")
@click.pass_context
def create(ctx: click.Context, name: str | None, parent_dir: Path, assume_yes: bool) -> None:
    """
    Create a Nuxt 4 project, or finish one a previous run left incomplete.

    Every step checks what is already on disk first, so running the
    command again on the same project only does the work still missing.

    Examples:

        \b
        # Prompt for a name
        nuxt-scaffolder create

        \b
        # Create ./shop without prompting
        nuxt-scaffolder create shop

        \b
        # Create ~/work/my-nuxt-app
        nuxt-scaffolder create --yes --dir ~/work
    """
    config = ctx.obj["config"]
    handler = CreateHandler(config, console)

    try:
        _, run = handler.create(CreateRequest(name=name, parent_dir=parent_dir, assume_yes=assume_yes))
    except ProjectNameError:
        sys.exit(1)

    sys.exit(run.exit_code)


@cli.command()
@click.argument(
    "path",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=Path("."),
)
@click.pass_context
def inspect(ctx: click.Context, path: Path) -> None:
    """
    Show whether a project already uses the app/ directory layout.

    Examples:

        \b
        nuxt-scaffolder inspect my-nuxt-app
    """
    config = ctx.obj["config"]
    root = path.resolve()

    state = inspect_layout(root, config.target_dir, config.migratable_dirs)
    display_layout(root, state, config.target_dir, config.migratable_dirs, console)


@cli.command()
@click.pass_context
def doctor(ctx: click.Context) -> None:
    """
    Run diagnostics and show system health information.

    Displays the configuration in use and verifies that the external
    tools the create command relies on are available.
    """
    config = ctx.obj["config"]

    # Configuration section
    console.print("\n[bold]Configuration[/bold]")
    config_table = Table(show_header=False, box=None, padding=(0, 2))
    config_table.add_column("Label", style="dim")
    config_table.add_column("Value")
    config_table.add_column("Status", justify="right")

    config_path = ctx.obj["config_path"]
    config_table.add_row(
        "Config file:",
        str(config_path),
        "[green]✓[/green]" if config_path.exists() else "[yellow]![/yellow]",
    )
    config_table.add_row("Schema version:", str(config.schema_version), "")
    config_table.add_row("Target directory:", f"{config.target_dir}/", "")
    config_table.add_row("UI module:", config.modules.ui, "")

    console.print(config_table)

    # System dependencies section
    console.print("\n[bold]System Dependencies[/bold]")
    deps_table = Table(show_header=False, box=None, padding=(0, 2))
    deps_table.add_column("Label", style="dim")
    deps_table.add_column("Status", justify="right")

    bun_available = verify_tool_available("bun")
    deps_table.add_row(
        "bun (Package manager and runner):",
        "[green]✓ Available[/green]" if bun_available else "[red]✗ Not found[/red]",
    )
    bunx_available = verify_tool_available("bunx")
    deps_table.add_row(
        "bunx (Package executor):",
        "[green]✓ Available[/green]" if bunx_available else "[red]✗ Not found[/red]",
    )

    console.print(deps_table)

    if not bun_available:
        console.print()
        console.print(GuidanceProvider.format_guidance(GuidanceProvider.get_bun_not_found()))

    console.print()


if __name__ == "__main__":
    cli()
