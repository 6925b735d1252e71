"""Display functions for nuxt-scaffolder CLI output."""

from pathlib import Path

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from .constants import LayoutState, StepStatus
from .pipeline import PipelineRun, StepResult
from .project import Project

STATUS_LABELS = {
    StepStatus.SUCCEEDED: "[green]✓ Done[/green]",
    StepStatus.WARNED: "[yellow]! Warning[/yellow]",
    StepStatus.FAILED: "[red]✗ Failed[/red]",
    StepStatus.NOT_RUN: "[dim]- Not run[/dim]",
}


def format_step_line(result: StepResult) -> str:
    """Format a one-line, rich-compatible summary of a finished step."""
    label = STATUS_LABELS[result.status]
    line = f"{label} {result.step.description}"

    if result.error is not None:
        line += f": {result.error}"
    elif result.detail:
        line += f" [dim]({result.detail})[/dim]"

    if result.attempts > 1:
        line += f" [dim]after {result.attempts} attempts[/dim]"

    return line


def display_step_results(run: PipelineRun, console: Console) -> None:
    """
    Display step results in a table.

    Args:
        run: Finished pipeline run
        console: Rich console instance for output
    """
    table = Table(title="Scaffolding Results")
    table.add_column("Step", style="cyan")
    table.add_column("Status")
    table.add_column("Details")

    for result in run.results:
        if result.error is not None:
            details = str(result.error)
        else:
            details = result.detail or ""
        table.add_row(result.step.id, STATUS_LABELS[result.status], details)

    console.print(table)


def _cd_target(root: Path) -> str:
    """Path to the project as typed from the current directory."""
    try:
        return str(root.relative_to(Path.cwd().resolve()))
    except ValueError:
        return str(root)


def display_next_steps(project: Project, run: PipelineRun, console: Console) -> None:
    """
    Display the completion message and next steps.

    Args:
        project: Scaffolded project
        run: Completed pipeline run
        console: Rich console instance for output
    """
    console.print(
        f"\n[green]✓[/green] Nuxt 4 project [bold]{project.name}[/bold] has been created "
        "with @nuxt/icon, @nuxt/image, Pinia, Tailwind CSS and shadcn-nuxt"
    )

    if run.completed_with_warnings:
        skipped = ", ".join(result.step.id for result in run.warnings)
        console.print(f"[yellow]Warning:[/yellow] Some optional steps failed: {skipped}")

    console.print(
        Panel(
            f"cd {_cd_target(project.root)}\nbun run dev",
            title="Next steps",
            border_style="green",
        )
    )


def display_failure(run: PipelineRun, console: Console) -> None:
    """
    Display the step that ended a failed run.

    Args:
        run: Failed pipeline run
        console: Rich console instance for output
    """
    failed = run.failed_result
    if failed is None:
        return

    console.print(f"\n[red]Error:[/red] Step '{failed.step.id}' failed: {failed.error}")
    not_run = sum(1 for result in run.results if result.status == StepStatus.NOT_RUN)
    if not_run:
        console.print(f"[dim]{not_run} remaining step(s) were not run[/dim]")


def display_layout(
    root: Path,
    state: LayoutState,
    target_dir: str,
    legacy_dirs: list[str],
    console: Console,
) -> None:
    """
    Display the layout classification of a project tree.

    Args:
        root: Project root that was inspected
        state: Detected layout state
        target_dir: Target root subdirectory name
        legacy_dirs: Directory names checked at the project root
        console: Rich console instance for output
    """
    table = Table(title=f"Layout of {root}")
    table.add_column("Directory", style="cyan")
    table.add_column("At root")
    table.add_column(f"Under {target_dir}/")

    for name in legacy_dirs:
        at_root = (root / name).is_dir()
        under_target = (root / target_dir / name).is_dir()
        table.add_row(
            name,
            "[yellow]yes[/yellow]" if at_root else "[dim]no[/dim]",
            "[green]yes[/green]" if under_target else "[dim]no[/dim]",
        )

    console.print(table)

    descriptions = {
        LayoutState.UNKNOWN: "[dim]unknown[/dim]: no recognised directories",
        LayoutState.LEGACY: "[yellow]legacy[/yellow]: directories will be moved",
        LayoutState.TARGET: f"[green]target[/green]: already uses {target_dir}/",
        LayoutState.MIXED: f"[yellow]mixed[/yellow]: {target_dir}/ exists but root directories remain",
    }
    console.print(f"Layout: {descriptions[state]}")
