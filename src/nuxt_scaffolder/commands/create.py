"""Create command handler for nuxt-scaffolder."""

from dataclasses import dataclass
from pathlib import Path

from rich.console import Console

from ..config import Config
from ..constants import StepStatus
from ..display import display_failure, display_next_steps, display_step_results, format_step_line
from ..error_guidance import GuidanceProvider
from ..errors import ProjectNameError
from ..pipeline import Pipeline, PipelineRun, Step, StepResult
from ..project import Project
from ..steps import Invoker, build_steps
from ..utils import progress_spinner, prompt_text

UI_LIBRARY_STEPS = {"ui-init": "ui_init", "ui-component": "ui_add"}


@dataclass(frozen=True)
class CreateRequest:
    """User input for the create command."""

    name: str | None
    parent_dir: Path
    assume_yes: bool = False


class CreateHandler:
    """Handles project creation logic."""

    def __init__(self, config: Config, console: Console, invoker: Invoker | None = None):
        """
        Initialize create handler.

        Args:
            config: Application configuration
            console: Rich console for output
            invoker: Replacement for the external command runner
        """
        self.config = config
        self.console = console
        self.invoker = invoker

    def resolve_project(self, request: CreateRequest) -> Project:
        """
        Determine the project name and root.

        Args:
            request: Create command input

        Returns:
            Project to scaffold

        Raises:
            ProjectNameError: If the name is invalid
        """
        name = request.name
        if name is None:
            default_name = self.config.project.default_name
            if request.assume_yes:
                name = default_name
            else:
                name = prompt_text("What is your project named?", default=default_name)

        try:
            return Project.create(name, request.parent_dir)
        except ProjectNameError as e:
            self.console.print(f"[red]Error:[/red] {e}")
            raise

    def create(self, request: CreateRequest) -> tuple[Project, PipelineRun]:
        """
        Scaffold a Nuxt 4 project.

        Args:
            request: Create command input

        Returns:
            Tuple of (project, finished pipeline run)

        Raises:
            ProjectNameError: If the name is invalid
        """
        project = self.resolve_project(request)
        steps = build_steps(self.config, self.invoker)

        self.console.print(
            f"Scaffolding Nuxt 4 app [bold]{project.name}[/bold] with @nuxt/icon, @nuxt/image, "
            "Pinia, Tailwind CSS, shadcn-nuxt and Bun as package manager"
        )

        with progress_spinner("Starting...", self.console) as (progress, task):

            def on_step_start(step: Step) -> None:
                progress.update(task, description=f"{step.description}...")

            def on_step_end(result: StepResult) -> None:
                progress.console.print(format_step_line(result))

            pipeline = Pipeline(
                steps,
                on_step_start=on_step_start,
                on_step_end=on_step_end,
                retry_backoff=self.config.tools.retry_backoff,
            )
            run = pipeline.run(project)

        self._report(project, run)
        return project, run

    def _report(self, project: Project, run: PipelineRun) -> None:
        """Print the results table, guidance and closing message."""
        display_step_results(run, self.console)

        for step_id, command_key in UI_LIBRARY_STEPS.items():
            result = run.result_for(step_id)
            if result is None or result.status not in (StepStatus.WARNED, StepStatus.FAILED):
                continue
            guidance = GuidanceProvider.get_ui_library_failed(
                project.name, getattr(self.config.commands, command_key)
            )
            self.console.print(GuidanceProvider.format_guidance(guidance))

        if run.failed_result is not None:
            display_failure(run, self.console)
        else:
            display_next_steps(project, run, self.console)
