"""Sequential step orchestration with per-step failure policies.

A Pipeline runs its steps strictly in declaration order in the calling
thread. A step fails by raising ScaffoldError; its static failure policy
alone decides whether the run stops (ABORT) or carries on
(WARN_AND_CONTINUE). Any other exception is a bug and propagates.

The pipeline assumes nothing else mutates the project tree while it runs.
It takes no locks; an interrupted run is recovered by running it again,
which is safe because every step is idempotent.
"""

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field

from .constants import STEP_RETRY_MAX_DELAY, FailurePolicy, PipelineState, StepStatus
from .errors import ScaffoldError, ToolError
from .project import Project
from .utils import exponential_backoff, retry

logger = logging.getLogger(__name__)

StepAction = Callable[[Project], str | None]


@dataclass(frozen=True)
class Step:
    """A named unit of work.

    Attributes:
        id: Unique step identifier
        description: Human-readable description shown while the step runs
        action: Callable receiving the project; may return a detail message
        failure_policy: What a failure of this step does to the run
        max_attempts: Attempts made when the action raises ToolError
    """

    id: str
    description: str
    action: StepAction
    failure_policy: FailurePolicy = FailurePolicy.ABORT
    max_attempts: int = 1


@dataclass(frozen=True)
class StepResult:
    """Outcome of one step within a run."""

    step: Step
    status: StepStatus
    detail: str | None = None
    error: ScaffoldError | None = None
    attempts: int = 0


@dataclass
class PipelineRun:
    """State and step results of one pipeline run."""

    state: PipelineState = PipelineState.PENDING
    results: list[StepResult] = field(default_factory=list)

    @property
    def warnings(self) -> list[StepResult]:
        """Steps that failed under WARN_AND_CONTINUE."""
        return [r for r in self.results if r.status == StepStatus.WARNED]

    @property
    def failed_result(self) -> StepResult | None:
        """The ABORT step failure that ended the run, if any."""
        for result in self.results:
            if result.status == StepStatus.FAILED:
                return result
        return None

    @property
    def completed_with_warnings(self) -> bool:
        """Whether the run completed although some steps warned."""
        return self.state == PipelineState.COMPLETED and bool(self.warnings)

    @property
    def exit_code(self) -> int:
        """Process exit status for this run."""
        return 0 if self.state == PipelineState.COMPLETED else 1

    def result_for(self, step_id: str) -> StepResult | None:
        """Look up a step result by step id."""
        for result in self.results:
            if result.step.id == step_id:
                return result
        return None


class Pipeline:
    """Runs steps in order and applies their failure policies."""

    def __init__(
        self,
        steps: Sequence[Step],
        on_step_start: Callable[[Step], None] | None = None,
        on_step_end: Callable[[StepResult], None] | None = None,
        retry_backoff: float = 2.0,
    ):
        """
        Initialize pipeline.

        Args:
            steps: Steps in execution order
            on_step_start: Called before each executed step
            on_step_end: Called with each executed step's result
            retry_backoff: Base of the exponential delay between attempts

        Raises:
            ValueError: If two steps share an id
        """
        ids = [step.id for step in steps]
        duplicates = sorted({step_id for step_id in ids if ids.count(step_id) > 1})
        if duplicates:
            raise ValueError(f"Duplicate step ids: {', '.join(duplicates)}")

        self.steps = tuple(steps)
        self.on_step_start = on_step_start
        self.on_step_end = on_step_end
        self.retry_backoff = retry_backoff
        self.run_state: PipelineRun | None = None

    def run(self, project: Project) -> PipelineRun:
        """
        Execute every step for a project.

        Args:
            project: Project being scaffolded

        Returns:
            PipelineRun in COMPLETED or FAILED state

        Raises:
            RuntimeError: If this pipeline has already been run
        """
        if self.run_state is not None:
            raise RuntimeError("A pipeline can only be run once")

        run = PipelineRun()
        self.run_state = run
        run.state = PipelineState.RUNNING
        logger.info(f"Scaffolding {project.name} in {project.root} ({len(self.steps)} steps)")

        for step in self.steps:
            if run.state == PipelineState.FAILED:
                run.results.append(StepResult(step, StepStatus.NOT_RUN))
                continue

            if self.on_step_start:
                self.on_step_start(step)

            result = self._execute(step, project)
            run.results.append(result)

            if result.status == StepStatus.FAILED:
                logger.error(f"Step '{step.id}' failed, aborting: {result.error}")
                run.state = PipelineState.FAILED
            elif result.status == StepStatus.WARNED:
                logger.warning(f"Step '{step.id}' failed, continuing: {result.error}")

            if self.on_step_end:
                self.on_step_end(result)

        if run.state == PipelineState.RUNNING:
            run.state = PipelineState.COMPLETED

        return run

    def _execute(self, step: Step, project: Project) -> StepResult:
        """Run one step, retrying tool failures up to max_attempts."""
        attempts = 0

        def attempt() -> str | None:
            nonlocal attempts
            attempts += 1
            return step.action(project)

        def log_retry(error: Exception, attempt_number: int) -> None:
            logger.warning(f"Step '{step.id}' attempt {attempt_number} failed ({error}), retrying")

        runner = retry(
            max_attempts=max(step.max_attempts, 1),
            backoff=lambda n: exponential_backoff(n, self.retry_backoff, STEP_RETRY_MAX_DELAY),
            exceptions=(ToolError,),
            on_retry=log_retry,
        )(attempt)

        try:
            detail = runner()
        except ScaffoldError as e:
            if step.failure_policy == FailurePolicy.ABORT:
                status = StepStatus.FAILED
            else:
                status = StepStatus.WARNED
            return StepResult(step, status, error=e, attempts=attempts)

        return StepResult(step, StepStatus.SUCCEEDED, detail=detail, attempts=attempts)
