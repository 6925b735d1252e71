"""The fixed Nuxt 4 scaffolding step list."""

import logging
import shlex
from collections.abc import Callable
from dataclasses import replace
from functools import partial, wraps
from pathlib import Path

from .config import Config
from .config_document import ConfigurationDocument
from .config_patcher import (
    ensure_import,
    ensure_top_level_defaults,
    insert_key_block_if_absent,
    merge_into_module_list,
    patch_config_file,
)
from .constants import (
    PACKAGE_MANIFEST_FILE,
    ROOT_ENTRY_FILE,
    UI_LIBRARY_MANIFEST,
    FailurePolicy,
    LayoutState,
    WriteOutcome,
)
from .errors import FilesystemError
from .layout import build_migration_plan, inspect_layout, migrate, relocate_file
from .pipeline import Step, StepAction
from .project import Project
from .project_files import update_package_name, update_tsconfig_paths
from .templates import (
    STARTER_FILES,
    TAILWIND_STYLESHEET,
    UI_COMPONENT_DIR,
    UI_COMPONENT_FILES,
    StarterFile,
    materialize,
)
from .tool_invoker import ToolResult, invoke
from .utils import ensure_dir

logger = logging.getLogger(__name__)

Invoker = Callable[..., ToolResult]

TAILWIND_IMPORT_SPECIFIER = "@tailwindcss/vite"
TAILWIND_IMPORT_BINDING = "tailwindcss"

# marker substring -> option line injected into defineNuxtConfig({
TAILWIND_DEFAULTS = {
    "tailwind.css": "css: ['~/assets/css/tailwind.css']",
    "tailwindcss()": "vite: { plugins: [tailwindcss()] }",
}

UI_BLOCK_TEMPLATE = """{{
    /**
     * Prefix for all the imported component
     */
    prefix: '',
    /**
     * Directory that the component lives in.
     * @default "{target_dir}/components/ui"
     */
    componentDir: '{target_dir}/components/ui'
  }}"""


def render_command(template: str, **values: str) -> list[str]:
    """
    Split a configured command line and fill in its placeholders.

    Args:
        template: Command line, e.g. "bunx nuxi@latest init {name}"
        **values: Placeholder values

    Returns:
        Argument list
    """
    return [token.format(**values) for token in shlex.split(template)]


def _guard_filesystem(action: StepAction) -> StepAction:
    """Report OS errors escaping a step action as FilesystemError."""

    @wraps(action)
    def guarded(project: Project) -> str | None:
        try:
            return action(project)
        except OSError as e:
            path = Path(e.filename) if e.filename else project.root
            raise FilesystemError(path, e.strerror or str(e)) from e

    return guarded


class ScaffoldSteps:
    """Builds the step list and implements each step's action."""

    def __init__(self, config: Config, invoker: Invoker | None = None):
        """
        Initialize step builder.

        Args:
            config: Application configuration
            invoker: Replacement for tool_invoker.invoke
        """
        self.config = config
        self.invoker = invoker or invoke

    def build(self) -> list[Step]:
        """Return the steps in execution order."""
        abort = FailurePolicy.ABORT
        warn = FailurePolicy.WARN_AND_CONTINUE
        attempts = self.config.tools.attempts
        config_file = self.config.config_file
        target = self.config.target_dir

        steps = [
            Step("init", "Creating Nuxt 4 app", self.init_project, abort),
            Step("package-name", "Setting package name", self.set_package_name, abort),
            Step(
                "install", "Installing TypeScript and Tailwind", self.install_dependencies, abort, attempts
            ),
            Step("tsconfig-paths", "Updating tsconfig.json path mappings", self.update_tsconfig, warn),
            Step("tailwind-stylesheet", "Creating Tailwind stylesheet", self.write_stylesheet, warn),
            Step(
                "configure-tailwind", f"Configuring Tailwind in {config_file}", self.configure_tailwind, abort
            ),
            Step(
                "add-ui-module", f"Adding {self.config.modules.ui}", self.add_ui_module, abort, attempts
            ),
            Step("configure-modules", "Updating modules array and UI config", self.configure_modules, abort),
            Step("format-config", f"Formatting {config_file}", self.format_config, warn),
            Step("prepare", "Preparing Nuxt types", self.prepare, abort),
            Step("ui-init", "Setting up UI component library", self.init_ui_library, warn),
            Step(
                "migrate-layout", f"Reorganizing project structure into {target}/", self.migrate_layout, abort
            ),
            Step("prepare-layout", "Preparing Nuxt types for the new layout", self.prepare, abort),
            Step("relocate-entry", f"Moving {ROOT_ENTRY_FILE} into {target}/", self.relocate_entry, warn),
        ]

        for step_id, starter in STARTER_FILES.items():
            action = partial(self.write_starter, starter=starter)
            steps.append(Step(step_id, f"Creating {starter.description}", action, warn))

        steps.extend(
            [
                Step("ui-component", "Adding sample UI component", self.add_ui_component, warn),
                Step(
                    "ui-component-fallback",
                    "Checking sample UI component",
                    self.write_ui_component_fallback,
                    warn,
                ),
            ]
        )
        return [replace(step, action=_guard_filesystem(step.action)) for step in steps]

    # Helpers

    def _placeholders(self, project: Project) -> dict[str, str]:
        return {
            "name": project.name,
            "modules": ",".join(self.config.modules.initial),
            "module": self.config.modules.ui,
            "config_file": self.config.config_file,
        }

    def _run(self, project: Project, template: str, working_dir: Path | None = None) -> ToolResult:
        """Run a configured command; raises ToolError on failure."""
        command = render_command(template, **self._placeholders(project))
        result = self.invoker(working_dir or project.root, command, timeout=self.config.timeout)
        return result.check()

    def _target_root(self, project: Project) -> Path:
        return project.root / self.config.target_dir

    def _config_path(self, project: Project) -> Path:
        return project.root / self.config.config_file

    @staticmethod
    def _describe(outcome: WriteOutcome, relative_path: str) -> str:
        if outcome == WriteOutcome.CREATED:
            return f"created {relative_path}"
        return f"kept existing {relative_path}"

    # Actions

    def init_project(self, project: Project) -> str | None:
        """Run the project initializer unless a project already exists."""
        if (project.root / PACKAGE_MANIFEST_FILE).exists():
            logger.info(f"{PACKAGE_MANIFEST_FILE} found in {project.root}, skipping initializer")
            return "existing project found, initializer skipped"

        try:
            ensure_dir(project.parent)
        except OSError as e:
            raise FilesystemError(project.parent, f"cannot create parent directory: {e}") from e

        self._run(project, self.config.commands.init, working_dir=project.parent)
        return None

    def set_package_name(self, project: Project) -> str | None:
        """Overwrite the package.json name with the project name."""
        if update_package_name(project.root, project.name):
            return f"name set to {project.name}"
        return "name already set"

    def install_dependencies(self, project: Project) -> str | None:
        """Run each configured install command in order."""
        for template in self.config.commands.install:
            self._run(project, template)
        return None

    def update_tsconfig(self, project: Project) -> str | None:
        """Point the @/* alias at the target root."""
        return update_tsconfig_paths(project.root, self.config.target_dir)

    def write_stylesheet(self, project: Project) -> str | None:
        """Create the Tailwind stylesheet if absent."""
        outcome = materialize(self._target_root(project), TAILWIND_STYLESHEET)
        return self._describe(outcome, f"{self.config.target_dir}/{TAILWIND_STYLESHEET.relative_path}")

    def configure_tailwind(self, project: Project) -> str | None:
        """Register the stylesheet and Vite plugin in the Nuxt config."""
        changed = patch_config_file(
            self._config_path(project),
            partial(ensure_top_level_defaults, defaults=TAILWIND_DEFAULTS),
            partial(ensure_import, specifier=TAILWIND_IMPORT_SPECIFIER, binding=TAILWIND_IMPORT_BINDING),
        )
        return "updated" if changed else "already configured"

    def add_ui_module(self, project: Project) -> str | None:
        """Run the module-adder unless the module is already registered."""
        path = self._config_path(project)
        try:
            doc = ConfigurationDocument.parse(path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError) as e:
            raise FilesystemError(path, f"cannot read configuration: {e}") from e

        if self.config.modules.ui in doc.module_list:
            return "already registered"

        self._run(project, self.config.commands.module_add)
        return None

    def configure_modules(self, project: Project) -> str | None:
        """Merge the UI module into the modules array and add its config block."""
        block = UI_BLOCK_TEMPLATE.format(target_dir=self.config.target_dir)
        changed = patch_config_file(
            self._config_path(project),
            partial(merge_into_module_list, module_name=self.config.modules.ui),
            partial(insert_key_block_if_absent, key_name=self.config.modules.ui_key, block_text=block),
        )
        return "updated" if changed else "already configured"

    def format_config(self, project: Project) -> str | None:
        """Run the document formatter over the Nuxt config."""
        self._run(project, self.config.commands.format)
        return None

    def prepare(self, project: Project) -> str | None:
        """Regenerate Nuxt type declarations."""
        self._run(project, self.config.commands.prepare)
        return None

    def init_ui_library(self, project: Project) -> str | None:
        """Initialize the UI component library unless already initialized."""
        if (project.root / UI_LIBRARY_MANIFEST).exists():
            return f"{UI_LIBRARY_MANIFEST} found, skipped"

        self._run(project, self.config.commands.ui_init)
        return None

    def migrate_layout(self, project: Project) -> str | None:
        """Move legacy root directories under the target root."""
        state = inspect_layout(project.root, self.config.target_dir, self.config.migratable_dirs)
        if state == LayoutState.TARGET:
            logger.info(f"Detected existing {self.config.target_dir}/ structure, skipping reorganization")
            return "preserved existing structure"

        plan = build_migration_plan(self.config.migratable_dirs, self.config.target_dir)
        report = migrate(project.root, plan)
        return f"{state.value} layout, {report.summary()}"

    def relocate_entry(self, project: Project) -> str | None:
        """Move a root-level app.vue into the target root."""
        destination = f"{self.config.target_dir}/{ROOT_ENTRY_FILE}"
        if relocate_file(project.root, ROOT_ENTRY_FILE, destination):
            return f"moved to {destination}"
        return "nothing to move"

    def write_starter(self, project: Project, starter: StarterFile) -> str | None:
        """Create one starter file if absent."""
        outcome = materialize(self._target_root(project), starter)
        return self._describe(outcome, f"{self.config.target_dir}/{starter.relative_path}")

    def add_ui_component(self, project: Project) -> str | None:
        """Add the sample component through the UI library's component-adder."""
        if (self._target_root(project) / UI_COMPONENT_DIR).exists():
            return "already present"

        self._run(project, self.config.commands.ui_add)
        return None

    def write_ui_component_fallback(self, project: Project) -> str | None:
        """Write a minimal sample component when the component-adder produced none."""
        outcomes = [materialize(self._target_root(project), starter) for starter in UI_COMPONENT_FILES]
        if WriteOutcome.CREATED in outcomes:
            return f"wrote fallback component in {self.config.target_dir}/{UI_COMPONENT_DIR}"
        return "already present"


def build_steps(config: Config, invoker: Invoker | None = None) -> list[Step]:
    """Build the scaffolding steps for a configuration."""
    return ScaffoldSteps(config, invoker).build()
