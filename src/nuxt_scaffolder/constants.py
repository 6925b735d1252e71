"""Constants used throughout nuxt-scaffolder."""

from enum import Enum


class LayoutState(str, Enum):
    """Classification of a project tree against the target layout.

    Attributes:
        UNKNOWN: No target root contents and no legacy directories
        LEGACY: Legacy directories at the project root, target root absent or empty
        TARGET: Populated target root, nothing left to migrate
        MIXED: Populated target root, but legacy directories remain at the root
    """

    UNKNOWN = "unknown"
    LEGACY = "legacy"
    TARGET = "target"
    MIXED = "mixed"


class FailurePolicy(str, Enum):
    """What a step failure does to the rest of the pipeline."""

    ABORT = "abort"
    WARN_AND_CONTINUE = "warn-and-continue"


class PipelineState(str, Enum):
    """Pipeline lifecycle states."""

    PENDING = "pending"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"


class StepStatus(str, Enum):
    """Outcome of a single pipeline step."""

    SUCCEEDED = "succeeded"
    WARNED = "warned"
    FAILED = "failed"
    NOT_RUN = "not-run"


class WriteOutcome(str, Enum):
    """Result of a guarded template write."""

    CREATED = "created"
    SKIPPED_EXISTING = "skipped-existing"


class MigrationOutcome(str, Enum):
    """Result of a single migration plan entry."""

    MOVED = "moved"
    NO_OP = "no-op"


# Project defaults
DEFAULT_PROJECT_NAME = "my-nuxt-app"
MAX_PROJECT_NAME_LENGTH = 214  # npm package name limit

# Files the pipeline reads or rewrites inside the project root
PACKAGE_MANIFEST_FILE = "package.json"
TSCONFIG_FILE = "tsconfig.json"
ROOT_ENTRY_FILE = "app.vue"
UI_LIBRARY_MANIFEST = "components.json"  # written by the UI library initializer

# Nuxt configuration document markers
CONFIG_FACTORY_CALL = "defineNuxtConfig"
CONFIG_MODULES_KEY = "modules"

# tsconfig path alias pointing at the target root
TSCONFIG_BASE_URL = "."
TSCONFIG_ALIAS = "@/*"

# JSON output formatting
JSON_OUTPUT_INDENT = 2

# Step retry configuration
STEP_RETRY_MAX_DELAY = 30.0  # seconds

# Environment variable overriding the config file location
CONFIG_ENV_VAR = "NUXT_SCAFFOLDER_CONFIG"
DEFAULT_CONFIG_PATH = "~/.config/nuxt-scaffolder/config.toml"

# Logging configuration
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
