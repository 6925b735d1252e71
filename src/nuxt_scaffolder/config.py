"""Configuration management for nuxt-scaffolder."""

import logging
import os
import shlex
import shutil
import tomllib
from pathlib import Path
from typing import Any, Callable

import tomli_w
from pydantic import BaseModel, ConfigDict, Field, field_validator

from .constants import CONFIG_ENV_VAR, DEFAULT_CONFIG_PATH, DEFAULT_PROJECT_NAME
from .utils import ensure_dir, expand_path

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_TEMPLATE_PATH = Path(__file__).with_name("config.toml")
CURRENT_CONFIG_SCHEMA_VERSION = 1

COMMAND_PLACEHOLDERS = {"name": "x", "modules": "x", "module": "x", "config_file": "x"}


def _load_default_template() -> dict[str, Any]:
    """Load the packaged default config template."""
    with open(DEFAULT_CONFIG_TEMPLATE_PATH, "rb") as f:
        return tomllib.load(f)


def _merge_config_data(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Merge config dictionaries recursively."""
    merged = dict(base)
    for key, value in override.items():
        base_value = merged.get(key)
        if isinstance(base_value, dict) and isinstance(value, dict):
            merged[key] = _merge_config_data(base_value, value)
        else:
            merged[key] = value
    return merged


def _copy_default_config(config_path: Path) -> None:
    """Copy packaged template to the user config path."""
    ensure_dir(config_path.parent)
    shutil.copyfile(DEFAULT_CONFIG_TEMPLATE_PATH, config_path)


# Schema version -> migration bringing data from the previous version up to it.
# Version 1 is the first released layout; files without [meta] are stamped with it.
CONFIG_MIGRATIONS: dict[int, Callable[[dict[str, Any]], dict[str, Any]]] = {}


def _get_config_schema_version(data: dict[str, Any]) -> int:
    """Get config schema version from metadata section."""
    meta = data.get("meta")
    if not isinstance(meta, dict):
        return 0

    version = meta.get("schema_version", 0)
    if isinstance(version, int) and version >= 0:
        return version

    return 0


def _set_config_schema_version(data: dict[str, Any], version: int) -> None:
    """Set config schema version in metadata section."""
    meta = data.get("meta")
    if not isinstance(meta, dict):
        meta = {}
        data["meta"] = meta
    meta["schema_version"] = version


def _run_config_migrations(data: dict[str, Any]) -> tuple[dict[str, Any], bool]:
    """Run pending config migrations based on schema version."""
    current_version = _get_config_schema_version(data)
    if current_version >= CURRENT_CONFIG_SCHEMA_VERSION:
        return data, False

    migrated = dict(data)

    for version in range(current_version + 1, CURRENT_CONFIG_SCHEMA_VERSION + 1):
        migration = CONFIG_MIGRATIONS.get(version)
        if migration is not None:
            migrated = migration(migrated)
        _set_config_schema_version(migrated, version)

    return migrated, True


def _save_config(config_path: Path, data: dict[str, Any]) -> None:
    """Persist config data to disk."""
    ensure_dir(config_path.parent)
    with open(config_path, "wb") as f:
        tomli_w.dump(data, f)


def _check_dir_name(value: str) -> str:
    if not value or value in (".", "..") or "/" in value or "\\" in value:
        raise ValueError(f"Expected a single directory name, got '{value}'")
    return value


class ProjectConfig(BaseModel):
    """Project layout configuration."""

    default_name: str = DEFAULT_PROJECT_NAME
    target_dir: str
    migratable_dirs: list[str] = Field(min_length=1)
    config_file: str

    @field_validator("target_dir")
    @classmethod
    def check_target_dir(cls, v: str) -> str:
        """Require a plain directory name."""
        return _check_dir_name(v)

    @field_validator("migratable_dirs")
    @classmethod
    def check_migratable_dirs(cls, v: list[str]) -> list[str]:
        """Require plain, distinct directory names."""
        for name in v:
            _check_dir_name(name)
        if len(set(v)) != len(v):
            raise ValueError("migratable_dirs contains duplicates")
        return v


class ModulesConfig(BaseModel):
    """Nuxt module configuration."""

    initial: list[str] = Field(default_factory=list)
    ui: str
    ui_key: str


class ToolCommandsConfig(BaseModel):
    """External command lines."""

    init: str
    install: list[str]
    module_add: str
    format: str
    prepare: str
    ui_init: str
    ui_add: str

    @field_validator("init", "module_add", "format", "prepare", "ui_init", "ui_add", "install", mode="after")
    @classmethod
    def check_command(cls, v: str | list[str]) -> str | list[str]:
        """Reject empty commands and unknown placeholders."""
        for command in [v] if isinstance(v, str) else v:
            if not shlex.split(command):
                raise ValueError("Command cannot be empty")
            try:
                command.format(**COMMAND_PLACEHOLDERS)
            except (KeyError, IndexError, ValueError) as e:
                raise ValueError(f"Invalid placeholder in command '{command}': {e}") from e
        return v


class ToolsConfig(BaseModel):
    """External tool configuration."""

    timeout: float = Field(default=0, ge=0, description="Command timeout in seconds (0 = none)")
    attempts: int = Field(default=1, ge=1, description="Attempts for network-bound steps")
    retry_backoff: float = Field(default=2.0, ge=0)
    commands: ToolCommandsConfig


class MetaConfig(BaseModel):
    """Configuration metadata section."""

    schema_version: int = Field(default=CURRENT_CONFIG_SCHEMA_VERSION, ge=0)


class Config(BaseModel):
    """Configuration for nuxt-scaffolder."""

    model_config = ConfigDict(extra="ignore")

    meta: MetaConfig = Field(default_factory=MetaConfig)
    project: ProjectConfig
    modules: ModulesConfig
    tools: ToolsConfig

    @property
    def target_dir(self) -> str:
        """Target root subdirectory name."""
        return self.project.target_dir

    @property
    def migratable_dirs(self) -> list[str]:
        """Directories moved under the target root."""
        return self.project.migratable_dirs

    @property
    def config_file(self) -> str:
        """Nuxt configuration file name."""
        return self.project.config_file

    @property
    def timeout(self) -> float | None:
        """Command timeout, None when unbounded."""
        return self.tools.timeout or None

    @property
    def commands(self) -> ToolCommandsConfig:
        """External command lines."""
        return self.tools.commands

    @property
    def schema_version(self) -> int:
        """Config schema version."""
        return self.meta.schema_version


def get_config_path() -> Path:
    """
    Get configuration file path.

    Priority:
    1. NUXT_SCAFFOLDER_CONFIG environment variable
    2. Default: ~/.config/nuxt-scaffolder/config.toml

    Returns:
        Path to config file
    """
    env_config = os.environ.get(CONFIG_ENV_VAR)
    if env_config:
        return expand_path(env_config)

    return expand_path(DEFAULT_CONFIG_PATH)


def create_default_config() -> Config:
    """Create default configuration from packaged template."""
    return Config.model_validate(_load_default_template())


def load_config(config_path: Path | None = None) -> Config:
    """
    Load configuration from TOML file using Pydantic validation.

    Args:
        config_path: Optional custom config path

    Returns:
        Config instance with validated values

    Raises:
        ValueError: If config validation fails
        tomllib.TOMLDecodeError: If the file is not valid TOML
    """
    if config_path is None:
        config_path = get_config_path()

    defaults = _load_default_template()

    if not config_path.exists():
        try:
            _copy_default_config(config_path)
        except (OSError, PermissionError) as e:
            logger.warning(f"Could not copy default config to {config_path}: {e}")

    if config_path.exists():
        with open(config_path, "rb") as f:
            data = tomllib.load(f)

        data, was_migrated = _run_config_migrations(data)
        if was_migrated:
            try:
                _save_config(config_path, data)
            except (OSError, PermissionError) as e:
                logger.warning(f"Could not save migrated config to {config_path}: {e}")

        merged_values = _merge_config_data(defaults, data)
        return Config.model_validate(merged_values)

    return Config.model_validate(defaults)
