"""Edits to JSON project files generated by the initializer."""

import json
import logging
import re
from pathlib import Path
from typing import Any

from .config_document import strip_comments
from .constants import (
    JSON_OUTPUT_INDENT,
    PACKAGE_MANIFEST_FILE,
    TSCONFIG_ALIAS,
    TSCONFIG_BASE_URL,
    TSCONFIG_FILE,
)
from .errors import FilesystemError, PatchError

logger = logging.getLogger(__name__)


def _read_text(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise FilesystemError(path, f"cannot read file: {e}") from e


def _write_text(path: Path, content: str) -> None:
    try:
        path.write_text(content, encoding="utf-8")
    except OSError as e:
        raise FilesystemError(path, f"cannot write file: {e}") from e


def _dump_json(data: Any) -> str:
    return json.dumps(data, indent=JSON_OUTPUT_INDENT) + "\n"


def update_package_name(root: Path, name: str) -> bool:
    """
    Set the name field of the project's package.json.

    Args:
        root: Project root directory
        name: Project name

    Returns:
        True if the file changed

    Raises:
        FilesystemError: If package.json is missing or cannot be written
        PatchError: If package.json is not a JSON object
    """
    path = root / PACKAGE_MANIFEST_FILE
    try:
        data = json.loads(_read_text(path))
    except json.JSONDecodeError as e:
        raise PatchError(f"{PACKAGE_MANIFEST_FILE} is not valid JSON: {e}") from e

    if not isinstance(data, dict):
        raise PatchError(f"{PACKAGE_MANIFEST_FILE} does not contain a JSON object")

    if data.get("name") == name:
        return False

    data["name"] = name
    _write_text(path, _dump_json(data))
    return True


def _patch_tsconfig_text(content: str, alias_target: str) -> str:
    """Textual fallback for tsconfig files that are not plain JSON."""
    if '"paths"' in content:
        return content

    paths_block = f'"paths": {{\n      "{TSCONFIG_ALIAS}": ["{alias_target}"]\n    }}'

    if '"baseUrl"' in content:
        return re.sub(
            r'"baseUrl"\s*:\s*"[^"]*"(,)?',
            lambda m: f'"baseUrl": "{TSCONFIG_BASE_URL}",\n    {paths_block}{m.group(1) or ""}',
            content,
            count=1,
        )

    patched, count = re.subn(
        r'"compilerOptions"\s*:\s*\{',
        lambda m: f'"compilerOptions": {{\n    "baseUrl": "{TSCONFIG_BASE_URL}",\n    {paths_block},',
        content,
        count=1,
    )
    if count == 0:
        raise PatchError(f"{TSCONFIG_FILE} has no compilerOptions to extend")
    return patched


def update_tsconfig_paths(root: Path, target_dir: str) -> str:
    """
    Point the ``@/*`` alias at the target root in tsconfig.json.

    The file is parsed as JSON after stripping comments. When that fails
    (trailing commas, for instance) a textual insertion is attempted.

    Args:
        root: Project root directory
        target_dir: Target root subdirectory name

    Returns:
        Short description of what happened

    Raises:
        FilesystemError: If the file cannot be read or written
        PatchError: If neither strategy can patch the file
    """
    path = root / TSCONFIG_FILE
    if not path.exists():
        logger.warning(f"{TSCONFIG_FILE} not found, skipping path mapping update")
        return f"{TSCONFIG_FILE} not found, skipped"

    alias_target = f"./{target_dir}/*"
    content = _read_text(path)

    try:
        data = json.loads(strip_comments(content))
    except (json.JSONDecodeError, PatchError) as e:
        logger.warning(f"Could not parse {TSCONFIG_FILE} ({e}), patching text instead")
        patched = _patch_tsconfig_text(content, alias_target)
        if patched == content:
            return "path mapping already present"
        _write_text(path, patched)
        return "path mapping added"

    if not isinstance(data, dict):
        raise PatchError(f"{TSCONFIG_FILE} does not contain a JSON object")

    compiler_options = data.setdefault("compilerOptions", {})
    paths = compiler_options.setdefault("paths", {}) if isinstance(compiler_options, dict) else None
    if not isinstance(paths, dict):
        raise PatchError(f"{TSCONFIG_FILE} has a malformed compilerOptions section")
    if compiler_options.get("baseUrl") == TSCONFIG_BASE_URL and paths.get(TSCONFIG_ALIAS) == [alias_target]:
        return "path mapping already present"

    compiler_options["baseUrl"] = TSCONFIG_BASE_URL
    paths[TSCONFIG_ALIAS] = [alias_target]
    _write_text(path, _dump_json(data))
    return "path mapping added"
