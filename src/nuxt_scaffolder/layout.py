"""Layout inspection and migration into the app/ target root."""

import logging
import shutil
from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path

from .constants import LayoutState, MigrationOutcome
from .errors import FilesystemError
from .utils import ensure_dir, is_empty_dir, move_directory_contents

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MigrationEntry:
    """One source -> destination pair, relative to the project root."""

    source: Path
    destination: Path


MigrationPlan = tuple[MigrationEntry, ...]


@dataclass(frozen=True)
class MigrationEntryResult:
    """What migrate() did for one plan entry."""

    entry: MigrationEntry
    outcome: MigrationOutcome
    moved: tuple[str, ...] = ()


@dataclass
class MigrationReport:
    """Results of a migration run, in plan order."""

    results: list[MigrationEntryResult] = field(default_factory=list)

    @property
    def moved_anything(self) -> bool:
        """Whether at least one entry moved content."""
        return any(r.outcome == MigrationOutcome.MOVED for r in self.results)

    def summary(self) -> str:
        """One-line description for step output."""
        moved = [str(r.entry.source) for r in self.results if r.outcome == MigrationOutcome.MOVED]
        if not moved:
            return "nothing to move"
        return f"moved {', '.join(moved)}"


def inspect_layout(root: Path, target_dir: str, legacy_dirs: Iterable[str]) -> LayoutState:
    """
    Classify a project tree against the target layout.

    Pure read; safe to call any number of times.

    Args:
        root: Project root directory
        target_dir: Name of the target root subdirectory (e.g. "app")
        legacy_dirs: Migratable directory names looked up at the project root

    Returns:
        LayoutState for the tree
    """
    target_populated = not is_empty_dir(root / target_dir)
    legacy_present = any((root / name).is_dir() for name in legacy_dirs)

    if target_populated and legacy_present:
        return LayoutState.MIXED
    if target_populated:
        return LayoutState.TARGET
    if legacy_present:
        return LayoutState.LEGACY
    return LayoutState.UNKNOWN


def build_migration_plan(dirs: Iterable[str], target_dir: str) -> MigrationPlan:
    """
    Build the fixed migration plan for a run.

    Args:
        dirs: Migratable directory names
        target_dir: Target root subdirectory name

    Returns:
        Plan moving each root-level directory under the target root
    """
    return tuple(MigrationEntry(Path(name), Path(target_dir) / name) for name in dirs)


def migrate(root: Path, plan: MigrationPlan) -> MigrationReport:
    """
    Move each planned source directory's contents into its destination.

    Destinations are always created. A missing source is a no-op. Existing
    destination directories are merged and colliding files overwritten.
    Running this twice is safe: the second run finds nothing to move.

    Args:
        root: Project root directory
        plan: Migration plan from build_migration_plan()

    Returns:
        MigrationReport with one result per plan entry

    Raises:
        FilesystemError: If a directory cannot be created or moved
    """
    report = MigrationReport()

    for entry in plan:
        source = root / entry.source
        destination = root / entry.destination

        try:
            ensure_dir(destination)

            if not source.is_dir():
                report.results.append(MigrationEntryResult(entry, MigrationOutcome.NO_OP))
                continue

            moved = move_directory_contents(source, destination)
            source.rmdir()
        except (OSError, ValueError) as e:
            raise FilesystemError(source, f"cannot migrate to {entry.destination}: {e}") from e

        logger.info(f"Migrated {entry.source} -> {entry.destination} ({len(moved)} item(s))")
        report.results.append(MigrationEntryResult(entry, MigrationOutcome.MOVED, tuple(moved)))

    return report


def relocate_file(root: Path, source: str, destination: str) -> bool:
    """
    Move a root-level file into the target layout without overwriting.

    Args:
        root: Project root directory
        source: File path relative to root
        destination: Destination path relative to root

    Returns:
        True if the file was moved, False if there was nothing to do

    Raises:
        FilesystemError: If the move fails
    """
    source_path = root / source
    destination_path = root / destination

    if not source_path.is_file() or destination_path.exists():
        return False

    try:
        ensure_dir(destination_path.parent)
        shutil.move(str(source_path), str(destination_path))
    except OSError as e:
        raise FilesystemError(source_path, f"cannot move to {destination}: {e}") from e

    logger.info(f"Moved {source} -> {destination}")
    return True
