"""Timestamped backups of workspaces.json.

Backups are named ``workspaces-backup-<timestamp>.json`` where the
timestamp is the UTC ISO-8601 time with ``:`` and ``.`` replaced by
``-`` (``2024-01-31T12-00-00-000Z``). Names therefore sort in creation
order. Two backups in the same millisecond get a ``-1``, ``-2`` ...
suffix.
"""

import logging
import re
from pathlib import Path

from wsm.core.errors import IOFailure
from wsm.core.types import BackupSettings, utc_timestamp

logger = logging.getLogger(__name__)

BACKUP_PREFIX = "workspaces-backup-"
BACKUP_PATTERN = re.compile(
    r"^workspaces-backup-(?P<stamp>\d{4}-\d{2}-\d{2}T[\d-]+Z)(?:-(?P<seq>\d+))?\.json$"
)


def backup_timestamp() -> str:
    """Current time in backup file name form."""
    return utc_timestamp().replace(":", "-").replace(".", "-")


def _sort_key(path: Path) -> tuple[str, int]:
    match = BACKUP_PATTERN.match(path.name)
    if match is None:
        return "", 0
    return match.group("stamp"), int(match.group("seq") or 0)


class BackupService:
    """Creates, lists and prunes backups of one workspaces file."""

    def __init__(self, document_path: Path | str, settings: BackupSettings):
        """
        Initialize backup service.

        Args:
            document_path: The live workspaces.json
            settings: Backup directory and retention count
        """
        self.document_path = Path(document_path)
        self.settings = settings

    @property
    def backup_dir(self) -> Path:
        return self.settings.backup_dir

    def _next_backup_path(self) -> Path:
        stamp = backup_timestamp()
        taken = [
            _sort_key(path)[1]
            for path in self.backup_dir.glob(f"{BACKUP_PREFIX}{stamp}*.json")
            if _sort_key(path)[0] == stamp
        ]
        if not taken:
            return self.backup_dir / f"{BACKUP_PREFIX}{stamp}.json"
        # Past the highest sequence so a pruned name is never reused
        return self.backup_dir / f"{BACKUP_PREFIX}{stamp}-{max(taken) + 1}.json"

    def create_backup(self) -> Path | None:
        """
        Snapshot the live document.

        Returns:
            Path of the new backup, or None when there is no document yet
            (nothing to protect, and nothing to roll back to)

        Raises:
            IOFailure: If the document exists but cannot be copied
        """
        try:
            content = self.document_path.read_bytes()
        except FileNotFoundError:
            logger.warning(
                f"No workspaces file at {self.document_path}, skipping backup"
            )
            return None
        except OSError as e:
            raise IOFailure(
                f"Failed to read {self.document_path} for backup: {e}",
                path=self.document_path,
            ) from e

        try:
            self.backup_dir.mkdir(parents=True, exist_ok=True)
            backup_path = self._next_backup_path()
            backup_path.write_bytes(content)
        except OSError as e:
            raise IOFailure(
                f"Failed to write backup in {self.backup_dir}: {e}",
                path=self.backup_dir,
            ) from e

        logger.info(f"Created backup {backup_path.name}")
        self.prune_backups()
        return backup_path

    def list_backups(self) -> list[Path]:
        """Return existing backups, newest first."""
        if not self.backup_dir.is_dir():
            return []
        backups = [
            path
            for path in self.backup_dir.iterdir()
            if path.is_file() and BACKUP_PATTERN.match(path.name)
        ]
        return sorted(backups, key=_sort_key, reverse=True)

    def prune_backups(self, max_backups: int | None = None) -> list[Path]:
        """
        Delete all but the newest backups.

        Never raises: a failed prune only means extra history on disk.

        Args:
            max_backups: How many to keep (defaults to settings)

        Returns:
            Paths that were deleted
        """
        keep = self.settings.max_backups if max_backups is None else max_backups
        removed: list[Path] = []
        for path in self.list_backups()[keep:]:
            try:
                path.unlink()
            except OSError as e:
                logger.warning(f"Failed to prune old backup {path.name}: {e}")
                continue
            removed.append(path)
        if removed:
            logger.debug(f"Pruned {len(removed)} old backup(s)")
        return removed

    def read_backup(self, backup_path: Path | str) -> bytes:
        """
        Read a backup's content.

        Raises:
            IOFailure: If the backup cannot be read
        """
        backup_path = Path(backup_path)
        try:
            return backup_path.read_bytes()
        except OSError as e:
            raise IOFailure(
                f"Failed to read backup {backup_path}: {e}", path=backup_path
            ) from e

    def __repr__(self) -> str:
        keep = self.settings.max_backups
        return f"BackupService({self.document_path}, keep={keep})"
