"""WorkspaceManager - the main entry point for editing a vault's workspaces.

Every mutating call runs one transfer as a single unit:

    begin (backup) -> load -> edit in memory -> atomic write -> commit

and rolls the document back to the backup if any step fails.
"""

import logging
from pathlib import Path
from threading import Lock

from wsm.core.backup import BackupService
from wsm.core.config import WSM_CHECK_RUNNING, WSM_MAX_BACKUPS, WSM_STRICT, WSM_VAULT
from wsm.core.document import read_document, serialize_document
from wsm.core.errors import ObsidianRunningError, WorkspaceError
from wsm.core.navigator import flatten_tabs
from wsm.core.process import is_obsidian_running
from wsm.core.transaction import Transaction
from wsm.core.transfer import copy_tabs, delete_tabs, list_tabs, move_tabs
from wsm.core.types import (
    BackupSettings,
    Tab,
    TransferResult,
    WorkspacesDocument,
    WorkspaceSummary,
)
from wsm.core.vault import Vault
from wsm.core.writer import AtomicWriter

logger = logging.getLogger(__name__)


class WorkspaceManager:
    """Reads and safely rewrites one vault's workspaces.json."""

    def __init__(
        self,
        vault: Vault | Path | str,
        max_backups: int | None = None,
        strict: bool | None = None,
        check_running: bool | None = None,
        running_check=None,
    ):
        """
        Initialize the manager.

        Args:
            vault: Vault or vault root path
            max_backups: Backups to keep (defaults to WSM_MAX_BACKUPS)
            strict: Fail on unknown tab ids (defaults to WSM_STRICT)
            check_running: Refuse to write while Obsidian runs
                (defaults to WSM_CHECK_RUNNING)
            running_check: Callable returning True if Obsidian is running
        """
        self.vault = vault if isinstance(vault, Vault) else Vault(vault)
        self.settings = BackupSettings(
            backup_dir=self.vault.backup_dir,
            max_backups=WSM_MAX_BACKUPS if max_backups is None else max_backups,
        )
        self.strict = WSM_STRICT if strict is None else strict
        self.check_running = (
            WSM_CHECK_RUNNING if check_running is None else check_running
        )
        self._running_check = running_check or is_obsidian_running

        self.backups = BackupService(self.vault.workspaces_file, self.settings)
        self.writer = AtomicWriter(self.vault.workspaces_file)
        self.transaction = Transaction(self.backups, self.writer)
        self._lock = Lock()

    @property
    def workspaces_file(self) -> Path:
        return self.vault.workspaces_file

    # --- Reading ---

    def load(self) -> WorkspacesDocument:
        """Load the current document (empty if the file does not exist)."""
        return read_document(self.workspaces_file)

    def list_workspaces(self) -> list[WorkspaceSummary]:
        """
        Summarize workspaces, most recently modified first.

        Workspaces without an mtime sort last.
        """
        document = self.load()
        summaries = [
            WorkspaceSummary(
                name=name,
                mtime=layout.mtime,
                tab_count=len(flatten_tabs(layout)),
                is_active=name == document.active,
            )
            for name, layout in document.workspaces.items()
        ]
        return sorted(
            summaries,
            key=lambda summary: (bool(summary.mtime), summary.mtime),
            reverse=True,
        )

    def list_tabs(self, layout_name: str) -> list[Tab]:
        """
        List the tabs of a workspace.

        Raises:
            NotFoundError: If the workspace does not exist
        """
        return list_tabs(self.load(), layout_name)

    # --- Writing ---

    def _ensure_writable(self, force: bool) -> None:
        if not self.check_running:
            return
        if self._running_check():
            if not force:
                raise ObsidianRunningError(
                    "Obsidian is running and would overwrite workspaces.json. "
                    "Quit Obsidian first, or force the operation."
                )
            logger.warning("Obsidian is running, writing anyway (forced)")

    def _apply(self, edit, force: bool) -> TransferResult:
        """Run one in-memory edit inside a transaction and persist it."""
        self._ensure_writable(force)
        with self._lock:

            def operation() -> TransferResult:
                document = self.load()
                result = edit(document)
                if result.count:
                    self.writer.write_document(serialize_document(document))
                else:
                    logger.info("Nothing transferred, document left unchanged")
                return result

            return self.transaction.run(operation)

    def move_tabs(
        self,
        source: str,
        target: str,
        tab_ids: list[str],
        strict: bool | None = None,
        force: bool = False,
    ) -> TransferResult:
        """
        Move tabs between workspaces and save.

        Args:
            source: Workspace to take tabs from
            target: Workspace to add them to
            tab_ids: Leaf ids to move
            strict: Override the manager's strict setting
            force: Write even if Obsidian is running

        Returns:
            TransferResult with counts and any missing ids
        """
        strict = self.strict if strict is None else strict
        return self._apply(
            lambda document: move_tabs(
                document, source, target, tab_ids, strict=strict
            ),
            force,
        )

    def copy_tabs(
        self,
        source: str,
        target: str,
        tab_ids: list[str],
        strict: bool | None = None,
        force: bool = False,
    ) -> TransferResult:
        """Copy tabs between workspaces and save."""
        strict = self.strict if strict is None else strict
        return self._apply(
            lambda document: copy_tabs(
                document, source, target, tab_ids, strict=strict
            ),
            force,
        )

    def delete_tabs(
        self,
        layout_name: str,
        tab_ids: list[str],
        strict: bool | None = None,
        force: bool = False,
    ) -> TransferResult:
        """Delete tabs from a workspace and save."""
        strict = self.strict if strict is None else strict
        return self._apply(
            lambda document: delete_tabs(
                document, layout_name, tab_ids, strict=strict
            ),
            force,
        )

    # --- Backups ---

    def list_backups(self) -> list[Path]:
        """Return backups, newest first."""
        return self.backups.list_backups()

    def restore_backup(self, backup_path: Path | str, force: bool = False) -> Path:
        """
        Replace the live document with a backup.

        The current document is backed up first, so a restore can be undone.

        Args:
            backup_path: Backup file, or just its name inside the backup dir
            force: Write even if Obsidian is running

        Returns:
            The path that was restored
        """
        path = Path(backup_path)
        if not path.is_absolute() and not path.exists():
            path = self.settings.backup_dir / path
        self._ensure_writable(force)
        with self._lock:
            # Read first: taking the safety backup may prune the one we restore
            content = self.backups.read_backup(path)
            self.backups.create_backup()
            self.writer.write_document(content)
        logger.info(f"Restored {self.workspaces_file.name} from {path.name}")
        return path

    def __repr__(self) -> str:
        return f"WorkspaceManager({self.vault.root})"


_managers: dict[Path, WorkspaceManager] = {}
_manager_lock = Lock()


def get_manager(vault: Path | str | None = None) -> WorkspaceManager:
    """
    Get the shared manager for a vault (WSM_VAULT when not given).

    One manager per vault root, so operations on the same vault are
    serialized by its lock.

    Raises:
        WorkspaceError: If no vault is given and WSM_VAULT is not set
    """
    vault = vault or WSM_VAULT
    if not vault:
        raise WorkspaceError(
            "No vault configured. Pass a vault path or set WSM_VAULT."
        )
    root = Vault(vault).root
    with _manager_lock:
        manager = _managers.get(root)
        if manager is None:
            manager = WorkspaceManager(root)
            _managers[root] = manager
    return manager


def set_manager(
    manager: WorkspaceManager | None, vault: Path | str | None = None
) -> None:
    """Set (or clear, with None) the shared manager for a vault (for testing)."""
    vault = vault or (manager.vault.root if manager else WSM_VAULT)
    if not vault:
        return
    root = Vault(vault).root
    with _manager_lock:
        if manager is None:
            _managers.pop(root, None)
        else:
            _managers[root] = manager


def reset_managers() -> None:
    """Forget all shared managers."""
    with _manager_lock:
        _managers.clear()
