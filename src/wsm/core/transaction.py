"""Begin/commit/rollback envelope around one document edit.

``begin`` snapshots the live document through the BackupService. If
anything fails before ``commit``, ``rollback`` writes the snapshot back
over the live document, so a failed operation leaves it byte-identical
to how it started. A failed restore is raised as RollbackFailure.

Example:
    transaction = Transaction(backups, writer)
    with transaction:
        document = read_document(path)
        move_tabs(document, "Work", "Home", ["abc123"])
        writer.write_document(serialize_document(document))
"""

import logging
from collections.abc import Callable
from enum import StrEnum
from pathlib import Path
from typing import TypeVar

from wsm.core.backup import BackupService
from wsm.core.errors import RollbackFailure, TransactionError
from wsm.core.writer import AtomicWriter

logger = logging.getLogger(__name__)

T = TypeVar("T")


class TransactionState(StrEnum):
    """Lifecycle of a transaction."""

    IDLE = "idle"
    ACTIVE = "active"
    COMMITTED = "committed"
    ROLLED_BACK = "rolled_back"


class Transaction:
    """Single, non-nested transaction over the workspaces file."""

    def __init__(self, backups: BackupService, writer: AtomicWriter):
        """
        Initialize transaction.

        Args:
            backups: Service used to snapshot the document on begin
            writer: Writer used to restore the snapshot on rollback
        """
        self.backups = backups
        self.writer = writer
        self.state = TransactionState.IDLE
        self.last_outcome: TransactionState | None = None
        self.recovery_point: Path | None = None

    @property
    def active(self) -> bool:
        return self.state == TransactionState.ACTIVE

    def begin(self) -> Path | None:
        """
        Start the transaction by taking a backup.

        Returns:
            The backup path, or None when there was no document to back up

        Raises:
            TransactionError: If a transaction is already active
            IOFailure: If the backup could not be written
        """
        if self.active:
            raise TransactionError("A transaction is already active")
        self.recovery_point = self.backups.create_backup()
        self.state = TransactionState.ACTIVE
        logger.debug(f"Transaction started, recovery point: {self.recovery_point}")
        return self.recovery_point

    def commit(self) -> None:
        """Finish successfully. The backup stays on disk as history."""
        if not self.active:
            raise TransactionError("No active transaction to commit")
        self._finish(TransactionState.COMMITTED)
        logger.debug("Transaction committed")

    def rollback(self) -> None:
        """
        Restore the document from the recovery point.

        Raises:
            TransactionError: If no transaction is active
            RollbackFailure: If the backup could not be written back
        """
        if not self.active:
            raise TransactionError("No active transaction to roll back")

        backup_path = self.recovery_point
        try:
            if backup_path is None:
                logger.warning(
                    "Rollback requested but there was no document to back up"
                )
                return
            try:
                self.writer.write_document(self.backups.read_backup(backup_path))
            except Exception as e:
                logger.error(f"FATAL: failed to restore from {backup_path}: {e}")
                raise RollbackFailure(
                    f"Failed to restore {self.writer.target} from backup "
                    f"{backup_path}: {e}",
                    backup_path=backup_path,
                ) from e
            logger.info(f"Rolled back from backup {backup_path.name}")
        finally:
            self._finish(TransactionState.ROLLED_BACK)

    def _finish(self, outcome: TransactionState) -> None:
        self.last_outcome = outcome
        self.recovery_point = None
        self.state = TransactionState.IDLE

    def run(self, operation: Callable[[], T]) -> T:
        """
        Run ``operation`` inside begin/commit, rolling back on any error.

        The original error is re-raised after a successful rollback. If the
        rollback fails, RollbackFailure is raised, chained to the original.
        """
        with self:
            return operation()

    def __enter__(self) -> "Transaction":
        self.begin()
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        if exc_type is None:
            self.commit()
            return False
        logger.error(f"Operation failed, rolling back: {exc}")
        try:
            self.rollback()
        except RollbackFailure as failure:
            raise failure from exc
        return False
