"""Error taxonomy for workspace operations.

Callers can tell "the transfer failed but the document is intact"
(every WorkspaceError except RollbackFailure) from "the transfer failed
and restoring the backup failed too" (RollbackFailure).
"""


class WorkspaceError(Exception):
    """Base class for all workspace manager errors."""

    pass


class NotFoundError(WorkspaceError):
    """Raised when a named workspace (or, in strict mode, a tab) is absent."""

    def __init__(self, message: str, missing: list[str] | None = None):
        super().__init__(message)
        self.missing = missing or []


class ValidationError(WorkspaceError):
    """Raised when document bytes do not parse or fail the round-trip check."""

    pass


class IOFailure(WorkspaceError):
    """Raised when reading, writing or renaming a file fails."""

    def __init__(self, message: str, path: object | None = None):
        super().__init__(message)
        self.path = path


class TransactionError(WorkspaceError):
    """Raised when the transaction state machine is driven out of order."""

    pass


class ObsidianRunningError(WorkspaceError):
    """Raised when Obsidian is running and may overwrite our changes."""

    pass


class RollbackFailure(WorkspaceError):
    """Raised when restoring the pre-operation backup failed.

    This is fatal: the live document may be in an unknown state and the
    backup at ``backup_path`` is the only known-good copy.
    """

    def __init__(self, message: str, backup_path: object | None = None):
        super().__init__(message)
        self.backup_path = backup_path
