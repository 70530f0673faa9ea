"""wsm core library - the workspace tab transfer engine."""

from typing import TYPE_CHECKING

from wsm.core.errors import (
    IOFailure,
    NotFoundError,
    RollbackFailure,
    ValidationError,
    WorkspaceError,
)
from wsm.core.types import (
    LayoutNode,
    Tab,
    TransferResult,
    WorkspaceLayout,
    WorkspacesDocument,
)

if TYPE_CHECKING:
    from wsm.core.manager import WorkspaceManager, get_manager
    from wsm.core.vault import Vault

__all__ = [
    # Core classes
    "WorkspaceManager",
    "get_manager",
    "Vault",
    # Types
    "LayoutNode",
    "Tab",
    "TransferResult",
    "WorkspaceLayout",
    "WorkspacesDocument",
    # Errors
    "IOFailure",
    "NotFoundError",
    "RollbackFailure",
    "ValidationError",
    "WorkspaceError",
]


def __getattr__(name: str):
    if name == "WorkspaceManager":
        from wsm.core.manager import WorkspaceManager

        return WorkspaceManager
    if name == "get_manager":
        from wsm.core.manager import get_manager

        return get_manager
    if name == "Vault":
        from wsm.core.vault import Vault

        return Vault
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
