"""Shared types and data structures for wsm.

The persisted models mirror Obsidian's ``workspaces.json``. They accept
and keep unknown keys, remember the key order they were loaded with and
dump only the fields that were present, so a node the engine never
touches serializes back to the same JSON it was read from.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import StrEnum
from pathlib import Path
from typing import Any, Literal

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    PrivateAttr,
    SerializerFunctionWrapHandler,
    ValidatorFunctionWrapHandler,
    model_serializer,
    model_validator,
)

__all__ = [
    "BackupSettings",
    "LayoutNode",
    "LeafState",
    "NodeMatch",
    "NodeType",
    "Operation",
    "Tab",
    "TransferResult",
    "WorkspaceLayout",
    "WorkspaceSummary",
    "WorkspacesDocument",
    "utc_timestamp",
]


def utc_timestamp(moment: datetime | None = None) -> str:
    """Return an ISO-8601 UTC timestamp with millisecond precision.

    Uses the same shape JavaScript's ``toISOString`` produces
    (``2024-01-31T12:00:00.000Z``), which is what Obsidian writes.
    """
    moment = moment or datetime.now(timezone.utc)
    return (
        moment.astimezone(timezone.utc)
        .isoformat(timespec="milliseconds")
        .replace("+00:00", "Z")
    )


class NodeType(StrEnum):
    """Discriminant of a layout node."""

    SPLIT = "split"
    TABS = "tabs"
    LEAF = "leaf"


class _DocumentModel(BaseModel):
    """Base for persisted models: keeps extra keys and their input order."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    _key_order: list[str] = PrivateAttr(default_factory=list)

    @model_validator(mode="wrap")
    @classmethod
    def _remember_key_order(
        cls, data: Any, handler: ValidatorFunctionWrapHandler
    ) -> Any:
        instance = handler(data)
        if isinstance(data, dict) and isinstance(instance, _DocumentModel):
            instance._key_order = list(data)
        return instance

    @model_serializer(mode="wrap")
    def _restore_key_order(
        self, handler: SerializerFunctionWrapHandler
    ) -> dict[str, Any]:
        dumped = handler(self)
        if not self._key_order or not isinstance(dumped, dict):
            return dumped
        ordered = {key: dumped[key] for key in self._key_order if key in dumped}
        for key, value in dumped.items():
            if key not in ordered:
                ordered[key] = value
        return ordered


class LeafState(_DocumentModel):
    """Viewer state of a leaf: the viewer kind plus the file it shows."""

    type: str = "markdown"
    state: dict[str, Any] = Field(default_factory=dict)
    title: str | None = None
    icon: str | None = None

    @property
    def file(self) -> str | None:
        """Content path shown by this leaf, if any."""
        value = self.state.get("file")
        return value if isinstance(value, str) and value else None


class LayoutNode(_DocumentModel):
    """A split, tab group or leaf in a workspace layout tree."""

    id: str
    type: NodeType
    children: list[LayoutNode] | None = None
    state: LeafState | None = None
    direction: Literal["horizontal", "vertical"] | None = None

    @property
    def is_tab(self) -> bool:
        """True for leaves that reference a content file."""
        return (
            self.type == NodeType.LEAF
            and self.state is not None
            and self.state.file is not None
        )


class WorkspaceLayout(_DocumentModel):
    """One named workspace.

    Only ``main`` is searched and edited. ``left`` and ``right`` sidebars
    are carried as raw JSON so they pass through untouched.
    """

    main: LayoutNode
    left: dict[str, Any] | None = None
    right: dict[str, Any] | None = None
    active: str = ""
    mtime: str = ""

    def touch(self) -> None:
        """Stamp the layout as modified now."""
        self.mtime = utc_timestamp()


class WorkspacesDocument(_DocumentModel):
    """Top-level contents of ``.obsidian/workspaces.json``."""

    workspaces: dict[str, WorkspaceLayout] = Field(default_factory=dict)
    active: str = ""


@dataclass(frozen=True)
class NodeMatch:
    """A node found in a tree, with the parent whose children hold it."""

    node: LayoutNode
    parent: LayoutNode | None


class Tab(BaseModel, frozen=True):
    """A leaf that references a file, as shown to users."""

    id: str
    file_path: str
    title: str


class Operation(StrEnum):
    """Kinds of tab transfer."""

    MOVE = "move"
    COPY = "copy"
    DELETE = "delete"


@dataclass(frozen=True)
class TransferResult:
    """Outcome of a move, copy or delete.

    ``count`` is the number of tabs actually transferred. Ids that were
    not found are listed in ``missing``; that is a warning, not a failure.
    """

    operation: Operation
    source: str
    target: str | None = None
    requested: list[str] = field(default_factory=list)
    transferred: list[str] = field(default_factory=list)
    missing: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def count(self) -> int:
        return len(self.transferred)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "operation": self.operation.value,
            "source": self.source,
            "target": self.target,
            "requested": list(self.requested),
            "transferred": list(self.transferred),
            "missing": list(self.missing),
            "warnings": list(self.warnings),
            "count": self.count,
        }


class WorkspaceSummary(BaseModel, frozen=True):
    """Listing entry for a workspace."""

    name: str
    mtime: str = ""
    tab_count: int = 0
    is_active: bool = False


class BackupSettings(BaseModel, frozen=True):
    """Where backups go and how many to keep."""

    backup_dir: Path
    max_backups: int = Field(default=10, ge=1)
