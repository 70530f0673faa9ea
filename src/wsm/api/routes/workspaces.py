"""Workspace listing and tab transfer endpoints."""

from fastapi import APIRouter
from pydantic import BaseModel, Field

from wsm.api.deps import ManagerDep
from wsm.core.types import TransferResult

router = APIRouter()


class WorkspaceResponse(BaseModel):
    """Response model for a workspace summary."""

    name: str
    mtime: str
    tab_count: int
    is_active: bool


class TabResponse(BaseModel):
    """Response model for a tab."""

    id: str
    file_path: str
    title: str


class TransferRequest(BaseModel):
    """Request to move or copy tabs between workspaces."""

    source_workspace: str = Field(..., description="Workspace to take tabs from")
    target_workspace: str = Field(..., description="Workspace to add tabs to")
    tab_ids: list[str] = Field(..., min_length=1, description="Tab ids")
    strict: bool | None = Field(
        default=None, description="Fail on unknown tab ids instead of skipping"
    )
    force: bool = Field(default=False, description="Write even if Obsidian runs")


class DeleteRequest(BaseModel):
    """Request to delete tabs from a workspace."""

    workspace: str = Field(..., description="Workspace to delete tabs from")
    tab_ids: list[str] = Field(..., min_length=1, description="Tab ids")
    strict: bool | None = None
    force: bool = False


class TransferResponse(BaseModel):
    """Outcome of a transfer. Unknown ids are reported, not fatal."""

    success: bool = True
    operation: str
    source: str
    target: str | None = None
    count: int
    transferred: list[str]
    missing: list[str]
    warnings: list[str]


def _to_response(result: TransferResult) -> TransferResponse:
    return TransferResponse(
        operation=result.operation.value,
        source=result.source,
        target=result.target,
        count=result.count,
        transferred=result.transferred,
        missing=result.missing,
        warnings=result.warnings,
    )


@router.get("/workspaces", response_model=list[WorkspaceResponse])
def list_workspaces(manager: ManagerDep) -> list[WorkspaceResponse]:
    """
    List workspaces in the vault.

    Workspaces are ordered by mtime descending.
    """
    return [
        WorkspaceResponse(**summary.model_dump())
        for summary in manager.list_workspaces()
    ]


@router.get("/workspaces/{name}/tabs", response_model=list[TabResponse])
def list_tabs(name: str, manager: ManagerDep) -> list[TabResponse]:
    """List the tabs of one workspace in display order."""
    return [TabResponse(**tab.model_dump()) for tab in manager.list_tabs(name)]


@router.post("/workspaces/move", response_model=TransferResponse)
def move_tabs(request: TransferRequest, manager: ManagerDep) -> TransferResponse:
    """Move tabs from one workspace to another."""
    result = manager.move_tabs(
        request.source_workspace,
        request.target_workspace,
        request.tab_ids,
        strict=request.strict,
        force=request.force,
    )
    return _to_response(result)


@router.post("/workspaces/copy", response_model=TransferResponse)
def copy_tabs(request: TransferRequest, manager: ManagerDep) -> TransferResponse:
    """Copy tabs from one workspace to another."""
    result = manager.copy_tabs(
        request.source_workspace,
        request.target_workspace,
        request.tab_ids,
        strict=request.strict,
        force=request.force,
    )
    return _to_response(result)


@router.post("/workspaces/delete", response_model=TransferResponse)
def delete_tabs(request: DeleteRequest, manager: ManagerDep) -> TransferResponse:
    """Delete tabs from a workspace."""
    result = manager.delete_tabs(
        request.workspace,
        request.tab_ids,
        strict=request.strict,
        force=request.force,
    )
    return _to_response(result)
