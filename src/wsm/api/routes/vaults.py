"""Vault discovery and Obsidian status endpoints."""

from fastapi import APIRouter
from pydantic import BaseModel

from wsm.core.process import get_obsidian_status
from wsm.core.vault import discover_vaults

router = APIRouter()


class VaultResponse(BaseModel):
    """Response model for a known vault."""

    id: str
    name: str
    path: str
    ts: int
    open: bool


class ObsidianStatusResponse(BaseModel):
    """Response model for the Obsidian liveness check."""

    is_running: bool


@router.get("/vaults", response_model=list[VaultResponse])
def list_vaults() -> list[VaultResponse]:
    """List vaults known to Obsidian, most recently opened first."""
    return [
        VaultResponse(
            id=vault.id,
            name=vault.name,
            path=vault.path,
            ts=vault.ts,
            open=vault.open,
        )
        for vault in discover_vaults()
    ]


@router.get("/obsidian-status", response_model=ObsidianStatusResponse)
def obsidian_status() -> ObsidianStatusResponse:
    """Report whether Obsidian is running (writes are refused while it is)."""
    return ObsidianStatusResponse(is_running=get_obsidian_status().is_running)
