"""FastAPI dependencies for the wsm API."""

from typing import Annotated

from fastapi import Depends, HTTPException, Query, status

from wsm.core.errors import WorkspaceError
from wsm.core.manager import WorkspaceManager, get_manager


async def get_workspace_manager(
    vault_path: Annotated[
        str | None, Query(description="Vault root (defaults to WSM_VAULT)")
    ] = None,
) -> WorkspaceManager:
    """
    Get a WorkspaceManager for the requested vault.

    Args:
        vault_path: Optional vault root from the query string

    Returns:
        WorkspaceManager instance

    Raises:
        HTTPException: If no vault is given and none is configured
    """
    try:
        return get_manager(vault_path)
    except WorkspaceError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        ) from e


ManagerDep = Annotated[WorkspaceManager, Depends(get_workspace_manager)]
