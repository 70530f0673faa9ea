"""FastAPI application for the wsm REST API."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from wsm.api.middleware import api_key_middleware
from wsm.api.routes import health, vaults, workspaces
from wsm.core.config import WSM_CORS_ORIGINS, WSM_HOST, WSM_PORT
from wsm.core.errors import (
    NotFoundError,
    ObsidianRunningError,
    RollbackFailure,
    ValidationError,
    WorkspaceError,
)

logger = logging.getLogger(__name__)

ERROR_STATUS = {
    NotFoundError: 404,
    ObsidianRunningError: 409,
    ValidationError: 422,
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    logger.info("wsm API starting up...")
    yield
    logger.info("wsm API shutting down...")


async def workspace_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Map workspace errors to HTTP responses.

    A RollbackFailure is flagged as fatal: the document may be damaged
    and must be restored by hand from the named backup.
    """
    if isinstance(exc, RollbackFailure):
        logger.error(f"Rollback failed for {request.url.path}: {exc}")
        return JSONResponse(
            status_code=500,
            content={
                "detail": str(exc),
                "fatal": True,
                "backup_path": str(exc.backup_path),
            },
        )

    status_code = next(
        (code for cls, code in ERROR_STATUS.items() if isinstance(exc, cls)), 500
    )
    return JSONResponse(
        status_code=status_code,
        content={"detail": str(exc), "fatal": False},
    )


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title="wsm API",
        description="REST API for moving tabs between Obsidian workspaces",
        version="1.0.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=WSM_CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.middleware("http")(api_key_middleware)
    app.add_exception_handler(WorkspaceError, workspace_error_handler)

    app.include_router(health.router, prefix="/api/v1", tags=["Health"])
    app.include_router(vaults.router, prefix="/api/v1", tags=["Vaults"])
    app.include_router(workspaces.router, prefix="/api/v1", tags=["Workspaces"])

    return app


# Create the default app instance
app = create_app()


def run_server():
    """Run the API server."""
    import uvicorn

    uvicorn.run(
        "wsm.api.app:app",
        host=WSM_HOST,
        port=WSM_PORT,
        reload=False,
    )


if __name__ == "__main__":
    run_server()
