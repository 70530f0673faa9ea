"""API key authentication for the wsm REST API.

Every route except health and the OpenAPI docs needs the key in the
``X-API-Key`` header. Writes to workspaces.json happen through POST
routes, so a rejected POST is logged with the path it tried to reach.
"""

import logging
import secrets
from collections.abc import Awaitable, Callable

from fastapi import Request, Response
from fastapi.responses import JSONResponse

from wsm.core.config import WSM_ALLOW_NO_AUTH, WSM_API_KEY

logger = logging.getLogger(__name__)

API_KEY_HEADER = "X-API-Key"
PUBLIC_PATHS = {"/api/v1/health", "/openapi.json"}
PUBLIC_PREFIXES = ("/docs", "/redoc")

_warned_no_auth = False


def is_public_path(path: str) -> bool:
    """Return True for paths served without a key."""
    return path in PUBLIC_PATHS or path.startswith(PUBLIC_PREFIXES)


def _reject(request: Request, status_code: int, detail: str) -> JSONResponse:
    if request.method != "GET":
        logger.warning(f"Refused {request.method} {request.url.path}: {detail}")
    return JSONResponse(status_code=status_code, content={"detail": detail})


def _warn_no_auth() -> None:
    global _warned_no_auth
    if not _warned_no_auth:
        logger.warning(
            "WSM_API_KEY not set - anyone who can reach the API can edit "
            "workspaces (WSM_ALLOW_NO_AUTH is on)"
        )
        _warned_no_auth = True


async def api_key_middleware(
    request: Request, call_next: Callable[[Request], Awaitable[Response]]
) -> Response:
    """
    Check the API key before any non-public route runs.

    Without WSM_API_KEY the API fails closed (503) unless
    WSM_ALLOW_NO_AUTH is set. ``request.state.auth`` records how the
    request was let through: ``"public"``, ``"none"`` or ``"api_key"``.
    """
    if is_public_path(request.url.path):
        request.state.auth = "public"
        return await call_next(request)

    if not WSM_API_KEY:
        if not WSM_ALLOW_NO_AUTH:
            logger.error("WSM_API_KEY not set - refusing unauthenticated access")
            return _reject(request, 503, "API key not configured")
        _warn_no_auth()
        request.state.auth = "none"
        return await call_next(request)

    api_key = request.headers.get(API_KEY_HEADER)
    if not api_key:
        return _reject(request, 401, f"Missing {API_KEY_HEADER} header")
    if not secrets.compare_digest(api_key.encode(), WSM_API_KEY.encode()):
        return _reject(request, 401, "Invalid API key")

    request.state.auth = "api_key"
    return await call_next(request)
