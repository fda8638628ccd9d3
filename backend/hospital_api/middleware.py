"""
HTTP middleware: request logging and role-based route protection.
"""

from fastapi import Request, status
from fastapi.responses import JSONResponse

from .rbac import (
    can_access_route,
    find_route_guard,
    get_dashboard_for_role,
    is_public_path,
)
from .services.auth_service import AuthService
from .utils.logger import get_logger

logger = get_logger("http")


async def trace_middleware(request: Request, call_next):
    response = await call_next(request)
    logger.info(f"{request.method} {request.url.path} -> {response.status_code}")
    return response


def _bearer_token(request: Request):
    header = request.headers.get("Authorization", "")
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer" or not token:
        return None
    return token.strip()


async def route_guard_middleware(request: Request, call_next):
    """
    Enforce the protected-route table before the request reaches a handler.

    Public paths and paths outside the table pass through; handlers still
    authenticate through their own dependencies.
    """
    path = request.url.path
    if is_public_path(path) or find_route_guard(path) is None:
        return await call_next(request)

    token = _bearer_token(request)
    user = await AuthService.get_current_user(token) if token else None
    if not user:
        return JSONResponse(
            status_code=status.HTTP_401_UNAUTHORIZED,
            content={"detail": "Authentication required"},
            headers={"WWW-Authenticate": "Bearer"}
        )

    if not user.is_active:
        return JSONResponse(
            status_code=status.HTTP_403_FORBIDDEN,
            content={"detail": "User account is disabled"}
        )

    if not can_access_route(user.role, path):
        logger.warning(f"Denied {user.role.value} {user.id} access to {path}")
        return JSONResponse(
            status_code=status.HTTP_403_FORBIDDEN,
            content={
                "detail": "Your role cannot access this route",
                "dashboard": get_dashboard_for_role(user.role)
            }
        )

    return await call_next(request)
