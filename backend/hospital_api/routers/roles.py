"""
Role and permission lookup routes.
"""

from fastapi import APIRouter, HTTPException, status, Depends, Query

from ..models.user import User, UserRole
from ..rbac import (
    can_access_route,
    get_dashboard_for_role,
    get_display_name,
    get_permissions,
)
from .dependencies import get_current_user

router = APIRouter(prefix="/roles", tags=["Roles"])


def _describe(role: str) -> dict:
    return {
        "role": role,
        "display_name": get_display_name(role),
        "dashboard": get_dashboard_for_role(role),
        "permissions": sorted(get_permissions(role)),
    }


@router.get("")
async def list_roles():
    """All roles with their display names, dashboards and permissions."""
    return {"roles": [_describe(role.value) for role in UserRole]}


@router.get("/me/access")
async def check_my_access(
    path: str = Query(..., min_length=1, description="Path to check, e.g. /lab/orders"),
    current_user: User = Depends(get_current_user)
):
    """Whether the caller's role may reach a path."""
    return {
        "path": path,
        "role": current_user.role.value,
        "allowed": can_access_route(current_user.role, path),
        "dashboard": get_dashboard_for_role(current_user.role),
    }


@router.get("/{role}")
async def get_role(role: str):
    """Permissions, dashboard and display name for a role."""
    if role not in {r.value for r in UserRole}:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Unknown role '{role}'"
        )
    return _describe(role)
