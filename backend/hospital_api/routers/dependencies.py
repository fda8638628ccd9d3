"""
Authentication and authorization dependencies.
"""

from typing import Optional
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from ..services.auth_service import AuthService
from ..models.user import User, UserRole
from ..rbac import has_permission

security = HTTPBearer(auto_error=False)


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security)
) -> User:
    """Get current authenticated user from JWT token."""
    user = None
    if credentials:
        user = await AuthService.get_current_user(credentials.credentials)

    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
            headers={"WWW-Authenticate": "Bearer"}
        )

    if not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="User account is disabled"
        )

    return user


def require_role(*roles: UserRole):
    """Dependency factory for role-based access control."""
    async def role_checker(current_user: User = Depends(get_current_user)) -> User:
        if current_user.role not in roles:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Access denied. Required roles: {[r.value for r in roles]}"
            )
        return current_user
    return role_checker


def require_permission(permission: str):
    """Dependency factory checking the role permission table."""
    async def permission_checker(current_user: User = Depends(get_current_user)) -> User:
        if not has_permission(current_user.role, permission):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Access denied. Missing permission: {permission}"
            )
        return current_user
    return permission_checker


# Pre-defined role dependencies
require_admin = require_role(UserRole.ADMIN)
require_doctor = require_role(UserRole.DOCTOR, UserRole.ADMIN)
require_front_desk = require_role(UserRole.RECEPTIONIST, UserRole.ADMIN)
require_lab = require_role(UserRole.LAB_TECH, UserRole.ADMIN)
require_pharmacy = require_role(UserRole.PHARMACIST, UserRole.ADMIN)
require_supplier = require_role(UserRole.SUPPLIER, UserRole.ADMIN)
require_caregiver = require_role(UserRole.CAREGIVER)
require_caregiver_view = require_role(UserRole.CAREGIVER, UserRole.ADMIN)
