"""
Administrator routes: overview stats, appointment analytics and user accounts.
"""

from typing import Optional, List
from fastapi import APIRouter, HTTPException, status, Depends, Query
from pydantic import BaseModel

from ..models.appointment import Appointment, AppointmentStatus, AppointmentStatusUpdate
from ..models.user import User, UserCreate, UserRole, UserUpdate
from ..rbac import STAFF_ROLES
from ..services.appointment_service import AppointmentService
from ..services.auth_service import AuthService
from ..services.stats_service import StatsService
from .dependencies import require_admin

router = APIRouter(prefix="/admin", tags=["Admin"])


class RoleChange(BaseModel):
    role: UserRole


@router.get("/stats")
async def get_stats(current_user: User = Depends(require_admin)):
    """Users by role, patients, appointments by status, today's check-ins."""
    return await StatsService.get_overview()


@router.get("/analytics/appointments")
async def appointment_trend(current_user: User = Depends(require_admin)):
    """Scheduled and completed appointments per day over the last week."""
    return await StatsService.get_appointment_trend()


@router.get("/appointments", response_model=List[Appointment], response_model_by_alias=False)
async def list_appointments(
    status_filter: Optional[AppointmentStatus] = Query(None, alias="status"),
    current_user: User = Depends(require_admin)
):
    return await AppointmentService.list_appointments(status=status_filter)


@router.patch("/appointments/{appointment_id}", response_model=Appointment, response_model_by_alias=False)
async def update_appointment_status(
    appointment_id: str,
    request: AppointmentStatusUpdate,
    current_user: User = Depends(require_admin)
):
    appointment = await AppointmentService.set_status(appointment_id, request.status)
    if not appointment:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Appointment not found"
        )
    return appointment


@router.post("/users", response_model=User, response_model_by_alias=False, status_code=status.HTTP_201_CREATED)
async def create_staff_user(
    user_data: UserCreate,
    current_user: User = Depends(require_admin)
):
    """Create an account with any role."""
    try:
        return await AuthService.create_user(user_data)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )


@router.patch("/users/{user_id}/role", response_model=User, response_model_by_alias=False)
async def change_role(
    user_id: str,
    request: RoleChange,
    current_user: User = Depends(require_admin)
):
    user = await AuthService.set_role(user_id, request.role.value)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="User not found"
        )
    return user


@router.get("/users", response_model=List[User], response_model_by_alias=False)
async def list_users(
    role: Optional[UserRole] = Query(None),
    current_user: User = Depends(require_admin)
):
    return await AuthService.list_users(roles=[role.value] if role else None)


@router.get("/staff", response_model=List[User], response_model_by_alias=False)
async def list_staff(current_user: User = Depends(require_admin)):
    """Doctors, receptionists, lab technicians, pharmacists and suppliers."""
    return await AuthService.list_users(roles=STAFF_ROLES)


@router.get("/doctors", response_model=List[User], response_model_by_alias=False)
async def list_doctors(current_user: User = Depends(require_admin)):
    return await AuthService.list_users(roles=[UserRole.DOCTOR.value])


@router.patch("/users/{user_id}", response_model=User, response_model_by_alias=False)
async def update_user(
    user_id: str,
    request: UserUpdate,
    current_user: User = Depends(require_admin)
):
    """Edit an account's details, role or active flag."""
    if user_id == current_user.id and request.is_active is False:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Cannot deactivate your own account"
        )

    try:
        user = await AuthService.update_user(user_id, request)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )

    if not user:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="User not found"
        )
    return user


@router.delete("/users/{user_id}")
async def delete_user(user_id: str, current_user: User = Depends(require_admin)):
    if user_id == current_user.id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Cannot delete your own account"
        )

    if not await AuthService.delete_user(user_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="User not found"
        )
    return {"message": "User deleted successfully"}
