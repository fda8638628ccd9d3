"""
Front-desk check-in and queue API routes.
"""

from fastapi import APIRouter, HTTPException, status, Depends

from ..exceptions import NotFoundError
from ..models.checkin import (
    CheckIn,
    CheckInCreate,
    CheckInCreated,
    CheckInUpdate,
    QueueSnapshot,
)
from ..models.user import User
from ..services.checkin_service import CheckInService
from .dependencies import require_front_desk

router = APIRouter(prefix="/receptionist/queue", tags=["Check-in & Queue"])


async def apply_status_update(check_in_id: str, request: CheckInUpdate) -> CheckIn:
    try:
        check_in = await CheckInService.update_status(check_in_id, request.status, request.notes)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )

    if not check_in:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Check-in not found"
        )
    return check_in


@router.get("", response_model=QueueSnapshot, response_model_by_alias=False)
async def get_queue(current_user: User = Depends(require_front_desk)):
    """Today's check-ins in queue order with status counts."""
    return await CheckInService.get_queue()


@router.post("", response_model=CheckInCreated, response_model_by_alias=False, status_code=status.HTTP_201_CREATED)
async def check_in_patient(
    data: CheckInCreate,
    current_user: User = Depends(require_front_desk)
):
    """Check a patient in and issue today's next queue number."""
    try:
        check_in = await CheckInService.create_check_in(data, current_user.id)
    except NotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(e)
        )
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )

    return CheckInCreated(queue_number=check_in.queue_number, check_in=check_in)


@router.get("/{check_in_id}", response_model=CheckIn, response_model_by_alias=False)
async def get_check_in(
    check_in_id: str,
    current_user: User = Depends(require_front_desk)
):
    """Get check-in by ID."""
    check_in = await CheckInService.get_check_in(check_in_id)
    if not check_in:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Check-in not found"
        )
    return check_in


@router.patch("/{check_in_id}", response_model=CheckIn, response_model_by_alias=False)
async def update_check_in(
    check_in_id: str,
    request: CheckInUpdate,
    current_user: User = Depends(require_front_desk)
):
    """Move a check-in through waiting / in_consultation / completed / cancelled."""
    return await apply_status_update(check_in_id, request)
