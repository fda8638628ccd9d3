"""
Doctor routes: schedule, consultation queue, prescriptions and lab orders.
"""

from typing import Optional, List
from datetime import date
from fastapi import APIRouter, HTTPException, status, Depends, Query

from ..exceptions import NotFoundError
from ..models.appointment import Appointment
from ..models.checkin import CheckIn, CheckInUpdate, QueueSnapshot
from ..models.lab import LabOrder, LabOrderCreate
from ..models.prescription import Prescription, PrescriptionCreate
from ..models.user import User
from ..services.appointment_service import AppointmentService
from ..services.checkin_service import CheckInService
from ..services.lab_service import LabService
from ..services.prescription_service import PrescriptionService
from .dependencies import require_doctor, require_permission
from .queue import apply_status_update

router = APIRouter(prefix="/doctor", tags=["Doctor"])


@router.get("/appointments", response_model=List[Appointment], response_model_by_alias=False)
async def my_schedule(
    on_date: Optional[date] = Query(None, alias="date"),
    current_user: User = Depends(require_doctor)
):
    """The calling doctor's appointments."""
    return await AppointmentService.list_appointments(doctor_id=current_user.id, on_date=on_date)


@router.get("/queue", response_model=QueueSnapshot, response_model_by_alias=False)
async def consultation_queue(current_user: User = Depends(require_doctor)):
    """Today's queue."""
    return await CheckInService.get_queue()


@router.patch("/queue/{check_in_id}", response_model=CheckIn, response_model_by_alias=False)
async def update_consultation(
    check_in_id: str,
    request: CheckInUpdate,
    current_user: User = Depends(require_doctor)
):
    """Start or finish a consultation."""
    return await apply_status_update(check_in_id, request)


@router.post("/prescriptions", response_model=Prescription, response_model_by_alias=False, status_code=status.HTTP_201_CREATED)
async def create_prescription(
    data: PrescriptionCreate,
    current_user: User = Depends(require_permission("create_prescriptions"))
):
    try:
        return await PrescriptionService.create_prescription(data, current_user.id)
    except NotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(e)
        )


@router.get("/prescriptions", response_model=List[Prescription], response_model_by_alias=False)
async def my_prescriptions(current_user: User = Depends(require_doctor)):
    return await PrescriptionService.list_prescriptions(doctor_id=current_user.id)


@router.post("/lab-orders", response_model=List[LabOrder], response_model_by_alias=False, status_code=status.HTTP_201_CREATED)
async def order_lab_tests(
    data: LabOrderCreate,
    current_user: User = Depends(require_permission("order_lab_tests"))
):
    """Order one or more lab tests; one order is created per test."""
    try:
        return await LabService.create_orders(data, current_user.id)
    except NotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(e)
        )
