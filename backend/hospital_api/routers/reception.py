"""
Receptionist routes: patient registration and search, booking, QR scan lookup.
"""

from typing import Optional, List
from datetime import date
from fastapi import APIRouter, HTTPException, status, Depends, Query

from ..exceptions import NotFoundError
from ..models.appointment import Appointment, AppointmentCreate, AppointmentStatus
from ..models.patient import Patient, PatientCreate
from ..models.qr import ScanRequest
from ..models.user import User
from ..services.appointment_service import AppointmentService
from ..services.patient_service import PatientService
from ..services.qr_service import QRService
from .dependencies import require_front_desk

router = APIRouter(prefix="/receptionist", tags=["Reception"])


@router.post("/patients", response_model=Patient, response_model_by_alias=False, status_code=status.HTTP_201_CREATED)
async def register_patient(
    patient_data: PatientCreate,
    current_user: User = Depends(require_front_desk)
):
    """Register a walk-in patient."""
    return await PatientService.create_patient(patient_data)


@router.get("/patients", response_model=List[Patient], response_model_by_alias=False)
async def search_patients(
    q: Optional[str] = Query(None, description="Name or phone, at least 2 characters"),
    current_user: User = Depends(require_front_desk)
):
    """Search patients by name or phone."""
    return await PatientService.search_patients(query=q)


@router.post("/appointments", response_model=Appointment, response_model_by_alias=False, status_code=status.HTTP_201_CREATED)
async def book_appointment(
    data: AppointmentCreate,
    current_user: User = Depends(require_front_desk)
):
    """Book an appointment on a patient's behalf."""
    try:
        return await AppointmentService.create_appointment(data, created_by=current_user.id)
    except NotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(e)
        )


@router.get("/appointments", response_model=List[Appointment], response_model_by_alias=False)
async def list_appointments(
    status_filter: Optional[AppointmentStatus] = Query(None, alias="status"),
    on_date: Optional[date] = Query(None, alias="date"),
    current_user: User = Depends(require_front_desk)
):
    """Appointments, optionally filtered by status and day."""
    return await AppointmentService.list_appointments(status=status_filter, on_date=on_date)


@router.post("/scan", response_model=Appointment, response_model_by_alias=False)
async def scan_check_in(
    request: ScanRequest,
    current_user: User = Depends(require_front_desk)
):
    """Resolve a scanned QR payload or a typed check-in code to its appointment."""
    try:
        appointment = await QRService.resolve_scan(request.value)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )

    if not appointment:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Appointment not found"
        )
    return appointment
