"""
Caregiver routes: own patients (children) and own appointments.
"""

from typing import List
from fastapi import APIRouter, HTTPException, status, Depends

from ..exceptions import NotFoundError
from ..models.appointment import Appointment, AppointmentCreate
from ..models.patient import Patient, PatientCreate
from ..models.user import User, UserRole
from ..services.appointment_service import AppointmentService
from ..services.patient_service import PatientService
from .dependencies import require_caregiver, require_caregiver_view, require_permission

patients_router = APIRouter(prefix="/patients", tags=["Caregiver"])
appointments_router = APIRouter(prefix="/caregiver-appointments", tags=["Caregiver"])


@patients_router.get("", response_model=List[Patient], response_model_by_alias=False)
async def list_my_patients(current_user: User = Depends(require_caregiver_view)):
    """Patients registered under the calling caregiver; every patient for an admin."""
    if current_user.role == UserRole.ADMIN:
        return await PatientService.list_patients()
    return await PatientService.search_patients(caregiver_id=current_user.id)


@patients_router.post("", response_model=Patient, response_model_by_alias=False, status_code=status.HTTP_201_CREATED)
async def register_my_patient(
    patient_data: PatientCreate,
    current_user: User = Depends(require_caregiver)
):
    """Register a child under the calling caregiver."""
    return await PatientService.create_patient(
        patient_data.model_copy(update={"caregiver_id": current_user.id})
    )


@appointments_router.get("", response_model=List[Appointment], response_model_by_alias=False)
async def list_my_appointments(current_user: User = Depends(require_caregiver_view)):
    if current_user.role == UserRole.ADMIN:
        return await AppointmentService.list_appointments()
    return await AppointmentService.list_appointments(caregiver_id=current_user.id)


@appointments_router.post("", response_model=Appointment, response_model_by_alias=False, status_code=status.HTTP_201_CREATED)
async def book_my_appointment(
    data: AppointmentCreate,
    current_user: User = Depends(require_permission("book_appointments"))
):
    """Book an appointment for one of the caregiver's own patients."""
    patient = await PatientService.get_patient(data.patient_id)
    if not patient or patient.caregiver_id != current_user.id:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Patient not found"
        )

    try:
        return await AppointmentService.create_appointment(
            data.model_copy(update={"caregiver_id": current_user.id}),
            created_by=current_user.id
        )
    except NotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(e)
        )
