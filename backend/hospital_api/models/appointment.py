"""
Appointment models.
"""

from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime
from enum import Enum


class AppointmentStatus(str, Enum):
    """Appointment lifecycle states."""
    PENDING = "pending"
    CONFIRMED = "confirmed"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class AppointmentCreate(BaseModel):
    """Book a new appointment."""
    patient_id: str
    doctor_id: Optional[str] = None
    caregiver_id: Optional[str] = None
    scheduled_for: datetime
    notes: Optional[str] = Field(None, max_length=1000)


class Appointment(BaseModel):
    """Appointment response model."""
    id: str = Field(..., alias="_id")
    patient_id: str
    doctor_id: Optional[str] = None
    caregiver_id: Optional[str] = None
    scheduled_for: datetime
    status: AppointmentStatus = AppointmentStatus.PENDING
    notes: Optional[str] = None
    check_in_code: Optional[str] = None  # assigned on first QR request
    created_by: Optional[str] = None
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        populate_by_name = True


class AppointmentStatusUpdate(BaseModel):
    """Change an appointment's status."""
    status: AppointmentStatus
