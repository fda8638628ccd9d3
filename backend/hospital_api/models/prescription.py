"""
Prescription models.
"""

from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime
from enum import Enum


class PrescriptionStatus(str, Enum):
    PENDING = "pending"
    DISPENSED = "dispensed"
    CANCELLED = "cancelled"


class PrescriptionCreate(BaseModel):
    """Doctor's prescription for a patient."""
    patient_id: str
    medication_name: str = Field(..., min_length=1, max_length=200)
    medication_id: Optional[str] = None
    dosage: str = Field(..., min_length=1, max_length=100)
    frequency: str = "Once daily"
    duration: str = "7 days"
    instructions: Optional[str] = None
    quantity: Optional[int] = Field(None, gt=0)
    refills: int = Field(default=0, ge=0, le=12)


class Prescription(PrescriptionCreate):
    """Prescription response model."""
    id: str = Field(..., alias="_id")
    doctor_id: str
    status: PrescriptionStatus = PrescriptionStatus.PENDING
    pharmacist_id: Optional[str] = None
    dispensed_at: Optional[datetime] = None
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        populate_by_name = True


class PrescriptionStatusUpdate(BaseModel):
    status: PrescriptionStatus
