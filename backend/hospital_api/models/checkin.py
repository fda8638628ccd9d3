"""
Check-in and daily queue models.
"""

from pydantic import BaseModel, Field
from typing import Optional, List, Dict, Any
from datetime import datetime
from enum import Enum


class CheckInStatus(str, Enum):
    """Check-in states. completed and cancelled are terminal."""
    WAITING = "waiting"
    IN_CONSULTATION = "in_consultation"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class Vitals(BaseModel):
    """Vital signs captured at the front desk."""
    temperature_c: Optional[float] = Field(None, ge=25, le=45)
    weight_kg: Optional[float] = Field(None, gt=0, le=500)
    height_cm: Optional[float] = Field(None, gt=0, le=300)
    pulse_bpm: Optional[int] = Field(None, ge=0, le=300)
    respiratory_rate: Optional[int] = Field(None, ge=0, le=100)
    blood_pressure: Optional[str] = Field(None, pattern=r"^\d{2,3}/\d{2,3}$")
    oxygen_saturation: Optional[float] = Field(None, ge=0, le=100)
    notes: Optional[str] = None

    class Config:
        extra = "allow"


class CheckInCreate(BaseModel):
    """Register a patient's arrival. One of appointment_id / patient_id is required."""
    appointment_id: Optional[str] = None
    patient_id: Optional[str] = None
    reason: Optional[str] = Field(None, max_length=500)
    vitals: Optional[Vitals] = None


class CheckIn(BaseModel):
    """Check-in response model."""
    id: str = Field(..., alias="_id")
    appointment_id: Optional[str] = None
    patient_id: Optional[str] = None
    checked_in_by: Optional[str] = None
    queue_number: int = Field(..., ge=1)
    queue_date: str = Field(..., description="Clinic-local date, YYYY-MM-DD")
    status: CheckInStatus = CheckInStatus.WAITING
    reason: str
    vitals: Optional[Dict[str, Any]] = None
    notes: Optional[str] = None
    checked_in_at: datetime
    completed_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        populate_by_name = True


class CheckInUpdate(BaseModel):
    """Status change request; the value is validated by the check-in service."""
    status: Optional[str] = None
    notes: Optional[str] = None


class CheckInCreated(BaseModel):
    """Result of a successful check-in."""
    success: bool = True
    queue_number: int
    check_in: CheckIn


class QueueStats(BaseModel):
    total: int = 0
    waiting: int = 0
    in_consultation: int = 0
    completed: int = 0
    cancelled: int = 0


class QueueSnapshot(BaseModel):
    """Today's check-ins ordered by queue number."""
    queue_date: str
    check_ins: List[CheckIn] = []
    stats: QueueStats
