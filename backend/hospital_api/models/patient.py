"""
Patient models.
"""

from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import date, datetime


class PatientBase(BaseModel):
    """Base patient model."""
    full_name: str = Field(..., min_length=1, max_length=120)
    date_of_birth: Optional[date] = None
    gender: Optional[str] = Field(None, pattern="^(male|female|other)$")
    caregiver_id: Optional[str] = None
    phone: Optional[str] = Field(None, max_length=20)
    medical_notes: Optional[str] = None
    allergies: List[str] = []


class PatientCreate(PatientBase):
    """Patient creation model."""
    pass


class PatientUpdate(BaseModel):
    """Patient update model (all fields optional)."""
    full_name: Optional[str] = None
    date_of_birth: Optional[date] = None
    gender: Optional[str] = Field(None, pattern="^(male|female|other)$")
    phone: Optional[str] = None
    medical_notes: Optional[str] = None
    allergies: Optional[List[str]] = None


class Patient(PatientBase):
    """Patient response model."""
    id: str = Field(..., alias="_id")
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        populate_by_name = True
