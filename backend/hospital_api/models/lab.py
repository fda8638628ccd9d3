"""
Laboratory order models.
"""

from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import datetime
from enum import Enum


class LabPriority(str, Enum):
    ROUTINE = "routine"
    URGENT = "urgent"
    STAT = "stat"


class LabOrderStatus(str, Enum):
    PENDING = "pending"
    SAMPLE_COLLECTED = "sample_collected"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class LabOrderCreate(BaseModel):
    """Order one or more tests for a patient."""
    patient_id: str
    test_names: List[str] = Field(..., min_length=1)
    priority: LabPriority = LabPriority.ROUTINE
    clinical_notes: Optional[str] = None
    special_instructions: Optional[str] = None


class LabOrder(BaseModel):
    """Lab order response model (one test per order)."""
    id: str = Field(..., alias="_id")
    patient_id: str
    doctor_id: str
    test_name: str
    priority: LabPriority = LabPriority.ROUTINE
    clinical_notes: Optional[str] = None
    special_instructions: Optional[str] = None
    status: LabOrderStatus = LabOrderStatus.PENDING
    results: Optional[str] = None
    result_notes: Optional[str] = None
    abnormal_findings: Optional[str] = None
    processed_by: Optional[str] = None
    processing_started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    created_at: datetime

    class Config:
        populate_by_name = True


class LabOrderStatusUpdate(BaseModel):
    status: LabOrderStatus


class LabResultEntry(BaseModel):
    """Results recorded by a lab technician."""
    results: str = Field(..., min_length=1)
    result_notes: Optional[str] = None
    abnormal_findings: Optional[str] = None
