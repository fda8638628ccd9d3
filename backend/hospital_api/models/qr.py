"""
QR code and scan models.
"""

from pydantic import BaseModel, Field
from typing import Optional

from .appointment import AppointmentStatus


class AppointmentQR(BaseModel):
    """QR image plus the short code for an appointment."""
    qr_code: str = Field(..., description="data:image/png;base64 URL")
    appointment_id: str
    check_in_code: Optional[str] = None
    status: AppointmentStatus


class ScanRequest(BaseModel):
    """Raw QR payload or a typed check-in code."""
    value: str = Field(..., min_length=1, max_length=2000)
