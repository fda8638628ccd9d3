"""
QR code routes. Public so the code can be shown to the patient without a session.
"""

from fastapi import APIRouter, HTTPException, status
from fastapi.responses import Response

from ..models.qr import AppointmentQR
from ..services.qr_service import QRService

router = APIRouter(prefix="/qr", tags=["QR Codes"])


@router.get("/{appointment_id}", response_model=AppointmentQR)
async def get_appointment_qr(appointment_id: str):
    """QR image (data URL), short check-in code and status for an appointment."""
    qr = await QRService.get_appointment_qr(appointment_id)
    if not qr:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Appointment not found"
        )
    return qr


@router.get("/{appointment_id}/svg")
async def get_appointment_qr_svg(appointment_id: str):
    """Same payload rendered as SVG."""
    svg = await QRService.get_appointment_qr_svg(appointment_id)
    if svg is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Appointment not found"
        )
    return Response(content=svg, media_type="image/svg+xml")
