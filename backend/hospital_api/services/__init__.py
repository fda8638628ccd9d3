"""Services package for the hospital front-desk API."""

from .auth_service import AuthService
from .patient_service import PatientService
from .appointment_service import AppointmentService
from .checkin_service import CheckInService
from .qr_service import QRService
from .prescription_service import PrescriptionService
from .lab_service import LabService
from .inventory_service import InventoryService
from .stats_service import StatsService

__all__ = [
    "AuthService",
    "PatientService",
    "AppointmentService",
    "CheckInService",
    "QRService",
    "PrescriptionService",
    "LabService",
    "InventoryService",
    "StatsService"
]
