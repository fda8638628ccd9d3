"""Routers package for the hospital front-desk API."""

from .auth import router as auth_router
from .roles import router as roles_router
from .queue import router as queue_router
from .reception import router as reception_router
from .qr import router as qr_router
from .caregiver import patients_router as caregiver_patients_router
from .caregiver import appointments_router as caregiver_appointments_router
from .doctor import router as doctor_router
from .pharmacy import router as pharmacy_router
from .lab import router as lab_router
from .supplier import router as supplier_router
from .admin import router as admin_router

__all__ = [
    "auth_router",
    "roles_router",
    "queue_router",
    "reception_router",
    "qr_router",
    "caregiver_patients_router",
    "caregiver_appointments_router",
    "doctor_router",
    "pharmacy_router",
    "lab_router",
    "supplier_router",
    "admin_router"
]
