"""Pydantic models for the hospital front-desk API."""

from .user import User, UserCreate, UserLogin, UserRole, UserUpdate, Token, TokenData
from .patient import Patient, PatientCreate, PatientUpdate
from .appointment import Appointment, AppointmentCreate, AppointmentStatus, AppointmentStatusUpdate
from .checkin import (
    CheckIn,
    CheckInCreate,
    CheckInCreated,
    CheckInStatus,
    CheckInUpdate,
    QueueSnapshot,
    QueueStats,
    Vitals
)
from .qr import AppointmentQR, ScanRequest
from .prescription import Prescription, PrescriptionCreate, PrescriptionStatus, PrescriptionStatusUpdate
from .lab import LabOrder, LabOrderCreate, LabOrderStatus, LabOrderStatusUpdate, LabPriority, LabResultEntry
from .inventory import Medication, MedicationCreate, StockAdjustment
from .supply_order import SupplyOrder, SupplyOrderCreate, SupplyOrderStatus, SupplyOrderStatusUpdate

__all__ = [
    # User
    "User", "UserCreate", "UserLogin", "UserRole", "UserUpdate", "Token", "TokenData",
    # Patient
    "Patient", "PatientCreate", "PatientUpdate",
    # Appointment
    "Appointment", "AppointmentCreate", "AppointmentStatus", "AppointmentStatusUpdate",
    # Check-in
    "CheckIn", "CheckInCreate", "CheckInCreated", "CheckInStatus", "CheckInUpdate",
    "QueueSnapshot", "QueueStats", "Vitals",
    # QR
    "AppointmentQR", "ScanRequest",
    # Prescription
    "Prescription", "PrescriptionCreate", "PrescriptionStatus", "PrescriptionStatusUpdate",
    # Lab
    "LabOrder", "LabOrderCreate", "LabOrderStatus", "LabOrderStatusUpdate", "LabPriority", "LabResultEntry",
    # Inventory
    "Medication", "MedicationCreate", "StockAdjustment",
    # Supply orders
    "SupplyOrder", "SupplyOrderCreate", "SupplyOrderStatus", "SupplyOrderStatusUpdate"
]
