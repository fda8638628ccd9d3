"""
Appointment booking and status service.
"""

from datetime import datetime, timedelta, timezone, date
from typing import Optional, List

from ..database import Database, parse_object_id, serialize_document
from ..exceptions import NotFoundError
from ..models.appointment import Appointment, AppointmentCreate, AppointmentStatus
from ..utils.logger import get_logger
from .patient_service import PatientService

logger = get_logger("appointments")


class AppointmentService:
    """Appointment management service."""

    @classmethod
    async def create_appointment(
        cls,
        data: AppointmentCreate,
        created_by: Optional[str] = None
    ) -> Appointment:
        """Book an appointment; it starts out pending."""
        patient = await PatientService.get_patient(data.patient_id)
        if not patient:
            raise NotFoundError("Patient", data.patient_id)

        appointments = Database.get_collection("appointments")
        # check_in_code is left unset so the sparse unique index ignores it
        appointment_doc = {
            "patient_id": data.patient_id,
            "doctor_id": data.doctor_id,
            "caregiver_id": data.caregiver_id or patient.caregiver_id,
            "scheduled_for": data.scheduled_for,
            "status": AppointmentStatus.PENDING.value,
            "notes": data.notes,
            "created_by": created_by,
            "created_at": datetime.now(timezone.utc),
            "updated_at": None
        }

        result = await appointments.insert_one(appointment_doc)
        appointment_doc["_id"] = str(result.inserted_id)
        logger.info(f"Booked appointment {appointment_doc['_id']} for patient {data.patient_id}")

        return Appointment(**appointment_doc)

    @classmethod
    async def get_raw(cls, appointment_id: str) -> Optional[dict]:
        """Fetch the stored appointment document (ObjectId intact)."""
        oid = parse_object_id(appointment_id)
        if oid is None:
            return None
        appointments = Database.get_collection("appointments")
        return await appointments.find_one({"_id": oid})

    @classmethod
    async def get_appointment(cls, appointment_id: str) -> Optional[Appointment]:
        """Get appointment by ID."""
        doc = await cls.get_raw(appointment_id)
        if not doc:
            return None
        return Appointment(**serialize_document(doc))

    @classmethod
    async def get_by_check_in_code(cls, code: str) -> Optional[Appointment]:
        appointments = Database.get_collection("appointments")
        doc = await appointments.find_one({"check_in_code": code.upper()})
        if not doc:
            return None
        return Appointment(**serialize_document(doc))

    @classmethod
    async def list_appointments(
        cls,
        status: Optional[AppointmentStatus] = None,
        doctor_id: Optional[str] = None,
        caregiver_id: Optional[str] = None,
        on_date: Optional[date] = None,
        limit: int = 100
    ) -> List[Appointment]:
        """List appointments ordered by scheduled time."""
        appointments = Database.get_collection("appointments")

        filter_query = {}
        if status:
            filter_query["status"] = status.value
        if doctor_id:
            filter_query["doctor_id"] = doctor_id
        if caregiver_id:
            filter_query["caregiver_id"] = caregiver_id
        if on_date:
            day_start = datetime(on_date.year, on_date.month, on_date.day, tzinfo=timezone.utc)
            filter_query["scheduled_for"] = {
                "$gte": day_start,
                "$lt": day_start + timedelta(days=1)
            }

        cursor = appointments.find(filter_query).sort("scheduled_for", 1).limit(limit)

        results = []
        async for doc in cursor:
            results.append(Appointment(**serialize_document(doc)))
        return results

    @classmethod
    async def set_status(
        cls,
        appointment_id: str,
        status: AppointmentStatus
    ) -> Optional[Appointment]:
        """Update appointment status; returns None when it does not exist."""
        oid = parse_object_id(appointment_id)
        if oid is None:
            return None

        appointments = Database.get_collection("appointments")
        result = await appointments.find_one_and_update(
            {"_id": oid},
            {"$set": {"status": status.value, "updated_at": datetime.now(timezone.utc)}},
            return_document=True
        )
        if not result:
            return None

        logger.info(f"Appointment {appointment_id} -> {status.value}")
        return Appointment(**serialize_document(result))
