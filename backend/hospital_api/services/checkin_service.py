"""
Patient check-in and daily queue numbering service.
"""

from datetime import datetime, timezone
from typing import Optional
from zoneinfo import ZoneInfo

from pymongo import ReturnDocument
from pymongo.errors import DuplicateKeyError

from ..config import get_settings
from ..database import Database, parse_object_id, serialize_document
from ..exceptions import NotFoundError
from ..models.appointment import AppointmentStatus
from ..models.checkin import (
    CheckIn,
    CheckInCreate,
    CheckInStatus,
    QueueSnapshot,
    QueueStats,
)
from ..utils.logger import get_logger
from .appointment_service import AppointmentService
from .patient_service import PatientService

settings = get_settings()
logger = get_logger("checkin")

# Linked appointment status to apply when a check-in enters a state.
APPOINTMENT_STATUS_ON_TRANSITION = {
    CheckInStatus.IN_CONSULTATION: AppointmentStatus.CONFIRMED,
    CheckInStatus.COMPLETED: AppointmentStatus.COMPLETED,
}

# Statuses a check-in may be in when it moves to the key status.
ALLOWED_FROM = {
    CheckInStatus.WAITING: [],
    CheckInStatus.IN_CONSULTATION: [CheckInStatus.WAITING.value],
    CheckInStatus.COMPLETED: [CheckInStatus.IN_CONSULTATION.value],
    CheckInStatus.CANCELLED: [CheckInStatus.WAITING.value, CheckInStatus.IN_CONSULTATION.value],
}


class CheckInService:
    """Check-in and queue management service."""

    @staticmethod
    def queue_date_for(moment: datetime) -> str:
        """Clinic-local calendar date (YYYY-MM-DD) the moment falls on."""
        if moment.tzinfo is None:
            moment = moment.replace(tzinfo=timezone.utc)
        return moment.astimezone(ZoneInfo(settings.CLINIC_TIMEZONE)).date().isoformat()

    @classmethod
    async def next_queue_number(cls, queue_date: str) -> int:
        """Atomically take the next number from the per-day counter."""
        counters = Database.get_collection("queue_counters")
        counter = await counters.find_one_and_update(
            {"_id": f"check_ins:{queue_date}"},
            {"$inc": {"seq": 1}},
            upsert=True,
            return_document=ReturnDocument.AFTER
        )
        return counter["seq"]

    @classmethod
    async def _resync_counter(cls, queue_date: str) -> None:
        """Move the day's counter past the highest number already issued."""
        check_ins = Database.get_collection("check_ins")
        latest = await check_ins.find_one(
            {"queue_date": queue_date},
            sort=[("queue_number", -1)]
        )
        if not latest:
            return

        counters = Database.get_collection("queue_counters")
        await counters.update_one(
            {"_id": f"check_ins:{queue_date}"},
            {"$max": {"seq": latest["queue_number"]}},
            upsert=True
        )

    @classmethod
    async def create_check_in(
        cls,
        data: CheckInCreate,
        checked_in_by: Optional[str] = None,
        now: Optional[datetime] = None
    ) -> CheckIn:
        """
        Register an arrival and issue today's next queue number.

        Raises ValueError when neither an appointment nor a patient is given,
        and NotFoundError when the referenced record does not exist.
        """
        if not data.appointment_id and not data.patient_id:
            raise ValueError("Either appointment_id or patient_id is required")

        patient_id = data.patient_id
        if data.appointment_id:
            appointment = await AppointmentService.get_appointment(data.appointment_id)
            if not appointment:
                raise NotFoundError("Appointment", data.appointment_id)
            patient_id = patient_id or appointment.patient_id
        elif not await PatientService.get_patient(data.patient_id):
            raise NotFoundError("Patient", data.patient_id)

        checked_in_at = now or datetime.now(timezone.utc)
        queue_date = cls.queue_date_for(checked_in_at)
        check_ins = Database.get_collection("check_ins")

        for attempt in range(1, settings.QUEUE_INSERT_ATTEMPTS + 1):
            queue_number = await cls.next_queue_number(queue_date)
            check_in_doc = {
                "appointment_id": data.appointment_id,
                "patient_id": patient_id,
                "checked_in_by": checked_in_by,
                "queue_number": queue_number,
                "queue_date": queue_date,
                "status": CheckInStatus.WAITING.value,
                "reason": data.reason or settings.DEFAULT_CHECKIN_REASON,
                "vitals": data.vitals.model_dump(exclude_none=True) if data.vitals else None,
                "notes": None,
                "checked_in_at": checked_in_at,
                "completed_at": None,
                "updated_at": None
            }
            try:
                result = await check_ins.insert_one(check_in_doc)
            except DuplicateKeyError:
                logger.warning(
                    f"Queue number {queue_number} for {queue_date} already taken "
                    f"(attempt {attempt}), resyncing counter"
                )
                await cls._resync_counter(queue_date)
                continue
            break
        else:
            raise RuntimeError(f"Could not assign a queue number for {queue_date}")

        check_in_doc["_id"] = str(result.inserted_id)
        logger.info(f"Checked in #{queue_number} on {queue_date} (check-in {check_in_doc['_id']})")

        if data.appointment_id:
            await AppointmentService.set_status(data.appointment_id, AppointmentStatus.CONFIRMED)

        return CheckIn(**check_in_doc)

    @classmethod
    async def update_status(
        cls,
        check_in_id: str,
        status: Optional[str],
        notes: Optional[str] = None,
        now: Optional[datetime] = None
    ) -> Optional[CheckIn]:
        """
        Move a check-in to a new status and mirror it onto the linked appointment.

        The status is validated before anything is written. Check-ins move
        waiting -> in_consultation -> completed, and can be cancelled before they
        complete; any other move raises ValueError. Entering in_consultation
        confirms the appointment, completing stamps completed_at and completes
        the appointment; cancelling leaves the appointment alone.
        """
        if not status:
            raise ValueError("Status is required")
        try:
            new_status = CheckInStatus(status)
        except ValueError:
            allowed = ", ".join(s.value for s in CheckInStatus)
            raise ValueError(f"Invalid status '{status}'. Expected one of: {allowed}") from None

        oid = parse_object_id(check_in_id)
        if oid is None:
            return None

        moment = now or datetime.now(timezone.utc)
        update_data = {"status": new_status.value, "updated_at": moment}
        if new_status == CheckInStatus.COMPLETED:
            update_data["completed_at"] = moment
        if notes:
            update_data["notes"] = notes

        check_ins = Database.get_collection("check_ins")
        result = await check_ins.find_one_and_update(
            {"_id": oid, "status": {"$in": ALLOWED_FROM[new_status]}},
            {"$set": update_data},
            return_document=ReturnDocument.AFTER
        )
        if not result:
            existing = await check_ins.find_one({"_id": oid}, {"status": 1})
            if existing:
                raise ValueError(
                    f"Cannot move check-in from {existing['status']} to {new_status.value}"
                )
            return None

        appointment_status = APPOINTMENT_STATUS_ON_TRANSITION.get(new_status)
        if appointment_status and result.get("appointment_id"):
            await AppointmentService.set_status(result["appointment_id"], appointment_status)

        logger.info(f"Check-in {check_in_id} -> {new_status.value}")
        return CheckIn(**serialize_document(result))

    @classmethod
    async def get_check_in(cls, check_in_id: str) -> Optional[CheckIn]:
        """Get check-in by ID."""
        oid = parse_object_id(check_in_id)
        if oid is None:
            return None

        check_ins = Database.get_collection("check_ins")
        check_in = await check_ins.find_one({"_id": oid})
        if not check_in:
            return None
        return CheckIn(**serialize_document(check_in))

    @classmethod
    async def get_queue(cls, now: Optional[datetime] = None) -> QueueSnapshot:
        """Today's check-ins in queue order, with per-status counts."""
        queue_date = cls.queue_date_for(now or datetime.now(timezone.utc))
        check_ins = Database.get_collection("check_ins")

        cursor = check_ins.find({"queue_date": queue_date}).sort("queue_number", 1)

        entries = []
        async for check_in in cursor:
            entries.append(CheckIn(**serialize_document(check_in)))

        stats = QueueStats(total=len(entries))
        for entry in entries:
            field = entry.status.value
            setattr(stats, field, getattr(stats, field) + 1)

        return QueueSnapshot(queue_date=queue_date, check_ins=entries, stats=stats)
