"""
Check-in code assignment and QR generation for appointments.
"""

from typing import Optional

from pymongo.errors import DuplicateKeyError

from ..config import get_settings
from ..database import Database
from ..models.appointment import Appointment, AppointmentStatus
from ..models.qr import AppointmentQR
from ..utils.logger import get_logger
from ..utils.qr import (
    build_payload,
    encode_payload,
    generate_check_in_code,
    is_valid_check_in_code,
    parse_payload,
    render_qr_data_url,
    render_qr_svg,
)
from .appointment_service import AppointmentService

settings = get_settings()
logger = get_logger("qr")


class QRService:
    """Assigns short check-in codes and renders scannable payloads."""

    @classmethod
    async def ensure_check_in_code(cls, appointment: dict) -> Optional[str]:
        """
        Return the appointment's check-in code, assigning one if needed.

        A persisted code is reused as-is. Otherwise fresh codes are tried up to
        CHECKIN_CODE_ATTEMPTS times; the unique index on check_in_code rejects a
        code another appointment already holds, and the conditional update only
        writes when no code has been assigned in the meantime. Running out of
        attempts yields None, and a later request can try again.
        """
        if appointment.get("check_in_code"):
            return appointment["check_in_code"]

        appointments = Database.get_collection("appointments")

        for attempt in range(1, settings.CHECKIN_CODE_ATTEMPTS + 1):
            code = generate_check_in_code()

            if await appointments.find_one({"check_in_code": code}, {"_id": 1}):
                logger.debug(f"Check-in code {code} taken (attempt {attempt})")
                continue

            try:
                result = await appointments.update_one(
                    {"_id": appointment["_id"], "check_in_code": None},
                    {"$set": {"check_in_code": code}}
                )
            except DuplicateKeyError:
                logger.debug(f"Check-in code {code} lost a race (attempt {attempt})")
                continue

            if result.modified_count:
                logger.info(f"Assigned check-in code {code} to appointment {appointment['_id']}")
                return code

            # Someone else assigned a code first
            current = await appointments.find_one({"_id": appointment["_id"]})
            return current.get("check_in_code") if current else None

        logger.warning(
            f"Could not find a free check-in code for appointment {appointment['_id']} "
            f"after {settings.CHECKIN_CODE_ATTEMPTS} attempts"
        )
        return None

    @classmethod
    async def get_appointment_qr(cls, appointment_id: str) -> Optional[AppointmentQR]:
        """QR data URL, short code and status for an appointment; None if it does not exist."""
        appointment = await AppointmentService.get_raw(appointment_id)
        if not appointment:
            return None

        code = await cls.ensure_check_in_code(appointment)
        payload = encode_payload(build_payload(str(appointment["_id"]), code))

        return AppointmentQR(
            qr_code=render_qr_data_url(payload),
            appointment_id=str(appointment["_id"]),
            check_in_code=code,
            status=AppointmentStatus(appointment.get("status", AppointmentStatus.PENDING.value))
        )

    @classmethod
    async def get_appointment_qr_svg(cls, appointment_id: str) -> Optional[str]:
        appointment = await AppointmentService.get_raw(appointment_id)
        if not appointment:
            return None

        code = await cls.ensure_check_in_code(appointment)
        return render_qr_svg(encode_payload(build_payload(str(appointment["_id"]), code)))

    @classmethod
    async def resolve_scan(cls, value: str) -> Optional[Appointment]:
        """
        Look up the appointment behind a scanned QR payload or a typed code.

        Raises ValueError for input that is neither; returns None when it is
        well-formed but matches no appointment.
        """
        value = value.strip()

        if is_valid_check_in_code(value):
            return await AppointmentService.get_by_check_in_code(value)

        payload = parse_payload(value)
        if payload is None:
            raise ValueError("Unrecognized QR payload or check-in code")

        return await AppointmentService.get_appointment(str(payload["id"]))
