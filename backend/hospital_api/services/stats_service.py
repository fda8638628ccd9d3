"""
Admin dashboard statistics.
"""

from datetime import datetime, timedelta, timezone, date
from typing import Optional, List

from ..database import Database
from ..models.appointment import AppointmentStatus
from ..models.user import UserRole
from .checkin_service import CheckInService

DAY_NAMES = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")


class StatsService:

    @classmethod
    async def get_overview(cls, now: Optional[datetime] = None) -> dict:
        users = Database.get_collection("users")
        patients = Database.get_collection("patients")
        appointments = Database.get_collection("appointments")
        check_ins = Database.get_collection("check_ins")

        users_by_role = {}
        for role in UserRole:
            users_by_role[role.value] = await users.count_documents({"role": role.value})

        appointments_by_status = {}
        for status in AppointmentStatus:
            appointments_by_status[status.value] = await appointments.count_documents(
                {"status": status.value}
            )

        queue_date = CheckInService.queue_date_for(now or datetime.now(timezone.utc))

        return {
            "users_by_role": users_by_role,
            "total_patients": await patients.count_documents({}),
            "appointments_by_status": appointments_by_status,
            "check_ins_today": await check_ins.count_documents({"queue_date": queue_date}),
            "queue_date": queue_date
        }

    @classmethod
    async def get_appointment_trend(cls, days: int = 7, now: Optional[datetime] = None) -> List[dict]:
        """
        Appointments scheduled on each of the last ``days`` clinic-local days
        (today last), with how many of them were completed.
        """
        now = now or datetime.now(timezone.utc)
        today = date.fromisoformat(CheckInService.queue_date_for(now))

        buckets = {}
        for offset in range(days - 1, -1, -1):
            day = today - timedelta(days=offset)
            buckets[day.isoformat()] = {
                "day": DAY_NAMES[day.weekday()],
                "date": day.isoformat(),
                "total": 0,
                "completed": 0
            }

        appointments = Database.get_collection("appointments")
        # One extra day covers clinic time zones ahead of UTC
        cursor = appointments.find(
            {"scheduled_for": {"$gte": now - timedelta(days=days + 1)}},
            {"scheduled_for": 1, "status": 1}
        )
        async for appointment in cursor:
            bucket = buckets.get(CheckInService.queue_date_for(appointment["scheduled_for"]))
            if bucket is None:
                continue
            bucket["total"] += 1
            if appointment.get("status") == AppointmentStatus.COMPLETED.value:
                bucket["completed"] += 1

        return list(buckets.values())
