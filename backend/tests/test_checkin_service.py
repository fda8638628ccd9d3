import asyncio
from datetime import datetime, timedelta, timezone

import pytest

from hospital_api.exceptions import NotFoundError
from hospital_api.models.appointment import AppointmentCreate, AppointmentStatus
from hospital_api.models.checkin import CheckInCreate, CheckInStatus, Vitals
from hospital_api.services.appointment_service import AppointmentService
from hospital_api.services.checkin_service import CheckInService

MORNING = datetime(2026, 5, 4, 8, 0, tzinfo=timezone.utc)


async def _appointment(patient):
    return await AppointmentService.create_appointment(
        AppointmentCreate(patient_id=patient.id, scheduled_for=MORNING + timedelta(hours=1))
    )


async def test_sequential_check_ins_number_from_one(make_patient):
    patient = await make_patient()

    numbers = []
    for minute in range(5):
        check_in = await CheckInService.create_check_in(
            CheckInCreate(patient_id=patient.id),
            now=MORNING + timedelta(minutes=minute)
        )
        numbers.append(check_in.queue_number)

    assert numbers == [1, 2, 3, 4, 5]


async def test_numbering_restarts_on_a_new_day(make_patient):
    patient = await make_patient()

    for _ in range(3):
        await CheckInService.create_check_in(CheckInCreate(patient_id=patient.id), now=MORNING)

    tomorrow = await CheckInService.create_check_in(
        CheckInCreate(patient_id=patient.id),
        now=MORNING + timedelta(days=1)
    )
    assert tomorrow.queue_number == 1
    assert tomorrow.queue_date == "2026-05-05"


async def test_concurrent_check_ins_get_distinct_numbers(make_patient):
    patient = await make_patient()

    results = await asyncio.gather(*[
        CheckInService.create_check_in(CheckInCreate(patient_id=patient.id), now=MORNING)
        for _ in range(20)
    ])

    assert sorted(c.queue_number for c in results) == list(range(1, 21))


async def test_conflicting_number_is_retried(db, make_patient):
    patient = await make_patient()
    # A record the counter does not know about
    await db.check_ins.insert_one({
        "patient_id": patient.id,
        "queue_number": 1,
        "queue_date": "2026-05-04",
        "status": "waiting",
        "reason": "legacy",
        "checked_in_at": MORNING,
    })

    check_in = await CheckInService.create_check_in(CheckInCreate(patient_id=patient.id), now=MORNING)
    assert check_in.queue_number == 2


async def test_defaults_and_vitals(make_patient):
    patient = await make_patient()

    check_in = await CheckInService.create_check_in(
        CheckInCreate(patient_id=patient.id, vitals=Vitals(temperature_c=37.2, blood_pressure="120/80")),
        checked_in_by="desk-1",
        now=MORNING
    )

    assert check_in.status == CheckInStatus.WAITING
    assert check_in.reason == "General checkup"
    assert check_in.checked_in_by == "desk-1"
    assert check_in.vitals == {"temperature_c": 37.2, "blood_pressure": "120/80"}


async def test_requires_appointment_or_patient(db):
    with pytest.raises(ValueError):
        await CheckInService.create_check_in(CheckInCreate(reason="walk-in"))
    assert await db.check_ins.count_documents({}) == 0


async def test_unknown_references_are_not_found(db):
    with pytest.raises(NotFoundError):
        await CheckInService.create_check_in(CheckInCreate(appointment_id="64b7f0f0f0f0f0f0f0f0f0f0"))
    with pytest.raises(NotFoundError):
        await CheckInService.create_check_in(CheckInCreate(patient_id="not-an-id"))


async def test_check_in_with_appointment_confirms_it(make_patient):
    patient = await make_patient()
    appointment = await _appointment(patient)

    check_in = await CheckInService.create_check_in(
        CheckInCreate(appointment_id=appointment.id), now=MORNING
    )

    assert check_in.patient_id == patient.id
    refreshed = await AppointmentService.get_appointment(appointment.id)
    assert refreshed.status == AppointmentStatus.CONFIRMED


async def test_in_consultation_confirms_appointment(make_patient):
    patient = await make_patient()
    appointment = await _appointment(patient)
    check_in = await CheckInService.create_check_in(CheckInCreate(appointment_id=appointment.id), now=MORNING)
    await AppointmentService.set_status(appointment.id, AppointmentStatus.PENDING)

    updated = await CheckInService.update_status(check_in.id, "in_consultation")

    assert updated.status == CheckInStatus.IN_CONSULTATION
    assert updated.completed_at is None
    assert (await AppointmentService.get_appointment(appointment.id)).status == AppointmentStatus.CONFIRMED


async def test_completed_stamps_time_and_completes_appointment(make_patient):
    patient = await make_patient()
    appointment = await _appointment(patient)
    check_in = await CheckInService.create_check_in(CheckInCreate(appointment_id=appointment.id), now=MORNING)
    await CheckInService.update_status(check_in.id, "in_consultation")

    updated = await CheckInService.update_status(check_in.id, "completed", notes="Follow up in 2 weeks")

    assert updated.status == CheckInStatus.COMPLETED
    assert updated.completed_at is not None
    assert updated.notes == "Follow up in 2 weeks"
    assert (await AppointmentService.get_appointment(appointment.id)).status == AppointmentStatus.COMPLETED


async def test_cancelled_leaves_appointment_unchanged(make_patient):
    patient = await make_patient()
    appointment = await _appointment(patient)
    check_in = await CheckInService.create_check_in(CheckInCreate(appointment_id=appointment.id), now=MORNING)

    updated = await CheckInService.update_status(check_in.id, "cancelled")

    assert updated.status == CheckInStatus.CANCELLED
    assert updated.completed_at is None
    assert (await AppointmentService.get_appointment(appointment.id)).status == AppointmentStatus.CONFIRMED


@pytest.mark.parametrize("status", ["done", "WAITING", "checked_in", "", None])
async def test_invalid_status_is_rejected_before_mutation(db, make_patient, status):
    patient = await make_patient()
    check_in = await CheckInService.create_check_in(CheckInCreate(patient_id=patient.id), now=MORNING)
    before = await db.check_ins.find_one({"queue_number": 1})

    with pytest.raises(ValueError):
        await CheckInService.update_status(check_in.id, status, notes="should not be saved")

    after = await db.check_ins.find_one({"queue_number": 1})
    assert after == before


async def test_cancel_during_consultation(make_patient):
    patient = await make_patient()
    check_in = await CheckInService.create_check_in(CheckInCreate(patient_id=patient.id), now=MORNING)
    await CheckInService.update_status(check_in.id, "in_consultation")

    updated = await CheckInService.update_status(check_in.id, "cancelled")

    assert updated.status == CheckInStatus.CANCELLED


@pytest.mark.parametrize("path, target", [
    ([], "waiting"),
    ([], "completed"),
    (["in_consultation"], "waiting"),
    (["in_consultation"], "in_consultation"),
    (["in_consultation", "completed"], "waiting"),
    (["in_consultation", "completed"], "cancelled"),
    (["cancelled"], "in_consultation"),
    (["cancelled"], "completed"),
])
async def test_disallowed_moves_are_rejected(db, make_patient, path, target):
    patient = await make_patient()
    appointment = await _appointment(patient)
    check_in = await CheckInService.create_check_in(CheckInCreate(appointment_id=appointment.id), now=MORNING)
    for status in path:
        await CheckInService.update_status(check_in.id, status)
    before = await db.check_ins.find_one({"queue_number": 1})
    appointment_before = (await AppointmentService.get_appointment(appointment.id)).status

    with pytest.raises(ValueError, match="Cannot move check-in"):
        await CheckInService.update_status(check_in.id, target)

    assert await db.check_ins.find_one({"queue_number": 1}) == before
    assert (await AppointmentService.get_appointment(appointment.id)).status == appointment_before


async def test_update_unknown_check_in_returns_none(db):
    assert await CheckInService.update_status("64b7f0f0f0f0f0f0f0f0f0f0", "completed") is None
    assert await CheckInService.update_status("bogus", "completed") is None


async def test_queue_snapshot_is_ordered_with_stats(make_patient):
    patient = await make_patient()
    created = []
    for _ in range(4):
        created.append(await CheckInService.create_check_in(CheckInCreate(patient_id=patient.id), now=MORNING))
    await CheckInService.update_status(created[0].id, "in_consultation")
    await CheckInService.update_status(created[0].id, "completed")
    await CheckInService.update_status(created[1].id, "in_consultation")
    # Yesterday's entry must not show up
    await CheckInService.create_check_in(CheckInCreate(patient_id=patient.id), now=MORNING - timedelta(days=1))

    snapshot = await CheckInService.get_queue(now=MORNING + timedelta(hours=2))

    assert [c.queue_number for c in snapshot.check_ins] == [1, 2, 3, 4]
    assert snapshot.stats.total == 4
    assert snapshot.stats.waiting == 2
    assert snapshot.stats.in_consultation == 1
    assert snapshot.stats.completed == 1
    assert snapshot.stats.cancelled == 0


def test_queue_date_uses_clinic_timezone(monkeypatch):
    from hospital_api.services import checkin_service

    monkeypatch.setattr(checkin_service.settings, "CLINIC_TIMEZONE", "Africa/Lagos")
    late_evening_utc = datetime(2026, 5, 4, 23, 30, tzinfo=timezone.utc)
    assert CheckInService.queue_date_for(late_evening_utc) == "2026-05-05"
