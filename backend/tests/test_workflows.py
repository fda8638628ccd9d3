import asyncio
from datetime import datetime, timezone

from hospital_api.models.appointment import AppointmentCreate, AppointmentStatus
from hospital_api.models.supply_order import SupplyOrderCreate, SupplyOrderStatus
from hospital_api.models.user import UserRole
from hospital_api.services.appointment_service import AppointmentService
from hospital_api.services.inventory_service import InventoryService
from hospital_api.services.stats_service import StatsService

TEST_PASSWORD = "P@ssw0rd1"


async def test_prescription_is_dispensed_by_pharmacist(client, make_user, make_patient):
    doctor, doctor_headers = await make_user(UserRole.DOCTOR)
    pharmacist, pharmacy_headers = await make_user(UserRole.PHARMACIST)
    patient = await make_patient()

    created = await client.post("/doctor/prescriptions", headers=doctor_headers, json={
        "patient_id": patient.id,
        "medication_name": "Amoxicillin",
        "dosage": "250mg"
    })
    assert created.status_code == 201
    assert created.json()["doctor_id"] == doctor.id
    prescription_id = created.json()["id"]

    pending = await client.get("/pharmacy/prescriptions", headers=pharmacy_headers, params={"status": "pending"})
    assert [p["id"] for p in pending.json()] == [prescription_id]

    dispensed = await client.patch(
        f"/pharmacy/prescriptions/{prescription_id}",
        headers=pharmacy_headers,
        json={"status": "dispensed"}
    )
    assert dispensed.status_code == 200
    assert dispensed.json()["pharmacist_id"] == pharmacist.id
    assert dispensed.json()["dispensed_at"] is not None


async def test_prescription_for_unknown_patient(client, make_user):
    _, headers = await make_user(UserRole.DOCTOR)

    response = await client.post("/doctor/prescriptions", headers=headers, json={
        "patient_id": "64b7f0f0f0f0f0f0f0f0f0f0",
        "medication_name": "Paracetamol",
        "dosage": "500mg"
    })

    assert response.status_code == 404


async def test_lab_order_lifecycle(client, make_user, make_patient):
    _, doctor_headers = await make_user(UserRole.DOCTOR)
    tech, lab_headers = await make_user(UserRole.LAB_TECH)
    patient = await make_patient()

    ordered = await client.post("/doctor/lab-orders", headers=doctor_headers, json={
        "patient_id": patient.id,
        "test_names": ["Full blood count", "Malaria RDT"],
        "priority": "urgent"
    })
    assert ordered.status_code == 201
    orders = ordered.json()
    assert [o["test_name"] for o in orders] == ["Full blood count", "Malaria RDT"]
    order_id = orders[0]["id"]

    shortcut = await client.patch(f"/lab/orders/{order_id}/status", headers=lab_headers, json={"status": "completed"})
    assert shortcut.status_code == 400

    started = await client.patch(f"/lab/orders/{order_id}/status", headers=lab_headers, json={"status": "in_progress"})
    assert started.json()["processed_by"] == tech.id
    assert started.json()["processing_started_at"] is not None

    done = await client.post(f"/lab/orders/{order_id}/results", headers=lab_headers, json={
        "results": "Hb 11.2 g/dL",
        "abnormal_findings": "Mild anaemia"
    })
    assert done.status_code == 200
    assert done.json()["status"] == "completed"
    assert done.json()["completed_at"] is not None

    pending = await client.get("/lab/orders", headers=lab_headers, params={"status": "pending"})
    assert [o["test_name"] for o in pending.json()] == ["Malaria RDT"]


async def test_supplier_stock(client, make_user):
    _, headers = await make_user(UserRole.SUPPLIER)
    _, other_headers = await make_user(UserRole.SUPPLIER)

    added = await client.post("/supplier/medications", headers=headers, json={
        "name": "Oral rehydration salts",
        "unit_price": 0.5,
        "stock": 5
    })
    assert added.status_code == 201
    medication_id = added.json()["id"]

    too_many = await client.patch(f"/supplier/medications/{medication_id}/stock", headers=headers, json={"delta": -10})
    assert too_many.status_code == 400

    issued = await client.patch(f"/supplier/medications/{medication_id}/stock", headers=headers, json={"delta": -3})
    assert issued.json()["stock"] == 2

    foreign = await client.patch(f"/supplier/medications/{medication_id}/stock", headers=other_headers, json={"delta": 1})
    assert foreign.status_code == 404

    assert (await client.get("/supplier/medications", headers=other_headers)).json() == []


async def test_caregiver_books_only_own_patients(client, make_user, make_patient):
    caregiver, headers = await make_user(UserRole.CAREGIVER)
    stranger = await make_patient("Someone Else")

    child = await client.post("/patients", headers=headers, json={"full_name": "Tobi Adeyemi", "gender": "male"})
    assert child.status_code == 201
    assert child.json()["caregiver_id"] == caregiver.id

    mine = await client.get("/patients", headers=headers)
    assert [p["full_name"] for p in mine.json()] == ["Tobi Adeyemi"]

    booked = await client.post("/caregiver-appointments", headers=headers, json={
        "patient_id": child.json()["id"],
        "scheduled_for": "2026-05-06T09:00:00Z"
    })
    assert booked.status_code == 201
    assert booked.json()["caregiver_id"] == caregiver.id

    refused = await client.post("/caregiver-appointments", headers=headers, json={
        "patient_id": stranger.id,
        "scheduled_for": "2026-05-06T09:00:00Z"
    })
    assert refused.status_code == 404

    listed = await client.get("/caregiver-appointments", headers=headers)
    assert [a["id"] for a in listed.json()] == [booked.json()["id"]]


async def test_receptionist_search(client, make_user, make_patient):
    _, headers = await make_user(UserRole.RECEPTIONIST)
    await make_patient("Amina Yusuf", phone="0803 555 0101")
    await make_patient("Chidi Obi")

    by_name = await client.get("/receptionist/patients", headers=headers, params={"q": "amina"})
    assert [p["full_name"] for p in by_name.json()] == ["Amina Yusuf"]

    by_phone = await client.get("/receptionist/patients", headers=headers, params={"q": "555"})
    assert [p["full_name"] for p in by_phone.json()] == ["Amina Yusuf"]

    too_short = await client.get("/receptionist/patients", headers=headers, params={"q": "a"})
    assert too_short.json() == []


async def test_admin_stats(client, make_user, make_patient):
    _, headers = await make_user(UserRole.ADMIN)
    await make_user(UserRole.DOCTOR)
    await make_patient()

    stats = await client.get("/admin/stats", headers=headers)

    assert stats.status_code == 200
    body = stats.json()
    assert body["users_by_role"]["admin"] == 1
    assert body["users_by_role"]["doctor"] == 1
    assert body["total_patients"] == 1
    assert body["check_ins_today"] == 0


async def _medication(client, headers, stock):
    added = await client.post("/supplier/medications", headers=headers, json={
        "name": "Amoxicillin 250mg",
        "unit_price": 1.2,
        "stock": stock
    })
    return added.json()["id"]


async def test_supply_order_lifecycle(client, make_user):
    supplier, supplier_headers = await make_user(UserRole.SUPPLIER)
    _, other_supplier_headers = await make_user(UserRole.SUPPLIER)
    pharmacist, pharmacy_headers = await make_user(UserRole.PHARMACIST)
    medication_id = await _medication(client, supplier_headers, stock=5)

    requested = await client.post("/pharmacy/supply-orders", headers=pharmacy_headers, json={
        "medication_id": medication_id,
        "quantity": 8
    })
    assert requested.status_code == 201
    order = requested.json()
    assert order["supplier_id"] == supplier.id
    assert order["pharmacist_id"] == pharmacist.id
    assert order["medication_name"] == "Amoxicillin 250mg"
    assert order["status"] == "pending"
    url = f"/supplier/orders/{order['id']}"

    short = await client.patch(url, headers=supplier_headers, json={"status": "approved"})
    assert short.status_code == 400
    assert "Insufficient stock" in short.json()["detail"]
    pending = await client.get("/supplier/orders", headers=supplier_headers, params={"status": "pending"})
    assert [o["id"] for o in pending.json()] == [order["id"]]

    await client.patch(f"/supplier/medications/{medication_id}/stock", headers=supplier_headers, json={"delta": 10})

    assert (await client.patch(url, headers=other_supplier_headers, json={"status": "approved"})).status_code == 404

    approved = await client.patch(url, headers=supplier_headers, json={"status": "approved"})
    assert approved.status_code == 200
    assert approved.json()["approved_at"] is not None
    stock = (await client.get("/supplier/medications", headers=supplier_headers)).json()[0]["stock"]
    assert stock == 7

    again = await client.patch(url, headers=supplier_headers, json={"status": "approved"})
    assert again.status_code == 400
    assert (await client.get("/supplier/medications", headers=supplier_headers)).json()[0]["stock"] == 7

    delivered = await client.patch(url, headers=supplier_headers, json={"status": "delivered"})
    assert delivered.json()["status"] == "delivered"
    assert delivered.json()["delivered_at"] is not None

    late_cancel = await client.patch(url, headers=supplier_headers, json={"status": "cancelled"})
    assert late_cancel.status_code == 400


async def test_pending_supply_order_can_be_declined(client, make_user):
    _, supplier_headers = await make_user(UserRole.SUPPLIER)
    _, pharmacy_headers = await make_user(UserRole.PHARMACIST)
    medication_id = await _medication(client, supplier_headers, stock=50)
    order = (await client.post("/pharmacy/supply-orders", headers=pharmacy_headers, json={
        "medication_id": medication_id,
        "quantity": 5
    })).json()

    declined = await client.patch(f"/supplier/orders/{order['id']}", headers=supplier_headers, json={"status": "cancelled"})
    assert declined.json()["status"] == "cancelled"

    skipped = await client.patch(f"/supplier/orders/{order['id']}", headers=supplier_headers, json={"status": "delivered"})
    assert skipped.status_code == 400
    assert (await client.get("/supplier/medications", headers=supplier_headers)).json()[0]["stock"] == 50


async def test_supply_order_for_unknown_medication(client, make_user):
    _, headers = await make_user(UserRole.PHARMACIST)

    response = await client.post("/pharmacy/supply-orders", headers=headers, json={
        "medication_id": "64b7f0f0f0f0f0f0f0f0f0f0",
        "quantity": 3
    })

    assert response.status_code == 404


async def test_racing_approvals_deduct_stock_once(client, make_user):
    supplier, supplier_headers = await make_user(UserRole.SUPPLIER)
    pharmacist, _ = await make_user(UserRole.PHARMACIST)
    medication_id = await _medication(client, supplier_headers, stock=10)
    order = await InventoryService.create_order(SupplyOrderCreate(medication_id=medication_id, quantity=4), pharmacist.id)

    results = await asyncio.gather(
        InventoryService.update_order_status(order.id, supplier.id, SupplyOrderStatus.APPROVED),
        InventoryService.update_order_status(order.id, supplier.id, SupplyOrderStatus.APPROVED),
        return_exceptions=True
    )

    assert sum(1 for r in results if isinstance(r, ValueError)) == 1
    medications = await InventoryService.list_medications(supplier.id)
    assert medications[0].stock == 6


async def test_admin_lists_staff_and_doctors(client, make_user):
    _, headers = await make_user(UserRole.ADMIN)
    doctor, _ = await make_user(UserRole.DOCTOR)
    desk, _ = await make_user(UserRole.RECEPTIONIST)
    await make_user(UserRole.CAREGIVER)

    staff = await client.get("/admin/staff", headers=headers)
    assert {u["id"] for u in staff.json()} == {doctor.id, desk.id}

    doctors = await client.get("/admin/doctors", headers=headers)
    assert [u["id"] for u in doctors.json()] == [doctor.id]

    caregivers = await client.get("/admin/users", headers=headers, params={"role": "caregiver"})
    assert len(caregivers.json()) == 1


async def test_admin_edits_and_deactivates_user(client, make_user):
    _, headers = await make_user(UserRole.ADMIN)
    desk, desk_headers = await make_user(UserRole.RECEPTIONIST, email="desk@example.com")
    await make_user(UserRole.DOCTOR, email="doc@example.com")

    renamed = await client.patch(f"/admin/users/{desk.id}", headers=headers, json={"full_name": "Front Desk One"})
    assert renamed.json()["full_name"] == "Front Desk One"

    taken = await client.patch(f"/admin/users/{desk.id}", headers=headers, json={"email": "doc@example.com"})
    assert taken.status_code == 400

    disabled = await client.patch(f"/admin/users/{desk.id}", headers=headers, json={"is_active": False})
    assert disabled.json()["is_active"] is False

    assert (await client.get("/receptionist/queue", headers=desk_headers)).status_code == 403
    login = await client.post("/auth/login", json={"email": "desk@example.com", "password": TEST_PASSWORD})
    assert login.status_code == 401


async def test_admin_cannot_remove_own_account(client, make_user):
    admin, headers = await make_user(UserRole.ADMIN)

    assert (await client.delete(f"/admin/users/{admin.id}", headers=headers)).status_code == 400
    deactivate = await client.patch(f"/admin/users/{admin.id}", headers=headers, json={"is_active": False})
    assert deactivate.status_code == 400


async def test_admin_deletes_user(client, make_user):
    _, headers = await make_user(UserRole.ADMIN)
    doctor, doctor_headers = await make_user(UserRole.DOCTOR)

    deleted = await client.delete(f"/admin/users/{doctor.id}", headers=headers)
    assert deleted.status_code == 200

    assert (await client.delete(f"/admin/users/{doctor.id}", headers=headers)).status_code == 404
    assert (await client.get("/doctor/queue", headers=doctor_headers)).status_code == 401


async def test_appointment_trend_covers_last_seven_days(make_patient):
    now = datetime(2026, 5, 10, 12, 0, tzinfo=timezone.utc)
    patient = await make_patient()

    async def book(when):
        return await AppointmentService.create_appointment(
            AppointmentCreate(patient_id=patient.id, scheduled_for=when)
        )

    done = await book(datetime(2026, 5, 10, 9, 0, tzinfo=timezone.utc))
    await AppointmentService.set_status(done.id, AppointmentStatus.COMPLETED)
    await book(datetime(2026, 5, 10, 11, 0, tzinfo=timezone.utc))
    await book(datetime(2026, 5, 8, 10, 0, tzinfo=timezone.utc))
    await book(datetime(2026, 4, 20, 10, 0, tzinfo=timezone.utc))
    await book(datetime(2026, 5, 12, 10, 0, tzinfo=timezone.utc))

    trend = await StatsService.get_appointment_trend(now=now)

    assert [d["date"] for d in trend] == [f"2026-05-{day:02d}" for day in range(4, 11)]
    assert trend[-1] == {"day": "Sun", "date": "2026-05-10", "total": 2, "completed": 1}
    assert trend[4] == {"day": "Fri", "date": "2026-05-08", "total": 1, "completed": 0}
    assert sum(d["total"] for d in trend) == 3


async def test_appointment_trend_endpoint_is_admin_only(client, make_user):
    _, admin_headers = await make_user(UserRole.ADMIN)
    _, doctor_headers = await make_user(UserRole.DOCTOR)

    response = await client.get("/admin/analytics/appointments", headers=admin_headers)
    assert response.status_code == 200
    assert len(response.json()) == 7

    assert (await client.get("/admin/analytics/appointments", headers=doctor_headers)).status_code == 403


async def test_admin_can_work_the_consultation_queue(client, make_user, make_patient):
    _, headers = await make_user(UserRole.ADMIN)
    _, desk_headers = await make_user(UserRole.RECEPTIONIST)
    patient = await make_patient()
    created = await client.post("/receptionist/queue", headers=desk_headers, json={"patient_id": patient.id})
    check_in_id = created.json()["check_in"]["id"]

    started = await client.patch(f"/doctor/queue/{check_in_id}", headers=headers, json={"status": "in_consultation"})

    assert started.status_code == 200
    assert started.json()["status"] == "in_consultation"


async def test_admin_sees_all_patients_and_appointments(client, make_user, make_patient):
    _, headers = await make_user(UserRole.ADMIN)
    _, caregiver_headers = await make_user(UserRole.CAREGIVER)
    await make_patient("Zainab Bello")
    child = await client.post("/patients", headers=caregiver_headers, json={"full_name": "Ada Bello"})
    await client.post("/caregiver-appointments", headers=caregiver_headers, json={
        "patient_id": child.json()["id"],
        "scheduled_for": "2026-05-06T09:00:00Z"
    })

    patients = await client.get("/patients", headers=headers)
    assert patients.status_code == 200
    assert [p["full_name"] for p in patients.json()] == ["Ada Bello", "Zainab Bello"]

    appointments = await client.get("/caregiver-appointments", headers=headers)
    assert appointments.status_code == 200
    assert len(appointments.json()) == 1
