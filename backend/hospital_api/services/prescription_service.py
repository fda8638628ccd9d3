"""
Prescription service: doctors prescribe, pharmacists dispense.
"""

from datetime import datetime, timezone
from typing import Optional, List

from ..database import Database, parse_object_id, serialize_document
from ..exceptions import NotFoundError
from ..models.prescription import Prescription, PrescriptionCreate, PrescriptionStatus
from ..utils.logger import get_logger
from .patient_service import PatientService

logger = get_logger("prescriptions")


class PrescriptionService:
    """Prescription management service."""

    @classmethod
    async def create_prescription(cls, data: PrescriptionCreate, doctor_id: str) -> Prescription:
        if not await PatientService.get_patient(data.patient_id):
            raise NotFoundError("Patient", data.patient_id)

        prescriptions = Database.get_collection("prescriptions")
        prescription_doc = data.model_dump()
        prescription_doc.update({
            "doctor_id": doctor_id,
            "status": PrescriptionStatus.PENDING.value,
            "pharmacist_id": None,
            "dispensed_at": None,
            "created_at": datetime.now(timezone.utc),
            "updated_at": None
        })

        result = await prescriptions.insert_one(prescription_doc)
        prescription_doc["_id"] = str(result.inserted_id)
        logger.info(f"Prescription {prescription_doc['_id']} ({data.medication_name}) by doctor {doctor_id}")

        return Prescription(**prescription_doc)

    @classmethod
    async def list_prescriptions(
        cls,
        status: Optional[PrescriptionStatus] = None,
        doctor_id: Optional[str] = None,
        patient_id: Optional[str] = None,
        limit: int = 100
    ) -> List[Prescription]:
        prescriptions = Database.get_collection("prescriptions")

        filter_query = {}
        if status:
            filter_query["status"] = status.value
        if doctor_id:
            filter_query["doctor_id"] = doctor_id
        if patient_id:
            filter_query["patient_id"] = patient_id

        cursor = prescriptions.find(filter_query).sort("created_at", -1).limit(limit)
        return [Prescription(**serialize_document(doc)) async for doc in cursor]

    @classmethod
    async def update_status(
        cls,
        prescription_id: str,
        status: PrescriptionStatus,
        pharmacist_id: str
    ) -> Optional[Prescription]:
        """Change status; dispensing records who dispensed and when."""
        oid = parse_object_id(prescription_id)
        if oid is None:
            return None

        now = datetime.now(timezone.utc)
        update_data = {"status": status.value, "updated_at": now}
        if status == PrescriptionStatus.DISPENSED:
            update_data["dispensed_at"] = now
            update_data["pharmacist_id"] = pharmacist_id

        prescriptions = Database.get_collection("prescriptions")
        result = await prescriptions.find_one_and_update(
            {"_id": oid},
            {"$set": update_data},
            return_document=True
        )
        if not result:
            return None

        logger.info(f"Prescription {prescription_id} -> {status.value}")
        return Prescription(**serialize_document(result))
