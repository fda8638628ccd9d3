"""
Laboratory order service.
"""

from datetime import datetime, timezone
from typing import Optional, List

from ..database import Database, parse_object_id, serialize_document
from ..exceptions import NotFoundError
from ..models.lab import LabOrder, LabOrderCreate, LabOrderStatus, LabResultEntry
from ..utils.logger import get_logger
from .patient_service import PatientService

logger = get_logger("lab")


class LabService:
    """Lab order lifecycle: ordered by doctors, processed by lab technicians."""

    @classmethod
    async def create_orders(cls, data: LabOrderCreate, doctor_id: str) -> List[LabOrder]:
        """Create one order per requested test."""
        if not await PatientService.get_patient(data.patient_id):
            raise NotFoundError("Patient", data.patient_id)

        lab_orders = Database.get_collection("lab_orders")
        created_at = datetime.now(timezone.utc)

        orders = []
        for test_name in data.test_names:
            order_doc = {
                "patient_id": data.patient_id,
                "doctor_id": doctor_id,
                "test_name": test_name,
                "priority": data.priority.value,
                "clinical_notes": data.clinical_notes,
                "special_instructions": data.special_instructions,
                "status": LabOrderStatus.PENDING.value,
                "created_at": created_at
            }
            result = await lab_orders.insert_one(order_doc)
            order_doc["_id"] = str(result.inserted_id)
            orders.append(LabOrder(**order_doc))

        logger.info(f"{len(orders)} lab order(s) for patient {data.patient_id} by doctor {doctor_id}")
        return orders

    @classmethod
    async def list_orders(
        cls,
        status: Optional[LabOrderStatus] = None,
        patient_id: Optional[str] = None,
        limit: int = 100
    ) -> List[LabOrder]:
        lab_orders = Database.get_collection("lab_orders")

        filter_query = {}
        if status:
            filter_query["status"] = status.value
        if patient_id:
            filter_query["patient_id"] = patient_id

        cursor = lab_orders.find(filter_query).sort("created_at", -1).limit(limit)
        return [LabOrder(**serialize_document(doc)) async for doc in cursor]

    @classmethod
    async def _update(cls, order_id: str, update_data: dict) -> Optional[LabOrder]:
        oid = parse_object_id(order_id)
        if oid is None:
            return None

        lab_orders = Database.get_collection("lab_orders")
        result = await lab_orders.find_one_and_update(
            {"_id": oid},
            {"$set": update_data},
            return_document=True
        )
        if not result:
            return None
        return LabOrder(**serialize_document(result))

    @classmethod
    async def update_status(cls, order_id: str, status: LabOrderStatus, lab_tech_id: str) -> Optional[LabOrder]:
        if status == LabOrderStatus.COMPLETED:
            raise ValueError("Record results to complete a lab order")

        update_data = {"status": status.value}
        if status == LabOrderStatus.IN_PROGRESS:
            update_data["processing_started_at"] = datetime.now(timezone.utc)
            update_data["processed_by"] = lab_tech_id

        order = await cls._update(order_id, update_data)
        if order:
            logger.info(f"Lab order {order_id} -> {status.value}")
        return order

    @classmethod
    async def record_results(cls, order_id: str, entry: LabResultEntry, lab_tech_id: str) -> Optional[LabOrder]:
        """Store results and complete the order."""
        order = await cls._update(order_id, {
            "status": LabOrderStatus.COMPLETED.value,
            "results": entry.results,
            "result_notes": entry.result_notes,
            "abnormal_findings": entry.abnormal_findings,
            "processed_by": lab_tech_id,
            "completed_at": datetime.now(timezone.utc)
        })
        if order:
            logger.info(f"Results recorded for lab order {order_id}")
        return order
