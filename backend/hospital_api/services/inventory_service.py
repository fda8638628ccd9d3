"""
Supplier medication inventory and pharmacy supply orders.
"""

from datetime import datetime, timezone
from typing import Optional, List

from ..database import Database, parse_object_id, serialize_document
from ..exceptions import NotFoundError
from ..models.inventory import Medication, MedicationCreate
from ..models.supply_order import SupplyOrder, SupplyOrderCreate, SupplyOrderStatus
from ..utils.logger import get_logger

logger = get_logger("inventory")

# Statuses an order may be in when it moves to the key status.
ORDER_ALLOWED_FROM = {
    SupplyOrderStatus.PENDING: [],
    SupplyOrderStatus.APPROVED: [SupplyOrderStatus.PENDING.value],
    SupplyOrderStatus.DELIVERED: [SupplyOrderStatus.APPROVED.value],
    SupplyOrderStatus.CANCELLED: [SupplyOrderStatus.PENDING.value],
}


class InventoryService:
    """Medications a supplier offers, with stock levels."""

    @classmethod
    async def list_medications(cls, supplier_id: str) -> List[Medication]:
        medications = Database.get_collection("medications")
        cursor = medications.find({"supplier_id": supplier_id}).sort("name", 1)
        return [Medication(**serialize_document(doc)) async for doc in cursor]

    @classmethod
    async def add_medication(cls, data: MedicationCreate, supplier_id: str) -> Medication:
        medications = Database.get_collection("medications")

        medication_doc = data.model_dump()
        medication_doc.update({
            "supplier_id": supplier_id,
            "created_at": datetime.now(timezone.utc),
            "updated_at": None
        })

        result = await medications.insert_one(medication_doc)
        medication_doc["_id"] = str(result.inserted_id)
        logger.info(f"Supplier {supplier_id} added medication {data.name}")
        return Medication(**medication_doc)

    @classmethod
    async def adjust_stock(cls, medication_id: str, supplier_id: str, delta: int) -> Optional[Medication]:
        """
        Add ``delta`` to stock. Returns None if the medication is not the
        supplier's; raises ValueError when stock would go negative.
        """
        oid = parse_object_id(medication_id)
        if oid is None:
            return None

        medications = Database.get_collection("medications")
        filter_query = {"_id": oid, "supplier_id": supplier_id}
        if delta < 0:
            filter_query["stock"] = {"$gte": -delta}

        result = await medications.find_one_and_update(
            filter_query,
            {"$inc": {"stock": delta}, "$set": {"updated_at": datetime.now(timezone.utc)}},
            return_document=True
        )
        if result:
            return Medication(**serialize_document(result))

        if await medications.find_one({"_id": oid, "supplier_id": supplier_id}):
            raise ValueError("Insufficient stock")
        return None

    @classmethod
    async def create_order(cls, data: SupplyOrderCreate, pharmacist_id: str) -> SupplyOrder:
        """Request a restock from the supplier of the medication."""
        oid = parse_object_id(data.medication_id)
        medications = Database.get_collection("medications")
        medication = await medications.find_one({"_id": oid}) if oid else None
        if not medication:
            raise NotFoundError("Medication", data.medication_id)

        orders = Database.get_collection("supply_orders")
        order_doc = {
            "medication_id": data.medication_id,
            "medication_name": medication["name"],
            "supplier_id": medication["supplier_id"],
            "pharmacist_id": pharmacist_id,
            "quantity": data.quantity,
            "status": SupplyOrderStatus.PENDING.value,
            "notes": data.notes,
            "requested_at": datetime.now(timezone.utc),
            "approved_at": None,
            "delivered_at": None,
            "updated_at": None
        }

        result = await orders.insert_one(order_doc)
        order_doc["_id"] = str(result.inserted_id)
        logger.info(f"Supply order {order_doc['_id']}: {data.quantity} x {medication['name']}")
        return SupplyOrder(**order_doc)

    @classmethod
    async def list_orders(
        cls,
        supplier_id: Optional[str] = None,
        status: Optional[SupplyOrderStatus] = None,
        limit: int = 100
    ) -> List[SupplyOrder]:
        """Orders, newest first."""
        orders = Database.get_collection("supply_orders")

        filter_query = {}
        if supplier_id:
            filter_query["supplier_id"] = supplier_id
        if status:
            filter_query["status"] = status.value

        cursor = orders.find(filter_query).sort("requested_at", -1).limit(limit)
        return [SupplyOrder(**serialize_document(doc)) async for doc in cursor]

    @classmethod
    async def update_order_status(
        cls,
        order_id: str,
        supplier_id: str,
        status: SupplyOrderStatus
    ) -> Optional[SupplyOrder]:
        """
        Move one of the supplier's orders along pending -> approved -> delivered.

        Pending orders may also be cancelled. Approving takes the ordered
        quantity out of the medication's stock; when there is not enough the
        order goes back to pending and ValueError is raised. Returns None when
        the order is not the supplier's.
        """
        oid = parse_object_id(order_id)
        if oid is None:
            return None

        now = datetime.now(timezone.utc)
        update_data = {"status": status.value, "updated_at": now}
        if status == SupplyOrderStatus.APPROVED:
            update_data["approved_at"] = now
        if status == SupplyOrderStatus.DELIVERED:
            update_data["delivered_at"] = now

        orders = Database.get_collection("supply_orders")
        result = await orders.find_one_and_update(
            {"_id": oid, "supplier_id": supplier_id, "status": {"$in": ORDER_ALLOWED_FROM[status]}},
            {"$set": update_data},
            return_document=True
        )
        if not result:
            existing = await orders.find_one({"_id": oid, "supplier_id": supplier_id}, {"status": 1})
            if existing:
                raise ValueError(f"Cannot move order from {existing['status']} to {status.value}")
            return None

        if status == SupplyOrderStatus.APPROVED:
            try:
                medication = await cls.adjust_stock(result["medication_id"], supplier_id, -result["quantity"])
            except ValueError:
                medication = None

            if not medication:
                await orders.update_one(
                    {"_id": oid, "status": SupplyOrderStatus.APPROVED.value},
                    {"$set": {"status": SupplyOrderStatus.PENDING.value, "approved_at": None, "updated_at": now}}
                )
                raise ValueError("Insufficient stock to approve this order")

        logger.info(f"Supply order {order_id} -> {status.value}")
        return SupplyOrder(**serialize_document(result))
