"""
Patient management service.
"""

import re
from datetime import datetime, timezone
from typing import Optional, List

from ..database import Database, parse_object_id, serialize_document
from ..models.patient import Patient, PatientCreate, PatientUpdate
from ..utils.logger import get_logger

logger = get_logger("patients")

MIN_SEARCH_LENGTH = 2
SEARCH_LIMIT = 15


class PatientService:
    """Patient management service."""

    @staticmethod
    def _to_storage(data: dict) -> dict:
        # BSON has no date type
        dob = data.get("date_of_birth")
        if dob is not None and not isinstance(dob, datetime):
            data["date_of_birth"] = datetime(dob.year, dob.month, dob.day)
        return data

    @staticmethod
    def _from_storage(doc: dict) -> Patient:
        serialize_document(doc)
        if isinstance(doc.get("date_of_birth"), datetime):
            doc["date_of_birth"] = doc["date_of_birth"].date()
        return Patient(**doc)

    @classmethod
    async def create_patient(cls, patient_data: PatientCreate) -> Patient:
        """Register a new patient."""
        patients = Database.get_collection("patients")

        patient_doc = cls._to_storage(patient_data.model_dump())
        patient_doc["created_at"] = datetime.now(timezone.utc)
        patient_doc["updated_at"] = None

        result = await patients.insert_one(patient_doc)
        patient_doc["_id"] = result.inserted_id
        logger.info(f"Registered patient {result.inserted_id}")

        return cls._from_storage(patient_doc)

    @classmethod
    async def get_patient(cls, patient_id: str) -> Optional[Patient]:
        """Get patient by ID."""
        oid = parse_object_id(patient_id)
        if oid is None:
            return None

        patients = Database.get_collection("patients")
        patient = await patients.find_one({"_id": oid})
        if not patient:
            return None
        return cls._from_storage(patient)

    @classmethod
    async def update_patient(cls, patient_id: str, updates: PatientUpdate) -> Optional[Patient]:
        """Update patient record."""
        oid = parse_object_id(patient_id)
        if oid is None:
            return None

        patients = Database.get_collection("patients")
        update_data = cls._to_storage(updates.model_dump(exclude_none=True))
        update_data["updated_at"] = datetime.now(timezone.utc)

        result = await patients.find_one_and_update(
            {"_id": oid},
            {"$set": update_data},
            return_document=True
        )
        if not result:
            return None
        return cls._from_storage(result)

    @classmethod
    async def list_patients(cls, limit: int = 100) -> List[Patient]:
        """All patients by name."""
        patients = Database.get_collection("patients")
        cursor = patients.find({}).sort("full_name", 1).limit(limit)
        return [cls._from_storage(patient) async for patient in cursor]

    @classmethod
    async def search_patients(
        cls,
        query: Optional[str] = None,
        caregiver_id: Optional[str] = None,
        limit: int = SEARCH_LIMIT
    ) -> List[Patient]:
        """
        Search patients by name or phone (case-insensitive).

        Queries shorter than two characters return nothing unless the search is
        scoped to a caregiver.
        """
        patients = Database.get_collection("patients")
        filter_query = {}

        if query:
            query = query.strip()
        if query and len(query) >= MIN_SEARCH_LENGTH:
            pattern = re.escape(query)
            filter_query["$or"] = [
                {"full_name": {"$regex": pattern, "$options": "i"}},
                {"phone": {"$regex": pattern, "$options": "i"}}
            ]
        elif not caregiver_id:
            return []

        if caregiver_id:
            filter_query["caregiver_id"] = caregiver_id

        cursor = patients.find(filter_query).sort("full_name", 1).limit(limit)

        results = []
        async for patient in cursor:
            results.append(cls._from_storage(patient))
        return results
