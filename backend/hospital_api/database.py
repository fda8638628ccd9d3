"""
MongoDB async database connection using Motor.
Provides database instance and collection access.
"""

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from bson import ObjectId
from bson.errors import InvalidId
from typing import Optional, Any

from .config import get_settings
from .utils.logger import get_logger

settings = get_settings()
logger = get_logger("database")


class Database:
    """MongoDB database connection manager."""

    client: Optional[AsyncIOMotorClient] = None
    db: Optional[AsyncIOMotorDatabase] = None

    @classmethod
    async def connect(cls):
        """Connect to MongoDB."""
        cls.client = AsyncIOMotorClient(settings.MONGODB_URL)
        cls.db = cls.client[settings.DATABASE_NAME]

        # Verify connection
        await cls.client.admin.command('ping')
        logger.info(f"Connected to MongoDB: {settings.DATABASE_NAME}")

        await cls.create_indexes()

    @classmethod
    async def disconnect(cls):
        """Disconnect from MongoDB."""
        if cls.client:
            cls.client.close()
            cls.client = None
            cls.db = None
            logger.info("Disconnected from MongoDB")

    @classmethod
    async def create_indexes(cls):
        """Create database indexes, including the uniqueness guards for queue numbers and codes."""
        if cls.db is None:
            return

        await cls.db.users.create_index("email", unique=True)
        await cls.db.users.create_index("role")

        await cls.db.patients.create_index("full_name")
        await cls.db.patients.create_index("caregiver_id")

        await cls.db.appointments.create_index("patient_id")
        await cls.db.appointments.create_index("doctor_id")
        await cls.db.appointments.create_index("scheduled_for")
        await cls.db.appointments.create_index("check_in_code", unique=True, sparse=True)

        # One queue number per local day
        await cls.db.check_ins.create_index(
            [("queue_date", 1), ("queue_number", 1)],
            unique=True
        )
        await cls.db.check_ins.create_index("appointment_id")

        await cls.db.prescriptions.create_index("status")
        await cls.db.lab_orders.create_index("status")
        await cls.db.medications.create_index("supplier_id")
        await cls.db.supply_orders.create_index([("supplier_id", 1), ("requested_at", -1)])

        logger.info("Database indexes created")

    @classmethod
    def get_collection(cls, name: str):
        """Get a collection by name."""
        if cls.db is None:
            raise RuntimeError("Database not connected")
        return cls.db[name]


def parse_object_id(value: Any) -> Optional[ObjectId]:
    """Convert a string id to ObjectId, or None when it is not a valid id."""
    if isinstance(value, ObjectId):
        return value
    try:
        return ObjectId(value)
    except (InvalidId, TypeError):
        return None


def serialize_document(document: dict) -> dict:
    """Stringify the document's ObjectId so it can feed a response model."""
    document["_id"] = str(document["_id"])
    return document


# Convenience function for dependency injection
async def get_database() -> AsyncIOMotorDatabase:
    """FastAPI dependency for database access."""
    if Database.db is None:
        await Database.connect()
    return Database.db
