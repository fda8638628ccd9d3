import os

# Keep test runs from writing log files.
os.environ.setdefault("LOG_DIR", "")

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from mongomock_motor import AsyncMongoMockClient

from hospital_api.database import Database
from hospital_api.main import app
from hospital_api.models.patient import PatientCreate
from hospital_api.models.user import UserCreate, UserRole
from hospital_api.services.auth_service import AuthService
from hospital_api.services.patient_service import PatientService

TEST_PASSWORD = "P@ssw0rd1"


@pytest_asyncio.fixture
async def db():
    client = AsyncMongoMockClient()
    Database.client = client
    Database.db = client["gch_test"]
    await Database.create_indexes()
    yield Database.db
    Database.client = None
    Database.db = None


@pytest_asyncio.fixture
async def client(db):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as http:
        yield http


@pytest.fixture
def make_user(db):
    """Create a user with the given role; returns (user, auth headers)."""
    counter = {"n": 0}

    async def _make(role: UserRole, email: str = None):
        counter["n"] += 1
        user = await AuthService.create_user(UserCreate(
            email=email or f"{role.value}{counter['n']}@example.com",
            full_name=f"Test {role.value}",
            role=role,
            password=TEST_PASSWORD
        ))
        token = AuthService.create_access_token({"sub": user.id, "email": user.email})
        return user, {"Authorization": f"Bearer {token}"}

    return _make


@pytest.fixture
def make_patient(db):
    async def _make(full_name: str = "Amina Yusuf", **fields):
        return await PatientService.create_patient(PatientCreate(full_name=full_name, **fields))

    return _make
