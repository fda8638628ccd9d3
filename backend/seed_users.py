"""
Seed one account per role for local development.

Usage (from the backend/ directory):
    python seed_users.py [password]
"""

import asyncio
import sys

from hospital_api.database import Database
from hospital_api.models.user import UserCreate, UserRole
from hospital_api.services.auth_service import AuthService

DEFAULT_PASSWORD = "ChangeMe123"


async def seed_users(password: str):
    await Database.connect()
    try:
        for role in UserRole:
            email = f"{role.value.replace('_', '.')}@gch-hospital.org"
            try:
                user = await AuthService.create_user(UserCreate(
                    email=email,
                    full_name=f"Demo {role.value.replace('_', ' ').title()}",
                    role=role,
                    password=password
                ))
            except ValueError:
                print(f"{email:<30} | exists")
                continue
            print(f"{user.email:<30} | {user.role.value:<12} | {user.id}")
    finally:
        await Database.disconnect()


if __name__ == "__main__":
    if sys.platform == 'win32':
        asyncio.set_event_loop_policy(asyncio.WindowsSelectorEventLoopPolicy())
    asyncio.run(seed_users(sys.argv[1] if len(sys.argv) > 1 else DEFAULT_PASSWORD))
