"""
Authentication service with JWT token management.

The role is always read from the users collection; the JWT only carries the
user id and email.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional, List, Iterable
from jose import JWTError, jwt
from passlib.context import CryptContext
from pymongo.errors import DuplicateKeyError

from ..config import get_settings
from ..database import Database, parse_object_id
from ..models.user import UserCreate, UserUpdate, User, Token, TokenData
from ..rbac import get_dashboard_for_role
from ..utils.logger import get_logger

settings = get_settings()
logger = get_logger("auth")
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


class AuthService:
    """Authentication and user management service."""

    @staticmethod
    def verify_password(plain_password: str, hashed_password: str) -> bool:
        """Verify password against hash."""
        return pwd_context.verify(plain_password, hashed_password)

    @staticmethod
    def get_password_hash(password: str) -> str:
        """Hash a password."""
        return pwd_context.hash(password)

    @staticmethod
    def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
        """Create JWT access token."""
        to_encode = data.copy()
        expire = datetime.now(timezone.utc) + (
            expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
        )
        to_encode.update({"exp": expire})
        return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)

    @staticmethod
    def decode_token(token: str) -> Optional[TokenData]:
        """Decode and validate JWT token."""
        try:
            payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
        except JWTError:
            return None
        user_id = payload.get("sub")
        if user_id is None:
            return None
        return TokenData(user_id=user_id, email=payload.get("email"))

    @staticmethod
    def _to_user(doc: dict) -> User:
        return User(
            _id=str(doc["_id"]),
            email=doc["email"],
            full_name=doc["full_name"],
            phone=doc.get("phone"),
            role=doc["role"],
            is_active=doc.get("is_active", True),
            created_at=doc["created_at"]
        )

    @classmethod
    async def get_user_by_email(cls, email: str) -> Optional[dict]:
        """Get user by email from database."""
        users = Database.get_collection("users")
        return await users.find_one({"email": email.lower()})

    @classmethod
    async def get_user_by_id(cls, user_id: str) -> Optional[dict]:
        """Get user by ID from database."""
        oid = parse_object_id(user_id)
        if oid is None:
            return None
        users = Database.get_collection("users")
        return await users.find_one({"_id": oid})

    @classmethod
    async def create_user(cls, user_data: UserCreate) -> User:
        """Create a new user."""
        users = Database.get_collection("users")

        existing = await cls.get_user_by_email(user_data.email)
        if existing:
            raise ValueError("User with this email already exists")

        user_doc = {
            "email": user_data.email.lower(),
            "full_name": user_data.full_name,
            "phone": user_data.phone,
            "role": user_data.role.value,
            "hashed_password": cls.get_password_hash(user_data.password),
            "is_active": True,
            "created_at": datetime.now(timezone.utc)
        }

        result = await users.insert_one(user_doc)
        user_doc["_id"] = result.inserted_id
        logger.info(f"Created {user_doc['role']} account {user_doc['email']}")

        return cls._to_user(user_doc)

    @classmethod
    async def authenticate_user(cls, email: str, password: str) -> Optional[User]:
        """Authenticate user with email and password."""
        user = await cls.get_user_by_email(email)
        if not user:
            return None
        if not cls.verify_password(password, user["hashed_password"]):
            return None
        if not user.get("is_active", True):
            return None
        return cls._to_user(user)

    @classmethod
    async def login(cls, email: str, password: str) -> Optional[Token]:
        """Login user and return access token with the role's landing route."""
        user = await cls.authenticate_user(email, password)
        if not user:
            logger.info(f"Failed login for {email}")
            return None

        access_token = cls.create_access_token(
            data={
                "sub": user.id,
                "email": user.email
            }
        )

        return Token(
            access_token=access_token,
            dashboard=get_dashboard_for_role(user.role),
            user=user
        )

    @classmethod
    async def get_current_user(cls, token: str) -> Optional[User]:
        """Get current user from token."""
        token_data = cls.decode_token(token)
        if not token_data:
            return None

        user = await cls.get_user_by_id(token_data.user_id)
        if not user:
            return None

        return cls._to_user(user)

    @classmethod
    async def set_role(cls, user_id: str, role: str) -> Optional[User]:
        """Change a user's role (admin action)."""
        oid = parse_object_id(user_id)
        if oid is None:
            return None
        users = Database.get_collection("users")
        result = await users.find_one_and_update(
            {"_id": oid},
            {"$set": {"role": role, "updated_at": datetime.now(timezone.utc)}},
            return_document=True
        )
        if not result:
            return None
        logger.info(f"Role of user {user_id} changed to {role}")
        return cls._to_user(result)

    @classmethod
    async def list_users(cls, roles: Optional[Iterable[str]] = None, limit: int = 200) -> List[User]:
        """Accounts, newest first, optionally restricted to some roles."""
        users = Database.get_collection("users")
        filter_query = {}
        if roles is not None:
            filter_query["role"] = {"$in": list(roles)}

        cursor = users.find(filter_query).sort("created_at", -1).limit(limit)
        return [cls._to_user(doc) async for doc in cursor]

    @classmethod
    async def update_user(cls, user_id: str, data: UserUpdate) -> Optional[User]:
        """Apply an admin edit. Raises ValueError if the new email is taken."""
        oid = parse_object_id(user_id)
        if oid is None:
            return None

        update_data = data.model_dump(exclude_none=True)
        if "role" in update_data:
            update_data["role"] = data.role.value
        if "email" in update_data:
            update_data["email"] = update_data["email"].lower()
            holder = await cls.get_user_by_email(update_data["email"])
            if holder and holder["_id"] != oid:
                raise ValueError("User with this email already exists")
        update_data["updated_at"] = datetime.now(timezone.utc)

        users = Database.get_collection("users")
        try:
            result = await users.find_one_and_update(
                {"_id": oid},
                {"$set": update_data},
                return_document=True
            )
        except DuplicateKeyError:
            raise ValueError("User with this email already exists") from None
        if not result:
            return None
        logger.info(f"Updated account {user_id}: {sorted(update_data)}")
        return cls._to_user(result)

    @classmethod
    async def delete_user(cls, user_id: str) -> bool:
        oid = parse_object_id(user_id)
        if oid is None:
            return False

        users = Database.get_collection("users")
        result = await users.delete_one({"_id": oid})
        if result.deleted_count:
            logger.info(f"Deleted account {user_id}")
        return bool(result.deleted_count)
