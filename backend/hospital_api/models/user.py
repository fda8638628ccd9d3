"""
User and authentication models.
"""

from pydantic import BaseModel, EmailStr, Field
from typing import Optional
from datetime import datetime
from enum import Enum


class UserRole(str, Enum):
    """User roles in the system."""
    ADMIN = "admin"
    DOCTOR = "doctor"
    RECEPTIONIST = "receptionist"
    LAB_TECH = "lab_tech"
    PHARMACIST = "pharmacist"
    SUPPLIER = "supplier"
    CAREGIVER = "caregiver"
    STAFF = "staff"  # legacy


class UserBase(BaseModel):
    """Base user model."""
    email: EmailStr
    full_name: str = Field(..., min_length=2, max_length=100)
    phone: Optional[str] = Field(None, max_length=20)
    role: UserRole = UserRole.CAREGIVER


class UserCreate(UserBase):
    """User creation model."""
    password: str = Field(..., min_length=6, max_length=72)


class UserUpdate(BaseModel):
    """Admin edit of an account (all fields optional)."""
    email: Optional[EmailStr] = None
    full_name: Optional[str] = Field(None, min_length=2, max_length=100)
    phone: Optional[str] = Field(None, max_length=20)
    role: Optional[UserRole] = None
    is_active: Optional[bool] = None


class UserLogin(BaseModel):
    """User login model."""
    email: EmailStr
    password: str


class User(UserBase):
    """User response model (no password)."""
    id: str = Field(..., alias="_id")
    is_active: bool = True
    created_at: datetime

    class Config:
        populate_by_name = True


class Token(BaseModel):
    """JWT token response."""
    access_token: str
    token_type: str = "bearer"
    dashboard: str
    user: User


class TokenData(BaseModel):
    """JWT token payload data."""
    user_id: Optional[str] = None
    email: Optional[str] = None
