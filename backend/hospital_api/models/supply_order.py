"""
Supply order models: pharmacy restock requests fulfilled by suppliers.
"""

from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime
from enum import Enum


class SupplyOrderStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


class SupplyOrderCreate(BaseModel):
    """Restock request raised by the pharmacy."""
    medication_id: str
    quantity: int = Field(..., gt=0)
    notes: Optional[str] = Field(None, max_length=500)


class SupplyOrder(BaseModel):
    """Supply order response model."""
    id: str = Field(..., alias="_id")
    medication_id: str
    medication_name: Optional[str] = None
    supplier_id: str
    pharmacist_id: Optional[str] = None
    quantity: int
    status: SupplyOrderStatus = SupplyOrderStatus.PENDING
    notes: Optional[str] = None
    requested_at: datetime
    approved_at: Optional[datetime] = None
    delivered_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        populate_by_name = True


class SupplyOrderStatusUpdate(BaseModel):
    status: SupplyOrderStatus
