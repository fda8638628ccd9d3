"""
Supplier medication inventory models.
"""

from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime


class MedicationCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None
    unit_price: float = Field(..., ge=0)
    stock: int = Field(default=0, ge=0)


class Medication(MedicationCreate):
    id: str = Field(..., alias="_id")
    supplier_id: str
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        populate_by_name = True


class StockAdjustment(BaseModel):
    """Positive to receive stock, negative to issue it."""
    delta: int
