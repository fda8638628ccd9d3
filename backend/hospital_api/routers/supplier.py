"""
Supplier inventory and supply order routes.
"""

from typing import Optional, List
from fastapi import APIRouter, HTTPException, status, Depends, Query

from ..models.inventory import Medication, MedicationCreate, StockAdjustment
from ..models.supply_order import SupplyOrder, SupplyOrderStatus, SupplyOrderStatusUpdate
from ..models.user import User
from ..services.inventory_service import InventoryService
from .dependencies import require_supplier

router = APIRouter(prefix="/supplier", tags=["Supplier"])


@router.get("/medications", response_model=List[Medication], response_model_by_alias=False)
async def list_medications(current_user: User = Depends(require_supplier)):
    """The calling supplier's medications, by name."""
    return await InventoryService.list_medications(current_user.id)


@router.post("/medications", response_model=Medication, response_model_by_alias=False, status_code=status.HTTP_201_CREATED)
async def add_medication(
    data: MedicationCreate,
    current_user: User = Depends(require_supplier)
):
    return await InventoryService.add_medication(data, current_user.id)


@router.patch("/medications/{medication_id}/stock", response_model=Medication, response_model_by_alias=False)
async def adjust_stock(
    medication_id: str,
    adjustment: StockAdjustment,
    current_user: User = Depends(require_supplier)
):
    try:
        medication = await InventoryService.adjust_stock(medication_id, current_user.id, adjustment.delta)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )

    if not medication:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Medication not found"
        )
    return medication


@router.get("/orders", response_model=List[SupplyOrder], response_model_by_alias=False)
async def list_orders(
    status_filter: Optional[SupplyOrderStatus] = Query(None, alias="status"),
    current_user: User = Depends(require_supplier)
):
    """Supply orders addressed to the calling supplier, newest first."""
    return await InventoryService.list_orders(supplier_id=current_user.id, status=status_filter)


@router.patch("/orders/{order_id}", response_model=SupplyOrder, response_model_by_alias=False)
async def update_order_status(
    order_id: str,
    request: SupplyOrderStatusUpdate,
    current_user: User = Depends(require_supplier)
):
    """Approve (deducts stock), deliver or decline an order."""
    try:
        order = await InventoryService.update_order_status(order_id, current_user.id, request.status)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )

    if not order:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Order not found"
        )
    return order
