"""
Pharmacy routes: dispensing and restock requests.
"""

from typing import Optional, List
from fastapi import APIRouter, HTTPException, status, Depends, Query

from ..exceptions import NotFoundError
from ..models.prescription import Prescription, PrescriptionStatus, PrescriptionStatusUpdate
from ..models.supply_order import SupplyOrder, SupplyOrderCreate, SupplyOrderStatus
from ..models.user import User
from ..services.inventory_service import InventoryService
from ..services.prescription_service import PrescriptionService
from .dependencies import require_pharmacy, require_permission

router = APIRouter(prefix="/pharmacy", tags=["Pharmacy"])


@router.get("/prescriptions", response_model=List[Prescription], response_model_by_alias=False)
async def list_prescriptions(
    status_filter: Optional[PrescriptionStatus] = Query(None, alias="status"),
    current_user: User = Depends(require_pharmacy)
):
    return await PrescriptionService.list_prescriptions(status=status_filter)


@router.patch("/prescriptions/{prescription_id}", response_model=Prescription, response_model_by_alias=False)
async def update_prescription(
    prescription_id: str,
    request: PrescriptionStatusUpdate,
    current_user: User = Depends(require_permission("dispense_medications"))
):
    """Dispense or cancel a prescription."""
    prescription = await PrescriptionService.update_status(prescription_id, request.status, current_user.id)
    if not prescription:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Prescription not found"
        )
    return prescription


@router.get("/supply-orders", response_model=List[SupplyOrder], response_model_by_alias=False)
async def list_supply_orders(
    status_filter: Optional[SupplyOrderStatus] = Query(None, alias="status"),
    current_user: User = Depends(require_pharmacy)
):
    return await InventoryService.list_orders(status=status_filter)


@router.post("/supply-orders", response_model=SupplyOrder, response_model_by_alias=False, status_code=status.HTTP_201_CREATED)
async def request_restock(
    data: SupplyOrderCreate,
    current_user: User = Depends(require_pharmacy)
):
    """Ask the medication's supplier for more stock."""
    try:
        return await InventoryService.create_order(data, current_user.id)
    except NotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(e)
        )
