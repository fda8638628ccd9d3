"""
Laboratory routes.
"""

from typing import Optional, List
from fastapi import APIRouter, HTTPException, status, Depends, Query

from ..models.lab import LabOrder, LabOrderStatus, LabOrderStatusUpdate, LabResultEntry
from ..models.user import User
from ..services.lab_service import LabService
from .dependencies import require_lab, require_permission

router = APIRouter(prefix="/lab", tags=["Laboratory"])


@router.get("/orders", response_model=List[LabOrder], response_model_by_alias=False)
async def list_orders(
    status_filter: Optional[LabOrderStatus] = Query(None, alias="status"),
    current_user: User = Depends(require_lab)
):
    return await LabService.list_orders(status=status_filter)


@router.patch("/orders/{order_id}/status", response_model=LabOrder, response_model_by_alias=False)
async def update_order_status(
    order_id: str,
    request: LabOrderStatusUpdate,
    current_user: User = Depends(require_permission("process_tests"))
):
    """Mark a sample collected, start processing, or cancel."""
    try:
        order = await LabService.update_status(order_id, request.status, current_user.id)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )

    if not order:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Lab order not found"
        )
    return order


@router.post("/orders/{order_id}/results", response_model=LabOrder, response_model_by_alias=False)
async def record_results(
    order_id: str,
    entry: LabResultEntry,
    current_user: User = Depends(require_permission("enter_results"))
):
    """Record results and complete the order."""
    order = await LabService.record_results(order_id, entry, current_user.id)
    if not order:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Lab order not found"
        )
    return order
