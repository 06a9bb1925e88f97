from datetime import date
from typing import Any, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api import deps
from app.models.user import User
from app.services.bill_service import BillService
from app.schemas.bill import BillCreate, BillResponse
from app.schemas.responses import SuccessResponse, PaginatedResponse, PaginationMeta

router = APIRouter()


@router.post("", response_model=SuccessResponse[BillResponse], status_code=status.HTTP_201_CREATED)
async def create_bill(
    bill_in: BillCreate,
    db: AsyncSession = Depends(deps.get_db),
    current_user: User = Depends(deps.get_current_user),
) -> Any:
    """
    Record a sale. The token and bill number are assigned by the server
    from the owner's bill count for the local day.
    """
    bill = await BillService.create_bill(db, current_user.id, bill_in)
    return SuccessResponse(data=BillResponse.model_validate(bill), message="Bill created")


@router.get("", response_model=PaginatedResponse[BillResponse])
async def list_bills(
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
    start_date: Optional[date] = Query(None, description="Local date, inclusive"),
    end_date: Optional[date] = Query(None, description="Local date, inclusive"),
    db: AsyncSession = Depends(deps.get_db),
    current_user: User = Depends(deps.get_current_user),
) -> Any:
    bills, total = await BillService.list_bills(
        db,
        current_user.id,
        page=page,
        page_size=page_size,
        start_date=start_date,
        end_date=end_date,
    )
    return PaginatedResponse(
        data=[BillResponse.model_validate(b) for b in bills],
        meta=PaginationMeta.build(page, page_size, total),
    )


@router.get("/{bill_id}", response_model=SuccessResponse[BillResponse])
async def get_bill(
    bill_id: int,
    db: AsyncSession = Depends(deps.get_db),
    current_user: User = Depends(deps.get_current_user),
) -> Any:
    bill = await BillService.get_bill(db, current_user.id, bill_id)
    return SuccessResponse(data=BillResponse.model_validate(bill))
