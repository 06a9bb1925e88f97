from datetime import date
from typing import Any, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.api import deps
from app.models.user import User
from app.services.dashboard_service import DashboardService
from app.schemas.dashboard import DashboardStats
from app.schemas.responses import SuccessResponse

router = APIRouter()


@router.get("/stats", response_model=SuccessResponse[DashboardStats])
async def get_stats(
    start_date: Optional[date] = Query(None, description="Local date, defaults to today"),
    end_date: Optional[date] = Query(None, description="Local date, defaults to today"),
    page: int = Query(1, ge=1, description="Page of recent orders"),
    page_size: int = Query(10, ge=1, le=100),
    db: AsyncSession = Depends(deps.get_db),
    current_user: User = Depends(deps.get_current_user),
) -> Any:
    """
    Sales stats for a local date range, with trends against the
    preceding period of the same length.
    """
    stats = await DashboardService.get_stats(
        db, current_user.id, start_date, end_date, page=page, page_size=page_size
    )
    return SuccessResponse(data=stats)


@router.get("/today", response_model=SuccessResponse[DashboardStats])
async def get_today(
    db: AsyncSession = Depends(deps.get_db),
    current_user: User = Depends(deps.get_current_user),
) -> Any:
    stats = await DashboardService.get_stats(db, current_user.id)
    return SuccessResponse(data=stats)
