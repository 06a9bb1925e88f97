from datetime import date
from typing import Any, List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api import deps
from app.models.user import User
from app.services.expense_service import ExpenseService
from app.schemas.expense import (
    ExpenseCategoryCreate,
    ExpenseCategoryResponse,
    ExpenseCreate,
    ExpenseResponse,
    ExpenseSummary,
)
from app.schemas.responses import SuccessResponse, PaginatedResponse, PaginationMeta

router = APIRouter()


@router.get("/categories", response_model=SuccessResponse[List[ExpenseCategoryResponse]])
async def list_categories(
    db: AsyncSession = Depends(deps.get_db),
    current_user: User = Depends(deps.get_current_user),
) -> Any:
    categories = await ExpenseService.list_categories(db, current_user.id)
    return SuccessResponse(data=[ExpenseCategoryResponse.model_validate(c) for c in categories])


@router.post(
    "/categories",
    response_model=SuccessResponse[ExpenseCategoryResponse],
    status_code=status.HTTP_201_CREATED,
)
async def create_category(
    category_in: ExpenseCategoryCreate,
    db: AsyncSession = Depends(deps.get_db),
    current_user: User = Depends(deps.get_current_user),
) -> Any:
    category = await ExpenseService.create_category(db, current_user.id, category_in)
    return SuccessResponse(data=ExpenseCategoryResponse.model_validate(category), message="Category created")


@router.delete("/categories/{category_id}", response_model=SuccessResponse)
async def delete_category(
    category_id: int,
    db: AsyncSession = Depends(deps.get_db),
    current_user: User = Depends(deps.get_current_user),
) -> Any:
    """Soft delete; existing expenses keep their category."""
    await ExpenseService.delete_category(db, current_user.id, category_id)
    return SuccessResponse(message="Category deleted")


@router.post("", response_model=SuccessResponse[ExpenseResponse], status_code=status.HTTP_201_CREATED)
async def create_expense(
    expense_in: ExpenseCreate,
    db: AsyncSession = Depends(deps.get_db),
    current_user: User = Depends(deps.get_current_user),
) -> Any:
    expense = await ExpenseService.create_expense(db, current_user.id, expense_in)
    return SuccessResponse(data=ExpenseResponse.model_validate(expense), message="Expense recorded")


@router.get("", response_model=PaginatedResponse[ExpenseResponse])
async def list_expenses(
    start_date: Optional[date] = Query(None, description="Local date, inclusive"),
    end_date: Optional[date] = Query(None, description="Local date, inclusive"),
    category_id: Optional[int] = Query(None),
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
    db: AsyncSession = Depends(deps.get_db),
    current_user: User = Depends(deps.get_current_user),
) -> Any:
    """Newest first."""
    expenses, total = await ExpenseService.list_expenses(
        db,
        current_user.id,
        start_date=start_date,
        end_date=end_date,
        category_id=category_id,
        page=page,
        page_size=page_size,
    )
    return PaginatedResponse(
        data=[ExpenseResponse.model_validate(e) for e in expenses],
        meta=PaginationMeta.build(page, page_size, total),
    )


@router.get("/summary", response_model=SuccessResponse[ExpenseSummary])
async def get_summary(
    start_date: Optional[date] = Query(None),
    end_date: Optional[date] = Query(None),
    category_id: Optional[int] = Query(None),
    db: AsyncSession = Depends(deps.get_db),
    current_user: User = Depends(deps.get_current_user),
) -> Any:
    """
    Today's and this month's spend, the total for the given filters and
    the month's five biggest categories.
    """
    summary = await ExpenseService.get_summary(
        db, current_user.id, start_date=start_date, end_date=end_date, category_id=category_id
    )
    return SuccessResponse(data=summary)


@router.delete("/{expense_id}", response_model=SuccessResponse)
async def delete_expense(
    expense_id: int,
    db: AsyncSession = Depends(deps.get_db),
    current_user: User = Depends(deps.get_current_user),
) -> Any:
    await ExpenseService.delete_expense(db, current_user.id, expense_id)
    return SuccessResponse(message="Expense deleted")
