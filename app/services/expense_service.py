"""Expense Service - categories, expenses and spend summaries"""

import logging
from datetime import date, datetime, timedelta
from decimal import Decimal
from typing import List, Optional, Tuple

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import NotFoundError
from app.models.expense import Expense, ExpenseCategory
from app.schemas.expense import (
    CategoryExpenseSummary,
    ExpenseCategoryCreate,
    ExpenseCreate,
    ExpenseSummary,
)
from app.utils.time import now_local, to_local, start_of_day

logger = logging.getLogger(__name__)


def _date_filters(
    owner_id: int,
    start_date: Optional[date],
    end_date: Optional[date],
    category_id: Optional[int],
) -> list:
    filters = [Expense.user_id == owner_id]
    if start_date is not None:
        filters.append(Expense.date >= start_of_day(start_date))
    if end_date is not None:
        filters.append(Expense.date < start_of_day(end_date) + timedelta(days=1))
    if category_id is not None:
        filters.append(Expense.category_id == category_id)
    return filters


class ExpenseService:
    @staticmethod
    async def list_categories(db: AsyncSession, owner_id: int) -> List[ExpenseCategory]:
        result = await db.execute(
            select(ExpenseCategory)
            .where(ExpenseCategory.user_id == owner_id, ExpenseCategory.is_active.is_(True))
            .order_by(ExpenseCategory.name)
        )
        return list(result.scalars().all())

    @staticmethod
    async def create_category(
        db: AsyncSession,
        owner_id: int,
        data: ExpenseCategoryCreate,
    ) -> ExpenseCategory:
        category = ExpenseCategory(user_id=owner_id, name=data.name, is_active=True)
        db.add(category)
        await db.commit()
        await db.refresh(category)
        return category

    @staticmethod
    async def get_category(db: AsyncSession, owner_id: int, category_id: int) -> ExpenseCategory:
        result = await db.execute(
            select(ExpenseCategory).where(
                ExpenseCategory.id == category_id,
                ExpenseCategory.user_id == owner_id,
            )
        )
        category = result.scalar_one_or_none()
        if category is None:
            raise NotFoundError("Category not found")
        return category

    @staticmethod
    async def delete_category(db: AsyncSession, owner_id: int, category_id: int) -> None:
        category = await ExpenseService.get_category(db, owner_id, category_id)
        category.soft_delete()
        await db.commit()

    @staticmethod
    async def create_expense(db: AsyncSession, owner_id: int, data: ExpenseCreate) -> Expense:
        """
        Record an expense against one of the owner's categories.

        Raises:
            NotFoundError: category missing or owned by someone else
        """
        await ExpenseService.get_category(db, owner_id, data.category_id)

        spent_at = data.date or now_local()
        if spent_at.tzinfo is not None:
            spent_at = to_local(spent_at)

        expense = Expense(
            user_id=owner_id,
            date=spent_at,
            amount=data.amount,
            category_id=data.category_id,
            payment_method=data.payment_method,
            description=data.description,
            vendor_name=data.vendor_name,
            receipt_image_path=data.receipt_image_path,
        )
        db.add(expense)
        await db.commit()
        await db.refresh(expense)
        logger.info("Expense recorded", extra={"owner_id": owner_id, "expense_id": expense.id})
        return expense

    @staticmethod
    async def list_expenses(
        db: AsyncSession,
        owner_id: int,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        category_id: Optional[int] = None,
        page: int = 1,
        page_size: int = 20,
    ) -> Tuple[List[Expense], int]:
        filters = _date_filters(owner_id, start_date, end_date, category_id)
        total = (await db.execute(select(func.count(Expense.id)).where(*filters))).scalar() or 0
        result = await db.execute(
            select(Expense)
            .where(*filters)
            .order_by(Expense.date.desc(), Expense.id.desc())
            .offset((page - 1) * page_size)
            .limit(page_size)
        )
        return list(result.scalars().all()), total

    @staticmethod
    async def _sum(db: AsyncSession, filters: list) -> Decimal:
        result = await db.execute(select(func.coalesce(func.sum(Expense.amount), 0)).where(*filters))
        return Decimal(str(result.scalar() or 0))

    @staticmethod
    async def get_summary(
        db: AsyncSession,
        owner_id: int,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        category_id: Optional[int] = None,
        today: Optional[datetime] = None,
    ) -> ExpenseSummary:
        """Today's and this month's spend, the filtered total and the month's top five categories."""
        today = (today or now_local()).date()
        day_start = start_of_day(today)
        month_start = start_of_day(today.replace(day=1))
        next_month = start_of_day((today.replace(day=28) + timedelta(days=4)).replace(day=1))
        in_month = [Expense.date >= month_start, Expense.date < next_month]
        base = [Expense.user_id == owner_id]

        today_total = await ExpenseService._sum(
            db, base + [Expense.date >= day_start, Expense.date < day_start + timedelta(days=1)]
        )
        month_total = await ExpenseService._sum(db, base + in_month)
        total_filtered = await ExpenseService._sum(
            db, _date_filters(owner_id, start_date, end_date, category_id)
        )

        amount = func.sum(Expense.amount)
        result = await db.execute(
            select(ExpenseCategory.name, amount)
            .join(ExpenseCategory, Expense.category_id == ExpenseCategory.id)
            .where(*base, *in_month)
            .group_by(ExpenseCategory.name)
            .order_by(amount.desc())
            .limit(5)
        )
        top = [
            CategoryExpenseSummary(category_name=name, total_amount=Decimal(str(total)))
            for name, total in result.all()
        ]

        return ExpenseSummary(
            today_total=today_total,
            month_total=month_total,
            total_filtered=total_filtered,
            top_categories=top,
        )

    @staticmethod
    async def delete_expense(db: AsyncSession, owner_id: int, expense_id: int) -> None:
        result = await db.execute(
            select(Expense).where(Expense.id == expense_id, Expense.user_id == owner_id)
        )
        expense = result.scalar_one_or_none()
        if expense is None:
            raise NotFoundError("Expense not found")
        await db.delete(expense)
        await db.commit()

    @staticmethod
    async def expenses_between(db: AsyncSession, start: datetime, end: datetime) -> List[Expense]:
        """Every owner's expenses in the local half-open interval ``[start, end)``."""
        result = await db.execute(
            select(Expense)
            .where(Expense.date >= start, Expense.date < end)
            .order_by(Expense.date)
        )
        return list(result.scalars().all())
