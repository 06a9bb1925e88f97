"""Bill Service - sale recording and daily token allocation"""

import logging
from datetime import date, datetime, timedelta
from typing import List, Optional, Tuple

from sqlalchemy import select, func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.core.exceptions import ConflictError, NotFoundError
from app.models.billing import Bill, BillItem
from app.schemas.bill import BillCreate
from app.utils.time import now_local, to_local, start_of_day

logger = logging.getLogger(__name__)


def bill_number(local_date: date, token: int) -> str:
    """``bill_number(date(2025, 3, 7), 5) == "BILL-20250307-005"``"""
    return f"BILL-{local_date:%Y%m%d}-{token:03d}"


class BillService:
    """Service layer for bills"""

    @staticmethod
    async def next_token(db: AsyncSession, owner_id: int, local_date: date) -> int:
        """Count of the owner's bills on ``local_date`` plus one."""
        day_start = start_of_day(local_date)
        result = await db.execute(
            select(func.count(Bill.id)).where(
                Bill.user_id == owner_id,
                Bill.created_at >= day_start,
                Bill.created_at < day_start + timedelta(days=1),
            )
        )
        return (result.scalar() or 0) + 1

    @staticmethod
    async def create_bill(db: AsyncSession, owner_id: int, data: BillCreate) -> Bill:
        """
        Record a sale with its line items.

        Token allocation is read-count-then-insert; the unique
        (user_id, bill_number) constraint rejects a duplicate produced by a
        concurrent submission, in which case the token is recomputed.

        Raises:
            ConflictError: no free token after BILL_NUMBER_MAX_RETRIES attempts
        """
        created_at = to_local(data.date) if data.date is not None else now_local()
        local_date = created_at.date()

        for attempt in range(1, settings.BILL_NUMBER_MAX_RETRIES + 1):
            token = await BillService.next_token(db, owner_id, local_date)
            bill = Bill(
                user_id=owner_id,
                token_number=token,
                bill_number=bill_number(local_date, token),
                subtotal=data.subtotal,
                gst=data.gst,
                service_charge=data.service,
                total=data.total,
                payment_method=data.payment_method,
                platform=data.platform,
                customer_name=data.customer_name,
                customer_phone=data.customer_phone,
                created_at=created_at,
                items=[
                    BillItem(
                        product_id=item.id,
                        product_name=item.name,
                        price=item.price,
                        quantity=item.quantity,
                        total=item.total,
                    )
                    for item in data.items
                ],
            )
            db.add(bill)
            try:
                await db.commit()
            except IntegrityError:
                await db.rollback()
                logger.warning(
                    "Bill number collision, retrying",
                    extra={"owner_id": owner_id, "token": token, "attempt": attempt},
                )
                continue

            await db.refresh(bill)
            logger.info(
                "Bill created",
                extra={"owner_id": owner_id, "bill_number": bill.bill_number},
            )
            return bill

        raise ConflictError("Could not allocate a bill number, please retry")

    @staticmethod
    async def get_bill(db: AsyncSession, owner_id: int, bill_id: int) -> Bill:
        result = await db.execute(
            select(Bill).where(Bill.id == bill_id, Bill.user_id == owner_id)
        )
        bill = result.scalar_one_or_none()
        if bill is None:
            raise NotFoundError("Bill not found")
        return bill

    @staticmethod
    async def list_bills(
        db: AsyncSession,
        owner_id: int,
        page: int = 1,
        page_size: int = 20,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> Tuple[List[Bill], int]:
        """Newest first. Dates are local calendar days, both inclusive."""
        filters = [Bill.user_id == owner_id]
        if start_date is not None:
            filters.append(Bill.created_at >= start_of_day(start_date))
        if end_date is not None:
            filters.append(Bill.created_at < start_of_day(end_date) + timedelta(days=1))

        total = (await db.execute(select(func.count(Bill.id)).where(*filters))).scalar() or 0
        result = await db.execute(
            select(Bill)
            .where(*filters)
            .order_by(Bill.created_at.desc(), Bill.id.desc())
            .offset((page - 1) * page_size)
            .limit(page_size)
        )
        return list(result.scalars().all()), total

    @staticmethod
    async def bills_between(db: AsyncSession, start: datetime, end: datetime) -> List[Bill]:
        """Every owner's bills in the local half-open interval ``[start, end)``."""
        result = await db.execute(
            select(Bill)
            .where(Bill.created_at >= start, Bill.created_at < end)
            .order_by(Bill.created_at)
        )
        return list(result.scalars().all())
