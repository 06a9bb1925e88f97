"""Schedule Service - report schedule evaluation and maintenance"""

import logging
from datetime import datetime, time, timedelta
from typing import Callable, List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import NotFoundError, ValidationError
from app.models.enums import DayOfWeek, ReportCadence, SCHEDULED_CATEGORIES
from app.models.reporting import ReportSchedule
from app.schemas.report import ReportScheduleUpdate
from app.utils.time import dotnet_weekday

logger = logging.getLogger(__name__)

DEFAULT_SCHEDULE_TIME = time(22, 0)


def parse_schedule_time(value: str) -> time:
    """``"22:00"`` -> ``time(22, 0)``. Seconds, when given, are dropped."""
    parts = value.strip().split(":")
    try:
        if len(parts) not in (2, 3):
            raise ValueError(value)
        hour, minute = int(parts[0]), int(parts[1])
        if len(parts) == 3:
            int(parts[2])
        return time(hour, minute)
    except ValueError:
        raise ValidationError("Invalid time format. Use HH:mm")


def should_fire(schedule: ReportSchedule, now_local: datetime, debounce: timedelta) -> bool:
    """
    Decide whether ``schedule`` is due at ``now_local``.

    1. hour:minute of now equals the scheduled hour:minute
    2. not within ``debounce`` of ``last_run``
    3. cadence gate: weekly on its day of week (Sunday=0), monthly on its
       day of month (1 when unset)
    """
    scheduled = schedule.scheduled_time
    if (now_local.hour, now_local.minute) != (scheduled.hour, scheduled.minute):
        return False

    if schedule.last_run is not None and now_local - schedule.last_run < debounce:
        return False

    cadence = schedule.cadence
    if cadence is ReportCadence.DAILY:
        return True
    if cadence is ReportCadence.WEEKLY:
        return schedule.day_of_week is not None and dotnet_weekday(now_local) == schedule.day_of_week
    if cadence is ReportCadence.MONTHLY:
        return now_local.day == (schedule.day_of_month or 1)
    raise ValueError(f"Unknown report cadence: {cadence!r}")


class ScheduleService:
    @staticmethod
    async def list_schedules(db: AsyncSession) -> List[ReportSchedule]:
        result = await db.execute(select(ReportSchedule).order_by(ReportSchedule.id))
        return list(result.scalars().all())

    @staticmethod
    async def list_active(db: AsyncSession) -> List[ReportSchedule]:
        result = await db.execute(
            select(ReportSchedule)
            .where(ReportSchedule.is_active.is_(True))
            .order_by(ReportSchedule.id)
        )
        return list(result.scalars().all())

    @staticmethod
    async def ensure_default_schedules(db: AsyncSession) -> int:
        """
        Insert whichever of the six (cadence, category) rows are missing.

        Daily rows start active, the rest inactive; all at 22:00. Weekly rows
        default to Sunday and monthly rows to the 1st. Returns rows created.
        """
        result = await db.execute(select(ReportSchedule.cadence, ReportSchedule.category))
        existing = {(cadence, category) for cadence, category in result.all()}

        created = 0
        for cadence in ReportCadence:
            for category in SCHEDULED_CATEGORIES:
                if (cadence, category) in existing:
                    continue
                db.add(
                    ReportSchedule(
                        cadence=cadence,
                        category=category,
                        is_active=cadence is ReportCadence.DAILY,
                        scheduled_time=DEFAULT_SCHEDULE_TIME,
                        day_of_week=DayOfWeek.SUNDAY.value if cadence is ReportCadence.WEEKLY else None,
                        day_of_month=1 if cadence is ReportCadence.MONTHLY else None,
                    )
                )
                created += 1

        if created:
            await db.commit()
            logger.info("Seeded %d report schedules", created)
        return created

    @staticmethod
    async def update_schedule(
        db: AsyncSession,
        schedule_id: int,
        data: ReportScheduleUpdate,
    ) -> ReportSchedule:
        """
        Apply an edit and clear ``last_run`` so the new settings can fire on
        their next matching minute.

        Raises:
            ValidationError: unparseable time (nothing is changed)
            NotFoundError: unknown schedule id
        """
        scheduled_time = parse_schedule_time(data.scheduled_time)

        schedule = await db.get(ReportSchedule, schedule_id)
        if schedule is None:
            raise NotFoundError("Schedule not found")

        schedule.is_active = data.is_active
        schedule.scheduled_time = scheduled_time
        schedule.day_of_week = data.day_of_week
        schedule.day_of_month = data.day_of_month
        schedule.last_run = None
        await db.commit()
        await db.refresh(schedule)
        logger.info("Report schedule updated", extra={"schedule_id": schedule_id})
        return schedule

    @staticmethod
    async def mark_fired(
        session_factory: Callable[[], AsyncSession],
        schedule_id: int,
        fired_at: datetime,
    ) -> Optional[ReportSchedule]:
        """
        Record a successful dispatch.

        Re-reads the row in a fresh session so edits made since the tick
        started are not overwritten; only ``last_run`` is written.
        """
        async with session_factory() as session:
            schedule = await session.get(ReportSchedule, schedule_id)
            if schedule is None:
                logger.warning("Schedule %s vanished before last_run update", schedule_id)
                return None
            schedule.last_run = fired_at
            await session.commit()
            return schedule
