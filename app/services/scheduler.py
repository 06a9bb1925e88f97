"""Background loop that fires due report schedules"""

import asyncio
import logging
from datetime import datetime, timedelta
from typing import Callable, Dict, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.database import AsyncSessionLocal
from app.models.reporting import ReportSchedule
from app.services.report_service import ReportService, window_for
from app.services.schedule_service import ScheduleService, should_fire
from app.services.settings_service import SettingsService
from app.utils.time import now_local as local_clock

logger = logging.getLogger(__name__)


class ReportScheduler:
    """
    Polls the active schedules every ``poll_interval`` seconds.

    Every tick uses a single ``now_local`` snapshot. A failing schedule is
    logged and not retried until its next scheduled occurrence; a failing
    tick is logged and the loop sleeps on.
    """

    def __init__(
        self,
        session_factory: Callable[[], AsyncSession] = AsyncSessionLocal,
        poll_interval: Optional[float] = None,
        debounce: Optional[timedelta] = None,
    ):
        self.session_factory = session_factory
        self.poll_interval = (
            poll_interval if poll_interval is not None else settings.REPORT_POLL_INTERVAL_SECONDS
        )
        self.debounce = (
            debounce if debounce is not None else timedelta(minutes=settings.REPORT_DEBOUNCE_MINUTES)
        )
        if self.debounce.total_seconds() <= 2 * self.poll_interval:
            raise ValueError("debounce must be longer than two poll intervals")
        self._task: Optional[asyncio.Task] = None
        # schedule id -> scheduled minute whose dispatch failed
        self._failed: Dict[int, datetime] = {}

    async def tick(self, now_local: Optional[datetime] = None) -> int:
        """Evaluate every active schedule once. Returns how many fired."""
        now_local = (now_local or local_clock()).replace(second=0, microsecond=0)
        logger.debug("Report scheduler heartbeat at %s", now_local.strftime("%Y-%m-%d %H:%M"))

        async with self.session_factory() as session:
            schedules = await ScheduleService.list_active(session)
            recipients = await SettingsService.get_report_recipients(session)

            fired = 0
            for schedule in schedules:
                if not should_fire(schedule, now_local, self.debounce):
                    continue
                if self._failed.get(schedule.id) == now_local:
                    continue
                if await self._fire(schedule, now_local, recipients):
                    fired += 1
        return fired

    async def _fire(
        self,
        schedule: ReportSchedule,
        now_local: datetime,
        recipients: str,
    ) -> bool:
        schedule_id = schedule.id
        report_type = schedule.report_type
        logger.info("Triggering schedule %s (%s)", schedule_id, report_type)
        try:
            async with self.session_factory() as session:
                await ReportService.dispatch(
                    session,
                    schedule.cadence,
                    schedule.category,
                    window_for(schedule.cadence, now_local),
                    recipients,
                )
            await ScheduleService.mark_fired(self.session_factory, schedule_id, now_local)
        except Exception:
            logger.exception("Scheduled report %s failed", report_type)
            self._failed[schedule_id] = now_local
            return False
        self._failed.pop(schedule_id, None)
        logger.info("Schedule %s last_run set to %s", schedule_id, now_local.isoformat())
        return True

    async def run(self) -> None:
        logger.info(
            "Report scheduler started",
            extra={"poll_interval": self.poll_interval},
        )
        while True:
            try:
                await self.tick()
            except Exception:
                logger.exception("Report scheduler tick failed")
            await asyncio.sleep(self.poll_interval)

    def start(self) -> asyncio.Task:
        if self._task is None or self._task.done():
            self._task = asyncio.create_task(self.run(), name="report-scheduler")
        return self._task

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
        logger.info("Report scheduler stopped")
