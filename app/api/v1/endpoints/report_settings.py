from datetime import date
from typing import Any, List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.api import deps
from app.core.exceptions import ValidationError
from app.models.user import User
from app.services.report_service import ReportService, explicit_window, parse_report_type, window_for
from app.services.schedule_service import ScheduleService
from app.services.settings_service import SettingsService
from app.schemas.report import (
    DispatchResultResponse,
    EmailSettings,
    GeneralSettings,
    ReportScheduleResponse,
    ReportScheduleUpdate,
)
from app.schemas.responses import SuccessResponse
from app.utils.time import now_local

router = APIRouter()


@router.get("/schedules", response_model=SuccessResponse[List[ReportScheduleResponse]])
async def list_schedules(
    db: AsyncSession = Depends(deps.get_db),
    current_user: User = Depends(deps.get_current_user),
) -> Any:
    schedules = await ScheduleService.list_schedules(db)
    return SuccessResponse(data=[ReportScheduleResponse.model_validate(s) for s in schedules])


@router.put("/schedules/{schedule_id}", response_model=SuccessResponse[ReportScheduleResponse])
async def update_schedule(
    schedule_id: int,
    schedule_in: ReportScheduleUpdate,
    db: AsyncSession = Depends(deps.get_db),
    current_user: User = Depends(deps.get_current_user),
) -> Any:
    """
    Edit a schedule. ``last_run`` is cleared so the new time can fire today
    even if the old one already did.
    """
    schedule = await ScheduleService.update_schedule(db, schedule_id, schedule_in)
    return SuccessResponse(data=ReportScheduleResponse.model_validate(schedule), message="Schedule updated")


@router.get("/emails", response_model=SuccessResponse[EmailSettings])
async def get_emails(
    db: AsyncSession = Depends(deps.get_db),
    current_user: User = Depends(deps.get_current_user),
) -> Any:
    emails = await SettingsService.get_report_emails(db)
    return SuccessResponse(data=EmailSettings(emails=emails))


@router.put("/emails", response_model=SuccessResponse[EmailSettings])
async def update_emails(
    settings_in: EmailSettings,
    db: AsyncSession = Depends(deps.get_db),
    current_user: User = Depends(deps.get_current_user),
) -> Any:
    await SettingsService.set_report_emails(db, settings_in.emails)
    return SuccessResponse(data=settings_in, message="Report recipients updated")


@router.post("/run/{report_type}", response_model=SuccessResponse[DispatchResultResponse])
async def run_report(
    report_type: str,
    start_date: Optional[date] = Query(None, description="Local date; overrides the cadence window"),
    end_date: Optional[date] = Query(None, description="Local date, inclusive"),
    db: AsyncSession = Depends(deps.get_db),
    current_user: User = Depends(deps.get_current_user),
) -> Any:
    """
    Generate and send a report now.

    ``report_type`` is ``Daily``, ``Weekly`` or ``Monthly``, optionally
    suffixed with ``_Sales``, ``_Expenses`` or ``_All`` (the default).
    Without explicit dates the window is the cadence's period to date.
    """
    cadence, category = parse_report_type(report_type)
    if (start_date is None) != (end_date is None):
        raise ValidationError("start_date and end_date must be given together")
    if start_date is not None:
        window = explicit_window(start_date, end_date)
    else:
        window = window_for(cadence, now_local())

    recipients = await SettingsService.get_report_recipients(db)
    result = await ReportService.dispatch(db, cadence, category, window, recipients)

    if result.sent:
        message = f"{report_type} report triggered successfully"
    elif result.file_path is None:
        message = f"No data found for {report_type} report period"
    else:
        message = f"{report_type} report generated but not delivered"
    return SuccessResponse(
        data=DispatchResultResponse(
            sent=result.sent,
            report_type=result.report_type,
            window_start=window.start,
            window_end=window.end,
            bill_count=result.bill_count,
            expense_count=result.expense_count,
            recipients=result.recipients,
        ),
        message=message,
    )


@router.get("/general", response_model=SuccessResponse[GeneralSettings])
async def get_general_settings(
    db: AsyncSession = Depends(deps.get_db),
    current_user: User = Depends(deps.get_current_user),
) -> Any:
    return SuccessResponse(data=await SettingsService.get_general(db))


@router.put("/general", response_model=SuccessResponse[GeneralSettings])
async def update_general_settings(
    settings_in: GeneralSettings,
    db: AsyncSession = Depends(deps.get_db),
    current_user: User = Depends(deps.get_current_user),
) -> Any:
    updated = await SettingsService.update_general(db, settings_in)
    return SuccessResponse(data=updated, message="Settings updated")
