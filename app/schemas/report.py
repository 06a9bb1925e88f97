"""Report Settings Schemas"""

from datetime import datetime, time
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_serializer


class ReportScheduleResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    report_type: str
    is_active: bool
    scheduled_time: time
    day_of_week: Optional[int] = None
    day_of_month: Optional[int] = None
    last_run: Optional[datetime] = None

    @field_serializer("scheduled_time")
    def serialize_time(self, value: time) -> str:
        return value.strftime("%H:%M")


class ReportScheduleUpdate(BaseModel):
    is_active: bool
    scheduled_time: str = Field(..., description="HH:mm, local time")
    day_of_week: Optional[int] = Field(None, ge=0, le=6, description="0=Sunday")
    day_of_month: Optional[int] = Field(None, ge=1, le=31)


class EmailSettings(BaseModel):
    emails: str = Field(..., description="Comma-separated recipient list")


class GeneralSettings(BaseModel):
    gst_enabled: bool = True
    gst_percentage: Decimal = Decimal("5")
    service_charge_enabled: bool = True
    service_charge_percentage: Decimal = Decimal("5")
    restaurant_name: str = "My Restaurant"
    restaurant_address: str = "123, Main Street"
    restaurant_phone: str = "+91-00000 00000"


class DispatchResultResponse(BaseModel):
    sent: bool
    report_type: str
    window_start: datetime
    window_end: datetime
    bill_count: int
    expense_count: int
    recipients: list[str] = []
