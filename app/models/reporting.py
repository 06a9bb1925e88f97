"""Report Scheduling & Global Settings Models"""

from sqlalchemy import Column, Boolean, DateTime, Enum, Integer, String, Text, Time, UniqueConstraint

from app.database import Base
from app.models.base import BaseModel
from app.models.enums import ReportCadence, ReportCategory, enum_values


class ReportSchedule(BaseModel):
    """
    One row per (cadence, category) pair; six rows in total, seeded at startup.

    ``last_run`` is local wall-clock time of the last successful dispatch and is
    cleared whenever the schedule is edited.
    """
    __tablename__ = "report_schedules"
    __table_args__ = (
        UniqueConstraint("cadence", "category", name="uq_report_schedules_cadence_category"),
    )

    cadence = Column(
        Enum(ReportCadence, name="report_cadence", values_callable=enum_values),
        nullable=False,
    )
    category = Column(
        Enum(ReportCategory, name="report_category", values_callable=enum_values),
        nullable=False,
    )
    is_active = Column(Boolean, default=True, nullable=False)
    scheduled_time = Column(Time, nullable=False)
    day_of_week = Column(Integer, nullable=True)
    day_of_month = Column(Integer, nullable=True)
    last_run = Column(DateTime, nullable=True)

    @property
    def report_type(self) -> str:
        """Wire name used by the admin UI, e.g. ``Daily_Sales``"""
        return f"{self.cadence.value}_{self.category.value}"

    def __repr__(self) -> str:
        return f"<ReportSchedule {self.report_type} at {self.scheduled_time}>"


class GlobalSetting(Base):
    """Plain key/value store for restaurant-wide settings"""
    __tablename__ = "global_settings"

    key = Column(String(100), primary_key=True)
    value = Column(Text, nullable=False, default="")

    def __repr__(self) -> str:
        return f"<GlobalSetting {self.key}>"
