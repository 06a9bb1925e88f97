"""Centralized Enum Definitions"""

import enum


class ReportCadence(str, enum.Enum):
    """Recurrence class of a report schedule"""
    DAILY = "Daily"
    WEEKLY = "Weekly"
    MONTHLY = "Monthly"


class ReportCategory(str, enum.Enum):
    """Which records a report covers. Persisted schedules only use SALES/EXPENSES."""
    SALES = "Sales"
    EXPENSES = "Expenses"
    ALL = "All"

    @property
    def includes_sales(self) -> bool:
        return self in (ReportCategory.SALES, ReportCategory.ALL)

    @property
    def includes_expenses(self) -> bool:
        return self in (ReportCategory.EXPENSES, ReportCategory.ALL)


SCHEDULED_CATEGORIES = (ReportCategory.SALES, ReportCategory.EXPENSES)


class DayOfWeek(int, enum.Enum):
    """Days of the week, Sunday-first numbering used by the UI"""
    SUNDAY = 0
    MONDAY = 1
    TUESDAY = 2
    WEDNESDAY = 3
    THURSDAY = 4
    FRIDAY = 5
    SATURDAY = 6


def enum_values(enum_cls) -> list:
    """Persist enum values ("Daily") rather than member names ("DAILY")"""
    return [member.value for member in enum_cls]
