"""Models Package - Export all models for easy imports"""

from app.models.base import BaseModel, OwnedMixin, StatusMixin
from app.models.enums import ReportCadence, ReportCategory, DayOfWeek, SCHEDULED_CATEGORIES
from app.models.user import User, RefreshToken
from app.models.catalog import Product, ProductCategory
from app.models.billing import Bill, BillItem
from app.models.expense import Expense, ExpenseCategory
from app.models.reporting import ReportSchedule, GlobalSetting


__all__ = [
    # Base classes
    "BaseModel",
    "OwnedMixin",
    "StatusMixin",

    # Enums
    "ReportCadence",
    "ReportCategory",
    "DayOfWeek",
    "SCHEDULED_CATEGORIES",

    # Users & auth
    "User",
    "RefreshToken",

    # Catalog
    "Product",
    "ProductCategory",

    # Billing
    "Bill",
    "BillItem",

    # Expenses
    "Expense",
    "ExpenseCategory",

    # Reporting
    "ReportSchedule",
    "GlobalSetting",
]
