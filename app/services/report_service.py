"""Report Service - report windows, CSV export, summaries and delivery"""

import csv
import io
import logging
from collections import OrderedDict
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from decimal import Decimal
from pathlib import Path
from typing import List, NamedTuple, Optional, Sequence, Tuple

from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.core.exceptions import ValidationError
from app.models.billing import Bill
from app.models.enums import ReportCadence, ReportCategory
from app.models.expense import Expense
from app.services.bill_service import BillService
from app.services.email_service import send_email_async, split_recipients
from app.services.expense_service import ExpenseService
from app.utils.time import start_of_day, to_absolute, dotnet_weekday

logger = logging.getLogger(__name__)

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"
CASH_SALE_METHODS = {"cash"}
CASH_EXPENSE_METHODS = {"cash", "petty cash"}


class ReportWindow(NamedTuple):
    """Half-open local wall-clock interval ``[start, end)``"""
    start: datetime
    end: datetime


@dataclass
class DispatchResult:
    cadence: ReportCadence
    category: ReportCategory
    window: ReportWindow
    sent: bool = False
    bill_count: int = 0
    expense_count: int = 0
    file_path: Optional[Path] = None
    recipients: List[str] = field(default_factory=list)
    delivered: List[str] = field(default_factory=list)

    @property
    def report_type(self) -> str:
        return f"{self.cadence.value}_{self.category.value}"


def window_for(cadence: ReportCadence, now_local: datetime) -> ReportWindow:
    """
    Cumulative-to-date window ending at the next local midnight.

    Daily starts today, Weekly on the most recent Sunday (today when today is
    Sunday), Monthly on the first of the month.
    """
    today = now_local.date()
    end = start_of_day(today + timedelta(days=1))
    if cadence is ReportCadence.DAILY:
        start = start_of_day(today)
    elif cadence is ReportCadence.WEEKLY:
        start = start_of_day(today - timedelta(days=dotnet_weekday(today)))
    elif cadence is ReportCadence.MONTHLY:
        start = start_of_day(today.replace(day=1))
    else:
        raise ValueError(f"Unknown report cadence: {cadence!r}")
    return ReportWindow(start, end)


def explicit_window(start_date: date, end_date: date) -> ReportWindow:
    """Window covering the local days ``start_date..end_date`` inclusive."""
    if end_date < start_date:
        raise ValidationError("end_date must not be before start_date")
    return ReportWindow(start_of_day(start_date), start_of_day(end_date + timedelta(days=1)))


def parse_report_type(report_type: str) -> Tuple[ReportCadence, ReportCategory]:
    """
    ``"Weekly"`` -> (WEEKLY, ALL), ``"Daily_Sales"`` -> (DAILY, SALES).

    Matching is case-insensitive. Raises ValidationError for anything else.
    """
    cadence_part, _, category_part = report_type.partition("_")
    cadences = {c.value.lower(): c for c in ReportCadence}
    categories = {c.value.lower(): c for c in ReportCategory}

    cadence = cadences.get(cadence_part.lower())
    category = categories.get((category_part or ReportCategory.ALL.value).lower())
    if cadence is None or category is None:
        raise ValidationError(f"Invalid report type: {report_type}")
    return cadence, category


def report_filename(cadence: ReportCadence, category: ReportCategory, window: ReportWindow) -> str:
    return (
        f"{cadence.value}_{category.value}_Report_"
        f"{window.start:%Y%m%d}_{window.end:%Y%m%d}.csv"
    )


def format_amount(amount: Decimal) -> str:
    return f"{settings.CURRENCY_SYMBOL}{amount:,.2f}"


def _total(values) -> Decimal:
    return sum(values, Decimal("0"))


def render_csv(
    bills: Sequence[Bill],
    expenses: Sequence[Expense],
    category: ReportCategory,
) -> str:
    """
    Render the export.

    Sales section: title row, header, one row per bill, blank, total, blank.
    Expenses section: title row, header, one row per expense, blank, total.
    """
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")

    if category.includes_sales:
        writer.writerow(["SALES TRANSACTIONS"])
        writer.writerow(
            ["BillNumber", "Date", "Platform", "PaymentMethod", "Subtotal", "GST", "ServiceCharge", "Total"]
        )
        for bill in bills:
            writer.writerow([
                bill.bill_number,
                bill.created_at.strftime(TIMESTAMP_FORMAT),
                bill.platform,
                bill.payment_method,
                bill.subtotal,
                bill.gst,
                bill.service_charge,
                bill.total,
            ])
        writer.writerow([])
        writer.writerow(["Total Sales", "", "", _total(b.total for b in bills)])
        writer.writerow([])

    if category.includes_expenses:
        writer.writerow(["EXPENSES"])
        writer.writerow(["Date", "Category", "Description", "Vendor", "PaymentMethod", "Amount"])
        for expense in expenses:
            writer.writerow([
                expense.date.strftime(TIMESTAMP_FORMAT),
                expense.category_name,
                expense.description or "",
                expense.vendor_name or "",
                expense.payment_method,
                expense.amount,
            ])
        writer.writerow([])
        writer.writerow(["Total Expenses", "", "", "", "", _total(e.amount for e in expenses)])

    return buffer.getvalue()


def build_summary(
    cadence: ReportCadence,
    category: ReportCategory,
    window: ReportWindow,
    bills: Sequence[Bill],
    expenses: Sequence[Expense],
) -> str:
    """Plain-text email body with sales/expense totals and cash position."""
    cash_sales = _total(
        b.total for b in bills if b.payment_method.strip().lower() in CASH_SALE_METHODS
    )
    cash_expenses = _total(
        e.amount for e in expenses if e.payment_method.strip().lower() in CASH_EXPENSE_METHODS
    )

    lines = [
        f"Attached is the {cadence.value} {category.value} report for the period "
        f"{window.start:%Y-%m-%d} to {window.end:%Y-%m-%d}.",
        "",
    ]

    if category.includes_sales:
        platforms: "OrderedDict[str, List[Bill]]" = OrderedDict()
        for bill in bills:
            platforms.setdefault(bill.platform, []).append(bill)

        lines.append("Sales Summary:")
        lines.append(f"Total Sales: {format_amount(_total(b.total for b in bills))}")
        lines.append(f"Cash Sales: {format_amount(cash_sales)}")
        lines.append("Platform Breakdown:")
        for platform, platform_bills in platforms.items():
            lines.append(
                f"{platform}: {len(platform_bills)} orders, "
                f"Total: {format_amount(_total(b.total for b in platform_bills))}"
            )
        lines.append("")

    if category.includes_expenses:
        lines.append("Expense Summary:")
        lines.append(f"Total Expenses: {format_amount(_total(e.amount for e in expenses))}")
        lines.append(f"Cash Expenses: {format_amount(cash_expenses)}")
        lines.append("")

    if category is ReportCategory.ALL:
        lines.append("-----------------------------")
        lines.append(f"Net Cash in Hand: {format_amount(cash_sales - cash_expenses)}")

    return "\n".join(lines) + "\n"


class ReportService:
    """Builds a report for a window and mails it to every recipient"""

    @staticmethod
    async def dispatch(
        db: AsyncSession,
        cadence: ReportCadence,
        category: ReportCategory,
        window: ReportWindow,
        recipients: str,
    ) -> DispatchResult:
        """
        Generate and send one report.

        An empty window is a silent no-op: nothing is written and nothing is
        sent. Delivery errors (EmailDeliveryError) propagate to the caller.
        """
        result = DispatchResult(cadence=cadence, category=category, window=window)
        logger.info(
            "Generating %s %s report for %s to %s (UTC %s to %s)",
            cadence.value,
            category.value,
            window.start.strftime("%Y-%m-%d %H:%M"),
            window.end.strftime("%Y-%m-%d %H:%M"),
            to_absolute(window.start).strftime("%Y-%m-%d %H:%M"),
            to_absolute(window.end).strftime("%Y-%m-%d %H:%M"),
        )

        bills: List[Bill] = []
        expenses: List[Expense] = []
        if category.includes_sales:
            bills = await BillService.bills_between(db, window.start, window.end)
        if category.includes_expenses:
            expenses = await ExpenseService.expenses_between(db, window.start, window.end)

        result.bill_count = len(bills)
        result.expense_count = len(expenses)
        if not bills and not expenses:
            logger.info("No data found for %s report period", result.report_type)
            return result

        reports_dir = Path(settings.REPORTS_DIR)
        reports_dir.mkdir(parents=True, exist_ok=True)
        file_path = reports_dir / report_filename(cadence, category, window)
        with open(file_path, "w", newline="", encoding="utf-8") as handle:
            handle.write(render_csv(bills, expenses, category))
        result.file_path = file_path

        subject = f"{cadence.value} {category.value} Report"
        body = build_summary(cadence, category, window, bills, expenses)
        result.recipients = split_recipients(recipients)
        for email in result.recipients:
            if await send_email_async(email, subject, body, file_path):
                result.delivered.append(email)

        # sent only when every recipient actually received the report
        result.sent = bool(result.recipients) and result.delivered == result.recipients
        if not result.sent:
            logger.warning(
                "Report %s generated but not delivered",
                result.report_type,
                extra={"recipients": len(result.recipients), "delivered": len(result.delivered)},
            )
            return result

        logger.info(
            "Report %s delivered",
            result.report_type,
            extra={"recipients": len(result.recipients), "file": file_path.name},
        )
        return result
