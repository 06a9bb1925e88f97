#!/usr/bin/env python3
"""
Generate and send a report from the command line, outside the scheduler.

Usage:
  python scripts/run_report.py Daily_Sales
  python scripts/run_report.py Monthly --start 2025-03-01 --end 2025-03-15
  python scripts/run_report.py Weekly_Expenses --to owner@myrestaurant.in

Requires DATABASE_URL, SECRET_KEY and RESEND_API_KEY in .env (or export).
Recipients default to the stored report_emails setting.
"""
import argparse
import asyncio
import os
import sys
from datetime import date

from dotenv import load_dotenv

_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
load_dotenv(os.path.join(_root, ".env"))

# Ensure we don't skip (development, not test)
if os.getenv("ENVIRONMENT", "development") == "test":
    os.environ["ENVIRONMENT"] = "development"

# Add project root to path
sys.path.insert(0, _root)

from app.core.exceptions import AppError  # noqa: E402
from app.core.logging import setup_logging  # noqa: E402
from app.database import AsyncSessionLocal, close_db  # noqa: E402
from app.services.report_service import (  # noqa: E402
    ReportService,
    explicit_window,
    parse_report_type,
    window_for,
)
from app.services.settings_service import SettingsService  # noqa: E402
from app.utils.time import now_local  # noqa: E402


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Send a report now")
    parser.add_argument("report_type", help="Daily|Weekly|Monthly, optionally _Sales|_Expenses|_All")
    parser.add_argument("--start", type=date.fromisoformat, help="first local day (YYYY-MM-DD)")
    parser.add_argument("--end", type=date.fromisoformat, help="last local day, inclusive")
    parser.add_argument("--to", help="comma-separated recipients; overrides report_emails")
    args = parser.parse_args(argv)
    if (args.start is None) != (args.end is None):
        parser.error("--start and --end must be given together")
    return args


async def run(args: argparse.Namespace) -> int:
    cadence, category = parse_report_type(args.report_type)
    if args.start is not None:
        window = explicit_window(args.start, args.end)
    else:
        window = window_for(cadence, now_local())

    try:
        async with AsyncSessionLocal() as session:
            recipients = args.to or await SettingsService.get_report_recipients(session)
            result = await ReportService.dispatch(session, cadence, category, window, recipients)
    finally:
        await close_db()

    if result.file_path is None:
        print(f"No data for {result.report_type} between {window.start:%Y-%m-%d} and {window.end:%Y-%m-%d}")
        return 0
    if not result.sent:
        print(f"{result.report_type} generated at {result.file_path} but not delivered")
        return 1
    print(
        f"SUCCESS: {result.report_type} sent to {', '.join(result.recipients)} "
        f"({result.bill_count} bills, {result.expense_count} expenses, file {result.file_path})"
    )
    return 0


def main():
    setup_logging()
    args = parse_args()
    try:
        code = asyncio.run(run(args))
    except AppError as exc:
        print(f"FAILED: {exc.message}")
        code = 1
    sys.exit(code)


if __name__ == "__main__":
    main()
