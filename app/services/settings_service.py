"""Settings Service - restaurant-wide key/value settings"""

from decimal import Decimal, InvalidOperation
from typing import Dict, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.models.reporting import GlobalSetting
from app.schemas.report import GeneralSettings

REPORT_EMAILS_KEY = "report_emails"


def _as_bool(raw: Optional[str], default: bool) -> bool:
    if raw is None:
        return default
    return raw.strip().lower() == "true"


def _as_decimal(raw: Optional[str], default: Decimal) -> Decimal:
    if raw is None:
        return default
    try:
        return Decimal(raw)
    except InvalidOperation:
        return default


class SettingsService:
    @staticmethod
    async def get_value(db: AsyncSession, key: str) -> Optional[str]:
        setting = await db.get(GlobalSetting, key)
        return setting.value if setting is not None else None

    @staticmethod
    async def set_value(db: AsyncSession, key: str, value: str, auto_commit: bool = True) -> None:
        setting = await db.get(GlobalSetting, key)
        if setting is None:
            setting = GlobalSetting(key=key)
            db.add(setting)
        setting.value = value
        if auto_commit:
            await db.commit()

    @staticmethod
    async def get_report_emails(db: AsyncSession) -> str:
        """Stored recipient list, verbatim (empty when never set)."""
        return await SettingsService.get_value(db, REPORT_EMAILS_KEY) or ""

    @staticmethod
    async def set_report_emails(db: AsyncSession, emails: str) -> None:
        await SettingsService.set_value(db, REPORT_EMAILS_KEY, emails)

    @staticmethod
    async def get_report_recipients(db: AsyncSession) -> str:
        """Recipient list used for dispatch; the fallback address when unset or blank."""
        emails = await SettingsService.get_report_emails(db)
        return emails if emails.strip() else settings.REPORT_FALLBACK_EMAIL

    @staticmethod
    async def get_general(db: AsyncSession) -> GeneralSettings:
        result = await db.execute(select(GlobalSetting))
        stored: Dict[str, str] = {row.key: row.value for row in result.scalars().all()}
        defaults = GeneralSettings()
        return GeneralSettings(
            gst_enabled=_as_bool(stored.get("gst_enabled"), defaults.gst_enabled),
            gst_percentage=_as_decimal(stored.get("gst_percentage"), defaults.gst_percentage),
            service_charge_enabled=_as_bool(
                stored.get("service_charge_enabled"), defaults.service_charge_enabled
            ),
            service_charge_percentage=_as_decimal(
                stored.get("service_charge_percentage"), defaults.service_charge_percentage
            ),
            restaurant_name=stored.get("restaurant_name", defaults.restaurant_name),
            restaurant_address=stored.get("restaurant_address", defaults.restaurant_address),
            restaurant_phone=stored.get("restaurant_phone", defaults.restaurant_phone),
        )

    @staticmethod
    async def update_general(db: AsyncSession, data: GeneralSettings) -> GeneralSettings:
        values = {
            "gst_enabled": str(data.gst_enabled).lower(),
            "gst_percentage": str(data.gst_percentage),
            "service_charge_enabled": str(data.service_charge_enabled).lower(),
            "service_charge_percentage": str(data.service_charge_percentage),
            "restaurant_name": data.restaurant_name,
            "restaurant_address": data.restaurant_address,
            "restaurant_phone": data.restaurant_phone,
        }
        for key, value in values.items():
            await SettingsService.set_value(db, key, value, auto_commit=False)
        await db.commit()
        return await SettingsService.get_general(db)
