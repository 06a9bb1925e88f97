"""Application Configuration"""

from typing import List
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    # Application
    APP_NAME: str = "RestoPOS Backend"
    APP_VERSION: str = "1.0.0"
    ENVIRONMENT: str = "development"
    DEBUG: bool = True
    API_V1_PREFIX: str = "/api/v1"

    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 8000

    # Database
    DATABASE_URL: str
    DB_POOL_SIZE: int = 5
    DB_MAX_OVERFLOW: int = 10
    DB_POOL_TIMEOUT: int = 30
    DB_POOL_RECYCLE: int = 3600

    # Security & Authentication
    SECRET_KEY: str
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 15
    REFRESH_TOKEN_EXPIRE_DAYS: int = 7

    # CORS (5173 = Vite default dev server)
    ALLOWED_ORIGINS: str = "http://localhost:3000,http://localhost:5173"
    ALLOWED_METHODS: str = "GET,POST,PUT,DELETE,PATCH,OPTIONS"
    ALLOWED_HEADERS: str = "*"

    # Restaurant clock: every business timestamp is local wall-clock in this zone
    TIMEZONE: str = "Asia/Kolkata"
    CURRENCY_SYMBOL: str = "₹"

    # Billing
    BILL_NUMBER_MAX_RETRIES: int = 3

    # Scheduled reports
    REPORT_SCHEDULER_ENABLED: bool = True
    REPORT_POLL_INTERVAL_SECONDS: int = 30
    REPORT_DEBOUNCE_MINUTES: int = 60
    REPORT_FALLBACK_EMAIL: str = "admin@restaurant.com"
    REPORTS_DIR: str = "./reports"

    # Email (Resend)
    RESEND_API_KEY: str = ""
    EMAIL_FROM: str = "RestoPOS <reports@resend.dev>"

    # Rate Limiting
    RATE_LIMIT_ENABLED: bool = True
    RATE_LIMIT_PER_MINUTE: int = 60

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "json"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True
    )

    @field_validator("ALLOWED_ORIGINS")
    @classmethod
    def parse_origins(cls, v: str) -> List[str]:
        """Parse comma-separated origins into a list"""
        return [origin.strip() for origin in v.split(",")]

    @field_validator("ALLOWED_METHODS")
    @classmethod
    def parse_methods(cls, v: str) -> List[str]:
        """Parse comma-separated methods into a list"""
        return [method.strip() for method in v.split(",")]

    @field_validator("TIMEZONE")
    @classmethod
    def resolve_timezone(cls, v: str) -> str:
        """Fail at startup if the host cannot resolve the restaurant zone"""
        try:
            ZoneInfo(v)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise ValueError(f"Unknown time zone: {v}") from exc
        return v

    @model_validator(mode="after")
    def check_report_timing(self) -> "Settings":
        # A slot must be polled at least twice but fire only once
        if self.REPORT_POLL_INTERVAL_SECONDS <= 0:
            raise ValueError("REPORT_POLL_INTERVAL_SECONDS must be positive")
        if self.REPORT_DEBOUNCE_MINUTES * 60 <= 2 * self.REPORT_POLL_INTERVAL_SECONDS:
            raise ValueError(
                "REPORT_DEBOUNCE_MINUTES must be much larger than REPORT_POLL_INTERVAL_SECONDS"
            )
        return self

    @property
    def is_development(self) -> bool:
        """Check if running in development environment"""
        return self.ENVIRONMENT.lower() == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production environment"""
        return self.ENVIRONMENT.lower() == "production"

    @property
    def is_sqlite(self) -> bool:
        return self.DATABASE_URL.startswith("sqlite")


# Global settings instance
settings = Settings()
