"""
Environment configuration for the reporting engine.
Uses Pydantic's settings management to handle environment variables
with proper type validation and default values.
"""

from functools import lru_cache
from pathlib import Path
from typing import Annotated, List, Optional, Union

from dotenv import load_dotenv
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

# Load environment variables from .env file if it exists
env_path = Path('.') / '.env'
load_dotenv(dotenv_path=env_path)


def _split_csv(value: Union[str, List[str]]) -> List[str]:
    if isinstance(value, str):
        return [item.strip() for item in value.split(",") if item.strip()]
    return value


class Settings(BaseSettings):
    """Application settings with environment variable support"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # Application
    APP_NAME: str = "Fleet Reports"
    ENVIRONMENT: str = "development"
    DEBUG: bool = False

    # Database
    DATABASE_URL: str = "sqlite:///./fleet_reports.db"
    DB_ECHO: bool = False

    # Monitoring and logging
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "standard"
    LOG_FILE: Optional[str] = None
    LOG_SQL_QUERIES: bool = False
    ENABLE_STRUCTURED_LOGGING: bool = False

    # Access resolution
    ACCESS_CACHE_TTL_SECONDS: float = Field(default=30.0, ge=0)

    # Report content
    ENERGY_TAG_NAMES: Annotated[List[str], NoDecode] = Field(default=["Energy", "TotalEnergy"])
    DEFAULT_ENERGY_UNIT: str = "kWh"
    TOP_ALARM_TYPES_LIMIT: int = Field(default=10, ge=1)
    RECENT_ALARMS_LIMIT: int = Field(default=10, ge=1)
    DOWNTIME_SEVERITIES: Annotated[List[str], NoDecode] = Field(default=["CRITICAL", "HIGH"])

    # Audit history
    AUDIT_TOP_USERS_LIMIT: int = Field(default=10, ge=1)
    AUDIT_EXPORT_MAX_ROWS: int = Field(default=10000, ge=1)
    AUDIT_DEFAULT_RETENTION_DAYS: int = Field(default=90, ge=1)

    # Rendering
    EXPORT_MAX_WORKERS: int = Field(default=4, ge=1)
    EXPORT_TIMEOUT_SECONDS: float = Field(default=60.0, gt=0)
    PDF_PAGE_SIZE: str = "A4"

    @field_validator("ENERGY_TAG_NAMES", "DOWNTIME_SEVERITIES", mode="before")
    @classmethod
    def parse_name_lists(cls, v: Union[str, List[str]]) -> List[str]:
        """Accept comma separated strings from the environment"""
        return _split_csv(v)

    @field_validator("DOWNTIME_SEVERITIES")
    @classmethod
    def normalize_severities(cls, v: List[str]) -> List[str]:
        return [s.upper() for s in v]

    @field_validator("LOG_FORMAT")
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        if v not in {"standard", "json"}:
            raise ValueError("LOG_FORMAT must be 'standard' or 'json'")
        return v

    @field_validator("PDF_PAGE_SIZE")
    @classmethod
    def validate_page_size(cls, v: str) -> str:
        if v not in {"A4", "letter"}:
            raise ValueError("PDF_PAGE_SIZE must be 'A4' or 'letter'")
        return v

    def is_production(self) -> bool:
        """Check if running in production environment"""
        return self.ENVIRONMENT == "production"

    def is_development(self) -> bool:
        """Check if running in development environment"""
        return self.ENVIRONMENT == "development"


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()


settings = get_settings()
