"""
Configuration settings for the reference-data validation engine.

Uses Pydantic Settings to load environment variables for database lookups,
logging, and the business thresholds applied when records are prepared for
storage. Thresholds are frozen into an `EngineConfig` once per process (see
`refdata.engine.config`).
"""
from __future__ import annotations

from decimal import Decimal
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Database (lookups only; persistence belongs to the caller)
    db_host: str = Field("localhost", alias="DB_HOST")
    db_port: int = Field(5432, alias="DB_PORT")
    db_user: str = Field("postgres", alias="DB_USER")
    db_password: str = Field("postgres", alias="DB_PASSWORD")
    db_name: str = Field("refdata", alias="DB_NAME")
    db_statement_timeout_ms: int = Field(5_000, alias="DB_STATEMENT_TIMEOUT_MS")

    # Application
    app_env: str = Field("development", alias="APP_ENV")
    log_level: str = Field("INFO", alias="LOG_LEVEL")
    json_logs: bool = Field(False, alias="JSON_LOGS")

    # Trade limits and risk tiers
    max_single_trade_value: Decimal = Field(Decimal("10000000"), alias="MAX_SINGLE_TRADE_VALUE")
    high_notional_threshold: Decimal = Field(Decimal("1000000"), alias="HIGH_NOTIONAL_THRESHOLD")
    medium_notional_threshold: Decimal = Field(
        Decimal("100000"), alias="MEDIUM_NOTIONAL_THRESHOLD"
    )
    trade_date_max_future_days: int = Field(1, alias="TRADE_DATE_MAX_FUTURE_DAYS")
    creation_date_max_future_minutes: int = Field(5, alias="CREATION_DATE_MAX_FUTURE_MINUTES")

    # Strict modes turn logged-only warnings into failures
    strict_trade_status: bool = Field(False, alias="STRICT_TRADE_STATUS")
    strict_rating_consistency: bool = Field(False, alias="STRICT_RATING_CONSISTENCY")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Retrieve a cached instance of Settings to avoid repeated env parsing.
    """
    return Settings()


__all__ = ["Settings", "get_settings"]
