"""
Configuration settings for logflood.

Uses Pydantic Settings to load the generator defaults from environment
variables (or a `.env` file). CLI options override these per run; the target
rate has no default and must always be given explicitly.
"""
from __future__ import annotations

from datetime import timedelta
from functools import lru_cache
from typing import Any, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from logflood.utils.units import parse_byte_size, parse_duration

DEFAULT_RECORD_SIZE = 1024
DEFAULT_DURATION = timedelta(seconds=10)


class Settings(BaseSettings):
    # Records
    record_size: int = Field(DEFAULT_RECORD_SIZE, alias="LOGFLOOD_RECORD_SIZE")
    duration: timedelta = Field(DEFAULT_DURATION, alias="LOGFLOOD_DURATION")
    run_id: Optional[str] = Field(None, alias="LOGFLOOD_RUN_ID")

    # Application
    log_level: str = Field("INFO", alias="LOGFLOOD_LOG_LEVEL")
    json_logs: bool = Field(False, alias="LOGFLOOD_JSON_LOGS")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    @field_validator("record_size", mode="before")
    @classmethod
    def _parse_record_size(cls, value: Any) -> int:
        return parse_byte_size(value)

    @field_validator("duration", mode="before")
    @classmethod
    def _parse_duration(cls, value: Any) -> timedelta:
        return parse_duration(value)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Retrieve a cached instance of Settings to avoid repeated env parsing.
    """
    return Settings()


__all__ = ["DEFAULT_DURATION", "DEFAULT_RECORD_SIZE", "Settings", "get_settings"]
