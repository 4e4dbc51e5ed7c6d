#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Wellness Journal - Configuration
Centralized settings loaded from the environment and an optional .env file
"""

import sys
from datetime import date
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Optional

import pytz
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

WEEKDAY_NAMES = ["Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday"]


class JournalSettings(BaseSettings):
    """Wellness Journal settings"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # ===== GENERAL =====

    APP_NAME: str = Field(default="Wellness Journal", description="Application name")
    ENVIRONMENT: str = Field(
        default="development",
        description="Runtime environment (development/production/testing)"
    )

    # ===== LOGGING =====

    LOG_LEVEL: str = Field(default="INFO", description="Root log level")
    LOG_TO_FILE: bool = Field(default=False, description="Also write logs to LOG_DIR")
    LOG_DIR: Path = Field(default=Path("logs"), description="Log directory")
    LOG_FORMAT: str = Field(
        default="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        description="Log record format"
    )

    # ===== STORAGE =====

    DATA_DIR: Path = Field(default=Path("data"), description="Directory for journal data")
    ENTRIES_FILE: str = Field(default="journal_entries.json", description="Entry store file name")

    # ===== ANALYTICS =====

    TIMEZONE: str = Field(default="UTC", description="Reference timezone for day bucketing")
    STREAK_CUTOFF_DATE: date = Field(
        default=date(2024, 1, 1),
        description="Streak walk never goes back past this day"
    )
    FIRST_WEEKDAY: int = Field(
        default=0,
        description="First day of the goal week (0=Sunday ... 6=Saturday)"
    )

    # ===== ASSISTANT =====

    OPENAI_API_KEY: Optional[str] = Field(default=None, description="OpenAI API key")
    OPENAI_MODEL: str = Field(default="gpt-4o-mini", description="Chat completion model")
    OPENAI_MAX_TOKENS: int = Field(default=150, description="Reply length limit")
    AI_TIMEOUT: float = Field(default=30.0, description="Assistant request timeout, seconds")

    # ===== VALIDATORS =====

    @field_validator("ENVIRONMENT")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        allowed_envs = ["development", "production", "testing", "staging"]
        if v.lower() not in allowed_envs:
            raise ValueError(f"ENVIRONMENT must be one of {allowed_envs}")
        return v.lower()

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        allowed_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in allowed_levels:
            raise ValueError(f"LOG_LEVEL must be one of {allowed_levels}")
        return v.upper()

    @field_validator("TIMEZONE")
    @classmethod
    def validate_timezone(cls, v: str) -> str:
        try:
            pytz.timezone(v)
        except pytz.UnknownTimeZoneError:
            raise ValueError(f"Unknown TIMEZONE: {v}")
        return v

    @field_validator("FIRST_WEEKDAY")
    @classmethod
    def validate_first_weekday(cls, v: int) -> int:
        if not 0 <= v <= 6:
            raise ValueError("FIRST_WEEKDAY must be between 0 (Sunday) and 6 (Saturday)")
        return v

    @field_validator("OPENAI_API_KEY")
    @classmethod
    def validate_api_key(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not v.strip():
            return None
        return v

    # ===== HELPERS =====

    @property
    def tz(self) -> pytz.BaseTzInfo:
        """Reference timezone object"""
        return pytz.timezone(self.TIMEZONE)

    @property
    def entries_path(self) -> Path:
        return self.DATA_DIR / self.ENTRIES_FILE

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT == "production"

    @property
    def ai_enabled(self) -> bool:
        return bool(self.OPENAI_API_KEY)

    def get_logging_config(self) -> Dict[str, Any]:
        """dictConfig for console and, optionally, rotating file output"""
        handlers = ["console"]
        handler_defs: Dict[str, Any] = {
            "console": {
                "class": "logging.StreamHandler",
                "level": self.LOG_LEVEL,
                "formatter": "default",
                "stream": sys.stderr,
            }
        }
        if self.LOG_TO_FILE:
            handlers.append("file")
            handler_defs["file"] = {
                "class": "logging.handlers.RotatingFileHandler",
                "level": self.LOG_LEVEL,
                "formatter": "default",
                "filename": str(self.LOG_DIR / f"journal_{self.ENVIRONMENT}.log"),
                "maxBytes": 10485760,  # 10MB
                "backupCount": 5,
                "encoding": "utf-8",
            }

        return {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "default": {
                    "format": self.LOG_FORMAT,
                    "datefmt": "%Y-%m-%d %H:%M:%S",
                }
            },
            "handlers": handler_defs,
            "loggers": {
                "": {"level": self.LOG_LEVEL, "handlers": handlers},
                "httpx": {"level": "WARNING"},
                "openai": {"level": "WARNING"},
            },
        }

    def to_dict(self) -> Dict[str, Any]:
        """Settings summary with secrets hidden"""
        return {
            "environment": self.ENVIRONMENT,
            "log_level": self.LOG_LEVEL,
            "entries_path": str(self.entries_path),
            "timezone": self.TIMEZONE,
            "streak_cutoff_date": self.STREAK_CUTOFF_DATE.isoformat(),
            "first_weekday": WEEKDAY_NAMES[self.FIRST_WEEKDAY],
            "ai_enabled": self.ai_enabled,
            "openai_model": self.OPENAI_MODEL,
        }


@lru_cache(maxsize=1)
def get_settings() -> JournalSettings:
    """Process-wide settings instance"""
    return JournalSettings()


def reset_settings() -> None:
    """Drop the cached settings so the next get_settings() re-reads the environment"""
    get_settings.cache_clear()
