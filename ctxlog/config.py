"""
ctxlog Configuration

Environment-driven logger settings using pydantic-settings.
Environment variables are prefixed with CTXLOG_ (e.g., CTXLOG_LEVEL=debug).
"""

from __future__ import annotations

from typing import Any, Literal, Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings

from ctxlog.levels import Level, parse_level, to_log_level
from ctxlog.structured import StructuredLogger, new_logger


class LoggerSettings(BaseSettings):
    """Root logger configuration."""

    level: str = "info"
    renderer: Literal["json", "console"] = "json"
    output: Literal["stdout", "stderr", "null"] = "stderr"
    area: Optional[str] = None

    model_config = {
        "env_prefix": "CTXLOG_",
        "case_sensitive": False,
    }

    @field_validator("level", mode="before")
    @classmethod
    def normalize_level(cls, v: Any) -> str:
        """Normalize to a canonical level name; unknown names become info."""
        if isinstance(v, Level):
            return parse_level(v)
        return parse_level(to_log_level(str(v)))

    @property
    def log_level(self) -> Level:
        return to_log_level(self.level)


def logger_from_settings(settings: Optional[LoggerSettings] = None) -> StructuredLogger:
    """Build a root logger from settings (the global settings by default)."""
    settings = settings or get_settings()

    output = None if settings.output == "null" else settings.output
    logger = new_logger(settings.log_level, output=output, renderer=settings.renderer)
    if settings.area:
        logger = logger.set_area(settings.area)
    return logger


# Global settings instance (lazy loaded)
_settings: Optional[LoggerSettings] = None


def get_settings() -> LoggerSettings:
    """Get the global logger settings instance."""
    global _settings
    if _settings is None:
        _settings = LoggerSettings()
    return _settings


def set_settings(settings: Optional[LoggerSettings]) -> None:
    """Set (or reset, with None) the global logger settings instance."""
    global _settings
    _settings = settings
