"""Centralised configuration using pydantic-settings.

All environment variables are read through the Settings class.
Consumers call ``get_settings()`` to obtain a cached, validated instance.
Tests construct ``Settings(_env_file=None, ...)`` directly for isolation.
"""

from __future__ import annotations

import logging
from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from colortext.color import Color, resolve_color
from colortext.errors import FormatError

logger = logging.getLogger(__name__)

# src/colortext/config.py  ->  parent x3  ->  project root
_PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent


# ---------------------------------------------------------------------------
# Sub-models (one per configuration domain)
# ---------------------------------------------------------------------------
class ColorConfig(BaseModel):
    """Color used for text that carries no explicit color."""

    default: str = "#FFFFFF"

    @field_validator("default")
    @classmethod
    def default_must_parse(cls, value: str) -> str:
        try:
            resolve_color(value)
        except FormatError as exc:
            msg = f"COLORTEXT_COLOR__DEFAULT is not a color: {exc}"
            raise ValueError(msg) from exc
        return value

    @property
    def default_color(self) -> Color:
        return resolve_color(self.default)


class MarkupConfig(BaseModel):
    """Markup encoder defaults."""

    color_format: Literal["auto", "hex", "hex-with-alpha", "decimal"] = "auto"
    explicit_leading: bool = True


class TerminalConfig(BaseModel):
    """Terminal writer behaviour."""

    force_terminal: bool | None = None
    no_color: bool = False


class LogConfig(BaseModel):
    """Logging for the command line tool."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "WARNING"
    file_logging: bool = False
    log_dir: Path = Path("logs")


# ---------------------------------------------------------------------------
# Root settings
# ---------------------------------------------------------------------------
class Settings(BaseSettings):
    """Settings with automatic .env loading and type validation.

    Environment variables carry the ``COLORTEXT_`` prefix and use a
    double-underscore delimiter for nesting: ``COLORTEXT_COLOR__DEFAULT``,
    ``COLORTEXT_MARKUP__COLOR_FORMAT``, ``COLORTEXT_LOG__LEVEL``, etc.
    """

    model_config = SettingsConfigDict(
        env_prefix="COLORTEXT_",
        env_file=_PROJECT_ROOT / ".env",
        env_nested_delimiter="__",
        extra="ignore",
    )

    color: ColorConfig = ColorConfig()
    markup: MarkupConfig = MarkupConfig()
    terminal: TerminalConfig = TerminalConfig()
    log: LogConfig = LogConfig()


# ---------------------------------------------------------------------------
# Singleton access
# ---------------------------------------------------------------------------
@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return a cached Settings instance.

    Call ``get_settings.cache_clear()`` in tests to reset.
    """
    settings = Settings()

    env_file = settings.model_config.get("env_file")
    if env_file is not None and Path(str(env_file)).is_file():
        logger.info("Settings loaded .env from: %s", env_file)
    else:
        logger.debug("Settings: no .env file found, using env vars and defaults")

    return settings
