"""Configuration management for the client bridge."""

from __future__ import annotations

import logging
import os
from functools import lru_cache
from pathlib import Path

from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError, field_validator

_config_logger = logging.getLogger(__name__)

DEFAULT_DATE_FORMAT = "yyyy-MM-dd"


class LoggingSettings(BaseModel):
    level: str = Field(default="INFO", description="Python logging level name")
    file: str | None = Field(default=None, description="Optional log file path")


class ConversionSettings(BaseModel):
    date_format: str = Field(
        default=DEFAULT_DATE_FORMAT,
        description="SimpleDateFormat style pattern (or strptime pattern) for string dates",
    )
    root_unwrapping: bool = Field(default=False)
    model_packages: tuple[str, ...] = Field(
        default=(),
        description="Module prefixes whose classes are treated as request/result models.",
    )

    @field_validator("date_format")
    @classmethod
    def _validate_date_format(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("date_format must not be empty")
        return value


class AWSSettings(BaseModel):
    access_key: str | None = Field(default=None)
    secret_key: str | None = Field(default=None, repr=False)
    endpoint: str | None = Field(default=None)


class Settings(BaseModel):
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    conversion: ConversionSettings = Field(default_factory=ConversionSettings)
    aws: AWSSettings = Field(default_factory=AWSSettings)


ENV_KEYS = {
    "log_level": "LOG_LEVEL",
    "log_file": "LOG_FILE",
    "date_format": "BRIDGE_DATE_FORMAT",
    "root_unwrapping": "BRIDGE_ROOT_UNWRAPPING",
    "model_packages": "BRIDGE_MODEL_PACKAGES",
    "access_key": "AWS_ACCESS_KEY_ID",
    "secret_key": "AWS_SECRET_ACCESS_KEY",
    "region": "AWS_DEFAULT_REGION",
}

_TRUE_VALUES = frozenset({"1", "true", "yes", "on"})
_FALSE_VALUES = frozenset({"0", "false", "no", "off"})


def _split_csv(value: str | None) -> list[str]:
    if not value:
        return []
    return [item.strip() for item in value.split(",") if item.strip()]


def _project_root() -> Path:
    return Path(__file__).resolve().parents[2]


def _env_bool(key: str, default: bool) -> bool:
    value = os.getenv(key)
    if value is None or value.strip() == "":
        return default
    lowered = value.strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    _config_logger.warning(
        "Invalid boolean value for %s: %r, using default %s", key, value, default
    )
    return default


def _env_optional(key: str) -> str | None:
    value = os.getenv(key)
    if value is None or value.strip() == "":
        return None
    return value.strip()


def load_settings() -> Settings:
    """Load configuration and cache the result."""

    return _load_settings_cached()


@lru_cache(maxsize=1)
def _load_settings_cached() -> Settings:
    load_dotenv(dotenv_path=_project_root() / ".env")

    settings_data: dict[str, object] = {
        "logging": {
            "level": os.getenv(ENV_KEYS["log_level"], LoggingSettings().level),
            "file": _env_optional(ENV_KEYS["log_file"]),
        },
        "conversion": {
            "date_format": os.getenv(ENV_KEYS["date_format"], ConversionSettings().date_format),
            "root_unwrapping": _env_bool(
                ENV_KEYS["root_unwrapping"],
                ConversionSettings().root_unwrapping,
            ),
            "model_packages": tuple(_split_csv(os.getenv(ENV_KEYS["model_packages"]))),
        },
        "aws": {
            "access_key": _env_optional(ENV_KEYS["access_key"]),
            "secret_key": _env_optional(ENV_KEYS["secret_key"]),
            "endpoint": _env_optional("AWS_REGION") or _env_optional(ENV_KEYS["region"]),
        },
    }

    try:
        return Settings.model_validate(settings_data)
    except ValidationError as exc:
        raise RuntimeError(f"Invalid configuration: {exc}") from exc
