"""Process settings for the S3 token delegation plugin."""

from __future__ import annotations

import logging
import os
from functools import lru_cache
from pathlib import Path

from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError

_config_logger = logging.getLogger(__name__)


class STSSettings(BaseModel):
    connect_timeout_seconds: int = Field(default=5, ge=1, le=300)
    read_timeout_seconds: int = Field(default=15, ge=1, le=300)
    session_duration_seconds: int | None = Field(
        default=None,
        ge=900,
        le=129_600,
        description="DurationSeconds for GetSessionToken; STS default when unset.",
    )


class DelegationSettings(BaseModel):
    enable_token_delegation: bool = Field(
        default=True,
        description=(
            "Default for fs.s3.enable-token-delegation when a server configuration "
            "does not set it."
        ),
    )


class Settings(BaseModel):
    sts: STSSettings = Field(default_factory=STSSettings)
    delegation: DelegationSettings = Field(default_factory=DelegationSettings)


ENV_KEYS = {
    "sts_connect_timeout": "STS_CONNECT_TIMEOUT_SECONDS",
    "sts_read_timeout": "STS_READ_TIMEOUT_SECONDS",
    "sts_session_duration": "STS_SESSION_DURATION_SECONDS",
    "enable_token_delegation": "S3_ENABLE_TOKEN_DELEGATION",
}

TRUE_VALUES = frozenset({"1", "true", "yes"})


def _env_bool(key: str, default: bool) -> bool:
    value = os.getenv(key)
    if value is None:
        return default
    return value.strip().lower() in TRUE_VALUES


def _env_int(key: str, default: int | None) -> int | None:
    value = os.getenv(key)
    if value is None or value.strip() == "":
        return default
    try:
        return int(value)
    except ValueError:
        _config_logger.warning(
            "Invalid integer value for %s: %r, using default %s", key, value, default
        )
        return default


def load_settings() -> Settings:
    """Load configuration and cache the result."""

    return _load_settings_cached()


@lru_cache(maxsize=1)
def _load_settings_cached() -> Settings:
    load_dotenv(dotenv_path=Path.cwd() / ".env")

    settings_data: dict[str, object] = {
        "sts": {
            "connect_timeout_seconds": _env_int(
                ENV_KEYS["sts_connect_timeout"],
                STSSettings().connect_timeout_seconds,
            ),
            "read_timeout_seconds": _env_int(
                ENV_KEYS["sts_read_timeout"],
                STSSettings().read_timeout_seconds,
            ),
            "session_duration_seconds": _env_int(
                ENV_KEYS["sts_session_duration"],
                STSSettings().session_duration_seconds,
            ),
        },
        "delegation": {
            "enable_token_delegation": _env_bool(
                ENV_KEYS["enable_token_delegation"],
                DelegationSettings().enable_token_delegation,
            ),
        },
    }

    try:
        return Settings.model_validate(settings_data)
    except ValidationError as exc:
        raise RuntimeError(f"Invalid configuration: {exc}") from exc
