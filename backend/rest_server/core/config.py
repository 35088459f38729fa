from typing import Literal, Optional

import httpx
from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .exceptions import ConfigValidationError


class Settings(BaseSettings):
    # Application settings
    APP_NAME: str = "rest-server"
    VERSION: str = "0.1.0"
    ENV: Literal["development", "production", "test"] = "development"
    LOG_LEVEL: str = "INFO"

    # API settings
    API_V1_STR: str = "/api/v1"

    # etcd settings
    ETCD_URI: str
    ETCD_TIMEOUT: float = Field(10.0, gt=0)
    ETCD_STRICT_WRITES: bool = True

    # Default administrator, created on first startup only
    ADMIN_NAME: str = Field(..., pattern=r"^[A-Za-z0-9_]+$")
    ADMIN_PASSWD: str = Field(..., min_length=6)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        frozen=True,
        extra="ignore",
    )

    @field_validator("ETCD_URI")
    @classmethod
    def validate_etcd_uri(cls, v: str) -> str:
        try:
            url = httpx.URL(v)
        except httpx.InvalidURL as e:
            raise ValueError(f"not a valid URI: {e}")
        if not url.is_absolute_url or not url.host:
            raise ValueError("must be an absolute URI")
        return v.rstrip("/")

    @property
    def is_test(self) -> bool:
        return self.ENV == "test"


def load_settings(**overrides) -> Settings:
    """Build settings from the environment, failing fast on bad input"""
    try:
        return Settings(**overrides)
    except ValidationError as e:
        raise ConfigValidationError(f"config error\n{e}") from e


_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get the process-wide Settings instance"""
    global _settings
    if _settings is None:
        _settings = load_settings()
    return _settings


def reset_settings():
    """Drop the cached settings so the next get_settings() reloads them"""
    global _settings
    _settings = None
