"""Settings for the SDK composition root."""

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from topgg.constants import (
    API_BASE_URL,
    DEFAULT_AUTOPOST_INTERVAL_SECONDS,
    MIN_AUTOPOST_INTERVAL_SECONDS,
    USER_AGENT,
)


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    token: str = Field(..., validation_alias="TOPGG_TOKEN")
    base_url: str = Field(API_BASE_URL, validation_alias="TOPGG_BASE_URL")

    connect_timeout_seconds: float = Field(5.0, validation_alias="TOPGG_CONNECT_TIMEOUT_SECONDS")
    read_timeout_seconds: float = Field(15.0, validation_alias="TOPGG_READ_TIMEOUT_SECONDS")
    user_agent: str = Field(USER_AGENT, validation_alias="TOPGG_USER_AGENT")

    autoposter_enabled: bool = Field(True, validation_alias="AUTOPOSTER_ENABLED")
    autoposter_interval_seconds: float = Field(
        DEFAULT_AUTOPOST_INTERVAL_SECONDS,
        validation_alias="AUTOPOSTER_INTERVAL_SECONDS",
        allow_inf_nan=False,
    )

    @field_validator("token")
    @classmethod
    def _token_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("TOPGG_TOKEN must not be empty")
        return value

    @field_validator("autoposter_interval_seconds")
    @classmethod
    def _interval_at_least_minimum(cls, value: float) -> float:
        if value < MIN_AUTOPOST_INTERVAL_SECONDS:
            raise ValueError(
                f"AUTOPOSTER_INTERVAL_SECONDS must be at least {int(MIN_AUTOPOST_INTERVAL_SECONDS)}"
            )
        return value
