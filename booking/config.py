from functools import lru_cache
from typing import Annotated, List

from pydantic import AnyHttpUrl, Field, field_validator, model_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

from booking.scheduling.slots import (
    DEFAULT_CLOSING_HOUR,
    DEFAULT_OPENING_HOUR,
    DEFAULT_STEP_MINUTES,
    WIDGET_STEP_MINUTES,
)


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    app_name: str = Field(default="Barbershop Booking Service")
    cors_origins: Annotated[List[str], NoDecode] = Field(
        default_factory=lambda: [
            "http://localhost:3000",
            "http://127.0.0.1:3000",
        ]
    )
    backend_base_url: AnyHttpUrl | None = Field(
        default=None
    )
    backend_api_key: str | None = Field(
        default=None
    )
    backend_timeout: float = Field(
        default=10.0
    )
    use_mock_data: bool = Field(
        default=True
    )
    business_timezone: str = Field(
        default="Europe/Istanbul"
    )
    opening_hour: int = Field(default=DEFAULT_OPENING_HOUR, ge=0, le=23)
    closing_hour: int = Field(default=DEFAULT_CLOSING_HOUR, ge=1, le=24)
    slot_step_minutes: int = Field(default=DEFAULT_STEP_MINUTES, gt=0, le=60)
    widget_slot_step_minutes: int = Field(default=WIDGET_STEP_MINUTES, gt=0, le=60)
    default_service_duration: int = Field(default=30, gt=0)
    suggestion_limit: int = Field(default=3, ge=0)

    model_config = SettingsConfigDict(env_prefix="BOOKING_", case_sensitive=False)

    @field_validator("cors_origins", mode="before")
    def _split_origins(cls, value):
        if isinstance(value, str):
            return [origin.strip() for origin in value.split(",") if origin.strip()]
        return value

    @field_validator("slot_step_minutes", "widget_slot_step_minutes")
    def _divides_hour(cls, value: int) -> int:
        if 60 % value != 0:
            raise ValueError("slot steps must divide 60 evenly")
        return value

    @model_validator(mode="after")
    def _check_business_hours(self) -> "Settings":
        if self.opening_hour >= self.closing_hour:
            raise ValueError("opening_hour must be earlier than closing_hour")
        return self


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached application settings."""

    return Settings()
