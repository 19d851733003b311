from __future__ import annotations

from functools import lru_cache

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Central application configuration."""

    app_name: str = Field(default="Event Booking Service")
    debug: bool = Field(default=False)
    log_level: str = Field(default="INFO")

    # MongoDB
    mongo_uri: str = Field(default="mongodb://localhost:27017")
    mongo_database: str = Field(default="scheduling")
    users_collection: str = Field(default="users")
    events_collection: str = Field(default="events")
    bookings_collection: str = Field(default="bookings")

    # Identity provider (delegated OAuth tokens)
    clerk_secret_key: str = Field(
        default="",
        validation_alias=AliasChoices("CLERK_SECRET_KEY", "CLERK_API_KEY"),
    )
    clerk_api_url: str = Field(default="https://api.clerk.com/v1")
    oauth_provider: str = Field(default="oauth_google")

    # Google Calendar
    calendar_id: str = Field(default="primary")
    calendar_timezone: str = Field(default="UTC")

    # Email
    email_api_key: str = Field(default="")
    email_sender_email: str = Field(
        default="",
        validation_alias=AliasChoices("EMAIL_SENDER_EMAIL", "EMAIL_SENDER"),
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
