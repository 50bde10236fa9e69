"""Centralized settings management for event dispatch."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

from event_dispatch.destination.bulker import BulkerDestinationConfig
from event_dispatch.errors import ConfigurationError
from event_dispatch.layouts.base import DEFAULT_DATA_LAYOUT


class Settings(BaseSettings):
    """
    Application settings powered by pydantic-settings.

    Loads configuration from environment variables and a .env file in the
    working directory.
    """

    # -------------------------------------------------------------------------
    # BULKER DESTINATION
    # -------------------------------------------------------------------------
    BULKER_ENDPOINT: str | None = None
    BULKER_AUTH_TOKEN: SecretStr | None = None
    DESTINATION_ID: str | None = None
    DATA_LAYOUT: str = DEFAULT_DATA_LAYOUT.value
    REQUEST_TIMEOUT_SECONDS: float = Field(default=30.0, gt=0)

    # -------------------------------------------------------------------------
    # LOGGING
    # -------------------------------------------------------------------------
    LOG_LEVEL: str = "INFO"
    JSON_LOGS: bool = False

    # -------------------------------------------------------------------------
    # PATHS
    # -------------------------------------------------------------------------
    DESTINATIONS_CONFIG_PATH: Path | None = None

    # -------------------------------------------------------------------------
    # CONFIGURATION
    # -------------------------------------------------------------------------
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        # Allow extra fields in .env but ignore them in the model
        extra="ignore",
    )

    def to_destination_config(self) -> BulkerDestinationConfig:
        """
        Build the Bulker destination config from these settings.

        Returns
        -------
        BulkerDestinationConfig
            Ready-to-use destination configuration.

        Raises
        ------
        ConfigurationError
            If endpoint, token or destination id is missing.
        """
        missing = [
            name
            for name in ("BULKER_ENDPOINT", "BULKER_AUTH_TOKEN", "DESTINATION_ID")
            if not getattr(self, name)
        ]
        if missing:
            raise ConfigurationError(f"Missing required settings: {', '.join(missing)}")

        return BulkerDestinationConfig(
            bulker_endpoint=self.BULKER_ENDPOINT,
            destination_id=self.DESTINATION_ID,
            auth_token=self.BULKER_AUTH_TOKEN.get_secret_value(),
            data_layout=self.DATA_LAYOUT,
            request_timeout=self.REQUEST_TIMEOUT_SECONDS,
        )


@lru_cache
def get_settings() -> Settings:
    """
    Get cached application settings.

    Returns
    -------
    Settings
        The singleton settings instance.
    """
    return Settings()
