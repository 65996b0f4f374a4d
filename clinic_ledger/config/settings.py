"""
Configuration Management for Clinic Ledger

Uses pydantic-settings for type-safe configuration from environment variables.

All configuration is centralized here so the storage location, the
credentials of the login gate and the display preferences are visible
in one place and validated at startup.
"""

from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class StorageSettings(BaseSettings):
    """Local durable storage configuration."""

    model_config = SettingsConfigDict(
        env_prefix="STORAGE_",
        extra="ignore"
    )

    data_dir: Path = Field(
        default=Path("./data"),
        description="Directory holding one JSON file per storage key"
    )
    state_key: str = Field(
        default="centroMedicoCamocim",
        min_length=1,
        description="Key of the slot holding the serialized ledger"
    )
    session_key: str = Field(
        default="cm_auth",
        min_length=1,
        description="Key of the slot holding the login flag"
    )

    @field_validator('state_key', 'session_key')
    @classmethod
    def validate_key(cls, v: str) -> str:
        """Keys become file names, so path separators are not allowed."""
        if "/" in v or "\\" in v:
            raise ValueError(f"Storage key cannot contain path separators: {v}")
        return v


class AuthSettings(BaseSettings):
    """
    Login gate configuration.

    A single credential pair. There is no hashing and no expiry:
    the gate only keeps casual users away from the dashboard.
    """

    model_config = SettingsConfigDict(
        env_prefix="AUTH_",
        extra="ignore"
    )

    username: str = Field(
        default="centromedico",
        description="Login user name"
    )
    password: str = Field(
        default="miguel2406",
        description="Login password"
    )


class AppSettings(BaseSettings):
    """
    Main application settings.

    Loads configuration from environment variables and .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Level for the structured activity log"
    )

    # Display
    currency_symbol: str = Field(
        default="R$",
        description="Prefix used when formatting amounts"
    )

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        allowed = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in allowed:
            raise ValueError(f"Unsupported log level: {v}. Allowed: {allowed}")
        return v.upper()


class Settings(BaseSettings):
    """
    Root settings container.

    Aggregates all sub-settings for easy access.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    @property
    def storage(self) -> StorageSettings:
        return StorageSettings()

    @property
    def auth(self) -> AuthSettings:
        return AuthSettings()

    @property
    def app(self) -> AppSettings:
        return AppSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()
