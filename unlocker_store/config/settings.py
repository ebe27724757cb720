"""Environment settings for Unlocker Store."""
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..models.pipeline import (
    DEFAULT_API_URL,
    PLACEHOLDER_API_TOKEN,
    PLACEHOLDER_BUCKET,
    DataFormat,
)

DEFAULT_TARGET_URL = "https://geo.brdtest.com/welcome.txt"


class UnlockerSettings(BaseSettings):
    """Bright Data Web Unlocker configuration."""

    api_token: str = Field(
        default=PLACEHOLDER_API_TOKEN,
        description="Environment variable: BRIGHT_DATA_API_TOKEN",
    )
    zone: str = Field(
        default="web_unlocker1", description="Environment variable: BRIGHT_DATA_ZONE"
    )
    target_url: str = Field(
        default=DEFAULT_TARGET_URL,
        description="Environment variable: BRIGHT_DATA_TARGET_URL",
    )
    format: DataFormat = Field(
        default=DataFormat.JSON, description="Environment variable: BRIGHT_DATA_FORMAT"
    )
    api_url: str = Field(
        default=DEFAULT_API_URL, description="Environment variable: BRIGHT_DATA_API_URL"
    )
    timeout: float = Field(
        default=60.0, description="Environment variable: BRIGHT_DATA_TIMEOUT"
    )

    model_config = SettingsConfigDict(
        env_prefix="BRIGHT_DATA_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        env_ignore_empty=True,
    )


class StorageSettings(BaseSettings):
    """AWS S3 configuration."""

    s3_bucket: str = Field(
        default=PLACEHOLDER_BUCKET, description="Environment variable: AWS_S3_BUCKET"
    )
    region: str = Field(
        default="us-east-1", description="Environment variable: AWS_REGION"
    )
    # Leave unset to use IAM roles or the shared credentials file
    access_key_id: Optional[str] = Field(
        default=None, description="Environment variable: AWS_ACCESS_KEY_ID"
    )
    secret_access_key: Optional[str] = Field(
        default=None, description="Environment variable: AWS_SECRET_ACCESS_KEY"
    )

    model_config = SettingsConfigDict(
        env_prefix="AWS_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        env_ignore_empty=True,
    )


class LoggingSettings(BaseSettings):
    """Logging configuration."""

    log_level: str = Field(
        default="INFO", description="Environment variable: LOG_LEVEL"
    )
    log_format: str = Field(
        default="console", description="Environment variable: LOG_FORMAT"
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        env_ignore_empty=True,
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v):
        """Validate log level."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"Log level must be one of {valid_levels}")
        return v.upper()

    @field_validator("log_format")
    @classmethod
    def validate_log_format(cls, v):
        """Validate log format."""
        valid_formats = ["console", "json"]
        if v.lower() not in valid_formats:
            raise ValueError(f"Log format must be one of {valid_formats}")
        return v.lower()


class Settings(BaseSettings):
    """Main application settings."""

    storage_mock_mode: bool = Field(
        default=False, description="Environment variable: STORAGE_MOCK_MODE"
    )

    unlocker: UnlockerSettings = Field(default_factory=UnlockerSettings)
    storage: StorageSettings = Field(default_factory=StorageSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        env_ignore_empty=True,
    )


# Global settings instance - initialized lazily
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get application settings."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reload_settings() -> Settings:
    """Reload settings from environment."""
    global _settings
    _settings = Settings()
    return _settings
