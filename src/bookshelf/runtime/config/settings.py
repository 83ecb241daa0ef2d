from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class EnvironmentVariables(BaseSettings):
    """Simple primitive values loaded from environment variables and .env files."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_ignore_empty=True,
        extra="ignore",
    )

    # Environment and deployment
    environment: Literal["development", "production", "test"] = Field(
        default="development", validation_alias="APP_ENVIRONMENT"
    )
    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")
    config_file: str = Field(default="config.yaml", validation_alias="CONFIG_FILE")

    # Infrastructure
    database_url: str = Field(
        default="sqlite:///./books.db", validation_alias="DATABASE_URL"
    )
    port: int = Field(default=3000, validation_alias="PORT")
