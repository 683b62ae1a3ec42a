"""
Core configuration module for the genevec mutation toolkit.

This module manages runtime settings using Pydantic Settings, providing
type-safe configuration with environment variable and ``.env`` support.
Species parameters themselves live in parameter files; these settings only
say where to find them and how to run.
"""

from typing import Any, Dict, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class Settings(BaseSettings):
    """
    Application settings with environment variable support.

    All settings can be overridden via environment variables.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # Application settings
    app_name: str = "genevec"
    app_version: str = "1.0.0"
    environment: str = Field(default="development", description="Deployment environment")

    # Run settings
    genevec_params_file: Optional[str] = Field(
        default=None,
        description="Parameter file used when none is given on the command line"
    )
    genevec_base: str = Field(
        default="pop.subpop.0.species",
        description="Parameter base of the species"
    )
    genevec_default_base: Optional[str] = Field(
        default="vector.species",
        description="Parameter base consulted when a key is missing under the species base"
    )
    genevec_random_seed: Optional[int] = Field(default=None, description="Seed for the random source")
    genevec_log_level: str = Field(default="INFO", description="Level of the genevec console logger")

    # Logfire settings
    logfire_token: str = Field(default="")
    logfire_service_name: str = Field(default="genevec-cli")
    logfire_environment: str = Field(default="development")
    logfire_send: bool = Field(
        default=False,
        description="Send spans to the Logfire backend instead of keeping them local"
    )

    @field_validator("genevec_log_level")
    @classmethod
    def validate_log_level(cls, v):
        """Normalize and check the log level name."""
        level = v.upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"Log level must be one of {', '.join(LOG_LEVELS)}, got {v!r}")
        return level

    def get_logfire_settings(self) -> Dict[str, Any]:
        """Get Logfire configuration."""
        return {
            "token": self.logfire_token or None,
            "service_name": self.logfire_service_name,
            "environment": self.logfire_environment,
            "send_to_logfire": self.logfire_send and bool(self.logfire_token),
        }

    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment.lower() == "production"

    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.environment.lower() == "development"


# Create global settings instance
settings = Settings()
