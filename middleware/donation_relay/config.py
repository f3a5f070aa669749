"""
Application Configuration Management

Loads configuration from environment variables and an optional .env file.
The same settings drive the uvicorn listener and the AWS Lambda adapter.
"""

import os
from functools import lru_cache
from typing import List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from donation_relay import __version__


class Settings(BaseSettings):
    """Application settings with validation"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Environment
    environment: str = Field(default="development", description="Environment name")

    # Application
    app_name: str = Field(default="Saweria Middleware")
    app_version: str = Field(default=__version__)
    log_level: str = Field(default="INFO")

    # Server
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=3000, description="Listening port (PORT)")

    # Donation buffer
    buffer_max_size: int = Field(
        default=100, description="Number of most recent donations retained"
    )

    # CORS
    cors_origins: List[str] = Field(default=["*"])
    cors_allow_credentials: bool = Field(default=False)
    cors_allow_methods: List[str] = Field(default=["GET", "POST"])
    cors_allow_headers: List[str] = Field(default=["*"])

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level"""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(f"Log level must be one of {valid_levels}")
        return v_upper

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        """Validate environment"""
        valid_envs = ["development", "staging", "production", "test"]
        v_lower = v.lower()
        if v_lower not in valid_envs:
            raise ValueError(f"Environment must be one of {valid_envs}")
        return v_lower

    @field_validator("buffer_max_size")
    @classmethod
    def validate_buffer_max_size(cls, v: int) -> int:
        if v < 1:
            raise ValueError("Buffer max size must be at least 1")
        return v

    @property
    def is_development(self) -> bool:
        """Check if running in development"""
        return self.environment == "development"

    @property
    def is_lambda(self) -> bool:
        """Check if running in AWS Lambda environment"""
        return bool(os.getenv("AWS_LAMBDA_FUNCTION_NAME"))

    @property
    def liveness_message(self) -> str:
        """Plain-text body served on the root path"""
        return f"{self.app_name} is Running!"


@lru_cache()
def get_settings() -> Settings:
    """Get application settings (cached)."""
    return Settings()


# Export singleton instance
settings = get_settings()
