"""Pydantic Settings for the Juno backend.

All environment variables use the JUNO_ prefix.
Example: JUNO_PORT=3001, JUNO_ENVIRONMENT=production
"""

from __future__ import annotations

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings


class JunoSettings(BaseSettings):
    """Service configuration validated from environment variables."""

    # Service
    host: str = "0.0.0.0"
    port: int = Field(default=3000, ge=1, le=65535)
    environment: Literal["development", "test", "production"] = "development"
    api_prefix: str = "/api/v1"

    # Logging
    log_level: str = "INFO"
    log_traces: bool = True  # include ApiError.trace in error log entries

    model_config = {"env_prefix": "JUNO_"}

    @property
    def is_production(self) -> bool:
        return self.environment == "production"
