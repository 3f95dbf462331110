"""Configuration contract for the permission & inheritance engine.

This module provides a Pydantic-validated configuration model for the
settings the engine itself reads (LOG_LEVEL, IMMEDIATE_PROCESSING, etc.).

Host applications construct a LegacyConfig directly or call
load_config_from_env(). Direct os.environ/os.getenv usage elsewhere in the
package is FORBIDDEN for any setting defined here.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, field_validator


class LogLevel(str, Enum):
    """Standard log levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LegacyConfig(BaseModel):
    """Engine configuration.

    Controls logging and the two processing knobs:

    - ``immediate_processing``: run the processor synchronously when an
      ACTIVE rule with an IMMEDIATE trigger is created.
    - ``process_all_max_workers``: thread pool size for ``process_all``.
      ``1`` processes rules sequentially.
    """

    # Logging
    log_level: LogLevel = Field(
        default=LogLevel.INFO,
        description="Logging level for the engine",
    )
    log_json: bool = Field(
        default=False,
        description="Use JSON log format (default: plain text)",
    )

    # Service identification
    service_name: Optional[str] = Field(
        default=None,
        description="Service name for logger identification (e.g., 'legacy-service')",
    )

    # Processing
    immediate_processing: bool = Field(
        default=True,
        description="Process IMMEDIATE rules synchronously at creation time",
    )
    process_all_max_workers: int = Field(
        default=1,
        ge=1,
        description="Worker threads used by process_all (1 = sequential)",
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def validate_log_level(cls, v: str | LogLevel) -> LogLevel:
        """Convert string to LogLevel enum."""
        if isinstance(v, LogLevel):
            return v
        if isinstance(v, str):
            try:
                return LogLevel[v.upper()]
            except KeyError:
                raise ValueError(f"Invalid log level: {v}. Must be one of {[e.value for e in LogLevel]}")
        raise ValueError(f"Log level must be string or LogLevel enum, got {type(v)}")

    model_config = {
        "use_enum_values": True,
        "extra": "forbid",  # Prevent accidental extra fields
    }


_TRUTHY = ("true", "1", "yes", "on")


def load_config_from_env() -> LegacyConfig:
    """Load engine configuration from environment variables.

    This is the ONLY place where os.getenv is allowed for engine settings.

    Environment variables:
    - LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    - LOG_JSON: Use JSON log format (true/false, default: false)
    - SERVICE_NAME: Service name for logger identification
    - IMMEDIATE_PROCESSING: Process IMMEDIATE rules on creation (default: true)
    - PROCESS_ALL_MAX_WORKERS: Thread pool size for process_all (default: 1)

    Returns:
        LegacyConfig instance with values from environment or defaults.
    """
    import os

    return LegacyConfig(
        log_level=os.getenv("LOG_LEVEL", "INFO"),
        log_json=os.getenv("LOG_JSON", "false").lower() in _TRUTHY,
        service_name=os.getenv("SERVICE_NAME"),
        immediate_processing=os.getenv("IMMEDIATE_PROCESSING", "true").lower() in _TRUTHY,
        process_all_max_workers=int(os.getenv("PROCESS_ALL_MAX_WORKERS", "1")),
    )


__all__ = [
    "LegacyConfig",
    "LogLevel",
    "load_config_from_env",
]
