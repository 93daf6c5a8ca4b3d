"""Configuration management using Pydantic settings.

Two-layer configuration system:
1. Environment: Loads raw values from environment variables (UPPER_CASE)
2. Settings: Clean application settings with lowercase fields and derived values

Pingdom credentials are deliberately absent here; they only ever arrive as
positional command line arguments.
"""

import logging
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

_PROJECT_ROOT = Path(__file__).resolve().parent.parent

DEFAULT_PINGDOM_API_URL = "https://api.pingdom.com/api/2.1"


class Environment(BaseSettings):
    """Raw environment variable loading."""

    model_config = SettingsConfigDict(
        env_file=_PROJECT_ROOT / ".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # ── Polling ────────────────────────────────────────────────────────

    WAIT_SECONDS: int = Field(default=10)
    PINGDOM_API_URL: str = Field(default=DEFAULT_PINGDOM_API_URL)
    PINGDOM_HTTP_TIMEOUT: float = Field(default=10.0)

    # ── HTTP exposition ────────────────────────────────────────────────

    HOST: str = Field(default="0.0.0.0")
    PORT: int = Field(default=9158)
    WAITRESS_THREADS: int = Field(default=4)

    # ── Process ────────────────────────────────────────────────────────

    GRACEFUL_SHUTDOWN_TIMEOUT: int = Field(default=10)
    LOG_LEVEL: str = Field(default="INFO")


class Settings(BaseModel):
    """Application settings with lowercase fields and derived values."""

    model_config = ConfigDict(from_attributes=True)

    wait_seconds: int = 10
    pingdom_api_url: str = DEFAULT_PINGDOM_API_URL
    pingdom_http_timeout: float = 10.0

    host: str = "0.0.0.0"
    port: int = 9158
    waitress_threads: int = 4

    graceful_shutdown_timeout: int = 10
    log_level: str = "INFO"

    @property
    def log_level_value(self) -> int | str:
        # getLevelName returns "Level <name>" for names it does not know
        return logging.getLevelName(self.log_level.upper())

    def with_overrides(self, **overrides: object) -> "Settings":
        """Return a copy with the non-None overrides applied (CLI flags)."""
        values = {key: value for key, value in overrides.items() if value is not None}
        return self.model_copy(update=values)

    def validate_config(self) -> None:
        from pingdom_exporter.exceptions import ConfigurationError

        errors: list[str] = []

        if self.wait_seconds <= 0:
            errors.append("WAIT_SECONDS must be a positive number of seconds")

        if not 1 <= self.port <= 65535:
            errors.append(f"PORT must be between 1 and 65535, got {self.port}")

        if self.pingdom_http_timeout <= 0:
            errors.append("PINGDOM_HTTP_TIMEOUT must be positive")

        if self.waitress_threads <= 0:
            errors.append("WAITRESS_THREADS must be positive")

        if not isinstance(self.log_level_value, int):
            errors.append(f"LOG_LEVEL '{self.log_level}' is not a known level")

        if errors:
            raise ConfigurationError(
                "Configuration validation failed:\n  - " + "\n  - ".join(errors)
            )

    @classmethod
    def load(cls, env: "Environment | None" = None) -> "Settings":
        if env is None:
            env = Environment()

        return cls(
            wait_seconds=env.WAIT_SECONDS,
            pingdom_api_url=env.PINGDOM_API_URL.rstrip("/"),
            pingdom_http_timeout=env.PINGDOM_HTTP_TIMEOUT,
            host=env.HOST,
            port=env.PORT,
            waitress_threads=env.WAITRESS_THREADS,
            graceful_shutdown_timeout=env.GRACEFUL_SHUTDOWN_TIMEOUT,
            log_level=env.LOG_LEVEL,
        )
