"""
Centralized Settings Configuration

Uses Pydantic Settings to load configuration from environment variables
with validation and type coercion. Every value carries a fallback default
so the service boots against a local Postgres without any .env file.
"""

import re
from datetime import timedelta
from typing import Optional
from urllib.parse import quote

from pydantic import SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


_DURATION_PATTERN = re.compile(r"^\s*(\d+)\s*([smhd]?)\s*$")
_DURATION_UNITS = {"": "seconds", "s": "seconds", "m": "minutes", "h": "hours", "d": "days"}


def parse_duration(value: str) -> timedelta:
    """
    Parse a short duration string such as "7d", "12h", "30m" or "3600".

    Raises:
        ValueError: If the string is not a supported duration
    """
    match = _DURATION_PATTERN.match(value.lower())
    if not match:
        raise ValueError(f"Invalid duration: {value!r}")
    amount, unit = match.groups()
    return timedelta(**{_DURATION_UNITS[unit]: int(amount)})


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Database (DATABASE_URL wins over the individual parts when set)
    database_url: Optional[str] = None
    db_host: str = "localhost"
    db_port: int = 5432
    db_name: str = "bf6_stats"
    db_user: str = "postgres"
    db_password: SecretStr = SecretStr("postgres")
    db_max_connections: int = 20

    # Auth
    jwt_secret: SecretStr = SecretStr("fallback_secret_key")
    jwt_expires_in: str = "7d"
    bcrypt_rounds: int = 10

    # HTTP server
    frontend_url: str = "http://localhost:5173"
    port: int = 5000

    # Stats provider
    provider_base_url: str = "https://api.gametools.network/bf6"

    # Resilience
    retry_max_attempts: int = 3
    retry_base_delay: float = 2.0
    retry_max_delay: float = 30.0
    circuit_breaker_threshold: int = 5
    circuit_breaker_timeout: int = 60
    http_timeout: int = 30

    # Collection
    sweep_delay_seconds: float = 1.0
    scheduler_enabled: bool = True
    scheduler_timezone: str = "UTC"

    # Logging
    log_level: str = "INFO"
    log_format: str = "json"  # "json" or "console"
    service_name: str = "bf6-stats-platform"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is a valid Python logging level."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper_v = v.upper()
        if upper_v not in valid_levels:
            raise ValueError(f"log_level must be one of {valid_levels}")
        return upper_v

    @field_validator("log_format")
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        """Validate log format is either json or console."""
        lower_v = v.lower()
        if lower_v not in {"json", "console"}:
            raise ValueError("log_format must be 'json' or 'console'")
        return lower_v

    @field_validator("jwt_expires_in")
    @classmethod
    def validate_jwt_expires_in(cls, v: str) -> str:
        parse_duration(v)
        return v

    @property
    def database_dsn(self) -> str:
        """Connection URL assembled from the individual DB_* settings."""
        if self.database_url:
            return self.database_url
        user = quote(self.db_user, safe="")
        password = quote(self.db_password.get_secret_value(), safe="")
        return f"postgresql://{user}:{password}@{self.db_host}:{self.db_port}/{self.db_name}"

    @property
    def jwt_expires_delta(self) -> timedelta:
        return parse_duration(self.jwt_expires_in)


# Default settings instance for convenience
# Import this for quick access: from core.settings import settings
settings = Settings()
