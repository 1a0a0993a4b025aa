"""
Application settings - pydantic-settings configuration.

This module defines application configuration using pydantic-settings
for environment variable loading with validation and defaults.
"""

from functools import lru_cache

from psycopg.conninfo import make_conninfo
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings with environment variable support."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Database configuration
    database_url: str | None = None  # Full conninfo, overrides the db_* fields
    db_host: str = "localhost"
    db_port: int = 5432
    db_user: str = "postgres"
    db_password: str = ""
    db_name: str = "email_confirmation"
    pool_min_size: int = 1  # Minimum connections in pool
    db_connection_limit: int = 10  # Maximum connections in pool
    pool_timeout: float = 30.0  # Seconds a request waits for a free connection

    # Mail configuration
    email_service: str = "gmail"  # gmail | smtp | console
    email_user: str | None = None
    email_pass: str | None = None
    smtp_host: str = "smtp.gmail.com"
    smtp_port: int = 587
    smtp_secure: bool = False
    smtp_timeout: float = 30.0
    email_from_name: str = "ScriptChain Email System"

    # Server settings
    host: str = "0.0.0.0"
    port: int = 3000
    log_level: str = "INFO"
    app_version: str = "1.0.0"
    cors_origins: list[str] = [
        "http://localhost:8080",
        "http://127.0.0.1:8080",
        "null",
    ]

    def conninfo(self) -> str:
        """Return the libpq connection string for the user store."""
        if self.database_url:
            return self.database_url
        params = {
            "host": self.db_host,
            "port": self.db_port,
            "dbname": self.db_name,
            "user": self.db_user,
        }
        if self.db_password:
            params["password"] = self.db_password
        return make_conninfo(**params)


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
