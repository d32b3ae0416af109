"""Application configuration settings."""

import os
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Optional

from workforce.database.database import DatabaseConfig


STORE_BACKENDS = ("sql", "memory")


@dataclass
class Settings:
    """Main application settings."""

    # Application info
    app_name: str = "Workforce API"
    app_version: str = "1.0.0"
    debug: bool = False
    log_level: str = "INFO"

    # Store selection: "sql" for the relational store, "memory" for the in-process store
    store_backend: str = "sql"

    # Deadline applied to the store calls of every request
    request_timeout_seconds: Optional[float] = 5.0

    # Database
    database: DatabaseConfig = field(default_factory=DatabaseConfig)

    def __post_init__(self) -> None:
        if self.store_backend not in STORE_BACKENDS:
            raise ValueError(
                f"Unknown store backend '{self.store_backend}', expected one of {STORE_BACKENDS}"
            )

    @classmethod
    def from_env(cls) -> "Settings":
        """Create settings from environment variables."""
        timeout = os.getenv("REQUEST_TIMEOUT_SECONDS", "5.0")
        return cls(
            app_name=os.getenv("APP_NAME", "Workforce API"),
            app_version=os.getenv("APP_VERSION", "1.0.0"),
            debug=os.getenv("DEBUG", "false").lower() == "true",
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
            store_backend=os.getenv("STORE_BACKEND", "sql").lower(),
            request_timeout_seconds=float(timeout) if timeout else None,
            database=DatabaseConfig.from_env(),
        )


# Singleton settings instance
_settings: Optional[Settings] = None


@lru_cache()
def get_settings() -> Settings:
    """Get application settings (cached)."""
    global _settings
    if _settings is None:
        _settings = Settings.from_env()
    return _settings


def reset_settings() -> None:
    """Reset settings (for testing)."""
    global _settings
    _settings = None
    get_settings.cache_clear()
