"""
Simple configuration management.

The ``Settings`` dataclass reads configuration directly from
environment variables.  Defaults are provided for all fields so the
service starts against a local PostgreSQL instance without any extra
setup.  In a production deployment you should override these via
environment variables; at the very least ``TOKEN_PASSWORD`` must be
replaced.
"""

import os
from dataclasses import dataclass
from urllib.parse import quote_plus


@dataclass
class Settings:
    """Application settings loaded from environment variables."""

    project_name: str = os.getenv("PROJECT_NAME", "Payments API")
    api_version: str = os.getenv("API_VERSION", "1.0.0")
    debug: bool = os.getenv("DEBUG", "false").lower() in {"1", "true", "yes"}
    log_level: str = os.getenv("LOG_LEVEL", "INFO")

    # Symmetric secret used to sign bearer tokens.  The variable name
    # matches the one used by the existing deployments.
    token_secret: str = os.getenv("TOKEN_PASSWORD", "change_me")
    token_ttl_hours: int = int(os.getenv("TOKEN_TTL_HOURS", "12"))

    db_host: str = os.getenv("DB_HOST", "localhost")
    db_port: int = int(os.getenv("DB_PORT", "5432"))
    db_user: str = os.getenv("DB_USER", "postgres")
    db_password: str = os.getenv("DB_PASS", "")
    db_name: str = os.getenv("DB_NAME", "payments")

    # Full SQLAlchemy URL.  When set it takes precedence over the
    # individual ``DB_*`` variables (tests use ``sqlite://``).
    database_url: str = os.getenv("DATABASE_URL", "")

    host: str = os.getenv("API_HOST", "0.0.0.0")
    port: int = int(os.getenv("API_PORT", "8000"))

    @property
    def sqlalchemy_url(self) -> str:
        """Return the URL handed to ``create_engine``."""
        if self.database_url:
            return self.database_url
        password = quote_plus(self.db_password)
        return (
            f"postgresql+psycopg2://{self.db_user}:{password}"
            f"@{self.db_host}:{self.db_port}/{self.db_name}"
        )

    @property
    def token_ttl_seconds(self) -> int:
        return self.token_ttl_hours * 60 * 60


# Instantiate settings once so the entry point can import it without
# repeatedly reading environment variables.  Because the dataclass
# computes its defaults at import time, environment variables should
# be set before importing this module.
settings = Settings()
