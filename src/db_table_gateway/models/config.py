"""Database configuration model."""

import logging
import os
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator
from sqlalchemy.engine.url import URL, make_url

logger = logging.getLogger(__name__)

# Replacement parameter in URLs for the database directory
DATABASE_DIR_PLACEHOLDER = "{0}"

DEFAULT_URL = "sqlite:///{0}/default.db"


class DatabaseConfig(BaseModel):
    """Configuration for the database connection factory."""

    url: str = Field(
        default=DEFAULT_URL,
        description="Database connection URL; '{0}' is replaced by database_dir",
    )
    username: Optional[str] = Field(
        None, description="User on whose behalf connections are made"
    )
    password: Optional[str] = Field(None, description="User password")
    properties: dict[str, Any] = Field(
        default_factory=dict,
        description="Driver-specific connection arguments",
    )
    database_dir: Optional[Path] = Field(
        None,
        description="Directory substituted for '{0}' in the URL (home directory if unset)",
    )
    pool_size: int = Field(
        default=5,
        ge=1,
        le=50,
        description="Connection pool size",
    )
    max_overflow: int = Field(
        default=10,
        ge=0,
        le=100,
        description="Maximum overflow connections",
    )
    pool_timeout: int = Field(
        default=30,
        ge=1,
        le=300,
        description="Pool checkout timeout in seconds",
    )
    echo_sql: bool = Field(
        default=False,
        description="Echo SQL statements through the sqlalchemy.engine logger",
    )

    @field_validator("url")
    @classmethod
    def validate_url(cls, v: str) -> str:
        """Validate database URL format."""
        try:
            make_url(v)
        except Exception as e:
            raise ValueError(f"Invalid database URL: {e}")
        return v

    @property
    def resolved_url(self) -> URL:
        """Connection URL with the directory substituted and credentials applied."""
        url_text = self.url
        if DATABASE_DIR_PLACEHOLDER in url_text:
            directory = self.database_dir or Path.home()
            url_text = url_text.replace(DATABASE_DIR_PLACEHOLDER, directory.as_posix())

        url = make_url(url_text)
        if self.username is not None:
            url = url.set(username=self.username)
        if self.password is not None:
            url = url.set(password=self.password)
        return url

    @property
    def dialect(self) -> str:
        """Extract database dialect from URL."""
        return make_url(self.url).drivername.split("+")[0]

    @property
    def driver(self) -> str:
        """Extract driver name from URL."""
        parts = make_url(self.url).drivername.split("+")
        return parts[1] if len(parts) > 1 else ""

    @classmethod
    def from_env(cls, dotenv_path: Optional[str] = None) -> "DatabaseConfig":
        """
        Build a configuration from environment variables.

        Reads DATABASE_URL, DATABASE_USER, DATABASE_PASSWORD, DATABASE_DIR and
        DATABASE_ECHO_SQL after loading a .env file, if one exists.

        Args:
            dotenv_path: Explicit .env file to load (None searches upwards)

        Returns:
            Database configuration
        """
        load_dotenv(dotenv_path)

        data: dict[str, Any] = {}
        database_url = os.getenv("DATABASE_URL")
        if database_url:
            data["url"] = database_url
        else:
            logger.info(f"DATABASE_URL not set, using default {DEFAULT_URL}")

        if os.getenv("DATABASE_USER") is not None:
            data["username"] = os.getenv("DATABASE_USER")
        if os.getenv("DATABASE_PASSWORD") is not None:
            data["password"] = os.getenv("DATABASE_PASSWORD")
        if os.getenv("DATABASE_DIR"):
            data["database_dir"] = os.getenv("DATABASE_DIR")
        echo = os.getenv("DATABASE_ECHO_SQL")
        if echo:
            data["echo_sql"] = echo.strip().lower() in {"1", "true", "yes", "on"}

        return cls(**data)

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "url": "postgresql+psycopg://localhost:5432/mydb",
                    "username": "app",
                    "password": "secret",
                    "pool_size": 5,
                    "max_overflow": 10,
                },
                {
                    "url": "sqlite:///{0}/app.db",
                    "database_dir": "/var/lib/app",
                },
            ]
        }
    }
