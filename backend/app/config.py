"""
Atomsmiths Backend — Application Configuration
================================================

What:  Centralized configuration management using Pydantic Settings.
How:   Pydantic Settings reads from environment variables (or .env file),
       validates types/ranges, and provides a singleton `settings` object.
Who:   Imported by every module that needs configuration values.
When:  Loaded once at module import time; validated before app starts.

Environment variables:
    MONGODB_URI (or MONGO_URI)  Connection string for the document database
    MONGODB_DB                  Database name (default: atomsmiths)
    ENVIRONMENT                 "development" adds stack traces to 500 responses
    LOG_LEVEL                   DEBUG, INFO, WARNING, ERROR, CRITICAL
    CORS_ORIGINS                Comma-separated origins, or "*"
"""

from typing import List

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings have sensible defaults for local development.
    Attributes are grouped by concern for readability.
    """

    # ── Database ──────────────────────────────────────────────────────────
    # Both names are accepted: the join handler historically read MONGO_URI,
    # the main API read MONGODB_URI.
    mongodb_uri: str = Field(
        default="mongodb://localhost:27017",
        validation_alias=AliasChoices("MONGODB_URI", "MONGO_URI", "mongodb_uri"),
        description="MongoDB connection string",
    )
    mongodb_db: str = Field(
        default="atomsmiths",
        validation_alias=AliasChoices("MONGODB_DB", "mongodb_db"),
        description="Name of the database holding members, events and blogs",
    )

    # Client pool settings, passed straight to the Motor client
    db_server_selection_timeout_ms: int = Field(default=5000, ge=100, le=60000)
    db_max_pool_size: int = Field(default=10, ge=1, le=200)
    db_min_pool_size: int = Field(default=2, ge=0, le=100)

    # Startup ping retries (tenacity)
    db_connect_attempts: int = Field(default=3, ge=1, le=10)
    db_connect_min_wait: int = Field(default=1, ge=1, le=30)
    db_connect_max_wait: int = Field(default=5, ge=1, le=60)

    # ── CORS ──────────────────────────────────────────────────────────────
    # "*" reflects any origin; otherwise a comma-separated allow list
    cors_origins: str = Field(default="*")

    @property
    def cors_origins_list(self) -> List[str]:
        """Splits comma-separated CORS origins into a list."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    # ── Server ────────────────────────────────────────────────────────────
    backend_host: str = Field(default="0.0.0.0")
    backend_port: int = Field(default=8000, ge=1024, le=65535)

    environment: str = Field(default="production")

    @property
    def is_development(self) -> bool:
        return self.environment.lower() == "development"

    log_level: str = Field(default="INFO")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensures log level is a valid Python logging level name."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper = v.upper()
        if upper not in valid_levels:
            raise ValueError(f"Invalid log_level '{v}'. Must be one of: {valid_levels}")
        return upper

    # ── Pydantic Settings Config ──────────────────────────────────────────
    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "populate_by_name": True,
        "extra": "ignore",
    }

    def validate_required_for_production(self) -> None:
        """
        What:  Validates that critical settings are configured.
        When:  Called during app startup (lifespan).
        How:   Checks each required field and raises ValueError with guidance.
        """
        errors = []
        if not self.mongodb_uri:
            errors.append("MONGODB_URI is not set. Use a mongodb:// or mongodb+srv:// URI.")
        elif not self.mongodb_uri.startswith(("mongodb://", "mongodb+srv://")):
            errors.append("MONGODB_URI must start with mongodb:// or mongodb+srv://")
        if self.db_min_pool_size > self.db_max_pool_size:
            errors.append("DB_MIN_POOL_SIZE must not exceed DB_MAX_POOL_SIZE.")
        if errors:
            raise ValueError(
                "Configuration validation failed:\n" + "\n".join(f"  - {e}" for e in errors)
            )


# Singleton instance, imported throughout the application
settings = Settings()
