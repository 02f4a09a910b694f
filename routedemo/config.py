"""
RouteDemo: Application Configuration
====================================

What:  Centralized configuration management using Pydantic Settings.
How:   Pydantic Settings reads from environment variables (or .env file),
       validates types/ranges, and provides a singleton `settings` object.
Who:   Imported by the app factories, the upload service and the CLI.
When:  Loaded once at module import time; invalid values fail at startup.
"""

from typing import Optional

from pydantic_settings import BaseSettings
from pydantic import Field, field_validator


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings have defaults that mirror a stock development server:
    listen on every interface at port 8080, store uploads under /tmp.
    """

    # ── Server ────────────────────────────────────────────────────────────
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=8080, ge=1, le=65535)

    # What: Controls verbosity of application logging
    # Valid: DEBUG, INFO, WARNING, ERROR, CRITICAL
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

    # ── Hello Service ─────────────────────────────────────────────────────
    # What: Which route layout the hello service registers
    # 1: /ping, /p/*segs, /ping/:seg, /v1/get
    # 2: /ping, /pingping, /p/*segs, /ping/:seg
    hello_variant: int = Field(default=1, ge=1, le=2)

    # ── Upload Service ────────────────────────────────────────────────────
    # What: Directory uploaded files are written into (must already exist)
    upload_dir: str = Field(default="/tmp")

    # What: Largest accepted upload in bytes; larger uploads get 413
    # Default: None, no limit beyond what the multipart parser imposes
    max_upload_size: Optional[int] = Field(default=None, ge=1)

    # What: Bytes read from the request stream per write
    upload_chunk_size: int = Field(default=1_048_576, ge=1024)

    # ── Pydantic Settings Config ──────────────────────────────────────────
    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,  # UPLOAD_DIR and upload_dir both work
        "extra": "ignore",
    }


# Singleton instance, imported throughout the application
settings = Settings()
