"""
Simple configuration management.

The ``Settings`` dataclass reads configuration directly from
environment variables.  Defaults are provided for all fields so the
service starts without any configuration; override them via
environment variables in a real deployment.
"""

import os
from dataclasses import dataclass


def _env_int(name: str, default: int) -> int:
    """Read an integer environment variable, falling back on garbage."""
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        return default


@dataclass
class Settings:
    """Application settings loaded from environment variables."""

    project_name: str = os.getenv("PROJECT_NAME", "Scholaria API")
    api_version: str = os.getenv("API_VERSION", "0.0.1")
    debug: bool = os.getenv("DEBUG", "false").lower() in {"1", "true", "yes"}
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    # Optional path of a log file in addition to the console handler.
    log_file: str = os.getenv("LOG_FILE", "")

    # Path of the SQLite database.  Relative paths are resolved against
    # the project root by the ``db`` module; ``:memory:`` keeps
    # everything in process memory.
    database_url: str = os.getenv("DATABASE_URL", "scholaria.db")

    # Search defaults.  ``default_page_size`` is used when a client sends
    # no (or an unusable) ``limit``; anything above ``max_page_size`` is
    # clamped down to it.
    default_page_size: int = _env_int("DEFAULT_PAGE_SIZE", 20)
    max_page_size: int = _env_int("MAX_PAGE_SIZE", 100)
    default_sort: str = os.getenv("DEFAULT_SORT", "updated_at")

    http_host: str = os.getenv("HTTP_HOST", "0.0.0.0")
    http_port: int = _env_int("HTTP_PORT", 8000)


# Instantiate settings once so other modules can import it without
# repeatedly reading environment variables.  Environment variables
# should be set before importing this module.
settings = Settings()
