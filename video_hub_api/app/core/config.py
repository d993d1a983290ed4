"""
Simple configuration management.

The ``Settings`` dataclass reads configuration directly from
environment variables.  Defaults are provided for all fields.  In a
production deployment you should override at least ``SECRET_KEY`` and
``DATABASE_URL`` via environment variables.

Components that depend on secrets or storage locations (the token
manager and the media storage) receive a ``Settings`` instance when
they are constructed instead of reading the module global themselves.
"""

import os
from dataclasses import dataclass
from typing import Optional


@dataclass
class Settings:
    """Application settings loaded from environment variables."""

    project_name: str = os.getenv("PROJECT_NAME", "Video Hub API")
    api_version: str = os.getenv("API_VERSION", "1.0.0")
    debug: bool = os.getenv("DEBUG", "false").lower() in {"1", "true", "yes"}
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    log_file: Optional[str] = os.getenv("LOG_FILE") or None

    # Key used to sign and verify bearer tokens.  Tokens are long lived
    # (a year by default), so rotating this key logs everyone out.
    secret_key: str = os.getenv("SECRET_KEY", "change_me")
    access_token_expire_minutes: int = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", str(365 * 24 * 60)))
    algorithm: str = os.getenv("ALGORITHM", "HS256")

    # Path or connection string for the SQLite database.  If a relative
    # path is provided, it will be resolved relative to the project root
    # by the ``db`` module.
    database_url: str = os.getenv("DATABASE_URL", "video_hub.db")
    # Seconds a connection waits for a write lock held by another request.
    database_timeout: float = float(os.getenv("DATABASE_TIMEOUT", "10"))

    # Uploaded logos, thumbnails and videos are written below
    # ``media_root`` and served under ``media_url``.
    media_root: str = os.getenv("MEDIA_ROOT", "media")
    media_url: str = os.getenv("MEDIA_URL", "/media")
    max_upload_size: int = int(os.getenv("MAX_UPLOAD_SIZE", str(512 * 1024 * 1024)))


# Instantiate settings once so other modules can import it without
# repeatedly reading environment variables.  Because the dataclass
# computes values at class definition time, environment variables should
# be set before importing this module.
settings = Settings()
