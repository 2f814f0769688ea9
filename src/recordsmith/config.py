"""Configuration management for RecordSmith."""

import os
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel

load_dotenv()


def _parse_cors_origins() -> list[str]:
    """Parse CORS origins from environment variable."""
    cors_env = os.getenv("CORS_ALLOW_ORIGINS")
    if cors_env:
        return cors_env.split(",")
    return ["*"]


class Settings(BaseModel):
    """Application settings."""

    # Server settings
    host: str = os.getenv("HOST", "127.0.0.1")
    port: int = int(os.getenv("PORT", "8000"))
    debug: bool = os.getenv("DEBUG", "false").lower() == "true"

    # CORS settings (comma-separated list of allowed origins, or * for all)
    cors_allow_origins: list[str] = _parse_cors_origins()

    # Logging
    log_level: str = os.getenv("LOG_LEVEL", "INFO")

    # File loading defaults, used when a request leaves the option out
    default_encoding: str = os.getenv("DEFAULT_ENCODING", "UTF-8")
    default_separator: str = os.getenv("DEFAULT_SEPARATOR", "auto")
    default_header_policy: str = os.getenv("DEFAULT_HEADER_POLICY", "auto")

    # Upload limits
    max_upload_bytes: int = int(os.getenv("MAX_UPLOAD_BYTES", str(20 * 1024 * 1024)))
    # Inputs larger than this are parsed/exported off the event loop
    threadpool_threshold_bytes: int = int(os.getenv("THREADPOOL_THRESHOLD_BYTES", str(256 * 1024)))
    threadpool_threshold_records: int = int(os.getenv("THREADPOOL_THRESHOLD_RECORDS", "5000"))

    # Optional name shown by the health endpoint
    instance_name: Optional[str] = os.getenv("INSTANCE_NAME")


settings = Settings()
