"""Configuration management for schedcast."""

import os
from pathlib import Path
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


def _optional_path(name: str) -> Optional[Path]:
    value = os.getenv(name)
    return Path(value) if value else None


class Settings(BaseModel):
    """Application settings."""

    # Public viewer page; broadcast URLs are "<viewer_base_url>?c=<code>"
    viewer_base_url: str = os.getenv(
        "VIEWER_BASE_URL", "https://marcoajello.github.io/skeduler-broadcast/"
    )

    # Title used when neither the caller nor the schedule provides one
    default_title: str = os.getenv("DEFAULT_TITLE", "Schedule")

    # Database path for broadcast records and persisted session settings
    database_path: Path = Path(os.getenv("DATABASE_PATH", "data/schedcast.db"))

    # Snapshot storage ('local' or 'supabase')
    blob_backend: str = os.getenv("BLOB_BACKEND", "local")
    blob_root: Path = Path(os.getenv("BLOB_ROOT", "data/blobs"))
    storage_bucket: str = os.getenv("STORAGE_BUCKET", "schedule-files")
    cache_control: str = os.getenv("CACHE_CONTROL", "60")

    # Supabase Storage credentials (required when BLOB_BACKEND=supabase)
    supabase_url: Optional[str] = os.getenv("SUPABASE_URL")
    supabase_key: Optional[str] = os.getenv("SUPABASE_KEY")
    store_timeout_seconds: float = float(os.getenv("STORE_TIMEOUT_SECONDS", "30.0"))

    # Identity of the publishing user; unset means "not authenticated"
    broadcast_user_id: Optional[str] = os.getenv("BROADCAST_USER_ID") or None

    # Editor state export used when no document is posted inline
    source_path: Optional[Path] = _optional_path("SOURCE_PATH")

    # Server settings
    host: str = os.getenv("HOST", "127.0.0.1")
    port: int = int(os.getenv("PORT", "8000"))
    debug: bool = os.getenv("DEBUG", "false").lower() == "true"

    # CORS settings (comma-separated list of allowed origins, or * for all)
    cors_allow_origins: list[str] = _parse_cors_origins()


settings = Settings()
