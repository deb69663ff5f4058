"""
Backend configuration using Pydantic BaseSettings.
Loads from .env and provides typed access to all backend settings.
"""

from pathlib import Path
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # ── Storage ──────────────────────────────────────────
    UPLOAD_DIR: Path = Path("./uploads")
    MANIFEST_PATH: Path = Path("./files-list.json")

    # ── Uploads ──────────────────────────────────────────
    MAX_UPLOAD_SIZE_MB: int = 50
    ALLOWED_MIME_TYPES: list[str] = [
        "application/pdf",
        "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
        "application/msword",
        "image/png",
        "image/jpeg",
        "image/jpg",
        "image/gif",
        "image/bmp",
        "image/webp",
    ]

    # ── Maintenance ──────────────────────────────────────
    # Orphans younger than this may belong to an upload still in flight
    ORPHAN_MIN_AGE_MINUTES: int = 60

    # ── Server ───────────────────────────────────────────
    BACKEND_HOST: str = "0.0.0.0"
    BACKEND_PORT: int = 3001
    CORS_ORIGINS: list[str] = ["http://localhost:4200", "http://127.0.0.1:4200"]
    LOG_LEVEL: str = "INFO"

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}

    @property
    def max_upload_bytes(self) -> int:
        return self.MAX_UPLOAD_SIZE_MB * 1024 * 1024


settings = Settings()
