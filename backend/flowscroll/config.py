from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Server
    host: str = "127.0.0.1"
    port: int = 8000
    workers: int = 1
    debug: bool = False

    # CORS
    cors_origins: list[str] = ["http://localhost:5173", "http://127.0.0.1:5173"]

    # Profile storage
    profiles_dir: Path = Path("./data/profiles")

    # Analytics (empty endpoint disables delivery)
    analytics_endpoint: str = ""
    analytics_timeout_sec: float = 2.5
    analytics_workers: int = 2
    analytics_max_pending: int = 256

    # Feed
    buffer_size: int = 3
    duel_task_count: int = 20
    free_mind_after_ms: int = 20 * 60 * 1000
    free_mind_cooldown_ms: int = 10 * 60 * 1000

    # Logging
    log_level: str = "INFO"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False
        env_prefix = ""


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
