"""Runtime settings, read from the environment (``CPCE_*``) or a ``.env`` file."""
from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

APP_DIR = Path.home() / ".cpce_prep"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="CPCE_", env_file=".env", extra="ignore")

    db_path: str = Field(default=str(APP_DIR / "prep.db"))
    user_id: str = "local"
    questions_file: str | None = None

    log_level: str = "INFO"
    log_file: str = Field(default=str(APP_DIR / "logs" / "app.log"))
    log_max_bytes: int = 5 * 1024 * 1024
    log_backup_count: int = 2


@lru_cache
def get_settings() -> Settings:
    return Settings()
