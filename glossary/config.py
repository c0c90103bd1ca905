from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # App
    app_env: str = "dev"
    app_port: int = 8000
    log_level: str = "INFO"

    # Local actor recorded on changelog entries
    actor_name: str = "Admin"

    # Seed data
    seed_on_startup: bool = True
    seed_path: str | None = None

    # Query memoization
    query_cache_size: int = 256

    # Generated ids
    id_prefix: str = ""


settings = Settings()
