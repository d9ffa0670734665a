from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    app_name: str = "IncidentTracker"
    app_version: str = "0.1.0"
    debug: bool = False

    # Database
    database_url: str = "sqlite+aiosqlite:///./incidents.db"

    # Dashboard origins allowed by CORS
    cors_origins: list[str] = ["http://localhost:3000", "http://frontend"]

    # Demo data
    seed_demo_data: bool = False
    seed_count: int = 200

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


@lru_cache
def get_settings() -> Settings:
    return Settings()
