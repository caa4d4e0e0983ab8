from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="HEALTHHUB_",
        case_sensitive=False,
    )

    # App
    env: str = "development"
    debug: bool = False
    log_level: str = "INFO"

    # Database
    db_url: str = "sqlite+aiosqlite:///./healthhub.db"

    # Scheduler
    scheduler_enabled: bool = True
    scheduler_tick_seconds: float = 60.0
    auto_sync_interval_minutes: float = 1440


def get_settings() -> Settings:
    return Settings()
