"""Application settings."""

from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration settings."""

    debug_mode: bool = False
    storage_backend: str = "in_memory"  # in_memory or postgres
    database_url: str = ""  # Required when storage_backend=postgres
    notification_emitter: str = "in_memory"  # in_memory, noop, postgres or redis
    redis_url: str = "redis://localhost:6379/0"
    notification_ttl_seconds: int = 604800  # 7 days
    notification_inbox_max_entries: int = 500
    # Processing operator slots
    stage1_operator_id: Optional[int] = None
    stage2_operator_id: Optional[int] = None
    payment_due_days: int = 10
    conversion_max_attempts: int = 2
    default_country_code: str = "+91"

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        env_prefix="",
    )


settings = Settings()
