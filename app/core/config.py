from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List

class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore",
    )

    APP_NAME: str = "hayatos-api"
    LOG_LEVEL: str = "INFO"

    SESSION_JWT_SECRET: str = "change_me_session"

    CORS_ORIGINS: str = "http://localhost:3000"

    DATABASE_URL: str = "sqlite+pysqlite:///./hayatos.db"
    REDIS_URL: str = "redis://localhost:6379/0"

    # Query compiler
    QUERY_MAX_LIMIT: int = 100
    QUERY_DEFAULT_LIMIT: int = 20
    QUERY_SKIP_FAILED_SOURCES: bool = False

    # Statistics windows
    STATS_LOOKBACK_DAYS: int = 365

    EXPORT_MAX_PENDING_PER_USER: int = 3
    EXPORT_REQUEUE_AFTER_MINUTES: int = 10
    EXPORT_TASK_ALWAYS_EAGER: bool = False

    @property
    def cors_origins_list(self) -> List[str]:
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]

settings = Settings()
