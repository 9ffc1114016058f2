# user_service/shared/config.py
from enum import Enum
from typing import List, Optional
from urllib.parse import quote_plus

from pydantic_settings import BaseSettings, SettingsConfigDict


class AppEnv(str, Enum):
    DEVELOPMENT = "development"
    PRODUCTION = "production"
    TESTING = "testing"

class StorageBackend(str, Enum):
    SQL = "sql"
    MEMORY = "memory"

class Settings(BaseSettings):
    """
    Central Configuration Registry.
    Strictly typed and validated via Pydantic.
    """

    # --- Application Meta ---
    APP_NAME: str = "user-service"
    APP_ENV: AppEnv = AppEnv.DEVELOPMENT
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False

    # --- HTTP Server ---
    HOST: str = "0.0.0.0"
    PORT: int = 8080
    API_PREFIX: str = "/api/v1"
    CORS_ORIGINS: str = "*"
    REQUEST_TIMEOUT_SEC: float = 30.0
    SHUTDOWN_TIMEOUT_SEC: int = 30

    # --- Logging & Observability ---
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "json"
    OTEL_SERVICE_NAME: str = "user-service"
    OTEL_EXPORTER_OTLP_ENDPOINT: Optional[str] = None

    # --- Persistence ---
    STORAGE_BACKEND: StorageBackend = StorageBackend.SQL

    # A full URL wins over the individual DB_* parts.
    DATABASE_URL: Optional[str] = None
    DB_HOST: str = "localhost"
    DB_PORT: int = 5432
    DB_USER: str = "postgres"
    DB_PASSWORD: str = "password"
    DB_NAME: str = "userservice"
    DB_SSL_MODE: str = "disable"
    DB_TIMEZONE: str = "UTC"
    DB_ECHO: bool = False
    DB_POOL_SIZE: int = 5
    DB_AUTO_MIGRATE: bool = True

    # --- Dynamic Resolution ---

    @property
    def database_url(self) -> str:
        """
        Async SQLAlchemy URL for the configured database.
        Built from the DB_* parts unless DATABASE_URL is set.
        """
        if self.DATABASE_URL:
            return self.DATABASE_URL

        url = (
            f"postgresql+asyncpg://{quote_plus(self.DB_USER)}:{quote_plus(self.DB_PASSWORD)}"
            f"@{self.DB_HOST}:{self.DB_PORT}/{self.DB_NAME}"
        )
        if self.DB_SSL_MODE and self.DB_SSL_MODE != "disable":
            url += f"?ssl={self.DB_SSL_MODE}"
        return url

    @property
    def cors_origins(self) -> List[str]:
        raw = (self.CORS_ORIGINS or "").strip()
        if not raw or raw == "*":
            return ["*"]
        return [origin.strip() for origin in raw.split(",") if origin.strip()]

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

settings = Settings()
