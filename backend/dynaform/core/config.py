from pydantic_settings import BaseSettings
from typing import List
import logging
import os


# Sync URL prefixes and the async driver each one runs on
ASYNC_DRIVERS = {
    "postgresql://": "postgresql+asyncpg://",
    "postgres://": "postgresql+asyncpg://",
    "sqlite:///": "sqlite+aiosqlite:///",
}


class Settings(BaseSettings):
    # Application
    APP_NAME: str = "dynaform"
    APP_ENV: str = os.getenv("APP_ENV", "development")
    DEBUG: bool = False
    TESTING: bool = False

    # Database
    DATABASE_URL: str = os.getenv(
        "DATABASE_URL",
        "sqlite+aiosqlite:///./dynaform.db"
    )

    # Seed the sample field definitions when the table is empty
    SEED_ON_STARTUP: bool = True

    # CORS
    CORS_ORIGINS: List[str] = ["http://localhost:3000", "http://localhost:3001", "http://127.0.0.1:3000"]

    class Config:
        env_file = ".env"
        extra = "ignore"

    @property
    def async_database_url(self) -> str:
        """DATABASE_URL rewritten to the async driver of its backend."""
        for prefix, async_prefix in ASYNC_DRIVERS.items():
            if self.DATABASE_URL.startswith(prefix):
                return async_prefix + self.DATABASE_URL[len(prefix):]
        return self.DATABASE_URL


settings = Settings()

logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(settings.APP_NAME)
