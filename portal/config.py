"""Client Portal Configuration Settings."""

from typing import List, Literal, Optional

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    # Storage
    DATABASE_URL: Optional[str] = None
    STORAGE_BACKEND: Literal["auto", "memory", "sql"] = "auto"
    SEED_DEMO_USERS: bool = True

    # Sessions
    SESSION_TTL_MINUTES: int = Field(default=60 * 24 * 7, gt=0)  # one week
    PASSWORD_MIN_LENGTH: int = 6

    # Application
    APP_NAME: str = "Client Portal"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"
    CORS_ORIGINS: str = "http://localhost:3000,http://localhost:5173"

    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 8000

    @property
    def cors_origins_list(self) -> List[str]:
        """Return the configured CORS origins as a sanitized list."""

        if not self.CORS_ORIGINS:
            return []

        return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = True


settings = Settings()
