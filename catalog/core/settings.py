# catalog/core/settings.py
from __future__ import annotations

from typing import List, Optional

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # App
    APP_TITLE: str = "perfume-catalog-api"
    APP_VERSION: str = "0.1.0"
    LOG_LEVEL: str = "INFO"
    HOST: str = "0.0.0.0"
    PORT: int = Field(3001, validation_alias=AliasChoices("PORT", "API_PORT"))
    CORS_ORIGINS: str = "*"

    # DB: DATABASE_URL wins; otherwise assembled from the DB_* parts when DB_HOST is set
    DATABASE_URL: Optional[str] = Field(None, description="postgresql+psycopg://catalog:<PASS>@db:5432/catalog")
    DB_DRIVER: str = "postgresql+psycopg"
    DB_HOST: Optional[str] = None
    DB_USER: Optional[str] = None
    DB_PASSWORD: Optional[str] = None
    DB_NAME: str = "catalog"
    DB_PORT: Optional[int] = None

    DB_ECHO: bool = False
    DB_POOL_SIZE: int = 10
    DB_MAX_OVERFLOW: int = 10
    DB_POOL_RECYCLE: int = 1800  # sec
    DB_POOL_TIMEOUT: int = 30    # sec
    DB_CREATE_ALL: bool = False

    # Client side
    CATALOG_API_URL: str = "http://localhost:3001"
    CATALOG_API_TIMEOUT: float = 5.0

    model_config = SettingsConfigDict(
        env_file=(".env", ".env.local"),
        case_sensitive=False,
        extra="ignore",
    )

    @property
    def cors_origins(self) -> List[str]:
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]


settings = Settings()
