import os
from pydantic_settings import BaseSettings
from typing import List, Optional


class Settings(BaseSettings):
    # App
    APP_NAME: str = "tacom-fleet"
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"

    # Database (offline variant runs on SQLite, production on Postgres via asyncpg)
    DATABASE_URL: str = "sqlite+aiosqlite:///./tacom.db"
    CREATE_TABLES_ON_START: bool = True

    # CORS
    CORS_ORIGINS: List[str] = ["http://localhost:5173", "http://localhost:8080"]

    # Movements
    DEFAULT_RESPONSIBLE_USER: str = "Sistema"
    HOME_COMPANY_MARKERS: List[str] = ["TACOM"]
    HOME_COMPANY_NAME: Optional[str] = None
    MAINTENANCE_PARTNER_NAME: Optional[str] = None
    DEFECT_CLASSIFICATION_ENABLED: bool = True

    class Config:
        case_sensitive = True
        # Load .env ONLY when not production
        env_file = ".env" if os.getenv("ENVIRONMENT") != "production" else None


settings = Settings()
