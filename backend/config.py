from pydantic_settings import BaseSettings
from typing import ClassVar, Optional
from pathlib import Path

# Resolve absolute path to the .env file for reliable loading
env_path = Path(__file__).parent.parent / ".env"

class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite:///./database_gudang.db"

    SECRET_KEY: str = "dev-secret-change-me"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60

    FRONTEND_URL: Optional[str] = None

    # Login / sign-up throttling
    RATE_LIMIT_ENABLED: bool = True
    RATE_LIMIT_AUTH: str = "10/minute"

    LOG_LEVEL: str = "INFO"

    # Initial superadmin created by populate_db.py
    SUPERADMIN_EMAIL: str = "admin@gudangsaj.co.id"
    SUPERADMIN_PASSWORD: str = "admin123"
    SUPERADMIN_NAME: str = "Superadmin"

    class Config:
        env_file: ClassVar[str] = str(env_path)
        extra: ClassVar[str] = "ignore"

settings = Settings()
