import os
from pathlib import Path
from pydantic_settings import BaseSettings
from dotenv import load_dotenv

load_dotenv()


class Settings(BaseSettings):
    # Application settings
    APP_NAME: str = "EcoTrack"
    DEBUG: bool = os.getenv("DEBUG", "false").lower() == "true"
    ENVIRONMENT: str = os.getenv("ENVIRONMENT", "development")
    TEST: bool = False

    # Server
    PORT: int = 3001
    MAX_REQUEST_SIZE: int = 50 * 1024 * 1024  # 50MB
    CORS_ORIGINS: list[str] = ["http://localhost:3000", "http://localhost:5173"]

    # Storage backend: "memory" or "database"
    BACKEND: str = "memory"

    # Database settings
    DATABASE_URL: str = "sqlite+aiosqlite:///./ecotrack.db"
    DB_POOL_SIZE: int = 20
    DB_MAX_OVERFLOW: int = 10
    DB_POOL_TIMEOUT: int = 30
    DB_POOL_RECYCLE: int = 1800
    DB_MAX_RETRIES: int = 3
    DB_RETRY_DELAY: int = 1

    # JWT settings
    JWT_SECRET_KEY: str = "change-me-in-production"
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24
    BCRYPT_ROUNDS: int = 12

    # Identity
    REQUIRE_EMAIL_VERIFICATION: bool = False
    # Lets a login request pick its own role, admin included. Development only.
    ALLOW_ROLE_SELECTION: bool = False
    LOGIN_RATE_LIMIT: str = "10/minute"

    # Credits
    STARTING_CREDITS: int = 100
    REDEEM_COST: int = 100
    REDEEM_CODE_PREFIX: str = "ECO"

    # Demo data
    SEED_DEMO_DATA: bool = True
    DEMO_PASSWORD: str = "password123"

    # Uploads
    UPLOAD_DIR: str = str(Path(__file__).parent.parent.parent / "uploads")

    # Logging
    LOG_DIR: str = str(Path(__file__).parent.parent.parent / "logs")
    LOG_LEVEL: str = "INFO"

    # Observability
    LOGFIRE_TOKEN: str | None = None
    SENTRY_DSN: str | None = None


settings = Settings()
