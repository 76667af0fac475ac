from pydantic_settings import BaseSettings
from pathlib import Path


class Settings(BaseSettings):
    APP_NAME: str = "PaperTrade"
    APP_VERSION: str = "0.1.0"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # Database: set DATABASE_URL to a PostgreSQL DSN in production
    DATABASE_URL: str = f"sqlite:///{Path(__file__).resolve().parent.parent.parent / 'data' / 'papertrade.db'}"

    # Auth
    SECRET_KEY: str = "papertrade-dev-secret-change-in-production"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 1440  # 24 hours

    # CORS
    FRONTEND_URL: str = "http://localhost:5173"

    # Dashboard
    ACTIVITY_LIMIT_DEFAULT: int = 10
    TRADES_PER_PAGE: int = 3

    # Create the "demo" account with sample trades on an empty database
    SEED_DEMO_DATA: bool = True

    class Config:
        env_file = ".env"


settings = Settings()
