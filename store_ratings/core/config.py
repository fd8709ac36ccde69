"""Application configuration loaded via pydantic settings."""

from typing import List
import secrets

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Strongly-typed application settings with environment overrides."""

    # Application
    APP_NAME: str = "Store Ratings API"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False

    # Security
    SECRET_KEY: str = secrets.token_urlsafe(32)
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24
    RESET_TOKEN_EXPIRE_MINUTES: int = 15
    # No mail channel exists yet, so the reset token is handed back to the caller.
    RESET_TOKEN_IN_RESPONSE: bool = True
    BCRYPT_ROUNDS: int = 10

    # Database
    DATABASE_URL: str = "sqlite:///./data/store_ratings.db"

    # CORS
    ALLOWED_ORIGINS: List[str] = ["http://localhost:5173", "http://localhost:3000"]

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_LEVELS: str = "TRACE,ERROR,WARNING,INFO"
    LOG_FILE_PATH: str = "./logs/app.log"

    # Default admin account created on startup
    SEED_ADMIN: bool = True
    ADMIN_NAME: str = "System Admin"
    ADMIN_EMAIL: str = "admin@store.com"
    ADMIN_PASSWORD: str = "Admin@123"

    class Config:
        """Configure environment file loading behavior."""

        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = True


settings = Settings()
