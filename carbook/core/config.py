"""Application configuration loaded via pydantic settings."""

from typing import List, Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Strongly-typed application settings with environment overrides."""

    # Application
    APP_NAME: str = "Car Book"
    APP_VERSION: str = "0.1.0"
    ENVIRONMENT: str = "development"

    # Security
    ACCESS_TOKEN_SECRET: Optional[str] = None
    REFRESH_TOKEN_SECRET: Optional[str] = None
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 30
    REFRESH_TOKEN_EXPIRE_DAYS: int = 1
    REFRESH_COOKIE_NAME: str = "jwt"
    BCRYPT_ROUNDS: int = 10

    # Login throttling
    LOGIN_RATE_LIMIT_MAX_ATTEMPTS: int = 5
    LOGIN_RATE_LIMIT_WINDOW_SECONDS: int = 60

    # Database
    DATABASE_URL: str = "sqlite:///./carbook/carbook.db"
    SEED_ADMIN: bool = False

    # CORS
    ALLOWED_ORIGINS: List[str] = [
        "http://localhost:4000",
        "http://localhost:8081",
        "http://localhost:19006",
    ]

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_LEVELS: str = "TRACE,ERROR,WARNING,INFO"
    LOG_FILE_PATH: str = "./carbook/logs/app.log"

    class Config:
        """Configure environment file loading behavior."""

        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = True

    @property
    def is_production(self) -> bool:
        """Return True when running with production cookie policy."""
        return self.ENVIRONMENT.strip().lower() == "production"

    @property
    def refresh_cookie_max_age(self) -> int:
        """Refresh cookie lifetime in seconds, matching the refresh token."""
        return self.REFRESH_TOKEN_EXPIRE_DAYS * 24 * 60 * 60


settings = Settings()
