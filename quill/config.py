"""
Docstring for quill.config

Application configuration.
Everything comes from the environment or the .env file.
"""
from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Pydantic Settings config
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # MongoDB
    MONGODB_URL: str = "mongodb://localhost:27017"
    MONGODB_DB_NAME: str = "quill"
    MONGODB_TIMEOUT_MS: int = 5000

    # JWT
    SECRET_KEY: str
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24  # 0 -> tokens never expire

    # Passwords
    BCRYPT_ROUNDS: int = 12

    # Server
    PORT: int = 3000
    DEBUG: bool = False
    API_PREFIX: str = "/api"

    # RATE-LIMITS
    RATE_LIMIT_ENABLED: bool = True
    REGISTER_RATE_LIMIT: str = "5/minute"
    LOGIN_RATE_LIMIT: str = "10/minute"

    # Feed
    FEED_LIMIT: int = 50

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "text"


@lru_cache
def get_settings() -> Settings:
    """Build the settings once per process."""
    return Settings()
