# storefront/core/config.py
from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Centralized application settings loaded from environment.

    Env vars (.env), all optional for local development:
      - DATABASE_URL (SQLAlchemy URL, Postgres in production)
      - JWT_SECRET (token signing secret; override outside development)
      - ACCESS_TOKEN_EXPIRE_MINUTES (token lifetime, default 7 days)
      - CORS_ORIGINS (JSON list of allowed browser origins)
      - RATE_LIMIT_MAX / RATE_LIMIT_WINDOW_SECONDS (per client address)
    """

    PROJECT_NAME: str = "Storefront API"
    ENVIRONMENT: str = "development"
    PORT: int = 5000
    LOG_LEVEL: str = "INFO"

    # DB config
    DATABASE_URL: str = "sqlite:///./storefront.db"

    # Token signing / verification
    JWT_SECRET: str = "change-me"
    JWT_ALG: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24 * 7

    # bcrypt work factor
    BCRYPT_ROUNDS: int = 12

    CORS_ORIGINS: list[str] = ["http://localhost:3000"]

    # 100 requests / 15 minutes per client address
    RATE_LIMIT_MAX: int = 100
    RATE_LIMIT_WINDOW_SECONDS: int = 15 * 60

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    @property
    def is_development(self) -> bool:
        return self.ENVIRONMENT.lower() == "development"


@lru_cache
def get_settings() -> Settings:
    """
    Cached settings loader.
    Ensures we don't re-parse .env on every import / request.
    """
    return Settings()
