from typing import List, Union
import logging

from pydantic import AnyHttpUrl, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    model_config = SettingsConfigDict(case_sensitive=True, env_file=".env", extra="ignore")

    PROJECT_NAME: str = "GymPro API"
    API_PREFIX: str = "/api"
    ENVIRONMENT: str = "development"

    # Production must override both secrets through .env or the environment
    SECRET_KEY: str = Field(
        default="dev-only-access-secret-please-change-in-production",
        description="Signing key for access tokens"
    )
    REFRESH_SECRET_KEY: str = Field(
        default="dev-only-refresh-secret-please-change-in-production",
        description="Signing key for refresh tokens"
    )
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 15
    REFRESH_TOKEN_EXPIRE_DAYS: int = 7
    BCRYPT_ROUNDS: int = 12

    # CORS
    BACKEND_CORS_ORIGINS: List[Union[str, AnyHttpUrl]] = [
        "http://localhost:3000",
        "http://localhost:3001",
    ]

    @field_validator("BACKEND_CORS_ORIGINS", mode="before")
    @classmethod
    def assemble_cors_origins(cls, v: Union[str, List[str]]) -> Union[List[str], str]:
        if isinstance(v, str) and not v.startswith("["):
            return [i.strip() for i in v.split(",")]
        elif isinstance(v, (list, str)):
            return v
        raise ValueError(v)

    # Database
    DATABASE_URL: str = "sqlite+aiosqlite:///./gympro.db"
    SQL_DEBUG: bool = False

    # Reference data is seeded on every startup (idempotent)
    SEED_ON_STARTUP: bool = True

    # Rate limit for credential endpoints (requests per window per client IP)
    AUTH_RATE_LIMIT: int = 100
    AUTH_RATE_LIMIT_PRODUCTION: int = 10
    AUTH_RATE_WINDOW_SECONDS: int = 15 * 60

    # Leaderboard snapshot refresh
    LEADERBOARD_REFRESH_ENABLED: bool = True
    LEADERBOARD_REFRESH_MINUTES: int = 60

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_DIR: str = "logs"

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT.lower() == "production"

    @property
    def is_development(self) -> bool:
        return self.ENVIRONMENT.lower() == "development"

    @property
    def auth_rate_limit(self) -> int:
        return self.AUTH_RATE_LIMIT_PRODUCTION if self.is_production else self.AUTH_RATE_LIMIT


settings = Settings()
logger.info(f"Loaded settings: ENVIRONMENT={settings.ENVIRONMENT}, CORS={settings.BACKEND_CORS_ORIGINS}")
