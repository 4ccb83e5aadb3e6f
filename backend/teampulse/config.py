from typing import Literal, Self

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_DEFAULT_JWT_SECRET = "default-secret-key-change-in-production"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        frozen=True,
    )

    app_name: str = "TeamPulse"
    app_version: str = "0.1.0"
    debug: bool = False
    environment: Literal["development", "staging", "production"] = "development"
    log_level: str = "INFO"
    database_url: str = "postgresql+asyncpg://teampulse:teampulse@db:5432/teampulse"
    cors_origins: list[str] = ["http://localhost:3000", "http://localhost:8000"]

    jwt_secret: str = _DEFAULT_JWT_SECRET
    jwt_algorithm: str = "HS256"
    token_ttl_days: int = 7

    default_wfh_limit_per_month: int = 3

    redmine_url: str = "https://devops.quadrant-si.id/redmine"
    use_redmine_auth: bool = True
    redmine_timeout_seconds: float = 8.0

    @model_validator(mode="after")
    def _reject_default_secret_in_production(self) -> Self:
        if self.environment == "production" and self.jwt_secret == _DEFAULT_JWT_SECRET:
            msg = "JWT_SECRET must be set to a secure value in production"
            raise ValueError(msg)
        return self

    @property
    def token_ttl_seconds(self) -> int:
        return self.token_ttl_days * 24 * 60 * 60


_settings: Settings | None = None


def get_settings() -> Settings:
    """Return cached settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings
