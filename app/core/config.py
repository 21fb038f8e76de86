from pydantic_settings import BaseSettings
from pydantic import Field, field_validator, model_validator
from typing import List, Optional


PLACEHOLDER_SECRETS = ("your-secret-key-here", "changeme")


class Settings(BaseSettings):
    # Project Info
    PROJECT_NAME: str = "Todo API"
    API_V1_STR: str = "/api/v1"
    API_VERSION: str = "1.0.0"

    # Database
    DATABASE_URL: str = "sqlite:///./todo.db"

    # Security
    SECRET_KEY: str
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60

    # Token denylist maintenance
    DENYLIST_RETENTION_HOURS: int = 24
    TOKEN_SWEEP_INTERVAL_SECONDS: int = 3600
    TOKEN_SWEEPER_ENABLED: bool = True

    # Rate limiting
    API_RATE_LIMIT: str = "100/15minutes"
    AUTH_RATE_LIMIT: str = "10/minute"

    # CORS
    BACKEND_CORS_ORIGINS: List[str] = [
        "http://localhost:3000",
        "http://localhost:5173",
    ]

    # Environment
    ENVIRONMENT: str = "development"
    ENV: Optional[str] = Field(default=None)

    DEBUG: bool = False

    # Monitoring (Optional - Add to .env for production)
    SENTRY_DSN: str = ""

    # Admin bootstrap
    DEFAULT_ADMIN_EMAIL: str = ""
    DEFAULT_ADMIN_PASSWORD: str = ""

    @field_validator("ENVIRONMENT")
    @classmethod
    def normalize_environment(cls, value: str) -> str:
        return value.lower().strip()

    @model_validator(mode="after")
    def validate_token_lifetimes(self):
        if self.ACCESS_TOKEN_EXPIRE_MINUTES <= 0:
            raise ValueError("ACCESS_TOKEN_EXPIRE_MINUTES must be positive")
        if self.DENYLIST_RETENTION_HOURS <= 0:
            raise ValueError("DENYLIST_RETENTION_HOURS must be positive")
        if self.TOKEN_SWEEP_INTERVAL_SECONDS <= 0:
            raise ValueError("TOKEN_SWEEP_INTERVAL_SECONDS must be positive")
        # A revoked token must stay denylisted for at least as long as it could verify.
        if self.denylist_retention_seconds < self.access_token_lifetime_seconds:
            raise ValueError(
                "DENYLIST_RETENTION_HOURS must cover ACCESS_TOKEN_EXPIRE_MINUTES "
                f"({self.DENYLIST_RETENTION_HOURS}h < {self.ACCESS_TOKEN_EXPIRE_MINUTES}m)"
            )
        return self

    @model_validator(mode="after")
    def validate_production_secret(self):
        if self.ENVIRONMENT == "production":
            normalized_secret = (self.SECRET_KEY or "").strip()
            if len(normalized_secret) < 32 or any(
                placeholder in normalized_secret.lower() for placeholder in PLACEHOLDER_SECRETS
            ):
                raise ValueError("SECRET_KEY must be at least 32 chars and not use placeholders in production")
        return self

    @property
    def access_token_lifetime_seconds(self) -> int:
        return self.ACCESS_TOKEN_EXPIRE_MINUTES * 60

    @property
    def denylist_retention_seconds(self) -> int:
        return self.DENYLIST_RETENTION_HOURS * 3600

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT == "production"

    model_config = {
        "env_file": ".env",
        "case_sensitive": True,
        "extra": "ignore",
    }


settings = Settings()
