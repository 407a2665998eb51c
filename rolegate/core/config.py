"""Application configuration loaded from environment variables."""

from functools import lru_cache
from typing import Literal

from pydantic import SecretStr, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Allowed URL schemes for DATABASE_URL (module-level so validators can use it).
VALID_DATABASE_URL_PREFIXES = (
    "sqlite://",
    "sqlite+pysqlite://",
    "postgresql://",
    "postgresql+psycopg2://",
    "postgres://",
)

# Placeholder secret for local development only; rejected when APP_ENV=prod.
DEV_SESSION_SECRET = "change-me-in-production"

# Minimum HS256 key length (SHA-256 digest size) required in prod.
MIN_PROD_SESSION_SECRET_BYTES = 32


class Settings(BaseSettings):
    """Validated application settings from env and optional .env file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    APP_ENV: Literal["dev", "prod"] = "dev"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    HOST: str = "127.0.0.1"
    PORT: int = 3000

    # File-backed SQLite by default; Postgres works too.
    DATABASE_URL: str = "sqlite:///./db.sqlite"

    # Server-side sessions; the cookie carries a signed opaque session id.
    SESSION_SECRET: SecretStr = SecretStr(DEV_SESSION_SECRET)
    SESSION_COOKIE_NAME: str = "rolegate_session"
    SESSION_EXPIRE_MINUTES: int = 1440
    SESSION_COOKIE_SECURE: bool = False

    # Account created on first startup when the user table is empty.
    ADMIN_LOGIN: str = "admin"
    ADMIN_PASSWORD: SecretStr = SecretStr("admin")

    @field_validator("DATABASE_URL")
    @classmethod
    def validate_database_url(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("DATABASE_URL must be set and non-empty")
        if not any(v.startswith(prefix) for prefix in VALID_DATABASE_URL_PREFIXES):
            raise ValueError(
                "DATABASE_URL must be a SQLite or PostgreSQL URL (e.g. sqlite:///./db.sqlite)"
            )
        return v.strip()

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.strip().upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError("LOG_LEVEL must be one of DEBUG, INFO, WARNING, ERROR, CRITICAL")
        return level

    @field_validator("PORT")
    @classmethod
    def validate_port(cls, v: int) -> int:
        if v < 1 or v > 65535:
            raise ValueError("PORT must be between 1 and 65535")
        return v

    @field_validator("SESSION_SECRET")
    @classmethod
    def validate_session_secret(cls, v: SecretStr) -> SecretStr:
        if not v.get_secret_value() or not v.get_secret_value().strip():
            raise ValueError("SESSION_SECRET must be set and non-empty")
        return v

    @field_validator("SESSION_COOKIE_NAME")
    @classmethod
    def validate_session_cookie_name(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("SESSION_COOKIE_NAME must be set and non-empty")
        return v.strip()

    @field_validator("SESSION_EXPIRE_MINUTES")
    @classmethod
    def validate_session_expire_minutes(cls, v: int) -> int:
        if v < 1 or v > 10080:
            raise ValueError(
                "SESSION_EXPIRE_MINUTES must be between 1 and 10080 (1 min to 7 days)"
            )
        return v

    @field_validator("ADMIN_LOGIN")
    @classmethod
    def validate_admin_login(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("ADMIN_LOGIN must be set and non-empty")
        return v.strip()

    @field_validator("ADMIN_PASSWORD")
    @classmethod
    def validate_admin_password(cls, v: SecretStr) -> SecretStr:
        if not v.get_secret_value():
            raise ValueError("ADMIN_PASSWORD must be set and non-empty")
        return v

    @model_validator(mode="after")
    def require_real_secret_in_prod(self) -> "Settings":
        if self.APP_ENV != "prod":
            return self
        secret = self.SESSION_SECRET.get_secret_value()
        if secret == DEV_SESSION_SECRET:
            raise ValueError("SESSION_SECRET must be changed from the development default in prod")
        if len(secret.encode("utf-8")) < MIN_PROD_SESSION_SECRET_BYTES:
            raise ValueError(
                f"SESSION_SECRET must be at least {MIN_PROD_SESSION_SECRET_BYTES} bytes in prod"
            )
        return self


@lru_cache
def get_settings() -> Settings:
    """Return cached settings instance (safe to call from dependencies)."""
    return Settings()
