"""Application configuration loaded from environment variables."""

from functools import lru_cache
from typing import Literal

from pydantic import SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def _validate_http_url(name: str, v: str | None) -> str | None:
    if v is None or not v.strip():
        return None
    s = v.strip().rstrip("/")
    if not (s.lower().startswith("http://") or s.lower().startswith("https://")):
        raise ValueError(f"{name} must use http or https")
    return s


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
    API_PREFIX: str = "/api"
    APP_VERSION: str = "1.0.0"

    # Identity directory: "supabase" talks to Supabase Auth; "memory" is a process-local fake
    DIRECTORY_BACKEND: Literal["supabase", "memory"] = "memory"
    SUPABASE_URL: str | None = None
    SUPABASE_SERVICE_KEY: SecretStr | None = None
    DIRECTORY_REQUEST_TIMEOUT_SEC: float = 5.0
    DIRECTORY_READ_RETRIES: int = 1
    DIRECTORY_PAGE_SIZE: int = 200

    # Synthetic login emails and public user ids generated at registration
    INTERNAL_EMAIL_DOMAIN: str = "cromwellpay.local"
    USER_ID_PREFIX: str = "CROM"

    # Session tokens and password hashing for the in-memory directory
    JWT_SECRET: SecretStr = SecretStr("change-me-in-production")
    JWT_ALGORITHM: str = "HS256"
    SESSION_EXPIRE_MINUTES: int = 10080
    BCRYPT_ROUNDS: int = 12

    # Resend (optional; only the verification email function uses it)
    RESEND_API_KEY: SecretStr | None = None
    RESEND_API_URL: str = "https://api.resend.com"
    VERIFICATION_EMAIL_FROM: str = "Cromwell Pay <verificacion@cromwellpay.com>"
    EMAIL_REQUEST_TIMEOUT_SEC: float = 10.0

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = (v or "").strip().upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError("LOG_LEVEL must be one of DEBUG, INFO, WARNING, ERROR, CRITICAL")
        return level

    @field_validator("API_PREFIX")
    @classmethod
    def validate_api_prefix(cls, v: str) -> str:
        if not v or not v.startswith("/"):
            raise ValueError("API_PREFIX must start with '/'")
        return v.rstrip("/")

    @field_validator("SUPABASE_URL")
    @classmethod
    def validate_supabase_url(cls, v: str | None) -> str | None:
        return _validate_http_url("SUPABASE_URL", v)

    @field_validator("RESEND_API_URL")
    @classmethod
    def validate_resend_api_url(cls, v: str) -> str:
        url = _validate_http_url("RESEND_API_URL", v)
        if url is None:
            raise ValueError("RESEND_API_URL must be set and non-empty")
        return url

    @field_validator("DIRECTORY_REQUEST_TIMEOUT_SEC")
    @classmethod
    def validate_directory_timeout(cls, v: float) -> float:
        if v <= 0 or v > 30:
            raise ValueError(
                "DIRECTORY_REQUEST_TIMEOUT_SEC must be greater than 0 and at most 30"
            )
        return v

    @field_validator("DIRECTORY_READ_RETRIES")
    @classmethod
    def validate_directory_retries(cls, v: int) -> int:
        if v < 0 or v > 3:
            raise ValueError("DIRECTORY_READ_RETRIES must be between 0 and 3")
        return v

    @field_validator("DIRECTORY_PAGE_SIZE")
    @classmethod
    def validate_directory_page_size(cls, v: int) -> int:
        if v < 1 or v > 1000:
            raise ValueError("DIRECTORY_PAGE_SIZE must be between 1 and 1000")
        return v

    @field_validator("INTERNAL_EMAIL_DOMAIN")
    @classmethod
    def validate_internal_email_domain(cls, v: str) -> str:
        domain = (v or "").strip().lower()
        if not domain or "@" in domain or "." not in domain:
            raise ValueError("INTERNAL_EMAIL_DOMAIN must be a bare domain (e.g. example.local)")
        return domain

    @field_validator("JWT_SECRET")
    @classmethod
    def validate_jwt_secret(cls, v: SecretStr) -> SecretStr:
        if not v.get_secret_value() or not v.get_secret_value().strip():
            raise ValueError("JWT_SECRET must be set and non-empty")
        return v

    @field_validator("JWT_ALGORITHM")
    @classmethod
    def validate_jwt_algorithm(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("JWT_ALGORITHM must be set and non-empty")
        return v.strip()

    @field_validator("SESSION_EXPIRE_MINUTES")
    @classmethod
    def validate_session_expire_minutes(cls, v: int) -> int:
        if v < 1 or v > 43200:
            raise ValueError(
                "SESSION_EXPIRE_MINUTES must be between 1 and 43200 (1 min to 30 days)"
            )
        return v

    @field_validator("BCRYPT_ROUNDS")
    @classmethod
    def validate_bcrypt_rounds(cls, v: int) -> int:
        if v < 4 or v > 16:
            raise ValueError("BCRYPT_ROUNDS must be between 4 and 16")
        return v

    @field_validator("EMAIL_REQUEST_TIMEOUT_SEC")
    @classmethod
    def validate_email_timeout(cls, v: float) -> float:
        if v <= 0 or v > 60:
            raise ValueError(
                "EMAIL_REQUEST_TIMEOUT_SEC must be greater than 0 and at most 60"
            )
        return v


@lru_cache
def get_settings() -> Settings:
    """Return cached settings instance (safe to call from dependencies)."""
    return Settings()


settings = get_settings()
