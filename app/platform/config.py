from pathlib import Path
from typing import Literal

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # ── App ─────────────────────────────────────
    APP_NAME: str = "Lab Portal"
    ENVIRONMENT: Literal["local", "staging", "production"] = "local"
    DEBUG: bool = False

    # ── Database ────────────────────────────────
    DATABASE_URL: str = "sqlite+aiosqlite:///./lab_portal.db"

    # ── Email Configuration ─────────────────────
    MAIL_HOST: str = "smtp.gmail.com"
    MAIL_PORT: int = 587
    MAIL_USERNAME: str = "your-email-id"
    MAIL_PASSWORD: str = "your-password"
    MAIL_ENCRYPTION: str = "tls"
    MAIL_FROM_ADDRESS: str = "example@localhost"
    MAIL_FROM_NAME: str = "Lab Portal"

    # ── JWT / Auth ──────────────────────────────
    JWT_SECRET_KEY: str = "your-secret-key-change-this-in-production"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 7 * 24 * 60
    ALGORITHM: str = "HS256"

    # ── Password reset codes ────────────────────
    RESET_CODE_TTL_MINUTES: int = 15
    RESET_CODE_MAX_ATTEMPTS: int = 5
    RESET_CODE_SWEEP_INTERVAL_SECONDS: int = 5 * 60
    # Echo the raw code in forgot-password responses. Ignored in production.
    EXPOSE_RESET_CODE: bool = False

    # ── Seeded super admin ──────────────────────
    DEFAULT_ADMIN_USERNAME: str = "admin"
    DEFAULT_ADMIN_PASSWORD: str = "admin123"
    DEFAULT_ADMIN_EMAIL: str = "admin@example.com"

    class Config:
        env_file = str(Path(__file__).parent.parent.parent / ".env")
        env_file_encoding = "utf-8"
        case_sensitive = False
        extra = "ignore"

    @property
    def expose_reset_code(self) -> bool:
        return self.EXPOSE_RESET_CODE and self.ENVIRONMENT != "production"


settings = Settings()
