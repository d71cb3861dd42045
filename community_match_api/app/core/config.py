"""
Simple configuration management.

The ``Settings`` dataclass reads configuration directly from
environment variables.  Defaults are provided for all fields so the
service starts without any configuration; in a production deployment
at least ``SECRET_KEY`` and ``RESEND_API_KEY`` should be overridden.
"""

import os
from dataclasses import dataclass


@dataclass
class Settings:
    """Application settings loaded from environment variables."""

    project_name: str = os.getenv("PROJECT_NAME", "Community Match API")
    api_version: str = os.getenv("API_VERSION", "1.0.0")
    debug: bool = os.getenv("DEBUG", "false").lower() in {"1", "true", "yes"}
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    log_file: str = os.getenv("LOG_FILE", "")
    secret_key: str = os.getenv("SECRET_KEY", "change_me")
    # Seven days, matching the lifetime of the session tokens handed out
    # at registration and login.
    access_token_expire_minutes: int = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", str(60 * 24 * 7)))
    algorithm: str = os.getenv("ALGORITHM", "HS256")

    # Static token identifying the catalog administrator.  Requests
    # carrying it as a bearer token may add and remove services.  When
    # empty, the admin routes reject every request.
    admin_token: str = os.getenv("ADMIN_TOKEN", "")

    # Comma‑separated list of allowed CORS origins.  ``*`` allows all.
    cors_origins: str = os.getenv("CORS_ORIGINS", "*")

    # Path to the SQLite database.  A relative path is resolved against
    # the project root by the ``db`` module.
    database_url: str = os.getenv("DATABASE_URL", "community_match.db")

    # Lifetime of a password reset code.
    reset_code_ttl_minutes: int = int(os.getenv("RESET_CODE_TTL_MINUTES", "15"))

    # Transactional email (Resend‑compatible HTTP API).  Without an API
    # key no email is sent and delivery is reported as failed.
    resend_api_key: str = os.getenv("RESEND_API_KEY", "")
    mail_from: str = os.getenv("MAIL_FROM", "Community Match <onboarding@resend.dev>")
    mail_api_url: str = os.getenv("MAIL_API_URL", "https://api.resend.com/emails")
    mail_timeout: float = float(os.getenv("MAIL_TIMEOUT", "10"))

    host: str = os.getenv("HOST", "0.0.0.0")
    port: int = int(os.getenv("PORT", "3000"))

    def cors_origin_list(self) -> list[str]:
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]


# Instantiate settings once so other modules can import it without
# repeatedly reading environment variables.  Environment variables
# should be set before importing this module.
settings = Settings()
