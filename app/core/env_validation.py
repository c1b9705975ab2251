"""
Runtime Environment Validation Module

Validates required environment variables at application startup.
If validation fails, the application refuses to start (hard fail).
"""

import os
import sys
from typing import Optional

from cryptography.fernet import Fernet
from pydantic import ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict


class RuntimeSettings(BaseSettings):
    """
    Strict validation schema for runtime environment variables.

    Required fields MUST be present and valid, or the application will not start.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ========================================================================
    # CRITICAL: Database / Auth / Encryption
    # ========================================================================
    database_url: str
    firebase_project_id: str
    google_application_credentials: Optional[str] = None
    encryption_key: str

    # ========================================================================
    # Application Configuration
    # ========================================================================
    app_name: str = "Strukture"
    debug: bool = False
    environment: str = "development"
    allowed_origins: str = "http://localhost:3000"

    # ========================================================================
    # Integrations (required in production only)
    # ========================================================================
    stripe_secret_key: Optional[str] = None
    stripe_webhook_secret: Optional[str] = None
    smtp_host: Optional[str] = None
    telegram_bot_token: Optional[str] = None


def _fail(*lines: str) -> None:
    for line in lines:
        print(line, file=sys.stderr)
    sys.exit(1)


def validate_environment() -> RuntimeSettings:
    """
    Validate required environment variables at startup.

    Must be called before the FastAPI app starts.

    Raises:
        SystemExit: If validation fails (exit code 1)
    """
    try:
        settings = RuntimeSettings()
    except ValidationError as e:
        lines = ["❌ FATAL: Environment validation failed", "", "Missing or invalid environment variables:"]
        for error in e.errors():
            field = " -> ".join(str(loc) for loc in error["loc"])
            lines.append(f"   • {field}: {error['msg']}")
        lines.append("")
        lines.append("Please check your .env file or environment variables.")
        _fail(*lines)

    # 1. Encryption key must be a usable Fernet key
    try:
        Fernet(settings.encryption_key.encode())
    except (ValueError, TypeError):
        _fail(
            "❌ FATAL: ENCRYPTION_KEY is not a valid Fernet key.",
            "   Generate one with cryptography.fernet.Fernet.generate_key().",
        )

    # 2. Firebase credentials path must exist when given
    if settings.google_application_credentials:
        if not os.path.exists(settings.google_application_credentials):
            _fail(f"❌ FATAL: Firebase credentials file not found: {settings.google_application_credentials}")

    if settings.environment.lower() == "production":
        # 3. CORS: no wildcard in production
        origins = [o.strip() for o in settings.allowed_origins.split(",")]
        if "*" in origins:
            _fail(
                "❌ FATAL: Wildcard CORS origin (*) detected in production mode.",
                "   Set ALLOWED_ORIGINS to specific domains (comma-separated).",
            )

        # 4. Database must be PostgreSQL
        if not settings.database_url.startswith("postgresql"):
            _fail("❌ FATAL: DATABASE_URL must be a PostgreSQL connection string in production")

        # 5. Payments must be wired
        if not settings.stripe_secret_key or not settings.stripe_webhook_secret:
            _fail("❌ FATAL: STRIPE_SECRET_KEY and STRIPE_WEBHOOK_SECRET required in production")

    print("✅ Environment validation passed")
    print(f"   App: {settings.app_name} ({settings.environment})")
    print(f"   Email: {'enabled' if settings.smtp_host else 'disabled'}")
    print(f"   Telegram: {'enabled' if settings.telegram_bot_token else 'disabled'}")
    print(f"   CORS Origins: {settings.allowed_origins}")

    return settings


if __name__ == "__main__":
    validate_environment()
    print("\n✅ All environment variables are valid!")
