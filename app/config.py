# =============================================================================
# app/config.py - Application Settings
# =============================================================================
# This module loads configuration from environment variables using pydantic-settings.
# It provides a single Settings class with all configuration values.
#
# Usage:
#   from app.config import settings
#   print(settings.DATABASE_URL)
#
# Environment variables are loaded from:
# 1. System environment variables
# 2. .env file in project root (if exists)
#
# The Settings class validates all values at startup, catching configuration
# errors early rather than at runtime.
# =============================================================================

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Directory holding this package (app/)
APP_DIR = Path(__file__).resolve().parent


def _split_csv(value: str) -> list[str]:
    """Split a comma-separated setting, dropping blanks."""
    return [item.strip() for item in value.split(",") if item.strip()]


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Uses pydantic-settings to:
    - Automatically load from .env file
    - Validate types and constraints
    - Provide sensible defaults for development

    All settings are accessed via the global `settings` instance.
    """

    # -------------------------------------------------------------------------
    # Application Settings
    # -------------------------------------------------------------------------

    PROJECT_NAME: str = Field(
        default="StaffDesk",
        description="Project title shown in page titles and the OpenAPI docs"
    )

    ENVIRONMENT: Literal["development", "staging", "production"] = Field(
        default="development",
        description="Current environment"
    )

    DEBUG: bool = Field(
        default=False,
        description="Enable debug mode (verbose logging, template auto-reload)"
    )

    API_HOST: str = Field(
        default="127.0.0.1",
        description="Host to bind the development server to"
    )

    API_PORT: int = Field(
        default=8000,
        ge=1,
        le=65535,
        description="Port for the development server"
    )

    # Comma-separated feature routers to mount (health is always mounted)
    INSTALLED_APPS: str = Field(
        default="accounts,admin,api",
        description="Enabled feature apps (comma-separated): accounts, admin, api"
    )

    # -------------------------------------------------------------------------
    # Security
    # -------------------------------------------------------------------------

    SECRET_KEY: str = Field(
        default="dev-secret-key-change-in-production",
        min_length=16,
        description="Secret key for signing session cookies and tokens"
    )

    # Host header allow-list (comma-separated string that gets parsed)
    ALLOWED_HOSTS: str = Field(
        default="localhost,127.0.0.1,testserver",
        description="Allowed Host header values (comma-separated, '*' for any)"
    )

    # CORS origins (comma-separated string that gets parsed)
    CORS_ORIGINS: str = Field(
        default="http://localhost:3000",
        description="Allowed CORS origins (comma-separated)"
    )

    JWT_ALGORITHM: Literal["HS256", "HS384", "HS512"] = Field(
        default="HS256",
        description="Signing algorithm for API access tokens"
    )

    ACCESS_TOKEN_EXPIRE_MINUTES: int = Field(
        default=60,
        ge=1,
        le=60 * 24 * 30,
        description="Lifetime of API access tokens"
    )

    PASSWORD_MIN_LENGTH: int = Field(
        default=8,
        ge=1,
        le=128,
        description="Minimum password length enforced by the validators"
    )

    # -------------------------------------------------------------------------
    # Sessions & Login Redirects
    # -------------------------------------------------------------------------

    SESSION_COOKIE_NAME: str = Field(
        default="sessionid",
        description="Name of the signed session cookie"
    )

    SESSION_COOKIE_AGE: int = Field(
        default=60 * 60 * 24 * 14,  # two weeks
        ge=60,
        description="Session cookie lifetime in seconds"
    )

    SESSION_COOKIE_SECURE: bool = Field(
        default=False,
        description="Only send the session cookie over HTTPS"
    )

    LOGIN_URL: str = Field(
        default="/login/",
        description="Where anonymous users are redirected"
    )

    LOGIN_REDIRECT_URL: str = Field(
        default="/",
        description="Where a successful login redirects"
    )

    LOGOUT_REDIRECT_URL: str = Field(
        default="/login/",
        description="Where logout redirects"
    )

    # -------------------------------------------------------------------------
    # Database Configuration
    # -------------------------------------------------------------------------

    DATABASE_URL: str = Field(
        default="sqlite:///./db.sqlite3",
        description="SQLAlchemy database URL"
    )

    DATABASE_ECHO: bool = Field(
        default=False,
        description="Log every SQL statement"
    )

    # -------------------------------------------------------------------------
    # Templates, Static & Media Files
    # -------------------------------------------------------------------------

    TEMPLATES_DIR: Path = Field(
        default=APP_DIR / "templates",
        description="Jinja2 template search path"
    )

    TEMPLATES_AUTO_RELOAD: bool | None = Field(
        default=None,
        description="Reload templates on change (defaults to DEBUG)"
    )

    STATIC_URL: str = Field(
        default="/static/",
        description="URL prefix for static assets"
    )

    STATIC_ROOT: Path = Field(
        default=APP_DIR / "static",
        description="Directory served under STATIC_URL"
    )

    MEDIA_URL: str = Field(
        default="/media/",
        description="URL prefix for user-uploaded files"
    )

    MEDIA_ROOT: Path = Field(
        default=Path("./media"),
        description="Directory served under MEDIA_URL (created at startup)"
    )

    # -------------------------------------------------------------------------
    # Pydantic Settings Configuration
    # -------------------------------------------------------------------------

    model_config = SettingsConfigDict(
        # Load from .env file in project root
        env_file=".env",
        env_file_encoding="utf-8",
        # Treat empty variables as unset
        env_ignore_empty=True,
        # Case-sensitive environment variable names
        case_sensitive=True,
    )

    # -------------------------------------------------------------------------
    # Computed Properties
    # -------------------------------------------------------------------------

    @property
    def allowed_hosts_list(self) -> list[str]:
        """
        Parse ALLOWED_HOSTS string into a list.

        Example: "example.com, *.example.com" -> ["example.com", "*.example.com"]
        """
        return _split_csv(self.ALLOWED_HOSTS) or ["*"]

    @property
    def cors_origins_list(self) -> list[str]:
        """
        Parse CORS_ORIGINS string into a list.

        Handles comma-separated values and strips whitespace.
        Example: "http://localhost:3000, https://myapp.com" -> ["http://localhost:3000", "https://myapp.com"]
        """
        return _split_csv(self.CORS_ORIGINS)

    @property
    def installed_apps_list(self) -> list[str]:
        """Parse INSTALLED_APPS into a lowercase list."""
        return [app.lower() for app in _split_csv(self.INSTALLED_APPS)]

    @property
    def templates_auto_reload(self) -> bool:
        """Template auto-reload follows DEBUG unless set explicitly."""
        if self.TEMPLATES_AUTO_RELOAD is None:
            return self.DEBUG
        return self.TEMPLATES_AUTO_RELOAD

    @property
    def is_sqlite(self) -> bool:
        return self.DATABASE_URL.startswith("sqlite")

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.ENVIRONMENT == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.ENVIRONMENT == "production"


@lru_cache
def get_settings() -> Settings:
    """
    Get cached Settings instance.

    Using lru_cache ensures we only parse .env and validate once,
    not on every access.

    Returns:
        Settings: The application settings instance
    """
    return Settings()


# Global settings instance for easy importing
# Usage: from app.config import settings
settings = get_settings()
