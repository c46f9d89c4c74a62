"""
Application configuration with Pydantic Settings for validation and type safety.
Supports environment-specific configurations and .env file loading.
"""

from enum import Enum
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field, field_validator


class Environment(str, Enum):
    """Application environment types"""

    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"
    TESTING = "testing"


class Settings(BaseSettings):
    """
    Application settings with validation.
    Settings are loaded from environment variables or .env file.
    """

    # Application settings
    app_name: str = Field(default="Canteen Storefront", description="Application name")
    app_version: str = Field(default="1.0.0", description="Application version")
    environment: Environment = Field(
        default=Environment.DEVELOPMENT, description="Application environment"
    )
    debug: bool = Field(default=False, description="Debug mode")

    # Server settings
    host: str = Field(default="0.0.0.0", description="Server host")
    port: int = Field(default=8000, ge=1, le=65535, description="Server port")

    # Remote services
    backend_url: str = Field(
        default="https://ajay-cafe-1.onrender.com",
        description="Canteen backend base URL (menu, cart, auth, orders)",
    )
    recommendation_api_url: str = Field(
        default="https://api-general-latest.onrender.com",
        description="Recommendation service base URL",
    )
    special_recommendation_url: str = Field(
        default="https://canteen-recommendation-api-latest.onrender.com",
        description="ML endpoint listing dishes to show next to the special dish",
    )
    chat_api_url: str = Field(
        default="https://api-general-latest.onrender.com",
        description="Chat assistant service base URL",
    )
    http_timeout_sec: float = Field(
        default=20.0, gt=0, description="Timeout for calls to remote services"
    )

    # Storefront rules
    menu_retry_sec: float = Field(
        default=30.0, ge=0, description="Wait before retrying a failed menu load"
    )
    platform_fee: int = Field(
        default=2, ge=0, description="Flat platform fee added to non-empty carts"
    )
    loyalty_cycle: int = Field(
        default=6, ge=1, description="Orders per complimentary item"
    )
    track_refresh_sec: int = Field(
        default=10, ge=1, description="Suggested polling interval for order tracking"
    )
    admin_refresh_sec: int = Field(
        default=5, ge=1, description="Suggested polling interval for the admin dashboard"
    )

    # Session persistence
    session_db_url: str = Field(
        default="sqlite:///./storefront_sessions.db",
        description="SQLAlchemy URL for persisted storefront sessions",
    )
    db_echo: bool = Field(default=False, description="SQLAlchemy echo SQL statements")
    db_init_attempts: int = Field(
        default=3, ge=1, description="Database initialization retry attempts"
    )
    db_init_delay_sec: float = Field(
        default=1.0, ge=0, description="Delay between DB init attempts"
    )
    session_header: str = Field(
        default="X-Session-ID", description="Header carrying the storefront session id"
    )
    session_cache_size: int = Field(
        default=1000, ge=1, description="Sessions kept in memory; older ones are re-read from the database"
    )

    # Logging
    log_level: str = Field(default="INFO", description="Logging level")
    log_format: str = Field(
        default="%(asctime)s %(levelname)s %(name)s: %(message)s",
        description="Log format string",
    )

    # CORS settings
    cors_origins: list[str] = Field(
        default=["http://localhost:3000", "http://localhost:5173"],
        description="Allowed CORS origins",
    )
    cors_allow_credentials: bool = Field(
        default=True, description="Allow CORS credentials"
    )
    cors_allow_methods: list[str] = Field(
        default=["*"], description="Allowed HTTP methods"
    )
    cors_allow_headers: list[str] = Field(
        default=["*"], description="Allowed HTTP headers"
    )

    # API settings
    api_prefix: str = Field(default="", description="API route prefix")
    api_title: str = Field(
        default="Canteen Storefront API", description="API documentation title"
    )
    api_description: str = Field(
        default="Storefront for canteen food ordering backed by a remote REST service",
        description="API documentation description",
    )

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=False, extra="ignore"
    )

    @field_validator("environment", mode="before")
    @classmethod
    def validate_environment(cls, v):
        """Validate and normalize environment value"""
        if isinstance(v, str):
            return Environment(v.lower())
        return v

    @field_validator(
        "backend_url",
        "recommendation_api_url",
        "special_recommendation_url",
        "chat_api_url",
    )
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    def is_production(self) -> bool:
        """Check if running in production environment"""
        return self.environment == Environment.PRODUCTION

    def is_development(self) -> bool:
        """Check if running in development environment"""
        return self.environment == Environment.DEVELOPMENT

    def is_testing(self) -> bool:
        """Check if running in testing environment"""
        return self.environment == Environment.TESTING


# Global settings instance
settings = Settings()
