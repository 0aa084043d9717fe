# 📄 File: app/shared/config/settings.py
#
# 🧭 Purpose (Layman Explanation):
# The main configuration center that reads all settings from environment variables
# and provides them to the rest of our Plant Health app in an organized way.
#
# 🧪 Purpose (Technical Summary):
# Pydantic-based settings management with environment variable loading,
# validation, and type safety for storage, security, diagnosis API and
# entitlement configuration.
#
# 🔗 Dependencies:
# - pydantic-settings for configuration management
# - python-dotenv for .env file loading
#
# 🔄 Connected Modules / Calls From:
# - app.main (application startup)
# - app.shared.config.redis
# - app.modules.plant_health.container (service wiring)

from functools import lru_cache
from typing import List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Uses Pydantic for validation and type safety. Settings are loaded
    from environment variables with fallback to .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # =========================================================================
    # APPLICATION SETTINGS
    # =========================================================================

    APP_NAME: str = Field(default="Plant Health API", description="Application name")
    APP_VERSION: str = Field(default="1.0.0", description="Application version")
    APP_DESCRIPTION: str = Field(
        default="AI plant diagnosis and recovery tracking",
        description="Application description"
    )
    ENVIRONMENT: str = Field(default="development", description="Runtime environment")
    DEBUG: bool = Field(default=True, description="Debug mode flag")
    LOG_LEVEL: str = Field(default="INFO", description="Logging level")
    LOG_FORMAT: str = Field(default="json", description="Log format: json or text")
    LOG_FILE: Optional[str] = Field(None, description="Optional log file path")

    # =========================================================================
    # SERVER CONFIGURATION
    # =========================================================================

    HOST: str = Field(default="0.0.0.0", description="Server host")
    PORT: int = Field(default=8000, description="Server port")
    RELOAD: bool = Field(default=True, description="Auto-reload on changes")

    # =========================================================================
    # KEY-VALUE STORE (REDIS)
    # =========================================================================

    STORAGE_BACKEND: str = Field(default="redis", description="redis or memory")
    REDIS_URL: Optional[str] = Field(None, description="Explicit Redis URL")
    REDIS_HOST: str = Field(default="localhost", description="Redis host")
    REDIS_PORT: int = Field(default=6379, description="Redis port")
    REDIS_DB: int = Field(default=0, description="Redis database number")
    REDIS_PASSWORD: Optional[str] = Field(None, description="Redis password")
    REDIS_MAX_CONNECTIONS: int = Field(default=20, description="Redis connection pool size")
    REDIS_KEY_PREFIX: str = Field(default="", description="Namespace prepended to every key")

    # Store write retry policy
    STORAGE_RETRY_ATTEMPTS: int = Field(default=3, description="Total write attempts")
    STORAGE_RETRY_BASE_DELAY: float = Field(
        default=0.1,
        description="Delay before the second attempt (seconds)"
    )
    STORAGE_RETRY_MULTIPLIER: float = Field(default=2.0, description="Backoff growth factor")

    # =========================================================================
    # SECURITY SETTINGS
    # =========================================================================

    JWT_SECRET_KEY: str = Field(
        default="dev-only-secret-key-change-me-in-production",
        description="JWT secret key"
    )
    JWT_ALGORITHM: str = Field(default="HS256", description="JWT algorithm")
    JWT_ACCESS_TOKEN_EXPIRE_MINUTES: int = Field(
        default=60 * 24 * 30,
        description="Session token expiry"
    )
    PASSWORD_HASH_SCHEMES: str = Field(
        default="pbkdf2_sha256",
        description="Comma separated passlib schemes"
    )
    MIN_PASSWORD_LENGTH: int = Field(default=4, description="Minimum password length")

    # =========================================================================
    # DIAGNOSIS API (ANTHROPIC)
    # =========================================================================

    ANTHROPIC_API_KEY: Optional[str] = Field(None, description="Anthropic API key")
    ANTHROPIC_API_URL: str = Field(
        default="https://api.anthropic.com",
        description="Anthropic API base URL"
    )
    ANTHROPIC_API_VERSION: str = Field(default="2023-06-01", description="anthropic-version header")
    ANTHROPIC_MODEL: str = Field(
        default="claude-sonnet-4-20250514",
        description="Anthropic model"
    )
    ANTHROPIC_MAX_TOKENS: int = Field(default=1000, description="Max tokens per diagnosis")
    DIAGNOSIS_TIMEOUT_SECONDS: int = Field(default=60, description="Diagnosis request timeout")
    DIAGNOSIS_MAX_RETRIES: int = Field(
        default=1,
        description="Attempts for network-level failures of the diagnosis call"
    )

    # =========================================================================
    # ENTITLEMENTS
    # =========================================================================

    FREE_PLANT_LIMIT: int = Field(default=3, description="Plants allowed on the free tier")
    FREE_DIAGNOSIS_LIMIT: int = Field(default=2, description="Diagnoses per month on the free tier")
    FREE_PHOTO_LIMIT: int = Field(default=5, description="Progress photos per plant on the free tier")

    # =========================================================================
    # CORS
    # =========================================================================

    CORS_ORIGINS: str = Field(
        default="http://localhost:3000,http://localhost:5173",
        description="CORS allowed origins"
    )

    # =========================================================================
    # VALIDATORS
    # =========================================================================

    @field_validator("ENVIRONMENT")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        """Validate environment value."""
        allowed_environments = ["development", "staging", "production", "test"]
        if v.lower() not in allowed_environments:
            raise ValueError(f"Environment must be one of {allowed_environments}")
        return v.lower()

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level value."""
        allowed_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in allowed_levels:
            raise ValueError(f"Log level must be one of {allowed_levels}")
        return v.upper()

    @field_validator("STORAGE_BACKEND")
    @classmethod
    def validate_storage_backend(cls, v: str) -> str:
        if v.lower() not in ("redis", "memory"):
            raise ValueError("Storage backend must be 'redis' or 'memory'")
        return v.lower()

    @field_validator("JWT_ALGORITHM")
    @classmethod
    def validate_jwt_algorithm(cls, v: str) -> str:
        """Validate JWT algorithm."""
        allowed_algorithms = ["HS256", "HS384", "HS512"]
        if v not in allowed_algorithms:
            raise ValueError(f"JWT algorithm must be one of {allowed_algorithms}")
        return v

    # =========================================================================
    # COMPUTED PROPERTIES
    # =========================================================================

    @property
    def redis_url(self) -> str:
        """Get the Redis URL, preferring an explicit REDIS_URL."""
        if self.REDIS_URL:
            return self.REDIS_URL
        if self.REDIS_PASSWORD:
            return (
                f"redis://:{self.REDIS_PASSWORD}@{self.REDIS_HOST}:"
                f"{self.REDIS_PORT}/{self.REDIS_DB}"
            )
        return f"redis://{self.REDIS_HOST}:{self.REDIS_PORT}/{self.REDIS_DB}"

    @property
    def cors_origins_list(self) -> List[str]:
        """Get CORS origins as a list."""
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",")]

    @property
    def password_hash_schemes(self) -> List[str]:
        return [scheme.strip() for scheme in self.PASSWORD_HASH_SCHEMES.split(",") if scheme.strip()]

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.ENVIRONMENT == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.ENVIRONMENT == "production"

    @property
    def is_testing(self) -> bool:
        """Check if running in test environment."""
        return self.ENVIRONMENT == "test"

    def get_diagnosis_api_config(self) -> dict:
        """Get diagnosis API client configuration."""
        return {
            "api_name": "anthropic",
            "base_url": self.ANTHROPIC_API_URL,
            "api_key": self.ANTHROPIC_API_KEY or "",
            "timeout": self.DIAGNOSIS_TIMEOUT_SECONDS,
            "max_retries": self.DIAGNOSIS_MAX_RETRIES,
            "extra_headers": {"anthropic-version": self.ANTHROPIC_API_VERSION},
        }

    def get_entitlement_limits(self) -> dict:
        """Get free tier limits keyed by gated action."""
        return {
            "plants": self.FREE_PLANT_LIMIT,
            "diagnoses": self.FREE_DIAGNOSIS_LIMIT,
            "photos": self.FREE_PHOTO_LIMIT,
        }


# ============================================================================
# SETTINGS FACTORY
# ============================================================================

@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings singleton.

    Uses lru_cache to ensure settings are loaded only once
    and reused throughout the application lifecycle.

    Returns:
        Settings: Application settings instance
    """
    return Settings()
