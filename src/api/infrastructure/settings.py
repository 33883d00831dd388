"""Application settings using pydantic-settings.

Settings are loaded from environment variables with sensible defaults
for development. Production deployments should set all values explicitly.
"""

from datetime import timedelta
from functools import lru_cache

from pydantic import Field, SecretStr, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_HMAC_ALGORITHMS = ("HS256", "HS384", "HS512")


class DatabaseSettings(BaseSettings):
    """Database connection settings.

    Environment variables:
        FOLIO_DB_HOST: Database host (default: localhost)
        FOLIO_DB_PORT: Database port (default: 5432)
        FOLIO_DB_DATABASE: Database name (default: folio)
        FOLIO_DB_USERNAME: Database user (default: folio)
        FOLIO_DB_PASSWORD: Database password (required in production)
        FOLIO_DB_POOL_MIN_CONNECTIONS: Minimum connections in pool (default: 2)
        FOLIO_DB_POOL_MAX_CONNECTIONS: Maximum connections in pool (default: 10)
        FOLIO_DB_POOL_ENABLED: Enable connection pooling (default: true)
    """

    model_config = SettingsConfigDict(
        env_prefix="FOLIO_DB_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    host: str = Field(default="localhost", description="Database host")
    port: int = Field(default=5432, description="Database port")
    database: str = Field(default="folio", description="Database name")
    username: str = Field(default="folio", description="Database username")
    password: SecretStr = Field(
        default=SecretStr(""),
        description="Database password",
    )
    pool_min_connections: int = Field(
        default=2,
        description="Minimum connections in pool",
        ge=1,
        le=100,
    )
    pool_max_connections: int = Field(
        default=10,
        description="Maximum connections in pool",
        ge=1,
        le=100,
    )
    pool_enabled: bool = Field(
        default=True,
        description="Enable connection pooling",
    )

    @model_validator(mode="after")
    def validate_pool_settings(self) -> "DatabaseSettings":
        """Validate pool max >= min."""
        if self.pool_max_connections < self.pool_min_connections:
            raise ValueError(
                f"pool_max_connections ({self.pool_max_connections}) must be >= "
                f"pool_min_connections ({self.pool_min_connections})"
            )
        return self

    @property
    def connection_string(self) -> str:
        """Generate a connection string (without password for logging)."""
        return f"postgresql://{self.username}@{self.host}:{self.port}/{self.database}"


class CredentialSettings(BaseSettings):
    """Session credential settings.

    Environment variables:
        FOLIO_AUTH_SECRET_KEY: HMAC signing secret, at least 32 bytes (required)
        FOLIO_AUTH_ALGORITHM: HMAC algorithm (default: HS256)
        FOLIO_AUTH_TOKEN_TTL_SECONDS: Token lifetime in seconds (default: 86400)
        FOLIO_AUTH_ISSUER: Value of the iss claim (default: folio)
    """

    model_config = SettingsConfigDict(
        env_prefix="FOLIO_AUTH_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    secret_key: SecretStr = Field(
        default=SecretStr(""),
        description="HMAC secret used to sign session tokens",
    )
    algorithm: str = Field(default="HS256", description="JWT signing algorithm")
    token_ttl_seconds: int = Field(
        default=86400,
        description="Lifetime of issued session tokens in seconds",
        gt=0,
    )
    issuer: str = Field(default="folio", description="Token issuer claim")

    @field_validator("algorithm")
    @classmethod
    def validate_algorithm(cls, value: str) -> str:
        """Only symmetric HMAC algorithms are supported."""
        normalized = value.upper()
        if normalized not in _HMAC_ALGORITHMS:
            raise ValueError(
                f"algorithm must be one of {', '.join(_HMAC_ALGORITHMS)}, got {value}"
            )
        return normalized

    @field_validator("secret_key")
    @classmethod
    def validate_secret_key(cls, value: SecretStr) -> SecretStr:
        """Reject secrets too short for HMAC signing.

        An empty secret is allowed at load time so that tooling which never
        issues tokens can import settings; the codec refuses to sign with it.
        """
        secret = value.get_secret_value()
        if secret and len(secret.encode()) < 32:
            raise ValueError("secret_key must be at least 32 bytes")
        return value

    @property
    def token_ttl(self) -> timedelta:
        """Token lifetime as a timedelta."""
        return timedelta(seconds=self.token_ttl_seconds)


class Settings(BaseSettings):
    """Main application settings aggregating all configuration sections."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Application metadata
    app_name: str = Field(default="Folio", description="Application name")
    debug: bool = Field(default=False, description="Debug mode")

    @property
    def database(self) -> DatabaseSettings:
        """Get database settings."""
        return get_database_settings()

    @property
    def credentials(self) -> CredentialSettings:
        """Get credential settings."""
        return get_credential_settings()


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return Settings()


@lru_cache
def get_database_settings() -> DatabaseSettings:
    """Get cached database settings.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return DatabaseSettings()


@lru_cache
def get_credential_settings() -> CredentialSettings:
    """Get cached credential settings.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return CredentialSettings()
