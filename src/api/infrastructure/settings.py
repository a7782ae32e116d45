"""Application settings using pydantic-settings.

Settings are loaded from environment variables with sensible defaults
for development. Production deployments should set all values explicitly.
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field, SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class DatabaseSettings(BaseSettings):
    """Database connection settings.

    Environment variables:
        MULTITENANT_DB_HOST: Database host (default: localhost)
        MULTITENANT_DB_PORT: Database port (default: 5432)
        MULTITENANT_DB_DATABASE: Database name (default: multitenant)
        MULTITENANT_DB_USERNAME: Database user (default: multitenant)
        MULTITENANT_DB_PASSWORD: Database password (required in production)
        MULTITENANT_DB_URL: Full SQLAlchemy URL, overrides the fields above
            (e.g. sqlite+aiosqlite:///./dev.db for local development)
        MULTITENANT_DB_POOL_MIN_CONNECTIONS: Minimum connections in pool (default: 2)
        MULTITENANT_DB_POOL_MAX_CONNECTIONS: Maximum connections in pool (default: 10)
        MULTITENANT_DB_CREATE_SCHEMA: Create tables on startup instead of
            relying on migrations (default: false)
    """

    model_config = SettingsConfigDict(
        env_prefix="MULTITENANT_DB_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    host: str = Field(default="localhost", description="Database host")
    port: int = Field(default=5432, description="Database port")
    database: str = Field(default="multitenant", description="Database name")
    username: str = Field(default="multitenant", description="Database username")
    password: SecretStr = Field(
        default=SecretStr(""),
        description="Database password",
    )
    url: SecretStr | None = Field(
        default=None,
        description="Full SQLAlchemy async URL overriding host/port/credentials",
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
    create_schema: bool = Field(
        default=False,
        description="Create tables at startup (development only)",
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
        if self.url is not None:
            return self.url.get_secret_value().split("@")[-1]
        return f"postgresql://{self.username}@{self.host}:{self.port}/{self.database}"


class TenancySettings(BaseSettings):
    """Tenant resolution and isolation settings.

    Environment variables:
        MULTITENANT_TENANCY_STRATEGY: Tenant signal source, one of
            header | claim | subdomain (default: header)
        MULTITENANT_TENANCY_HEADER_NAME: Header carrying the tenant (default: tenant)
        MULTITENANT_TENANCY_CLAIM_NAME: JWT claim carrying the tenant (default: tenant)
        MULTITENANT_TENANCY_CLAIM_SECRET: Key used to verify signed claims
        MULTITENANT_TENANCY_CLAIM_ALGORITHMS: Accepted JWT algorithms (default: ["HS256"])
        MULTITENANT_TENANCY_CLAIM_AUDIENCE: Expected JWT audience (optional)
        MULTITENANT_TENANCY_BASE_DOMAIN: Domain under which tenant subdomains
            live, e.g. example.com (optional)
        MULTITENANT_TENANCY_POLICY: strict | lenient (default: strict)
        MULTITENANT_TENANCY_UNRESOLVED_READ_POLICY: refuse | match_null
            (default: refuse)
        MULTITENANT_TENANCY_DIRECTORY_CACHE_TTL_SECONDS: Positive cache TTL (default: 300)
        MULTITENANT_TENANCY_DIRECTORY_NEGATIVE_CACHE_TTL_SECONDS: Negative
            cache TTL, 0 disables (default: 30)
        MULTITENANT_TENANCY_ADMIN_TOKEN: Token for administrative routes;
            empty disables them
    """

    model_config = SettingsConfigDict(
        env_prefix="MULTITENANT_TENANCY_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    strategy: Literal["header", "claim", "subdomain"] = Field(
        default="header",
        description="Which request attribute carries the tenant",
    )
    header_name: str = Field(default="tenant", description="Tenant header name")
    claim_name: str = Field(default="tenant", description="Tenant JWT claim name")
    claim_secret: SecretStr = Field(
        default=SecretStr(""),
        description="Key used to verify signed tenant claims",
    )
    claim_algorithms: list[str] = Field(
        default_factory=lambda: ["HS256"],
        description="Accepted JWT signing algorithms",
    )
    claim_audience: str | None = Field(
        default=None,
        description="Expected JWT audience",
    )
    base_domain: str | None = Field(
        default=None,
        description="Parent domain of tenant subdomains",
    )
    policy: Literal["strict", "lenient"] = Field(
        default="strict",
        description="Behaviour when no tenant signal is present",
    )
    unresolved_read_policy: Literal["refuse", "match_null"] = Field(
        default="refuse",
        description="Behaviour of tenant-owned reads without a tenant",
    )
    directory_cache_ttl_seconds: float = Field(
        default=300.0,
        description="How long a positive directory lookup is cached",
        ge=0,
    )
    directory_negative_cache_ttl_seconds: float = Field(
        default=30.0,
        description="How long a negative directory lookup is cached",
        ge=0,
    )
    admin_token: SecretStr = Field(
        default=SecretStr(""),
        description="Token required by administrative routes",
    )

    @model_validator(mode="after")
    def validate_claim_strategy(self) -> "TenancySettings":
        """Signed-claim resolution needs a verification key."""
        if self.strategy == "claim" and not self.claim_secret.get_secret_value():
            raise ValueError("claim_secret is required when strategy is 'claim'")
        return self


class Settings(BaseSettings):
    """Main application settings aggregating all configuration sections."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Application metadata
    app_name: str = Field(default="MultiTenant API", description="Application name")
    debug: bool = Field(default=False, description="Debug mode")

    @property
    def database(self) -> DatabaseSettings:
        """Get database settings."""
        return get_database_settings()

    @property
    def tenancy(self) -> TenancySettings:
        """Get tenancy settings."""
        return get_tenancy_settings()


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
def get_tenancy_settings() -> TenancySettings:
    """Get cached tenancy settings.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return TenancySettings()
