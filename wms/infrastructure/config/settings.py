from functools import lru_cache

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # App
    app_name: str = "WMS Admin"
    app_version: str = "1.0.0"
    debug: bool = False
    environment: str = "development"

    # Database
    database_url: str = ""  # Loaded from environment, validated in model_validator
    database_echo: bool = False
    database_schema: str | None = None  # e.g. "wms" on PostgreSQL; leave unset for SQLite

    # Security
    secret_key: str = ""  # Loaded from environment, validated in model_validator
    algorithm: str = "HS256"
    jwt_issuer: str = "wms-api"
    jwt_audience: str = "wms-clients"
    access_token_expire_minutes: int = 60
    refresh_token_expire_days: int = 7
    remember_me_refresh_token_expire_days: int = 30
    bcrypt_rounds: int = 12

    # Account lockout
    max_failed_login_attempts: int = 5
    lockout_minutes: int = 30

    # CORS - comma-separated list of allowed origins
    allowed_origins: str = "http://localhost:3000,http://localhost:5173"

    # Request limits
    max_request_size: int = 10 * 1024 * 1024  # 10MB
    request_timeout_seconds: float = 30.0

    # Rate limiting (slowapi)
    rate_limit_enabled: bool = True
    login_rate_limit: str = "5/minute"
    register_rate_limit: str = "10/hour"

    # Redis Cache
    redis_enabled: bool = True  # Enable/disable caching
    redis_host: str = "localhost"
    redis_port: int = 6379
    redis_db: int = 0
    redis_password: str | None = None

    # Cache TTL (Time-To-Live) in seconds
    cache_ttl_permissions: int = 300  # 5 minutes

    # OpenTelemetry Distributed Tracing
    telemetry_enabled: bool = False
    telemetry_exporter: str = "console"  # Options: "console", "otlp", "none"
    telemetry_otlp_endpoint: str | None = None  # e.g., "http://localhost:4317"
    telemetry_sample_rate: float = 1.0  # Sampling rate (0.0-1.0, 1.0 = 100%)

    # Seed data
    default_tenant_slug: str = "wms-default"
    default_tenant_name: str = "WMS Default Tenant"
    seed_admin_username: str = "admin"
    seed_admin_email: str = "admin@wms.local"
    seed_admin_password: str | None = None  # Generated when not provided

    @model_validator(mode="after")
    def validate_required_config(self) -> "Settings":
        """Validate required configuration loaded from the environment"""
        if not self.database_url:
            raise ValueError("DATABASE_URL is required. Set in environment or .env file.")
        if not self.secret_key:
            raise ValueError("SECRET_KEY is required. Generate with: openssl rand -hex 32")
        if len(self.secret_key) < 32:
            raise ValueError("SECRET_KEY must be at least 32 characters long")
        if self.algorithm.lower() == "none":
            raise ValueError("Unsigned JWT algorithm 'none' is not allowed")
        if not 4 <= self.bcrypt_rounds <= 31:
            raise ValueError("BCRYPT_ROUNDS must be between 4 and 31")
        return self

    @property
    def cors_origins(self) -> list[str]:
        return [origin.strip() for origin in self.allowed_origins.split(",") if origin.strip()]

    @property
    def is_sqlite(self) -> bool:
        return self.database_url.startswith("sqlite")

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore", case_sensitive=False
    )


@lru_cache
def get_settings() -> Settings:
    return Settings()
