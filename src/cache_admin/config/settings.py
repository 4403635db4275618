from functools import lru_cache
from typing import Literal
from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment.

    Every field can be overridden by an upper-case environment variable of the
    same name (``JWT_SECRET_KEY``, ``STORAGE_BACKEND``...) or by a ``.env`` file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "Cache Admin Service"
    app_version: str = "0.1.0"
    environment: Literal["local", "dev", "staging", "prod"] = "local"
    debug: bool = False

    # Server
    host: str = "0.0.0.0"
    port: int = 8000

    # Storage
    storage_backend: Literal["sql", "cosmos"] = "sql"

    # SQL document store
    database_url: SecretStr | None = SecretStr("sqlite+aiosqlite:///./cache_admin.db")
    db_pool_size: int = 5
    db_max_overflow: int = 10
    db_pool_timeout: int = 30
    db_pool_recycle: int = 3600
    db_echo_sql: bool = False
    db_create_tables: bool = True

    # Cosmos document store
    cosmos_connection_string: SecretStr | None = None
    cosmos_database_name: str = "cache-admin"
    cosmos_throughput: int = 400

    # JWT
    jwt_secret_key: SecretStr = SecretStr("change-me-please-use-a-long-random-secret")
    jwt_issuer: str = "cache-admin"
    jwt_audience: str | None = None  # Defaults to the issuer
    jwt_expire_hours: int = 24
    jwt_algorithm: str = "HS256"
    bcrypt_rounds: int = 12

    # Admin account created at startup when both values are set
    bootstrap_admin_email: str | None = None
    bootstrap_admin_password: SecretStr | None = None

    # Outbound agent calls
    agent_ping_timeout: float = 5.0
    agent_request_timeout: float = 30.0

    # Observability
    log_level: int = 20  # INFO by default (DEBUG=10, INFO=20, WARNING=30, ERROR=40)
    log_format: Literal["json", "console"] = "json"

    # Security Headers Settings
    security_hsts_enabled: bool = True  # Only applied in production
    security_hsts_max_age: int = 31536000
    security_csp_policy: str = "default-src 'self'"
    security_frame_options: str = "DENY"

    # CORS Settings
    cors_origins: list[str] = Field(default_factory=list)
    cors_allow_credentials: bool = True
    cors_allow_methods: list[str] = Field(
        default_factory=lambda: ["GET", "POST", "PUT", "DELETE", "OPTIONS"]
    )
    cors_allow_headers: list[str] = Field(default_factory=lambda: ["*"])
    cors_max_age: int = 600

    @property
    def is_production(self) -> bool:
        return self.environment == "prod"

    @property
    def token_audience(self) -> str:
        return self.jwt_audience or self.jwt_issuer


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
