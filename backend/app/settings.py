import tomllib
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class Settings(BaseModel):
    """Application settings loaded from TOML configuration files.

    All config is read from TOML; no environment variables, no .env files.

    Load order (each layer overrides the previous):
        1. config_path   : base settings (committed to git)
        2. secrets_path  : sensitive overrides (gitignored, mounted from a secret in prod)
        3. override_path : per-process overrides (SERVICE_NAME, LOG_LEVEL, etc.)

    Usage:
        Settings()                                          # config.toml + secrets
        Settings(config_path="config.test.toml")            # test config
    """

    model_config = ConfigDict(extra="forbid")

    def __init__(
        self,
        config_path: str = "config.toml",
        override_path: str | None = None,
        secrets_path: str = "secrets.toml",
    ) -> None:
        with open(config_path, "rb") as f:
            data = tomllib.load(f)
        if Path(secrets_path).is_file():
            with open(secrets_path, "rb") as f:
                data |= tomllib.load(f)
        if override_path:
            with open(override_path, "rb") as f:
                data |= tomllib.load(f)
        super().__init__(**data)

    PROJECT_NAME: str = "coursehub"
    DATABASE_NAME: str = "coursehub_db"
    API_V1_STR: str = "/api/v1"
    MONGODB_URL: str = "mongodb://mongo:27017/coursehub"

    SERVER_HOST: str = "0.0.0.0"
    SERVER_PORT: int = 8000

    TESTING: bool = False

    # Redis Configuration (real-time bus + presence)
    REDIS_HOST: str = "redis"
    REDIS_PORT: int = 6379
    REDIS_DB: int = 0
    REDIS_PASSWORD: str | None = None
    REDIS_SSL: bool = False
    REDIS_MAX_CONNECTIONS: int = 200
    REDIS_DECODE_RESPONSES: Literal[True] = True

    # SSE Configuration
    SSE_HEARTBEAT_INTERVAL: int = 30  # seconds between keep-alive events
    SSE_PRESENCE_TTL: int = 90  # presence expires if heartbeats stop (> heartbeat interval)

    # Notification configuration
    NOTIF_RETENTION_DAYS: int = Field(default=30, ge=1)
    NOTIF_CLEANUP_INTERVAL_SECONDS: float = Field(default=86400.0, gt=0)  # 24 hours
    NOTIF_SIDE_CHANNEL_TIMEOUT_SECONDS: float = Field(default=5.0, gt=0)
    NOTIF_BULK_CONCURRENCY: int = Field(default=20, ge=1)
    NOTIF_DEFAULT_PAGE_SIZE: int = 20
    NOTIF_MAX_PAGE_SIZE: int = 100
    NOTIF_MAX_MARK_READ_IDS: int = 100

    # Email Configuration
    EMAIL_PROVIDER: Literal["smtp", "console"] = "smtp"
    EMAIL_FROM: str = "no-reply@educademy.com"
    EMAIL_FROM_NAME: str = "Educademy"
    SMTP_HOST: str = "smtp.gmail.com"
    SMTP_PORT: int = 465
    SMTP_USERNAME: str | None = None
    SMTP_PASSWORD: str | None = None
    SMTP_USE_TLS: bool = True  # implicit TLS (port 465)
    SMTP_START_TLS: bool = False  # STARTTLS upgrade (port 587)

    # Branding / links used in rendered emails
    BRAND_NAME: str = "Educademy"
    APP_URL: str = "https://educademy.com"

    # OpenTelemetry Configuration
    ENABLE_TRACING: bool = True
    OTEL_EXPORTER_OTLP_ENDPOINT: str | None = None

    # Service metadata
    SERVICE_NAME: str = "coursehub-notifications"
    SERVICE_VERSION: str = "1.0.0"
    ENVIRONMENT: str = "production"  # deployment environment (production, staging, development)

    # Logging configuration
    LOG_LEVEL: str = Field(default="DEBUG", description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)")
