"""
Core configuration module using Pydantic Settings.
Supports environment variables and .env files.
"""
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field


class Settings(BaseSettings):
    """Application settings with environment variable support."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="allow"
    )

    # Application
    app_name: str = Field(default="Godown Stock Check", alias="APP_NAME")
    app_version: str = Field(default="1.0.0", alias="APP_VERSION")
    debug: bool = Field(default=False, alias="DEBUG")

    # Database
    database_url: str = Field(default="sqlite:///./data/stockcheck.db", alias="DATABASE_URL")
    db_echo: bool = Field(default=False, alias="DB_ECHO")
    auto_create_tables: bool = Field(default=True, alias="AUTO_CREATE_TABLES")

    # Backend used by the scan station client
    backend_url: str = Field(default="http://localhost:8000", alias="BACKEND_URL")
    http_timeout: float = Field(default=10.0, alias="HTTP_TIMEOUT")  # seconds

    cors_origins: list[str] = Field(
        default=["http://localhost:3000", "http://localhost:8000"],
        alias="CORS_ORIGINS"
    )

    # Stock checking
    product_prefix_length: int = Field(default=3, alias="PRODUCT_PREFIX_LENGTH")
    scan_debounce_seconds: float = Field(default=0.5, alias="SCAN_DEBOUNCE_SECONDS")
    default_submitter: str = Field(default="User", alias="DEFAULT_SUBMITTER")
    report_list_limit: int = Field(default=50, alias="REPORT_LIST_LIMIT")
    scan_session_ttl_seconds: float = Field(default=4 * 60 * 60, alias="SCAN_SESSION_TTL_SECONDS")  # idle hosted sessions
    recent_reports_count: int = Field(default=10, alias="RECENT_REPORTS_COUNT")

    # Rate Limiting
    report_submit_rate_limit: str = Field(default="30/minute", alias="REPORT_SUBMIT_RATE_LIMIT")
    # Header scanner terminals identify themselves with; rate limits are per terminal
    terminal_id_header: str = Field(default="X-Terminal-Id", alias="TERMINAL_ID_HEADER")

    # Logging
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    log_dir: str = Field(default="./logs", alias="LOG_DIR")
    log_max_bytes: int = Field(default=10 * 1024 * 1024, alias="LOG_MAX_BYTES")  # 10MB
    log_backup_count: int = Field(default=5, alias="LOG_BACKUP_COUNT")


# Global settings instance
settings = Settings()


def get_settings() -> Settings:
    """Dependency injection for FastAPI."""
    return settings
