"""Application configuration loaded from environment variables.

All configuration is via environment variables (or a local .env file).
No hardcoded URLs, ports, or credentials.
"""

from functools import lru_cache

from pydantic import Field, PostgresDsn, RedisDsn
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = Field(default="Ads Targeting Intelligence")
    app_version: str = Field(default="1.0.0")
    debug: bool = Field(default=False)
    environment: str = Field(default="development")
    frontend_url: str = Field(
        default="http://localhost:5173",
        description="Dashboard origin allowed by CORS",
    )

    # Server
    port: int = Field(default=8000, description="Port to bind to")
    host: str = Field(default="0.0.0.0", description="Host to bind to")

    # Database
    database_url: PostgresDsn = Field(
        ...,
        description="PostgreSQL connection string",
    )
    db_pool_size: int = Field(default=5, description="Database connection pool size")
    db_max_overflow: int = Field(default=10, description="Max overflow connections")
    db_pool_timeout: int = Field(default=30, description="Pool timeout in seconds")
    db_slow_query_threshold_ms: int = Field(
        default=100, description="Threshold for slow query warnings (ms)"
    )
    db_connect_timeout: int = Field(
        default=60, description="Connection timeout in seconds"
    )
    db_command_timeout: int = Field(
        default=60, description="Command timeout in seconds"
    )

    # Redis
    redis_url: RedisDsn | None = Field(
        default=None,
        description="Redis connection string for the content cache",
    )
    redis_pool_size: int = Field(default=10, description="Redis connection pool size")
    redis_connect_timeout: float = Field(
        default=10.0, description="Redis connection timeout in seconds"
    )
    redis_socket_timeout: float = Field(
        default=5.0, description="Redis socket timeout in seconds"
    )
    redis_circuit_failure_threshold: int = Field(
        default=5, description="Failures before circuit opens"
    )
    redis_circuit_recovery_timeout: float = Field(
        default=30.0, description="Seconds before attempting recovery"
    )

    # Logging
    log_level: str = Field(default="INFO", description="Log level")
    log_format: str = Field(default="json", description="Log format: json or text")

    # Content extraction
    content_fetch_timeout: float = Field(
        default=30.0, description="Website fetch timeout in seconds"
    )
    content_fetch_user_agent: str = Field(
        default=(
            "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
            "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
        ),
        description="User-Agent header sent when fetching websites",
    )
    content_max_html_bytes: int = Field(
        default=5_000_000, description="Pages larger than this are truncated"
    )
    content_cache_ttl: int = Field(
        default=3600, description="Seconds extracted content stays cached"
    )
    content_circuit_failure_threshold: int = Field(
        default=5, description="Failures before circuit opens"
    )
    content_circuit_recovery_timeout: float = Field(
        default=60.0, description="Seconds before attempting recovery"
    )

    # Claude/Anthropic LLM
    anthropic_api_key: str | None = Field(
        default=None,
        description="Anthropic API key; AI reasoning is skipped when unset",
    )
    claude_model: str = Field(
        default="claude-3-haiku-20240307",
        description="Claude model used for targeting reasoning",
    )
    claude_timeout: float = Field(
        default=60.0, description="Claude API request timeout in seconds"
    )
    claude_max_retries: int = Field(
        default=3, description="Maximum retry attempts for Claude API requests"
    )
    claude_retry_delay: float = Field(
        default=1.0, description="Base delay between retries in seconds"
    )
    claude_max_tokens: int = Field(
        default=2048, description="Maximum tokens in Claude response"
    )
    claude_circuit_failure_threshold: int = Field(
        default=5, description="Failures before circuit opens"
    )
    claude_circuit_recovery_timeout: float = Field(
        default=60.0, description="Seconds before attempting recovery"
    )


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings."""
    return Settings()
