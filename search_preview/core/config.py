"""Application configuration with validation."""

from enum import Enum
from urllib.parse import urlparse
from pydantic_settings import BaseSettings
from pydantic import Field, field_validator
from typing import List


class Environment(str, Enum):
    """Application environment."""
    DEVELOPMENT = "development"
    PRODUCTION = "production"


class ConfigurationError(Exception):
    """Raised when application configuration is invalid for the environment."""
    pass


# Preview index name prefix used when PREVIEW_INDEX_PREFIX is not set.
DEFAULT_INDEX_PREFIX = "content-preview"


class Settings(BaseSettings):
    """
    Application settings with validation.

    Services receive a Settings instance at construction time; only the
    application wiring (main.py, worker.py) reads the global instance.
    """

    # Environment
    environment: Environment = Field(
        default=Environment.DEVELOPMENT,
        description="Application environment (development/production)"
    )

    # CORS Configuration
    cors_allowed_origins: str = Field(
        default="http://localhost:3000",
        description="Allowed CORS origins (comma-separated)"
    )

    # Database Configuration (preview handle storage)
    database_url: str = Field(
        default="sqlite:///./search_preview.db",
        description="Database connection URL"
    )

    # Search engine connection
    opensearch_hosts: str = Field(
        default="http://localhost:9200",
        description="Search engine hosts (comma-separated URLs)"
    )
    opensearch_username: str = Field(default="", description="HTTP basic auth user")
    opensearch_password: str = Field(default="", description="HTTP basic auth password")
    opensearch_verify_certs: bool = Field(default=True)
    opensearch_timeout: int = Field(
        default=30,
        description="Seconds to wait for a search engine response"
    )

    # Front-end application
    # Base URL the resolved preview path is appended to, e.g. https://www.example.com
    frontend_base_url: str = Field(
        default="",
        description="Front-end application URL (absolute, no trailing slash)"
    )

    # Preview lifecycle
    # PREVIEW_EXPIRE: lifespan of a preview index and its handle, in seconds.
    preview_expire: int = Field(
        default=120,
        description="Seconds after which preview indices are garbage collected"
    )
    preview_index_prefix: str = Field(
        default=DEFAULT_INDEX_PREFIX,
        description="Name prefix shared by all preview indices"
    )
    gc_interval_seconds: int = Field(
        default=60,
        description="Seconds between garbage collection sweeps in the worker"
    )

    # Logging Configuration
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
    )
    log_format: str = Field(
        default="json",
        description="Log output format: 'json' for structured, 'text' for human-readable"
    )

    def get_cors_origins(self) -> List[str]:
        """
        Get CORS origins as a list.

        Parses comma-separated string and validates no wildcards.
        """
        origins = [origin.strip() for origin in self.cors_allowed_origins.split(',') if origin.strip()]

        if "*" in origins:
            raise ValueError(
                "Wildcard CORS (*) not allowed. "
                "Specify explicit origins in CORS_ALLOWED_ORIGINS"
            )

        return origins

    def get_opensearch_hosts(self) -> List[str]:
        """Get search engine hosts as a list."""
        return [host.strip() for host in self.opensearch_hosts.split(',') if host.strip()]

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is one of the standard Python logging levels."""
        valid_levels = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(f"Invalid log level. Must be one of: {valid_levels}")
        return v_upper

    @field_validator('frontend_base_url')
    @classmethod
    def validate_frontend_base_url(cls, v: str) -> str:
        """The front-end URL must be external; the trailing slash is removed."""
        v = v.strip()
        if not v:
            return v
        parsed = urlparse(v)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise ValueError("The front-end application URL must be external.")
        return v.rstrip('/')

    @field_validator('preview_expire', 'gc_interval_seconds')
    @classmethod
    def validate_positive(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("Must be a positive number of seconds")
        return v

    @field_validator('preview_index_prefix')
    @classmethod
    def validate_index_prefix(cls, v: str) -> str:
        """Index names are lowercase and must not end with the separator."""
        v = v.strip().rstrip('-')
        if not v:
            raise ValueError("Preview index prefix must not be empty")
        if v != v.lower():
            raise ValueError("Preview index prefix must be lowercase")
        return v

    def validate_production_config(self) -> None:
        """Validate configuration for production environment.

        Raises:
            ConfigurationError: If production config is incomplete.
        """
        errors: list[str] = []

        if not self.frontend_base_url:
            errors.append(
                "FRONTEND_BASE_URL is empty. "
                "Preview redirects need the front-end application URL."
            )

        origins = self.get_cors_origins()
        localhost_origins = [o for o in origins if "localhost" in o or "127.0.0.1" in o]
        if localhost_origins:
            errors.append(
                f"CORS allows localhost origins: {localhost_origins}. "
                "Remove localhost origins for production."
            )

        if errors and self.environment == Environment.PRODUCTION:
            raise ConfigurationError(
                "Production configuration is incomplete:\n  - " + "\n  - ".join(errors)
            )

    class Config:
        """Pydantic configuration."""
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False


# Global settings instance
settings = Settings()
