"""
PodCheck Configuration System
============================

Configuration management with environment variables and Pydantic models.
Environment variables (prefix ``PODCHECK_``, nested with ``__``) override
Field defaults, e.g. ``PODCHECK_VALIDATION__PROBE_ENCLOSURES=false``.
"""

from pathlib import Path
from typing import Optional
from enum import Enum

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings

from ..utils.exceptions import ConfigurationError, ErrorCode


class LogLevel(str, Enum):
    """Available log levels."""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LoggingSettings(BaseModel):
    """Logging configuration."""
    level: LogLevel = Field(default=LogLevel.INFO, description="Global log level")
    file_path: Optional[str] = Field(default=None, description="Log file path (disabled when empty)")
    max_file_size_mb: int = Field(default=10, ge=1, le=100, description="Max log file size in MB")
    backup_count: int = Field(default=5, ge=1, le=20, description="Number of log backup files")
    structured_logging: bool = Field(default=False, description="Use structured JSON console logging")
    console_logging: bool = Field(default=True, description="Enable console logging")


class FetchSettings(BaseModel):
    """Feed download settings."""
    timeout_seconds: int = Field(default=10, ge=1, le=120, description="Total timeout for the feed request")
    max_redirects: int = Field(default=3, ge=0, le=10, description="Redirects followed before giving up")
    user_agent: str = Field(default="PodCheck/1.0 (Podcast Feed Health Checker)", description="User-Agent header")
    accept: str = Field(
        default="application/rss+xml, application/xml, text/xml, */*",
        description="Accept header sent with the feed request",
    )
    max_feed_bytes: int = Field(default=10 * 1024 * 1024, ge=1024, description="Largest feed body accepted")

    @field_validator('user_agent')
    @classmethod
    def validate_user_agent(cls, v):
        """Reject blank user agents, some hosts block them."""
        if not v or not v.strip():
            raise ValueError("user_agent cannot be empty")
        return v.strip()


class ValidationSettings(BaseModel):
    """Feed check settings."""
    max_episodes: int = Field(default=10, ge=1, le=100, description="Episodes sampled by the episode checks")
    probe_timeout_seconds: float = Field(default=5.0, gt=0, le=60, description="Timeout for each HEAD probe")
    probe_artwork: bool = Field(default=True, description="Probe the artwork URL for type and dimensions")
    probe_enclosures: bool = Field(default=True, description="Probe enclosure URLs for reachability")


class PodCheckSettings(BaseSettings):
    """Main application settings."""

    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    fetch: FetchSettings = Field(default_factory=FetchSettings)
    validation: ValidationSettings = Field(default_factory=ValidationSettings)

    app_name: str = Field(default="PodCheck", description="Application name")
    version: str = Field(default="1.0.0", description="Application version")
    debug: bool = Field(default=False, description="Enable debug mode")

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "env_nested_delimiter": "__",
        "env_prefix": "PODCHECK_",
        "extra": "ignore",
    }

    def validate_configuration(self) -> None:
        """Validate settings that pydantic cannot check on its own."""
        errors = []

        if self.logging.file_path:
            try:
                log_path = Path(self.logging.file_path)
                log_path.parent.mkdir(parents=True, exist_ok=True)
            except Exception as e:
                errors.append(f"Invalid log file path: {e}")

        if errors:
            raise ConfigurationError(
                f"Configuration validation failed: {'; '.join(errors)}",
                error_code=ErrorCode.CONFIG_INVALID
            )

    def get_effective_log_level(self) -> str:
        """Get effective log level considering debug mode."""
        if self.debug:
            return "DEBUG"
        return self.logging.level.value


def load_settings() -> PodCheckSettings:
    """Load settings from environment variables and defaults.

    Returns:
        Loaded and validated settings

    Raises:
        ConfigurationError: If configuration is invalid
    """
    from dotenv import load_dotenv
    load_dotenv()

    try:
        settings = PodCheckSettings()
        settings.validate_configuration()
        return settings

    except ConfigurationError:
        raise
    except Exception as e:
        raise ConfigurationError(
            f"Failed to initialize settings: {e}",
            error_code=ErrorCode.CONFIG_INVALID
        ) from e


_settings: Optional[PodCheckSettings] = None


def get_settings(reload: bool = False) -> PodCheckSettings:
    """Get global settings instance (singleton pattern).

    Args:
        reload: Force reload of settings

    Returns:
        Global settings instance
    """
    global _settings

    if _settings is None or reload:
        _settings = load_settings()

    return _settings
