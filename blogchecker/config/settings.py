"""
BlogChecker Configuration System
================================

Configuration management with environment variables and Pydantic models.
Environment variables override Field defaults with clear precedence.
"""

from typing import List, Optional
from enum import Enum

from pydantic import AliasChoices, BaseModel, Field, field_validator
from pydantic_settings import BaseSettings

from ..utils.exceptions import ConfigurationError, ErrorCode


DEFAULT_USER_AGENT = "BlogCheckerBot/1.0 (@onk)"


class LogLevel(str, Enum):
    """Available log levels."""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class FetchSettings(BaseModel):
    """Feed fetching configuration."""
    max_redirects: int = Field(default=2, ge=1, le=10, description="Redirect budget per fetch")
    request_timeout: float = Field(default=10.0, gt=0, le=120, description="Per-request timeout in seconds")
    user_agent: str = Field(default=DEFAULT_USER_AGENT, min_length=1, description="User-Agent sent on every fetch")
    pre_fetch_delay: float = Field(default=1.0, ge=0.0, le=10.0, description="Fixed pause before each feed fetch in seconds")

    @field_validator('user_agent')
    @classmethod
    def validate_user_agent(cls, v):
        """Reject header-breaking user agents."""
        if "\n" in v or "\r" in v:
            raise ValueError("user_agent must be a single line")
        return v.strip()


class FilteringSettings(BaseModel):
    """Techword filtering configuration."""
    techword_threshold: int = Field(
        default=3,
        ge=1,
        le=100,
        description="Minimum techword matches for an entry to be kept"
    )


class DiscoverySettings(BaseModel):
    """Feed discovery configuration for sites without a platform rule."""
    request_timeout: float = Field(default=10.0, gt=0, le=120, description="Page fetch timeout in seconds")
    max_candidates: int = Field(default=10, ge=1, le=100, description="Maximum candidate feed URLs to collect")


class LoggingSettings(BaseModel):
    """Logging configuration."""
    level: LogLevel = Field(default=LogLevel.INFO, description="Global log level")
    structured_logging: bool = Field(default=False, description="Use structured JSON logging")
    console_logging: bool = Field(default=True, description="Enable console logging")


class BlogCheckerSettings(BaseSettings):
    """Main application settings."""

    fetch: FetchSettings = Field(default_factory=FetchSettings)
    filtering: FilteringSettings = Field(default_factory=FilteringSettings)
    discovery: DiscoverySettings = Field(default_factory=DiscoverySettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    techwords_path: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("TECHWORDS_PATH", "BLOGCHECKER_TECHWORDS_PATH"),
        description="Location of the newline-delimited techword list (s3://, file:// or a path)"
    )

    app_name: str = Field(default="BlogChecker", description="Application name")
    version: str = Field(default="1.0.0", description="Application version")
    debug: bool = Field(default=False, description="Enable debug mode")

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "env_nested_delimiter": "__",
        "env_prefix": "BLOGCHECKER_",
        "populate_by_name": True,
        "extra": "ignore",
    }

    def validate_configuration(self) -> None:
        """Validate complete configuration."""
        errors = self.collect_configuration_errors()
        if errors:
            raise ConfigurationError(
                f"Configuration validation failed: {'; '.join(errors)}",
                error_code=ErrorCode.CONFIG_INVALID
            )

    def collect_configuration_errors(self) -> List[str]:
        """List configuration problems without raising."""
        errors = []

        if self.techwords_path is not None and not self.techwords_path.strip():
            errors.append("TECHWORDS_PATH is set but empty")

        return errors

    def require_techwords_path(self) -> str:
        """Return the techword list location or fail with a configuration error."""
        if not self.techwords_path or not self.techwords_path.strip():
            raise ConfigurationError(
                "TECHWORDS_PATH is not configured",
                config_key="TECHWORDS_PATH",
                error_code=ErrorCode.CONFIG_MISSING
            )
        return self.techwords_path.strip()

    def get_effective_log_level(self) -> str:
        """Get effective log level considering debug mode."""
        if self.debug:
            return "DEBUG"
        return self.logging.level.value


def load_settings() -> BlogCheckerSettings:
    """Load settings from environment variables and defaults.

    Environment variables override Pydantic Field defaults.

    Returns:
        Loaded and validated settings

    Raises:
        ConfigurationError: If configuration is invalid
    """
    from dotenv import load_dotenv
    load_dotenv()

    try:
        # Precedence: environment variables, then .env values, then Field defaults
        settings = BlogCheckerSettings()

        settings.validate_configuration()

        return settings

    except ConfigurationError:
        raise
    except Exception as e:
        raise ConfigurationError(
            f"Failed to initialize settings: {e}",
            error_code=ErrorCode.CONFIG_INVALID
        ) from e


# Global settings instance
_settings: Optional[BlogCheckerSettings] = None


def get_settings(reload: bool = False) -> BlogCheckerSettings:
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
