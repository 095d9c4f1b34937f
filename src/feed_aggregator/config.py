"""
Configuration management for feed aggregator.

Uses Pydantic for validation and pydantic-settings for environment variable support.
"""

from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class FetcherConfig(BaseSettings):
    """RSS/Atom fetcher configuration."""

    model_config = SettingsConfigDict(env_prefix="FETCHER_")

    # HTTP settings
    timeout_seconds: float = Field(default=15.0, gt=0, le=300, description="Request timeout")
    user_agent: str = Field(
        default="feed-aggregator/0.1.0 (+https://github.com/feed-aggregator)",
        description="User-Agent header",
    )

    # Follow redirects
    follow_redirects: bool = Field(default=True)
    max_redirects: int = Field(default=5, ge=0, le=20)


class AggregatorConfig(BaseSettings):
    """Aggregation pipeline configuration."""

    model_config = SettingsConfigDict(env_prefix="AGGREGATOR_")

    max_workers: int = Field(default=4, ge=1, le=32, description="Maximum concurrent feed fetches")
    date_format: str = Field(
        default="ordinal",
        description="Site date format: 'ordinal' or a strftime pattern (%o = ordinal day)",
    )

    # Page option defaults
    default_title: str = Field(default="Blog Feed", description="Title used when a page sets none")
    default_post_limit: int = Field(
        default=5, ge=0, description="Entries taken from each feed when a page sets no limit"
    )


class LoggingConfig(BaseSettings):
    """Logging configuration."""

    model_config = SettingsConfigDict(env_prefix="LOG_")

    level: str = Field(default="INFO", description="Log level")
    format: str = Field(
        default="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | <magenta>{extra[feed]}</magenta> - <level>{message}</level>",
        description="Log format",
    )

    # File logging
    file_enabled: bool = Field(default=False, description="Enable file logging")
    file_path: str = Field(default="logs/feed_aggregator.log", description="Log file path")
    rotation: str = Field(default="10 MB", description="Log rotation size")
    retention: str = Field(default="14 days", description="Log retention period")

    # Console logging
    console_enabled: bool = Field(default=True, description="Enable console logging")

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        """Validate log level."""
        valid_levels = ["TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"]
        v = v.upper()
        if v not in valid_levels:
            raise ValueError(f"Log level must be one of {valid_levels}")
        return v


class Config(BaseSettings):
    """Main application configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="FEEDAGG_",
        case_sensitive=False,
    )

    # Sub-configurations
    fetcher: FetcherConfig = Field(default_factory=FetcherConfig)
    aggregator: AggregatorConfig = Field(default_factory=AggregatorConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    # Paths
    config_dir: str = Field(default="config", description="Configuration directory")

    def get_config_path(self, name: str) -> Path:
        """Get path to a configuration file."""
        return Path(self.config_dir) / name


# Global configuration instance
_config: Optional[Config] = None

_NESTED_CONFIGS = {
    "fetcher": FetcherConfig,
    "aggregator": AggregatorConfig,
    "logging": LoggingConfig,
}


def get_config() -> Config:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        _config = Config()
    return _config


def set_config(config: Optional[Config]) -> None:
    """Replace the global configuration instance (``None`` resets it)."""
    global _config
    _config = config


def load_config_from_yaml(yaml_path: str) -> Config:
    """Load configuration from a YAML file.

    Note: Values loaded from YAML take precedence over environment variables.
    For environment variable overrides, use .env file or set them directly.

    Args:
        yaml_path: Path to the YAML configuration file.

    Returns:
        Config instance loaded from the file.

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If the file is not a mapping or fails validation
    """
    import yaml

    yaml_file = Path(yaml_path)
    if not yaml_file.exists():
        raise FileNotFoundError(f"Configuration file not found: {yaml_path}")

    with yaml_file.open("r", encoding="utf-8") as f:
        config_dict = yaml.safe_load(f) or {}
    if not isinstance(config_dict, dict):
        raise ValueError(f"Configuration file {yaml_path} must contain a mapping")

    main_config = {key: value for key, value in config_dict.items() if key not in _NESTED_CONFIGS}

    # Nested configs are built separately so their own env vars still apply
    for key, config_class in _NESTED_CONFIGS.items():
        section = config_dict.get(key) or {}
        if not isinstance(section, dict):
            raise ValueError(f"Section {key!r} in {yaml_path} must be a mapping")
        main_config[key] = config_class(**section)

    return Config(**main_config)


def reload_config() -> Config:
    """Reload configuration from environment and the config directory.

    Reads ``config.yaml`` from ``Config.config_dir`` (``FEEDAGG_CONFIG_DIR``)
    when present.
    """
    global _config
    _config = Config()

    config_yaml = _config.get_config_path("config.yaml")
    if config_yaml.exists():
        _config = load_config_from_yaml(str(config_yaml))

    return _config
