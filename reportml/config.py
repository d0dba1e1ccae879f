"""Configuration management for reportml.

This module handles environment variable loading and provides type-safe
configuration access using Pydantic models.
"""

import logging
from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)


class Config(BaseSettings):
    """Library configuration loaded from environment variables and .env file.

    All configuration values are automatically loaded from:
    1. `.env` file in the working directory (if present)
    2. Environment variables prefixed with ``REPORTML_``

    Attributes:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        font_dir: Base directory for relative font file paths in templates
        image_dir: Base directory for relative image paths in templates
        compress: Enable/disable PDF stream compression (default: True)
        schema_validation: Accepted for compatibility with templates that
            request validation; no schema check is performed
        currency_symbol: Prefix used for currency-formatted values (default: "$")
        default_output: Output path used by the command line when
            ``--output`` is not given
    """

    model_config = SettingsConfigDict(
        env_prefix="REPORTML_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    log_level: str = Field(
        default="INFO",
        description="Logging level",
    )

    font_dir: Optional[Path] = Field(
        default=None,
        description="Base directory for relative font file paths",
    )

    image_dir: Optional[Path] = Field(
        default=None,
        description="Base directory for relative image paths",
    )

    compress: bool = Field(
        default=True,
        description="Enable/disable PDF stream compression",
    )

    schema_validation: bool = Field(
        default=False,
        description="Request template schema validation (accepted, not performed)",
    )

    currency_symbol: str = Field(
        default="$",
        description="Prefix for currency-formatted table values",
        max_length=8,
    )

    default_output: Path = Field(
        default=Path("output.pdf"),
        description="Default output path for the command line",
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        """Validate log level is one of the allowed values.

        Args:
            value: Log level string to validate

        Returns:
            Uppercase log level string

        Raises:
            ValueError: If log level is not one of the allowed values
        """
        allowed_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper_value = value.upper()
        if upper_value not in allowed_levels:
            raise ValueError(
                f"log_level must be one of {allowed_levels}, got {value}"
            )
        return upper_value

    @field_validator("font_dir", "image_dir", mode="before")
    @classmethod
    def validate_asset_dir(cls, value: str | Path | None) -> Path | None:
        """Convert asset directories to Path objects.

        Empty strings are treated as unset so that ``REPORTML_FONT_DIR=``
        in a .env file does not resolve assets against the working directory.

        Args:
            value: Directory as string, Path or None

        Returns:
            Path object or None
        """
        if value is None or (isinstance(value, str) and not value.strip()):
            return None
        return Path(value)

    def resolve_font_path(self, path: str) -> Path:
        """Resolve a template font path against ``font_dir``."""
        return _resolve_asset(path, self.font_dir)

    def resolve_image_path(self, path: str) -> Path:
        """Resolve a template image path against ``image_dir``."""
        return _resolve_asset(path, self.image_dir)


def _resolve_asset(path: str, base_dir: Path | None) -> Path:
    candidate = Path(path)
    if base_dir is None or candidate.is_absolute():
        return candidate
    return base_dir / candidate


# Global configuration instance
_config: Optional[Config] = None


def get_config() -> Config:
    """Get the global configuration instance.

    Loads configuration from `.env` file (if present) and environment variables
    on first call and returns the same instance on subsequent calls.

    Returns:
        Config instance with loaded configuration values

    Raises:
        ValueError: If configuration values are invalid
    """
    global _config
    if _config is None:
        _config = Config()
        logger.debug(
            f"Configuration loaded: "
            f"LOG_LEVEL={_config.log_level}, "
            f"FONT_DIR={_config.font_dir}, "
            f"IMAGE_DIR={_config.image_dir}, "
            f"COMPRESS={_config.compress}"
        )
    return _config


def reload_config() -> Config:
    """Reload configuration from environment variables.

    Useful for testing or when configuration changes at runtime.

    Returns:
        New Config instance with reloaded configuration values
    """
    global _config
    _config = Config()
    return _config
