"""Configuration manager for loading and managing configuration.

This module provides the main configuration loading and management functionality,
including support for JSON configuration files, environment variable overrides,
and configuration validation.
"""

import json
import logging
import os
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv
from pydantic import ValidationError

from saml_redirect_util.config.defaults import DEFAULT_CONFIG, DEFAULT_CONFIG_PATH
from saml_redirect_util.config.schema import (
    Config,
    DisplayConfig,
    LoggingConfig,
    VerificationConfig,
)
from saml_redirect_util.utils.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

# Environment variable prefix for all configuration overrides
ENV_PREFIX = "SAML_REDIRECT_"


def load_config(config_path: Optional[Path] = None) -> Config:
    """Load configuration from file and environment variables.

    Configuration is loaded with the following precedence (highest to lowest):
    1. CLI arguments (handled by caller)
    2. Environment variables (SAML_REDIRECT_* prefix)
    3. Configuration file (JSON)
    4. Default values

    Args:
        config_path: Path to configuration file. If None, uses ./config/config.json

    Returns:
        Validated Config instance

    Raises:
        ConfigurationError: If configuration is invalid or malformed

    Example:
        >>> config = load_config(Path("custom/config.json"))
        >>> config.verification.allowed_algorithms
    """
    load_dotenv()

    if config_path is None:
        config_path = Path(DEFAULT_CONFIG_PATH)

    config_dict = _load_config_file(config_path)
    config_dict = _apply_env_overrides(config_dict)

    try:
        return Config(**config_dict)
    except (ValidationError, TypeError) as e:
        raise ConfigurationError(
            f"Configuration validation failed:\n{e}\n\n"
            f"Fix: Check your configuration file at {config_path} and ensure all "
            f"values match the expected format. See documentation for details."
        ) from e


def _load_config_file(config_path: Path) -> dict[str, Any]:
    """Load configuration file or return defaults.

    Args:
        config_path: Path to configuration file

    Returns:
        Configuration dictionary

    Raises:
        ConfigurationError: If JSON is malformed or file unreadable
    """
    if not config_path.exists():
        logger.info(
            f"Config file not found: {config_path}. Using default configuration."
        )
        # Deep copy of defaults
        return json.loads(json.dumps(DEFAULT_CONFIG))

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            config_dict = json.load(f)
    except json.JSONDecodeError as e:
        raise ConfigurationError(
            f"Invalid JSON in config file: {config_path}\n"
            f"Error: {e}\n"
            f"Fix: Check JSON syntax at line {e.lineno}, column {e.colno}"
        ) from e
    except OSError as e:
        raise ConfigurationError(
            f"Failed to read config file: {config_path}\n"
            f"Error: {e}\n"
            f"Fix: Check file permissions and path"
        ) from e

    if not isinstance(config_dict, dict):
        raise ConfigurationError(
            f"Config file {config_path} must contain a JSON object at top level"
        )

    logger.info(f"Loaded configuration from {config_path}")
    return config_dict


def _apply_env_overrides(config_dict: dict[str, Any]) -> dict[str, Any]:
    """Apply environment variable overrides with SAML_REDIRECT_ prefix.

    Args:
        config_dict: Configuration dictionary to update

    Returns:
        Updated configuration dictionary with environment overrides applied
    """
    # Verification section
    if algorithms := os.getenv(f"{ENV_PREFIX}ALLOWED_ALGORITHMS"):
        config_dict.setdefault("verification", {})["allowed_algorithms"] = [
            item.strip() for item in algorithms.split(",") if item.strip()
        ]
        logger.debug("Override: allowed_algorithms from environment")

    if strict := os.getenv(f"{ENV_PREFIX}STRICT_PARAMETERS"):
        config_dict.setdefault("verification", {})[
            "reject_duplicate_parameters"
        ] = _parse_bool(strict)
        logger.debug("Override: reject_duplicate_parameters from environment")

    if message_parameter := os.getenv(f"{ENV_PREFIX}MESSAGE_PARAMETER"):
        config_dict.setdefault("verification", {})["message_parameter"] = message_parameter
        logger.debug("Override: message_parameter from environment")

    # Display section
    if indent := os.getenv(f"{ENV_PREFIX}DISPLAY_INDENT"):
        try:
            width = int(indent)
        except ValueError as e:
            raise ConfigurationError(
                f"Invalid {ENV_PREFIX}DISPLAY_INDENT: {indent}. "
                f"Fix: Use the number of spaces per indent level"
            ) from e
        config_dict.setdefault("display", {})["indent"] = " " * width
        logger.debug("Override: display indent from environment")

    # Logging section
    if log_level := os.getenv(f"{ENV_PREFIX}LOG_LEVEL"):
        config_dict.setdefault("logging", {})["level"] = log_level
        logger.debug("Override: log_level from environment")

    if log_file := os.getenv(f"{ENV_PREFIX}LOG_FILE"):
        config_dict.setdefault("logging", {})["log_file"] = log_file
        logger.debug("Override: log_file from environment")

    if redact := os.getenv(f"{ENV_PREFIX}REDACT_SENSITIVE"):
        config_dict.setdefault("logging", {})["redact_sensitive"] = _parse_bool(redact)
        logger.debug("Override: redact_sensitive from environment")

    return config_dict


def _parse_bool(value: str) -> bool:
    """Parse boolean value from string (case-insensitive)."""
    return value.lower() in ("true", "1", "yes", "on")


def get_verification_config(config: Config) -> VerificationConfig:
    """Get verification configuration."""
    return config.verification


def get_display_config(config: Config) -> DisplayConfig:
    """Get display configuration."""
    return config.display


def get_logging_config(config: Config) -> LoggingConfig:
    """Get logging configuration.

    Example:
        >>> config = load_config()
        >>> logging_cfg = get_logging_config(config)
        >>> log_level = logging_cfg.level
    """
    return config.logging
