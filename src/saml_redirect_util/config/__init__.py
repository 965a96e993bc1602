"""Config module.

This module provides configuration management functionality.
"""

from saml_redirect_util.config.manager import (
    get_display_config,
    get_logging_config,
    get_verification_config,
    load_config,
)
from saml_redirect_util.config.schema import (
    Config,
    DisplayConfig,
    LoggingConfig,
    ProtocolConfig,
    VerificationConfig,
)

__all__ = [
    # Main configuration loading
    "load_config",
    # Helper functions
    "get_verification_config",
    "get_display_config",
    "get_logging_config",
    # Configuration models
    "Config",
    "VerificationConfig",
    "DisplayConfig",
    "LoggingConfig",
    "ProtocolConfig",
]
