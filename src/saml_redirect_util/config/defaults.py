"""Default configuration values.

This module defines the default configuration values used when no configuration
file is provided or when configuration values are not specified.
"""

from typing import Any

from saml_redirect_util.binding.algorithms import DEFAULT_ALLOWED_ALGORITHMS

DEFAULT_CONFIG: dict[str, Any] = {
    "verification": {
        # Algorithms accepted for HTTP-Redirect signatures
        "allowed_algorithms": [algorithm.uri for algorithm in DEFAULT_ALLOWED_ALGORITHMS],
        # First occurrence wins unless strict
        "reject_duplicate_parameters": False,
        "message_parameter": "SAMLResponse",
    },
    "display": {
        "indent": "  ",
        "html": False,
    },
    "logging": {
        "level": "INFO",
        "log_file": "logs/saml-redirect-util.log",
        # Off by default; opt in to hide SAML payloads and signatures
        "redact_sensitive": False,
    },
    "protocol": {
        # Endpoint name -> handler factory key
        "endpoints": {
            "SAMLAssertionConsumer": "redirect-signature",
            "SOAPDispatch": "soap-version",
        },
    },
}

# Default configuration file path
DEFAULT_CONFIG_PATH = "config/config.json"
