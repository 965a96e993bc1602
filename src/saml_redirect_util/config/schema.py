"""Configuration schema models using pydantic.

This module defines the configuration structure and validation rules using pydantic.
All configuration values are validated according to the schema defined here.
"""

from pathlib import Path
from typing import Dict, List

from pydantic import BaseModel, Field, field_validator

from saml_redirect_util.binding.algorithms import (
    DEFAULT_ALLOWED_ALGORITHMS,
    SignatureAlgorithm,
    resolve_algorithm,
)
from saml_redirect_util.binding.query_string import MESSAGE_PARAMETERS
from saml_redirect_util.utils.exceptions import UnsupportedAlgorithmError

VALID_LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class VerificationConfig(BaseModel):
    """Configuration for HTTP-Redirect signature verification.

    Attributes:
        allowed_algorithms: Algorithm identifiers accepted for verification
        reject_duplicate_parameters: Reject repeated signed parameters instead
            of using the first occurrence
        message_parameter: Default message parameter (SAMLRequest or SAMLResponse)
    """

    allowed_algorithms: List[str] = Field(
        default_factory=lambda: [a.uri for a in DEFAULT_ALLOWED_ALGORITHMS],
        min_length=1,
        description="Allow-listed signature algorithm identifiers",
    )
    reject_duplicate_parameters: bool = Field(
        default=False,
        description="Reject duplicate signed query parameters",
    )
    message_parameter: str = Field(
        default="SAMLResponse",
        description="Message parameter: SAMLRequest or SAMLResponse",
    )

    @field_validator("allowed_algorithms")
    @classmethod
    def validate_algorithms(cls, v: List[str]) -> List[str]:
        """Validate and normalize algorithm identifiers to their URIs.

        Raises:
            ValueError: If an identifier is not a supported algorithm
        """
        uris = []
        for identifier in v:
            try:
                uris.append(resolve_algorithm(identifier).uri)
            except UnsupportedAlgorithmError:
                supported = ", ".join(a.name for a in SignatureAlgorithm)
                raise ValueError(
                    f"Unsupported signature algorithm: {identifier}. "
                    f"Must be one of: {supported}"
                )
        return uris

    @field_validator("message_parameter")
    @classmethod
    def validate_message_parameter(cls, v: str) -> str:
        if v not in MESSAGE_PARAMETERS:
            raise ValueError(
                f"Invalid message_parameter: {v}. "
                f"Must be one of: {', '.join(MESSAGE_PARAMETERS)}"
            )
        return v


class DisplayConfig(BaseModel):
    """Configuration for XML diagnostic output.

    Attributes:
        indent: Indent unit used by the beautifier
        html: Escape beautified output for HTML
    """

    indent: str = Field(default="  ", description="Indent unit")
    html: bool = False

    @field_validator("indent")
    @classmethod
    def validate_indent(cls, v: str) -> str:
        if v.strip():
            raise ValueError(f"Invalid indent: {v!r}. Must contain only whitespace")
        return v


class LoggingConfig(BaseModel):
    """Configuration for logging.

    Attributes:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Path to log file
        redact_sensitive: Whether to redact SAML payloads and signatures from logs
    """

    level: str = Field(
        default="INFO",
        description="Log level: DEBUG, INFO, WARNING, ERROR, CRITICAL"
    )
    log_file: Path = Field(
        default=Path("logs/saml-redirect-util.log"),
        description="Log file path"
    )
    redact_sensitive: bool = Field(
        default=False,
        description="Redact SAML payloads and signatures from logs"
    )

    @field_validator("level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level.

        Returns:
            Validated log level (uppercase)

        Raises:
            ValueError: If log level is not valid
        """
        v_upper = v.upper()
        if v_upper not in VALID_LOG_LEVELS:
            raise ValueError(
                f"Invalid log level: {v}. Must be one of: {', '.join(VALID_LOG_LEVELS)}"
            )
        return v_upper


class ProtocolConfig(BaseModel):
    """Protocol endpoint wiring.

    Attributes:
        endpoints: Endpoint name -> handler factory key
    """

    endpoints: Dict[str, str] = Field(default_factory=dict)


class Config(BaseModel):
    """Root configuration model.

    Example:
        >>> config = Config(verification=VerificationConfig(allowed_algorithms=["rsa-sha256"]))
        >>> config.verification.allowed_algorithms
        ['http://www.w3.org/2001/04/xmldsig-more#rsa-sha256']
    """

    verification: VerificationConfig = VerificationConfig()
    display: DisplayConfig = DisplayConfig()
    logging: LoggingConfig = LoggingConfig()
    protocol: ProtocolConfig = ProtocolConfig()
