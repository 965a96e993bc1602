"""Custom exception classes for the SAML Redirect Utility.

All exceptions inherit from SAMLRedirectError to allow catching all custom exceptions.

A signature that is well-formed but does not match is NOT an exception: the
verification functions return ``False`` for it. Callers must reject the request
on ``False`` exactly as they would on any of the errors below.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class SAMLRedirectError(Exception):
    """Base exception for all SAML Redirect Utility custom exceptions."""

    pass


class ConfigurationError(SAMLRedirectError):
    """Raised when configuration loading or validation fails.

    Examples:
        - Invalid configuration file format
        - Unknown signature algorithm in the allow-list
        - Endpoint mapped to an unregistered handler factory
    """

    pass


class MalformedInputError(SAMLRedirectError):
    """Raised when a query string or signature encoding cannot be parsed.

    Examples:
        - Query string segment without '='
        - Signature that is not valid base64
        - Duplicate parameter in strict mode
    """

    pass


class MissingRequiredParameterError(MalformedInputError):
    """Raised when a parameter covered by the signature is absent.

    Attributes:
        parameter: Name of the missing query parameter
    """

    def __init__(self, parameter: str, message: Optional[str] = None) -> None:
        self.parameter = parameter
        super().__init__(
            message
            or f"Required parameter '{parameter}' is missing from the query string"
        )


class SignatureError(SAMLRedirectError):
    """Base exception for cryptographic verification problems."""

    pass


class UnsupportedAlgorithmError(SignatureError):
    """Raised when a signature algorithm is unknown or not allow-listed.

    Attributes:
        algorithm: The rejected algorithm identifier
    """

    def __init__(self, algorithm: object, message: Optional[str] = None) -> None:
        self.algorithm = algorithm
        super().__init__(message or f"Unsupported signature algorithm: {algorithm}")


class InvalidKeyError(SignatureError):
    """Raised when key material is rejected for the requested algorithm.

    Examples:
        - RSA algorithm requested with an EC public key
        - Private key passed where a public key is expected
    """

    pass


class InternalCryptoError(SignatureError):
    """Raised when the cryptographic primitive fails unexpectedly.

    This is fatal and must not be retried.
    """

    pass


class KeyLoadError(SAMLRedirectError):
    """Raised when a certificate or key file cannot be loaded.

    Examples:
        - File not found
        - Unsupported or corrupted PEM/DER content
        - Wrong password for an encrypted private key
    """

    pass


class ErrorCategory(Enum):
    """Error categorization for handling and reporting.

    None of the categories is retryable: verification is deterministic.

    Attributes:
        REJECT_REQUEST: The inbound request is invalid and must be rejected
        CONFIGURATION: Local setup is wrong (allow-list, keys, config file)
        INTERNAL: Unexpected failure inside the cryptographic layer
    """

    REJECT_REQUEST = "REJECT_REQUEST"
    CONFIGURATION = "CONFIGURATION"
    INTERNAL = "INTERNAL"


@dataclass(frozen=True)
class ErrorInfo:
    """Structured error information for logging and CLI reporting.

    Attributes:
        category: Error category
        error_type: Exception class name (e.g., "MalformedInputError")
        message: User-friendly error message
        remediation: Actionable guidance for resolving the error
        technical_details: Optional chained cause for debugging
    """

    category: ErrorCategory
    error_type: str
    message: str
    remediation: str
    technical_details: Optional[str] = None


def categorize_error(exception: Exception) -> ErrorCategory:
    """Categorize an exception raised while handling a redirect request.

    Args:
        exception: The exception to categorize

    Returns:
        ErrorCategory for the exception

    Example:
        >>> categorize_error(MalformedInputError("bad query"))
        <ErrorCategory.REJECT_REQUEST: 'REJECT_REQUEST'>
        >>> categorize_error(KeyLoadError("missing cert"))
        <ErrorCategory.CONFIGURATION: 'CONFIGURATION'>
    """
    if isinstance(exception, InternalCryptoError):
        return ErrorCategory.INTERNAL

    if isinstance(exception, (ConfigurationError, KeyLoadError, InvalidKeyError)):
        return ErrorCategory.CONFIGURATION

    if isinstance(exception, (MalformedInputError, UnsupportedAlgorithmError)):
        return ErrorCategory.REJECT_REQUEST

    return ErrorCategory.INTERNAL


def create_error_info(exception: Exception) -> ErrorInfo:
    """Create structured error information from an exception.

    Args:
        exception: Exception that occurred

    Returns:
        ErrorInfo with categorization and remediation guidance
    """
    category = categorize_error(exception)

    technical_details = None
    if exception.__cause__ is not None:
        technical_details = (
            f"Caused by: {type(exception.__cause__).__name__}: {exception.__cause__}"
        )

    return ErrorInfo(
        category=category,
        error_type=type(exception).__name__,
        message=str(exception),
        remediation=_generate_remediation(exception),
        technical_details=technical_details,
    )


def _generate_remediation(exception: Exception) -> str:
    """Generate actionable remediation message for an error.

    Args:
        exception: Exception that occurred

    Returns:
        Actionable remediation message
    """
    if isinstance(exception, MissingRequiredParameterError):
        return (
            f"The sender did not include '{exception.parameter}'. "
            "Reject the request; the signed content cannot be reconstructed."
        )

    if isinstance(exception, MalformedInputError):
        return (
            "The query string or signature encoding is malformed. "
            "Reject the request and check the sender's HTTP-Redirect encoding."
        )

    if isinstance(exception, UnsupportedAlgorithmError):
        return (
            "The algorithm is not on the allow-list. Add it to "
            "verification.allowed_algorithms in config.json only if the "
            "sender's algorithm is acceptable."
        )

    if isinstance(exception, InvalidKeyError):
        return (
            "The verification key does not fit the algorithm. Check that the "
            "configured certificate belongs to the expected sender."
        )

    if isinstance(exception, KeyLoadError):
        return "Check the certificate/key path and that the file is PEM or DER."

    if isinstance(exception, ConfigurationError):
        return (
            "Configuration error. Check config.json for missing or invalid values. "
            "Use examples/config.example.json as template."
        )

    return "Review the log file for details. This error is not retryable."
