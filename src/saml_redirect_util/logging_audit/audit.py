"""Audit trail functionality for the SAML Redirect Utility.

Every signature verification decision is written as a structured audit line,
so rejected requests can be told apart (mismatch vs. malformed input vs.
configuration problem) even though all of them lead to rejection.
"""

import logging
import time
from typing import Any, Dict, Optional

from ..utils.identifiers import generate_xml_id
from .logger import get_logger

logger = get_logger(__name__)

# Standard audit field order
FIELD_ORDER = [
    "status",
    "outcome",
    "message_parameter",
    "algorithm",
    "error_type",
    "error_message",
    "correlation_id",
]


def log_audit_event(
    event_type: str,
    details: Dict[str, Any],
    audit_logger: Optional[logging.Logger] = None,
) -> None:
    """Log an audit trail event.

    Successful events are logged at INFO level, failures at WARNING level.

    Args:
        event_type: Type of operation (e.g., "REDIRECT_SIGNATURE_VERIFIED")
        details: Dictionary with event details. Common fields include:
                - status: "success" or "failure"
                - algorithm: Signature algorithm URI
                - message_parameter: SAMLRequest or SAMLResponse
                - error_type / error_message: Details when status is failure
                - correlation_id: Optional correlation ID
        audit_logger: Logger to write to (defaults to this module's logger)

    Example:
        >>> log_audit_event("REDIRECT_SIGNATURE_VERIFIED", {
        ...     "status": "success",
        ...     "algorithm": "http://www.w3.org/2001/04/xmldsig-more#rsa-sha256",
        ... })
    """
    target = audit_logger or logger

    # Do not mutate the caller's dictionary
    entry = dict(details)
    entry.setdefault("timestamp", time.time())
    entry.setdefault("correlation_id", generate_xml_id())

    message_parts = [f"AUDIT [{event_type}]"]

    for field in FIELD_ORDER:
        if field in entry:
            message_parts.append(f"{field}={entry[field]}")

    for key, value in entry.items():
        if key not in FIELD_ORDER and key != "timestamp":
            message_parts.append(f"{key}={value}")

    audit_message = " | ".join(message_parts)

    if entry.get("status") == "failure":
        target.warning(audit_message)
    else:
        target.info(audit_message)


def log_verification_outcome(
    verified: Optional[bool],
    algorithm: Optional[str] = None,
    message_parameter: Optional[str] = None,
    error: Optional[Exception] = None,
    audit_logger: Optional[logging.Logger] = None,
) -> None:
    """Record the outcome of an HTTP-Redirect signature verification.

    Args:
        verified: True/False verification result, or None if an error was raised
        algorithm: Algorithm URI used for verification
        message_parameter: Name of the signed message parameter
        error: Exception raised instead of a result
        audit_logger: Logger to write to
    """
    details: Dict[str, Any] = {}

    if error is not None:
        details["status"] = "failure"
        details["outcome"] = "error"
        details["error_type"] = type(error).__name__
        details["error_message"] = str(error)
    elif verified:
        details["status"] = "success"
        details["outcome"] = "valid"
    else:
        details["status"] = "failure"
        details["outcome"] = "signature_mismatch"

    if message_parameter:
        details["message_parameter"] = message_parameter
    if algorithm:
        details["algorithm"] = algorithm

    log_audit_event("REDIRECT_SIGNATURE_VERIFICATION", details, audit_logger)
