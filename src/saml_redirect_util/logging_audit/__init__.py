"""Logging Audit module.

This module provides logging configuration and audit trail functionality.
"""

from .audit import log_audit_event, log_verification_outcome
from .formatters import SensitiveValueRedactingFormatter
from .logger import configure_logging, get_logger

__all__ = [
    "configure_logging",
    "get_logger",
    "log_audit_event",
    "log_verification_outcome",
    "SensitiveValueRedactingFormatter",
]
