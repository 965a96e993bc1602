"""Custom log formatters for the SAML Redirect Utility.

This module provides specialized formatters for logging, including redaction
of signed protocol payloads.
"""

import logging
import re
from typing import List, Tuple


class SensitiveValueRedactingFormatter(logging.Formatter):
    """Formatter that redacts SAML protocol values from log messages.

    Query strings logged during verification carry the encoded SAML message,
    the RelayState and the signature. With redaction enabled their values are
    replaced so the parameter names (and therefore the canonical order) stay
    visible in the log.

    Attributes:
        redact_sensitive: Whether to enable redaction
        patterns: List of (regex_pattern, replacement_text) tuples for redaction

    Example:
        >>> formatter = SensitiveValueRedactingFormatter(redact_sensitive=True)
        >>> handler = logging.StreamHandler()
        >>> handler.setFormatter(formatter)
    """

    def __init__(
        self,
        fmt: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt: str | None = None,
        redact_sensitive: bool = False,
    ) -> None:
        """Initialize the SensitiveValueRedactingFormatter.

        Args:
            fmt: Log message format string
            datefmt: Date format string (optional)
            redact_sensitive: Whether to enable redaction
        """
        super().__init__(fmt=fmt, datefmt=datefmt)
        self.redact_sensitive = redact_sensitive

        self.patterns: List[Tuple[re.Pattern[str], str]] = [
            # Query parameters: SAMLRequest=..., Signature=... up to the next '&'
            (
                re.compile(r"\b(SAMLRequest|SAMLResponse|RelayState|Signature)=[^&\s]*"),
                r"\1=[REDACTED]",
            ),
            # Key/value style used by audit lines: signature=...
            (re.compile(r"\b(signature)=[^|\s]+"), r"\1=[REDACTED]"),
        ]

    def format(self, record: logging.LogRecord) -> str:
        """Format the log record with optional redaction.

        Args:
            record: Log record to format

        Returns:
            Formatted log message with protocol values redacted if enabled
        """
        original = super().format(record)

        if self.redact_sensitive:
            for pattern, replacement in self.patterns:
                original = pattern.sub(replacement, original)

        return original
