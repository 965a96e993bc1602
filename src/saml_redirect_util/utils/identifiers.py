"""Identifier generation for SAML messages."""

import logging
import uuid

logger = logging.getLogger(__name__)

# xs:ID values must not start with a digit
ID_PREFIX = "_"


def generate_xml_id() -> str:
    """Generate a valid xs:ID string.

    Returns:
        Identifier in format _{UUID4} (e.g., _a1b2c3d4-e5f6-7890-abcd-ef1234567890)
    """
    xml_id = f"{ID_PREFIX}{uuid.uuid4()}"
    logger.debug(f"Generated XML ID: {xml_id}")
    return xml_id
