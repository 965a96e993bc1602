"""SOAP envelope version detection.

Heuristic, text-only detection of the SOAP version of an envelope. It scans
for the namespace URIs and checks that the namespace is declared on an
Envelope start tag, without parsing the document.

This is NOT authoritative. Use it to pick a diagnostic or dispatch code path
only, never to make a trust or security decision.
"""

import logging
from enum import Enum
from typing import Optional

logger = logging.getLogger(__name__)

SOAP11_NS = "http://schemas.xmlsoap.org/soap/envelope/"
SOAP12_NS = "http://www.w3.org/2003/05/soap-envelope"


class SoapVersion(Enum):
    """SOAP versions, identified by their envelope namespace URI."""

    V1_1 = SOAP11_NS
    V1_2 = SOAP12_NS

    @property
    def namespace(self) -> str:
        return self.value

    @property
    def label(self) -> str:
        """Human-readable name, e.g. ``SOAP 1.2``."""
        return "SOAP " + self.name[1:].replace("_", ".")


# Checked in this order; the first confirmed namespace wins
PRIORITY = (SoapVersion.V1_1, SoapVersion.V1_2)

_WHITESPACE = (" ", "\t", "\r", "\n")


def _declared_prefix(xml_text: str, ns_index: int) -> Optional[str]:
    """Return the prefix bound by the declaration just before ``ns_index``.

    Looks at the token between the preceding whitespace and the namespace,
    e.g. ``xmlns:soap="``. Returns None for a default namespace declaration
    or anything that is not an ``xmlns:`` binding.
    """
    token_start = max(xml_text.rfind(ws, 0, ns_index) for ws in _WHITESPACE) + 1
    token = xml_text[token_start:ns_index]

    if not token.startswith("xmlns:"):
        return None

    equals = token.rfind("=")
    if equals == -1:
        return None
    return token[len("xmlns:"):equals].strip()


def detect_soap_version(xml_text: Optional[str]) -> Optional[SoapVersion]:
    """Detect the SOAP version of an envelope by textual inspection.

    For each namespace in priority order, the first occurrence is located,
    the prefix bound to it is recovered from the ``xmlns:<prefix>=`` token in
    front of it, and the version is accepted if a ``<prefix:Envelope`` (or
    unprefixed ``<Envelope``) start tag opens the element carrying that
    declaration.

    Args:
        xml_text: Complete envelope as text

    Returns:
        The detected SoapVersion, or None if no envelope namespace is confirmed

    Example:
        >>> detect_soap_version(
        ...     '<soap:Envelope xmlns:soap="http://www.w3.org/2003/05/soap-envelope"/>'
        ... )
        <SoapVersion.V1_2: 'http://www.w3.org/2003/05/soap-envelope'>
    """
    if not xml_text:
        return None

    for version in PRIORITY:
        ns_index = xml_text.find(version.namespace)
        if ns_index == -1:
            continue

        prefix = _declared_prefix(xml_text, ns_index)
        tag_open = xml_text.rfind("<", 0, ns_index + 1)
        start_tag = f"<{prefix}:Envelope" if prefix else "<Envelope"

        envelope_index = xml_text.rfind(start_tag, 0, ns_index + len(start_tag))
        if envelope_index != -1 and envelope_index >= tag_open:
            logger.debug(
                f"Detected SOAP {version.name} envelope "
                f"(prefix={prefix or '<default>'})"
            )
            return version

    logger.debug("No SOAP envelope namespace detected")
    return None
