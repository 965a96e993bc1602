"""Query string parameter extraction and canonicalization for HTTP-Redirect.

The HTTP-Redirect binding signs the raw, percent-encoded query parameters
in a fixed order (SAML Bindings 2.0, section 3.4.4.1):

    SAMLRequest=value&RelayState=value&SigAlg=value

Values are taken exactly as received. Decoding and re-encoding them would
change the bytes and break verification against conforming signers, so
nothing in this module URL-decodes anything.
"""

import logging
from typing import List, Optional, Tuple

from ..utils.exceptions import MalformedInputError, MissingRequiredParameterError

logger = logging.getLogger(__name__)

SAML_REQUEST = "SAMLRequest"
SAML_RESPONSE = "SAMLResponse"
RELAY_STATE = "RelayState"
SIG_ALG = "SigAlg"
SIGNATURE = "Signature"

MESSAGE_PARAMETERS = (SAML_REQUEST, SAML_RESPONSE)


def _split_query(raw_query: str) -> List[Tuple[str, str]]:
    """Split a raw query string into (key, raw value) pairs.

    Args:
        raw_query: Full URL or bare query string, still percent-encoded

    Returns:
        List of (key, value) pairs in their original order

    Raises:
        MalformedInputError: If a segment has no '='
    """
    # No '?' means the caller handed us the bare query
    query = raw_query[raw_query.find("?") + 1:]

    segments = query.split("&")
    while segments and segments[-1] == "":
        segments.pop()

    pairs: List[Tuple[str, str]] = []
    for position, segment in enumerate(segments):
        key, separator, value = segment.partition("=")
        if not separator:
            raise MalformedInputError(
                f"Malformed query string: segment {position + 1} "
                f"('{segment[:40]}') has no '=' separator"
            )
        pairs.append((key, value))
    return pairs


def extract_parameter(
    name: str,
    raw_query: str,
    strict: bool = False,
) -> Optional[str]:
    """Extract a single raw (still encoded) parameter value.

    The first occurrence of ``name`` wins. With ``strict`` enabled a repeated
    ``name`` is rejected instead, since the standard does not say which
    occurrence a signer meant.

    Args:
        name: Parameter name, compared case-sensitively
        raw_query: Full URL or bare query string, still percent-encoded
        strict: Reject duplicate occurrences of ``name``

    Returns:
        The raw value, or None if the parameter is absent

    Raises:
        MalformedInputError: If the query is malformed, or ``name`` is
            repeated in strict mode

    Example:
        >>> extract_parameter("SigAlg", "x?SAMLRequest=a&SigAlg=b")
        'b'
        >>> extract_parameter("Missing", "x?SAMLRequest=a&SigAlg=b") is None
        True
    """
    values = [value for key, value in _split_query(raw_query) if key == name]

    if not values:
        return None

    if len(values) > 1:
        if strict:
            raise MalformedInputError(
                f"Parameter '{name}' appears {len(values)} times in the query string"
            )
        logger.debug(f"Parameter {name} repeated {len(values)} times, using first")

    return values[0]


def canonicalize_query_string(
    raw_query: str,
    message_param: str,
    strict: bool = False,
) -> str:
    """Rebuild the exact string the sender signed.

    Order is fixed by the binding: message parameter, RelayState (only if
    present), SigAlg. An absent RelayState is omitted entirely, never sent
    as an empty value.

    Args:
        raw_query: Full URL or bare query string, still percent-encoded
        message_param: Name of the message parameter (SAMLRequest or SAMLResponse)
        strict: Reject duplicate occurrences of the signed parameters

    Returns:
        Canonical signed content

    Raises:
        MalformedInputError: If the query string is malformed
        MissingRequiredParameterError: If the message parameter or SigAlg is absent

    Example:
        >>> canonicalize_query_string(
        ...     "https://sp/acs?SigAlg=s&SAMLResponse=m&Signature=x", "SAMLResponse"
        ... )
        'SAMLResponse=m&SigAlg=s'
    """
    message = extract_parameter(message_param, raw_query, strict)
    relay_state = extract_parameter(RELAY_STATE, raw_query, strict)
    sig_alg = extract_parameter(SIG_ALG, raw_query, strict)

    if message is None:
        raise MissingRequiredParameterError(message_param)
    if sig_alg is None:
        raise MissingRequiredParameterError(SIG_ALG)

    parts = [f"{message_param}={message}"]
    if relay_state is not None:
        parts.append(f"{RELAY_STATE}={relay_state}")
    parts.append(f"{SIG_ALG}={sig_alg}")

    canonical = "&".join(parts)
    logger.debug(f"Canonical signed content: {canonical}")
    return canonical
