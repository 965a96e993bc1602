"""HTTP-Redirect binding query string signing.

Produces query strings in the form a conforming SAML sender emits, so that
test fixtures and the CLI can exercise the verifier end to end. Values are
percent-encoded once here and then signed exactly as they appear in the URL.
"""

import base64
import logging
from typing import Any, Optional, Union
from urllib.parse import quote_plus

from cryptography.hazmat.primitives.asymmetric import dsa, ec, padding, rsa
from cryptography.hazmat.primitives.asymmetric.utils import decode_dss_signature

from ..utils.exceptions import InternalCryptoError, InvalidKeyError
from .algorithms import AlgorithmIdentifier, SignatureAlgorithm, resolve_algorithm
from .query_string import RELAY_STATE, SIG_ALG, SIGNATURE

logger = logging.getLogger(__name__)

_PRIVATE_KEY_TYPES = {
    "RSA": rsa.RSAPrivateKey,
    "DSA": dsa.DSAPrivateKey,
    "EC": ec.EllipticCurvePrivateKey,
}


def _component_size(private_key: Any) -> int:
    if isinstance(private_key, ec.EllipticCurvePrivateKey):
        bits = private_key.curve.key_size
    else:
        bits = private_key.parameters().parameter_numbers().q.bit_length()
    return (bits + 7) // 8


def sign_data(
    data: Union[bytes, str],
    private_key: Any,
    algorithm: AlgorithmIdentifier,
) -> bytes:
    """Sign content with the given algorithm.

    DSA and ECDSA signatures are returned in the XML Signature r||s form.

    Args:
        data: Content to sign (str values are UTF-8 encoded)
        private_key: RSA, DSA or EC private key
        algorithm: Algorithm identifier

    Returns:
        Raw signature bytes

    Raises:
        UnsupportedAlgorithmError: If the algorithm is unknown
        InvalidKeyError: If the key does not fit the algorithm
        InternalCryptoError: If signing fails
    """
    resolved = resolve_algorithm(algorithm)

    expected = _PRIVATE_KEY_TYPES[resolved.key_family]
    if not isinstance(private_key, expected):
        raise InvalidKeyError(
            f"{resolved.uri} requires a {resolved.key_family} private key, "
            f"got {type(private_key).__name__}"
        )

    if isinstance(data, str):
        data = data.encode("utf-8")

    hash_algorithm = resolved.hash_algorithm()
    try:
        if resolved.key_family == "RSA":
            return private_key.sign(data, padding.PKCS1v15(), hash_algorithm)

        if resolved.key_family == "DSA":
            der = private_key.sign(data, hash_algorithm)
        else:
            der = private_key.sign(data, ec.ECDSA(hash_algorithm))
    except Exception as e:
        raise InternalCryptoError(f"Signing with {resolved.uri} failed: {e}") from e

    size = _component_size(private_key)
    r, s = decode_dss_signature(der)
    return r.to_bytes(size, "big") + s.to_bytes(size, "big")


def build_signed_query_string(
    message_param: str,
    message_value: str,
    private_key: Any,
    algorithm: AlgorithmIdentifier,
    relay_state: Optional[str] = None,
) -> str:
    """Build a signed HTTP-Redirect query string.

    Args:
        message_param: SAMLRequest or SAMLResponse
        message_value: Encoded SAML message (deflated and base64 encoded by caller)
        private_key: Signing key
        algorithm: Algorithm identifier
        relay_state: Optional RelayState value

    Returns:
        Query string without the leading '?', ending in the Signature parameter

    Example:
        >>> query = build_signed_query_string(
        ...     "SAMLRequest", "fZJNT...", private_key, "rsa-sha256", relay_state="abc"
        ... )
        >>> query.split("&")[-1].startswith("Signature=")
        True
    """
    resolved: SignatureAlgorithm = resolve_algorithm(algorithm)

    parts = [f"{message_param}={quote_plus(message_value)}"]
    if relay_state is not None:
        parts.append(f"{RELAY_STATE}={quote_plus(relay_state)}")
    parts.append(f"{SIG_ALG}={quote_plus(resolved.uri)}")

    signed_content = "&".join(parts)
    signature = sign_data(signed_content, private_key, resolved)
    signature_b64 = base64.b64encode(signature).decode("ascii")

    logger.info(f"Signed {message_param} redirect with {resolved.uri}")
    return f"{signed_content}&{SIGNATURE}={quote_plus(signature_b64)}"
