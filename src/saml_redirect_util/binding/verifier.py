"""HTTP-Redirect binding signature verification.

This module verifies the detached signature that accompanies a SAML message
sent over the HTTP-Redirect binding. The signed content is rebuilt from the
raw query string (see ``query_string``) and checked with the ``cryptography``
library against a public key the caller has already resolved and trusted.

A signature that does not match yields ``False``. Structural problems
(malformed query, undecodable signature, unsupported algorithm, unsuitable
key) raise typed errors instead. Both outcomes mean the request must be
rejected.
"""

import base64
import binascii
import logging
from typing import Any, Callable, Iterable, Optional, Union

from cryptography import x509
from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives.asymmetric import dsa, ec, padding, rsa
from cryptography.hazmat.primitives.asymmetric.utils import encode_dss_signature

from ..logging_audit.audit import log_verification_outcome
from ..utils.exceptions import (
    InternalCryptoError,
    InvalidKeyError,
    MalformedInputError,
    MissingRequiredParameterError,
)
from .algorithms import (
    DEFAULT_ALLOWED_ALGORITHMS,
    AlgorithmIdentifier,
    SignatureAlgorithm,
    normalize_allowed,
    resolve_algorithm,
)
from .query_string import SIGNATURE, canonicalize_query_string

logger = logging.getLogger(__name__)

VerificationKey = Union[
    rsa.RSAPublicKey, dsa.DSAPublicKey, ec.EllipticCurvePublicKey, x509.Certificate
]

_KEY_TYPES = {
    "RSA": rsa.RSAPublicKey,
    "DSA": dsa.DSAPublicKey,
    "EC": ec.EllipticCurvePublicKey,
}


def decode_signature(signature_b64: Union[str, bytes, None]) -> bytes:
    """Decode a base64 signature value.

    The value must already be URL-decoded (as web frameworks hand out query
    parameters). Embedded whitespace is ignored; anything else outside the
    base64 alphabet is rejected.

    Args:
        signature_b64: Base64 encoded signature

    Returns:
        Raw signature bytes

    Raises:
        MissingRequiredParameterError: If the signature is None
        MalformedInputError: If the value is not valid base64
    """
    if signature_b64 is None:
        raise MissingRequiredParameterError(SIGNATURE)

    try:
        if isinstance(signature_b64, bytes):
            signature_b64 = signature_b64.decode("ascii")
        compact = "".join(signature_b64.split())
        return base64.b64decode(compact, validate=True)
    except (binascii.Error, ValueError) as e:
        raise MalformedInputError(f"Signature is not valid base64: {e}") from e


def _public_key(key: Any, algorithm: SignatureAlgorithm) -> Any:
    """Return the public key to use, checking it fits the algorithm."""
    if isinstance(key, x509.Certificate):
        key = key.public_key()

    expected = _KEY_TYPES[algorithm.key_family]
    if not isinstance(key, expected):
        raise InvalidKeyError(
            f"{algorithm.uri} requires a {algorithm.key_family} public key, "
            f"got {type(key).__name__}"
        )
    return key


def _component_size(key: Any) -> int:
    """Byte length of one (r, s) component for DSA/ECDSA keys."""
    if isinstance(key, ec.EllipticCurvePublicKey):
        bits = key.curve.key_size
    else:
        bits = key.parameters().parameter_numbers().q.bit_length()
    return (bits + 7) // 8


def _to_der(signature: bytes, size: int) -> bytes:
    """Convert an XML Signature r||s value to DER; DER input passes through."""
    if len(signature) != 2 * size:
        return signature
    r = int.from_bytes(signature[:size], "big")
    s = int.from_bytes(signature[size:], "big")
    return encode_dss_signature(r, s)


def verify_signature(
    data: Union[bytes, str],
    key: VerificationKey,
    signature: bytes,
    algorithm: AlgorithmIdentifier,
    allowed_algorithms: Optional[Iterable[AlgorithmIdentifier]] = None,
) -> bool:
    """Verify a signature over already canonicalized content.

    Args:
        data: Signed content (str values are UTF-8 encoded)
        key: Trusted public key or certificate of the expected sender
        signature: Raw (base64-decoded) signature bytes
        algorithm: Algorithm identifier; must be explicit
        allowed_algorithms: Allow-list, or None for every supported algorithm

    Returns:
        True if the signature matches, False otherwise

    Raises:
        UnsupportedAlgorithmError: If the algorithm is unknown or not allowed
        InvalidKeyError: If the key does not fit the algorithm
        InternalCryptoError: If the primitive fails unexpectedly

    Example:
        >>> verify_signature(b"SAMLRequest=a&SigAlg=b", public_key, sig, "rsa-sha256")
        True
    """
    resolved = resolve_algorithm(algorithm, allowed_algorithms)
    public_key = _public_key(key, resolved)

    if isinstance(data, str):
        data = data.encode("utf-8")
    else:
        data = bytes(data)

    logger.debug(
        f"Verifying {len(signature)} byte signature over {len(data)} bytes "
        f"with {resolved.uri}"
    )

    hash_algorithm = resolved.hash_algorithm()
    try:
        if resolved.key_family == "RSA":
            public_key.verify(signature, data, padding.PKCS1v15(), hash_algorithm)
        elif resolved.key_family == "DSA":
            public_key.verify(
                _to_der(signature, _component_size(public_key)), data, hash_algorithm
            )
        else:
            public_key.verify(
                _to_der(signature, _component_size(public_key)),
                data,
                ec.ECDSA(hash_algorithm),
            )
    except InvalidSignature:
        logger.debug("Signature does not match signed content")
        return False
    except Exception as e:
        raise InternalCryptoError(
            f"Unexpected error during signature verification with {resolved.uri}: {e}"
        ) from e

    return True


def verify_query_signature(
    signature_b64: Union[str, bytes, None],
    raw_query: str,
    message_param: str,
    key: VerificationKey,
    algorithm: AlgorithmIdentifier,
    allowed_algorithms: Optional[Iterable[AlgorithmIdentifier]] = None,
    strict: bool = False,
) -> bool:
    """Verify an HTTP-Redirect signature straight from the query string.

    Args:
        signature_b64: Base64 signature (the URL-decoded Signature parameter)
        raw_query: Full URL or bare query string, still percent-encoded
        message_param: SAMLRequest or SAMLResponse
        key: Trusted public key or certificate of the expected sender
        algorithm: Algorithm identifier; must be explicit
        allowed_algorithms: Allow-list, or None for every supported algorithm
        strict: Reject duplicate signed parameters

    Returns:
        True if the signature matches, False otherwise

    Raises:
        MalformedInputError: If the query or signature encoding is malformed
        MissingRequiredParameterError: If a signed parameter or the signature is absent
        UnsupportedAlgorithmError: If the algorithm is unknown or not allowed
        InvalidKeyError: If the key does not fit the algorithm
        InternalCryptoError: If the primitive fails unexpectedly
    """
    signature = decode_signature(signature_b64)
    canonical = canonicalize_query_string(raw_query, message_param, strict)
    return verify_signature(canonical, key, signature, algorithm, allowed_algorithms)


class RedirectSignatureVerifier:
    """Verify HTTP-Redirect signatures with a fixed algorithm allow-list.

    The allow-list, duplicate-parameter policy and logger are supplied once by
    the caller; every call records its outcome in the audit log.

    Attributes:
        allowed_algorithms: Algorithms this verifier accepts
        strict: Whether duplicate signed parameters are rejected

    Example:
        >>> verifier = RedirectSignatureVerifier(["rsa-sha256"])
        >>> verifier.verify_from_query(
        ...     signature_b64, query, "SAMLResponse", idp_public_key, "rsa-sha256"
        ... )
        True
    """

    def __init__(
        self,
        allowed_algorithms: Optional[Iterable[AlgorithmIdentifier]] = None,
        strict: bool = False,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        """Initialize the verifier.

        Args:
            allowed_algorithms: Allow-list; defaults to DEFAULT_ALLOWED_ALGORITHMS
            strict: Reject duplicate signed parameters
            logger: Logger for audit output (defaults to this module's logger)

        Raises:
            UnsupportedAlgorithmError: If the allow-list names an unknown algorithm
        """
        if allowed_algorithms is None:
            allowed_algorithms = DEFAULT_ALLOWED_ALGORITHMS
        self.allowed_algorithms = normalize_allowed(allowed_algorithms)
        self.strict = strict
        self.logger = logger or logging.getLogger(__name__)

        self.logger.debug(
            f"RedirectSignatureVerifier initialized "
            f"(algorithms={sorted(a.name for a in self.allowed_algorithms)}, "
            f"strict={strict})"
        )

    def verify(
        self,
        data: Union[bytes, str],
        key: VerificationKey,
        signature: bytes,
        algorithm: AlgorithmIdentifier,
    ) -> bool:
        """Verify a signature over canonical content.

        See ``verify_signature`` for arguments and errors.
        """
        return self._audited(
            lambda: verify_signature(
                data, key, signature, algorithm, self.allowed_algorithms
            ),
            algorithm,
            None,
        )

    def verify_from_query(
        self,
        signature_b64: Union[str, bytes, None],
        raw_query: str,
        message_param: str,
        key: VerificationKey,
        algorithm: AlgorithmIdentifier,
    ) -> bool:
        """Verify a signature straight from the query string.

        See ``verify_query_signature`` for arguments and errors.
        """
        return self._audited(
            lambda: verify_query_signature(
                signature_b64,
                raw_query,
                message_param,
                key,
                algorithm,
                self.allowed_algorithms,
                self.strict,
            ),
            algorithm,
            message_param,
        )

    def _audited(
        self,
        check: Callable[[], bool],
        algorithm: AlgorithmIdentifier,
        message_param: Optional[str],
    ) -> bool:
        algorithm_name = (
            algorithm.uri if isinstance(algorithm, SignatureAlgorithm) else str(algorithm)
        )
        try:
            verified = check()
        except Exception as e:
            log_verification_outcome(
                None, algorithm_name, message_param, error=e, audit_logger=self.logger
            )
            raise
        log_verification_outcome(
            verified, algorithm_name, message_param, audit_logger=self.logger
        )
        return verified
