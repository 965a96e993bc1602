"""Signature algorithm identifiers and allow-list resolution.

Algorithms are named by their XML Signature URIs, which is what a SAML sender
puts into the SigAlg query parameter. Resolution always happens against an
allow-list owned by the caller; the SigAlg value itself is untrusted input
and is never used to pick an algorithm on its own.
"""

from enum import Enum
from typing import Callable, Dict, FrozenSet, Iterable, Optional, Tuple, Union
from urllib.parse import unquote_plus

from cryptography.hazmat.primitives import hashes

from ..utils.exceptions import MissingRequiredParameterError, UnsupportedAlgorithmError
from .query_string import SIG_ALG, extract_parameter

DSIG_NS = "http://www.w3.org/2000/09/xmldsig#"
DSIG_MORE_NS = "http://www.w3.org/2001/04/xmldsig-more#"
DSIG11_NS = "http://www.w3.org/2009/xmldsig11#"


class SignatureAlgorithm(Enum):
    """Signature algorithms supported for HTTP-Redirect verification.

    Values are the XML Signature algorithm URIs.
    """

    RSA_SHA1 = DSIG_NS + "rsa-sha1"
    RSA_SHA224 = DSIG_MORE_NS + "rsa-sha224"
    RSA_SHA256 = DSIG_MORE_NS + "rsa-sha256"
    RSA_SHA384 = DSIG_MORE_NS + "rsa-sha384"
    RSA_SHA512 = DSIG_MORE_NS + "rsa-sha512"
    DSA_SHA1 = DSIG_NS + "dsa-sha1"
    DSA_SHA256 = DSIG11_NS + "dsa-sha256"
    ECDSA_SHA1 = DSIG_MORE_NS + "ecdsa-sha1"
    ECDSA_SHA224 = DSIG_MORE_NS + "ecdsa-sha224"
    ECDSA_SHA256 = DSIG_MORE_NS + "ecdsa-sha256"
    ECDSA_SHA384 = DSIG_MORE_NS + "ecdsa-sha384"
    ECDSA_SHA512 = DSIG_MORE_NS + "ecdsa-sha512"

    @property
    def uri(self) -> str:
        return self.value

    @property
    def key_family(self) -> str:
        """Key family required by this algorithm: "RSA", "DSA" or "EC"."""
        return _DETAILS[self][0]

    def hash_algorithm(self) -> hashes.HashAlgorithm:
        """Return a fresh hash instance for this algorithm."""
        return _DETAILS[self][1]()


AlgorithmIdentifier = Union[SignatureAlgorithm, str]

_DETAILS: Dict[SignatureAlgorithm, Tuple[str, Callable[[], hashes.HashAlgorithm]]] = {
    SignatureAlgorithm.RSA_SHA1: ("RSA", hashes.SHA1),
    SignatureAlgorithm.RSA_SHA224: ("RSA", hashes.SHA224),
    SignatureAlgorithm.RSA_SHA256: ("RSA", hashes.SHA256),
    SignatureAlgorithm.RSA_SHA384: ("RSA", hashes.SHA384),
    SignatureAlgorithm.RSA_SHA512: ("RSA", hashes.SHA512),
    SignatureAlgorithm.DSA_SHA1: ("DSA", hashes.SHA1),
    SignatureAlgorithm.DSA_SHA256: ("DSA", hashes.SHA256),
    SignatureAlgorithm.ECDSA_SHA1: ("EC", hashes.SHA1),
    SignatureAlgorithm.ECDSA_SHA224: ("EC", hashes.SHA224),
    SignatureAlgorithm.ECDSA_SHA256: ("EC", hashes.SHA256),
    SignatureAlgorithm.ECDSA_SHA384: ("EC", hashes.SHA384),
    SignatureAlgorithm.ECDSA_SHA512: ("EC", hashes.SHA512),
}

# JCA style names, e.g. SHA256withRSA
_JCA_NAMES: Dict[str, SignatureAlgorithm] = {
    "{1}with{0}".format(*algorithm.name.split("_")).lower(): algorithm
    for algorithm in SignatureAlgorithm
}

SUPPORTED_ALGORITHMS: FrozenSet[SignatureAlgorithm] = frozenset(SignatureAlgorithm)

# DSA and SHA-224 variants are opt-in
DEFAULT_ALLOWED_ALGORITHMS: Tuple[SignatureAlgorithm, ...] = (
    SignatureAlgorithm.RSA_SHA1,
    SignatureAlgorithm.RSA_SHA256,
    SignatureAlgorithm.RSA_SHA384,
    SignatureAlgorithm.RSA_SHA512,
    SignatureAlgorithm.ECDSA_SHA256,
    SignatureAlgorithm.ECDSA_SHA384,
    SignatureAlgorithm.ECDSA_SHA512,
)


def _lookup(identifier: object) -> SignatureAlgorithm:
    """Map an identifier to a SignatureAlgorithm without any allow-list check."""
    if isinstance(identifier, SignatureAlgorithm):
        return identifier

    if not isinstance(identifier, str) or not identifier.strip():
        raise UnsupportedAlgorithmError(identifier)

    text = identifier.strip()

    try:
        return SignatureAlgorithm(text)
    except ValueError:
        pass

    # Member name or URI fragment: RSA_SHA256, rsa-sha256, RSA-SHA256
    member = text.upper().replace("-", "_")
    if member in SignatureAlgorithm.__members__:
        return SignatureAlgorithm[member]

    if text.lower() in _JCA_NAMES:
        return _JCA_NAMES[text.lower()]

    raise UnsupportedAlgorithmError(identifier)


def normalize_allowed(
    allowed: Optional[Iterable[AlgorithmIdentifier]],
) -> FrozenSet[SignatureAlgorithm]:
    """Turn an allow-list of identifiers into a set of algorithms.

    Args:
        allowed: Identifiers accepted by the caller, or None for every
            supported algorithm

    Returns:
        Frozen set of allowed algorithms

    Raises:
        UnsupportedAlgorithmError: If the allow-list names an unknown algorithm
    """
    if allowed is None:
        return SUPPORTED_ALGORITHMS
    if isinstance(allowed, (str, SignatureAlgorithm)):
        allowed = [allowed]
    return frozenset(_lookup(identifier) for identifier in allowed)


def resolve_algorithm(
    identifier: AlgorithmIdentifier,
    allowed: Optional[Iterable[AlgorithmIdentifier]] = None,
) -> SignatureAlgorithm:
    """Resolve an algorithm identifier against an allow-list.

    Accepted spellings are the enum member, the XML Signature URI, the member
    name or URI fragment (``rsa-sha256``) and the JCA name (``SHA256withRSA``).

    Args:
        identifier: Algorithm identifier
        allowed: Allow-list of identifiers, or None for every supported algorithm

    Returns:
        The resolved SignatureAlgorithm

    Raises:
        UnsupportedAlgorithmError: If the identifier is unknown or not allowed

    Example:
        >>> resolve_algorithm("rsa-sha256")
        <SignatureAlgorithm.RSA_SHA256: 'http://www.w3.org/2001/04/xmldsig-more#rsa-sha256'>
    """
    algorithm = _lookup(identifier)
    allowed_set = normalize_allowed(allowed)

    if algorithm not in allowed_set:
        raise UnsupportedAlgorithmError(
            identifier,
            f"Signature algorithm {algorithm.uri} is not in the allow-list",
        )
    return algorithm


def algorithm_from_query(
    raw_query: str,
    allowed: Iterable[AlgorithmIdentifier],
) -> SignatureAlgorithm:
    """Resolve the sender's SigAlg parameter against an explicit allow-list.

    The SigAlg value is URL-decoded for lookup only; canonicalization still
    uses the raw value.

    Args:
        raw_query: Full URL or bare query string, still percent-encoded
        allowed: Allow-list of identifiers the caller accepts

    Returns:
        The resolved SignatureAlgorithm

    Raises:
        MissingRequiredParameterError: If SigAlg is absent
        UnsupportedAlgorithmError: If SigAlg is unknown or not allowed
    """
    raw_sig_alg = extract_parameter(SIG_ALG, raw_query)
    if raw_sig_alg is None:
        raise MissingRequiredParameterError(SIG_ALG)
    return resolve_algorithm(unquote_plus(raw_sig_alg), allowed)
