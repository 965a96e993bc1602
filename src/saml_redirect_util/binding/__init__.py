"""SAML 2.0 HTTP-Redirect binding signature handling.

This module provides functionality for:
- Extracting raw parameters from redirect query strings
- Rebuilding the canonical signed content
- Verifying redirect signatures against a trusted public key
- Signing redirect query strings (fixtures and CLI)
"""

from saml_redirect_util.binding.algorithms import (
    DEFAULT_ALLOWED_ALGORITHMS,
    SUPPORTED_ALGORITHMS,
    SignatureAlgorithm,
    algorithm_from_query,
    resolve_algorithm,
)
from saml_redirect_util.binding.keys import load_signing_key, load_verification_key
from saml_redirect_util.binding.query_string import (
    RELAY_STATE,
    SAML_REQUEST,
    SAML_RESPONSE,
    SIG_ALG,
    SIGNATURE,
    canonicalize_query_string,
    extract_parameter,
)
from saml_redirect_util.binding.signer import build_signed_query_string, sign_data
from saml_redirect_util.binding.verifier import (
    RedirectSignatureVerifier,
    decode_signature,
    verify_query_signature,
    verify_signature,
)

__all__ = [
    # Query string handling
    "extract_parameter",
    "canonicalize_query_string",
    "SAML_REQUEST",
    "SAML_RESPONSE",
    "RELAY_STATE",
    "SIG_ALG",
    "SIGNATURE",
    # Algorithms
    "SignatureAlgorithm",
    "SUPPORTED_ALGORITHMS",
    "DEFAULT_ALLOWED_ALGORITHMS",
    "resolve_algorithm",
    "algorithm_from_query",
    # Verification
    "RedirectSignatureVerifier",
    "decode_signature",
    "verify_signature",
    "verify_query_signature",
    # Signing
    "sign_data",
    "build_signed_query_string",
    # Keys
    "load_verification_key",
    "load_signing_key",
]
