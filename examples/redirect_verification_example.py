"""HTTP-Redirect signature verification examples.

This module demonstrates how a service provider verifies signed SAML
messages received over the HTTP-Redirect binding, and how to tell the
different rejection reasons apart using error categories.
"""

import logging
from urllib.parse import unquote_plus

from cryptography.hazmat.primitives.asymmetric import rsa

from saml_redirect_util.binding import (
    RedirectSignatureVerifier,
    algorithm_from_query,
    build_signed_query_string,
    canonicalize_query_string,
    extract_parameter,
)
from saml_redirect_util.utils.exceptions import SAMLRedirectError, create_error_info

# Configure logging to see the audit trail
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)

logger = logging.getLogger(__name__)

# Trusted IdP key (normally loaded from the IdP metadata certificate)
IDP_KEY = rsa.generate_private_key(public_exponent=65537, key_size=2048)

ALLOWED_ALGORITHMS = ["rsa-sha256", "rsa-sha512"]


def receive(url: str) -> None:
    """Verify one inbound redirect URL and print the outcome."""
    verifier = RedirectSignatureVerifier(ALLOWED_ALGORITHMS)

    try:
        algorithm = algorithm_from_query(url, verifier.allowed_algorithms)
        raw_signature = extract_parameter("Signature", url)
        signature = unquote_plus(raw_signature) if raw_signature is not None else None

        print(f"  Signed content: {canonicalize_query_string(url, 'SAMLRequest')}")
        verified = verifier.verify_from_query(
            signature, url, "SAMLRequest", IDP_KEY.public_key(), algorithm
        )
    except SAMLRedirectError as e:
        info = create_error_info(e)
        print(f"  Rejected ({info.category.value}): {info.message}")
        print(f"  Fix: {info.remediation}")
        return

    print(f"  {'Accepted' if verified else 'Rejected: signature mismatch'}")


def example_1_valid_redirect():
    """Example 1: A correctly signed AuthnRequest redirect is accepted."""
    print("=" * 80)
    print("EXAMPLE 1: Valid signed redirect")
    print("=" * 80)

    query = build_signed_query_string(
        "SAMLRequest", "fZJNT8MwDIbv/IrK9zZpt2ksaifVmxMMC", IDP_KEY, "rsa-sha256",
        relay_state="https://sp.example.com/portal",
    )
    receive(f"https://sp.example.com/sso?{query}")
    print()


def example_2_tampered_relay_state():
    """Example 2: Changing RelayState after signing breaks the signature."""
    print("=" * 80)
    print("EXAMPLE 2: Tampered RelayState")
    print("=" * 80)

    query = build_signed_query_string(
        "SAMLRequest", "fZJNT8MwDIbv/IrK9zZpt2ksaifVmxMMC", IDP_KEY, "rsa-sha256",
        relay_state="portal",
    )
    receive(f"https://sp.example.com/sso?{query.replace('portal', 'attacker')}")
    print()


def example_3_algorithm_downgrade():
    """Example 3: A SigAlg outside the allow-list is refused before verification."""
    print("=" * 80)
    print("EXAMPLE 3: Algorithm downgrade attempt")
    print("=" * 80)

    query = build_signed_query_string(
        "SAMLRequest", "fZJNT8MwDIbv/IrK9zZpt2ksaifVmxMMC", IDP_KEY, "rsa-sha1"
    )
    receive(f"https://sp.example.com/sso?{query}")
    print()


def example_4_missing_sig_alg():
    """Example 4: A redirect without SigAlg cannot be reconstructed."""
    print("=" * 80)
    print("EXAMPLE 4: Missing SigAlg")
    print("=" * 80)

    receive("https://sp.example.com/sso?SAMLRequest=abc&Signature=c2ln")
    print()


if __name__ == "__main__":
    example_1_valid_redirect()
    example_2_tampered_relay_state()
    example_3_algorithm_downgrade()
    example_4_missing_sig_alg()
