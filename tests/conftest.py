"""
Shared pytest configuration and fixtures.

This module provides fixtures and configuration used across all test suites
(unit and integration tests). Key material is generated per session with
the cryptography library, so no private keys are checked into the repository.
"""

import datetime
import logging
from pathlib import Path

import pytest
from cryptography import x509
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import dsa, ec, rsa
from cryptography.x509.oid import NameOID

from saml_redirect_util.logging_audit import SensitiveValueRedactingFormatter


@pytest.fixture
def project_root() -> Path:
    """
    Return the project root directory.

    Returns:
        Path: Absolute path to the project root directory.
    """
    return Path(__file__).parent.parent


@pytest.fixture(scope="session")
def rsa_private_key() -> rsa.RSAPrivateKey:
    """Generate an RSA-2048 signing key."""
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


@pytest.fixture(scope="session")
def other_rsa_private_key() -> rsa.RSAPrivateKey:
    """Generate a second RSA key that did not sign anything."""
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


@pytest.fixture(scope="session")
def ec_private_key() -> ec.EllipticCurvePrivateKey:
    """Generate a P-256 signing key."""
    return ec.generate_private_key(ec.SECP256R1())


@pytest.fixture(scope="session")
def dsa_private_key() -> dsa.DSAPrivateKey:
    """Generate a DSA-2048 signing key."""
    return dsa.generate_private_key(key_size=2048)


@pytest.fixture(scope="session")
def rsa_certificate(rsa_private_key: rsa.RSAPrivateKey) -> x509.Certificate:
    """Self-signed certificate for the RSA key."""
    name = x509.Name([x509.NameAttribute(NameOID.COMMON_NAME, "test-idp.example.com")])
    now = datetime.datetime.now(datetime.timezone.utc)
    return (
        x509.CertificateBuilder()
        .subject_name(name)
        .issuer_name(name)
        .public_key(rsa_private_key.public_key())
        .serial_number(x509.random_serial_number())
        .not_valid_before(now - datetime.timedelta(days=1))
        .not_valid_after(now + datetime.timedelta(days=365))
        .sign(rsa_private_key, hashes.SHA256())
    )


@pytest.fixture
def rsa_cert_pem(tmp_path: Path, rsa_certificate: x509.Certificate) -> Path:
    """Write the RSA certificate as PEM and return its path."""
    path = tmp_path / "idp-cert.pem"
    path.write_bytes(rsa_certificate.public_bytes(serialization.Encoding.PEM))
    return path


@pytest.fixture
def rsa_key_pem(tmp_path: Path, rsa_private_key: rsa.RSAPrivateKey) -> Path:
    """Write the unencrypted RSA private key as PEM and return its path."""
    path = tmp_path / "idp-key.pem"
    path.write_bytes(
        rsa_private_key.private_bytes(
            serialization.Encoding.PEM,
            serialization.PrivateFormat.PKCS8,
            serialization.NoEncryption(),
        )
    )
    return path


@pytest.fixture
def ec_public_pem(tmp_path: Path, ec_private_key: ec.EllipticCurvePrivateKey) -> Path:
    """Write the EC public key as PEM and return its path."""
    path = tmp_path / "ec-public.pem"
    path.write_bytes(
        ec_private_key.public_key().public_bytes(
            serialization.Encoding.PEM,
            serialization.PublicFormat.SubjectPublicKeyInfo,
        )
    )
    return path


@pytest.fixture
def ec_key_pem(tmp_path: Path, ec_private_key: ec.EllipticCurvePrivateKey) -> Path:
    """Write the EC private key as PEM and return its path."""
    path = tmp_path / "ec-key.pem"
    path.write_bytes(
        ec_private_key.private_bytes(
            serialization.Encoding.PEM,
            serialization.PrivateFormat.PKCS8,
            serialization.NoEncryption(),
        )
    )
    return path


@pytest.fixture
def isolated_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Path:
    """Run from an empty directory with no SAML_REDIRECT_* overrides set."""
    for name in (
        "ALLOWED_ALGORITHMS",
        "STRICT_PARAMETERS",
        "MESSAGE_PARAMETER",
        "DISPLAY_INDENT",
        "LOG_LEVEL",
        "LOG_FILE",
        "REDACT_SENSITIVE",
    ):
        monkeypatch.delenv(f"SAML_REDIRECT_{name}", raising=False)
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture(autouse=True)
def restore_root_logging():
    """Remove handlers installed by configure_logging during a test."""
    root_logger = logging.getLogger()
    level = root_logger.level

    yield

    for handler in root_logger.handlers[:]:
        if isinstance(handler.formatter, SensitiveValueRedactingFormatter):
            root_logger.removeHandler(handler)
            handler.close()
    root_logger.setLevel(level)
