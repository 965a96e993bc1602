"""Loading of verification and signing keys from files.

The verification core only ever receives key objects; this module is how the
CLI and the handler registry turn configured file paths into those objects.
Trust decisions about the certificate are left to the caller.
"""

import logging
from pathlib import Path
from typing import Any, Optional

from cryptography import x509
from cryptography.hazmat.primitives import serialization

from ..utils.exceptions import KeyLoadError

logger = logging.getLogger(__name__)


def _read(path: Path) -> bytes:
    if not path.exists():
        raise KeyLoadError(
            f"Key file not found: {path}. Ensure the file exists and path is correct."
        )
    try:
        return path.read_bytes()
    except OSError as e:
        raise KeyLoadError(f"Failed to read key file {path}: {e}") from e


def load_verification_key(path: Path) -> Any:
    """Load a public key from a certificate or public key file.

    PEM and DER are accepted for both X.509 certificates and
    SubjectPublicKeyInfo public keys.

    Args:
        path: Path to the certificate or public key file

    Returns:
        Public key object

    Raises:
        KeyLoadError: If the file is missing or holds no usable key

    Example:
        >>> key = load_verification_key(Path("certs/idp.pem"))
    """
    data = _read(path)
    is_pem = b"-----BEGIN" in data

    try:
        if is_pem and b"CERTIFICATE" in data:
            cert = x509.load_pem_x509_certificate(data)
            logger.info(f"Loaded verification certificate: {cert.subject.rfc4514_string()}")
            return cert.public_key()
        if is_pem:
            return serialization.load_pem_public_key(data)
    except ValueError as e:
        raise KeyLoadError(f"Failed to load PEM key material from {path}: {e}") from e

    # DER: try certificate first, then bare public key
    try:
        cert = x509.load_der_x509_certificate(data)
        logger.info(f"Loaded verification certificate: {cert.subject.rfc4514_string()}")
        return cert.public_key()
    except ValueError:
        pass

    try:
        return serialization.load_der_public_key(data)
    except ValueError as e:
        raise KeyLoadError(
            f"Failed to load key material from {path}: {e}. "
            f"Ensure file is a PEM or DER certificate or public key."
        ) from e


def load_signing_key(path: Path, password: Optional[bytes] = None) -> Any:
    """Load a private key from a PEM or DER file.

    Args:
        path: Path to the private key file
        password: Optional password for an encrypted key

    Returns:
        Private key object

    Raises:
        KeyLoadError: If the file is missing, encrypted without password,
            or not a private key
    """
    data = _read(path)

    try:
        if b"-----BEGIN" in data:
            key = serialization.load_pem_private_key(data, password=password)
        else:
            key = serialization.load_der_private_key(data, password=password)
    except (TypeError, ValueError) as e:
        raise KeyLoadError(
            f"Failed to load private key from {path}: {e}. "
            f"Check the password and that the file is a PEM or DER private key."
        ) from e

    # Never log key contents
    logger.info(f"Loaded signing key from: {path.name}")
    return key
