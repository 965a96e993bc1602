"""SAML Redirect Utility.

Signature verification for the SAML 2.0 HTTP-Redirect binding, plus SOAP
envelope version sniffing and XML display helpers for diagnostics.
"""

__version__ = "0.1.0"

from saml_redirect_util.binding import (
    RedirectSignatureVerifier,
    SignatureAlgorithm,
    canonicalize_query_string,
    extract_parameter,
    verify_query_signature,
    verify_signature,
)
from saml_redirect_util.soap import SoapVersion, detect_soap_version
from saml_redirect_util.xml_display import (
    beautify_xml,
    escape_for_display,
    html_entity_encode,
)

__all__ = [
    "__version__",
    "extract_parameter",
    "canonicalize_query_string",
    "verify_signature",
    "verify_query_signature",
    "RedirectSignatureVerifier",
    "SignatureAlgorithm",
    "SoapVersion",
    "detect_soap_version",
    "beautify_xml",
    "escape_for_display",
    "html_entity_encode",
]
