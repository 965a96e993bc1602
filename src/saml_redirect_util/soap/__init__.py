"""SOAP envelope helpers."""

from saml_redirect_util.soap.version import (
    SOAP11_NS,
    SOAP12_NS,
    SoapVersion,
    detect_soap_version,
)

__all__ = [
    "SOAP11_NS",
    "SOAP12_NS",
    "SoapVersion",
    "detect_soap_version",
]
