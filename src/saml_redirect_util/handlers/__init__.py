"""Protocol endpoint handlers and their registry."""

from saml_redirect_util.handlers.registry import (
    BindingHandler,
    BindingRequest,
    HandlerRegistry,
    HandlerResult,
    RedirectSignatureHandler,
    SoapVersionHandler,
    default_registry,
)

__all__ = [
    "BindingHandler",
    "BindingRequest",
    "HandlerResult",
    "HandlerRegistry",
    "RedirectSignatureHandler",
    "SoapVersionHandler",
    "default_registry",
]
