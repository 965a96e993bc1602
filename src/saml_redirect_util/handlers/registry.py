"""Protocol endpoint handler registry.

Handlers are built once at startup from an explicit mapping of factory keys
to factory callables. Configuration only ever names a factory key; there is
no class lookup by name at runtime.

Example configuration::

    "protocol": {
        "endpoints": {
            "SAMLAssertionConsumer": "redirect-signature",
            "SOAPDispatch": "soap-version"
        }
    }
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Protocol
from urllib.parse import unquote_plus

from ..binding.algorithms import algorithm_from_query
from ..binding.query_string import SAML_REQUEST, SIGNATURE, extract_parameter
from ..binding.verifier import RedirectSignatureVerifier
from ..config.schema import Config
from ..soap.version import detect_soap_version
from ..utils.exceptions import ConfigurationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BindingRequest:
    """Inbound request data handed to a handler.

    Attributes:
        query_string: Raw, still percent-encoded query string
        body: Request body text
        verification_key: Trusted public key of the expected sender
    """

    query_string: str = ""
    body: str = ""
    verification_key: Optional[Any] = None


@dataclass(frozen=True)
class HandlerResult:
    """Outcome of a handler.

    Attributes:
        accepted: Whether the request passed the handler's check
        detail: Short description of the outcome
    """

    accepted: bool
    detail: str


class BindingHandler(Protocol):
    """A protocol endpoint handler."""

    def handle(self, request: BindingRequest) -> HandlerResult:
        ...


HandlerFactory = Callable[[Config], BindingHandler]


class RedirectSignatureHandler:
    """Verify the signature of an inbound HTTP-Redirect request.

    The algorithm named by SigAlg is only accepted if it is on the configured
    allow-list. The message parameter is SAMLRequest when present, otherwise
    the configured default.
    """

    def __init__(self, config: Config) -> None:
        self.config = config
        self.verifier = RedirectSignatureVerifier(
            config.verification.allowed_algorithms,
            strict=config.verification.reject_duplicate_parameters,
        )

    def handle(self, request: BindingRequest) -> HandlerResult:
        if request.verification_key is None:
            raise ConfigurationError(
                "No verification key supplied for HTTP-Redirect signature check"
            )

        query = request.query_string
        strict = self.config.verification.reject_duplicate_parameters

        if extract_parameter(SAML_REQUEST, query, strict) is not None:
            message_param = SAML_REQUEST
        else:
            message_param = self.config.verification.message_parameter

        algorithm = algorithm_from_query(query, self.verifier.allowed_algorithms)

        raw_signature = extract_parameter(SIGNATURE, query, strict)
        signature = unquote_plus(raw_signature) if raw_signature is not None else None

        verified = self.verifier.verify_from_query(
            signature, query, message_param, request.verification_key, algorithm
        )
        detail = "signature valid" if verified else "signature mismatch"
        return HandlerResult(accepted=verified, detail=f"{message_param}: {detail}")


class SoapVersionHandler:
    """Report the SOAP version of a request body for dispatch."""

    def __init__(self, config: Config) -> None:
        self.config = config

    def handle(self, request: BindingRequest) -> HandlerResult:
        version = detect_soap_version(request.body)
        if version is None:
            return HandlerResult(accepted=False, detail="no SOAP envelope detected")
        return HandlerResult(accepted=True, detail=version.name)


class HandlerRegistry:
    """Explicit mapping of factory keys to handler factories.

    Example:
        >>> registry = default_registry()
        >>> handlers = registry.build_handlers(config)
        >>> handlers["SAMLAssertionConsumer"].handle(request)
    """

    def __init__(self) -> None:
        self._factories: Dict[str, HandlerFactory] = {}

    def register(self, key: str, factory: HandlerFactory) -> None:
        """Register a factory under a key.

        Raises:
            ConfigurationError: If the key is already registered
        """
        if key in self._factories:
            raise ConfigurationError(f"Handler factory already registered: {key}")
        self._factories[key] = factory
        logger.debug(f"Registered handler factory: {key}")

    def keys(self) -> List[str]:
        return sorted(self._factories)

    def create(self, key: str, config: Config) -> BindingHandler:
        """Create a handler from a registered factory.

        Raises:
            ConfigurationError: If no factory is registered under ``key``
        """
        factory = self._factories.get(key)
        if factory is None:
            raise ConfigurationError(
                f"Unknown handler factory: {key}. "
                f"Must be one of: {', '.join(self.keys())}"
            )
        return factory(config)

    def build_handlers(self, config: Config) -> Dict[str, BindingHandler]:
        """Build one handler per configured protocol endpoint.

        Args:
            config: Application configuration

        Returns:
            Endpoint name -> handler instance

        Raises:
            ConfigurationError: If an endpoint names an unknown factory
        """
        handlers: Dict[str, BindingHandler] = {}
        for endpoint, key in config.protocol.endpoints.items():
            logger.debug(f"Building handler for endpoint {endpoint}: {key}")
            handlers[endpoint] = self.create(key, config)
        logger.info(f"Built {len(handlers)} protocol endpoint handler(s)")
        return handlers


def default_registry() -> HandlerRegistry:
    """Return a registry with the built-in handler factories."""
    registry = HandlerRegistry()
    registry.register("redirect-signature", RedirectSignatureHandler)
    registry.register("soap-version", SoapVersionHandler)
    return registry
