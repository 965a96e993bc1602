"""HTTP-Redirect CLI commands for canonicalization, verification and signing.

This module provides CLI commands including:
- redirect canonicalize: Show the exact content a redirect signature covers
- redirect verify: Verify a redirect query string against a certificate
- redirect sign: Produce a signed redirect query string
"""

import logging
from pathlib import Path
from typing import Optional
from urllib.parse import unquote_plus

import click

from saml_redirect_util.binding import (
    SAML_REQUEST,
    SIGNATURE,
    RedirectSignatureVerifier,
    algorithm_from_query,
    build_signed_query_string,
    canonicalize_query_string,
    extract_parameter,
    load_signing_key,
    load_verification_key,
    resolve_algorithm,
)
from saml_redirect_util.binding.query_string import MESSAGE_PARAMETERS
from saml_redirect_util.config import Config
from saml_redirect_util.utils.exceptions import SAMLRedirectError, create_error_info

logger = logging.getLogger(__name__)


def _get_config(ctx: click.Context) -> Config:
    obj = ctx.find_root().obj or {}
    return obj.get("config") or Config()


def _fail(error: SAMLRedirectError) -> None:
    info = create_error_info(error)
    click.echo(
        click.style("✗", fg="red", bold=True) + f" {info.error_type}: {info.message}",
        err=True,
    )
    click.echo(f"Fix: {info.remediation}", err=True)
    logger.error(f"{info.category.value}: {info.error_type}: {info.message}")
    raise click.exceptions.Exit(1)


@click.group(name="redirect")
def redirect_group() -> None:
    """HTTP-Redirect binding signature commands."""
    pass


@redirect_group.command(name="canonicalize")
@click.argument("query")
@click.option(
    "--param",
    type=click.Choice(MESSAGE_PARAMETERS),
    default=None,
    help="Message parameter (default: SAMLRequest if present, else config)",
)
@click.option("--strict", is_flag=True, help="Reject duplicate signed parameters")
@click.pass_context
def canonicalize(
    ctx: click.Context, query: str, param: Optional[str], strict: bool
) -> None:
    """Print the exact content covered by the redirect signature.

    QUERY is the raw, still percent-encoded URL or query string.
    """
    config = _get_config(ctx)
    strict = strict or config.verification.reject_duplicate_parameters

    try:
        message_param = param or _message_param(query, config, strict)
        click.echo(canonicalize_query_string(query, message_param, strict))
    except SAMLRedirectError as e:
        _fail(e)


@redirect_group.command(name="verify")
@click.argument("query")
@click.option(
    "--cert",
    type=click.Path(exists=True, path_type=Path),
    required=True,
    help="Certificate or public key of the expected sender (PEM/DER)",
)
@click.option(
    "--param",
    type=click.Choice(MESSAGE_PARAMETERS),
    default=None,
    help="Message parameter (default: SAMLRequest if present, else config)",
)
@click.option(
    "--algorithm",
    type=str,
    default=None,
    help="Expected algorithm (default: the query's SigAlg, if allow-listed)",
)
@click.option(
    "--signature",
    type=str,
    default=None,
    help="Base64 signature (default: the query's Signature parameter)",
)
@click.option("--strict", is_flag=True, help="Reject duplicate signed parameters")
@click.pass_context
def verify(
    ctx: click.Context,
    query: str,
    cert: Path,
    param: Optional[str],
    algorithm: Optional[str],
    signature: Optional[str],
    strict: bool,
) -> None:
    """Verify the signature of an HTTP-Redirect query string.

    Exits with 0 when the signature is valid and 1 otherwise.

    Examples:

        saml-redirect-util redirect verify "$QUERY" --cert certs/idp.pem

        saml-redirect-util redirect verify "$QUERY" --cert certs/idp.pem \\
            --algorithm rsa-sha256
    """
    config = _get_config(ctx)
    allowed = config.verification.allowed_algorithms
    strict = strict or config.verification.reject_duplicate_parameters

    try:
        message_param = param or _message_param(query, config, strict)
        key = load_verification_key(cert)

        if algorithm:
            resolved = resolve_algorithm(algorithm, allowed)
        else:
            resolved = algorithm_from_query(query, allowed)

        if signature is None:
            raw_signature = extract_parameter(SIGNATURE, query, strict)
            if raw_signature is not None:
                signature = unquote_plus(raw_signature)

        verifier = RedirectSignatureVerifier(allowed, strict=strict)
        verified = verifier.verify_from_query(
            signature, query, message_param, key, resolved
        )
    except SAMLRedirectError as e:
        _fail(e)
        return

    click.echo(f"Algorithm: {resolved.uri}")
    click.echo(f"Signed content: {canonicalize_query_string(query, message_param, strict)}")

    if verified:
        click.echo(click.style("✓", fg="green", bold=True) + " Signature valid")
    else:
        click.echo(click.style("✗", fg="red", bold=True) + " Signature invalid", err=True)
        raise click.exceptions.Exit(1)


@redirect_group.command(name="sign")
@click.option(
    "--key",
    type=click.Path(exists=True, path_type=Path),
    required=True,
    help="Private key file (PEM/DER)",
)
@click.option("--key-password", type=str, default=None, help="Private key password")
@click.option("--algorithm", type=str, required=True, help="Signature algorithm")
@click.option(
    "--param",
    type=click.Choice(MESSAGE_PARAMETERS),
    default=SAML_REQUEST,
    show_default=True,
    help="Message parameter",
)
@click.option("--message", type=str, required=True, help="Encoded SAML message")
@click.option("--relay-state", type=str, default=None, help="RelayState value")
def sign(
    key: Path,
    key_password: Optional[str],
    algorithm: str,
    param: str,
    message: str,
    relay_state: Optional[str],
) -> None:
    """Produce a signed HTTP-Redirect query string."""
    try:
        private_key = load_signing_key(
            key, key_password.encode("utf-8") if key_password else None
        )
        query = build_signed_query_string(
            param, message, private_key, algorithm, relay_state=relay_state
        )
    except SAMLRedirectError as e:
        _fail(e)
        return

    click.echo(query)


def _message_param(query: str, config: Config, strict: bool) -> str:
    if extract_parameter(SAML_REQUEST, query, strict) is not None:
        return SAML_REQUEST
    return config.verification.message_parameter
