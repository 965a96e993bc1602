"""Main CLI entry point for the SAML Redirect Utility.

This module provides the main Click command group for the saml-redirect-util CLI.
"""

from pathlib import Path
from typing import Optional

import click

from saml_redirect_util import __version__
from saml_redirect_util.cli.redirect_commands import redirect_group
from saml_redirect_util.cli.xml_commands import xml_group
from saml_redirect_util.config import load_config
from saml_redirect_util.logging_audit import configure_logging
from saml_redirect_util.utils.exceptions import ConfigurationError


@click.group()
@click.version_option(version=__version__, prog_name="saml-redirect-util")
@click.option(
    "--config",
    type=click.Path(exists=True, path_type=Path),
    default=None,
    help="Path to configuration file (default: ./config/config.json)",
)
@click.option("--verbose", is_flag=True, help="Enable verbose logging (DEBUG level)")
@click.option(
    "--log-file",
    type=click.Path(path_type=Path),
    default=None,
    help="Path to log file (overrides config file)",
)
@click.option(
    "--redact-sensitive",
    is_flag=True,
    help="Redact SAML messages, RelayState and signatures from logs",
)
@click.pass_context
def cli(
    ctx: click.Context,
    config: Optional[Path],
    verbose: bool,
    log_file: Optional[Path],
    redact_sensitive: bool,
) -> None:
    """SAML Redirect Utility - HTTP-Redirect signature verification.

    Verifies signed SAML HTTP-Redirect query strings and formats protocol
    XML for diagnostics.

    Common usage:

        # Show the content a redirect signature covers
        saml-redirect-util redirect canonicalize "https://sp/acs?SAMLResponse=...&SigAlg=...&Signature=..."

        # Verify a redirect against the IdP certificate
        saml-redirect-util redirect verify "SAMLResponse=...&SigAlg=...&Signature=..." --cert idp.pem

        # Pretty-print a SOAP envelope
        saml-redirect-util xml beautify envelope.xml

    Use --help with any command for more information.
    """
    ctx.ensure_object(dict)

    try:
        config_obj = load_config(config)
    except ConfigurationError as e:
        click.echo(f"Error loading configuration: {e}", err=True)
        ctx.exit(1)
        return

    ctx.obj["config"] = config_obj
    ctx.obj["verbose"] = verbose

    # Precedence: CLI flags > config file > defaults
    log_level = "DEBUG" if verbose else config_obj.logging.level
    log_file_path = log_file if log_file else config_obj.logging.log_file
    redact = redact_sensitive or config_obj.logging.redact_sensitive

    configure_logging(level=log_level, log_file=log_file_path, redact_sensitive=redact)


cli.add_command(redirect_group)
cli.add_command(xml_group)


@cli.group()
def config() -> None:
    """Configuration management commands."""
    pass


@config.command()
@click.argument("config_file", type=click.Path(exists=True, path_type=Path))
def validate(config_file: Path) -> None:
    """Validate a configuration file.

    Example:
        saml-redirect-util config validate config/config.json
    """
    try:
        config_obj = load_config(config_file)
    except ConfigurationError as e:
        click.echo(click.style("✗", fg="red", bold=True) + " Configuration validation failed")
        click.echo(f"\n{e}", err=True)
        raise click.exceptions.Exit(1)

    click.echo(click.style("✓", fg="green", bold=True) + " Configuration is valid")
    click.echo(f"\nConfiguration file: {config_file}")

    click.echo("\nVerification:")
    for uri in config_obj.verification.allowed_algorithms:
        click.echo(f"  Algorithm:   {uri}")
    click.echo(f"  Strict:      {config_obj.verification.reject_duplicate_parameters}")
    click.echo(f"  Message:     {config_obj.verification.message_parameter}")

    click.echo("\nEndpoints:")
    for endpoint, key in config_obj.protocol.endpoints.items():
        click.echo(f"  {endpoint}: {key}")

    click.echo("\nLogging:")
    click.echo(f"  Level:       {config_obj.logging.level}")
    click.echo(f"  Log file:    {config_obj.logging.log_file}")
    click.echo(f"  Redact:      {config_obj.logging.redact_sensitive}")


cli.add_command(config)


@cli.command()
def version() -> None:
    """Display version information."""
    click.echo(f"saml-redirect-util version {__version__}")


if __name__ == "__main__":
    cli()
