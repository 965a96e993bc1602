"""XML display CLI commands.

This module provides CLI commands including:
- xml beautify: Indent an XML document for display
- xml soap-version: Report the SOAP version of an envelope
- xml encode: Numeric HTML entity encoding of a text value
"""

import logging
from pathlib import Path
from typing import Optional

import click
from lxml import etree

from saml_redirect_util.config import Config
from saml_redirect_util.soap import detect_soap_version
from saml_redirect_util.xml_display import (
    beautify_and_escape,
    beautify_xml,
    html_entity_encode,
)

logger = logging.getLogger(__name__)


def _get_config(ctx: click.Context) -> Config:
    obj = ctx.find_root().obj or {}
    return obj.get("config") or Config()


@click.group(name="xml")
def xml_group() -> None:
    """XML formatting and SOAP inspection commands."""
    pass


@xml_group.command(name="beautify")
@click.argument("xml_file", type=click.Path(exists=True, path_type=Path))
@click.option(
    "--indent",
    type=click.IntRange(min=0),
    default=None,
    help="Spaces per nesting level (default: from config)",
)
@click.option("--html", "as_html", is_flag=True, help="Escape output for HTML display")
@click.option("--check", is_flag=True, help="Require the document to be well-formed")
@click.pass_context
def beautify(
    ctx: click.Context,
    xml_file: Path,
    indent: Optional[int],
    as_html: bool,
    check: bool,
) -> None:
    """Indent XML_FILE one level per element for display.

    The formatter is lexical and never fails on malformed input. Use --check
    to reject documents that are not well-formed XML.
    """
    display = _get_config(ctx).display
    indent_unit = " " * indent if indent is not None else display.indent
    as_html = as_html or display.html

    xml_text = xml_file.read_text(encoding="utf-8")

    if check:
        try:
            etree.fromstring(xml_text.encode("utf-8"))
        except etree.XMLSyntaxError as e:
            click.echo(
                click.style("✗", fg="red", bold=True) + f" Malformed XML: {e}",
                err=True,
            )
            logger.error(f"Malformed XML in {xml_file}: {e}")
            raise click.exceptions.Exit(1)

    if as_html:
        click.echo(beautify_and_escape(xml_text, indent_unit), nl=False)
    else:
        click.echo(beautify_xml(xml_text, indent_unit), nl=False)


@xml_group.command(name="soap-version")
@click.argument("xml_file", type=click.Path(exists=True, path_type=Path))
def soap_version(xml_file: Path) -> None:
    """Report the SOAP version of the envelope in XML_FILE.

    Exits with 1 when no SOAP envelope is found.
    """
    version = detect_soap_version(xml_file.read_text(encoding="utf-8"))

    if version is None:
        click.echo(click.style("✗", fg="red", bold=True) + " No SOAP envelope detected", err=True)
        raise click.exceptions.Exit(1)

    click.echo(click.style("✓", fg="green", bold=True) + f" {version.label}")
    click.echo(f"Namespace: {version.namespace}")


@xml_group.command(name="encode")
@click.argument("text")
def encode(text: str) -> None:
    """Encode TEXT with numeric HTML entities."""
    click.echo(html_entity_encode(text))
