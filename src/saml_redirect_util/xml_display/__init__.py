"""XML display helpers for diagnostics."""

from saml_redirect_util.xml_display.formatter import (
    FragmentKind,
    beautify_and_escape,
    beautify_xml,
    classify_fragment,
    escape_for_display,
    html_entity_encode,
)

__all__ = [
    "FragmentKind",
    "classify_fragment",
    "beautify_xml",
    "escape_for_display",
    "beautify_and_escape",
    "html_entity_encode",
]
