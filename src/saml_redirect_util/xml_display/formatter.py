"""XML pretty-printing and escaping for diagnostic output.

The beautifier is purely textual: it splits on ``<`` and indents by counting
opening and closing tags. It does not check well-formedness and is meant for
protocol XML the application already handles (log output, error pages).

Two escapers serve different trust levels:

- ``escape_for_display`` lays out trusted protocol XML inside HTML.
- ``html_entity_encode`` is for untrusted strings (e.g. a query value
  reflected into an error page) and encodes everything but ASCII letters
  and digits.
"""

import string
from enum import Enum
from typing import List, Optional

_ALPHANUMERIC = frozenset(string.ascii_letters + string.digits)


class FragmentKind(Enum):
    """Classification of a ``<``-delimited fragment."""

    SELF_CLOSING = "self_closing"
    CLOSING = "closing"
    OPENING = "opening"
    DECLARATION = "declaration"  # comments, DOCTYPE, processing instructions
    TEXT = "text"  # tag followed by character data


def classify_fragment(fragment: str) -> FragmentKind:
    """Classify a trimmed fragment starting with ``<``.

    Args:
        fragment: Fragment text, e.g. ``<saml:Issuer>`` or ``<b>text``

    Returns:
        FragmentKind of the fragment

    Example:
        >>> classify_fragment("<ds:Signature/>")
        <FragmentKind.SELF_CLOSING: 'self_closing'>
    """
    if fragment.startswith("</"):
        return FragmentKind.CLOSING
    if not fragment.endswith(">"):
        return FragmentKind.TEXT
    if fragment.startswith(("<!", "<?")):
        return FragmentKind.DECLARATION
    if fragment.endswith("/>"):
        return FragmentKind.SELF_CLOSING
    return FragmentKind.OPENING


def _split_lines(xml: str) -> List[str]:
    """Split XML into display lines.

    Text before the first ``<`` is dropped. A fragment carrying character data
    stays on the same line as the fragment that follows it, so
    ``<a>text</a>`` is one line.
    """
    lines: List[str] = []
    pending = ""

    for piece in xml.split("<")[1:]:
        fragment = "<" + piece.strip()
        pending += fragment
        if classify_fragment(fragment) is not FragmentKind.TEXT:
            lines.append(pending)
            pending = ""

    if pending:
        lines.append(pending)
    return lines


def beautify_xml(xml: Optional[str], indent: Optional[str] = "  ") -> Optional[str]:
    """Reformat XML with one element per line.

    Depth decreases before a line starting with ``</`` and increases after a
    line that opens an element (not a comment or processing instruction, and
    containing neither ``</`` nor ``/>``).

    Args:
        xml: XML text
        indent: Indent unit per level; None joins all fragments on one line

    Returns:
        Reformatted XML; None or empty input is returned unchanged

    Example:
        >>> print(beautify_xml("<a><b>x</b><c/></a>"), end="")
        <a>
          <b>x</b>
          <c/>
        </a>
    """
    if not xml:
        return xml

    lines = _split_lines(xml)

    if indent is None:
        return "".join(lines).strip()

    result: List[str] = []
    depth = 0
    for line in lines:
        if line.startswith("</"):
            depth = max(depth - 1, 0)

        result.append(f"{indent * depth}{line}\n")

        if (
            not line.startswith(("<!", "<?"))
            and "</" not in line
            and "/>" not in line
        ):
            depth += 1

    return "".join(result)


def escape_for_display(text: Optional[str]) -> Optional[str]:
    """Escape XML for layout inside an HTML page.

    Adjacent tags are put on separate lines, markup characters become
    entities and newlines become ``<br />``.

    Args:
        text: XML text from a trusted source

    Returns:
        HTML-safe text; None or empty input is returned unchanged

    Example:
        >>> escape_for_display("<a><b/></a>")
        '&lt;a&gt;<br />&lt;b/&gt;<br />&lt;/a&gt;'
    """
    if not text:
        return text

    text = text.replace("><", ">\n<")
    text = text.replace("&", "&amp;")
    text = text.replace("<", "&lt;")
    text = text.replace(">", "&gt;")
    return text.replace("\n", "<br />")


def beautify_and_escape(xml: Optional[str], indent: Optional[str] = "  ") -> Optional[str]:
    """Beautify XML and escape it for display in HTML."""
    return escape_for_display(beautify_xml(xml, indent))


def html_entity_encode(text: Optional[str]) -> str:
    """Encode every character except ASCII letters and digits.

    Each other character becomes a decimal numeric character reference.

    Args:
        text: Untrusted text

    Returns:
        Encoded text; None gives an empty string

    Example:
        >>> html_entity_encode("<a>")
        '&#60;a&#62;'
    """
    if text is None:
        return ""
    return "".join(c if c in _ALPHANUMERIC else f"&#{ord(c)};" for c in text)
