"""Unit tests for XML display formatting and escaping."""

import pytest

from saml_redirect_util.xml_display.formatter import (
    FragmentKind,
    beautify_and_escape,
    beautify_xml,
    classify_fragment,
    escape_for_display,
    html_entity_encode,
)

AUTHN_REQUEST = (
    '<?xml version="1.0" encoding="UTF-8"?>'
    '<samlp:AuthnRequest xmlns:samlp="urn:oasis:names:tc:SAML:2.0:protocol" ID="_abc">'
    "<saml:Issuer>https://sp.example.com</saml:Issuer>"
    '<samlp:NameIDPolicy AllowCreate="true"/>'
    "</samlp:AuthnRequest>"
)


class TestClassifyFragment:
    """Test fragment classification."""

    @pytest.mark.parametrize(
        "fragment, kind",
        [
            ("<ds:Signature/>", FragmentKind.SELF_CLOSING),
            ("</saml:Issuer>", FragmentKind.CLOSING),
            ("<saml:Issuer>", FragmentKind.OPENING),
            ("<!-- note -->", FragmentKind.DECLARATION),
            ('<?xml version="1.0"?>', FragmentKind.DECLARATION),
            ("<saml:Issuer>https://idp", FragmentKind.TEXT),
        ],
    )
    def test_kinds(self, fragment, kind):
        assert classify_fragment(fragment) is kind


class TestBeautifyXml:
    """Test indentation."""

    def test_nested_elements(self):
        assert beautify_xml("<a><b>x</b><c/></a>") == "<a>\n  <b>x</b>\n  <c/>\n</a>\n"

    def test_saml_request(self):
        expected = (
            '<?xml version="1.0" encoding="UTF-8"?>\n'
            '<samlp:AuthnRequest xmlns:samlp="urn:oasis:names:tc:SAML:2.0:protocol" ID="_abc">\n'
            "  <saml:Issuer>https://sp.example.com</saml:Issuer>\n"
            '  <samlp:NameIDPolicy AllowCreate="true"/>\n'
            "</samlp:AuthnRequest>\n"
        )
        assert beautify_xml(AUTHN_REQUEST) == expected

    def test_custom_indent(self):
        assert beautify_xml("<a><b/></a>", indent="\t") == "<a>\n\t<b/>\n</a>\n"

    def test_existing_whitespace_is_normalized(self):
        assert beautify_xml("<a>\n      <b/>\n</a>") == "<a>\n  <b/>\n</a>\n"

    def test_text_before_first_tag_dropped(self):
        assert beautify_xml("junk<a/>") == "<a/>\n"

    def test_no_indent_joins_on_one_line(self):
        assert beautify_xml("<a>\n  <b/>\n</a>\n", indent=None) == "<a><b/></a>"

    def test_unbalanced_closing_tags_never_go_negative(self):
        assert beautify_xml("</a></b><c/>") == "</a>\n</b>\n<c/>\n"

    def test_comment_does_not_indent(self):
        assert beautify_xml("<!-- c --><a/>") == "<!-- c -->\n<a/>\n"

    def test_idempotent_on_tag_fragments(self):
        once = beautify_xml(AUTHN_REQUEST)
        assert beautify_xml(once) == once

    @pytest.mark.parametrize("value", [None, ""])
    def test_empty_input_unchanged(self, value):
        assert beautify_xml(value) == value


class TestEscapeForDisplay:
    """Test HTML display escaping."""

    def test_tags_escaped_and_split(self):
        assert escape_for_display("<a><b/></a>") == (
            "&lt;a&gt;<br />&lt;b/&gt;<br />&lt;/a&gt;"
        )

    def test_no_raw_markup_left(self):
        result = escape_for_display("<a>")
        assert "<a" not in result
        assert ">" not in result.replace("<br />", "")

    def test_ampersand_escaped(self):
        assert escape_for_display("<a>x &amp; y</a>") == "&lt;a&gt;x &amp;amp; y&lt;/a&gt;"

    def test_newlines_become_breaks(self):
        assert escape_for_display("line1\nline2") == "line1<br />line2"

    @pytest.mark.parametrize("value", [None, ""])
    def test_empty_input_unchanged(self, value):
        assert escape_for_display(value) == value

    def test_beautify_and_escape(self):
        assert beautify_and_escape("<a><b/></a>") == (
            "&lt;a&gt;<br />  &lt;b/&gt;<br />&lt;/a&gt;<br />"
        )


class TestHtmlEntityEncode:
    """Test numeric entity encoding."""

    def test_markup_encoded(self):
        assert html_entity_encode("<a>") == "&#60;a&#62;"

    def test_alphanumerics_unchanged(self):
        assert html_entity_encode("abcXYZ019") == "abcXYZ019"

    def test_space_and_punctuation_encoded(self):
        assert html_entity_encode("a b-c") == "a&#32;b&#45;c"

    def test_non_ascii_encoded_by_code_point(self):
        assert html_entity_encode("é😀") == "&#233;&#128512;"

    def test_no_literal_non_alphanumerics(self):
        result = html_entity_encode("<script>alert('x')</script>")
        stripped = result.replace("&#", "").replace(";", "")
        assert stripped.isalnum()

    def test_none_gives_empty_string(self):
        assert html_entity_encode(None) == ""
