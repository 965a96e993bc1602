"""Unit tests for CLI commands.

This module tests the command-line interface for saml-redirect-util including
main commands, redirect signature operations, XML display and option handling.
"""

import json

import pytest
from click.testing import CliRunner

from saml_redirect_util.binding.signer import build_signed_query_string
from saml_redirect_util.cli.main import cli
from saml_redirect_util.soap.version import SOAP11_NS


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def base_args(isolated_env):
    """Global options that keep log output inside the test directory."""
    return ["--log-file", str(isolated_env / "logs" / "test.log")]


class TestMainCLI:
    """Test cases for main CLI entry point."""

    def test_cli_help(self, runner):
        result = runner.invoke(cli, ["--help"])

        assert result.exit_code == 0
        assert "SAML Redirect Utility" in result.output
        assert "--verbose" in result.output
        assert "--redact-sensitive" in result.output
        assert "redirect" in result.output
        assert "xml" in result.output

    def test_cli_version(self, runner):
        result = runner.invoke(cli, ["--version"])

        assert result.exit_code == 0
        assert "saml-redirect-util" in result.output
        assert "version" in result.output.lower()

    def test_cli_version_command(self, runner, base_args):
        result = runner.invoke(cli, base_args + ["version"])

        assert result.exit_code == 0
        assert "saml-redirect-util version 0.1.0" in result.output

    def test_cli_writes_log_file(self, runner, base_args, isolated_env):
        result = runner.invoke(cli, base_args + ["--verbose", "version"])

        assert result.exit_code == 0
        assert (isolated_env / "logs" / "test.log").exists()

    def test_invalid_config_file(self, runner, base_args, isolated_env):
        config_path = isolated_env / "bad.json"
        config_path.write_text("{ not json")

        result = runner.invoke(cli, ["--config", str(config_path)] + base_args + ["version"])

        assert result.exit_code == 1
        assert "Error loading configuration" in result.output


class TestRedirectCanonicalize:
    """Test redirect canonicalize command."""

    def test_canonicalize(self, runner, base_args):
        query = "https://sp/acs?Signature=s&SigAlg=alg&RelayState=rs&SAMLRequest=m"

        result = runner.invoke(cli, base_args + ["redirect", "canonicalize", query])

        assert result.exit_code == 0
        assert result.output.strip() == "SAMLRequest=m&RelayState=rs&SigAlg=alg"

    def test_canonicalize_response_from_config_default(self, runner, base_args):
        result = runner.invoke(
            cli, base_args + ["redirect", "canonicalize", "SAMLResponse=m&SigAlg=alg"]
        )

        assert result.exit_code == 0
        assert result.output.strip() == "SAMLResponse=m&SigAlg=alg"

    def test_canonicalize_missing_sig_alg(self, runner, base_args):
        result = runner.invoke(
            cli, base_args + ["redirect", "canonicalize", "SAMLRequest=m"]
        )

        assert result.exit_code == 1
        assert "MissingRequiredParameterError" in result.output
        assert "Fix:" in result.output

    def test_canonicalize_strict_duplicates(self, runner, base_args):
        query = "SAMLRequest=a&SAMLRequest=b&SigAlg=alg"

        lenient = runner.invoke(cli, base_args + ["redirect", "canonicalize", query])
        strict = runner.invoke(
            cli, base_args + ["redirect", "canonicalize", query, "--strict"]
        )

        assert lenient.exit_code == 0
        assert strict.exit_code == 1
        assert "MalformedInputError" in strict.output

    def test_canonicalize_rejects_unknown_param(self, runner, base_args):
        result = runner.invoke(
            cli,
            base_args + ["redirect", "canonicalize", "a=b", "--param", "SAMLArtifact"],
        )

        assert result.exit_code == 2


class TestRedirectVerify:
    """Test redirect verify command."""

    def test_valid_signature(self, runner, base_args, rsa_private_key, rsa_cert_pem):
        query = build_signed_query_string(
            "SAMLRequest", "fZJNT8Mw", rsa_private_key, "rsa-sha256", relay_state="abc"
        )

        result = runner.invoke(
            cli, base_args + ["redirect", "verify", query, "--cert", str(rsa_cert_pem)]
        )

        assert result.exit_code == 0
        assert "✓" in result.output
        assert "Signature valid" in result.output
        assert "Algorithm: http://www.w3.org/2001/04/xmldsig-more#rsa-sha256" in result.output

    def test_tampered_query(self, runner, base_args, rsa_private_key, rsa_cert_pem):
        query = build_signed_query_string(
            "SAMLRequest", "fZJNT8Mw", rsa_private_key, "rsa-sha256", relay_state="abc"
        )
        tampered = query.replace("RelayState=abc", "RelayState=evil")

        result = runner.invoke(
            cli, base_args + ["redirect", "verify", tampered, "--cert", str(rsa_cert_pem)]
        )

        assert result.exit_code == 1
        assert "Signature invalid" in result.output

    def test_algorithm_not_allowed(self, runner, base_args, rsa_private_key, rsa_cert_pem):
        query = build_signed_query_string("SAMLRequest", "m", rsa_private_key, "rsa-sha224")

        result = runner.invoke(
            cli, base_args + ["redirect", "verify", query, "--cert", str(rsa_cert_pem)]
        )

        assert result.exit_code == 1
        assert "UnsupportedAlgorithmError" in result.output

    def test_explicit_algorithm_and_signature(
        self, runner, base_args, rsa_private_key, rsa_cert_pem
    ):
        query = build_signed_query_string("SAMLResponse", "m", rsa_private_key, "rsa-sha256")
        unsigned, signature = query.rsplit("&Signature=", 1)

        result = runner.invoke(
            cli,
            base_args
            + [
                "redirect", "verify", unsigned,
                "--cert", str(rsa_cert_pem),
                "--algorithm", "rsa-sha256",
                "--signature", signature.replace("%2B", "+").replace("%2F", "/").replace("%3D", "="),
                "--param", "SAMLResponse",
            ],
        )

        assert result.exit_code == 0
        assert "Signature valid" in result.output

    def test_missing_signature(self, runner, base_args, rsa_private_key, rsa_cert_pem):
        query = build_signed_query_string("SAMLRequest", "m", rsa_private_key, "rsa-sha256")
        unsigned = query.rsplit("&Signature=", 1)[0]

        result = runner.invoke(
            cli, base_args + ["redirect", "verify", unsigned, "--cert", str(rsa_cert_pem)]
        )

        assert result.exit_code == 1
        assert "Signature" in result.output
        assert "MissingRequiredParameterError" in result.output

    def test_missing_cert_option(self, runner, base_args):
        result = runner.invoke(cli, base_args + ["redirect", "verify", "SAMLRequest=m"])

        assert result.exit_code == 2

    def test_config_allow_list_applies(
        self, runner, base_args, isolated_env, rsa_private_key, rsa_cert_pem
    ):
        config_path = isolated_env / "config.json"
        config_path.write_text(
            json.dumps({"verification": {"allowed_algorithms": ["rsa-sha512"]}})
        )
        query = build_signed_query_string("SAMLRequest", "m", rsa_private_key, "rsa-sha256")

        result = runner.invoke(
            cli,
            ["--config", str(config_path)]
            + base_args
            + ["redirect", "verify", query, "--cert", str(rsa_cert_pem)],
        )

        assert result.exit_code == 1
        assert "UnsupportedAlgorithmError" in result.output


class TestRedirectSign:
    """Test redirect sign command."""

    def test_sign_then_verify(self, runner, base_args, rsa_key_pem, rsa_cert_pem):
        sign_result = runner.invoke(
            cli,
            base_args
            + [
                "redirect", "sign",
                "--key", str(rsa_key_pem),
                "--algorithm", "rsa-sha256",
                "--message", "fZJNT8Mw+x=",
                "--relay-state", "state",
            ],
        )

        assert sign_result.exit_code == 0
        query = sign_result.output.strip().splitlines()[-1]
        assert query.startswith("SAMLRequest=fZJNT8Mw%2Bx%3D&RelayState=state&SigAlg=")

        verify_result = runner.invoke(
            cli, base_args + ["redirect", "verify", query, "--cert", str(rsa_cert_pem)]
        )
        assert verify_result.exit_code == 0

    def test_sign_wrong_key_family(self, runner, base_args, ec_key_pem):
        result = runner.invoke(
            cli,
            base_args
            + [
                "redirect", "sign",
                "--key", str(ec_key_pem),
                "--algorithm", "rsa-sha256",
                "--message", "m",
            ],
        )

        assert result.exit_code == 1
        assert "InvalidKeyError" in result.output


class TestXmlCommands:
    """Test xml command group."""

    def test_beautify(self, runner, base_args, isolated_env):
        xml_file = isolated_env / "doc.xml"
        xml_file.write_text("<a><b>x</b><c/></a>")

        result = runner.invoke(cli, base_args + ["xml", "beautify", str(xml_file)])

        assert result.exit_code == 0
        assert result.output == "<a>\n  <b>x</b>\n  <c/>\n</a>\n"

    def test_beautify_indent_and_html(self, runner, base_args, isolated_env):
        xml_file = isolated_env / "doc.xml"
        xml_file.write_text("<a><b/></a>")

        result = runner.invoke(
            cli, base_args + ["xml", "beautify", str(xml_file), "--indent", "4", "--html"]
        )

        assert result.exit_code == 0
        assert result.output == "&lt;a&gt;<br />    &lt;b/&gt;<br />&lt;/a&gt;<br />"

    def test_beautify_check_rejects_malformed(self, runner, base_args, isolated_env):
        xml_file = isolated_env / "doc.xml"
        xml_file.write_text("<a><b></a>")

        unchecked = runner.invoke(cli, base_args + ["xml", "beautify", str(xml_file)])
        checked = runner.invoke(cli, base_args + ["xml", "beautify", str(xml_file), "--check"])

        assert unchecked.exit_code == 0
        assert checked.exit_code == 1
        assert "Malformed XML" in checked.output

    def test_soap_version(self, runner, base_args, isolated_env):
        xml_file = isolated_env / "envelope.xml"
        xml_file.write_text(f'<s:Envelope xmlns:s="{SOAP11_NS}"><s:Body/></s:Envelope>')

        result = runner.invoke(cli, base_args + ["xml", "soap-version", str(xml_file)])

        assert result.exit_code == 0
        assert "SOAP 1.1" in result.output
        assert SOAP11_NS in result.output

    def test_soap_version_not_found(self, runner, base_args, isolated_env):
        xml_file = isolated_env / "doc.xml"
        xml_file.write_text("<a/>")

        result = runner.invoke(cli, base_args + ["xml", "soap-version", str(xml_file)])

        assert result.exit_code == 1
        assert "No SOAP envelope detected" in result.output

    def test_encode(self, runner, base_args):
        result = runner.invoke(cli, base_args + ["xml", "encode", "<a b>"])

        assert result.exit_code == 0
        assert result.output.strip() == "&#60;a&#32;b&#62;"


class TestConfigValidate:
    """Test config validate command."""

    def test_valid_config(self, runner, base_args, isolated_env):
        config_path = isolated_env / "config.json"
        config_path.write_text(
            json.dumps(
                {
                    "verification": {"allowed_algorithms": ["rsa-sha256"]},
                    "protocol": {"endpoints": {"SAMLAssertionConsumer": "redirect-signature"}},
                }
            )
        )

        result = runner.invoke(cli, base_args + ["config", "validate", str(config_path)])

        assert result.exit_code == 0
        assert "Configuration is valid" in result.output
        assert "http://www.w3.org/2001/04/xmldsig-more#rsa-sha256" in result.output
        assert "SAMLAssertionConsumer: redirect-signature" in result.output

    def test_invalid_config(self, runner, base_args, isolated_env):
        config_path = isolated_env / "config.json"
        config_path.write_text(json.dumps({"logging": {"level": "LOUD"}}))

        result = runner.invoke(cli, base_args + ["config", "validate", str(config_path)])

        assert result.exit_code == 1
        assert "Configuration validation failed" in result.output
