"""Entry point for running saml_redirect_util as a module.

This allows the package to be executed as:
    python -m saml_redirect_util
"""

from saml_redirect_util.cli.main import cli

if __name__ == "__main__":
    cli()
