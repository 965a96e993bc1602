"""Command-line interface for saml-redirect-util."""
