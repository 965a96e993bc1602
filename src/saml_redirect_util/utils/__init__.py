"""Shared utilities: exceptions and identifier generation."""
