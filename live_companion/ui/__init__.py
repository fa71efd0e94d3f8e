"""Presentation helpers shared by the CLI."""
