"""
CLI package for person_resolver.

Provides the Typer application entrypoint and shared CLI utilities.
"""

from person_resolver.cli.app import app, main

__all__ = [
    "app",
    "main",
]
