"""
CLI command modules for person_resolver.

Each command module defines a single Typer-compatible command function.
"""

from person_resolver.cli.commands.resolve import resolve_command
from person_resolver.cli.commands.stats import stats_command

__all__ = [
    "resolve_command",
    "stats_command",
]
