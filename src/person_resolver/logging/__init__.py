"""
Logging package for ``person_resolver``.

Use ``get_logger(__name__)`` in modules to inherit the shared handlers.
"""

from .logger import (
    configure_logging,
    get_logger,
    list_active_loggers,
    set_level,
)

__all__ = [
    "configure_logging",
    "get_logger",
    "list_active_loggers",
    "set_level",
]
