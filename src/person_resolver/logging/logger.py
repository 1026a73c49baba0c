"""
Centralized logging configuration for person_resolver.

Key behaviors
-------------
* Single entry point via ``get_logger`` to keep handlers/formatters consistent.
* Console logging that respects the configured debug flag.
* Optional log file (``logging.file``) in ``logging.dir``, rotated when
  ``logging.rotate`` is true.
"""

from __future__ import annotations

import logging
from logging import Logger, StreamHandler
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Dict, List, Optional

from person_resolver.config import ResolverConfig, get_config

BASE_LOGGER_NAME = "person_resolver"
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Cache so handlers are only created once
_logger_cache: Dict[str, Logger] = {}
_base_configured: bool = False
_effective_level: int = logging.INFO


# -----------------------------------------------------------------------------
# Internal helpers
# -----------------------------------------------------------------------------

def _build_file_handler(path: Path, level: int, rotate: bool) -> logging.Handler:
    if rotate:
        handler: logging.Handler = RotatingFileHandler(
            path,
            maxBytes=5 * 1024 * 1024,
            backupCount=5,
            encoding="utf-8",
        )
    else:
        handler = logging.FileHandler(path, encoding="utf-8")

    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
    return handler


def configure_logging(cfg: Optional[ResolverConfig] = None, *, force: bool = False) -> Logger:
    """
    Configure the shared base logger once. ``force`` rebuilds handlers, which
    the CLI uses after loading a ``--config`` file.
    """
    global _base_configured, _effective_level

    base_logger = logging.getLogger(BASE_LOGGER_NAME)
    if _base_configured and not force:
        return base_logger

    cfg = cfg or get_config()
    log_cfg = cfg.logging

    level_name = str(log_cfg.get("level", "INFO")).upper()
    base_level = getattr(logging, level_name, logging.INFO)
    _effective_level = logging.DEBUG if cfg.debug else base_level

    for handler in list(base_logger.handlers):
        base_logger.removeHandler(handler)
        handler.close()

    base_logger.setLevel(_effective_level)
    base_logger.propagate = False

    console = StreamHandler()
    console.setLevel(_effective_level)
    console.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
    base_logger.addHandler(console)

    log_file = log_cfg.get("file")
    if log_file:
        log_dir = Path(log_cfg.get("dir") or "logs")
        log_dir.mkdir(parents=True, exist_ok=True)
        base_logger.addHandler(
            _build_file_handler(log_dir / log_file, _effective_level, bool(log_cfg.get("rotate", False)))
        )

    _base_configured = True
    return base_logger


# -----------------------------------------------------------------------------
# Public API
# -----------------------------------------------------------------------------

def get_logger(name: str | None = None) -> Logger:
    """Return a logger under the ``person_resolver`` namespace.

    Child loggers carry no handlers of their own; they propagate to the base
    logger, which owns the console and optional file handlers.
    """
    base_logger = configure_logging()
    if not name or name == BASE_LOGGER_NAME:
        return base_logger

    logger_name = name if name.startswith(BASE_LOGGER_NAME + ".") else f"{BASE_LOGGER_NAME}.{name}"
    logger = logging.getLogger(logger_name)
    logger.propagate = True

    _logger_cache[logger_name] = logger
    return logger


def set_level(level: int) -> None:
    """Adjust the level of the base logger and its handlers."""
    global _effective_level
    base_logger = configure_logging()
    _effective_level = level
    base_logger.setLevel(level)
    for handler in base_logger.handlers:
        handler.setLevel(level)


def list_active_loggers() -> List[str]:
    """Helper for debugging configuration issues in tests."""
    return list(_logger_cache.keys())
