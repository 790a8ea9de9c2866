"""Opt-in log output for the client bridge.

Modules log through ``logging.getLogger(__name__)`` and the package only
installs a ``NullHandler``. Applications that do not configure logging
themselves can call :func:`configure_logging` to send the bridge's records to
stderr and, when ``LOG_FILE`` is set, to a file. The root logger is never
touched.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

from aws_client_bridge.config import Settings, load_settings

PACKAGE_LOGGER = "aws_client_bridge"

_LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
_DATE_FORMAT = "%Y-%m-%dT%H:%M:%S"

# Marks handlers installed here so a second call replaces only those.
_OWNED_ATTR = "_aws_client_bridge_handler"

_logger = logging.getLogger(__name__)


def _owned_handlers(logger: logging.Logger) -> list[logging.Handler]:
    return [handler for handler in logger.handlers if getattr(handler, _OWNED_ATTR, False)]


def _file_handler(path: str) -> logging.Handler | None:
    try:
        Path(path).parent.mkdir(parents=True, exist_ok=True)
        return logging.FileHandler(path)
    except OSError as exc:
        _logger.warning("Failed to open log file %s: %s", path, exc)
        return None


def configure_logging(settings: Settings | None = None) -> logging.Logger:
    """Attach stderr (and optional file) handlers to the package logger.

    Calling it again swaps the handlers it installed before; handlers added by
    the application are kept.
    """
    settings = settings or load_settings()
    package_logger = logging.getLogger(PACKAGE_LOGGER)

    for handler in _owned_handlers(package_logger):
        package_logger.removeHandler(handler)
        handler.close()

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if settings.logging.file:
        file_handler = _file_handler(settings.logging.file)
        if file_handler is not None:
            handlers.append(file_handler)

    formatter = logging.Formatter(_LOG_FORMAT, datefmt=_DATE_FORMAT)
    for handler in handlers:
        handler.setFormatter(formatter)
        setattr(handler, _OWNED_ATTR, True)
        package_logger.addHandler(handler)

    package_logger.setLevel(getattr(logging, settings.logging.level.upper(), logging.INFO))
    return package_logger
