# -*- coding: utf-8 -*-
"""Location: ./jkr/logging_service.py
Copyright 2025
SPDX-License-Identifier: Apache-2.0

Logging for the jkr codec.
The codec is a library, so it never installs output handlers of its own. The
package logger gets a ``NullHandler``, and a level only when ``JKR_LOG_LEVEL``
is set; applications decide where records go.

Examples:
    >>> from jkr.logging_service import get_logger
    >>> logger = get_logger("jkr.encoder")
    >>> logger.name
    'jkr.encoder'
"""

# Standard
import logging
from typing import Optional

# First-Party
from jkr.config import settings

PACKAGE_LOGGER = "jkr"

_configured = False


def configure_package_logger(level: Optional[str] = None) -> logging.Logger:
    """Attach a NullHandler to the package logger and apply a configured level.

    The level is only touched when one is given or ``JKR_LOG_LEVEL`` is set;
    otherwise it stays ``NOTSET`` and the application's configuration applies.

    Args:
        level: Level name; defaults to ``Settings.log_level``.

    Returns:
        logging.Logger: The ``jkr`` package logger.

    Examples:
        >>> configure_package_logger("DEBUG").level == logging.DEBUG
        True
        >>> logging.getLogger(PACKAGE_LOGGER).setLevel(logging.NOTSET)
    """
    global _configured  # pylint: disable=global-statement
    package_logger = logging.getLogger(PACKAGE_LOGGER)
    if not any(isinstance(h, logging.NullHandler) for h in package_logger.handlers):
        package_logger.addHandler(logging.NullHandler())
    level = level or settings.log_level
    if level is not None:
        package_logger.setLevel(level)
    _configured = True
    return package_logger


def get_logger(name: str) -> logging.Logger:
    """Return a logger below the package logger, configuring it on first use.

    Args:
        name: Logger name, usually ``__name__``.

    Returns:
        logging.Logger: The requested logger.
    """
    if not _configured:
        configure_package_logger()
    return logging.getLogger(name)
