"""Logging setup: Rich console output plus the optional macOS system log."""

from __future__ import annotations

import logging
import logging.handlers
import os
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

from .config import Settings

PACKAGE_LOGGER = "mac_grabber"
SYSLOG_SOCKET = "/var/run/syslog"


class _SubsystemFilter(logging.Filter):
    def __init__(self, subsystem: str, category: str) -> None:
        super().__init__()
        self.subsystem = subsystem
        self.category = category

    def filter(self, record: logging.LogRecord) -> bool:
        record.subsystem = self.subsystem
        record.category = self.category
        return True


def configure_logging(
    settings: Optional[Settings] = None,
    *,
    verbose: bool = False,
    system_log: bool = False,
    console: Optional[Console] = None,
) -> logging.Logger:
    """Attach handlers to the package logger and return it.

    Calling this more than once replaces the handlers installed earlier.
    """
    settings = settings or Settings()
    logger = logging.getLogger(PACKAGE_LOGGER)
    for handler in list(logger.handlers):
        if getattr(handler, "_grabber_owned", False):
            logger.removeHandler(handler)
            handler.close()

    subsystem_filter = _SubsystemFilter(settings.log_subsystem, settings.log_category)

    rich_handler = RichHandler(
        console=console or Console(stderr=True),
        show_path=False,
        rich_tracebacks=True,
    )
    rich_handler.setFormatter(logging.Formatter("%(message)s"))
    rich_handler.addFilter(subsystem_filter)
    rich_handler._grabber_owned = True  # type: ignore[attr-defined]
    logger.addHandler(rich_handler)

    if system_log and os.path.exists(SYSLOG_SOCKET):
        syslog_handler = logging.handlers.SysLogHandler(address=SYSLOG_SOCKET)
        syslog_handler.setFormatter(
            logging.Formatter("%(subsystem)s[%(category)s] %(levelname)s %(message)s")
        )
        syslog_handler.addFilter(subsystem_filter)
        syslog_handler._grabber_owned = True  # type: ignore[attr-defined]
        logger.addHandler(syslog_handler)

    logger.setLevel(logging.DEBUG if verbose else logging.INFO)
    logger.propagate = False
    return logger
