"""Restart the application after a short delay."""

from __future__ import annotations

import logging
from pathlib import Path
import shlex
import sys
from typing import Callable, NoReturn, Optional, Union

import psutil

from .process import Spawner, spawn_detached

logger = logging.getLogger(__name__)

DEFAULT_DELAY = 0.5


def relaunch_command(bundle_path: Union[str, Path], after_delay: float = DEFAULT_DELAY,
                     shell: str = "/bin/sh") -> list[str]:
    script = f"sleep {float(after_delay)}; open {shlex.quote(str(bundle_path))}"
    return [shell, "-c", script]


def relaunch_application(
    bundle_path: Union[str, Path],
    after_delay: float = DEFAULT_DELAY,
    *,
    terminate: Optional[Callable[[], None]] = None,
    shell: str = "/bin/sh",
    spawn: Spawner = psutil.Popen,
) -> NoReturn:
    """Schedule the bundle to reopen, then exit the current process.

    ``terminate`` runs before exiting, e.g. to shut the UI down. This never
    returns: it always ends by raising ``SystemExit(0)``.
    """
    try:
        spawn_detached(relaunch_command(bundle_path, after_delay, shell), spawn=spawn)
        logger.info("Relaunching %s in %.1fs", bundle_path, after_delay)
    except OSError:
        logger.exception("Could not schedule relaunch of %s", bundle_path)
    try:
        if terminate is not None:
            terminate()
    finally:
        sys.exit(0)
