"""Spawn helper processes and observe their termination."""

from __future__ import annotations

import logging
import subprocess
import threading
from typing import Any, Callable, Optional, Sequence

import psutil

from .executor import CancellationToken

logger = logging.getLogger(__name__)

Spawner = Callable[..., Any]


def spawn_and_watch(
    argv: Sequence[str],
    on_exit: Callable[[int], None],
    *,
    spawn: Spawner = psutil.Popen,
    token: Optional[CancellationToken] = None,
) -> Any:
    """Start ``argv`` and call ``on_exit(returncode)`` once it terminates.

    ``on_exit`` runs on a daemon watcher thread. Raises ``OSError`` when the
    process cannot be started.
    """
    process = spawn(
        list(argv),
        stdin=subprocess.DEVNULL,
        stdout=subprocess.DEVNULL,
        stderr=subprocess.DEVNULL,
    )
    logger.debug("Started %s (pid %s)", argv[0], getattr(process, "pid", "?"))

    if token is not None:
        token.add_callback(lambda: terminate_quietly(process))

    def _watch() -> None:
        returncode = process.wait()
        logger.debug("%s exited with status %s", argv[0], returncode)
        on_exit(returncode)

    watcher = threading.Thread(target=_watch, name=f"watch-{argv[0]}", daemon=True)
    watcher.start()
    return process


def spawn_detached(argv: Sequence[str], *, spawn: Spawner = psutil.Popen) -> Any:
    """Start ``argv`` in its own session so it outlives this process."""
    return spawn(
        list(argv),
        stdin=subprocess.DEVNULL,
        stdout=subprocess.DEVNULL,
        stderr=subprocess.DEVNULL,
        start_new_session=True,
        close_fds=True,
    )


def terminate_quietly(process: Any) -> None:
    try:
        process.terminate()
    except (psutil.NoSuchProcess, ProcessLookupError):
        logger.debug("Process %s already exited", getattr(process, "pid", "?"))
