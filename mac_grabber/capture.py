"""Interactive screen capture through the system screenshot utility."""

from __future__ import annotations

from concurrent.futures import Future
from dataclasses import dataclass
import enum
import logging
from typing import Any, Callable, Optional

import psutil

from .config import Settings
from .executor import CancellationToken, MainContext, pending_future, resolve_once
from .process import Spawner, spawn_and_watch

logger = logging.getLogger(__name__)

Completion = Callable[[Optional[Any]], None]


class CaptureStatus(enum.Enum):
    CAPTURED = "captured"
    # the user dismissed the selection or nothing reached the clipboard
    EMPTY = "empty"
    CANCELLED = "cancelled"
    FAILED = "failed"


@dataclass(frozen=True)
class CaptureOutcome:
    status: CaptureStatus
    captured_image: Optional[Any] = None
    returncode: Optional[int] = None

    @property
    def image(self) -> Optional[Any]:
        return self.captured_image if self.status is CaptureStatus.CAPTURED else None


class ScreenCaptureInvoker:
    def __init__(
        self,
        clipboard: Any,
        main: MainContext,
        settings: Optional[Settings] = None,
        spawn: Spawner = psutil.Popen,
    ) -> None:
        self.clipboard = clipboard
        self.main = main
        self.settings = settings or Settings()
        self.spawn = spawn

    def capture_selection_to_clipboard(
        self,
        completion: Optional[Completion] = None,
        token: Optional[CancellationToken] = None,
    ) -> Future:
        """Let the user select a screen region and read it back from the clipboard.

        Returns a future resolving to a ``CaptureOutcome``. ``completion``, when
        given, receives the image (or ``None``) on the main context before the
        future resolves.
        """
        future = pending_future()

        def _finish(status: CaptureStatus, image: Any = None, returncode: Optional[int] = None) -> None:
            outcome = CaptureOutcome(status=status, captured_image=image, returncode=returncode)
            if future.done():
                return
            try:
                if completion is not None:
                    completion(outcome.image)
            finally:
                resolve_once(future, outcome)

        def _post(fn: Callable[..., None], *args: Any) -> None:
            if not self.main.post(fn, *args):
                # no main context left to deliver on
                logger.warning("Main context closed; screen capture result dropped")
                _finish(CaptureStatus.FAILED)

        if self.main.closed:
            _finish(CaptureStatus.FAILED)
            return future
        if token is not None and token.cancelled:
            _post(_finish, CaptureStatus.CANCELLED)
            return future

        def _on_exit(returncode: int) -> None:
            _post(self._read_result, returncode, token, _finish)

        try:
            spawn_and_watch(self.settings.capture_command, _on_exit, spawn=self.spawn, token=token)
        except OSError:
            logger.exception("Failed to launch %s", self.settings.screencapture_path)
            _post(_finish, CaptureStatus.FAILED)
        return future

    def _read_result(
        self,
        returncode: int,
        token: Optional[CancellationToken],
        finish: Callable[..., None],
    ) -> None:
        if token is not None and token.cancelled:
            finish(CaptureStatus.CANCELLED, returncode=returncode)
            return
        try:
            image = self.clipboard.read_image()
        except Exception:
            logger.exception("Could not read image data from the clipboard")
            finish(CaptureStatus.FAILED, returncode=returncode)
            return
        if image is None:
            logger.info("Screen capture produced no image (exit status %s)", returncode)
            finish(CaptureStatus.EMPTY, returncode=returncode)
        else:
            finish(CaptureStatus.CAPTURED, image, returncode=returncode)
