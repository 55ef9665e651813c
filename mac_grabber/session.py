"""Captured text entries and the capture session that owns them."""

from __future__ import annotations

from concurrent.futures import Future
from dataclasses import dataclass, field
import logging
from typing import Any, Callable, Iterable, List, Optional, Sequence
import uuid

from .executor import MainContext

logger = logging.getLogger(__name__)

Observer = Callable[[List["CapturedTextEntry"]], None]


@dataclass
class CapturedTextEntry:
    text: str = ""
    id: str = field(default_factory=lambda: str(uuid.uuid4()))


def combined_text(entries: Iterable[CapturedTextEntry]) -> str:
    return "\n".join(entry.text for entry in entries)


def copy_to_clipboard(entries: Iterable[CapturedTextEntry], clipboard: Any) -> None:
    """Replace the clipboard contents with the entries' text, one per line."""
    clipboard.set_string(combined_text(entries))


def dismiss_preview(preview: Any) -> None:
    if preview is None:
        return
    for method in ("order_out", "close"):
        action = getattr(preview, method, None)
        if callable(action):
            action()
            return


class CaptureSession:
    """Ordered captured text plus the clipboard and preview it drives.

    Mutations that the UI can observe are expected to run on ``main``.
    """

    def __init__(self, clipboard: Any, main: MainContext, preview: Any = None) -> None:
        self.clipboard = clipboard
        self.main = main
        self.preview = preview
        self._entries: List[CapturedTextEntry] = []
        self._observers: List[Observer] = []
        self._closed = False

    @property
    def entries(self) -> List[CapturedTextEntry]:
        return list(self._entries)

    def subscribe(self, observer: Observer) -> Callable[[], None]:
        self._observers.append(observer)

        def _unsubscribe() -> None:
            if observer in self._observers:
                self._observers.remove(observer)

        return _unsubscribe

    def add_text(self, text: str) -> Future:
        """Append one entry on the main context; resolves to the new entry."""
        return self.main.submit(self._add_one, text)

    def extend(self, texts: Sequence[str]) -> Future:
        """Append entries on the main context; resolves to the new entries."""
        return self.main.submit(self._add_now, list(texts))

    def show_preview(self, preview: Any) -> Future:
        """Replace the preview surface on the main context, dismissing the old one."""
        return self.main.submit(self._show_preview_now, preview)

    def copy_to_clipboard(self) -> Future:
        return self.main.submit(copy_to_clipboard, self._entries, self.clipboard)

    def clear_capture(self, after: Optional[float] = None) -> Future:
        """Clear entries, clipboard and preview together on the main context.

        With ``after``, the clear is scheduled that many seconds later.
        """
        if after:
            return self.main.call_later(after, self._clear_now)
        return self.main.submit(self._clear_now)

    def close(self) -> Future:
        """Clear the session and stop notifying observers."""
        return self.main.submit(self._close_now)

    def _add_one(self, text: str) -> CapturedTextEntry:
        return self._add_now([text])[0]

    def _add_now(self, texts: List[str]) -> List[CapturedTextEntry]:
        added = [CapturedTextEntry(text=text) for text in texts]
        self._entries.extend(added)
        self._notify()
        return added

    def _show_preview_now(self, preview: Any) -> None:
        old, self.preview = self.preview, preview
        if old is not preview:
            dismiss_preview(old)

    def _close_now(self) -> None:
        self._clear_now()
        self._detach()

    def _clear_now(self) -> None:
        self._entries.clear()
        self.clipboard.clear()
        preview, self.preview = self.preview, None
        dismiss_preview(preview)
        self._notify()
        logger.debug("Cleared capture session")

    def _detach(self) -> None:
        self._closed = True
        self._observers.clear()

    def _notify(self) -> None:
        if self._closed:
            return
        snapshot = list(self._entries)
        for observer in list(self._observers):
            observer(snapshot)


def clear_capture(session: CaptureSession) -> Future:
    return session.clear_capture()
