"""System clipboard access for text and images."""

from __future__ import annotations

import logging
from typing import Optional

import pyperclip
from PIL import Image, ImageGrab

logger = logging.getLogger(__name__)


class SystemClipboard:
    """Thin wrapper over the general pasteboard.

    Text goes through pyperclip; images are read with Pillow's ImageGrab.
    """

    def set_string(self, text: str) -> None:
        pyperclip.copy(text)

    def get_string(self) -> str:
        return pyperclip.paste() or ""

    def clear(self) -> None:
        pyperclip.copy("")

    def read_image(self) -> Optional[Image.Image]:
        content = ImageGrab.grabclipboard()
        if isinstance(content, Image.Image):
            return content
        if content is not None:
            logger.debug("Clipboard holds %s, not image data", type(content).__name__)
        return None
