"""Per-application support folder."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from .config import Settings

logger = logging.getLogger(__name__)


def application_support_folder(identifier: str, root: Optional[Path] = None) -> Path:
    base = root if root is not None else Settings().application_support_dir
    return Path(base) / identifier


def ensure_application_support_folder(identifier: str, root: Optional[Path] = None) -> Path:
    """Create ``<Application Support>/<identifier>`` if it is missing."""
    if not identifier:
        raise ValueError("a bundle identifier is required")
    folder = application_support_folder(identifier, root)
    if not folder.exists():
        folder.mkdir(parents=True, exist_ok=True)
        logger.info("Created Application Support/%s folder", identifier)
    return folder
