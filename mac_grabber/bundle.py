"""The running application's bundle and its Info.plist metadata."""

from __future__ import annotations

from dataclasses import dataclass, field
import logging
from pathlib import Path
import plistlib
import sys
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)

NOT_AVAILABLE = "N/A"


@dataclass
class AppBundle:
    path: Path
    _info: Optional[Dict[str, Any]] = field(default=None, repr=False)

    @classmethod
    def current(cls, executable: Optional[str] = None) -> "AppBundle":
        """Locate the bundle containing ``executable`` (``sys.executable`` by default).

        Outside an ``.app`` bundle this is the executable's directory.
        """
        exe = Path(executable or sys.executable).resolve()
        for parent in exe.parents:
            if parent.suffix == ".app":
                return cls(parent)
        return cls(exe.parent)

    @property
    def parent_directory(self) -> Path:
        return self.path.parent

    @property
    def info_plist_path(self) -> Path:
        return self.path / "Contents" / "Info.plist"

    @property
    def info(self) -> Dict[str, Any]:
        if self._info is None:
            self._info = self._load_info()
        return self._info

    def _load_info(self) -> Dict[str, Any]:
        try:
            with self.info_plist_path.open("rb") as handle:
                data = plistlib.load(handle)
        except FileNotFoundError:
            return {}
        except (OSError, plistlib.InvalidFileException, ValueError) as exc:
            logger.warning("Unreadable Info.plist at %s: %s", self.info_plist_path, exc)
            return {}
        return data if isinstance(data, dict) else {}

    def _string(self, key: str) -> Optional[str]:
        value = self.info.get(key)
        return value if isinstance(value, str) else None

    @property
    def identifier(self) -> Optional[str]:
        return self._string("CFBundleIdentifier")

    @property
    def name(self) -> str:
        return self._string("CFBundleDisplayName") or self._string("CFBundleName") or NOT_AVAILABLE

    @property
    def version(self) -> str:
        return self._string("CFBundleShortVersionString") or NOT_AVAILABLE

    @property
    def build_version(self) -> str:
        return self._string("CFBundleVersion") or NOT_AVAILABLE

    @property
    def copyright(self) -> str:
        return self._string("NSHumanReadableCopyright") or NOT_AVAILABLE
