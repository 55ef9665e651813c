"""Launch-at-login registration through a per-user LaunchAgent."""

from __future__ import annotations

import enum
import logging
import os
from pathlib import Path
import plistlib
import subprocess
from typing import Any, Callable, Dict, Optional

from .bundle import AppBundle
from .config import Settings

logger = logging.getLogger(__name__)

LAUNCHCTL = "/bin/launchctl"
OPEN = "/usr/bin/open"


class LoginItemError(Exception):
    """Raised when the login item could not be registered or removed."""


class LoginItemStatus(enum.Enum):
    ENABLED = "enabled"
    NOT_REGISTERED = "not_registered"


class LoginItemRegistrar:
    def __init__(
        self,
        bundle: AppBundle,
        settings: Optional[Settings] = None,
        *,
        label: Optional[str] = None,
        run: Callable[..., Any] = subprocess.run,
        uid: Optional[int] = None,
    ) -> None:
        self.bundle = bundle
        self.settings = settings or Settings()
        self.label = label or bundle.identifier or self.settings.log_subsystem
        self.run = run
        self.uid = os.getuid() if uid is None else uid

    @property
    def plist_path(self) -> Path:
        return self.settings.launch_agents_dir / f"{self.label}.plist"

    def agent_definition(self) -> Dict[str, Any]:
        return {
            "Label": self.label,
            "ProgramArguments": [OPEN, "-a", str(self.bundle.path)],
            "RunAtLoad": True,
            "ProcessType": "Interactive",
        }

    def status(self) -> LoginItemStatus:
        if self.plist_path.exists():
            return LoginItemStatus.ENABLED
        return LoginItemStatus.NOT_REGISTERED

    def register(self) -> None:
        path = self.plist_path
        tmp_path = path.with_name(path.name + ".tmp")
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with tmp_path.open("wb") as handle:
                plistlib.dump(self.agent_definition(), handle)
            os.replace(tmp_path, path)
        except OSError as exc:
            raise LoginItemError(f"could not write {path}: {exc}") from exc
        logger.info("Registered %s to launch at login", self.label)

    def unregister(self) -> None:
        if self.status() is LoginItemStatus.NOT_REGISTERED:
            logger.debug("%s is not registered as a login item", self.label)
            return
        result = self.run(
            [LAUNCHCTL, "bootout", f"gui/{self.uid}/{self.label}"],
            capture_output=True,
            text=True,
            check=False,
        )
        if result.returncode != 0:
            # not loaded in the current login session
            logger.debug("launchctl bootout %s exited %s", self.label, result.returncode)
        try:
            self.plist_path.unlink()
        except FileNotFoundError:
            pass
        except OSError as exc:
            raise LoginItemError(f"could not remove {self.plist_path}: {exc}") from exc
        logger.info("Removed %s from login items", self.label)

    def set_launch_at_login(self, enabled: bool) -> None:
        """Enable or disable launch at login; failures are logged, not raised."""
        try:
            if enabled:
                if self.status() is LoginItemStatus.ENABLED:
                    self.unregister()
                self.register()
            else:
                self.unregister()
        except (LoginItemError, OSError) as exc:
            action = "enable" if enabled else "disable"
            logger.error("Failed to %s launch at login: %s", action, exc)
