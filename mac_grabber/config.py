"""Runtime settings for the Grabber helpers."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
import os
import shlex
from pathlib import Path
from typing import Mapping, Optional, Tuple

ENV_PREFIX = "GRABBER_"


def _home() -> Path:
    return Path.home()


@dataclass(frozen=True)
class Settings:
    screencapture_path: str = "/usr/sbin/screencapture"
    # clipboard output, interactive selection, no capture sound
    capture_flags: Tuple[str, ...] = ("-c", "-i", "-x")
    shell_path: str = "/bin/zsh"
    relaunch_shell_path: str = "/bin/sh"
    admin_group: str = "admin"
    system_applications_dir: Path = Path("/Applications")
    user_applications_dir: Path = field(default_factory=lambda: _home() / "Applications")
    launch_agents_dir: Path = field(default_factory=lambda: _home() / "Library" / "LaunchAgents")
    application_support_dir: Path = field(
        default_factory=lambda: _home() / "Library" / "Application Support"
    )
    relaunch_delay: float = 0.5
    log_subsystem: str = "com.alienator88.viz"
    log_category: str = "Application"

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        """Build settings from defaults overridden by ``GRABBER_*`` variables."""
        env = os.environ if environ is None else environ
        settings = cls()
        overrides = {}
        for name in ("screencapture_path", "shell_path", "relaunch_shell_path", "admin_group",
                     "log_subsystem", "log_category"):
            value = env.get(ENV_PREFIX + name.upper())
            if value:
                overrides[name] = value
        for name in ("system_applications_dir", "user_applications_dir", "launch_agents_dir",
                     "application_support_dir"):
            value = env.get(ENV_PREFIX + name.upper())
            if value:
                overrides[name] = Path(value).expanduser()
        flags = env.get(ENV_PREFIX + "CAPTURE_FLAGS")
        if flags:
            overrides["capture_flags"] = tuple(flags.split())
        delay = env.get(ENV_PREFIX + "RELAUNCH_DELAY")
        if delay:
            try:
                overrides["relaunch_delay"] = float(delay)
            except ValueError as exc:
                raise ValueError(f"{ENV_PREFIX}RELAUNCH_DELAY must be a number, got {delay!r}") from exc
        return replace(settings, **overrides) if overrides else settings

    @property
    def capture_command(self) -> Tuple[str, ...]:
        return (self.screencapture_path, *self.capture_flags)

    @property
    def admin_check_script(self) -> str:
        # one group per line so only the exact name matches
        return f'groups "$(whoami)" | tr " " "\\n" | grep -qx {shlex.quote(self.admin_group)}'
