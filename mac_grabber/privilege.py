"""Admin group membership and install location checks."""

from __future__ import annotations

from concurrent.futures import Future
from dataclasses import dataclass
import enum
import logging
from pathlib import Path
from typing import Any, Callable, Optional, Union

import psutil

from .bundle import AppBundle
from .config import Settings
from .executor import MainContext, pending_future, resolve_once
from .process import Spawner, spawn_and_watch

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


class AdminStatus(enum.Enum):
    ADMIN = "admin"
    STANDARD = "standard"
    # the membership test could not be run at all
    UNKNOWN = "unknown"

    @property
    def is_admin(self) -> bool:
        return self is AdminStatus.ADMIN


@dataclass(frozen=True)
class PrivilegeResult:
    is_in_expected_directory: bool
    is_admin: bool

    def __iter__(self):
        yield self.is_in_expected_directory
        yield self.is_admin


def is_expected_location(
    bundle_path: PathLike,
    is_admin: bool,
    system_applications_dir: PathLike,
    user_applications_dir: PathLike,
) -> bool:
    """Admins may install in either applications folder, standard users only in their own."""
    parent = Path(bundle_path).parent
    if is_admin:
        return parent in (Path(system_applications_dir), Path(user_applications_dir))
    return parent == Path(user_applications_dir)


class PrivilegeChecker:
    def __init__(
        self,
        main: MainContext,
        bundle: Optional[AppBundle] = None,
        settings: Optional[Settings] = None,
        spawn: Spawner = psutil.Popen,
    ) -> None:
        self.main = main
        self.bundle = bundle or AppBundle.current()
        self.settings = settings or Settings()
        self.spawn = spawn

    def admin_status(self, completion: Optional[Callable[[AdminStatus], Any]] = None) -> Future:
        """Resolve to ``AdminStatus`` on the main context."""
        future = pending_future()

        def _deliver(status: AdminStatus) -> None:
            if future.done():
                return
            try:
                if completion is not None:
                    completion(status)
            finally:
                resolve_once(future, status)

        def _post(status: AdminStatus) -> None:
            if not self.main.post(_deliver, status):
                logger.warning("Main context closed; admin check result dropped")
                _deliver(AdminStatus.UNKNOWN)

        def _on_exit(returncode: int) -> None:
            _post(AdminStatus.ADMIN if returncode == 0 else AdminStatus.STANDARD)

        if self.main.closed:
            _deliver(AdminStatus.UNKNOWN)
            return future

        argv = (self.settings.shell_path, "-c", self.settings.admin_check_script)
        try:
            spawn_and_watch(argv, _on_exit, spawn=self.spawn)
        except OSError as exc:
            logger.warning("Failed to execute admin group check: %s", exc)
            _post(AdminStatus.UNKNOWN)
        return future

    def is_current_user_admin(self, completion: Optional[Callable[[bool], Any]] = None) -> Future:
        """Resolve to ``True`` only when the admin check succeeded.

        A check that could not run at all also resolves to ``False``; use
        ``admin_status`` to tell the two apart.
        """
        future = pending_future()

        def _collapse(status: AdminStatus) -> None:
            try:
                if completion is not None:
                    completion(status.is_admin)
            finally:
                resolve_once(future, status.is_admin)

        self.admin_status(_collapse)
        return future

    def check_install_location_and_role(
        self, completion: Optional[Callable[[PrivilegeResult], Any]] = None
    ) -> Future:
        future = pending_future()

        def _evaluate(is_admin: bool) -> None:
            result = self.evaluate(is_admin)
            try:
                if completion is not None:
                    completion(result)
            finally:
                resolve_once(future, result)

        self.is_current_user_admin(_evaluate)
        return future

    def evaluate(self, is_admin: bool) -> PrivilegeResult:
        result = PrivilegeResult(
            is_in_expected_directory=is_expected_location(
                self.bundle.path,
                is_admin,
                self.settings.system_applications_dir,
                self.settings.user_applications_dir,
            ),
            is_admin=is_admin,
        )
        logger.debug("Bundle %s: %s", self.bundle.path, result)
        return result
