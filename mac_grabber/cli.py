"""Entry point for the mac-grabber command line tool."""

from __future__ import annotations

import argparse
from concurrent.futures import TimeoutError as FutureTimeout
import json
from pathlib import Path
from typing import Any, Dict, Optional, Sequence

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from .bundle import AppBundle
from .capture import CaptureOutcome, ScreenCaptureInvoker
from .clipboard import SystemClipboard
from .config import Settings
from .executor import CancellationToken, MainContext
from .formatting import about_rows, format_about, format_capture, format_privilege_report, privilege_rows
from .log import configure_logging
from .login_items import LoginItemRegistrar
from .privilege import PrivilegeChecker
from .relaunch import relaunch_application
from .session import CaptureSession
from .support import ensure_application_support_folder


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mac-grabber",
        description="Clipboard, screen capture and install helpers for the Grabber app.",
    )
    parser.add_argument("--ui", action="store_true", help="render results with Rich tables")
    parser.add_argument("-v", "--verbose", action="store_true", help="show debug logs")
    parser.add_argument("--system-log", action="store_true", help="also log to the macOS system log")
    parser.add_argument("--bundle", help="application bundle path (defaults to the running one)")
    commands = parser.add_subparsers(dest="command", required=True)

    copy = commands.add_parser("copy", help="copy lines of text to the clipboard")
    copy.add_argument("texts", nargs="+")
    copy.add_argument("--clear-after", type=float, default=None, help="clear the clipboard again after this many seconds")

    commands.add_parser("clear", help="clear the clipboard")

    capture = commands.add_parser("capture", help="select a screen region into the clipboard")
    capture.add_argument("--output", help="also save the captured image to this file")
    capture.add_argument("--timeout", type=float, default=None, help="give up after this many seconds")

    check = commands.add_parser("check", help="check admin status and install location")
    check.add_argument("--json", action="store_true", help="print the result as JSON")

    login = commands.add_parser("login", help="toggle launch at login")
    login.add_argument("state", choices=["on", "off"])

    relaunch = commands.add_parser("relaunch", help="restart the application")
    relaunch.add_argument("--delay", type=float, default=None)

    commands.add_parser("support-dir", help="ensure the Application Support folder exists")
    commands.add_parser("about", help="show bundle metadata")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    settings = Settings.from_env()
    configure_logging(settings, verbose=args.verbose, system_log=args.system_log)
    bundle = AppBundle(Path(args.bundle).expanduser()) if args.bundle else AppBundle.current()
    console = Console()

    with MainContext() as main_context:
        if args.command == "copy":
            session = CaptureSession(SystemClipboard(), main_context)
            session.extend(args.texts)
            session.copy_to_clipboard().result()
            print(f"Copied {len(args.texts)} line(s) to the clipboard.")
            if args.clear_after:
                session.clear_capture(after=args.clear_after).result()
                print("Clipboard cleared.")
        elif args.command == "clear":
            CaptureSession(SystemClipboard(), main_context).clear_capture().result()
            print("Clipboard cleared.")
        elif args.command == "capture":
            return _capture(args, settings, main_context)
        elif args.command == "check":
            _check(args, bundle, settings, main_context, console)
        elif args.command == "login":
            LoginItemRegistrar(bundle, settings).set_launch_at_login(args.state == "on")
        elif args.command == "relaunch":
            delay = settings.relaunch_delay if args.delay is None else args.delay
            main_context.close()
            relaunch_application(bundle.path, delay, shell=settings.relaunch_shell_path)
        elif args.command == "support-dir":
            identifier = bundle.identifier or settings.log_subsystem
            print(ensure_application_support_folder(identifier, settings.application_support_dir))
        elif args.command == "about":
            if args.ui:
                console.print(_rich_rows("About", about_rows(bundle)))
            else:
                print(format_about(bundle))
    return 0


def _capture(args: argparse.Namespace, settings: Settings, main_context: MainContext) -> int:
    token = CancellationToken()
    invoker = ScreenCaptureInvoker(SystemClipboard(), main_context, settings)
    future = invoker.capture_selection_to_clipboard(token=token)
    try:
        outcome: CaptureOutcome = future.result(timeout=args.timeout)
    except FutureTimeout:
        token.cancel()
        outcome = future.result()
    print(format_capture(outcome))
    if outcome.image is None:
        return 1
    if args.output:
        outcome.image.save(args.output)
        print(f"Saved to {args.output}")
    return 0


def _check(
    args: argparse.Namespace,
    bundle: AppBundle,
    settings: Settings,
    main_context: MainContext,
    console: Console,
) -> None:
    checker = PrivilegeChecker(main_context, bundle, settings)
    status = checker.admin_status().result()
    result = checker.evaluate(status.is_admin)

    if args.json:
        payload: Dict[str, Any] = {
            "bundle": str(bundle.path),
            "admin_status": status.value,
            "is_admin": result.is_admin,
            "is_in_expected_directory": result.is_in_expected_directory,
        }
        print(json.dumps(payload, ensure_ascii=False, indent=2))
        return

    if args.ui:
        console.print(_rich_rows("Install check", privilege_rows(bundle, status, result)))
        style = "bold green" if result.is_in_expected_directory else "bold red"
        verdict = "Installed in the expected folder." if result.is_in_expected_directory else "Installed in an unexpected folder."
        console.print(Panel(verdict, style=style))
        return

    print(format_privilege_report(bundle, status, result))


def _rich_rows(title: str, rows: Sequence[Sequence[str]]) -> Table:
    table = Table(title=title, show_header=False, box=box.ROUNDED)
    for label, value in rows:
        table.add_row(label, value)
    return table


if __name__ == "__main__":
    raise SystemExit(main())
