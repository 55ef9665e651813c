"""Console-friendly formatting utilities."""

from __future__ import annotations

from typing import Sequence

from .bundle import AppBundle
from .capture import CaptureOutcome
from .privilege import AdminStatus, PrivilegeResult


def yes_no(value: bool) -> str:
    return "yes" if value else "no"


def render_table(headers: Sequence[str], rows: Sequence[Sequence[str]]) -> str:
    """Align ``rows`` under ``headers`` with a dashed rule between them."""
    columns = list(zip(headers, *rows))
    widths = [max(len(cell) for cell in column) for column in columns]
    rule = ["-" * width for width in widths]
    return "\n".join(_format_row(row, widths) for row in [headers, rule, *rows])


def privilege_rows(bundle: AppBundle, status: AdminStatus, result: PrivilegeResult) -> list[list[str]]:
    return [
        ["Bundle", str(bundle.path)],
        ["Admin check", status.value],
        ["Admin", yes_no(result.is_admin)],
        ["Expected location", yes_no(result.is_in_expected_directory)],
    ]


def format_privilege_report(bundle: AppBundle, status: AdminStatus, result: PrivilegeResult) -> str:
    lines = [render_table(["Check", "Result"], privilege_rows(bundle, status, result))]
    if not result.is_in_expected_directory:
        target = "/Applications or ~/Applications" if result.is_admin else "~/Applications"
        lines.append(f"\nMove {bundle.path.name} to {target}.")
    if status is AdminStatus.UNKNOWN:
        lines.append("\nThe admin group check could not be run; treating the user as standard.")
    return "\n".join(lines)


def about_rows(bundle: AppBundle) -> list[list[str]]:
    return [
        ["Name", bundle.name],
        ["Version", f"{bundle.version} ({bundle.build_version})"],
        ["Identifier", bundle.identifier or "N/A"],
        ["Copyright", bundle.copyright],
        ["Path", str(bundle.path)],
    ]


def format_about(bundle: AppBundle) -> str:
    return render_table(["Field", "Value"], about_rows(bundle))


def format_capture(outcome: CaptureOutcome) -> str:
    image = outcome.image
    if image is None:
        return f"No image captured ({outcome.status.value})."
    width, height = image.size
    return f"Captured {width}x{height} image to the clipboard."


def _format_row(row: Sequence[str], widths: Sequence[int]) -> str:
    return " | ".join(cell.ljust(width) for cell, width in zip(row, widths))
