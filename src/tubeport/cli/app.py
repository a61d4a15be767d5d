"""CLI application entry point and command routing for tubeport.

This module is the **sole process error boundary**.  It catches
:class:`~tubeport.exceptions.TubeportError`, ``KeyboardInterrupt`` and
any unexpected ``Exception``, rendering user-friendly messages via Rich
and returning well-defined exit codes.

Architecture notes
------------------
* No format logic lives here — all work is delegated to
  :class:`~tubeport.core.transfer_service.TransferService`.
* ``print()`` is forbidden outside the CLI layer; the console proxy is
  used exclusively.
* This module is the only place that translates between the domain world
  and the OS process exit code.
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path
from typing import TYPE_CHECKING

from tubeport.cli import exit_codes
from tubeport.cli.console import configure_logging, console
from tubeport.core.models import DataKind, Direction, ImportFormat, TransferOutcome
from tubeport.exceptions import TubeportError
from tubeport.version import __version__

if TYPE_CHECKING:
    from tubeport.core.transfer_service import TransferService

_FORMAT_CHOICES: list[str] = [fmt.value for fmt in ImportFormat]

_IMPORT_KINDS: dict[str, DataKind] = {
    "subscriptions": DataKind.SUBSCRIPTIONS,
    "playlists": DataKind.PLAYLISTS,
    "history": DataKind.WATCH_HISTORY,
}

_EXPORT_KINDS: dict[str, DataKind] = {
    "subscriptions": DataKind.SUBSCRIPTIONS,
    "playlists": DataKind.PLAYLISTS,
}

_OUTCOME_EXIT_CODES: dict[TransferOutcome, int] = {
    TransferOutcome.SUCCESS: exit_codes.SUCCESS,
    TransferOutcome.EMPTY: exit_codes.NOTHING_TO_DO,
    TransferOutcome.UNAVAILABLE: exit_codes.NOTHING_TO_DO,
    TransferOutcome.UNSUPPORTED: exit_codes.GENERAL_ERROR,
    TransferOutcome.FAILED: exit_codes.GENERAL_ERROR,
}


# ---------------------------------------------------------------------------
# Argument parser
# ---------------------------------------------------------------------------

def _build_parser() -> argparse.ArgumentParser:
    """Construct the top-level argument parser.

    * ``tubeport import {subscriptions,playlists,history} PATH -f FORMAT``
    * ``tubeport export {subscriptions,playlists} PATH -f FORMAT``
    * ``tubeport formats``
    * ``tubeport --version``
    """
    parser = argparse.ArgumentParser(
        prog="tubeport",
        description="Import and export YouTube subscriptions, playlists and watch history.",
    )
    parser.add_argument(
        "-V",
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "--library",
        type=Path,
        default=None,
        help="Local library directory (default: $TUBEPORT_LIBRARY_DIR or ~/.tubeport).",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log debug output, including skipped rows.",
    )

    commands = parser.add_subparsers(dest="command")

    import_parser = commands.add_parser("import", help="Read a file into the library.")
    import_parser.add_argument("kind", choices=sorted(_IMPORT_KINDS))
    import_parser.add_argument("path", help="File to import.")
    import_parser.add_argument("-f", "--format", required=True, choices=_FORMAT_CHOICES)

    export_parser = commands.add_parser("export", help="Write the library to a file.")
    export_parser.add_argument("kind", choices=sorted(_EXPORT_KINDS))
    export_parser.add_argument("path", help="File to write.")
    export_parser.add_argument("-f", "--format", required=True, choices=_FORMAT_CHOICES)

    commands.add_parser("formats", help="List supported formats per data kind.")
    return parser


# ---------------------------------------------------------------------------
# Command dispatch
# ---------------------------------------------------------------------------

def _build_service(library_dir: Path | None) -> TransferService:
    """Wire the transfer service to the local library and the console."""
    from tubeport.cli.notifier import ConsoleNotifier
    from tubeport.config import get_settings
    from tubeport.core.transfer_service import TransferService
    from tubeport.infra.file_streams import FileStreamSink, FileStreamSource
    from tubeport.infra.json_library import (
        JsonLibrary,
        LocalHistoryStore,
        LocalPlaylistStore,
        LocalSubscriptionStore,
    )

    settings = get_settings()
    library = JsonLibrary((library_dir or settings.library_dir).expanduser())
    return TransferService(
        source=FileStreamSource(),
        sink=FileStreamSink(),
        subscriptions=LocalSubscriptionStore(library),
        playlists=LocalPlaylistStore(library),
        history=LocalHistoryStore(library),
        notifier=ConsoleNotifier(),
        context=settings.codec_context(),
        auth_token=settings.auth_token,
    )


def _handle_transfer(
    direction: Direction,
    kind: DataKind,
    import_format: ImportFormat,
    path: str,
    library_dir: Path | None,
) -> int:
    """Run one import or export and map its outcome to an exit code."""
    service = _build_service(library_dir)
    operations = {
        (Direction.IMPORT, DataKind.SUBSCRIPTIONS): service.import_subscriptions,
        (Direction.IMPORT, DataKind.PLAYLISTS): service.import_playlists,
        (Direction.IMPORT, DataKind.WATCH_HISTORY): service.import_watch_history,
        (Direction.EXPORT, DataKind.SUBSCRIPTIONS): service.export_subscriptions,
        (Direction.EXPORT, DataKind.PLAYLISTS): service.export_playlists,
    }
    outcome = asyncio.run(operations[(direction, kind)](import_format, path))
    return _OUTCOME_EXIT_CODES[outcome]


def _handle_formats() -> int:
    """Render the format support matrix as a Rich table."""
    from rich.table import Table

    from tubeport.cli.console import get_rich_console
    from tubeport.core.dispatcher import supported_formats

    table = Table(title="Supported formats", show_lines=False)
    table.add_column("Format", style="bold")
    for kind in DataKind:
        table.add_column(kind.value.capitalize())

    for fmt in ImportFormat:
        cells: list[str] = []
        for kind in DataKind:
            directions = [
                direction.value
                for direction in Direction
                if fmt in supported_formats(kind, direction)
            ]
            cells.append(" + ".join(directions) if directions else "[dim]–[/dim]")
        table.add_row(fmt.value, *cells)

    get_rich_console().print(table)
    return exit_codes.SUCCESS


# ---------------------------------------------------------------------------
# Main entry point
# ---------------------------------------------------------------------------

def main(argv: list[str] | None = None) -> int:
    """Run the tubeport CLI.

    Parameters
    ----------
    argv:
        Explicit argument list.  When ``None`` (default), ``sys.argv[1:]``
        is used.  Accepting *argv* enables deterministic testing without
        monkeypatching.

    Returns
    -------
    int
        OS process exit code.
    """
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return exit_codes.SUCCESS

    if args.command == "formats":
        return _handle_formats()

    from tubeport.config import get_settings

    configure_logging("DEBUG" if args.verbose else get_settings().log_level)
    import_format = ImportFormat(args.format)

    if args.command == "import":
        return _handle_transfer(
            Direction.IMPORT, _IMPORT_KINDS[args.kind], import_format, args.path, args.library,
        )
    return _handle_transfer(
        Direction.EXPORT, _EXPORT_KINDS[args.kind], import_format, args.path, args.library,
    )


# ---------------------------------------------------------------------------
# Script-level error boundary
# ---------------------------------------------------------------------------

def cli() -> None:
    """Top-level error boundary invoked by the console-script entry point.

    This function wraps :func:`main` and guarantees the process never
    exits with a raw stack trace during normal usage.
    """
    try:
        code = main()
        sys.exit(code)
    except TubeportError as exc:
        console.print(f"[bold red]Error:[/bold red] {exc}")
        if exc.hint:
            console.print(f"[yellow]Hint:[/yellow] {exc.hint}")
        sys.exit(exit_codes.GENERAL_ERROR)
    except KeyboardInterrupt:
        console.print("\n[yellow]Aborted by user.[/yellow]")
        sys.exit(exit_codes.KEYBOARD_INTERRUPT)
    except Exception as exc:  # noqa: BLE001
        console.print(
            "[bold red]Unexpected error.[/bold red] "
            "Please report this issue.\n"
            f"  {type(exc).__name__}: {exc}"
        )
        sys.exit(exit_codes.UNEXPECTED_ERROR)
