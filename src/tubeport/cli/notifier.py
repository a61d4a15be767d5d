"""Console implementation of :class:`~tubeport.core.protocols.Notifier`."""

from __future__ import annotations

from rich.markup import escape

from tubeport.cli.console import console
from tubeport.core import notices

_POSITIVE: frozenset[str] = frozenset(
    {notices.IMPORT_SUCCESS, notices.EXPORT_SUCCESS, notices.SUCCESS},
)


class ConsoleNotifier:
    """Prints each notice on its own line; success notices in green."""

    def notify(self, message: str) -> None:
        if message in _POSITIVE:
            console.print(f"[bold green]{escape(message)}[/bold green]")
        elif message == notices.EMPTY_LIST:
            console.print(f"[yellow]{escape(message)}[/yellow]")
        else:
            console.print(f"[bold red]Error:[/bold red] {escape(message)}")
