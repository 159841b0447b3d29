# ragsync/cli/ui.py
"""
Shared UI helpers for CLI commands.

Usage:
    from ragsync.cli.ui import ui, console

    ui.header("Sync")
    ui.success("Done!")
"""

from __future__ import annotations

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

console = Console()


class UI:
    """Consistent styling for command output."""

    def print(self, msg: str, style: str = "") -> None:
        if style:
            console.print(f"[{style}]{msg}[/{style}]")
        else:
            console.print(msg)

    def header(self, title: str, subtitle: str = "") -> None:
        """Print a command header in a fitted box."""
        if subtitle:
            content = f"[bold]{title}[/bold]\n[dim]{subtitle}[/dim]"
        else:
            content = f"[bold]{title}[/bold]"
        console.print(Panel.fit(content, border_style="blue"))

    def section(self, title: str) -> None:
        console.print(f"\n[bold cyan]{title}[/bold cyan]")

    def success(self, msg: str) -> None:
        console.print(f"[green]✓[/green] {msg}")

    def error(self, msg: str) -> None:
        console.print(f"[red]✗[/red] {msg}")

    def warning(self, msg: str, detail: str = "") -> None:
        detail_str = f" [dim]({detail})[/dim]" if detail else ""
        console.print(f"[yellow]⚠[/yellow] {msg}{detail_str}")

    def info(self, msg: str) -> None:
        console.print(f"[dim]{msg}[/dim]")

    def table(
        self,
        columns: list[str],
        rows: list[list[str]],
        title: str = "",
        right_align: tuple[int, ...] = (),
    ) -> None:
        """Print rows as a table; the first column is highlighted."""
        table = Table(show_header=True, header_style="bold", title=title or None)
        for i, name in enumerate(columns):
            justify = "right" if i in right_align else "left"
            table.add_column(name, style="cyan" if i == 0 else None, justify=justify)
        for row in rows:
            table.add_row(*row)
        console.print(table)

    def summary_panel(self, content: str, title: str = "", style: str = "green") -> None:
        console.print(Panel(content, title=title, border_style=style))


ui = UI()

__all__ = ["UI", "ui", "console"]
