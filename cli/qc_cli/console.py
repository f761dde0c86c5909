from __future__ import annotations

from typing import Any

from rich.console import Console
from rich.markup import escape

console = Console()

EMPTY = "-"


def print_json(data) -> None:
    console.print_json(data=data)


def info(msg: str) -> None:
    console.print(f"[bold cyan]•[/] {escape(msg)}")


def ok(msg: str) -> None:
    console.print(f"[bold green]OK[/] {msg}")


def warn(msg: str) -> None:
    console.print(f"[bold yellow]WARN[/] {escape(msg)}")


def err(msg: str) -> None:
    console.print(f"[bold red]ERR[/] {escape(msg)}")


def hint(command: str) -> None:
    """Suggest the next ``qc`` command to run."""
    console.print(f"[dim]Run:[/] [bold]{escape(command)}[/]")


def field(label: str, value: Any) -> None:
    """One ``label: value`` line of a record detail view; empty values render as ``-``."""
    shown = EMPTY if value is None or value == "" else str(value)
    console.print(f"  {label}: {escape(shown)}")


def rule(title: str) -> None:
    console.rule(f"[bold]{escape(title)}[/]")
