"""
CLI utility helpers: consoles, error exits and output formatting.
"""

from __future__ import annotations

import json
from collections.abc import Sequence
from dataclasses import asdict, is_dataclass
from typing import Any, NoReturn

import typer
from rich.console import Console
from rich.table import Table

from hearing_spine.core.errors import HearingSpineError

console = Console()
err_console = Console(stderr=True)


def _to_dict(obj: Any) -> Any:
    if hasattr(obj, "to_dict"):
        return obj.to_dict()
    if is_dataclass(obj) and not isinstance(obj, type):
        return asdict(obj)
    return obj


def print_json(payload: Any) -> None:
    if isinstance(payload, list | tuple):
        payload = [_to_dict(item) for item in payload]
    else:
        payload = _to_dict(payload)
    text = json.dumps(payload, default=str, ensure_ascii=False, indent=2)
    # Piped output stays parseable; rich folds long lines to the console width
    if console.is_terminal:
        console.print_json(text)
    else:
        typer.echo(text)


def fail(error: HearingSpineError | str) -> NoReturn:
    """Print an error to stderr and exit with status 1."""
    message = error.message if isinstance(error, HearingSpineError) else error
    err_console.print(f"[bold red]Error:[/bold red] {message}", markup=True, highlight=False)
    raise typer.Exit(code=1)


def print_records(records: Sequence[dict[str, Any]], title: str = "") -> None:
    """Render converted records as a table, one column per field."""
    if not records:
        console.print(f"[dim]{title or 'Records'}: no rows[/dim]")
        return

    table = Table(title=title or None, show_lines=False)
    columns = list(records[0].keys())
    for column in columns:
        table.add_column(column)
    for record in records:
        table.add_row(*(str(record.get(column, "")) for column in columns))
    console.print(table)


__all__ = ["console", "err_console", "fail", "print_json", "print_records"]
