"""Operator-facing reporting helpers with rich or plain formatting."""

from __future__ import annotations

from typing import Any, Callable, Protocol, Sequence, TypeAlias

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

Reporter = Callable[[str], None]
Renderable: TypeAlias = Any


class PanelPrinter(Protocol):
    def __call__(self, content: Renderable, title: str | None = None) -> None: ...


class TableBuilder(Protocol):
    def __call__(self, columns: Sequence[str], rows: Sequence[Sequence[str]], title: str | None = None) -> object: ...


def show_table(
    paneler: PanelPrinter,
    table_builder: TableBuilder,
    *,
    title: str | None,
    columns: Sequence[str],
    rows: Sequence[Sequence[str]],
) -> None:
    paneler(table_builder(columns, rows, title=title))


def _plain_reporter(message: str) -> None:
    print(message)


def _has_markup(message: str) -> bool:
    return "[/" in message


def make_reporter(use_rich: bool = True) -> tuple[Reporter, PanelPrinter | None, TableBuilder | None]:
    if not use_rich:
        return _plain_reporter, None, None

    console = Console()

    def reporter(message: str) -> None:
        console.print(message if _has_markup(message) else escape(message))

    def panel(content: Renderable, title: str | None = None) -> None:
        console.print(Panel(content, title=title, box=box.ROUNDED))

    def table_builder(columns: Sequence[str], rows: Sequence[Sequence[str]], title: str | None = None) -> object:
        table = Table(title=title, box=box.ROUNDED)
        for column in columns:
            table.add_column(column)
        for row in rows:
            table.add_row(*row)
        return table

    return reporter, panel, table_builder
