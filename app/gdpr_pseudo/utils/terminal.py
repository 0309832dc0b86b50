# ------------------------------------------------------------------------------------------------ #
# Copyright (c) 2026 Carmenda. All rights reserved.                                                #
# This program is distributed under the terms of the GNU General Public License: GPL-3.0-or-later  #
# ------------------------------------------------------------------------------------------------ #

"""Terminal utility functions using Rich library."""

from __future__ import annotations

import polars as pl
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text


def log_block(title: str, content: dict, console: Console | None = None, style: str = 'white') -> None:
    """Print content in a Rich Panel for improved readability.

    Args:
        title: Title of the panel
        content: Dictionary with section names as keys and content as values
        console: Console to print to, a new one when omitted
        style: Border style of the panel

    """
    console = console or Console()
    panel_content = Text()

    for i, (section_name, text) in enumerate(content.items()):
        panel_content.append(f'{section_name}: ', style='bold cyan')

        if isinstance(text, Text):
            panel_content.append(text)
        else:
            panel_content.append(str(text))

        if i < len(content) - 1:
            panel_content.append('\n')

    panel = Panel(panel_content, title=f'[bold]{title}[/bold]', border_style=style, padding=(1, 2))

    console.print()
    console.print(panel)
    console.print()


def print_preview(df: pl.DataFrame, title: str, rows: int = 10, console: Console | None = None) -> None:
    """Print the first rows of a DataFrame as a Rich table."""
    console = console or Console()
    table = Table(title=title, show_lines=False)

    for column in df.columns:
        table.add_column(column, overflow='fold')

    for row in df.head(rows).iter_rows():
        table.add_row(*('' if value is None else str(value) for value in row))

    console.print(table)
