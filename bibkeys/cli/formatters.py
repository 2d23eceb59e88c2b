"""Rich formatting for token sequences and resolved patterns."""

from collections.abc import Hashable, Iterable

from rich.box import ROUNDED
from rich.markup import escape
from rich.table import Table

from bibkeys.patterns import PatternTable, ResolutionLevel, TokenSequence

LEVEL_STYLES = {
    ResolutionLevel.OVERRIDE: "green",
    ResolutionLevel.DEFAULT: "yellow",
    ResolutionLevel.FALLBACK: "dim",
}


def format_tokens(tokens: TokenSequence) -> str:
    """Render tokens inline, fields highlighted.

    The first element (the original pattern) is skipped.
    """
    parts = []
    inside = False
    for token in tokens[1:]:
        if token == "[":
            inside = True
            parts.append("[dim]\\[[/dim]")
        elif token == "]":
            inside = False
            parts.append("[dim]][/dim]")
        elif inside:
            parts.append(f"[cyan]{escape(token)}[/cyan]")
        else:
            parts.append(escape(token))
    return "".join(parts)


def format_token_table(tokens: TokenSequence, title: str | None = None) -> Table:
    """Format a token sequence as a numbered Rich table."""
    table = Table(
        title=title,
        box=ROUNDED,
        show_header=True,
        header_style="bold cyan",
        title_style="bold",
    )
    table.add_column("#", style="dim", width=4, justify="right")
    table.add_column("Token")

    for index, token in enumerate(tokens):
        table.add_row(str(index), escape(repr(token)))

    return table


def format_resolution_table(
    patterns: PatternTable,
    entry_types: Iterable[Hashable],
    title: str | None = None,
) -> Table:
    """Format the resolved pattern of each entry type as a Rich table."""
    table = Table(
        title=title,
        box=ROUNDED,
        show_header=True,
        header_style="bold cyan",
        title_style="bold",
        row_styles=["none", "dim"],
    )
    table.add_column("Type", style="magenta", width=14)
    table.add_column("Pattern")
    table.add_column("Source", width=18)

    for entry_type in entry_types:
        resolution = patterns.explain(entry_type)
        style = LEVEL_STYLES[resolution.level]
        source = f"[{style}]{resolution.table} {resolution.level.name.lower()}[/{style}]"
        table.add_row(str(entry_type), escape(resolution.pattern), source)

    return table
