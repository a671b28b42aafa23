from __future__ import annotations

import io
import shutil
import sys

from rich.cells import cell_len
from rich.console import Console
from rich.table import Table

MEETING_START = "gb, off"
MEETING_END = "gb, on"

# Only these columns give way when the table is wider than the terminal;
# the first one present is shrunk.
FLEXIBLE_COLUMNS = ("title", "spec")
MIN_FLEXIBLE_WIDTH = 10
COLUMN_GAP = 2


def _terminal_width() -> int | None:
    if not sys.stdout.isatty():
        return None
    return shutil.get_terminal_size().columns


def column_widths(
    headers: list[str],
    rows: list[list[str]],
    max_widths: dict[int, int] | None = None,
    width: int | None = None,
) -> list[int]:
    """Content width of each column.

    Columns are as wide as their longest cell, clipped to ``max_widths``.
    If the result does not fit in ``width``, only the flexible column shrinks.
    """
    max_widths = max_widths or {}
    widths = []
    for i, header in enumerate(headers):
        natural = max([cell_len(header)] + [cell_len(row[i]) for row in rows])
        if i in max_widths:
            natural = min(natural, max_widths[i])
        widths.append(natural)

    names = [h.lower() for h in headers]
    flexible = next((names.index(n) for n in FLEXIBLE_COLUMNS if n in names), None)

    total = sum(widths) + COLUMN_GAP * (len(widths) - 1)
    if width is not None and flexible is not None and total > width:
        widths[flexible] = max(MIN_FLEXIBLE_WIDTH, widths[flexible] - (total - width))
    return widths


def make_table(
    headers: list[str],
    rows: list[list[str]],
    max_widths: dict[int, int] | None = None,
    width: int | None = None,
) -> str:
    width = width or _terminal_width()
    widths = column_widths(headers, rows, max_widths, width)

    table = Table(box=None, pad_edge=False, padding=(0, 1), header_style="", show_edge=False)
    for header, column_width in zip(headers, widths):
        table.add_column(header.upper(), width=column_width, no_wrap=True, overflow="ellipsis")
    for row in rows:
        table.add_row(*row)

    buf = io.StringIO()
    console = Console(
        file=buf,
        # Never narrower than the table, so rich does not drop columns.
        width=max(width or 0, sum(widths) + COLUMN_GAP * (len(widths) - 1)),
        color_system=None,
        highlight=False,
        markup=False,
        emoji=False,
    )
    console.print(table)
    return "\n".join(line.rstrip() for line in buf.getvalue().splitlines())


def list_domains(pretty: str, values) -> str:
    """Sorted, de-duplicated listing, e.g. ``Groups: apa, css``."""
    unique = sorted(set(values))
    if not unique:
        return ""
    return f"{pretty}: {', '.join(unique)}"


def invalid_statuses(rows: list[list[str]], width: int | None = None) -> str:
    if not rows:
        return ""
    table = make_table(["ID", "TITLE", "INVALID STATUS"], rows, width=width)
    return f"Requests with invalid statuses due to conflicting labels:\n\n{table}"


def meeting(blocks: list[tuple[str, list[str]]]) -> str:
    """Subtopics for pasting into IRC during a call.

    Each block is a title plus its extra lines (source, due date, URL...).
    """
    parts = [MEETING_START, ""]
    for title, lines in blocks:
        parts.append(f"subtopic: {title}")
        parts.extend(lines)
        parts.append("")
    parts.append(MEETING_END)
    return "\n".join(parts)


def agenda(items: list[tuple[str, str]]) -> str:
    return "\n".join(f"* [{title}]({url})" for title, url in items)


def join_sections(*sections: str) -> str:
    return "\n\n".join(s for s in sections if s)
