"""Tabular rendering of entries.

Incomplete entries always come first. With ``--show-all`` the completed
ones follow in their own table; without it they are not printed at all.
"""

from typing import List, Optional, Sequence, Tuple

from rich import box
from rich.console import Console
from rich.table import Table
from rich.text import Text

from .entry import Entry
from .storage import DATE_FORMAT
from .visibility import visible_indices


NumberedEntry = Tuple[int, Entry]

TAG_PLACEHOLDER = "-"
COMPLETED_TITLE = "Completed"


def wrap_text(text: str, width: int) -> List[str]:
    """Greedy word wrap.

    Words are packed onto a line while they fit within ``width``; a word
    longer than ``width`` is cut into ``width``-sized chunks.
    """
    width = max(1, width)
    lines: List[str] = []
    current = ""
    for word in text.split():
        while len(word) > width:
            if current:
                lines.append(current)
                current = ""
            lines.append(word[:width])
            word = word[width:]
        if not word:
            continue
        candidate = word if not current else f"{current} {word}"
        if len(candidate) <= width:
            current = candidate
        else:
            lines.append(current)
            current = word
    if current:
        lines.append(current)
    return lines


def number_entries(entries: Sequence[Entry], show_all: bool,
                   indices: Optional[Sequence[int]] = None) -> List[NumberedEntry]:
    """Pair each visible entry with the number ``edit``/``complete`` accept.

    Args:
        entries: The full, sorted collection
        show_all: Whether completed entries are visible
        indices: Restrict output to these absolute positions (query results);
            numbering still counts over the whole collection
    """
    numbers = {position: n for n, position in enumerate(visible_indices(entries, show_all), start=1)}
    wanted = range(len(entries)) if indices is None else indices
    return [(numbers[i], entries[i]) for i in wanted if i in numbers]


def build_entry_table(numbered: Sequence[NumberedEntry], title: Optional[str] = None,
                      description_width: int = 40, tag_width: int = 20) -> Table:
    """Build a table with number, date, wrapped description and tags."""
    table = Table(
        title=title,
        title_style="header",
        box=box.SIMPLE_HEAVY,
        border_style="border",
        header_style="header",
        show_lines=False,
    )
    table.add_column("#", justify="right", style="entry_number", no_wrap=True)
    table.add_column("Date", style="entry_date", no_wrap=True)
    table.add_column("Description", min_width=min(description_width, 12), max_width=description_width)
    table.add_column("Tags", style="tag", max_width=tag_width)

    for number, entry in numbered:
        description = "\n".join(wrap_text(entry.description, description_width))
        tags = "\n".join(wrap_text(entry.tag_string(TAG_PLACEHOLDER), tag_width))
        style = "entry_completed" if entry.is_complete() else None
        table.add_row(
            str(number),
            entry.date.strftime(DATE_FORMAT),
            Text(description, style=style or ""),
            Text(tags),
        )
    return table


def render_entries(console: Console, numbered: Sequence[NumberedEntry], show_all: bool,
                   description_width: int = 40, tag_width: int = 20) -> None:
    """Print the incomplete table and, with ``show_all``, the completed one."""
    incomplete = [(n, e) for n, e in numbered if not e.is_complete()]
    completed = [(n, e) for n, e in numbered if e.is_complete()] if show_all else []

    if not incomplete and not completed:
        console.print("[muted]No entries found.[/muted]")
        return

    if incomplete:
        console.print(build_entry_table(incomplete, None, description_width, tag_width))
    elif show_all:
        console.print("[muted]No open entries.[/muted]")

    if completed:
        console.print()
        console.print(build_entry_table(completed, COMPLETED_TITLE, description_width, tag_width))
