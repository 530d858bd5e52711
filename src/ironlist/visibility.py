"""Mapping between the numbers users see and positions in the stored list.

Numbers printed by ``list`` and ``query`` count only the entries visible
under the current ``--show-all`` setting, so ``edit`` and ``complete`` must
rebuild the same visibility before touching anything.
"""

from typing import List, Sequence, Tuple

from .entry import Entry


class IndexOutOfRangeError(IndexError):
    """Raised when a visible number does not address any entry."""

    def __init__(self, index: int, visible_count: int):
        self.index = index
        self.visible_count = visible_count
        super().__init__(
            f"Index out of range: {index} (there are {visible_count} visible entries)"
        )


def visible_indices(entries: Sequence[Entry], show_all: bool) -> List[int]:
    """Absolute positions of the entries a user currently sees, in order."""
    return [i for i, entry in enumerate(entries) if show_all or not entry.is_complete()]


def resolve_visible_index(entries: Sequence[Entry], index: int, show_all: bool) -> int:
    """Translate a 1-based visible number into an absolute position.

    Raises:
        IndexOutOfRangeError: if ``index`` is 0 or past the visible count.
    """
    visible = visible_indices(entries, show_all)
    if index < 1 or index > len(visible):
        raise IndexOutOfRangeError(index, len(visible))
    return visible[index - 1]


def replace_visible(entries: List[Entry], index: int, replacement: Entry, show_all: bool) -> int:
    """Swap in ``replacement`` at visible number ``index``; returns the absolute position."""
    position = resolve_visible_index(entries, index, show_all)
    entries[position] = replacement
    return position


def complete_visible(entries: List[Entry], index: int, show_all: bool) -> Tuple[int, bool]:
    """Tag the entry at visible number ``index`` as complete.

    Returns:
        The absolute position and whether the tag was newly added.
    """
    position = resolve_visible_index(entries, index, show_all)
    return position, entries[position].mark_complete()
