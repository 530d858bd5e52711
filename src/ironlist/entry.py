"""Entry data model for IronList."""

from dataclasses import dataclass, field
from datetime import date
from typing import List


COMPLETE_TAG = "complete"


def tags_equal(left: str, right: str) -> bool:
    """Compare two tags ignoring case, the way every tag lookup in IronList does."""
    return left.lower() == right.lower()


@dataclass
class Entry:
    """A single dated task line.

    Fields:
        date: Calendar day the task is filed under.
        description: Free text, already trimmed.
        tags: Labels in file order. Case is preserved, lookups ignore it,
            and duplicates are kept as written.
    """

    date: date
    description: str
    tags: List[str] = field(default_factory=list)

    def has_tag(self, tag: str) -> bool:
        """Return True if any tag matches ``tag`` case-insensitively."""
        return any(tags_equal(existing, tag) for existing in self.tags)

    def is_complete(self) -> bool:
        """Return True if the entry carries the reserved ``complete`` tag."""
        return self.has_tag(COMPLETE_TAG)

    def mark_complete(self) -> bool:
        """Add the ``complete`` tag unless it is already present.

        Returns:
            True if the tag was added, False if the entry was already complete.
        """
        if self.is_complete():
            return False
        self.tags.append(COMPLETE_TAG)
        return True

    def tag_string(self, placeholder: str = "") -> str:
        """Comma-joined tags, or ``placeholder`` when there are none."""
        return ",".join(self.tags) if self.tags else placeholder
