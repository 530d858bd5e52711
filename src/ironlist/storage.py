"""Storage layer for IronList: the line codec and the flat-file entry store."""

import logging
import os
import re
import shutil
import tempfile
from datetime import date, datetime
from pathlib import Path
from typing import List, Optional, Tuple, Union

from .entry import Entry


logger = logging.getLogger(__name__)

DATE_FORMAT = "%Y-%m-%d"
DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
SPACE_SEPARATOR_RUN = 4
EXPECTED_LINE_HINT = "YYYY-MM-DD    Description    tag1,tag2"


class MalformedLineError(ValueError):
    """Raised when a raw line cannot be turned into an Entry."""

    def __init__(self, line: str, message: Optional[str] = None):
        self.line = line
        super().__init__(message or f"Malformed line; expected: {EXPECTED_LINE_HINT}")


def split_fields(line: str) -> List[str]:
    """Split a raw line into trimmed, non-empty fields.

    A tab always separates fields. A run of four or more spaces also does;
    shorter runs are part of the field text.
    """
    fields: List[str] = []
    start = 0
    i = 0
    length = len(line)
    while i < length:
        char = line[i]
        if char == "\t":
            fields.append(line[start:i].strip())
            i += 1
            start = i
        elif char == " ":
            j = i
            while j < length and line[j] == " ":
                j += 1
            if j - i >= SPACE_SEPARATOR_RUN:
                fields.append(line[start:i].strip())
                start = j
            i = j
        else:
            i += 1
    fields.append(line[start:].strip())
    return [f for f in fields if f]


def parse_date(value: str) -> Optional[date]:
    """Parse a zero-padded ``YYYY-MM-DD`` string, or return None."""
    value = value.strip()
    if not DATE_RE.match(value):
        return None
    try:
        return datetime.strptime(value, DATE_FORMAT).date()
    except ValueError:
        return None


def parse_tags(field: str) -> List[str]:
    """Split a comma-separated tag field, dropping empty pieces."""
    return [piece.strip() for piece in field.split(",") if piece.strip()]


class EntryLineFormat:
    """Handles conversion between Entry objects and lines of the backing file."""

    @staticmethod
    def from_line(line: str) -> Optional[Entry]:
        """Parse a raw line into an Entry, or return None if it is malformed."""
        fields = split_fields(line.rstrip("\r\n"))
        if len(fields) < 2:
            return None

        entry_date = parse_date(fields[0])
        if entry_date is None:
            return None

        tags = parse_tags(fields[2]) if len(fields) >= 3 else []
        return Entry(date=entry_date, description=fields[1], tags=tags)

    @staticmethod
    def to_line(entry: Entry) -> str:
        """Render the canonical tab-separated form of an entry."""
        line = f"{entry.date.strftime(DATE_FORMAT)}\t{entry.description}"
        if entry.tags:
            line += f"\t{','.join(entry.tags)}"
        return line

    @classmethod
    def parse_or_raise(cls, line: str) -> Entry:
        """Like ``from_line`` but raises MalformedLineError on rejection."""
        entry = cls.from_line(line)
        if entry is None:
            raise MalformedLineError(line)
        return entry


def sort_entries(entries: List[Entry]) -> List[Entry]:
    """Return entries ordered by date; same-day entries keep file order."""
    return sorted(entries, key=lambda e: e.date)


class Storage:
    """Reads and writes the flat task file."""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path).expanduser()
        self.skipped: List[Tuple[int, str]] = []

    def exists(self) -> bool:
        return self.path.exists()

    def load(self) -> List[Entry]:
        """Read every parseable entry in file order.

        Malformed or undecodable lines are logged and skipped; a missing
        file raises FileNotFoundError.
        """
        entries: List[Entry] = []
        self.skipped = []
        with open(self.path, "rb") as f:
            for line_number, raw in enumerate(f, start=1):
                try:
                    line = raw.decode("utf-8").rstrip("\r\n")
                except UnicodeDecodeError as e:
                    logger.error(f"Error reading line {line_number}: {e}")
                    self.skipped.append((line_number, raw.decode("utf-8", errors="replace").rstrip("\r\n")))
                    continue

                entry = EntryLineFormat.from_line(line)
                if entry is None:
                    logger.warning(f"Skipping malformed line {line_number}: {line}")
                    self.skipped.append((line_number, line))
                    continue
                entries.append(entry)

        logger.debug(f"Loaded {len(entries)} entries from {self.path}")
        return entries

    def load_sorted(self) -> List[Entry]:
        """Load entries and sort them by date."""
        return sort_entries(self.load())

    def append(self, line: str) -> Entry:
        """Validate ``line`` and append its normalized form to the file."""
        entry = EntryLineFormat.parse_or_raise(line)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "a", encoding="utf-8", newline="\n") as f:
            f.write(EntryLineFormat.to_line(entry) + "\n")
        logger.info(f"Appended entry dated {entry.date} to {self.path}")
        return entry

    def rewrite(self, entries: List[Entry]) -> None:
        """Replace the file contents with ``entries`` in their current order.

        The new content is written to a sibling temp file and renamed over
        the original.
        """
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{self.path.name}.", suffix=".tmp", dir=str(self.path.parent)
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8", newline="\n") as f:
                for entry in entries:
                    f.write(EntryLineFormat.to_line(entry) + "\n")
            if self.path.exists():
                shutil.copymode(self.path, tmp_name)
            os.replace(tmp_name, self.path)
        except BaseException:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise
        logger.info(f"Rewrote {len(entries)} entries to {self.path}")
