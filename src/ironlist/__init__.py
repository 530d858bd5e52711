"""IronList - a task list kept in a flat, tab-separated text file."""

__version__ = "0.2.0"
__author__ = "IronList Team"

from .entry import Entry, COMPLETE_TAG
from .storage import EntryLineFormat, MalformedLineError, Storage
from .query_engine import EntryQuery
from .visibility import IndexOutOfRangeError

__all__ = [
    "Entry",
    "COMPLETE_TAG",
    "EntryLineFormat",
    "MalformedLineError",
    "Storage",
    "EntryQuery",
    "IndexOutOfRangeError",
    "__version__",
]
