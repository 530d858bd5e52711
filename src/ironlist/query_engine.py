"""
Query engine for IronList

Date-range and tag-set predicates over entries. Filters are plain callables
applied one after another; an unconstrained filter is the identity.
"""

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Callable, Iterable, List, Optional, Sequence

from .entry import Entry, tags_equal
from .storage import parse_date


logger = logging.getLogger(__name__)


class QueryError(ValueError):
    """Raised when query criteria cannot be interpreted"""


@dataclass(frozen=True)
class DateRangeFilter:
    """Keeps entries with ``start <= date <= end``; a missing bound is open"""
    start: Optional[date] = None
    end: Optional[date] = None

    def __call__(self, entry: Entry) -> bool:
        if self.start is not None and entry.date < self.start:
            return False
        if self.end is not None and entry.date > self.end:
            return False
        return True


@dataclass(frozen=True)
class TagFilter:
    """Matches entry tags against a query set, ignoring case.

    With ``match_any`` an entry needs one matching tag (OR); otherwise it
    must carry every query tag (AND).
    """
    tags: Sequence[str] = ()
    match_any: bool = False

    def __call__(self, entry: Entry) -> bool:
        if not self.tags:
            return True
        check = any if self.match_any else all
        return check(
            any(tags_equal(entry_tag, query_tag) for entry_tag in entry.tags)
            for query_tag in self.tags
        )


def filter_by_date_range(entries: Iterable[Entry], start: Optional[date] = None,
                         end: Optional[date] = None) -> List[Entry]:
    """Entries dated within ``[start, end]``"""
    predicate = DateRangeFilter(start, end)
    return [e for e in entries if predicate(e)]


def filter_by_tags(entries: Iterable[Entry], tags: Sequence[str],
                   match_any: bool = False) -> List[Entry]:
    """Entries whose tags satisfy the query set"""
    predicate = TagFilter(tuple(tags), match_any)
    return [e for e in entries if predicate(e)]


def _parse_query_date(value: Optional[str], option: str) -> Optional[date]:
    if value is None:
        return None
    parsed = parse_date(value)
    if parsed is None:
        raise QueryError(f"Invalid date for {option}: '{value}'; expected YYYY-MM-DD")
    return parsed


@dataclass
class EntryQuery:
    """A date range plus a tag set, applied in that order"""
    start: Optional[date] = None
    end: Optional[date] = None
    tags: List[str] = field(default_factory=list)
    match_any: bool = False

    @classmethod
    def build(cls, from_date: Optional[str] = None, to_date: Optional[str] = None,
              exact_date: Optional[str] = None, tags: Sequence[str] = (),
              match_any: bool = False) -> "EntryQuery":
        """Create a query from raw option strings.

        An exact date sets both bounds and overrides ``from_date``/``to_date``.
        """
        if exact_date is not None:
            day = _parse_query_date(exact_date, "--date")
            start = end = day
        else:
            start = _parse_query_date(from_date, "--from")
            end = _parse_query_date(to_date, "--to")

        cleaned = [t.strip() for t in tags if t and t.strip()]
        return cls(start=start, end=end, tags=cleaned, match_any=match_any)

    def is_empty(self) -> bool:
        return self.start is None and self.end is None and not self.tags

    def predicates(self) -> List[Callable[[Entry], bool]]:
        return [DateRangeFilter(self.start, self.end), TagFilter(tuple(self.tags), self.match_any)]

    def matches(self, entry: Entry) -> bool:
        return all(predicate(entry) for predicate in self.predicates())

    def apply(self, entries: Iterable[Entry]) -> List[Entry]:
        """Filter ``entries`` by date first, then by tags"""
        result = filter_by_date_range(entries, self.start, self.end)
        result = filter_by_tags(result, self.tags, self.match_any)
        logger.debug(f"Query {self} matched {len(result)} entries")
        return result

    def matching_indices(self, entries: Sequence[Entry]) -> List[int]:
        """Positions in ``entries`` of the entries this query keeps"""
        return [i for i, entry in enumerate(entries) if self.matches(entry)]
