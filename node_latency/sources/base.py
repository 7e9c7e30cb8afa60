"""
Core data model shared by every evidence source.

A Source is anything that can be searched for timestamped evidence of a node
lifecycle event: a log file, the systemd journal, or the Kubernetes API.
An Event binds a match function (and optionally a comment function) to a
Source, plus a selection policy that decides which matches are kept.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from enum import Enum
from typing import Any, Callable, Dict, List, Optional


class MatchSelector(str, Enum):
    """How multiple matches for one event collapse into the results used for timing."""

    FIRST = "first"
    LAST = "last"
    ALL = "all"


# A match function receives the source and the raw evidence bytes (None for API
# sources) and returns the matched lines, in order.
FindFunc = Callable[["Source", Optional[bytes]], List[str]]
CommentFunc = Callable[[str], str]


@dataclass
class FindResult:
    """A single matched occurrence of an event in a source."""

    line: str
    timestamp: Optional[datetime] = None
    comment: str = ""
    err: Optional[Exception] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to JSON-serializable dictionary."""
        return {
            "line": self.line,
            "timestamp": self.timestamp.isoformat() if self.timestamp else None,
            "comment": self.comment,
            "error": str(self.err) if self.err else None,
        }


class Source(ABC):
    """A source of events which have a timestamp associated with them."""

    @abstractmethod
    def find(self, event: "Event") -> List[FindResult]:
        """Search the source with the event's match function and return the selected results."""

    @abstractmethod
    def name(self) -> str:
        """Stable identifier for the kind of source, e.g. "Journal"."""

    @abstractmethod
    def clear_cache(self) -> None:
        """Drop any cached evidence. A no-op for sources that do not cache."""

    @abstractmethod
    def __str__(self) -> str:
        """Human friendly identity of the source, usually the log path."""


@dataclass
class Event:
    """Defines what is being timed from a specific source."""

    name: str
    metric: str
    match_selector: MatchSelector = MatchSelector.FIRST
    terminal: bool = False
    src_name: str = ""
    src: Optional[Source] = field(default=None, repr=False, compare=False)
    match_fn: Optional[FindFunc] = field(default=None, repr=False, compare=False)
    comment_fn: Optional[CommentFunc] = field(default=None, repr=False, compare=False)

    def __post_init__(self):
        self.match_selector = MatchSelector(self.match_selector)
        if self.src is not None and not self.src_name:
            self.src_name = self.src.name()

    def find(self) -> List[FindResult]:
        """Search the bound source for this event."""
        if self.src is None:
            raise ValueError(f"event {self.name!r} is not bound to a source")
        return self.src.find(self)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to JSON-serializable dictionary. The bound source and functions are omitted."""
        return {
            "name": self.name,
            "metric": self.metric,
            "matchSelector": self.match_selector.value,
            "terminal": self.terminal,
            "src": self.src_name,
        }


@dataclass
class Timing:
    """A specific instance of an event timing."""

    event: Event
    timestamp: Optional[datetime] = None
    t: timedelta = timedelta(0)
    comment: str = ""
    error: Optional[Exception] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to JSON-serializable dictionary."""
        return {
            "event": self.event.to_dict(),
            "timestamp": self.timestamp.isoformat() if self.timestamp else None,
            "seconds": self.t.total_seconds(),
            "comment": self.comment,
            "error": str(self.error) if self.error else None,
        }


def require_match_fn(event: Event) -> FindFunc:
    """Return the event's match function, failing loudly when it was never set."""
    if event.match_fn is None:
        raise ValueError(f"event {event.name!r} has no match function")
    return event.match_fn


def select_matches(results: List[FindResult], match_selector: MatchSelector | str) -> List[FindResult]:
    """Filter raw results based on the provided match selector.

    Empty input always yields an empty list; emptiness is reported earlier by
    the source as NoMatchError or ObjectNotFoundError.
    """
    if not results:
        return []
    selector = MatchSelector(match_selector)
    if selector is MatchSelector.FIRST:
        return [results[0]]
    if selector is MatchSelector.LAST:
        return [results[-1]]
    return list(results)


def comment_matched_line() -> CommentFunc:
    """Return a comment function that uses the matched line itself as the comment."""

    def _comment(matched_line: str) -> str:
        return matched_line

    return _comment
