"""node_latency - node bootstrap latency from logs, the journal and the Kubernetes API."""

from .catalog import build_sources, load_catalog, parse_catalog
from .config import DEFAULT_CATALOG_PATH, NodeLatencyConfig
from .errors import (
    ConditionNotFoundError,
    NoMatchError,
    ObjectNotFoundError,
    SourceError,
    SourceUnavailableError,
    TimestampNotFoundError,
    TimestampParseError,
)
from .sources import Event, FindResult, MatchSelector, Source, Timing, select_matches
from .timeline import collect_timings, terminal_reached

__all__ = [
    "build_sources",
    "load_catalog",
    "parse_catalog",
    "DEFAULT_CATALOG_PATH",
    "NodeLatencyConfig",
    "SourceError",
    "SourceUnavailableError",
    "NoMatchError",
    "TimestampNotFoundError",
    "TimestampParseError",
    "ObjectNotFoundError",
    "ConditionNotFoundError",
    "Event",
    "FindResult",
    "MatchSelector",
    "Source",
    "Timing",
    "select_matches",
    "collect_timings",
    "terminal_reached",
]
