"""
Evidence sources for node latency timings.
"""

from .base import (
    CommentFunc,
    Event,
    FindFunc,
    FindResult,
    MatchSelector,
    Source,
    Timing,
    comment_matched_line,
    require_match_fn,
    select_matches,
)
from .journal import JournalSource, read_journal
from .k8s import K8sSource, new_core_v1_api
from .messages import MessagesSource
from .readers import FileLogReader, JournalReader, LogReader, find_in_log
from .rotation import resolve_newest_log_file, resolve_oldest_log_file, sorted_asc_log_files
from .timestamps import parse_timestamp

__all__ = [
    # Data model
    "Source",
    "Event",
    "FindResult",
    "Timing",
    "MatchSelector",
    "FindFunc",
    "CommentFunc",
    "select_matches",
    "comment_matched_line",
    "require_match_fn",
    # Readers
    "LogReader",
    "FileLogReader",
    "JournalReader",
    "find_in_log",
    "resolve_oldest_log_file",
    "resolve_newest_log_file",
    "sorted_asc_log_files",
    "parse_timestamp",
    # Sources
    "JournalSource",
    "read_journal",
    "MessagesSource",
    "K8sSource",
    "new_core_v1_api",
]
