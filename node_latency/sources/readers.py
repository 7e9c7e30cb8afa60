"""
Cached readers for log files and the systemd journal.

Readers load the whole log into memory on the first read and keep it until
clear_cache() is called. A reader bound to a rotated file keeps returning the
cached bytes even if the file is rotated again; create a new reader or clear
the cache to see fresh data.
"""

import gzip
import logging
import re
import zlib
from abc import ABC, abstractmethod
from typing import Callable, List, Optional, Pattern, Union

from ..errors import NoMatchError, SourceUnavailableError
from .base import Event, FindResult, Source, require_match_fn, select_matches
from .rotation import resolve_newest_log_file, resolve_oldest_log_file
from .timestamps import parse_timestamp

logger = logging.getLogger("node_latency.sources.readers")

COMPRESSED_SUFFIXES = (".gz",)


class LogReader(ABC):
    """Shared caching and regex search for log-backed sources.

    Subclasses decide which rotation to read and how raw bytes are acquired.
    """

    def __init__(
        self,
        path: str,
        timestamp_pattern: Union[str, Pattern[str]],
        timestamp_layout: str,
        glob: bool = False,
    ):
        self.path = path
        self.glob = glob
        self.timestamp_pattern = re.compile(timestamp_pattern) if isinstance(timestamp_pattern, str) else timestamp_pattern
        self.timestamp_layout = timestamp_layout
        self._cache: Optional[bytes] = None

    def clear_cache(self) -> None:
        """Clear the cached log contents."""
        self._cache = None

    def resolve_path(self) -> Optional[str]:
        """Return the concrete file to read, resolving the glob when configured."""
        return self.path

    @abstractmethod
    def _load(self, resolved_path: str) -> bytes:
        """Acquire the raw log bytes for a resolved path."""

    def read(self) -> bytes:
        """Return the full log contents, reading and caching them on first use.

        Raises:
            SourceUnavailableError: If the log cannot be opened or decoded.
                Nothing is cached in that case.
        """
        if self._cache is not None:
            return self._cache
        resolved_path = self.resolve_path()
        if not resolved_path:
            raise SourceUnavailableError(f"no log files found matching {self.path}")
        data = self._load(resolved_path)
        logger.debug(f"Cached {len(data)} bytes from {resolved_path}")
        self._cache = data
        return data

    def find(self, pattern: Union[str, Pattern[str]]) -> List[str]:
        """Return every non-overlapping match of the pattern, in file order.

        Raises:
            NoMatchError: If the pattern matches nothing in the log.
        """
        regex = re.compile(pattern) if isinstance(pattern, str) else pattern
        text = self.read().decode("utf-8", errors="replace")
        lines = [m.group(0) for m in regex.finditer(text)]
        if not lines:
            raise NoMatchError(self.path, regex.pattern)
        return lines

    def parse_timestamp(self, line: str):
        """Parse the timestamp of a matched line using this reader's pattern and layout."""
        return parse_timestamp(line, self.timestamp_pattern, self.timestamp_layout)


class FileLogReader(LogReader):
    """Reads plain or gzip-compressed text logs.

    With a glob path the oldest rotation is read, since it holds the earliest
    boot evidence.
    """

    def resolve_path(self) -> Optional[str]:
        if self.glob:
            return resolve_oldest_log_file(self.path)
        return self.path

    def _load(self, resolved_path: str) -> bytes:
        try:
            if resolved_path.endswith(COMPRESSED_SUFFIXES):
                with gzip.open(resolved_path, "rb") as f:
                    return f.read()
            with open(resolved_path, "rb") as f:
                return f.read()
        except (OSError, EOFError, zlib.error) as e:
            raise SourceUnavailableError(f"unable to read log file {resolved_path}: {e}") from e


class JournalReader(LogReader):
    """Reads the systemd journal through a decoder callable.

    With a glob path the newest rotation is read: the live journal is the
    relevant evidence.
    """

    def __init__(
        self,
        path: str,
        timestamp_pattern: Union[str, Pattern[str]],
        timestamp_layout: str,
        decoder: Callable[[str], bytes],
        glob: bool = False,
    ):
        super().__init__(path, timestamp_pattern, timestamp_layout, glob=glob)
        self.decoder = decoder

    def resolve_path(self) -> Optional[str]:
        if self.glob:
            return resolve_newest_log_file(self.path)
        return self.path

    def _load(self, resolved_path: str) -> bytes:
        try:
            return self.decoder(resolved_path)
        except SourceUnavailableError:
            raise
        except Exception as e:
            raise SourceUnavailableError(f"unable to open journal at {resolved_path}: {e}") from e


def find_in_log(source: Source, reader: LogReader, event: Event) -> List[FindResult]:
    """Run an event's match function over a cached log and select the results.

    Results are sorted ascending by timestamp before selection, so out of
    order log lines still select correctly. A line whose timestamp cannot be
    parsed aborts the whole search.
    """
    match_fn = require_match_fn(event)
    log_bytes = reader.read()
    matched_lines = match_fn(source, log_bytes)

    results = []
    for line in matched_lines:
        ts = reader.parse_timestamp(line)
        comment = event.comment_fn(line) if event.comment_fn else ""
        results.append(FindResult(line=line, timestamp=ts, comment=comment))

    results.sort(key=lambda r: r.timestamp)
    logger.debug(f"{event.name}: {len(results)} matches in {source}")
    return select_matches(results, event.match_selector)
