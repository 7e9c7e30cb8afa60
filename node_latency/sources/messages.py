"""
Latency timing source for syslog style logs (/var/log/messages*).
"""

from typing import List, Optional, Pattern, Union

from .base import FindFunc, FindResult, Source
from .readers import FileLogReader, find_in_log

NAME = "Messages"
DEFAULT_PATH = "/var/log/messages*"
# e.g. "Jan  2 15:04:05"; syslog omits the year, so the layout expects one appended
TIMESTAMP_FORMAT = r"[A-Z][a-z]{2}\s+[0-9]{1,2}\s+[0-9]{2}:[0-9]{2}:[0-9]{2}"
TIMESTAMP_LAYOUT = "%b %d %H:%M:%S %Y"


class MessagesSource(Source):
    """The /var/log/messages log source. Rotated and gzip-compressed copies are supported."""

    def __init__(self, path: str = DEFAULT_PATH, glob: bool = True):
        self.log_reader = FileLogReader(path, TIMESTAMP_FORMAT, TIMESTAMP_LAYOUT, glob=glob)

    def clear_cache(self) -> None:
        self.log_reader.clear_cache()

    def __str__(self) -> str:
        return self.log_reader.path

    def name(self) -> str:
        return NAME

    def find_by_regex(self, pattern: Union[str, Pattern[str]]) -> FindFunc:
        """Return a match function that searches the log for a regex."""

        def _find(_source: Source, _log: Optional[bytes]) -> List[str]:
            return self.log_reader.find(pattern)

        return _find

    def find(self, event) -> List[FindResult]:
        return find_in_log(self, self.log_reader, event)
