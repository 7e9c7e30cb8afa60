"""
Latency timing source for the systemd journal (/var/log/journal/*).
"""

import logging
import os
import subprocess
from typing import Callable, List, Optional, Pattern, Union

from ..errors import SourceUnavailableError
from .base import FindFunc, FindResult, Source
from .readers import JournalReader, find_in_log

logger = logging.getLogger("node_latency.sources.journal")

NAME = "Journal"
DEFAULT_PATH = "/var/log/journal/*"
# journalctl -o short-iso, e.g. 2024-03-01T17:23:34+0000 (older systemd) or +00:00
TIMESTAMP_FORMAT = r"[0-9]{4}-[0-9]{2}-[0-9]{2}T[0-9]{2}:[0-9]{2}:[0-9]{2}[+-][0-9]{2}:?[0-9]{2}"
TIMESTAMP_LAYOUT = "%Y-%m-%dT%H:%M:%S%z"


def read_journal(path: str, journalctl: str = "journalctl") -> bytes:
    """Decode a binary journal file or directory into short-iso text.

    Args:
        path: A journal file, or a directory such as /var/log/journal/<machine-id>.
        journalctl: The journalctl binary to run.

    Returns:
        The exported journal as bytes, one entry per line.

    Raises:
        SourceUnavailableError: If journalctl is missing or fails.
    """
    target = f"--directory={path}" if os.path.isdir(path) else f"--file={path}"
    cmd = [journalctl, "--no-pager", "-o", "short-iso", target]
    logger.debug(f"Running {' '.join(cmd)}")
    try:
        result = subprocess.run(cmd, capture_output=True, check=False)
    except OSError as e:
        raise SourceUnavailableError(f"unable to run {journalctl} for journal at {path}: {e}") from e
    if result.returncode != 0:
        stderr = result.stderr.decode("utf-8", errors="replace").strip()
        raise SourceUnavailableError(f"unable to read journal at {path}: {journalctl} exited {result.returncode}: {stderr}")
    return result.stdout


class JournalSource(Source):
    """The systemd journal log source."""

    def __init__(self, path: str = DEFAULT_PATH, decoder: Optional[Callable[[str], bytes]] = None):
        self.journal_reader = JournalReader(
            path,
            TIMESTAMP_FORMAT,
            TIMESTAMP_LAYOUT,
            decoder=decoder or read_journal,
            glob=True,
        )

    def clear_cache(self) -> None:
        self.journal_reader.clear_cache()

    def __str__(self) -> str:
        return self.journal_reader.path

    def name(self) -> str:
        return NAME

    def find_by_regex(self, pattern: Union[str, Pattern[str]]) -> FindFunc:
        """Return a match function that searches the journal for a regex."""

        def _find(_source: Source, _log: Optional[bytes]) -> List[str]:
            return self.journal_reader.find(pattern)

        return _find

    def find(self, event) -> List[FindResult]:
        return find_in_log(self, self.journal_reader, event)
