"""
Log rotation resolution.

Rotated logs (messages, messages-20240101, messages.1.gz, ...) do not sort
chronologically by name under every rotation scheme, so candidates are ordered
by modification time.
"""

import functools
import glob
import logging
import os
from typing import Dict, List, Optional

logger = logging.getLogger("node_latency.sources.rotation")


def _mtime(path: str) -> Optional[float]:
    try:
        return os.stat(path).st_mtime
    except OSError as e:
        logger.debug(f"Unable to stat {path}, ordering it by name: {e}")
        return None


def sorted_asc_log_files(glob_path: str) -> List[str]:
    """Expand a glob and sort the matches ascending by modification time.

    A pair where either file cannot be stat-ed falls back to comparing names,
    so one unreadable file never aborts the whole resolution.
    """
    matches = sorted(glob.glob(glob_path))
    if not matches:
        return []

    mtimes: Dict[str, Optional[float]] = {path: _mtime(path) for path in matches}

    def _compare(a: str, b: str) -> int:
        a_mtime, b_mtime = mtimes[a], mtimes[b]
        if a_mtime is None or b_mtime is None:
            return (a > b) - (a < b)
        return (a_mtime > b_mtime) - (a_mtime < b_mtime)

    return sorted(matches, key=functools.cmp_to_key(_compare))


def resolve_oldest_log_file(glob_path: str) -> Optional[str]:
    """Return the least recently modified file matching the glob, or None."""
    log_files = sorted_asc_log_files(glob_path)
    if not log_files:
        return None
    return log_files[0]


def resolve_newest_log_file(glob_path: str) -> Optional[str]:
    """Return the most recently modified file matching the glob, or None."""
    log_files = sorted_asc_log_files(glob_path)
    if not log_files:
        return None
    return log_files[-1]
