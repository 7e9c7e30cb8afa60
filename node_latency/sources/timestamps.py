"""
Timestamp extraction from log lines.
"""

import re
from datetime import datetime, timezone
from typing import Pattern, Union

from ..errors import TimestampNotFoundError, TimestampParseError

_SPACE_RE = re.compile(r"\s+")


def _current_year() -> int:
    return datetime.now().year


def parse_timestamp(line: str, pattern: Union[str, Pattern[str]], layout: str) -> datetime:
    """Find a timestamp in a log line and parse it with a strptime layout.

    Syslog style timestamps ("Jan  2 15:04:05") carry no year. When the raw
    timestamp does not contain the current year, " <current year>" is appended
    before parsing, so layouts for year-less logs must end with " %Y".
    Evidence written last year and read after New Year is therefore mis-dated;
    callers that care must not rely on year-less sources across that boundary.

    Timestamps without zone information are returned as UTC.

    Raises:
        TimestampNotFoundError: If nothing in the line matches the pattern.
        TimestampParseError: If the extracted text does not fit the layout.
    """
    regex = re.compile(pattern) if isinstance(pattern, str) else pattern
    match = regex.search(line)
    if match is None or not match.group(0):
        raise TimestampNotFoundError(line, regex.pattern)
    raw_ts = _SPACE_RE.sub(" ", match.group(0))

    year = str(_current_year())
    if year not in raw_ts:
        raw_ts = f"{raw_ts} {year}"

    try:
        ts = datetime.strptime(raw_ts, layout)
    except ValueError as e:
        raise TimestampParseError(f'unable to parse timestamp "{raw_ts}" with layout "{layout}": {e}') from e

    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)
    return ts
