"""Error taxonomy for evidence sources."""


class SourceError(Exception):
    """Base class for all evidence source failures."""
    pass


class SourceUnavailableError(SourceError):
    """Raised when a log file or journal cannot be opened, decompressed or read.

    Nothing is cached when this is raised, so a later call may succeed.
    """
    pass


class NoMatchError(SourceError):
    """Raised when a pattern has zero matches across a full log read."""

    def __init__(self, path: str, pattern: str):
        self.path = path
        self.pattern = pattern
        super().__init__(f'no matches in {path} for regex "{pattern}"')


class TimestampNotFoundError(SourceError):
    """Raised when a matched line carries nothing that looks like a timestamp."""

    def __init__(self, line: str, pattern: str):
        self.line = line
        self.pattern = pattern
        super().__init__(f'unable to find timestamp on log line matching regex: "{pattern}" "{line}"')


class TimestampParseError(SourceError):
    """Raised when an extracted timestamp does not fit the expected layout."""
    pass


class ObjectNotFoundError(SourceError):
    """Raised when the cluster API returns no matching object."""
    pass


class ConditionNotFoundError(SourceError):
    """Raised when a cluster object exists but lacks the requested status condition."""
    pass
