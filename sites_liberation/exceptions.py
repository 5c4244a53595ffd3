"""Exception hierarchy for the site exporter."""


class SitesLiberationError(Exception):
    """Base exception for export errors."""
    pass


class FetcherError(SitesLiberationError):
    """Raised when the content feed cannot be retrieved."""
    pass


class EntryParseError(FetcherError):
    """Raised when a single feed element is not a well-formed entry."""
    pass


class DownloadError(SitesLiberationError):
    """Raised when an attachment cannot be transferred to disk."""
    pass


__all__ = [
    'SitesLiberationError',
    'FetcherError',
    'EntryParseError',
    'DownloadError',
]
