"""Fetchers package for retrieving site entries from the content feed."""

from .base_fetcher import EntryParseError, FeedProvider, FetcherError
from .entry_parser import EntryParser
from .feed_fetcher import AtomFeedProvider


class FeedProviderFactory:
    """Factory for creating feed providers based on configuration."""

    @staticmethod
    def create_provider(config: dict, logger=None) -> FeedProvider:
        """Create the feed provider for a configuration.

        Args:
            config: Configuration dictionary
            logger: Logger instance

        Returns:
            FeedProvider instance
        """
        page_size = config.get('advanced', {}).get('page_size', 100)
        return AtomFeedProvider(page_size=page_size, logger=logger)


__all__ = [
    'AtomFeedProvider',
    'EntryParseError',
    'EntryParser',
    'FeedProvider',
    'FeedProviderFactory',
    'FetcherError',
]
