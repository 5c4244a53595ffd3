"""Abstract feed provider interface."""

from abc import ABC, abstractmethod
from typing import Any, Iterable, Optional

from ..exceptions import EntryParseError, FetcherError
from ..models import Entry


class FeedProvider(ABC):
    """
    Supplies the flat, unordered entries of a site.

    Implementations may produce entries lazily. An element that cannot be
    parsed is yielded as None so the consumer can report it and carry on;
    a failure to retrieve the feed itself raises FetcherError.
    """

    @abstractmethod
    def get_entries(self, feed_url: str, client: Any) -> Iterable[Optional[Entry]]:
        """
        Iterate over every entry of a feed.

        Args:
            feed_url: Content or revision feed URL
            client: Remote service used to fetch feed pages

        Returns:
            Iterable of entries, with None in place of unparseable elements
        """
        pass


__all__ = ['FeedProvider', 'FetcherError', 'EntryParseError']
