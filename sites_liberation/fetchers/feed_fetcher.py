"""Atom feed provider that pages lazily through a site feed."""

import logging
from typing import Any, Iterator, Optional

import requests

from ..exceptions import EntryParseError, FetcherError
from ..models import Entry
from .base_fetcher import FeedProvider
from .entry_parser import EntryParser

DEFAULT_PAGE_SIZE = 100


class AtomFeedProvider(FeedProvider):
    """Retrieves feed pages with start-index/max-results and parses their entries."""

    def __init__(self, page_size: int = DEFAULT_PAGE_SIZE, logger: Optional[logging.Logger] = None):
        """
        Initialize the provider.

        Args:
            page_size: Entries requested per feed page
            logger: Logger instance (optional, uses module logger if not provided)
        """
        if page_size < 1:
            raise ValueError("page_size must be a positive integer")
        self.page_size = page_size
        self.parser = EntryParser()
        self.logger = logger or logging.getLogger('sites_liberation.fetchers.feed_fetcher')

    def get_entries(self, feed_url: str, client: Any) -> Iterator[Optional[Entry]]:
        """
        Yield every entry of the feed, one page at a time.

        Raises:
            FetcherError: If a feed page cannot be retrieved
        """
        start_index = 1
        while True:
            params = {'start-index': start_index, 'max-results': self.page_size}
            try:
                xml = client.get_feed(feed_url, params=params)
            except requests.exceptions.RequestException as e:
                self.logger.error(f"Failed to retrieve feed page at index {start_index}: {e}")
                raise FetcherError(f"Failed to retrieve {feed_url}: {e}") from e

            elements = self.parser.parse_feed(xml)
            self.logger.debug(f"Feed page at index {start_index} returned {len(elements)} entries")

            for element in elements:
                try:
                    yield self.parser.parse_entry(element)
                except EntryParseError as e:
                    self.logger.warning(f"Skipping malformed entry: {e}")
                    yield None

            if len(elements) < self.page_size:
                break
            start_index += len(elements)
