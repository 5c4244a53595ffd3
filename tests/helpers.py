"""Shared fakes for exporter tests."""

import threading
from pathlib import Path
from typing import Dict, Iterable, List, Optional

from sites_liberation.exceptions import FetcherError
from sites_liberation.fetchers import FeedProvider
from sites_liberation.logger import ProgressListener
from sites_liberation.models import Entry, EntryType

SITE_URL = 'https://sites.google.com/site/test'


def make_page(entry_id: str, title: str, parent_id: Optional[str] = None,
              entry_type: EntryType = EntryType.WEB_PAGE, **kwargs) -> Entry:
    return Entry(
        id=entry_id,
        entry_type=entry_type,
        title=title,
        page_name=kwargs.pop('page_name', title),
        parent_id=parent_id,
        **kwargs
    )


def make_attachment(entry_id: str, title: str, parent_id: Optional[str], **kwargs) -> Entry:
    return Entry(
        id=entry_id,
        entry_type=EntryType.ATTACHMENT,
        title=title,
        parent_id=parent_id,
        src=kwargs.pop('src', f'https://files.example.com/{entry_id}'),
        **kwargs
    )


class RecordingListener(ProgressListener):
    """Collects every status and progress update."""

    def __init__(self):
        self.statuses: List[str] = []
        self.progress: List[float] = []
        self._lock = threading.Lock()

    def set_status(self, message: str) -> None:
        with self._lock:
            self.statuses.append(message)

    def set_progress(self, fraction: float) -> None:
        with self._lock:
            self.progress.append(fraction)


class FakeFeedProvider(FeedProvider):
    """Serves fixed entries for the content feed and per-page revision feeds."""

    def __init__(self, entries: Iterable[Optional[Entry]],
                 revisions: Optional[Dict[str, List[Entry]]] = None,
                 error: Optional[Exception] = None,
                 revision_errors: Optional[Dict[str, Exception]] = None):
        self.entries = list(entries)
        self.revisions = revisions or {}
        self.error = error
        self.revision_errors = revision_errors or {}
        self.requested: List[str] = []

    def get_entries(self, feed_url, client):
        self.requested.append(feed_url)
        if feed_url in self.revision_errors:
            raise self.revision_errors[feed_url]
        if feed_url in self.revisions:
            yield from self.revisions[feed_url]
            return
        if self.error is not None:
            raise self.error
        yield from self.entries


class FakeClient:
    """Remote service writing a fixed body for every download."""

    def __init__(self, body: bytes = b'attachment-bytes', fail_urls=()):
        self.body = body
        self.fail_urls = set(fail_urls)
        self.downloads: List[str] = []
        self._lock = threading.Lock()

    def download(self, url, file_path):
        with self._lock:
            self.downloads.append(url)
        if url in self.fail_urls:
            raise OSError(f"connection reset while fetching {url}")
        Path(file_path).write_bytes(self.body)
        return len(self.body)

    def get_feed(self, url, params=None):
        raise AssertionError("feeds are served by FakeFeedProvider")


__all__ = [
    'FakeClient',
    'FakeFeedProvider',
    'FetcherError',
    'RecordingListener',
    'SITE_URL',
    'make_attachment',
    'make_page',
]
