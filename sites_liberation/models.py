"""Data models for the site export pipeline."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

KIND_SCHEME = 'http://schemas.google.com/g/2005#kind'
SITES_NAMESPACE = 'http://schemas.google.com/sites/2008'


class EntryType(Enum):
    """Kinds of entries found in a site content feed."""
    WEB_PAGE = 'webpage'
    FILE_CABINET_PAGE = 'filecabinet'
    ANNOUNCEMENTS_PAGE = 'announcementspage'
    LIST_PAGE = 'listpage'
    ANNOUNCEMENT = 'announcement'
    ATTACHMENT = 'attachment'
    WEB_ATTACHMENT = 'webattachment'
    COMMENT = 'comment'
    LIST_ITEM = 'listitem'
    OTHER = 'other'

    @property
    def kind_term(self) -> str:
        """Atom category term identifying this kind."""
        return f"{SITES_NAMESPACE}#{self.value}"

    @property
    def is_page(self) -> bool:
        """Whether entries of this kind get their own directory and index.html."""
        return _PAGE_KINDS[self]

    @classmethod
    def from_kind(cls, term: Optional[str]) -> 'EntryType':
        """
        Map an Atom kind term (or its bare suffix) to an EntryType.

        Args:
            term: Category term such as 'http://schemas.google.com/sites/2008#webpage'

        Returns:
            Matching EntryType, OTHER when the term is unknown or missing
        """
        if not term:
            return cls.OTHER
        suffix = term.rsplit('#', 1)[-1].strip().lower()
        for member in cls:
            if member.value == suffix:
                return member
        return cls.OTHER


# Every member must appear here; test_models checks the mapping is exhaustive.
_PAGE_KINDS = {
    EntryType.WEB_PAGE: True,
    EntryType.FILE_CABINET_PAGE: True,
    EntryType.ANNOUNCEMENTS_PAGE: True,
    EntryType.LIST_PAGE: True,
    EntryType.ANNOUNCEMENT: True,
    EntryType.ATTACHMENT: False,
    EntryType.WEB_ATTACHMENT: False,
    EntryType.COMMENT: False,
    EntryType.LIST_ITEM: False,
    EntryType.OTHER: False,
}


class JobKind(Enum):
    """Units of work dispatched to the export worker pool."""
    EXPORT_PAGE = 'export_page'
    DOWNLOAD_ATTACHMENT = 'download_attachment'


@dataclass
class Entry:
    """A single item of site content: page, attachment, comment, list item, ..."""

    id: str
    entry_type: EntryType
    title: str = ''
    content: str = ''  # XHTML body
    updated: Optional[datetime] = None
    author: Optional[str] = None
    revision: int = 1
    parent_id: Optional[str] = None
    page_name: Optional[str] = None
    summary: Optional[str] = None
    url: Optional[str] = None
    src: Optional[str] = None  # download URL for attachments
    revision_feed_url: Optional[str] = None
    fields: Dict[str, str] = field(default_factory=dict)
    columns: List[str] = field(default_factory=list)

    @property
    def is_page(self) -> bool:
        return self.entry_type.is_page

    @property
    def is_attachment(self) -> bool:
        return self.entry_type is EntryType.ATTACHMENT

    def to_dict(self) -> Dict[str, Any]:
        """Serialize entry to dictionary."""
        return {
            'id': self.id,
            'entry_type': self.entry_type.value,
            'title': self.title,
            'content': self.content,
            'updated': self.updated.isoformat() if self.updated else None,
            'author': self.author,
            'revision': self.revision,
            'parent_id': self.parent_id,
            'page_name': self.page_name,
            'summary': self.summary,
            'url': self.url,
            'src': self.src,
            'revision_feed_url': self.revision_feed_url,
            'fields': dict(self.fields),
            'columns': list(self.columns),
        }

    def __eq__(self, other: Any) -> bool:
        """Compare entries by ID and revision."""
        if not isinstance(other, Entry):
            return False
        return self.id == other.id and self.revision == other.revision

    def __hash__(self) -> int:
        return hash((self.id, self.revision))


@dataclass(frozen=True)
class ExportJob:
    """One independent unit of export work, consumed exactly once by a worker."""

    kind: JobKind
    entry_id: str
    title: str = ''

    @classmethod
    def for_entry(cls, entry: Entry) -> 'ExportJob':
        """Build the job matching an entry's kind."""
        if entry.is_page:
            return cls(JobKind.EXPORT_PAGE, entry.id, entry.title)
        if entry.is_attachment:
            return cls(JobKind.DOWNLOAD_ATTACHMENT, entry.id, entry.title)
        raise ValueError(f"Entry {entry.id} of type {entry.entry_type.value} is not exportable")


__all__ = [
    'Entry',
    'EntryType',
    'ExportJob',
    'JobKind',
    'KIND_SCHEME',
    'SITES_NAMESPACE',
]
