"""Parser turning Atom feed <entry> elements into Entry objects."""

from typing import Dict, List, Optional, Tuple

from bs4 import BeautifulSoup, Tag
from dateutil.parser import isoparse

from ..exceptions import EntryParseError
from ..models import KIND_SCHEME, SITES_NAMESPACE, Entry, EntryType
from ..sites_client import get_revision_feed_url

PARENT_REL = f"{SITES_NAMESPACE}#parent"
REVISION_REL = f"{SITES_NAMESPACE}#revision"


class EntryParser:
    """Parses one Atom entry of a site content or revision feed."""

    def parse_feed(self, xml: str) -> List[Tag]:
        """Split a feed document into its <entry> elements."""
        soup = BeautifulSoup(xml, 'xml')
        return soup.find_all('entry')

    def parse_entry(self, element: Tag) -> Entry:
        """
        Convert an <entry> element.

        Args:
            element: Parsed <entry> tag

        Returns:
            Populated Entry

        Raises:
            EntryParseError: If the element lacks an id or has malformed values
        """
        entry_id = self._text(element, 'id')
        if not entry_id:
            raise EntryParseError("Entry has no <id>")

        entry_type = self._entry_type(element)

        try:
            revision = int(self._text(element, 'revision') or 1)
        except ValueError as e:
            raise EntryParseError(f"Entry {entry_id} has an invalid revision: {e}") from e

        updated = None
        updated_text = self._text(element, 'updated')
        if updated_text:
            try:
                updated = isoparse(updated_text)
            except ValueError as e:
                raise EntryParseError(f"Entry {entry_id} has an invalid updated date: {e}") from e

        content, src = self._content(element)
        revision_feed_url = self._link(element, REVISION_REL)
        if revision_feed_url is None and entry_type.is_page:
            revision_feed_url = get_revision_feed_url(entry_id)

        return Entry(
            id=entry_id,
            entry_type=entry_type,
            title=self._text(element, 'title') or '',
            content=content,
            updated=updated,
            author=self._author(element),
            revision=revision,
            parent_id=self._link(element, PARENT_REL),
            page_name=self._text(element, 'pageName'),
            summary=self._text(element, 'summary'),
            url=self._link(element, 'alternate'),
            src=src,
            revision_feed_url=revision_feed_url,
            fields=self._fields(element),
            columns=self._columns(element),
        )

    def _entry_type(self, element: Tag) -> EntryType:
        for category in element.find_all('category', recursive=False):
            if category.get('scheme') == KIND_SCHEME:
                return EntryType.from_kind(category.get('term'))
        return EntryType.OTHER

    @staticmethod
    def _text(element: Tag, name: str) -> Optional[str]:
        child = element.find(name, recursive=False)
        if child is None:
            return None
        return child.get_text(strip=True)

    @staticmethod
    def _link(element: Tag, rel: str) -> Optional[str]:
        for link in element.find_all('link', recursive=False):
            if link.get('rel') == rel and link.get('href'):
                return link['href']
        return None

    @staticmethod
    def _author(element: Tag) -> Optional[str]:
        author = element.find('author', recursive=False)
        if author is None:
            return None
        name = author.find('name')
        if name is not None and name.get_text(strip=True):
            return name.get_text(strip=True)
        email = author.find('email')
        return email.get_text(strip=True) if email is not None else None

    @staticmethod
    def _content(element: Tag):
        """Return (markup, download url) of the <content> element."""
        content = element.find('content', recursive=False)
        if content is None:
            return '', None
        if content.get('src'):
            return '', content['src']
        if content.get('type') == 'xhtml':
            return ''.join(str(child) for child in content.contents).strip(), None
        # type="html" carries escaped markup, type="text" plain text
        return content.get_text(), None

    @staticmethod
    def _fields(element: Tag) -> Dict[str, str]:
        fields = {}
        for field_tag in element.find_all('field', recursive=False):
            name = field_tag.get('name') or field_tag.get('index')
            if name:
                fields[name] = field_tag.get_text(strip=True)
        return fields

    @staticmethod
    def _columns(element: Tag) -> List[str]:
        data = element.find('data', recursive=False)
        if data is None:
            return []
        columns = data.find_all('column')
        columns.sort(key=lambda column: _column_order(column.get('index', '')))
        return [column.get('name') or column.get('index', '') for column in columns]


def _column_order(index: str) -> Tuple[int, int, str]:
    """Sort key for list column indexes: numbers by value, letters as spreadsheet columns (A..Z, AA)."""
    index = index.strip()
    if index.isdigit():
        return (0, int(index), '')
    return (1, len(index), index.upper())
