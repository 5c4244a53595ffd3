"""HTML cleaner applied to page content before links are rewritten."""

import logging
import re
from typing import Optional

from bs4 import BeautifulSoup, Comment, Tag

from ..models import Entry

XHTML_NAMESPACE = 'http://www.w3.org/1999/xhtml'
CONTENT_PARSER = 'html.parser'


class HtmlCleaner:
    """Strips markup that must not survive into a static export."""

    # Tags removed together with everything inside them
    REMOVED_TAGS = ['script', 'noscript', 'style', 'object', 'embed']

    # Attributes that point at resources
    URL_ATTRIBUTES = ['href', 'src']

    UNSAFE_URL = re.compile(r'^\s*(javascript|vbscript):', re.IGNORECASE)

    def __init__(self, logger: Optional[logging.Logger] = None):
        """Initialize HTML cleaner with optional logger."""
        self.logger = logger or logging.getLogger('sites_liberation.converters.html_cleaner')

    def apply(self, entry: Entry) -> Entry:
        """
        Clean an entry's content in place.

        Args:
            entry: Entry whose content should be cleaned

        Returns:
            The same entry, for chaining
        """
        if entry.content:
            entry.content = self.clean(entry.content)
        return entry

    def clean(self, html: str) -> str:
        """
        Clean an XHTML fragment.

        Args:
            html: Raw content markup

        Returns:
            Cleaned markup
        """
        soup = BeautifulSoup(html, CONTENT_PARSER)

        removed = 0
        for element in soup.find_all(self.REMOVED_TAGS):
            element.extract()
            removed += 1

        for comment in soup.find_all(string=lambda text: isinstance(text, Comment)):
            comment.extract()

        for element in soup.find_all(True):
            self._clean_attributes(element)

        self._unwrap_namespace_wrapper(soup)
        self._remove_empty_elements(soup)

        if removed:
            self.logger.debug(f"Removed {removed} unsafe elements")
        return str(soup)

    def _clean_attributes(self, element: Tag) -> None:
        """Drop event handlers and script URLs; make protocol-relative URLs absolute."""
        for attr in list(element.attrs):
            if attr.lower().startswith('on'):
                del element[attr]

        for attr in self.URL_ATTRIBUTES:
            value = element.get(attr)
            if value is None:
                continue
            if self.UNSAFE_URL.match(value):
                del element[attr]
            elif value.startswith('//'):
                element[attr] = 'https:' + value

    def _unwrap_namespace_wrapper(self, soup: BeautifulSoup) -> None:
        """The feed wraps content in <div xmlns="...xhtml">; keep only its children."""
        top_level = [child for child in soup.children if isinstance(child, Tag)]
        if len(top_level) == 1:
            wrapper = top_level[0]
            if wrapper.name == 'div' and wrapper.get('xmlns') == XHTML_NAMESPACE:
                wrapper.unwrap()

    def _remove_empty_elements(self, soup: BeautifulSoup) -> None:
        """Remove empty elements that serve no purpose."""
        removed_count = 0

        # br and img carry no text but are meaningful
        for element in soup.find_all(['div', 'span', 'p']):
            if element.find():
                continue
            if element.get_text(strip=True):
                continue
            if element.attrs:
                continue
            element.decompose()
            removed_count += 1

        if removed_count > 0:
            self.logger.debug(f"Removed {removed_count} empty elements")
