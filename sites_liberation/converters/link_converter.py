"""Link converter for rewriting in-site URLs to paths inside the export tree."""

import logging
from typing import List, Optional, Tuple
from urllib.parse import unquote, urljoin, urlsplit

from bs4 import BeautifulSoup

from ..entry_store import EntryStore
from ..models import Entry
from ..path_resolver import INDEX_FILE, REVISIONS_DIRECTORY, PathResolver, attachment_filename, relative_link
from .html_cleaner import CONTENT_PARSER


class LinkConverter:
    """
    Rewrites absolute site links in page content to relative export paths.

    This converter:
    1. Finds href/src attributes whose target lies under the site URL
    2. Walks the URL's path segments down the entry graph to the target page
       (or to an attachment of the last page)
    3. Resolves the target's export directory
    4. Replaces the URL with a path relative to the current page's directory

    Links whose target cannot be resolved are left untouched.
    """

    URL_ATTRIBUTES = ('href', 'src')

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger('sites_liberation.converters.link_converter')

    def convert_links(
        self,
        page: Entry,
        entry_store: EntryStore,
        site_url: str,
        for_display_only: bool = False
    ) -> int:
        """
        Rewrite in-site links of a page in place.

        Args:
            page: Page whose content is rewritten
            entry_store: Store holding the site graph
            site_url: Absolute base URL of the site
            for_display_only: Content will be written into the page's
                revisions directory, one level deeper than the page

        Returns:
            Number of links rewritten
        """
        if not page.content:
            return 0

        resolver = PathResolver(entry_store)
        page_segments = resolver.resolve_path(page)
        if page_segments is None:
            self.logger.debug(f"Not converting links of unresolvable page {page.id}")
            return 0

        from_segments = list(page_segments)
        if for_display_only:
            from_segments.append(REVISIONS_DIRECTORY)

        base_url = site_url.rstrip('/')
        soup = BeautifulSoup(page.content, CONTENT_PARSER)
        rewritten_count = 0
        broken_references = []

        for element in soup.find_all(True):
            for attr in self.URL_ATTRIBUTES:
                url = element.get(attr)
                if not url:
                    continue

                target_path = self._site_path(url, base_url)
                if target_path is None:
                    continue

                new_url = self._convert_url(target_path, from_segments, entry_store, resolver)
                if new_url is None:
                    broken_references.append(url)
                    continue

                element[attr] = new_url
                rewritten_count += 1

        if rewritten_count:
            page.content = str(soup)

        if broken_references:
            self.logger.debug(
                f"Left {len(broken_references)} unresolved site links in '{page.title}' (ID: {page.id})"
            )
        self.logger.debug(f"Rewrote {rewritten_count} links for page '{page.title}'")
        return rewritten_count

    def _site_path(self, url: str, base_url: str) -> Optional[str]:
        """
        Return the part of a URL below the site base URL.

        Host-relative URLs ('/site/...') are resolved against the base
        first. Out-of-site and page-relative URLs give None.
        """
        if url.startswith('/') and not url.startswith('//'):
            url = urljoin(base_url + '/', url)

        if not url.startswith(base_url):
            return None

        remainder = url[len(base_url):]
        if remainder and remainder[0] not in '/?#':
            # Shares a prefix with the site URL but is a different site
            return None
        return remainder

    def _convert_url(
        self,
        target_path: str,
        from_segments: List[str],
        entry_store: EntryStore,
        resolver: PathResolver
    ) -> Optional[str]:
        """Map a site-relative URL to a relative export link, or None."""
        parts = urlsplit(target_path)
        segments = [unquote(segment) for segment in parts.path.split('/') if segment]
        if not segments:
            return None

        target, filename = self._find_target(segments, entry_store)
        if target is None:
            return None

        target_segments = resolver.resolve_path(target)
        if target_segments is None:
            return None

        link = relative_link(from_segments, target_segments, filename)
        if parts.fragment:
            link += '#' + parts.fragment
        return link

    def _find_target(
        self,
        segments: List[str],
        entry_store: EntryStore
    ) -> Tuple[Optional[Entry], str]:
        """
        Walk URL segments down from the site roots.

        Returns:
            Tuple of (page whose directory holds the target, file name in it)
        """
        current: Optional[Entry] = None
        for position, segment in enumerate(segments):
            children = entry_store.get_children(current.id if current else None)
            match = next(
                (child for child in children if child.is_page and child.page_name == segment),
                None
            )
            if match is not None:
                current = match
                continue

            # Last segment may name an attachment of the page reached so far
            is_last = position == len(segments) - 1
            if is_last and current is not None:
                for child in children:
                    if child.is_attachment and child.title == segment:
                        return current, attachment_filename(child, entry_store)
            return None, INDEX_FILE

        return current, INDEX_FILE
