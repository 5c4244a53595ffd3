"""Revisions exporter writing the revision history of a page."""

import dataclasses
import logging
from pathlib import Path
from typing import Any, List, Optional

from ..converters import HtmlCleaner, LinkConverter
from ..entry_store import EntryStore
from ..fetchers import AtomFeedProvider, FeedProvider
from ..models import Entry
from ..path_resolver import INDEX_FILE, REVISIONS_DIRECTORY
from ..renderers import renderer_utils as utils


class RevisionsExporter:
    """
    Exports every revision of a page into <page dir>/_revisions/.

    Each revision becomes <revision>.html; _revisions/index.html lists
    them newest first and links back to the current page.
    """

    def __init__(
        self,
        feed_provider: Optional[FeedProvider] = None,
        link_converter: Optional[LinkConverter] = None,
        html_cleaner: Optional[HtmlCleaner] = None,
        logger: Optional[logging.Logger] = None
    ):
        self.feed_provider = feed_provider or AtomFeedProvider()
        self.link_converter = link_converter or LinkConverter()
        self.html_cleaner = html_cleaner or HtmlCleaner()
        self.logger = logger or logging.getLogger('sites_liberation.exporters.revisions_exporter')

    def export_revisions(
        self,
        page: Entry,
        entry_store: EntryStore,
        directory: Path,
        client: Any,
        site_url: str
    ) -> int:
        """
        Export the revision history of a page.

        Args:
            page: Current version of the page
            entry_store: Store holding the site graph
            directory: The page's output directory
            client: Remote service used to read the revision feed
            site_url: Absolute base URL of the site

        Returns:
            Number of revisions written
        """
        if not page.revision_feed_url:
            self.logger.debug(f"Page '{page.title}' has no revision feed")
            return 0

        revisions = self._fetch_revisions(page, client)
        if not revisions:
            return 0

        revisions_dir = Path(directory) / REVISIONS_DIRECTORY
        revisions_dir.mkdir(parents=True, exist_ok=True)

        for revision in revisions:
            snapshot = self._snapshot(page, revision)
            self.html_cleaner.apply(snapshot)
            self.link_converter.convert_links(snapshot, entry_store, site_url, for_display_only=True)
            target = revisions_dir / f"{snapshot.revision}.html"
            target.write_text(self._render_revision(snapshot), encoding='utf-8')

        (revisions_dir / INDEX_FILE).write_text(self._render_index(page, revisions), encoding='utf-8')
        self.logger.debug(f"Exported {len(revisions)} revisions of '{page.title}'")
        return len(revisions)

    def _fetch_revisions(self, page: Entry, client: Any) -> List[Entry]:
        revisions = {}
        for entry in self.feed_provider.get_entries(page.revision_feed_url, client):
            if entry is None:
                self.logger.warning(f"Skipping unparseable revision of '{page.title}'")
                continue
            revisions[entry.revision] = entry
        return [revisions[number] for number in sorted(revisions, reverse=True)]

    @staticmethod
    def _snapshot(page: Entry, revision: Entry) -> Entry:
        """Copy of the page carrying one revision's content and metadata."""
        return dataclasses.replace(
            page,
            title=revision.title or page.title,
            content=revision.content,
            updated=revision.updated,
            author=revision.author,
            revision=revision.revision,
        )

    def _render_revision(self, snapshot: Entry) -> str:
        soup = utils.new_document(f"{snapshot.title} (Version {snapshot.revision})")
        root = utils.entry_element(soup, snapshot)

        nav = soup.new_tag('div')
        nav['class'] = 'revision-navigation'
        nav.append(utils.hyperlink(soup, f"../{INDEX_FILE}", 'Current version'))
        nav.append(' | ')
        nav.append(utils.hyperlink(soup, INDEX_FILE, 'All versions'))
        root.append(nav)

        root.append(utils.title_element(soup, snapshot))
        root.append(utils.content_element(soup, snapshot))

        footer = soup.new_tag('div')
        footer['class'] = 'footer'
        footer.append('Version ')
        footer.append(utils.revision_element(soup, snapshot))
        footer.append(' updated on ')
        footer.append(utils.updated_element(soup, snapshot))
        footer.append(' by ')
        footer.append(utils.author_element(soup, snapshot))
        root.append(footer)

        soup.body.append(root)
        return str(soup)

    def _render_index(self, page: Entry, revisions: List[Entry]) -> str:
        soup = utils.new_document(f"{page.title} - Revision history")
        heading = soup.new_tag('h3')
        heading.string = f"Revision history of {page.title}"
        soup.body.append(heading)
        soup.body.append(utils.hyperlink(soup, f"../{INDEX_FILE}", 'Current version'))

        table = soup.new_tag('table')
        table['class'] = 'revisions'
        for revision in revisions:
            row = soup.new_tag('tr')
            link_cell = soup.new_tag('td')
            link_cell.append(utils.hyperlink(soup, f"{revision.revision}.html", f"Version {revision.revision}"))
            row.append(link_cell)

            updated_cell = soup.new_tag('td')
            updated_cell.append(utils.updated_element(soup, revision))
            row.append(updated_cell)

            author_cell = soup.new_tag('td')
            author_cell.append(utils.author_element(soup, revision))
            row.append(author_cell)
            table.append(row)

        soup.body.append(table)
        return str(soup)
