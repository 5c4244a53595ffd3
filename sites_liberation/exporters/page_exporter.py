"""Page exporter writing one rendered page to a stream."""

import logging
from typing import Optional, TextIO

from ..entry_store import EntryStore
from ..models import Entry
from ..renderers import PageRenderer


class PageExporter:
    """Renders a page with PageRenderer and writes the document."""

    def __init__(self, renderer: Optional[PageRenderer] = None, logger: Optional[logging.Logger] = None):
        self.renderer = renderer or PageRenderer()
        self.logger = logger or logging.getLogger('sites_liberation.exporters.page_exporter')

    def export_page(
        self,
        page: Entry,
        entry_store: EntryStore,
        out: TextIO,
        revisions_exported: bool = False
    ) -> int:
        """
        Write a page document.

        Args:
            page: Page to export
            entry_store: Store holding the site graph
            out: Writable text stream
            revisions_exported: Whether the page links to its revision history

        Returns:
            Number of characters written
        """
        document = self.renderer.render(page, entry_store, revisions_exported)
        out.write(document)
        self.logger.debug(f"Rendered page '{page.title}' ({len(document)} chars)")
        return len(document)
