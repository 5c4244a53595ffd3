"""Export package writing a site into a static directory tree.

Package Structure:
- site_exporter: Schedules page and attachment jobs over a worker pool
- page_exporter: Writes one rendered page document
- attachment_downloader: Streams one attachment into its page's directory
- revisions_exporter: Writes the revision history of a page
"""

from .attachment_downloader import AttachmentDownloader
from .page_exporter import PageExporter
from .revisions_exporter import RevisionsExporter
from .site_exporter import (
    FETCH_FAILED_STATUS,
    NO_DATA_STATUS,
    ExportState,
    SiteExporter,
)

__all__ = [
    'AttachmentDownloader',
    'ExportState',
    'FETCH_FAILED_STATUS',
    'NO_DATA_STATUS',
    'PageExporter',
    'RevisionsExporter',
    'SiteExporter',
]
