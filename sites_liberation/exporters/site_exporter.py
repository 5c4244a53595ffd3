"""
Site exporter scheduling page and attachment jobs over a worker pool.

A run moves through Fetching -> Partitioning -> Exporting -> Finished.
Every page and every attachment becomes one independent job; the entry
store is fully built before the first job is submitted and is only read
afterwards.
"""

import dataclasses
import logging
import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from ..converters import HtmlCleaner, LinkConverter
from ..entry_store import EntryStore
from ..exceptions import SitesLiberationError
from ..fetchers import FeedProvider, FetcherError
from ..logger import ProgressListener, ProgressTracker, log_section
from ..models import Entry, ExportJob, JobKind
from ..path_resolver import INDEX_FILE, PathResolver, attachment_filename
from ..sites_client import get_feed_url, get_site_url
from .attachment_downloader import AttachmentDownloader
from .page_exporter import PageExporter
from .revisions_exporter import RevisionsExporter

RETRIEVING_STATUS = "Retrieving site data (this may take a few minutes)."
PARSE_ERROR_STATUS = "Error parsing entries!"
NO_DATA_STATUS = "No data returned. You may have provided invalid Site information or credentials."
FETCH_FAILED_STATUS = "Failed to retrieve site data."
RETRIEVED_REPORT_INTERVAL = 20

DEFAULT_MAX_WORKERS = 4


class ExportState(Enum):
    """Phases of a single export run."""
    CREATED = 'created'
    FETCHING = 'fetching'
    PARTITIONING = 'partitioning'
    EXPORTING = 'exporting'
    FINISHED = 'finished'


class SiteExporter:
    """
    Exports a whole site into a static directory tree.

    One instance performs one run; calling export_site() twice raises.
    """

    def __init__(
        self,
        feed_provider: FeedProvider,
        link_converter: Optional[LinkConverter] = None,
        html_cleaner: Optional[HtmlCleaner] = None,
        page_exporter: Optional[PageExporter] = None,
        attachment_downloader: Optional[AttachmentDownloader] = None,
        revisions_exporter: Optional[RevisionsExporter] = None,
        max_workers: int = DEFAULT_MAX_WORKERS,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize the exporter.

        Args:
            feed_provider: Source of the site's entries
            link_converter: Rewrites in-site links (default LinkConverter)
            html_cleaner: Content cleanup applied before link rewriting
            page_exporter: Writes one page document
            attachment_downloader: Fetches one attachment
            revisions_exporter: Writes a page's revision history
            max_workers: Size of the worker pool
            logger: Logger instance
        """
        if max_workers < 1:
            raise ValueError("max_workers must be a positive integer")

        self.logger = logger or logging.getLogger('sites_liberation.exporters.site_exporter')
        self.feed_provider = feed_provider
        self.link_converter = link_converter or LinkConverter()
        self.html_cleaner = html_cleaner or HtmlCleaner()
        self.page_exporter = page_exporter or PageExporter()
        self.attachment_downloader = attachment_downloader or AttachmentDownloader()
        self.revisions_exporter = revisions_exporter or RevisionsExporter(
            feed_provider=feed_provider,
            link_converter=self.link_converter,
            html_cleaner=self.html_cleaner
        )
        self.max_workers = max_workers

        self.state = ExportState.CREATED
        self.entry_store = EntryStore()
        self.malformed_entries = 0

    def export_site(
        self,
        host: str,
        domain: Optional[str],
        webspace: str,
        export_revisions: bool,
        client: Any,
        root_directory: Union[str, Path],
        progress_listener: ProgressListener
    ) -> Dict[str, Any]:
        """
        Export every page and attachment of a site.

        Args:
            host: Sites host
            domain: Hosted domain, or None
            webspace: Site name
            export_revisions: Also write each page's revision history
            client: Remote service used for feeds and downloads
            root_directory: Directory the export tree is written under
            progress_listener: Receives status messages and progress

        Returns:
            Statistics of the run

        Raises:
            ValueError: If a required argument is missing or the exporter
                was already used
        """
        for name, value in (
            ('host', host),
            ('webspace', webspace),
            ('client', client),
            ('root_directory', root_directory),
            ('progress_listener', progress_listener),
        ):
            if value is None or value == '':
                raise ValueError(f"{name} must not be empty")

        if self.state is not ExportState.CREATED:
            raise ValueError("SiteExporter instances export a single site; create a new one")

        start_time = time.time()
        root = Path(root_directory)
        site_url = get_site_url(host, domain, webspace)
        feed_url = get_feed_url(host, domain, webspace)

        log_section(f"Exporting {site_url}")
        self._fetch(feed_url, client, progress_listener)
        jobs = self._partition()

        stats: Dict[str, Any] = {
            'entries': len(self.entry_store),
            'malformed': self.malformed_entries,
            'pages': sum(1 for job in jobs if job.kind is JobKind.EXPORT_PAGE),
            'attachments': sum(1 for job in jobs if job.kind is JobKind.DOWNLOAD_ATTACHMENT),
            'exported': 0,
            'skipped': 0,
            'failed': 0,
        }

        self.state = ExportState.EXPORTING
        if not jobs:
            self.logger.warning("Feed returned no pages or attachments")
            progress_listener.set_status(NO_DATA_STATUS)
        else:
            progress_listener.set_status(f"Exporting {len(jobs)} total pages")
            tracker = ProgressTracker(len(jobs), progress_listener, item_type="jobs")
            self._run_jobs(jobs, root, client, site_url, export_revisions, tracker, progress_listener)
            tracker_stats = tracker.get_stats()
            stats['exported'] = tracker_stats['successful']
            stats['skipped'] = tracker_stats['skipped']
            stats['failed'] = tracker_stats['failed']

        self.state = ExportState.FINISHED
        stats['elapsed'] = time.time() - start_time
        self.logger.info(
            f"Export complete: {stats['exported']} exported, {stats['skipped']} skipped, "
            f"{stats['failed']} failed in {stats['elapsed']:.1f}s"
        )
        return stats

    def _fetch(self, feed_url: str, client: Any, progress_listener: ProgressListener) -> None:
        """Consume the feed into the entry store."""
        self.state = ExportState.FETCHING
        progress_listener.set_status(RETRIEVING_STATUS)

        retrieved = 0
        try:
            for entry in self.feed_provider.get_entries(feed_url, client):
                if entry is None:
                    self.malformed_entries += 1
                    self.logger.warning(PARSE_ERROR_STATUS)
                    progress_listener.set_status(PARSE_ERROR_STATUS)
                    continue

                self.entry_store.add_entry(entry)
                retrieved += 1
                if retrieved % RETRIEVED_REPORT_INTERVAL == 0:
                    progress_listener.set_status(f"Retrieved {retrieved} entries.")
        except FetcherError as e:
            self.state = ExportState.FINISHED
            progress_listener.set_status(f"{FETCH_FAILED_STATUS} {e}")
            raise

        self.logger.info(f"Retrieved {retrieved} entries ({self.malformed_entries} malformed)")

    def _partition(self) -> List[ExportJob]:
        """Create one job per page and per attachment in the store."""
        self.state = ExportState.PARTITIONING
        jobs = []
        other = 0
        for entry in self.entry_store.entries():
            if entry.is_page or entry.is_attachment:
                jobs.append(ExportJob.for_entry(entry))
            else:
                other += 1

        self.logger.debug(f"Partitioned {len(jobs)} jobs; {other} entries are rendered inside pages")
        return jobs

    def _run_jobs(
        self,
        jobs: List[ExportJob],
        root: Path,
        client: Any,
        site_url: str,
        export_revisions: bool,
        tracker: ProgressTracker,
        progress_listener: ProgressListener
    ) -> None:
        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            future_to_job = {
                executor.submit(
                    self._execute_job, job, root, client, site_url,
                    export_revisions, tracker, progress_listener
                ): job
                for job in jobs
            }
            for future in as_completed(future_to_job):
                # _execute_job handles its own errors; result() surfaces anything unexpected
                future.result()

    def _execute_job(
        self,
        job: ExportJob,
        root: Path,
        client: Any,
        site_url: str,
        export_revisions: bool,
        tracker: ProgressTracker,
        progress_listener: ProgressListener
    ) -> None:
        """Run one job and record its completion whatever the outcome."""
        outcome = 'failed'
        try:
            entry = self.entry_store.get_entry(job.entry_id)
            if entry is None:
                self.logger.warning(f"Entry {job.entry_id} disappeared before export")
                outcome = 'skipped'
            elif job.kind is JobKind.EXPORT_PAGE:
                outcome = self._export_page(entry, root, client, site_url, export_revisions, progress_listener)
            else:
                outcome = self._download_attachment(entry, root, client, progress_listener)
        except Exception as e:
            self.logger.error(
                f"Failed to {job.kind.value.replace('_', ' ')} '{job.title}' (ID: {job.entry_id}): {e}",
                exc_info=True
            )
            outcome = 'failed'
        finally:
            tracker.increment(outcome)

    def _export_page(
        self,
        page: Entry,
        root: Path,
        client: Any,
        site_url: str,
        export_revisions: bool,
        progress_listener: ProgressListener
    ) -> str:
        progress_listener.set_status(f"Exporting page: {page.title}.")
        # Work on a copy so the shared store is never mutated by a job
        page = dataclasses.replace(page)
        self.html_cleaner.apply(page)
        self.link_converter.convert_links(page, self.entry_store, site_url)

        segments = PathResolver(self.entry_store).resolve_path(page)
        if segments is None:
            self.logger.warning(f"Skipping page '{page.title}' (ID: {page.id}): cannot resolve its path")
            return 'skipped'

        directory = root.joinpath(*segments)
        directory.mkdir(parents=True, exist_ok=True)

        self._write_page(page, directory)

        if export_revisions and self._export_revisions(page, directory, client, site_url):
            # Rewrite so the footer links the revision history
            self._write_page(page, directory, revisions_exported=True)

        progress_listener.set_status(f"Finished page: {page.title}.")
        self.logger.debug(f"Exported page '{page.title}' -> {directory / INDEX_FILE}")
        return 'success'

    def _write_page(self, page: Entry, directory: Path, revisions_exported: bool = False) -> None:
        with open(directory / INDEX_FILE, 'w', encoding='utf-8') as out:
            self.page_exporter.export_page(page, self.entry_store, out, revisions_exported=revisions_exported)

    def _export_revisions(self, page: Entry, directory: Path, client: Any, site_url: str) -> bool:
        """Export a page's revision history; failures never cost the page itself."""
        try:
            count = self.revisions_exporter.export_revisions(
                page, self.entry_store, directory, client, site_url
            )
        except (SitesLiberationError, OSError) as e:
            self.logger.error(
                f"Failed to export revisions of page '{page.title}' (ID: {page.id}): {e}",
                exc_info=True
            )
            return False
        return count > 0

    def _download_attachment(
        self,
        attachment: Entry,
        root: Path,
        client: Any,
        progress_listener: ProgressListener
    ) -> str:
        progress_listener.set_status(f"Downloading attachment: {attachment.title}.")

        segments = PathResolver(self.entry_store).resolve_attachment_directory(attachment)
        if segments is None:
            self.logger.warning(
                f"Skipping attachment '{attachment.title}' (ID: {attachment.id}): "
                f"parent page missing or unresolvable"
            )
            return 'skipped'

        directory = root.joinpath(*segments)
        directory.mkdir(parents=True, exist_ok=True)
        filename = attachment_filename(attachment, self.entry_store)
        self.attachment_downloader.download(attachment, directory / filename, client)
        return 'success'
