"""Sites Liberation

Exports a hierarchical content site (pages, attachments, comments, list
items) from its Atom content feed into a self-contained static HTML tree,
preserving the page hierarchy, in-site links and, optionally, revision
history.

Basic Usage:
    sites-liberation --host sites.google.com --webspace my-site --output-dir ./export

Example Configuration (config.yaml):
    site:
        host: "sites.google.com"
        domain: "example.com"
        webspace: "my-site"

    auth:
        token: ${SITES_TOKEN}

    export:
        output_directory: "./site-export"
        export_revisions: false
"""

__version__ = "1.0.0"
__description__ = "Static HTML exporter for hierarchical content sites"

from .config_loader import ConfigLoader, get_nested
from .entry_store import EntryStore
from .exporters import SiteExporter
from .logger import (
    LoggingProgressListener,
    ProgressListener,
    ProgressTracker,
    log_config,
    log_section,
    setup_logging,
)
from .models import Entry, EntryType, ExportJob, JobKind
from .path_resolver import PathResolver
from .sites_client import SitesClient

__all__ = [
    # Version info
    '__version__',
    '__description__',

    # Core data models
    'Entry',
    'EntryType',
    'ExportJob',
    'JobKind',

    # Entry graph and export
    'EntryStore',
    'PathResolver',
    'SiteExporter',
    'SitesClient',

    # Configuration
    'ConfigLoader',
    'get_nested',

    # Logging and progress
    'LoggingProgressListener',
    'ProgressListener',
    'ProgressTracker',
    'log_config',
    'log_section',
    'setup_logging',
]
