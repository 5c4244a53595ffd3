#!/usr/bin/env python3
"""
Sites Liberation - Command Line Entry Point

Exports a site's pages and attachments from its content feed into a
static HTML tree, optionally with the revision history of every page.
"""

import argparse
import logging
import sys
from typing import List, Optional

import yaml

from . import __version__
from .config_loader import ConfigLoader, get_nested
from .exporters import SiteExporter
from .fetchers import FeedProviderFactory, FetcherError
from .logger import (
    LOGGER_NAME,
    LoggingProgressListener,
    TqdmProgressListener,
    log_config,
    log_section,
    setup_logging,
)
from .sites_client import SitesClient

DEFAULT_CONFIG_PATH = 'config.yaml'


def create_argument_parser() -> argparse.ArgumentParser:
    """Create and configure the argument parser for CLI."""
    parser = argparse.ArgumentParser(
        prog='sites-liberation',
        description="Export a site into a self-contained static HTML tree",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Export a public consumer site
  sites-liberation --webspace my-site --output-dir ./my-site

  # Export a hosted-domain site using a configuration file
  sites-liberation --config config.yaml

  # Include revision history of every page
  sites-liberation --config config.yaml --revisions

  # Verbose logging
  sites-liberation --config config.yaml -vv
        """
    )

    parser.add_argument(
        '--version',
        action='version',
        version=f'%(prog)s {__version__}'
    )

    parser.add_argument(
        '--config',
        type=str,
        default=None,
        help=f'Path to configuration YAML file (default: {DEFAULT_CONFIG_PATH} if present)'
    )

    parser.add_argument(
        '--host',
        type=str,
        help='Sites host (default: sites.google.com)'
    )

    parser.add_argument(
        '--domain',
        type=str,
        help='Hosted domain of the site, omitted for consumer sites'
    )

    parser.add_argument(
        '--webspace',
        type=str,
        help='Name of the site to export'
    )

    parser.add_argument(
        '--output-dir',
        type=str,
        help='Directory the export tree is written under'
    )

    parser.add_argument(
        '--revisions',
        action=argparse.BooleanOptionalAction,
        default=None,
        help='Also export the revision history of every page'
    )

    parser.add_argument(
        '--workers',
        type=int,
        help='Number of concurrent export workers (default: 4)'
    )

    parser.add_argument(
        '--token',
        type=str,
        help='OAuth bearer token for private sites'
    )

    parser.add_argument(
        '--log-file',
        type=str,
        help='Also write logs to this file'
    )

    parser.add_argument(
        '-v', '--verbose',
        action='count',
        default=0,
        help='Increase verbosity (-v for INFO, -vv for DEBUG)'
    )

    return parser


def load_configuration(args: argparse.Namespace, logger: logging.Logger) -> dict:
    """
    Load the configuration file (if any), then apply CLI overrides.

    An explicitly given --config must exist; the default path is optional.

    Raises:
        FileNotFoundError: If an explicit configuration file is missing
        ValueError: If the resulting configuration is invalid
    """
    config_loader = ConfigLoader()
    config_path = args.config or DEFAULT_CONFIG_PATH

    try:
        config = config_loader.load(config_path)
        logger.info(f"Loaded configuration from {config_path}")
    except FileNotFoundError:
        if args.config:
            raise
        logger.info("No configuration file found, using defaults")
        config = config_loader.defaults()

    config = config_loader.merge_with_args(config, args)
    config_loader.validate(config)
    return config


def run_export(config: dict, logger: logging.Logger) -> int:
    """Execute the export described by a validated configuration."""
    client = SitesClient.from_config(config)
    feed_provider = FeedProviderFactory.create_provider(config, logger=logging.getLogger(f'{LOGGER_NAME}.fetchers'))

    show_bar = get_nested(config, 'export.progress_bars', True) and sys.stdout.isatty()
    listener = TqdmProgressListener() if show_bar else LoggingProgressListener()

    exporter = SiteExporter(
        feed_provider,
        max_workers=get_nested(config, 'export.max_workers', 4)
    )

    try:
        stats = exporter.export_site(
            host=get_nested(config, 'site.host'),
            domain=get_nested(config, 'site.domain'),
            webspace=get_nested(config, 'site.webspace'),
            export_revisions=get_nested(config, 'export.export_revisions', False),
            client=client,
            root_directory=get_nested(config, 'export.output_directory'),
            progress_listener=listener
        )
    except FetcherError as e:
        logger.error(f"Export failed: {e}")
        return 1
    finally:
        if isinstance(listener, TqdmProgressListener):
            listener.close()

    log_section("Summary")
    logger.info(f"Entries retrieved: {stats['entries']} ({stats['malformed']} malformed)")
    logger.info(f"Pages: {stats['pages']}, Attachments: {stats['attachments']}")
    logger.info(f"Exported: {stats['exported']}, Skipped: {stats['skipped']}, Failed: {stats['failed']}")

    if stats['failed']:
        logger.warning(f"Export completed with {stats['failed']} failed jobs; see the log for details")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the CLI."""
    parser = create_argument_parser()
    args = parser.parse_args(argv)

    try:
        logger = setup_logging(verbosity=args.verbose)

        config = load_configuration(args, logger)

        # Reconfigure logging with config file settings; -v flags win over the file level
        level = None if args.verbose else get_nested(config, 'logging.level')
        logger = setup_logging(
            verbosity=args.verbose,
            log_file=get_nested(config, 'logging.file'),
            level=level
        )

        log_section("Sites Liberation")
        logger.info(f"Version: {__version__}")
        log_config(config)

        return run_export(config, logger)

    except FileNotFoundError as e:
        print(f"ERROR: File not found: {e}", file=sys.stderr)
        return 1
    except (ValueError, yaml.YAMLError) as e:
        print(f"ERROR: Configuration error: {e}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print("\nExport interrupted by user", file=sys.stderr)
        return 130


if __name__ == "__main__":
    sys.exit(main())
