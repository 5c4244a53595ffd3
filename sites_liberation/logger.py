"""Structured logging infrastructure with verbosity levels and progress tracking."""

import copy
import logging
import logging.handlers
import threading
import time
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

import colorlog
from tqdm import tqdm

LOGGER_NAME = 'sites_liberation'

FINISHED_STATUS = "Export Finished."


def setup_logging(
    verbosity: int = 0,
    log_file: Optional[str] = None,
    log_format: Optional[str] = None,
    date_format: Optional[str] = None,
    level: Optional[str] = None
) -> logging.Logger:
    """
    Set up structured logging with configurable verbosity levels.

    Args:
        verbosity: Verbosity level (0=WARNING, 1=INFO, 2+=DEBUG)
        log_file: Optional path to log file
        log_format: Optional custom log format string
        date_format: Optional custom date format string
        level: Optional explicit log level string

    Returns:
        Configured logger instance
    """
    if level:
        allowed_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        level_upper = level.upper()
        if level_upper not in allowed_levels:
            raise ValueError(
                f"Invalid log level '{level}'. Must be one of: {sorted(allowed_levels)}"
            )
        log_level = getattr(logging, level_upper)
    else:
        if verbosity >= 2:
            log_level = logging.DEBUG
        elif verbosity >= 1:
            log_level = logging.INFO
        else:
            log_level = logging.WARNING

    if log_format is None:
        log_format = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

    if date_format is None:
        date_format = '%Y-%m-%d %H:%M:%S'

    # Root stays at WARNING to keep dependency noise out
    logging.basicConfig(
        level=logging.WARNING,
        format=log_format,
        datefmt=date_format
    )

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(log_level)
    logger.propagate = False
    logger.handlers.clear()

    console_handler = logging.StreamHandler()
    console_handler.setLevel(log_level)
    console_handler.setFormatter(colorlog.ColoredFormatter(
        fmt='%(log_color)s' + log_format,
        datefmt=date_format,
        log_colors={
            'DEBUG': 'cyan',
            'INFO': 'green',
            'WARNING': 'yellow',
            'ERROR': 'red',
            'CRITICAL': 'red,bg_white',
        }
    ))
    logger.addHandler(console_handler)

    if log_file:
        try:
            file_handler = logging.handlers.RotatingFileHandler(
                log_file,
                maxBytes=10 * 1024 * 1024,  # 10MB
                backupCount=5,
                encoding='utf-8'
            )
            file_handler.setLevel(log_level)
            file_handler.setFormatter(logging.Formatter(fmt=log_format, datefmt=date_format))
            logger.addHandler(file_handler)

            logger.info(f"Logging to file: {log_file}")
            logger.info(f"Log level: {logging.getLevelName(log_level)}")
        except OSError as e:
            logger.warning(f"Failed to set up file logging: {str(e)}")
    else:
        logger.info(f"Console logging only. Level: {logging.getLevelName(log_level)}")

    return logger


class ProgressListener(ABC):
    """Receives status messages and progress fractions from an export run."""

    @abstractmethod
    def set_status(self, message: str) -> None:
        pass

    @abstractmethod
    def set_progress(self, fraction: float) -> None:
        pass


class LoggingProgressListener(ProgressListener):
    """Reports status at INFO and progress at DEBUG."""

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger(f'{LOGGER_NAME}.progress')

    def set_status(self, message: str) -> None:
        self.logger.info(message)

    def set_progress(self, fraction: float) -> None:
        self.logger.debug(f"Progress: {fraction:.1%}")


class TqdmProgressListener(ProgressListener):
    """Drives a tqdm bar scaled to 0..100 percent."""

    def __init__(self, desc: str = "Exporting", disable: bool = False):
        self.bar = tqdm(total=100, desc=desc, unit='%', disable=disable,
                        bar_format='{desc}: {percentage:3.0f}%|{bar}| [{elapsed}]')
        self._lock = threading.Lock()

    def set_status(self, message: str) -> None:
        with self._lock:
            self.bar.set_postfix_str(message[:60], refresh=True)

    def set_progress(self, fraction: float) -> None:
        with self._lock:
            target = round(fraction * 100, 2)
            if target > self.bar.n:
                self.bar.update(target - self.bar.n)

    def close(self) -> None:
        self.bar.close()


class ProgressTracker:
    """
    Thread-safe completion counter for a fixed amount of work.

    Workers call increment() once per finished job, whether it succeeded,
    was skipped, or failed. The finished status is emitted exactly once,
    and the 1.0 progress event is always the last one sent.
    """

    def __init__(
        self,
        total_units: int,
        progress_listener: Optional[ProgressListener] = None,
        item_type: str = "jobs"
    ):
        """
        Initialize progress tracker.

        Args:
            total_units: Total number of jobs, fixed before any job starts
            progress_listener: Listener receiving status and progress updates
            item_type: Description of item type (e.g., "pages", "attachments")
        """
        if total_units <= 0:
            raise ValueError("total_units must be positive; zero-work runs must not be tracked")
        self.total_units = total_units
        self.progress_listener = progress_listener or LoggingProgressListener()
        self.item_type = item_type
        self.completed = 0
        self.successful = 0
        self.failed = 0
        self.skipped = 0
        self.start_time = time.time()
        self._lock = threading.Lock()
        self.logger = logging.getLogger(f'{LOGGER_NAME}.progress')

    @property
    def progress_fraction(self) -> float:
        with self._lock:
            return self.completed / self.total_units

    @property
    def is_finished(self) -> bool:
        with self._lock:
            return self.completed >= self.total_units

    def increment(self, outcome: str = 'success') -> None:
        """
        Record one completed job.

        Args:
            outcome: 'success', 'skipped' or 'failed'
        """
        # Listener calls stay inside the lock so updates reach it in order
        with self._lock:
            if self.completed >= self.total_units:
                self.logger.warning("increment() called after all work completed")
                return

            self.completed += 1
            if outcome == 'failed':
                self.failed += 1
            elif outcome == 'skipped':
                self.skipped += 1
            else:
                self.successful += 1

            finished = self.completed == self.total_units
            if finished:
                self.progress_listener.set_status(FINISHED_STATUS)
            self.progress_listener.set_progress(self.completed / self.total_units)

            if self.completed % 10 == 0 or finished:
                self.logger.info(
                    f"Processed {self.completed}/{self.total_units} {self.item_type} "
                    f"({self.total_units - self.completed} remaining)"
                )

    def get_stats(self) -> Dict[str, Any]:
        """Get current progress statistics."""
        with self._lock:
            elapsed = time.time() - self.start_time
            return {
                'total': self.total_units,
                'completed': self.completed,
                'successful': self.successful,
                'skipped': self.skipped,
                'failed': self.failed,
                'progress': self.completed / self.total_units,
                'elapsed_time': elapsed,
                'elapsed_time_formatted': self._format_elapsed(elapsed)
            }

    @staticmethod
    def _format_elapsed(seconds: float) -> str:
        """Format elapsed time in human-readable format."""
        if seconds < 60:
            return f"{seconds:.1f}s"

        minutes = int(seconds // 60)
        seconds = int(seconds % 60)

        if minutes < 60:
            return f"{minutes}m {seconds}s"

        hours = minutes // 60
        minutes = minutes % 60

        return f"{hours}h {minutes}m {seconds}s"


def log_section(title: str) -> None:
    """
    Log a decorative section header.

    Args:
        title: Section title to display
    """
    logger = logging.getLogger(LOGGER_NAME)

    separator = "=" * 60
    logger.info("")
    logger.info(separator)
    logger.info(f"  {title.upper()}")
    logger.info(separator)
    logger.info("")


def log_config(config: Dict[str, Any]) -> None:
    """
    Log sanitized configuration for debugging.

    Args:
        config: Configuration dictionary to log
    """
    logger = logging.getLogger(LOGGER_NAME)
    sanitized = _sanitize_config(config)

    log_section("Configuration")

    site = sanitized.get('site', {}) or {}
    logger.info(f"Host: {site.get('host', 'Not Set')}")
    logger.info(f"Domain: {site.get('domain') or 'None'}")
    logger.info(f"Webspace: {site.get('webspace', 'Not Set')}")

    auth = sanitized.get('auth', {}) or {}
    logger.info(f"Token: {auth.get('token') or 'Not Set'}")
    logger.info("")

    export_settings = sanitized.get('export', {}) or {}
    logger.info(f"Output Directory: {export_settings.get('output_directory', './site-export')}")
    logger.info(f"Export Revisions: {export_settings.get('export_revisions', False)}")
    logger.info(f"Max Workers: {export_settings.get('max_workers', 4)}")

    advanced = sanitized.get('advanced', {}) or {}
    logger.info(f"Request Timeout: {advanced.get('request_timeout', 30)}s")
    logger.info(f"Page Size: {advanced.get('page_size', 100)}")


def _sanitize_config(config: Dict[str, Any]) -> Dict[str, Any]:
    """
    Create a sanitized copy of configuration with sensitive fields masked.

    Args:
        config: Configuration dictionary

    Returns:
        Sanitized configuration copy
    """
    sensitive_fields = {'password', 'token', 'secret', 'api_key', 'auth_header'}

    def mask_sensitive(data: Any) -> Any:
        if isinstance(data, dict):
            masked = {}
            for key, value in data.items():
                is_sensitive = any(sensitive in key.lower() for sensitive in sensitive_fields)
                if is_sensitive and isinstance(value, str):
                    masked[key] = "***REDACTED***"
                else:
                    masked[key] = mask_sensitive(value)
            return masked
        elif isinstance(data, list):
            return [mask_sensitive(item) for item in data]
        return data

    return mask_sensitive(copy.deepcopy(config))


__all__ = [
    'FINISHED_STATUS',
    'LoggingProgressListener',
    'ProgressListener',
    'ProgressTracker',
    'TqdmProgressListener',
    'log_config',
    'log_section',
    'setup_logging',
]
