"""HTTP client for the site content feed with retry logic and streaming downloads."""

import logging
import os
import time
from pathlib import Path
from typing import Any, Dict, Optional, Union
from urllib.parse import quote

import requests
import urllib3
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

logger = logging.getLogger('sites_liberation.client')

# Optional: Use system CA certificates if requested
try:
    if os.getenv('USE_SYSTEM_CA') in ('1', 'true', 'True', 'TRUE'):
        import truststore
        truststore.inject_into_ssl()
        logger.info("Using system CA certificate store")
except ImportError:
    if os.getenv('USE_SYSTEM_CA'):
        logger.warning("truststore not installed. Install with: pip install truststore")

GDATA_VERSION = '1.4'
DOWNLOAD_CHUNK_SIZE = 64 * 1024


def get_feed_url(host: str, domain: Optional[str], webspace: str) -> str:
    """
    Build the content feed URL of a site.

    Args:
        host: Sites host, e.g. "sites.google.com"
        domain: Hosted domain, or None for consumer sites
        webspace: Site name

    Returns:
        Feed URL
    """
    return f"https://{host}/feeds/content/{quote(domain or 'site')}/{quote(webspace)}"


def get_site_url(host: str, domain: Optional[str], webspace: str) -> str:
    """Build the public base URL of a site, the prefix of every in-site link."""
    if domain:
        return f"https://{host}/a/{quote(domain)}/{quote(webspace)}"
    return f"https://{host}/site/{quote(webspace)}"


def get_revision_feed_url(entry_id: str) -> str:
    """Derive an entry's revision feed URL from its content feed id."""
    return entry_id.replace('/feeds/content/', '/feeds/revision/', 1)


class SitesClient:
    """Site feed client with authentication, retries, and rate limiting."""

    def __init__(
        self,
        token: Optional[str] = None,
        verify_ssl: bool = True,
        timeout: int = 30,
        max_retries: int = 3,
        retry_backoff_factor: float = 2.0,
        rate_limit: float = 0.0
    ):
        """
        Initialize the client.

        Args:
            token: OAuth bearer token; public sites need none
            verify_ssl: Whether to verify SSL certificates
            timeout: HTTP request timeout in seconds
            max_retries: Maximum retry attempts for transient errors
            retry_backoff_factor: Exponential backoff factor
            rate_limit: Minimum seconds between requests (0.0 = no rate limiting)
        """
        self.timeout = timeout
        self.max_retries = max_retries
        self.retry_backoff_factor = retry_backoff_factor
        self.rate_limit = rate_limit
        self.last_request_time = 0.0

        self.session = requests.Session()
        self.session.headers['GData-Version'] = GDATA_VERSION
        if token:
            self.session.headers['Authorization'] = f'Bearer {token}'
            logger.info("Initialized sites client with Bearer auth")
        else:
            logger.info("Initialized sites client without authentication")

        self.session.verify = verify_ssl
        if not verify_ssl:
            logger.warning("SSL verification disabled - this is insecure!")
            urllib3.disable_warnings(urllib3.exceptions.InsecureRequestWarning)

        retry_strategy = Retry(
            total=max_retries,
            backoff_factor=retry_backoff_factor,
            status_forcelist=[429, 500, 502, 503, 504],
            allowed_methods=["HEAD", "GET", "OPTIONS"]
        )
        adapter = HTTPAdapter(max_retries=retry_strategy)
        self.session.mount("http://", adapter)
        self.session.mount("https://", adapter)

        logger.debug(f"Client configured with timeout={timeout}s, max_retries={max_retries}, "
                     f"backoff_factor={retry_backoff_factor}, rate_limit={rate_limit}s")

    def _enforce_rate_limit(self) -> None:
        """Enforce rate limiting if configured."""
        if self.rate_limit <= 0:
            return

        time_since_last = time.time() - self.last_request_time
        if time_since_last < self.rate_limit:
            sleep_time = self.rate_limit - time_since_last
            logger.debug(f"Rate limiting: sleeping for {sleep_time:.2f}s")
            time.sleep(sleep_time)

        self.last_request_time = time.time()

    def _make_request(self, method: str, url: str, **kwargs) -> requests.Response:
        """
        Make an HTTP request and raise for error statuses.

        Raises:
            requests.exceptions.HTTPError: For HTTP errors
            requests.exceptions.Timeout: For timeout errors
            requests.exceptions.RequestException: For other request errors
        """
        self._enforce_rate_limit()

        start_time = time.time()
        logger.debug(f"Request: {method} {url}")

        try:
            response = self.session.request(method, url, timeout=self.timeout, **kwargs)
            elapsed = time.time() - start_time
            logger.debug(f"Response: {response.status_code} {url} ({elapsed:.3f}s)")
            response.raise_for_status()
            return response

        except requests.exceptions.Timeout:
            logger.error(f"Request timeout after {self.timeout}s: {method} {url}")
            raise

        except requests.exceptions.HTTPError as e:
            status_code = e.response.status_code if e.response is not None else "unknown"
            logger.error(f"HTTP Error {status_code}: {method} {url}")
            if e.response is not None:
                logger.debug(f"Error response: {e.response.text[:500]}")
            raise

        except requests.exceptions.RequestException as e:
            logger.error(f"Request error: {method} {url} - {str(e)}")
            raise

        finally:
            self.last_request_time = time.time()

    def get_feed(self, url: str, params: Optional[Dict[str, Any]] = None) -> str:
        """
        Fetch one page of an Atom feed.

        Args:
            url: Feed URL
            params: Query parameters (start-index, max-results, ...)

        Returns:
            Feed document text
        """
        response = self._make_request('GET', url, params=params)
        return response.text

    def download(self, url: str, file_path: Union[str, Path]) -> int:
        """
        Stream a resource to a file.

        The body is written to a temporary sibling first and renamed into
        place, so a failed transfer never leaves a truncated file behind.

        Args:
            url: Resource URL
            file_path: Destination path

        Returns:
            Number of bytes written
        """
        target = Path(file_path)
        partial = target.with_name(target.name + '.part')
        written = 0

        response = self._make_request('GET', url, stream=True)
        try:
            with open(partial, 'wb') as f:
                for chunk in response.iter_content(chunk_size=DOWNLOAD_CHUNK_SIZE):
                    if chunk:
                        f.write(chunk)
                        written += len(chunk)
            os.replace(partial, target)
        except BaseException:
            if partial.exists():
                partial.unlink()
            raise
        finally:
            response.close()

        logger.debug(f"Downloaded {written} bytes from {url} -> {target}")
        return written

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> 'SitesClient':
        """
        Initialize the client from a configuration dictionary.

        Args:
            config: Configuration dictionary with auth and advanced settings

        Returns:
            SitesClient instance
        """
        auth_config = config.get('auth', {}) or {}
        advanced_config = config.get('advanced', {}) or {}

        return cls(
            token=auth_config.get('token'),
            verify_ssl=advanced_config.get('verify_ssl', True),
            timeout=advanced_config.get('request_timeout', 30),
            max_retries=advanced_config.get('max_retries', 3),
            retry_backoff_factor=advanced_config.get('retry_backoff_factor', 2.0),
            rate_limit=advanced_config.get('rate_limit', 0.0)
        )
