"""Attachment downloader transferring attachment bytes into the export tree."""

import logging
from pathlib import Path
from typing import Any, Optional, Union

import requests

from ..exceptions import DownloadError
from ..models import Entry


class AttachmentDownloader:
    """Streams an attachment's content to a file through the remote client."""

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger('sites_liberation.exporters.attachment_downloader')

    def download(self, attachment: Entry, file_path: Union[str, Path], client: Any) -> int:
        """
        Download an attachment.

        Args:
            attachment: Attachment entry with a download URL
            file_path: Destination file
            client: Remote service providing download(url, path)

        Returns:
            Number of bytes written

        Raises:
            DownloadError: If the attachment has no source or the transfer fails
        """
        if not attachment.src:
            raise DownloadError(f"Attachment '{attachment.title}' (ID: {attachment.id}) has no download URL")

        try:
            size = client.download(attachment.src, file_path)
        except (requests.exceptions.RequestException, OSError) as e:
            raise DownloadError(
                f"Failed to download '{attachment.title}' (ID: {attachment.id}) to {file_path}: {e}"
            ) from e

        self.logger.debug(f"Saved attachment '{attachment.title}' -> {file_path} ({size} bytes)")
        return size
