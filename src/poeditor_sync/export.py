"""Download an exported localization file from POEditor.

Three steps, no reconciliation:

1. Ask ``projects/export`` for a download URL.
2. Fetch the file from that URL.
3. Replace the destination file atomically (parents are created).

Any failure propagates; the destination is either untouched or fully
replaced.
"""

from __future__ import annotations

import logging
from pathlib import Path

from pydantic import BaseModel

from .config import Config, DownloadOptions
from .core.client import PoeditorClient
from .core.schema import ExportType
from .errors import SettingsInvalid
from .file_handler import normalize_path, write_bytes_atomic

logger = logging.getLogger(__name__)


class DownloadResult(BaseModel):
    """Outcome of a download run."""

    language: str
    export_type: ExportType
    url: str
    destination: Path
    bytes_written: int

    model_config = {"frozen": True}


class ExportDownloader:
    """Export one language and write it to a local file.

    Args:
        client: POEditor API client (owned by the caller).
        config: Connection settings.
        options: Destination path and export format.
    """

    def __init__(
        self,
        client: PoeditorClient,
        config: Config,
        options: DownloadOptions,
    ) -> None:
        if not options.destination or not options.destination.strip():
            raise SettingsInvalid("Destination path cannot be empty")
        self.client = client
        self.config = config
        self.options = options

    def run(self) -> DownloadResult:
        """Request, fetch and write the export.

        Raises:
            WrongResponse: The export request was rejected.
            requests.RequestException: Transport failure.
            OSError: The destination could not be written.
        """
        language = self.config.language
        export_type = self.options.export_type
        destination = normalize_path(self.options.destination)

        logger.info(
            "Requesting %s localization export (%s)",
            language,
            export_type.value,
        )
        url = self.client.request_export(export_type, language)
        logger.info("Download url is %s", url)

        data = self.client.fetch_exported_file(url)
        logger.info("Downloaded %d bytes", len(data))

        written = write_bytes_atomic(destination, data)
        logger.info("File successfully written at path %s", destination)

        return DownloadResult(
            language=language,
            export_type=export_type,
            url=url,
            destination=destination,
            bytes_written=written,
        )
