from __future__ import annotations

import csv
import logging
from pathlib import Path
from typing import Optional, TextIO

from teams_presence.adapters.console import HEADER, format_flag
from teams_presence.domain.errors import ExportSetupError
from teams_presence.domain.models import PresenceRecord

logger = logging.getLogger(__name__)


class CsvPresenceExporter:
    """Writes presence records to a CSV file, one row per record.

    The file is truncated and the header row written on construction. Failures
    at that point raise ``ExportSetupError``; failures writing individual rows are
    logged and the export carries on.
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        self._file: Optional[TextIO] = None
        try:
            self._file = open(self.path, "w", newline="", encoding="utf-8")
        except OSError as e:
            raise ExportSetupError(f"Failed to create file {self.path}: {e}") from e
        self._writer = csv.writer(self._file, lineterminator="\n")
        try:
            self._writer.writerow(HEADER)
        except (OSError, csv.Error) as e:
            self.close()
            raise ExportSetupError(f"Failed to write CSV header to {self.path}: {e}") from e
        logger.info("Exporting presence to %s", self.path)

    def write(self, record: PresenceRecord) -> None:
        row = [
            record.identifier,
            record.availability,
            record.activity,
            format_flag(record.out_of_office),
        ]
        try:
            self._writer.writerow(row)
        except (OSError, csv.Error, ValueError) as e:
            logger.error("Failed to write CSV row for object ID %s: %s", record.identifier, e)

    def close(self) -> None:
        if self._file is None:
            return
        file, self._file = self._file, None
        try:
            file.flush()
        except OSError as e:
            logger.error("Failed to flush CSV export %s: %s", self.path, e)
        finally:
            try:
                file.close()
            except OSError as e:
                logger.error("Failed to close CSV export %s: %s", self.path, e)

    def __enter__(self) -> "CsvPresenceExporter":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
