"""Filesystem implementations of the stream source and sink protocols."""

from __future__ import annotations

import logging
import mimetypes
from pathlib import Path
from typing import BinaryIO

logger = logging.getLogger(__name__)


class FileStreamSource:
    """Opens local files for import.  Unreadable paths yield ``None``."""

    def open(self, locator: str) -> BinaryIO | None:
        path = Path(locator).expanduser()
        try:
            return path.open("rb")
        except OSError as exc:
            logger.warning("cannot read %s: %s", path, exc)
            return None

    def guess_type(self, locator: str) -> str | None:
        mime_type, _ = mimetypes.guess_type(locator)
        return mime_type


class FileStreamSink:
    """Opens local files for export, truncating existing content."""

    def open(self, locator: str) -> BinaryIO | None:
        path = Path(locator).expanduser()
        try:
            return path.open("wb")
        except OSError as exc:
            logger.warning("cannot write %s: %s", path, exc)
            return None
