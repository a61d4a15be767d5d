"""User-facing notice texts sent through :class:`~tubeport.core.protocols.Notifier`."""

from __future__ import annotations

IMPORT_SUCCESS = "Import successful"
EXPORT_SUCCESS = "Export successful"
SUCCESS = "Success"
EMPTY_LIST = "Nothing to import: the file contains no usable entries"
UNSUPPORTED_FILE_FORMAT = "Unsupported file format: {}"


def unsupported_file_format(label: str | None) -> str:
    return UNSUPPORTED_FILE_FORMAT.format(label or "unknown")
