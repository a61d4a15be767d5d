"""Infrastructure layer — filesystem-backed collaborators.

This layer implements the protocols in :mod:`tubeport.core.protocols`
on top of the local filesystem.  Raw ``OSError`` from opening a stream
is turned into an absent stream; store failures surface as
:class:`~tubeport.exceptions.StoreError`.

Rules
-----
* No imports from ``cli``.
* No user-facing output (no ``print()``, no Rich rendering).
"""

from tubeport.infra.file_streams import FileStreamSink, FileStreamSource
from tubeport.infra.json_library import (
    JsonLibrary,
    LocalHistoryStore,
    LocalPlaylistStore,
    LocalSubscriptionStore,
)

__all__: list[str] = [
    "FileStreamSink",
    "FileStreamSource",
    "JsonLibrary",
    "LocalHistoryStore",
    "LocalPlaylistStore",
    "LocalSubscriptionStore",
]
