"""Custom exception hierarchy for tubeport.

All exceptions that cross layer boundaries must inherit from
:class:`TubeportError`.  Raw third-party exceptions (e.g. from pydantic
or a store backend) must not propagate beyond the layer that produced
them; they are caught and re-raised as a typed subclass defined here.

Hierarchy
---------
TubeportError
├── UnsupportedFormatError
├── DecodeError
├── StoreError
└── EnvironmentError
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from tubeport.core.models import DataKind, Direction, ImportFormat


class TubeportError(Exception):
    """Base exception for all tubeport errors.

    Every user-visible error condition must map to a subclass of this
    exception so that the CLI error boundary can render a clean message
    without leaking internal stack traces.
    """

    def __init__(self, message: str, *, hint: str | None = None) -> None:
        super().__init__(message)
        self.hint: str | None = hint
        """Optional actionable guidance shown below the error message."""


# --- Format dispatch -------------------------------------------------------

class UnsupportedFormatError(TubeportError):
    """Raised when a format tag has no codec for the requested kind and direction."""

    def __init__(
        self,
        kind: DataKind,
        import_format: ImportFormat,
        direction: Direction,
        *,
        mime_type: str | None = None,
    ) -> None:
        super().__init__(
            f"{import_format.value} does not support {direction.value} "
            f"of {kind.value}.",
            hint="Run 'tubeport formats' to list the supported combinations.",
        )
        self.kind = kind
        self.import_format = import_format
        self.direction = direction
        self.mime_type = mime_type


# --- Decoding --------------------------------------------------------------

class DecodeError(TubeportError):
    """Raised when input does not match the structural shape of its declared format."""


# --- Collaborators ---------------------------------------------------------

class StoreError(TubeportError):
    """Raised when a subscription, playlist or history store call fails."""


# --- Environment / tooling -------------------------------------------------

class EnvironmentError(TubeportError):
    """Raised when a required runtime dependency is not available."""
