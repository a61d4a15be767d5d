"""Protocols (interfaces) consumed by the core layer.

These define the contracts that infrastructure adapters must satisfy.
Core code depends ONLY on these protocols — never on concrete
implementations — preserving the dependency inversion principle.

Stream openers are synchronous and may return ``None`` when the target
cannot be opened.  Stores are asynchronous because real backends talk to
a network service or a database.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import BinaryIO, Protocol

from tubeport.core.models import ChannelLink, Playlist, WatchHistoryEntry
from tubeport.core.schemas import FreeTubePlaylist


class StreamSource(Protocol):
    """Opens readable byte streams for import."""

    def open(self, locator: str) -> BinaryIO | None:
        """Open *locator* for reading, or return ``None`` if it is unavailable."""
        ...  # pragma: no cover

    def guess_type(self, locator: str) -> str | None:
        """Best-effort MIME type of *locator*, used in error messages."""
        ...  # pragma: no cover


class StreamSink(Protocol):
    """Opens writable byte streams for export."""

    def open(self, locator: str) -> BinaryIO | None:
        """Open *locator* for writing, or return ``None`` if it is unavailable."""
        ...  # pragma: no cover


class SubscriptionStore(Protocol):
    """Contract for the backend that owns the user's subscriptions.

    Implementations must map backend-specific exceptions to
    :class:`~tubeport.exceptions.TubeportError` subclasses or let them
    escape to the facade, which wraps them as
    :class:`~tubeport.exceptions.StoreError`.
    """

    async def submit(self, channel_ids: Sequence[str]) -> None:
        """Subscribe to every channel in *channel_ids*."""
        ...  # pragma: no cover

    async def fetch_all(self, auth_token: str | None = None) -> list[ChannelLink]:
        """Return every subscribed channel with a front-end relative URL."""
        ...  # pragma: no cover


class PlaylistStore(Protocol):
    """Contract for the backend that owns the user's playlists."""

    async def submit(self, playlists: Sequence[Playlist]) -> None:
        """Create one playlist per entry, preserving video order."""
        ...  # pragma: no cover

    async def fetch_all_native(self) -> list[Playlist]:
        ...  # pragma: no cover

    async def fetch_all_alt_format(self) -> list[FreeTubePlaylist]:
        """Return playlists with the per-video details FreeTube exports carry."""
        ...  # pragma: no cover


class HistoryStore(Protocol):
    """Append-only watch history."""

    async def append(self, entry: WatchHistoryEntry) -> None:
        ...  # pragma: no cover


class Notifier(Protocol):
    """Fire-and-forget user notification."""

    def notify(self, message: str) -> None:
        ...  # pragma: no cover
