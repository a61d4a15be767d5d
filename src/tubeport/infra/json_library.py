"""A local, directory-backed library of subscriptions, playlists and history.

Layout of the library directory::

    subscriptions.json   JSON array of {name, channel_id}
    playlists.json       JSON array of {name, video_ids}
    history.jsonl        one watch-history entry per line, append-only

The three store classes satisfy the store protocols from
:mod:`tubeport.core.protocols` so the CLI can run complete import/export
cycles without a network backend.  File access runs in a worker thread.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence
from pathlib import Path
from typing import TypeVar

from pydantic import TypeAdapter, ValidationError

from tubeport.core.models import ChannelLink, Playlist, Subscription, WatchHistoryEntry
from tubeport.core.schemas import FreeTubePlaylist, FreeTubeVideo
from tubeport.exceptions import StoreError

logger = logging.getLogger(__name__)

T = TypeVar("T")

_SUBSCRIPTIONS = TypeAdapter(list[Subscription])
_PLAYLISTS = TypeAdapter(list[Playlist])
_HISTORY_ENTRY = TypeAdapter(WatchHistoryEntry)


class JsonLibrary:
    """Resolves and reads/writes the files of one library directory."""

    SUBSCRIPTIONS_FILE = "subscriptions.json"
    PLAYLISTS_FILE = "playlists.json"
    HISTORY_FILE = "history.jsonl"

    def __init__(self, root: Path) -> None:
        self.root: Path = root

    def path(self, name: str) -> Path:
        return self.root / name

    def read_list(self, name: str, adapter: TypeAdapter[list[T]]) -> list[T]:
        path = self.path(name)
        if not path.exists():
            return []
        try:
            return adapter.validate_json(path.read_bytes())
        except (OSError, ValidationError) as exc:
            raise StoreError(
                f"Library file {path} is unreadable: {exc}",
                hint="Move the file away to start with an empty library.",
            ) from exc

    def write_list(self, name: str, adapter: TypeAdapter[list[T]], items: list[T]) -> None:
        try:
            self.root.mkdir(parents=True, exist_ok=True)
            self.path(name).write_bytes(adapter.dump_json(items, indent=2))
        except OSError as exc:
            raise StoreError(f"Cannot write library file {self.path(name)}: {exc}") from exc

    def append_line(self, name: str, line: bytes) -> None:
        try:
            self.root.mkdir(parents=True, exist_ok=True)
            with self.path(name).open("ab") as handle:
                handle.write(line + b"\n")
        except OSError as exc:
            raise StoreError(f"Cannot append to {self.path(name)}: {exc}") from exc

    def read_lines(self, name: str) -> list[bytes]:
        path = self.path(name)
        if not path.exists():
            return []
        try:
            return [line for line in path.read_bytes().splitlines() if line.strip()]
        except OSError as exc:
            raise StoreError(f"Cannot read {path}: {exc}") from exc


# ---------------------------------------------------------------------------
# Stores
# ---------------------------------------------------------------------------

class LocalSubscriptionStore:
    """Subscriptions kept in ``subscriptions.json``.

    Channel names are unknown for imported IDs; the channel ID doubles as
    the display name on export until a name is recorded.
    """

    def __init__(self, library: JsonLibrary) -> None:
        self._library = library

    async def submit(self, channel_ids: Sequence[str]) -> None:
        await asyncio.to_thread(self._add, list(channel_ids))

    async def fetch_all(self, auth_token: str | None = None) -> list[ChannelLink]:
        if auth_token:
            logger.debug("local library ignores the auth token")
        subscriptions = await asyncio.to_thread(self.load)
        return [
            ChannelLink(
                name=subscription.name or subscription.channel_id,
                url=f"/channel/{subscription.channel_id}",
            )
            for subscription in subscriptions
        ]

    def load(self) -> list[Subscription]:
        return self._library.read_list(JsonLibrary.SUBSCRIPTIONS_FILE, _SUBSCRIPTIONS)

    def _add(self, channel_ids: list[str]) -> None:
        subscriptions = self.load()
        known = {subscription.channel_id for subscription in subscriptions}
        for channel_id in channel_ids:
            if channel_id not in known:
                known.add(channel_id)
                subscriptions.append(Subscription(name="", channel_id=channel_id))
        self._library.write_list(JsonLibrary.SUBSCRIPTIONS_FILE, _SUBSCRIPTIONS, subscriptions)


class LocalPlaylistStore:
    """Playlists kept in ``playlists.json``; every submit adds new playlists."""

    def __init__(self, library: JsonLibrary) -> None:
        self._library = library

    async def submit(self, playlists: Sequence[Playlist]) -> None:
        await asyncio.to_thread(self._add, list(playlists))

    async def fetch_all_native(self) -> list[Playlist]:
        return await asyncio.to_thread(self.load)

    async def fetch_all_alt_format(self) -> list[FreeTubePlaylist]:
        playlists = await asyncio.to_thread(self.load)
        return [to_freetube_playlist(playlist) for playlist in playlists]

    def load(self) -> list[Playlist]:
        return self._library.read_list(JsonLibrary.PLAYLISTS_FILE, _PLAYLISTS)

    def _add(self, playlists: list[Playlist]) -> None:
        stored = self.load()
        stored.extend(playlists)
        self._library.write_list(JsonLibrary.PLAYLISTS_FILE, _PLAYLISTS, stored)


class LocalHistoryStore:
    """Append-only watch history in ``history.jsonl``."""

    def __init__(self, library: JsonLibrary) -> None:
        self._library = library

    async def append(self, entry: WatchHistoryEntry) -> None:
        await asyncio.to_thread(
            self._library.append_line,
            JsonLibrary.HISTORY_FILE,
            _HISTORY_ENTRY.dump_json(entry),
        )

    def load(self) -> list[WatchHistoryEntry]:
        entries: list[WatchHistoryEntry] = []
        for line in self._library.read_lines(JsonLibrary.HISTORY_FILE):
            try:
                entries.append(_HISTORY_ENTRY.validate_json(line))
            except ValidationError:
                logger.warning("skipping corrupt history line in %s", self._library.root)
        return entries


def to_freetube_playlist(playlist: Playlist) -> FreeTubePlaylist:
    """Build a FreeTube playlist; per-video details are left at their defaults."""
    return FreeTubePlaylist(
        playlistName=playlist.name,
        videos=[FreeTubeVideo(videoId=video_id) for video_id in playlist.video_ids],
    )
