"""Domain models for tubeport.

Canonical records are **frozen** dataclasses — immutable value objects
with no behaviour beyond data access.  They are independent of any
external format and carry zero I/O.

The closed enumerations at the bottom of the module (:class:`ImportFormat`,
:class:`DataKind`, :class:`Direction`) together form the dispatch key used
by :mod:`tubeport.core.dispatcher`.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Generic, TypeVar

VIDEO_ID_LENGTH: int = 11
"""Length of a normalized YouTube video ID."""

CHANNEL_ID_LENGTH: int = 24
"""Length of a normalized YouTube channel ID (``UC`` + 22 characters)."""

DEFAULT_FRONTEND_URL = "https://www.youtube.com"
DEFAULT_PLAYLIST_NAME = "Imported Playlist"
DEFAULT_THUMBNAIL_TEMPLATE = "https://img.youtube.com/vi/{video_id}/{quality}.jpg"
DEFAULT_THUMBNAIL_QUALITY = "mqdefault"


# ---------------------------------------------------------------------------
# Canonical records
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class Subscription:
    """A channel the user is subscribed to."""

    name: str
    """Channel display name."""

    channel_id: str
    """24-character channel ID."""


@dataclass(frozen=True, slots=True)
class ChannelLink:
    """A subscription as returned by the subscription store on export.

    The store reports channels by a path relative to the front-end
    origin (e.g. ``/channel/UC...``); codecs rebuild the absolute URL.
    """

    name: str
    url: str


@dataclass(frozen=True, slots=True)
class Playlist:
    """A named, ordered list of video IDs.

    Order is significant and preserved as encountered in the source;
    duplicates are kept.
    """

    name: str
    video_ids: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class WatchHistoryEntry:
    """One watched video, ready to be appended to the history store."""

    video_id: str
    """11-character video ID."""

    title: str
    """Video title without the ``Watched`` prefix."""

    uploader: str | None
    """Channel display name, when the source names one."""

    uploader_url: str | None
    """24-character channel ID of the uploader, when derivable."""

    thumbnail_url: str
    """Synthesized from :attr:`video_id`; never present in the source."""


# ---------------------------------------------------------------------------
# Codec configuration
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class CodecContext:
    """The settings a codec is allowed to see."""

    frontend_url: str = DEFAULT_FRONTEND_URL
    default_playlist_name: str = DEFAULT_PLAYLIST_NAME
    thumbnail_template: str = DEFAULT_THUMBNAIL_TEMPLATE
    thumbnail_quality: str = DEFAULT_THUMBNAIL_QUALITY

    def thumbnail_for(self, video_id: str) -> str:
        return self.thumbnail_template.format(
            video_id=video_id,
            quality=self.thumbnail_quality,
        )


# ---------------------------------------------------------------------------
# Decode results
# ---------------------------------------------------------------------------

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class DecodeResult(Generic[T]):
    """Records recovered from a file plus the number of rows dropped.

    ``skipped`` is informational only; dropped rows are never reported
    as errors.
    """

    records: tuple[T, ...] = ()
    skipped: int = 0

    def __len__(self) -> int:
        return len(self.records)

    def __bool__(self) -> bool:
        return len(self.records) > 0


# ---------------------------------------------------------------------------
# Dispatch key
# ---------------------------------------------------------------------------

class ImportFormat(enum.Enum):
    """Closed set of external encodings understood by tubeport."""

    NEWPIPE = "newpipe"
    FREETUBE = "freetube"
    YOUTUBE_CSV = "youtube-csv"
    YOUTUBE_JSON = "youtube-json"
    PIPED = "piped"
    URLS_OR_IDS = "urls-or-ids"


class DataKind(enum.Enum):
    SUBSCRIPTIONS = "subscriptions"
    PLAYLISTS = "playlists"
    WATCH_HISTORY = "watch history"


class Direction(enum.Enum):
    IMPORT = "import"
    EXPORT = "export"


class TransferOutcome(enum.Enum):
    """Caller-visible result of one facade operation."""

    SUCCESS = "success"
    EMPTY = "empty"
    """Structurally valid input with zero usable records."""
    UNAVAILABLE = "unavailable"
    """The source or sink could not be opened."""
    UNSUPPORTED = "unsupported"
    FAILED = "failed"
