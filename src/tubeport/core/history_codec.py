"""Watch-history codec — Google Takeout ``watch-history.json``.

Takeout lists activity newest first; the history store expects entries in
the order they happened, so :func:`decode_takeout_json` reverses the
retained records before returning them.  There is no encoder.
"""

from __future__ import annotations

from tubeport.core.identifiers import take_trailing
from tubeport.core.models import (
    CHANNEL_ID_LENGTH,
    VIDEO_ID_LENGTH,
    CodecContext,
    DecodeResult,
    WatchHistoryEntry,
)
from tubeport.core.schemas import (
    TakeoutActivityLog,
    TakeoutWatchItem,
    load_document,
    validate_rows,
)

WATCH_HISTORY_MARKER = "YouTube watch history"
"""The ``activityControls`` value carried by video-watch records."""

TITLE_PREFIX = "Watched "


def is_watch_record(item: TakeoutWatchItem) -> bool:
    """All three conditions are required; partial matches are discarded.

    A title URL too short to hold a video ID counts as missing.
    """
    return (
        WATCH_HISTORY_MARKER in item.activity_controls
        and bool(item.subtitles)
        and len(item.title_url) >= VIDEO_ID_LENGTH
    )


def _uploader_channel_id(url: str | None) -> str | None:
    if url is None or len(url) < CHANNEL_ID_LENGTH:
        return None
    return take_trailing(url, CHANNEL_ID_LENGTH)


def to_history_entry(item: TakeoutWatchItem, context: CodecContext) -> WatchHistoryEntry:
    video_id = take_trailing(item.title_url, VIDEO_ID_LENGTH)
    uploader = item.subtitles[0]
    return WatchHistoryEntry(
        video_id=video_id,
        title=item.title.removeprefix(TITLE_PREFIX),
        uploader=uploader.name,
        uploader_url=_uploader_channel_id(uploader.url),
        thumbnail_url=context.thumbnail_for(video_id),
    )


def decode_takeout_json(text: str, context: CodecContext) -> DecodeResult[WatchHistoryEntry]:
    """Decode Takeout watch history into chronologically ascending entries."""
    activity = load_document(TakeoutActivityLog, text, "YouTube watch history").root
    items, skipped = validate_rows(TakeoutWatchItem, activity)

    entries: list[WatchHistoryEntry] = []
    for item in items:
        if is_watch_record(item):
            entries.append(to_history_entry(item, context))
        else:
            skipped += 1
    entries.reverse()
    return DecodeResult(records=tuple(entries), skipped=skipped)
