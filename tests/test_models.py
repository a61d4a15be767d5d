"""Tests for domain models (core/models.py).

All models are frozen dataclasses — these tests verify immutability,
equality semantics, and the small helpers the codecs rely on.
"""

from __future__ import annotations

import pytest

from tubeport.core.models import (
    CHANNEL_ID_LENGTH,
    VIDEO_ID_LENGTH,
    CodecContext,
    DecodeResult,
    ImportFormat,
    Playlist,
    Subscription,
    WatchHistoryEntry,
)
from samples import CHANNEL_A, VIDEO_A, VIDEO_B


def _make_entry(**overrides: object) -> WatchHistoryEntry:
    defaults: dict[str, object] = {
        "video_id": VIDEO_A,
        "title": "Test Video",
        "uploader": "Channel",
        "uploader_url": CHANNEL_A,
        "thumbnail_url": f"https://img.youtube.com/vi/{VIDEO_A}/mqdefault.jpg",
    }
    defaults.update(overrides)
    return WatchHistoryEntry(**defaults)  # type: ignore[arg-type]


class TestIdLengths:
    def test_sample_ids_match_lengths(self) -> None:
        assert len(VIDEO_A) == VIDEO_ID_LENGTH == 11
        assert len(CHANNEL_A) == CHANNEL_ID_LENGTH == 24


class TestPlaylist:
    def test_order_and_duplicates_preserved(self) -> None:
        playlist = Playlist(name="Mix", video_ids=(VIDEO_B, VIDEO_A, VIDEO_B))
        assert playlist.video_ids == (VIDEO_B, VIDEO_A, VIDEO_B)

    def test_defaults_to_no_videos(self) -> None:
        assert Playlist(name="Empty").video_ids == ()

    def test_frozen(self) -> None:
        playlist = Playlist(name="Mix")
        with pytest.raises(AttributeError):
            playlist.name = "Other"  # type: ignore[misc]

    def test_equality(self) -> None:
        assert Playlist("Mix", (VIDEO_A,)) == Playlist("Mix", (VIDEO_A,))


class TestSubscription:
    def test_fields_accessible(self) -> None:
        sub = Subscription(name="Channel", channel_id=CHANNEL_A)
        assert sub.name == "Channel"
        assert sub.channel_id == CHANNEL_A


class TestWatchHistoryEntry:
    def test_nullable_uploader(self) -> None:
        entry = _make_entry(uploader=None, uploader_url=None)
        assert entry.uploader is None
        assert entry.uploader_url is None

    def test_frozen(self) -> None:
        entry = _make_entry()
        with pytest.raises(AttributeError):
            entry.title = "Changed"  # type: ignore[misc]


class TestCodecContext:
    def test_default_thumbnail(self) -> None:
        assert CodecContext().thumbnail_for(VIDEO_A) == (
            f"https://img.youtube.com/vi/{VIDEO_A}/mqdefault.jpg"
        )

    def test_custom_quality(self) -> None:
        context = CodecContext(thumbnail_quality="hqdefault")
        assert context.thumbnail_for(VIDEO_A).endswith("/hqdefault.jpg")


class TestDecodeResult:
    def test_empty_is_falsy(self) -> None:
        result: DecodeResult[str] = DecodeResult()
        assert not result
        assert len(result) == 0
        assert result.skipped == 0

    def test_non_empty_is_truthy(self) -> None:
        result = DecodeResult(records=("a", "b"), skipped=3)
        assert result
        assert len(result) == 2


class TestImportFormat:
    def test_lookup_by_cli_value(self) -> None:
        assert ImportFormat("youtube-csv") is ImportFormat.YOUTUBE_CSV

    def test_values_are_unique(self) -> None:
        values = [fmt.value for fmt in ImportFormat]
        assert len(values) == len(set(values))
