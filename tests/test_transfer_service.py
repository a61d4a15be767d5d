"""Tests for TransferService (core/transfer_service.py).

Streams, stores and the notifier are mocked — no filesystem, no
network.  These tests verify:

* Records reach the right store call in the right order
* Exactly one notification per operation, success distinct from errors
* Empty results and unavailable streams are outcomes, not errors
* Unsupported exports raise before anything is fetched or written
* Store failures are wrapped and reported, never raised
"""

from __future__ import annotations

import io
import json
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest

from tubeport.core import notices
from tubeport.core.models import (
    ChannelLink,
    CodecContext,
    ImportFormat,
    Playlist,
    TransferOutcome,
)
from tubeport.core.playlist_codec import decode_piped
from tubeport.core.schemas import FreeTubePlaylist, FreeTubeVideo
from tubeport.core.transfer_service import TransferService
from tubeport.exceptions import StoreError, UnsupportedFormatError
from samples import CHANNEL_A, CHANNEL_B, CHANNEL_C, VIDEO_A, VIDEO_B


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

class _CapturingBuffer(io.BytesIO):
    """BytesIO that remembers its content after being closed."""

    captured: bytes = b""

    def close(self) -> None:
        if not self.closed:
            self.captured = self.getvalue()
        super().close()


def _source(data: bytes | None, *, mime_type: str | None = None) -> MagicMock:
    source = MagicMock()
    source.open.return_value = io.BytesIO(data) if data is not None else None
    source.guess_type.return_value = mime_type
    return source


def _sink(available: bool = True) -> tuple[MagicMock, _CapturingBuffer]:
    buffer = _CapturingBuffer()
    sink = MagicMock()
    sink.open.return_value = buffer if available else None
    return sink, buffer


def _service(
    *,
    source: MagicMock | None = None,
    sink: MagicMock | None = None,
    subscriptions: AsyncMock | None = None,
    playlists: AsyncMock | None = None,
    history: AsyncMock | None = None,
    auth_token: str | None = None,
) -> tuple[TransferService, MagicMock]:
    notifier = MagicMock()
    service = TransferService(
        source=source or _source(b""),
        sink=sink or _sink()[0],
        subscriptions=subscriptions or AsyncMock(),
        playlists=playlists or AsyncMock(),
        history=history or AsyncMock(),
        notifier=notifier,
        context=CodecContext(),
        auth_token=auth_token,
    )
    return service, notifier


def _takeout_subscriptions_csv() -> bytes:
    return (
        "Channel Id,Channel Url,Channel Title\n"
        f"{CHANNEL_A},u,A\n{CHANNEL_B},u,B\n{CHANNEL_C},u,C\n"
    ).encode()


def _watch_record(video_id: str) -> dict[str, Any]:
    return {
        "title": f"Watched {video_id}",
        "titleUrl": f"https://www.youtube.com/watch?v={video_id}",
        "subtitles": [{"name": "Ch", "url": f"https://www.youtube.com/channel/{CHANNEL_A}"}],
        "activityControls": ["YouTube watch history"],
    }


# ---------------------------------------------------------------------------
# Imports
# ---------------------------------------------------------------------------

class TestImportSubscriptions:
    @pytest.mark.asyncio
    async def test_submits_channel_ids(self) -> None:
        subscriptions = AsyncMock()
        service, notifier = _service(
            source=_source(_takeout_subscriptions_csv()), subscriptions=subscriptions,
        )

        outcome = await service.import_subscriptions(ImportFormat.YOUTUBE_CSV, "subs.csv")

        assert outcome is TransferOutcome.SUCCESS
        subscriptions.submit.assert_awaited_once_with([CHANNEL_A, CHANNEL_B, CHANNEL_C])
        notifier.notify.assert_called_once_with(notices.IMPORT_SUCCESS)

    @pytest.mark.asyncio
    async def test_byte_order_mark_ignored(self) -> None:
        subscriptions = AsyncMock()
        data = b"\xef\xbb\xbf" + f"{CHANNEL_A},u,A\n".encode()
        service, _ = _service(source=_source(data), subscriptions=subscriptions)

        await service.import_subscriptions(ImportFormat.YOUTUBE_CSV, "subs.csv")

        subscriptions.submit.assert_awaited_once_with([CHANNEL_A])

    @pytest.mark.asyncio
    async def test_stream_closed_after_read(self) -> None:
        source = _source(_takeout_subscriptions_csv())
        stream = source.open.return_value
        service, _ = _service(source=source)

        await service.import_subscriptions(ImportFormat.YOUTUBE_CSV, "subs.csv")

        assert stream.closed

    @pytest.mark.asyncio
    async def test_unsupported_format_notifies_mime_type(self) -> None:
        source = _source(b"x", mime_type="text/plain")
        service, notifier = _service(source=source)

        outcome = await service.import_subscriptions(ImportFormat.PIPED, "subs.txt")

        assert outcome is TransferOutcome.UNSUPPORTED
        notifier.notify.assert_called_once_with("Unsupported file format: text/plain")
        source.open.assert_not_called()

    @pytest.mark.asyncio
    async def test_unsupported_format_without_mime_uses_tag(self) -> None:
        service, notifier = _service(source=_source(b"x"))

        await service.import_subscriptions(ImportFormat.URLS_OR_IDS, "subs")

        notifier.notify.assert_called_once_with("Unsupported file format: urls-or-ids")

    @pytest.mark.asyncio
    async def test_decode_error_is_reported(self) -> None:
        subscriptions = AsyncMock()
        service, notifier = _service(source=_source(b"{oops"), subscriptions=subscriptions)

        outcome = await service.import_subscriptions(ImportFormat.NEWPIPE, "subs.json")

        assert outcome is TransferOutcome.FAILED
        subscriptions.submit.assert_not_awaited()
        (message,), _ = notifier.notify.call_args
        assert message.startswith("Not a valid NewPipe subscription file")

    @pytest.mark.asyncio
    async def test_store_failure_is_wrapped(self) -> None:
        subscriptions = AsyncMock()
        subscriptions.submit.side_effect = RuntimeError("backend down")
        service, notifier = _service(
            source=_source(_takeout_subscriptions_csv()), subscriptions=subscriptions,
        )

        outcome = await service.import_subscriptions(ImportFormat.YOUTUBE_CSV, "subs.csv")

        assert outcome is TransferOutcome.FAILED
        notifier.notify.assert_called_once_with("Could not import subscriptions: backend down")

    @pytest.mark.asyncio
    async def test_store_error_passes_through(self) -> None:
        subscriptions = AsyncMock()
        subscriptions.submit.side_effect = StoreError("quota exceeded")
        service, notifier = _service(
            source=_source(_takeout_subscriptions_csv()), subscriptions=subscriptions,
        )

        await service.import_subscriptions(ImportFormat.YOUTUBE_CSV, "subs.csv")

        notifier.notify.assert_called_once_with("quota exceeded")


class TestImportPlaylists:
    @pytest.mark.asyncio
    async def test_submits_playlists(self) -> None:
        playlists = AsyncMock()
        data = f"{VIDEO_A}\nhttps://youtu.be/{VIDEO_B}\n".encode()
        service, notifier = _service(source=_source(data), playlists=playlists)

        outcome = await service.import_playlists(ImportFormat.URLS_OR_IDS, "list.txt")

        assert outcome is TransferOutcome.SUCCESS
        playlists.submit.assert_awaited_once_with(
            [Playlist(CodecContext().default_playlist_name, (VIDEO_A, VIDEO_B))],
        )
        notifier.notify.assert_called_once_with(notices.SUCCESS)

    @pytest.mark.asyncio
    async def test_empty_result_is_not_an_error(self) -> None:
        playlists = AsyncMock()
        service, notifier = _service(source=_source(b"just one line\n"), playlists=playlists)

        outcome = await service.import_playlists(ImportFormat.YOUTUBE_CSV, "p.csv")

        assert outcome is TransferOutcome.EMPTY
        playlists.submit.assert_not_awaited()
        notifier.notify.assert_called_once_with(notices.EMPTY_LIST)

    @pytest.mark.asyncio
    async def test_unavailable_source_counts_as_no_data(self) -> None:
        playlists = AsyncMock()
        service, notifier = _service(source=_source(None), playlists=playlists)

        outcome = await service.import_playlists(ImportFormat.PIPED, "gone.json")

        assert outcome is TransferOutcome.EMPTY
        playlists.submit.assert_not_awaited()
        notifier.notify.assert_called_once_with(notices.EMPTY_LIST)

    @pytest.mark.asyncio
    async def test_non_utf8_input_fails(self) -> None:
        service, notifier = _service(source=_source(b"\xff\xfe\x00bad"))

        outcome = await service.import_playlists(ImportFormat.URLS_OR_IDS, "list.txt")

        assert outcome is TransferOutcome.FAILED
        (message,), _ = notifier.notify.call_args
        assert "UTF-8" in message


class TestImportWatchHistory:
    @pytest.mark.asyncio
    async def test_appends_oldest_first(self) -> None:
        history = AsyncMock()
        data = json.dumps([_watch_record(VIDEO_B), _watch_record(VIDEO_A)]).encode()
        service, notifier = _service(source=_source(data), history=history)

        outcome = await service.import_watch_history(ImportFormat.YOUTUBE_JSON, "h.json")

        assert outcome is TransferOutcome.SUCCESS
        appended = [call.args[0].video_id for call in history.append.await_args_list]
        assert appended == [VIDEO_A, VIDEO_B]
        notifier.notify.assert_called_once_with(notices.SUCCESS)

    @pytest.mark.asyncio
    async def test_no_watch_records_is_empty(self) -> None:
        history = AsyncMock()
        data = json.dumps([{"title": "Searched for cats", "activityControls": []}]).encode()
        service, notifier = _service(source=_source(data), history=history)

        outcome = await service.import_watch_history(ImportFormat.YOUTUBE_JSON, "h.json")

        assert outcome is TransferOutcome.EMPTY
        history.append.assert_not_awaited()
        notifier.notify.assert_called_once_with(notices.EMPTY_LIST)

    @pytest.mark.asyncio
    async def test_other_formats_unsupported(self) -> None:
        service, _ = _service(source=_source(b"[]"))
        outcome = await service.import_watch_history(ImportFormat.FREETUBE, "h.db")
        assert outcome is TransferOutcome.UNSUPPORTED


# ---------------------------------------------------------------------------
# Exports
# ---------------------------------------------------------------------------

class TestExportSubscriptions:
    @pytest.mark.asyncio
    async def test_writes_newpipe_document(self) -> None:
        subscriptions = AsyncMock()
        subscriptions.fetch_all.return_value = [
            ChannelLink(name="Alpha", url=f"/channel/{CHANNEL_A}"),
        ]
        sink, buffer = _sink()
        service, notifier = _service(sink=sink, subscriptions=subscriptions, auth_token="tok")

        outcome = await service.export_subscriptions(ImportFormat.NEWPIPE, "out.json")

        assert outcome is TransferOutcome.SUCCESS
        subscriptions.fetch_all.assert_awaited_once_with("tok")
        document = json.loads(buffer.captured)
        assert document["subscriptions"][0]["url"] == f"https://www.youtube.com/channel/{CHANNEL_A}"
        notifier.notify.assert_called_once_with(notices.EXPORT_SUCCESS)

    @pytest.mark.asyncio
    async def test_unsupported_raises_without_writing(self) -> None:
        subscriptions = AsyncMock()
        sink, _ = _sink()
        service, notifier = _service(sink=sink, subscriptions=subscriptions)

        with pytest.raises(UnsupportedFormatError):
            await service.export_subscriptions(ImportFormat.YOUTUBE_CSV, "out.csv")

        sink.open.assert_not_called()
        subscriptions.fetch_all.assert_not_awaited()
        notifier.notify.assert_not_called()

    @pytest.mark.asyncio
    async def test_fetch_failure_writes_nothing(self) -> None:
        subscriptions = AsyncMock()
        subscriptions.fetch_all.side_effect = ConnectionError("offline")
        sink, _ = _sink()
        service, notifier = _service(sink=sink, subscriptions=subscriptions)

        outcome = await service.export_subscriptions(ImportFormat.FREETUBE, "out.db")

        assert outcome is TransferOutcome.FAILED
        sink.open.assert_not_called()
        notifier.notify.assert_called_once_with("Could not fetch subscriptions: offline")


class TestExportPlaylists:
    @pytest.mark.asyncio
    async def test_piped_round_trip(self) -> None:
        stored = [
            Playlist("Mix", (VIDEO_B, VIDEO_A)),
            Playlist("Empty"),
        ]
        playlists = AsyncMock()
        playlists.fetch_all_native.return_value = stored
        sink, buffer = _sink()
        service, _ = _service(sink=sink, playlists=playlists)

        outcome = await service.export_playlists(ImportFormat.PIPED, "out.json")

        assert outcome is TransferOutcome.SUCCESS
        assert buffer.closed
        result = decode_piped(buffer.captured.decode(), CodecContext())
        assert list(result.records) == stored

    @pytest.mark.asyncio
    async def test_freetube_uses_alt_format_source(self) -> None:
        playlists = AsyncMock()
        playlists.fetch_all_alt_format.return_value = [
            FreeTubePlaylist(playlistName="One", videos=[FreeTubeVideo(videoId=VIDEO_A)]),
        ]
        sink, buffer = _sink()
        service, _ = _service(sink=sink, playlists=playlists)

        await service.export_playlists(ImportFormat.FREETUBE, "out.db")

        playlists.fetch_all_native.assert_not_awaited()
        assert json.loads(buffer.captured)["playlistName"] == "One"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("fmt", [ImportFormat.YOUTUBE_CSV, ImportFormat.URLS_OR_IDS])
    async def test_import_only_formats_raise(self, fmt: ImportFormat) -> None:
        sink, _ = _sink()
        service, _ = _service(sink=sink)

        with pytest.raises(UnsupportedFormatError):
            await service.export_playlists(fmt, "out")

        sink.open.assert_not_called()

    @pytest.mark.asyncio
    async def test_unavailable_sink_is_silent(self) -> None:
        playlists = AsyncMock()
        playlists.fetch_all_native.return_value = [Playlist("Mix", (VIDEO_A,))]
        sink, _ = _sink(available=False)
        service, notifier = _service(sink=sink, playlists=playlists)

        outcome = await service.export_playlists(ImportFormat.PIPED, "out.json")

        assert outcome is TransferOutcome.UNAVAILABLE
        notifier.notify.assert_not_called()
