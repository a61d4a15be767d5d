"""Playlist codec — Piped, FreeTube, YouTube Takeout CSV and bare URL lists.

None of the four import encodings share a schema:

* **Piped** — one JSON document; every video is a URL reduced to its
  trailing 11 characters.  Lossless round-trip within the format.
* **FreeTube** — one JSON object per line, or (older producers) a single
  JSON object for the whole file.  Entries already carry ``videoId``.
* **Takeout CSV** — a header-aware tabular export whose layout is
  recovered positionally, see :func:`locate_data_start`.
* **URLs or IDs** — comma/newline separated tokens, each a bare ID or a
  video URL, collected into one placeholder-named playlist.

Only Piped and FreeTube can be exported.
"""

from __future__ import annotations

import csv
import logging
from collections.abc import Callable, Sequence
from typing import Any

from pydantic import ValidationError

from tubeport.core.identifiers import extract_video_id, take_trailing
from tubeport.core.models import VIDEO_ID_LENGTH, CodecContext, DecodeResult, Playlist
from tubeport.core.schemas import (
    FreeTubePlaylist,
    PipedPlaylist,
    PipedPlaylistFile,
    dump_wire,
    load_document,
    validate_rows,
)
from tubeport.exceptions import DecodeError

logger = logging.getLogger(__name__)

NAME_FIELD_FROM_END: int = 2
"""Index, counted from the last field, of the playlist title on CSV line 1."""


# ---------------------------------------------------------------------------
# Piped
# ---------------------------------------------------------------------------

def decode_piped(text: str, context: CodecContext) -> DecodeResult[Playlist]:
    envelope = load_document(PipedPlaylistFile[Any], text, "Piped playlist")
    playlists, skipped = validate_rows(PipedPlaylist, envelope.playlists)
    return DecodeResult(
        records=tuple(
            Playlist(
                name=playlist.name,
                video_ids=tuple(take_trailing(url, VIDEO_ID_LENGTH) for url in playlist.videos),
            )
            for playlist in playlists
        ),
        skipped=skipped,
    )


def encode_piped(playlists: Sequence[Playlist], context: CodecContext) -> str:
    document = PipedPlaylistFile[PipedPlaylist](
        playlists=[
            PipedPlaylist(
                name=playlist.name,
                type="playlist",
                visibility="private",
                videos=[f"{context.frontend_url}/watch?v={video_id}" for video_id in playlist.video_ids],
            )
            for playlist in playlists
        ],
    )
    return dump_wire(document)


# ---------------------------------------------------------------------------
# FreeTube
# ---------------------------------------------------------------------------

def _parse_line_delimited(text: str) -> list[FreeTubePlaylist]:
    """One playlist object per non-blank line; any bad line fails the strategy."""
    return [
        FreeTubePlaylist.model_validate_json(line)
        for line in text.splitlines()
        if line.strip()
    ]


def _parse_single_document(text: str) -> list[FreeTubePlaylist]:
    return [FreeTubePlaylist.model_validate_json(text)]


FREETUBE_STRATEGIES: tuple[Callable[[str], list[FreeTubePlaylist]], ...] = (
    _parse_line_delimited,
    _parse_single_document,
)
"""Tried in order; the first strategy that parses the whole input wins."""


def parse_freetube_playlists(text: str) -> list[FreeTubePlaylist]:
    """Parse FreeTube playlist text in whichever shape its producer used.

    Raises
    ------
    DecodeError
        When no strategy can parse the input.
    """
    last_error: ValidationError | None = None
    for strategy in FREETUBE_STRATEGIES:
        try:
            return strategy(text)
        except ValidationError as exc:
            logger.debug("freetube strategy %s failed: %s", strategy.__name__, exc.error_count())
            last_error = exc
    raise DecodeError(
        "Not a valid FreeTube playlist file.",
        hint="Expected one playlist object per line or a single playlist object.",
    ) from last_error


def decode_freetube(text: str, context: CodecContext) -> DecodeResult[Playlist]:
    return DecodeResult(
        records=tuple(
            Playlist(
                name=playlist.name,
                video_ids=tuple(video.video_id for video in playlist.videos),
            )
            for playlist in parse_freetube_playlists(text)
        ),
    )


def encode_freetube(playlists: Sequence[FreeTubePlaylist], context: CodecContext) -> str:
    return "\n".join(dump_wire(playlist) for playlist in playlists)


# ---------------------------------------------------------------------------
# YouTube Takeout CSV
# ---------------------------------------------------------------------------

def _is_blank(line: str) -> bool:
    return not line.strip()


def extract_trailing_field(line: str, position: int = NAME_FIELD_FROM_END) -> str | None:
    """Return the field *position* places from the end of a CSV *line*.

    ``position=0`` is the last field.  Returns ``None`` when the line has
    too few fields.  Lines the ``csv`` module rejects (oversized fields,
    NUL bytes) are split on plain commas instead.
    """
    try:
        fields = next(csv.reader([line]), [])
    except csv.Error as exc:
        logger.debug("csv rejected playlist metadata line: %s", exc)
        fields = line.split(",")
    if position >= len(fields):
        return None
    return fields[len(fields) - 1 - position]


def locate_data_start(lines: Sequence[str]) -> int | None:
    """Index of the first data row in a named-playlist CSV.

    The layout is: playlist metadata rows, one or more blank lines, the
    column header row, then data rows.  Returns ``None`` when no blank
    line exists or nothing follows the blank run.
    """
    index = next((i for i, line in enumerate(lines) if _is_blank(line)), None)
    if index is None:
        return None
    while index < len(lines) and _is_blank(lines[index]):
        index += 1
    if index >= len(lines):
        return None
    return index + 1


def decode_takeout_csv(text: str, context: CodecContext) -> DecodeResult[Playlist]:
    """Decode one playlist CSV from Google Takeout.

    Watch Later exports have no title on line 1; they get the placeholder
    name and their data starts right after the header at line 1.
    """
    lines = text.splitlines()
    if len(lines) < 2:
        return DecodeResult()

    name = extract_trailing_field(lines[1])
    if name is None:
        name = context.default_playlist_name
        start: int | None = 2
    else:
        start = locate_data_start(lines)
    if start is None:
        logger.debug("no blank line separates playlist metadata from data rows")
        return DecodeResult()

    video_ids: list[str] = []
    skipped = 0
    for line in lines[start:]:
        if _is_blank(line):
            continue
        token = line.split(",", 1)[0].strip()
        if not token:
            skipped += 1
            continue
        video_ids.append(take_trailing(token, VIDEO_ID_LENGTH))

    return DecodeResult(records=(Playlist(name=name, video_ids=tuple(video_ids)),), skipped=skipped)


# ---------------------------------------------------------------------------
# Bare URL / ID list
# ---------------------------------------------------------------------------

def decode_urls_or_ids(text: str, context: CodecContext) -> DecodeResult[Playlist]:
    video_ids: list[str] = []
    skipped = 0
    for line in text.splitlines():
        for token in line.split(","):
            token = token.strip()
            if not token:
                continue
            if len(token) == VIDEO_ID_LENGTH:
                video_ids.append(token)
                continue
            video_id = extract_video_id(token, frontend_url=context.frontend_url)
            if video_id is None:
                skipped += 1
            else:
                video_ids.append(video_id)

    if not video_ids:
        return DecodeResult(skipped=skipped)
    playlist = Playlist(name=context.default_playlist_name, video_ids=tuple(video_ids))
    return DecodeResult(records=(playlist,), skipped=skipped)
