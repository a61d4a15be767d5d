"""Format dispatch — one table lookup per (kind, format, direction).

Every supported combination is an entry in :data:`DECODERS` or
:data:`ENCODERS`; anything missing raises
:class:`~tubeport.exceptions.UnsupportedFormatError`.  Adding a format is
a new :class:`~tubeport.core.models.ImportFormat` member plus its table
entries.
"""

from __future__ import annotations

import enum
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any

from tubeport.core import history_codec, playlist_codec, subscription_codec
from tubeport.core.models import CodecContext, DataKind, DecodeResult, Direction, ImportFormat
from tubeport.exceptions import UnsupportedFormatError

Decoder = Callable[[str, CodecContext], DecodeResult[Any]]
Encoder = Callable[[Sequence[Any], CodecContext], str]


class ExportSource(enum.Enum):
    """Which store call supplies the records an encoder serializes."""

    SUBSCRIPTIONS = "subscriptions"
    NATIVE_PLAYLISTS = "native playlists"
    ALT_PLAYLISTS = "alt playlists"


@dataclass(frozen=True, slots=True)
class ExportRoute:
    encode: Encoder
    source: ExportSource


DECODERS: Mapping[tuple[DataKind, ImportFormat], Decoder] = MappingProxyType({
    (DataKind.SUBSCRIPTIONS, ImportFormat.NEWPIPE): subscription_codec.decode_newpipe,
    (DataKind.SUBSCRIPTIONS, ImportFormat.FREETUBE): subscription_codec.decode_freetube,
    (DataKind.SUBSCRIPTIONS, ImportFormat.YOUTUBE_CSV): subscription_codec.decode_takeout_csv,
    (DataKind.PLAYLISTS, ImportFormat.PIPED): playlist_codec.decode_piped,
    (DataKind.PLAYLISTS, ImportFormat.FREETUBE): playlist_codec.decode_freetube,
    (DataKind.PLAYLISTS, ImportFormat.YOUTUBE_CSV): playlist_codec.decode_takeout_csv,
    (DataKind.PLAYLISTS, ImportFormat.URLS_OR_IDS): playlist_codec.decode_urls_or_ids,
    (DataKind.WATCH_HISTORY, ImportFormat.YOUTUBE_JSON): history_codec.decode_takeout_json,
})

ENCODERS: Mapping[tuple[DataKind, ImportFormat], ExportRoute] = MappingProxyType({
    (DataKind.SUBSCRIPTIONS, ImportFormat.NEWPIPE): ExportRoute(
        subscription_codec.encode_newpipe, ExportSource.SUBSCRIPTIONS,
    ),
    (DataKind.SUBSCRIPTIONS, ImportFormat.FREETUBE): ExportRoute(
        subscription_codec.encode_freetube, ExportSource.SUBSCRIPTIONS,
    ),
    (DataKind.PLAYLISTS, ImportFormat.PIPED): ExportRoute(
        playlist_codec.encode_piped, ExportSource.NATIVE_PLAYLISTS,
    ),
    (DataKind.PLAYLISTS, ImportFormat.FREETUBE): ExportRoute(
        playlist_codec.encode_freetube, ExportSource.ALT_PLAYLISTS,
    ),
})


def decoder_for(
    kind: DataKind,
    import_format: ImportFormat,
    *,
    mime_type: str | None = None,
) -> Decoder:
    """Return the decoder for *kind* in *import_format*.

    Raises
    ------
    UnsupportedFormatError
        When the format cannot be imported for this kind of data.
    """
    try:
        return DECODERS[(kind, import_format)]
    except KeyError:
        raise UnsupportedFormatError(
            kind, import_format, Direction.IMPORT, mime_type=mime_type,
        ) from None


def encoder_for(kind: DataKind, import_format: ImportFormat) -> ExportRoute:
    """Return the export route for *kind* in *import_format*.

    Raises
    ------
    UnsupportedFormatError
        When the format cannot be exported for this kind of data.
    """
    try:
        return ENCODERS[(kind, import_format)]
    except KeyError:
        raise UnsupportedFormatError(kind, import_format, Direction.EXPORT) from None


def supported_formats(kind: DataKind, direction: Direction) -> tuple[ImportFormat, ...]:
    """Formats usable for *kind* in *direction*, in declaration order."""
    table: Mapping[tuple[DataKind, ImportFormat], object] = (
        DECODERS if direction is Direction.IMPORT else ENCODERS
    )
    return tuple(fmt for fmt in ImportFormat if (kind, fmt) in table)
