"""Core / service layer — pure format codecs and the transfer service.

Rules
-----
* No ``print()`` calls.
* No filesystem or network I/O outside the injected protocols.
* No imports from ``cli`` or ``infra``.
* Codecs are pure functions of ``(text, CodecContext)``.
"""

from tubeport.core.dispatcher import decoder_for, encoder_for, supported_formats
from tubeport.core.models import (
    ChannelLink,
    CodecContext,
    DataKind,
    DecodeResult,
    Direction,
    ImportFormat,
    Playlist,
    Subscription,
    TransferOutcome,
    WatchHistoryEntry,
)
from tubeport.core.protocols import (
    HistoryStore,
    Notifier,
    PlaylistStore,
    StreamSink,
    StreamSource,
    SubscriptionStore,
)
from tubeport.core.transfer_service import TransferService

__all__: list[str] = [
    "ChannelLink",
    "CodecContext",
    "DataKind",
    "DecodeResult",
    "Direction",
    "HistoryStore",
    "ImportFormat",
    "Notifier",
    "Playlist",
    "PlaylistStore",
    "StreamSink",
    "StreamSource",
    "Subscription",
    "SubscriptionStore",
    "TransferOutcome",
    "TransferService",
    "WatchHistoryEntry",
    "decoder_for",
    "encoder_for",
    "supported_formats",
]
