"""Subscription codec — NewPipe, FreeTube and YouTube Takeout CSV.

Decoding yields bare channel IDs: none of the import formats carries a
name that survives every producer, so names are resolved later by the
subscription store.

* NewPipe and FreeTube share one shape (a list of ``{url}`` objects)
  under a different envelope.
* Takeout CSV lines start with a 24-character channel ID; any line whose
  leading field has another length (the header included) is dropped.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

from tubeport.core.identifiers import extract_channel_id
from tubeport.core.models import CHANNEL_ID_LENGTH, ChannelLink, CodecContext, DecodeResult
from tubeport.core.schemas import (
    FreeTubeSubscription,
    FreeTubeSubscriptionFile,
    NewPipeSubscription,
    NewPipeSubscriptionFile,
    dump_wire,
    load_document,
    validate_rows,
)

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _channel_prefix(context: CodecContext) -> str:
    return f"{context.frontend_url}/channel/"


def _channel_id_from_url(url: str, context: CodecContext) -> str | None:
    """Strip the known channel prefix; fall back to trailing extraction."""
    channel_id = url.replace(_channel_prefix(context), "")
    if len(channel_id) == CHANNEL_ID_LENGTH:
        return channel_id
    return extract_channel_id(url, frontend_url=context.frontend_url)


def _decode_url_list(
    rows: Sequence[object],
    row_model: type[NewPipeSubscription] | type[FreeTubeSubscription],
    context: CodecContext,
) -> DecodeResult[str]:
    entries, skipped = validate_rows(row_model, rows)
    channel_ids: list[str] = []
    for entry in entries:
        channel_id = _channel_id_from_url(entry.url, context)
        if channel_id is None:
            logger.debug("no channel id in subscription url %r", entry.url)
            skipped += 1
            continue
        channel_ids.append(channel_id)
    return DecodeResult(records=tuple(channel_ids), skipped=skipped)


# ---------------------------------------------------------------------------
# Decoders
# ---------------------------------------------------------------------------

def decode_newpipe(text: str, context: CodecContext) -> DecodeResult[str]:
    """Decode a NewPipe ``subscriptions.json`` export."""
    envelope = load_document(NewPipeSubscriptionFile[Any], text, "NewPipe subscription")
    return _decode_url_list(envelope.subscriptions, NewPipeSubscription, context)


def decode_freetube(text: str, context: CodecContext) -> DecodeResult[str]:
    """Decode a FreeTube subscription profile export."""
    envelope = load_document(FreeTubeSubscriptionFile[Any], text, "FreeTube subscription")
    return _decode_url_list(envelope.subscriptions, FreeTubeSubscription, context)


def decode_takeout_csv(text: str, context: CodecContext) -> DecodeResult[str]:
    """Decode ``subscriptions.csv`` from Google Takeout.

    Filtering is by length of the leading field only, never by position.
    """
    channel_ids: list[str] = []
    skipped = 0
    for line in text.splitlines():
        leading = line.split(",", 1)[0]
        if len(leading) == CHANNEL_ID_LENGTH:
            channel_ids.append(leading)
        else:
            skipped += 1
    return DecodeResult(records=tuple(channel_ids), skipped=skipped)


# ---------------------------------------------------------------------------
# Encoders
# ---------------------------------------------------------------------------

def encode_newpipe(channels: Sequence[ChannelLink], context: CodecContext) -> str:
    document = NewPipeSubscriptionFile[NewPipeSubscription](
        subscriptions=[
            NewPipeSubscription(
                service_id=0,
                url=f"{context.frontend_url}{channel.url}",
                name=channel.name,
            )
            for channel in channels
        ],
    )
    return dump_wire(document)


def encode_freetube(channels: Sequence[ChannelLink], context: CodecContext) -> str:
    document = FreeTubeSubscriptionFile[FreeTubeSubscription](
        subscriptions=[
            FreeTubeSubscription(
                name=channel.name,
                thumbnail="",
                url=f"{context.frontend_url}{channel.url}",
            )
            for channel in channels
        ],
    )
    return dump_wire(document)
