"""pydantic models describing the external wire documents.

These models are the only place that knows field names of third-party
formats.  Envelopes are validated as a whole; the rows inside an envelope
are validated one at a time by :func:`validate_rows` so a single bad row
never sinks the file.

Envelopes are generic over their row type: decoders load
``Envelope[Any]`` and validate the rows themselves, encoders build
``Envelope[Row]`` from typed rows.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field, RootModel, ValidationError

from tubeport.exceptions import DecodeError

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)
RowT = TypeVar("RowT")


class WireModel(BaseModel):
    """Base for wire models: tolerate unknown keys, accept field names or aliases."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)


# ---------------------------------------------------------------------------
# Subscriptions
# ---------------------------------------------------------------------------

class NewPipeSubscription(WireModel):
    service_id: int = 0
    url: str
    name: str = ""


class NewPipeSubscriptionFile(WireModel, Generic[RowT]):
    app_version: str = ""
    app_version_int: int = 0
    subscriptions: list[RowT]


class FreeTubeSubscription(WireModel):
    name: str = ""
    thumbnail: str = ""
    url: str


class FreeTubeSubscriptionFile(WireModel, Generic[RowT]):
    id: str = Field(default="subscriptions", alias="_id")
    name: str = "Subscriptions"
    bg_color: str = Field(default="#FF0000", alias="bgColor")
    subscriptions: list[RowT]


# ---------------------------------------------------------------------------
# Playlists
# ---------------------------------------------------------------------------

class PipedPlaylist(WireModel):
    name: str
    type: str | None = None
    visibility: str | None = None
    videos: list[str] = Field(default_factory=list)


class PipedPlaylistFile(WireModel, Generic[RowT]):
    format: str = "Piped"
    version: int = 1
    playlists: list[RowT]


class FreeTubeVideo(WireModel):
    video_id: str = Field(alias="videoId")
    title: str = ""
    author: str = ""
    author_id: str = Field(default="", alias="authorId")
    length_seconds: int | str = Field(default=0, alias="lengthSeconds")
    time_added: int = Field(default=0, alias="timeAdded")
    type: str = "video"


class FreeTubePlaylist(WireModel):
    name: str = Field(alias="playlistName")
    protected: bool = False
    description: str = ""
    videos: list[FreeTubeVideo] = Field(default_factory=list)
    id: str | None = Field(default=None, alias="_id")


# ---------------------------------------------------------------------------
# Watch history (Google Takeout)
# ---------------------------------------------------------------------------

class TakeoutSubtitle(WireModel):
    name: str = ""
    url: str | None = None


class TakeoutWatchItem(WireModel):
    header: str = ""
    title: str = ""
    title_url: str = Field(default="", alias="titleUrl")
    subtitles: list[TakeoutSubtitle] = Field(default_factory=list)
    time: str = ""
    products: list[str] = Field(default_factory=list)
    activity_controls: list[str] = Field(default_factory=list, alias="activityControls")


class TakeoutActivityLog(RootModel[list[Any]]):
    """The top-level JSON array of a Takeout activity export."""


# ---------------------------------------------------------------------------
# Row validation
# ---------------------------------------------------------------------------

def validate_rows(model: type[ModelT], rows: Iterable[Any]) -> tuple[list[ModelT], int]:
    """Validate each row against *model*, dropping the ones that fail.

    Returns the valid rows in input order and the number of rows dropped.
    """
    valid: list[ModelT] = []
    skipped = 0
    for row in rows:
        try:
            valid.append(model.model_validate(row))
        except ValidationError:
            skipped += 1
    if skipped:
        logger.debug("skipped %d malformed %s row(s)", skipped, model.__name__)
    return valid, skipped


def dump_wire(model: BaseModel, *, indent: int | None = None) -> str:
    """Serialize a wire model using its external field names."""
    return model.model_dump_json(by_alias=True, exclude_none=True, indent=indent)


def load_document(model: type[ModelT], text: str, label: str) -> ModelT:
    """Parse *text* as one *model* document or raise :class:`DecodeError`."""
    try:
        return model.model_validate_json(text)
    except ValidationError as exc:
        first = exc.errors()[0]
        raise DecodeError(
            f"Not a valid {label} file: {first['msg']}",
            hint=f"Check that the file really is a {label} export.",
        ) from exc
