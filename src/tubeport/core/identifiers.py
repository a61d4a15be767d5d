"""Recover canonical video and channel IDs from URLs or raw tokens.

Extraction is deliberately positional: the ID is assumed to be the last
``N`` characters of the input (11 for videos, 24 for channels).  Query
strings and path prefixes are never parsed structurally, which keeps the
functions tolerant of the many URL shapes exporters produce.  When the
ID is not at the tail, the trailing slice contains URL punctuation and
extraction returns ``None``.
"""

from __future__ import annotations

import string

from tubeport.core.models import CHANNEL_ID_LENGTH, DEFAULT_FRONTEND_URL, VIDEO_ID_LENGTH

_ID_ALPHABET: frozenset[str] = frozenset(string.ascii_letters + string.digits + "-_")


def take_trailing(value: str, length: int) -> str:
    """Return the last *length* characters of *value*.

    No validation is performed; inputs shorter than *length* are
    returned whole.
    """
    return value[-length:]


def is_id_token(value: str) -> bool:
    """Whether *value* consists only of characters legal in a YouTube ID."""
    return bool(value) and all(char in _ID_ALPHABET for char in value)


def extract_id(
    value: str,
    length: int,
    *,
    frontend_url: str = DEFAULT_FRONTEND_URL,
) -> str | None:
    """Return the *length*-character ID carried by *value*, or ``None``.

    * An input that already has the target length is trusted and returned
      unchanged.
    * Otherwise the front-end origin is stripped when present and the
      trailing *length* characters are taken as the ID.
    """
    if len(value) == length:
        return value

    candidate = value.strip()
    if frontend_url and candidate.startswith(frontend_url):
        candidate = candidate[len(frontend_url):]
    if len(candidate) < length:
        return None

    tail = take_trailing(candidate, length)
    if not is_id_token(tail):
        return None
    return tail


def extract_video_id(
    value: str,
    *,
    frontend_url: str = DEFAULT_FRONTEND_URL,
) -> str | None:
    """Recover an 11-character video ID from a bare ID or a video URL."""
    return extract_id(value, VIDEO_ID_LENGTH, frontend_url=frontend_url)


def extract_channel_id(
    value: str,
    *,
    frontend_url: str = DEFAULT_FRONTEND_URL,
) -> str | None:
    """Recover a 24-character channel ID from a bare ID or a channel URL."""
    return extract_id(value, CHANNEL_ID_LENGTH, frontend_url=frontend_url)
