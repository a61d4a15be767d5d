"""Runtime configuration.

Settings are read from ``TUBEPORT_*`` environment variables (and an
optional ``.env`` file).  Codecs never see this object directly; they get
the narrower :class:`~tubeport.core.models.CodecContext` built by
:meth:`TubeportSettings.codec_context`.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from tubeport.core.models import (
    DEFAULT_FRONTEND_URL,
    DEFAULT_PLAYLIST_NAME,
    DEFAULT_THUMBNAIL_QUALITY,
    DEFAULT_THUMBNAIL_TEMPLATE,
    CodecContext,
)


class TubeportSettings(BaseSettings):
    """Canonical runtime configuration."""

    model_config = SettingsConfigDict(
        env_prefix="TUBEPORT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    frontend_url: str = Field(
        default=DEFAULT_FRONTEND_URL,
        description="Origin stripped from imported URLs and prepended on export.",
    )
    default_playlist_name: str = DEFAULT_PLAYLIST_NAME
    thumbnail_template: str = DEFAULT_THUMBNAIL_TEMPLATE
    thumbnail_quality: str = DEFAULT_THUMBNAIL_QUALITY
    auth_token: str | None = None
    library_dir: Path = Field(default=Path("~/.tubeport"), validate_default=True)
    log_level: str = "WARNING"

    @field_validator("frontend_url")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        return value.strip().rstrip("/")

    @field_validator("auth_token", mode="before")
    @classmethod
    def _blank_token_is_none(cls, value: object) -> object:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("library_dir")
    @classmethod
    def _expand_library_dir(cls, value: Path) -> Path:
        return value.expanduser()

    def codec_context(self) -> CodecContext:
        return CodecContext(
            frontend_url=self.frontend_url,
            default_playlist_name=self.default_playlist_name,
            thumbnail_template=self.thumbnail_template,
            thumbnail_quality=self.thumbnail_quality,
        )


@lru_cache(maxsize=1)
def get_settings() -> TubeportSettings:
    return TubeportSettings()
