"""Transfer service — the import/export entry points.

Each operation reads or writes exactly one stream and talks to exactly
one store.  The service is the error boundary for data problems: decode
failures, store failures and unsupported import formats become a single
user notification plus a :class:`~tubeport.core.models.TransferOutcome`.
The one exception is an export requested for a format with no encoder,
which raises :class:`~tubeport.exceptions.UnsupportedFormatError` before
any stream is opened.

Guarantees
----------
* Streams are closed on every exit path.
* Only the stores and the notifier see the decoded records.
* No ``print()``; user-visible text goes through the notifier.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable, Sequence
from typing import Any, TypeVar

from tubeport.core import notices
from tubeport.core.dispatcher import ExportRoute, ExportSource, decoder_for, encoder_for
from tubeport.core.models import CodecContext, DataKind, ImportFormat, TransferOutcome
from tubeport.core.protocols import (
    HistoryStore,
    Notifier,
    PlaylistStore,
    StreamSink,
    StreamSource,
    SubscriptionStore,
)
from tubeport.exceptions import DecodeError, StoreError, TubeportError, UnsupportedFormatError

logger = logging.getLogger(__name__)

T = TypeVar("T")


class TransferService:
    """Moves subscriptions, playlists and watch history in and out of files.

    Parameters
    ----------
    source, sink:
        Stream openers for import and export.
    subscriptions, playlists, history:
        The stores that receive imported records and supply exported ones.
    notifier:
        Receives exactly one user-facing message per operation.
    context:
        Codec settings; defaults to :class:`CodecContext` defaults.
    auth_token:
        Forwarded to :meth:`SubscriptionStore.fetch_all` on export.
    """

    def __init__(
        self,
        *,
        source: StreamSource,
        sink: StreamSink,
        subscriptions: SubscriptionStore,
        playlists: PlaylistStore,
        history: HistoryStore,
        notifier: Notifier,
        context: CodecContext | None = None,
        auth_token: str | None = None,
    ) -> None:
        self._source = source
        self._sink = sink
        self._subscriptions = subscriptions
        self._playlists = playlists
        self._history = history
        self._notifier = notifier
        self._context = context or CodecContext()
        self._auth_token = auth_token

    # ------------------------------------------------------------------
    # Imports
    # ------------------------------------------------------------------

    async def import_subscriptions(
        self, import_format: ImportFormat, locator: str,
    ) -> TransferOutcome:
        """Subscribe to every channel found in *locator*."""
        return await self._run_import(
            DataKind.SUBSCRIPTIONS,
            import_format,
            locator,
            deliver=lambda ids: self._subscriptions.submit(list(ids)),
            success_notice=notices.IMPORT_SUCCESS,
        )

    async def import_playlists(
        self, import_format: ImportFormat, locator: str,
    ) -> TransferOutcome:
        """Create every playlist found in *locator*."""
        return await self._run_import(
            DataKind.PLAYLISTS,
            import_format,
            locator,
            deliver=lambda playlists: self._playlists.submit(list(playlists)),
            success_notice=notices.SUCCESS,
        )

    async def import_watch_history(
        self, import_format: ImportFormat, locator: str,
    ) -> TransferOutcome:
        """Append every watched video in *locator* to the history store, oldest first."""
        return await self._run_import(
            DataKind.WATCH_HISTORY,
            import_format,
            locator,
            deliver=self._append_history,
            success_notice=notices.SUCCESS,
        )

    # ------------------------------------------------------------------
    # Exports
    # ------------------------------------------------------------------

    async def export_subscriptions(
        self, import_format: ImportFormat, locator: str,
    ) -> TransferOutcome:
        """Write all subscriptions to *locator*.

        Raises
        ------
        UnsupportedFormatError
            When *import_format* has no subscription encoder.  Nothing is
            fetched or written in that case.
        """
        route = encoder_for(DataKind.SUBSCRIPTIONS, import_format)
        return await self._run_export(route, locator)

    async def export_playlists(
        self, import_format: ImportFormat, locator: str,
    ) -> TransferOutcome:
        """Write all playlists to *locator*.

        Raises
        ------
        UnsupportedFormatError
            When *import_format* has no playlist encoder.  Nothing is
            fetched or written in that case.
        """
        route = encoder_for(DataKind.PLAYLISTS, import_format)
        return await self._run_export(route, locator)

    # ------------------------------------------------------------------
    # Pipelines
    # ------------------------------------------------------------------

    async def _run_import(
        self,
        kind: DataKind,
        import_format: ImportFormat,
        locator: str,
        *,
        deliver: Callable[[Sequence[Any]], Awaitable[None]],
        success_notice: str,
    ) -> TransferOutcome:
        try:
            decoder = decoder_for(
                kind, import_format, mime_type=self._source.guess_type(locator),
            )
            text = await asyncio.to_thread(self._read_text, locator)
            if text is None:
                logger.warning("could not open %s for %s import", locator, kind.value)
                self._notifier.notify(notices.EMPTY_LIST)
                return TransferOutcome.EMPTY

            result = decoder(text, self._context)
            logger.info(
                "decoded %d %s record(s) from %s, skipped %d",
                len(result), kind.value, import_format.value, result.skipped,
            )
            if not result:
                self._notifier.notify(notices.EMPTY_LIST)
                return TransferOutcome.EMPTY

            await self._call_store(deliver(result.records), f"import {kind.value}")
        except UnsupportedFormatError as exc:
            logger.error("%s", exc)
            self._notifier.notify(
                notices.unsupported_file_format(exc.mime_type or exc.import_format.value),
            )
            return TransferOutcome.UNSUPPORTED
        except TubeportError as exc:
            logger.error("%s import failed: %s", kind.value, exc)
            self._notifier.notify(str(exc))
            return TransferOutcome.FAILED
        except Exception as exc:  # noqa: BLE001
            logger.exception("unexpected error during %s import", kind.value)
            self._notifier.notify(f"{type(exc).__name__}: {exc}")
            return TransferOutcome.FAILED

        self._notifier.notify(success_notice)
        return TransferOutcome.SUCCESS

    async def _run_export(self, route: ExportRoute, locator: str) -> TransferOutcome:
        try:
            records = await self._call_store(self._fetch(route.source), f"fetch {route.source.value}")
            payload = route.encode(records, self._context)
            written = await asyncio.to_thread(self._write_text, locator, payload)
        except TubeportError as exc:
            logger.error("export failed: %s", exc)
            self._notifier.notify(str(exc))
            return TransferOutcome.FAILED
        except Exception as exc:  # noqa: BLE001
            logger.exception("unexpected error during export")
            self._notifier.notify(f"{type(exc).__name__}: {exc}")
            return TransferOutcome.FAILED

        if not written:
            logger.warning("could not open %s for export, nothing written", locator)
            return TransferOutcome.UNAVAILABLE
        self._notifier.notify(notices.EXPORT_SUCCESS)
        return TransferOutcome.SUCCESS

    # ------------------------------------------------------------------
    # Collaborator boundaries
    # ------------------------------------------------------------------

    def _fetch(self, source: ExportSource) -> Awaitable[Sequence[Any]]:
        if source is ExportSource.SUBSCRIPTIONS:
            return self._subscriptions.fetch_all(self._auth_token)
        if source is ExportSource.NATIVE_PLAYLISTS:
            return self._playlists.fetch_all_native()
        return self._playlists.fetch_all_alt_format()

    async def _append_history(self, entries: Sequence[Any]) -> None:
        for entry in entries:
            await self._history.append(entry)

    @staticmethod
    async def _call_store(call: Awaitable[T], action: str) -> T:
        """Await a store call and ensure only our exceptions escape."""
        try:
            return await call
        except TubeportError:
            # Already one of ours — propagate unchanged.
            raise
        except Exception as exc:
            raise StoreError(f"Could not {action}: {exc}") from exc

    def _read_text(self, locator: str) -> str | None:
        stream = self._source.open(locator)
        if stream is None:
            return None
        with stream:
            raw = stream.read()
        try:
            return raw.decode("utf-8-sig")
        except UnicodeDecodeError as exc:
            raise DecodeError(
                f"{locator} is not UTF-8 text.",
                hint="Export the file again without converting its encoding.",
            ) from exc

    def _write_text(self, locator: str, payload: str) -> bool:
        stream = self._sink.open(locator)
        if stream is None:
            return False
        with stream:
            stream.write(payload.encode("utf-8"))
        return True
