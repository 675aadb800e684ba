from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from datetime import datetime, timedelta, timezone

from groupcal.application.ports.availability_store import AvailabilityStorePort
from groupcal.application.ports.chat_transport import HistoryPort
from groupcal.application.ports.participant_directory import ParticipantDirectoryPort
from groupcal.application.use_cases.calendar_view import CalendarViewUseCase
from groupcal.application.use_cases.extract_availability import (
    ExtractAvailabilityUseCase,
    ExtractionOutcome,
    ExtractionResult,
)
from groupcal.domain.entities.message import MessageDeletion, MessageEvent
from groupcal.domain.entities.view_model import ViewModel


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class HandleChatEventUseCase:
    """
    Entry point for gateway message events and the calendar command.

    Every event runs to completion under one lock before the next starts,
    so the index never sees interleaved writes.
    """

    def __init__(
        self,
        extract: ExtractAvailabilityUseCase,
        views: CalendarViewUseCase,
        index: AvailabilityStorePort,
        history: HistoryPort,
        directory: ParticipantDirectoryPort,
        lock: threading.RLock | None = None,
        command_prefix: str = "!calendar",
        lookback_days: int = 7,
        redraw_enabled: bool = True,
        clock: Callable[[], datetime] = _utc_now,
    ) -> None:
        self._extract = extract
        self._views = views
        self._index = index
        self._history = history
        self._directory = directory
        self._lock = lock or threading.RLock()
        self._command_prefix = command_prefix.lower()
        self._lookback_days = lookback_days
        self._redraw_enabled = redraw_enabled
        self._clock = clock
        self._logger = logging.getLogger(__name__)

    def is_command(self, text: str) -> bool:
        return text.strip().lower().startswith(self._command_prefix)

    def on_message_created(self, message: MessageEvent) -> ExtractionResult | None:
        with self._lock:
            if message.is_bot:
                return None
            self._directory.remember(message.author_id, message.author_name)

            if self.is_command(message.text):
                self.run_calendar_command(message.scope, message.location)
                return None

            result = self._extract_and_log(message)
            if result.outcome is ExtractionOutcome.RECORDED:
                self._refresh(message.scope)
            return result

    def on_message_updated(self, old: MessageEvent | None, new: MessageEvent) -> ExtractionResult | None:
        """Retract whatever the old text produced, then extract from the new text."""
        with self._lock:
            if new.is_bot:
                return None
            self._directory.remember(new.author_id, new.author_name)

            retracted = self._index.retract_event(old.id if old else new.id, scope=new.scope)
            result = None
            if not self.is_command(new.text):
                result = self._extract_and_log(new)

            if retracted is not None or (result is not None and result.outcome is ExtractionOutcome.RECORDED):
                self._refresh(new.scope)
            return result

    def on_message_deleted(self, deletion: MessageDeletion) -> bool:
        with self._lock:
            event = self._index.retract_event(deletion.id, scope=deletion.scope)
            if event is None:
                return False
            self._logger.info(
                "Availability retracted",
                extra={"message_id": deletion.id, "scope": event.scope, "location": event.location},
            )
            self._refresh(event.scope)
            return True

    def run_calendar_command(self, scope: str, location: str) -> ViewModel:
        """
        Rebuild the location's availability from recent history and post a new week view.
        History is fetched in full before the index is touched; a transport
        failure leaves the index as it was.
        """
        with self._lock:
            since = self._clock() - timedelta(days=self._lookback_days)
            history = list(self._history.fetch_history(location, since))

            cleared = self._index.clear_location(location, scope=scope)
            replayed = 0
            for message in history:
                if message.is_bot or self.is_command(message.text):
                    continue
                self._directory.remember(message.author_id, message.author_name)
                if self._extract_and_log(message).outcome is ExtractionOutcome.RECORDED:
                    replayed += 1

            self._logger.info(
                "History backfilled",
                extra={
                    "scope": scope,
                    "location": location,
                    "fetched": len(history),
                    "cleared": cleared,
                    "recorded": replayed,
                },
            )
            return self._views.open(scope, location)

    def _extract_and_log(self, message: MessageEvent) -> ExtractionResult:
        result = self._extract.execute(message)
        if result.outcome is ExtractionOutcome.RESOLUTION_EMPTY:
            self._logger.info(
                "Availability statement without a resolvable date",
                extra={"message_id": message.id, "scope": message.scope, "outcome": result.outcome.value},
            )
        elif result.outcome is ExtractionOutcome.RECORDED:
            self._logger.debug(
                "Availability recorded",
                extra={"message_id": message.id, "scope": message.scope, "outcome": result.outcome.value},
            )
        return result

    def _refresh(self, scope: str) -> None:
        if self._redraw_enabled:
            self._views.refresh_scope(scope)
