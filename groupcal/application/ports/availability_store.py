from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable
from datetime import date

from groupcal.domain.entities.availability import (
    SlotParticipants,
    SourceEvent,
    Status,
    TimeSlot,
    UserAvailability,
)


class AvailabilityStorePort(ABC):
    @abstractmethod
    def add_slot(self, scope: str, slot: TimeSlot, participant_id: str, status: Status) -> None:
        """Idempotent add. Clears the opposite status for the same participant and slot first."""
        raise NotImplementedError

    @abstractmethod
    def remove_slot(self, scope: str, slot: TimeSlot, participant_id: str, status: Status) -> None:
        raise NotImplementedError

    @abstractmethod
    def record_event(self, event: SourceEvent) -> None:
        raise NotImplementedError

    @abstractmethod
    def retract_event(self, message_id: str, scope: str | None = None) -> SourceEvent | None:
        """
        Remove exactly the slots recorded for ``message_id`` and forget the event.
        Returns the retracted event, or None when the message produced nothing.
        """
        raise NotImplementedError

    @abstractmethod
    def get_event(self, scope: str, message_id: str) -> SourceEvent | None:
        raise NotImplementedError

    @abstractmethod
    def events(self, scope: str | None = None) -> list[SourceEvent]:
        raise NotImplementedError

    @abstractmethod
    def scopes(self) -> list[str]:
        """Scopes that currently hold any slot or event."""
        raise NotImplementedError

    @abstractmethod
    def clear_location(self, location: str, scope: str | None = None) -> int:
        """Retract every event sourced from ``location``. Returns how many were retracted."""
        raise NotImplementedError

    @abstractmethod
    def clear_scope(self, scope: str) -> None:
        raise NotImplementedError

    @abstractmethod
    def query_hour(self, scope: str, slot: TimeSlot) -> SlotParticipants:
        raise NotImplementedError

    @abstractmethod
    def query_day(self, scope: str, day: date) -> SlotParticipants:
        """Union of every hour of ``day``; a participant with mixed hours appears in both sets."""
        raise NotImplementedError

    @abstractmethod
    def get_user_availability(self, scope: str, participant_id: str, day: date) -> UserAvailability:
        raise NotImplementedError

    @abstractmethod
    def set_user_availability(
        self,
        scope: str,
        participant_id: str,
        day: date,
        available_hours: Iterable[int],
        unavailable_hours: Iterable[int],
    ) -> None:
        raise NotImplementedError
