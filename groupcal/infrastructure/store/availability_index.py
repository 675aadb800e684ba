from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import date

from groupcal.application.ports.availability_store import AvailabilityStorePort
from groupcal.domain.entities.availability import (
    ALL_HOURS,
    SlotParticipants,
    SourceEvent,
    Status,
    TimeSlot,
    UserAvailability,
)

SlotKey = tuple[str, TimeSlot]
EventKey = tuple[str, str]
ProjectionKey = tuple[str, str, date]


class AvailabilityIndex(AvailabilityStorePort):
    """
    Per-scope store of slot -> {participant -> status} facts.

    Three flat tables are kept in step on every mutation:
    - slots: (scope, slot) -> participants per status
    - projections: (scope, participant, day) -> hours per status
    - events: (scope, message_id) -> SourceEvent, the unit of retraction
    Empty entries are pruned as soon as they become empty.
    """

    def __init__(self) -> None:
        self._slots: dict[SlotKey, dict[Status, set[str]]] = {}
        self._day_hours: dict[tuple[str, date], set[int]] = {}
        self._projections: dict[ProjectionKey, dict[Status, set[int]]] = {}
        self._events: dict[EventKey, SourceEvent] = {}
        self._event_scopes: dict[str, str] = {}
        self._logger = logging.getLogger(__name__)

    def add_slot(self, scope: str, slot: TimeSlot, participant_id: str, status: Status) -> None:
        self._discard(scope, slot, participant_id, status.opposite)

        entry = self._slots.setdefault((scope, slot), _empty_status_table())
        entry[status].add(participant_id)
        self._day_hours.setdefault((scope, slot.day), set()).add(slot.hour)

        projection = self._projections.setdefault((scope, participant_id, slot.day), _empty_status_table())
        projection[status].add(slot.hour)

    def remove_slot(self, scope: str, slot: TimeSlot, participant_id: str, status: Status) -> None:
        self._discard(scope, slot, participant_id, status)

    def record_event(self, event: SourceEvent) -> None:
        """Apply an event's slots and remember it. Replaces any earlier event for the same message."""
        if (event.scope, event.message_id) in self._events:
            self.retract_event(event.message_id, scope=event.scope)

        if event.participant_id is not None:
            for slot in event.produced_slots:
                self.add_slot(event.scope, slot, event.participant_id, event.status)

        self._events[(event.scope, event.message_id)] = event
        self._event_scopes[event.message_id] = event.scope
        self._logger.debug(
            "Source event recorded",
            extra={"scope": event.scope, "message_id": event.message_id, "slots": len(event.produced_slots)},
        )

    def retract_event(self, message_id: str, scope: str | None = None) -> SourceEvent | None:
        """Reverse exactly the slots the message produced. Returns the removed event, if any."""
        if scope is None:
            scope = self._event_scopes.get(message_id)
            if scope is None:
                return None

        event = self._events.pop((scope, message_id), None)
        if event is None:
            return None
        if self._event_scopes.get(message_id) == scope:
            del self._event_scopes[message_id]

        if event.participant_id is not None:
            for slot in event.produced_slots:
                self._discard(scope, slot, event.participant_id, event.status)

        self._logger.debug(
            "Source event retracted",
            extra={"scope": scope, "message_id": message_id, "slots": len(event.produced_slots)},
        )
        return event

    def get_event(self, scope: str, message_id: str) -> SourceEvent | None:
        return self._events.get((scope, message_id))

    def events(self, scope: str | None = None) -> list[SourceEvent]:
        return [event for (event_scope, _), event in self._events.items() if scope is None or event_scope == scope]

    def scopes(self) -> list[str]:
        found = {scope for scope, _ in self._slots} | {scope for scope, _ in self._events}
        return sorted(found)

    def clear_location(self, location: str, scope: str | None = None) -> int:
        """Retract every event whose source message was posted in ``location``."""
        doomed = [
            event
            for event in self._events.values()
            if event.location == location and (scope is None or event.scope == scope)
        ]
        for event in doomed:
            self.retract_event(event.message_id, scope=event.scope)
        return len(doomed)

    def clear_scope(self, scope: str) -> None:
        for event in self.events(scope):
            self.retract_event(event.message_id, scope=scope)
        # direct edits have no event; drop whatever is left
        for key in [key for key in self._slots if key[0] == scope]:
            del self._slots[key]
        for key in [key for key in self._day_hours if key[0] == scope]:
            del self._day_hours[key]
        for key in [key for key in self._projections if key[0] == scope]:
            del self._projections[key]

    def query_hour(self, scope: str, slot: TimeSlot) -> SlotParticipants:
        entry = self._slots.get((scope, slot))
        if entry is None:
            return SlotParticipants()
        return SlotParticipants(
            available=frozenset(entry[Status.AVAILABLE]),
            unavailable=frozenset(entry[Status.UNAVAILABLE]),
        )

    def query_day(self, scope: str, day: date) -> SlotParticipants:
        available: set[str] = set()
        unavailable: set[str] = set()
        for hour in self._day_hours.get((scope, day), ()):
            entry = self._slots[(scope, TimeSlot(day, hour))]
            available |= entry[Status.AVAILABLE]
            unavailable |= entry[Status.UNAVAILABLE]
        return SlotParticipants(available=frozenset(available), unavailable=frozenset(unavailable))

    def get_user_availability(self, scope: str, participant_id: str, day: date) -> UserAvailability:
        projection = self._projections.get((scope, participant_id, day))
        if projection is None:
            return UserAvailability()
        return UserAvailability(
            available=frozenset(projection[Status.AVAILABLE]),
            unavailable=frozenset(projection[Status.UNAVAILABLE]),
        )

    def set_user_availability(
        self,
        scope: str,
        participant_id: str,
        day: date,
        available_hours: Iterable[int],
        unavailable_hours: Iterable[int],
    ) -> None:
        """
        Overwrite a participant's whole day (hours 0..23).
        Hours in neither set are cleared. No source event is recorded.
        """
        available = set(available_hours)
        unavailable = set(unavailable_hours)
        out_of_range = sorted(hour for hour in available | unavailable if hour not in ALL_HOURS)
        if out_of_range:
            raise ValueError(f"Hours must be within 0..23, got {out_of_range}")
        overlap = sorted(available & unavailable)
        if overlap:
            raise ValueError(f"Hours cannot be both available and unavailable: {overlap}")

        for hour in ALL_HOURS:
            slot = TimeSlot(day, hour)
            if hour in available:
                self.add_slot(scope, slot, participant_id, Status.AVAILABLE)
            elif hour in unavailable:
                self.add_slot(scope, slot, participant_id, Status.UNAVAILABLE)
            else:
                self._discard(scope, slot, participant_id, Status.AVAILABLE)
                self._discard(scope, slot, participant_id, Status.UNAVAILABLE)

        self._logger.info(
            "User availability overwritten",
            extra={"scope": scope, "participant": participant_id, "day": day.isoformat()},
        )

    def slot_table(self, scope: str) -> dict[str, SlotParticipants]:
        """Snapshot of every non-empty slot in a scope, keyed by canonical slot key."""
        return {slot.key: self.query_hour(scope, slot) for (slot_scope, slot) in self._slots if slot_scope == scope}

    def _discard(self, scope: str, slot: TimeSlot, participant_id: str, status: Status) -> None:
        entry = self._slots.get((scope, slot))
        if entry is not None and participant_id in entry[status]:
            entry[status].discard(participant_id)
            if not entry[Status.AVAILABLE] and not entry[Status.UNAVAILABLE]:
                del self._slots[(scope, slot)]
                hours = self._day_hours[(scope, slot.day)]
                hours.discard(slot.hour)
                if not hours:
                    del self._day_hours[(scope, slot.day)]

        projection = self._projections.get((scope, participant_id, slot.day))
        if projection is not None:
            projection[status].discard(slot.hour)
            if not projection[Status.AVAILABLE] and not projection[Status.UNAVAILABLE]:
                del self._projections[(scope, participant_id, slot.day)]


def _empty_status_table() -> dict:
    return {Status.AVAILABLE: set(), Status.UNAVAILABLE: set()}
