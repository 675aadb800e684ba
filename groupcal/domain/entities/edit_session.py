from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Union

from groupcal.domain.entities.availability import Status, UserAvailability


@dataclass(frozen=True)
class RangeEditSession:
    participant_id: str
    scope: str
    target_date: date
    selected_start: int | None = None
    selected_end: int | None = None
    status: Status | None = None
    seeded_from: UserAvailability = UserAvailability()


@dataclass(frozen=True)
class ToggleEditSession:
    participant_id: str
    scope: str
    target_date: date
    pending_available: frozenset[int] = frozenset()
    pending_unavailable: frozenset[int] = frozenset()
    seeded_from: UserAvailability = UserAvailability()

    @property
    def has_changes(self) -> bool:
        return (
            self.pending_available != self.seeded_from.available
            or self.pending_unavailable != self.seeded_from.unavailable
        )


EditSession = Union[RangeEditSession, ToggleEditSession]
