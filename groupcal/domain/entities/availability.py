from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, timedelta
from enum import Enum

WORKING_HOURS = tuple(range(8, 24))
ALL_HOURS = tuple(range(0, 24))


class Status(str, Enum):
    AVAILABLE = "available"
    UNAVAILABLE = "unavailable"

    @property
    def opposite(self) -> "Status":
        return Status.UNAVAILABLE if self is Status.AVAILABLE else Status.AVAILABLE


@dataclass(frozen=True, order=True)
class TimeSlot:
    day: date
    hour: int

    def __post_init__(self) -> None:
        if not 0 <= self.hour <= 23:
            raise ValueError(f"hour must be within 0..23, got {self.hour}")

    @property
    def key(self) -> str:
        """Canonical index key, e.g. ``2024-01-02 19:00``."""
        return f"{self.day.isoformat()} {self.hour:02d}:00"


@dataclass(frozen=True)
class SlotParticipants:
    available: frozenset[str] = frozenset()
    unavailable: frozenset[str] = frozenset()

    @property
    def is_empty(self) -> bool:
        return not self.available and not self.unavailable


@dataclass(frozen=True)
class UserAvailability:
    """Hours of one day a participant marked available or unavailable."""

    available: frozenset[int] = frozenset()
    unavailable: frozenset[int] = frozenset()

    @property
    def is_empty(self) -> bool:
        return not self.available and not self.unavailable


@dataclass(frozen=True)
class SourceEvent:
    scope: str
    message_id: str
    location: str
    status: Status
    created_on: date
    participant_id: str | None = None
    mentioned_name: str | None = None
    produced_slots: tuple[TimeSlot, ...] = ()
    text_range: tuple[int, int] | None = None  # (start_hour, end_hour) for range statements

    @property
    def is_mention(self) -> bool:
        return self.participant_id is None


@dataclass
class MentionedAvailability:
    dates: dict[date, Status] = field(default_factory=dict)
    hours: set[int] = field(default_factory=set)


def start_of_week(value: date) -> date:
    """Monday of the week containing ``value``."""
    return value - timedelta(days=value.weekday())
