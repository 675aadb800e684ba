from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Union

from groupcal.domain.entities.view_state import Granularity


class Classification(str, Enum):
    ALL_AVAILABLE = "all_available"
    ALL_UNAVAILABLE = "all_unavailable"
    MIXED = "mixed"
    NO_DATA = "no_data"
    TODAY = "today"  # display-only, see DayCell.display_classification

    @staticmethod
    def of(available_count: int, unavailable_count: int) -> "Classification":
        if available_count and unavailable_count:
            return Classification.MIXED
        if available_count:
            return Classification.ALL_AVAILABLE
        if unavailable_count:
            return Classification.ALL_UNAVAILABLE
        return Classification.NO_DATA


@dataclass(frozen=True)
class DayCell:
    day: date
    classification: Classification
    is_today: bool
    available: tuple[str, ...] = ()
    unavailable: tuple[str, ...] = ()

    @property
    def available_count(self) -> int:
        return len(self.available)

    @property
    def unavailable_count(self) -> int:
        return len(self.unavailable)

    @property
    def display_classification(self) -> Classification:
        return Classification.TODAY if self.is_today else self.classification


@dataclass(frozen=True)
class HourCell:
    day: date
    hour: int
    classification: Classification
    available: tuple[str, ...] = ()
    unavailable: tuple[str, ...] = ()

    @property
    def available_count(self) -> int:
        return len(self.available)

    @property
    def unavailable_count(self) -> int:
        return len(self.unavailable)


@dataclass(frozen=True)
class WeekViewModel:
    scope: str
    anchor_date: date
    week_start: date
    days: tuple[DayCell, ...]
    granularity: Granularity = Granularity.WEEK


@dataclass(frozen=True)
class DayViewModel:
    scope: str
    anchor_date: date
    hours: tuple[HourCell, ...]
    granularity: Granularity = Granularity.DAY


ViewModel = Union[WeekViewModel, DayViewModel]
