from __future__ import annotations

from collections.abc import Callable, Iterable
from datetime import date, timedelta

from groupcal.application.ports.availability_store import AvailabilityStorePort
from groupcal.application.ports.mention_sink import MentionLedgerPort
from groupcal.domain.entities.availability import WORKING_HOURS, Status, TimeSlot, start_of_week
from groupcal.domain.entities.view_model import (
    Classification,
    DayCell,
    DayViewModel,
    HourCell,
    ViewModel,
    WeekViewModel,
)
from groupcal.domain.entities.view_state import Granularity


class ViewModelBuilder:
    """
    Read-only projection of the index and mention ledger into calendar cells.
    Calling it twice with unchanged inputs yields equal view models.
    """

    def __init__(
        self,
        index: AvailabilityStorePort,
        mentions: MentionLedgerPort,
        display_name: Callable[[str], str] = str,
        hours: tuple[int, ...] = WORKING_HOURS,
    ) -> None:
        self._index = index
        self._mentions = mentions
        self._display_name = display_name
        self._hours = hours

    def build(self, scope: str, anchor_date: date, granularity: Granularity, today: date) -> ViewModel:
        if granularity is Granularity.DAY:
            return self.day_view(scope, anchor_date)
        return self.week_view(scope, anchor_date, today)

    def week_view(self, scope: str, anchor_date: date, today: date) -> WeekViewModel:
        week_start = start_of_week(anchor_date)
        names = self._mentions.names(scope)
        days = []
        for offset in range(7):
            day = week_start + timedelta(days=offset)
            participants = self._index.query_day(scope, day)
            statuses = {name: self._mentions.query(scope, name, day) for name in names}
            available = self._names(participants.available) + _mentioned(statuses, Status.AVAILABLE)
            unavailable = self._names(participants.unavailable) + _mentioned(statuses, Status.UNAVAILABLE)
            days.append(
                DayCell(
                    day=day,
                    classification=Classification.of(len(available), len(unavailable)),
                    is_today=day == today,
                    available=available,
                    unavailable=unavailable,
                )
            )
        return WeekViewModel(scope=scope, anchor_date=anchor_date, week_start=week_start, days=tuple(days))

    def day_view(self, scope: str, anchor_date: date) -> DayViewModel:
        names = self._mentions.names(scope)
        cells = []
        for hour in self._hours:
            participants = self._index.query_hour(scope, TimeSlot(anchor_date, hour))
            statuses = {name: self._mentions.query_hour(scope, name, anchor_date, hour) for name in names}
            available = self._names(participants.available) + _mentioned(statuses, Status.AVAILABLE)
            unavailable = self._names(participants.unavailable) + _mentioned(statuses, Status.UNAVAILABLE)
            cells.append(
                HourCell(
                    day=anchor_date,
                    hour=hour,
                    classification=Classification.of(len(available), len(unavailable)),
                    available=available,
                    unavailable=unavailable,
                )
            )
        return DayViewModel(scope=scope, anchor_date=anchor_date, hours=tuple(cells))

    def _names(self, participant_ids: Iterable[str]) -> tuple[str, ...]:
        labelled = sorted((self._display_name(pid).lower(), pid) for pid in participant_ids)
        return tuple(self._display_name(pid) for _, pid in labelled)


def _mentioned(statuses: dict[str, Status | None], status: Status) -> tuple[str, ...]:
    return tuple(name for name in sorted(statuses) if statuses[name] is status)
