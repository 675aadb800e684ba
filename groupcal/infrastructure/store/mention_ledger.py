from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import date

from groupcal.application.ports.mention_sink import MentionLedgerPort
from groupcal.domain.entities.availability import WORKING_HOURS, MentionedAvailability, Status


class MentionLedger(MentionLedgerPort):
    """
    Availability stated about people who are not tracked participants.

    Keyed by (scope, display name). A name carries one status per date and a
    single set of hours shared by all of its dates.
    """

    def __init__(self) -> None:
        self._entries: dict[tuple[str, str], MentionedAvailability] = {}
        self._logger = logging.getLogger(__name__)

    def record(self, scope: str, name: str, day: date, status: Status, hours: Iterable[int]) -> None:
        entry = self._entries.setdefault((scope, name), MentionedAvailability())
        entry.dates[day] = status
        entry.hours.update(set(hours) or WORKING_HOURS)
        self._logger.debug(
            "Mention recorded",
            extra={"scope": scope, "mentioned": name, "day": day.isoformat(), "status": status.value},
        )

    def query(self, scope: str, name: str, day: date) -> Status | None:
        entry = self._entries.get((scope, name))
        if entry is None:
            return None
        return entry.dates.get(day)

    def query_hour(self, scope: str, name: str, day: date, hour: int) -> Status | None:
        entry = self._entries.get((scope, name))
        if entry is None or hour not in entry.hours:
            return None
        return entry.dates.get(day)

    def names(self, scope: str) -> list[str]:
        return sorted(name for (entry_scope, name) in self._entries if entry_scope == scope)

    def clear_scope(self, scope: str) -> None:
        for key in [key for key in self._entries if key[0] == scope]:
            del self._entries[key]
