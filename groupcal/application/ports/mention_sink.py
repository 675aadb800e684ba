from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable
from datetime import date

from groupcal.domain.entities.availability import Status


class MentionSinkPort(ABC):
    @abstractmethod
    def record(self, scope: str, name: str, day: date, status: Status, hours: Iterable[int]) -> None:
        """
        Record availability stated on behalf of someone who is not a tracked participant.
        An empty ``hours`` means the whole working-hour band.
        """
        raise NotImplementedError


class MentionLedgerPort(MentionSinkPort):
    @abstractmethod
    def query(self, scope: str, name: str, day: date) -> Status | None:
        raise NotImplementedError

    @abstractmethod
    def query_hour(self, scope: str, name: str, day: date, hour: int) -> Status | None:
        raise NotImplementedError

    @abstractmethod
    def names(self, scope: str) -> list[str]:
        raise NotImplementedError

    @abstractmethod
    def clear_scope(self, scope: str) -> None:
        raise NotImplementedError
