from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterator
from dataclasses import dataclass
from datetime import date, datetime


@dataclass(frozen=True)
class TemporalAnchor:
    date: date
    hour: int | None = None

    @property
    def hour_specified(self) -> bool:
        return self.hour is not None


class TemporalResolverPort(ABC):
    @abstractmethod
    def resolve(self, text: str, reference: datetime) -> Iterator[TemporalAnchor]:
        """
        Find the date/time expressions in ``text``.

        Requirements:
        - Yields anchors lazily, in the order they appear in the text
        - Relative terms ("tomorrow", "friday") resolve against ``reference``
        - Never raises on unparseable text; yields nothing instead
        - Stateless: calling twice with the same input yields the same anchors
        """
        raise NotImplementedError
