from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from groupcal.domain.entities.availability import Status


@dataclass(frozen=True)
class SelfSingle:
    status: Status
    when: str


@dataclass(frozen=True)
class MentionSingle:
    name: str
    status: Status
    when: str


@dataclass(frozen=True)
class SelfRange:
    status: Status
    start: str
    end: str
    on: str | None = None


@dataclass(frozen=True)
class MentionRange:
    name: str
    status: Status
    start: str
    end: str
    on: str | None = None


AvailabilityIntent = Union[SelfSingle, MentionSingle, SelfRange, MentionRange]
