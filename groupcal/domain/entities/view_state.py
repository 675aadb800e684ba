from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from enum import Enum


class Granularity(str, Enum):
    DAY = "day"
    WEEK = "week"

    @staticmethod
    def parse(value: str) -> "Granularity":
        normalized = (value or "").strip().lower()
        if normalized in ("day", "hourly"):
            return Granularity.DAY
        if normalized in ("week", "weekly"):
            return Granularity.WEEK
        raise ValueError(f"Unknown granularity: {value!r}")


class Direction(str, Enum):
    PREV = "prev"
    NEXT = "next"


@dataclass(frozen=True)
class ViewState:
    scope: str
    location: str
    anchor_date: date
    granularity: Granularity = Granularity.WEEK
