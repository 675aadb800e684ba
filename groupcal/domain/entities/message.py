from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class MessageEvent:
    id: str
    scope: str
    location: str
    author_id: str
    text: str
    created_at: datetime
    author_name: str | None = None
    is_bot: bool = False


@dataclass(frozen=True)
class MessageDeletion:
    id: str
    scope: str | None = None
    location: str | None = None
