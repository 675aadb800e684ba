from __future__ import annotations

from datetime import date, datetime, timezone

import pytest

from groupcal.application.ports.temporal_resolver import TemporalAnchor, TemporalResolverPort
from groupcal.domain.entities.message import MessageEvent

REFERENCE = datetime(2024, 1, 1, 0, 0, tzinfo=timezone.utc)


class FakeResolver(TemporalResolverPort):
    """Resolves only the phrases it was taught; everything else yields nothing."""

    def __init__(self) -> None:
        self._phrases: dict[str, list[TemporalAnchor]] = {}
        self.calls: list[tuple[str, datetime]] = []

    def teach(self, phrase: str, *anchors: TemporalAnchor) -> None:
        self._phrases[phrase] = list(anchors)

    def resolve(self, text, reference):
        self.calls.append((text, reference))
        yield from self._phrases.get(text, [])


@pytest.fixture
def resolver() -> FakeResolver:
    fake = FakeResolver()
    fake.teach("tomorrow at 7pm", TemporalAnchor(date(2024, 1, 2), 19))
    fake.teach("tomorrow", TemporalAnchor(date(2024, 1, 2)))
    fake.teach("friday", TemporalAnchor(date(2024, 1, 5)))
    fake.teach("tomorrow and friday", TemporalAnchor(date(2024, 1, 2)), TemporalAnchor(date(2024, 1, 5)))
    fake.teach("tomorrow 6pm", TemporalAnchor(date(2024, 1, 2), 18))
    fake.teach("6pm", TemporalAnchor(date(2024, 1, 1), 18))
    fake.teach("9pm", TemporalAnchor(date(2024, 1, 1), 21))
    fake.teach("friday 9pm", TemporalAnchor(date(2024, 1, 5), 21))
    fake.teach("friday 6pm", TemporalAnchor(date(2024, 1, 5), 18))
    return fake


@pytest.fixture
def make_message():
    def _make(
        text: str,
        message_id: str = "m1",
        author_id: str = "u1",
        author_name: str | None = "Alice",
        scope: str = "guild",
        location: str = "general",
        created_at: datetime = REFERENCE,
        is_bot: bool = False,
    ) -> MessageEvent:
        return MessageEvent(
            id=message_id,
            scope=scope,
            location=location,
            author_id=author_id,
            author_name=author_name,
            text=text,
            created_at=created_at,
            is_bot=is_bot,
        )

    return _make
