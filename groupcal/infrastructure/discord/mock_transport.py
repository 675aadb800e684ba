from __future__ import annotations

import logging
from datetime import datetime, timezone

from groupcal.application.exceptions import TransportFailure
from groupcal.application.ports.chat_transport import (
    EditorPromptRequest,
    HistoryPort,
    RedrawRequest,
    RendererPort,
)
from groupcal.domain.entities.message import MessageEvent


class MockTransport(HistoryPort, RendererPort):
    """In-memory chat transport for dev and tests. Records every outgoing request."""

    def __init__(self) -> None:
        self.history: dict[str, list[MessageEvent]] = {}
        self.redraws: list[RedrawRequest] = []
        self.prompts: list[EditorPromptRequest] = []
        self.notifications: list[tuple[str, str, str]] = []
        self.fail_next_redraw = False
        self.fail_history = False
        self._logger = logging.getLogger(__name__)

    def add_history(self, message: MessageEvent) -> None:
        self.history.setdefault(message.location, []).append(message)

    def fetch_history(self, location: str, since: datetime) -> list[MessageEvent]:
        if self.fail_history:
            raise TransportFailure(f"history unavailable for {location}")
        if since.tzinfo is None:
            since = since.replace(tzinfo=timezone.utc)
        messages = [m for m in self.history.get(location, []) if _aware(m.created_at) >= since]
        return sorted(messages, key=lambda m: _aware(m.created_at))

    def redraw(self, request: RedrawRequest) -> None:
        if self.fail_next_redraw:
            self.fail_next_redraw = False
            raise TransportFailure(f"redraw failed for {request.location}")
        self.redraws.append(request)
        self._logger.info(
            "Mock calendar redraw",
            extra={
                "scope": request.scope,
                "location": request.location,
                "granularity": request.view_model.granularity.value,
            },
        )

    def prompt_editor(self, request: EditorPromptRequest) -> None:
        self.prompts.append(request)
        self._logger.info(
            "Mock editor prompt",
            extra={"participant": request.participant_id, "location": request.location},
        )

    def notify(self, participant_id: str, location: str, text: str) -> None:
        self.notifications.append((participant_id, location, text))
        self._logger.info("Mock notify", extra={"participant": participant_id, "text": text})

    @property
    def last_redraw(self) -> RedrawRequest | None:
        return self.redraws[-1] if self.redraws else None


def _aware(value: datetime) -> datetime:
    return value if value.tzinfo is not None else value.replace(tzinfo=timezone.utc)
