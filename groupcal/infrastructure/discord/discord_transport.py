from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime, timezone
from typing import Any

from groupcal.application.ports.chat_transport import (
    EditorPromptRequest,
    HistoryPort,
    RedrawRequest,
    RendererPort,
)
from groupcal.domain.entities.message import MessageEvent
from groupcal.infrastructure.discord.calendar_format import calendar_message, editor_message
from groupcal.infrastructure.discord.discord_client import DiscordClient


def message_from_payload(payload: dict[str, Any], scope: str, location: str) -> MessageEvent:
    """Convert a Discord message object into a MessageEvent."""
    author = payload.get("author") or {}
    return MessageEvent(
        id=str(payload["id"]),
        scope=scope,
        location=location,
        author_id=str(author.get("id", "")),
        author_name=author.get("global_name") or author.get("username"),
        is_bot=bool(author.get("bot", False)),
        text=payload.get("content") or "",
        created_at=_parse_timestamp(payload["timestamp"]),
    )


class DiscordTransport(HistoryPort, RendererPort):
    """
    Discord implementation of the history and renderer ports.

    Keeps the id of the calendar message last posted in each channel so that
    later redraws edit it in place. Private replies go through the most recent
    interaction token of the participant, falling back to a direct message.
    """

    def __init__(
        self,
        client: DiscordClient,
        page_size: int = 100,
        should_continue: Callable[[], bool] | None = None,
    ) -> None:
        self._client = client
        self._page_size = page_size
        self._should_continue = should_continue
        self._channel_scopes: dict[str, str] = {}
        self._calendar_messages: dict[str, str] = {}
        self._interactions: dict[str, tuple[str, str]] = {}
        self._logger = logging.getLogger(__name__)

    def remember_channel(self, location: str, scope: str) -> None:
        self._channel_scopes[location] = scope

    def remember_interaction(self, participant_id: str, application_id: str, token: str) -> None:
        self._interactions[participant_id] = (application_id, token)

    def fetch_history(self, location: str, since: datetime) -> list[MessageEvent]:
        if since.tzinfo is None:
            since = since.replace(tzinfo=timezone.utc)
        scope = self._scope_of(location)

        collected: list[MessageEvent] = []
        before: str | None = None
        pages = 0
        while True:
            page = self._client.list_messages(location, limit=self._page_size, before=before)
            pages += 1
            reached_start = False
            for payload in page:
                message = message_from_payload(payload, scope, location)
                if message.created_at < since:
                    reached_start = True
                    break
                collected.append(message)

            if reached_start or len(page) < self._page_size:
                break
            if self._should_continue is not None and not self._should_continue():
                self._logger.info("History fetch cancelled", extra={"location": location, "pages": pages})
                break
            before = str(page[-1]["id"])

        self._logger.info(
            "History fetched",
            extra={"location": location, "scope": scope, "pages": pages, "messages": len(collected)},
        )
        collected.reverse()
        return collected

    def redraw(self, request: RedrawRequest) -> None:
        payload = calendar_message(request.view_model)
        message_id = self._calendar_messages.get(request.location)
        if request.is_new or message_id is None:
            created = self._client.create_message(request.location, payload)
            self._calendar_messages[request.location] = str(created["id"])
        else:
            self._client.edit_message(request.location, message_id, payload)

    def prompt_editor(self, request: EditorPromptRequest) -> None:
        self._send_private(request.participant_id, editor_message(request))

    def notify(self, participant_id: str, location: str, text: str) -> None:
        self._send_private(participant_id, {"content": text})

    def _send_private(self, participant_id: str, payload: dict[str, Any]) -> None:
        interaction = self._interactions.get(participant_id)
        if interaction is not None:
            application_id, token = interaction
            self._client.send_followup(application_id, token, payload)
        else:
            self._client.send_direct_message(participant_id, payload)

    def _scope_of(self, location: str) -> str:
        scope = self._channel_scopes.get(location)
        if scope is None:
            channel = self._client.get_channel(location)
            scope = str(channel.get("guild_id") or location)
            self._channel_scopes[location] = scope
        return scope


def _parse_timestamp(value: str) -> datetime:
    parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed
