from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime
from functools import lru_cache

from groupcal.application.use_cases.build_view_model import ViewModelBuilder
from groupcal.application.use_cases.calendar_view import CalendarViewUseCase
from groupcal.application.use_cases.edit_availability import EditAvailabilityUseCase
from groupcal.application.use_cases.extract_availability import ExtractAvailabilityUseCase
from groupcal.application.use_cases.handle_chat_event import HandleChatEventUseCase
from groupcal.application.use_cases.handle_interaction import HandleInteractionUseCase
from groupcal.core.config import settings
from groupcal.infrastructure.discord.discord_client import DiscordClient
from groupcal.infrastructure.discord.discord_transport import DiscordTransport
from groupcal.infrastructure.discord.mock_transport import MockTransport
from groupcal.infrastructure.store.availability_index import AvailabilityIndex
from groupcal.infrastructure.store.mention_ledger import MentionLedger
from groupcal.infrastructure.store.participant_directory import ParticipantDirectory
from groupcal.infrastructure.temporal.dateparser_resolver import DateparserResolver


@dataclass
class Container:
    lock: threading.RLock
    index: AvailabilityIndex
    mentions: MentionLedger
    directory: ParticipantDirectory
    transport: DiscordTransport | MockTransport
    views: CalendarViewUseCase
    editor: EditAvailabilityUseCase
    chat_events: HandleChatEventUseCase
    interactions: HandleInteractionUseCase


def get_transport() -> DiscordTransport | MockTransport:
    logger = logging.getLogger(__name__)
    logger.info("ENV=%s", settings.ENV)

    if not settings.DISCORD_BOT_TOKEN or settings.ENV.lower() in {"dev", "local"}:
        logger.info("Using MockTransport (token missing or ENV=dev/local)")
        return MockTransport()

    logger.info("Using real DiscordTransport")
    client = DiscordClient(bot_token=settings.DISCORD_BOT_TOKEN, api_base=settings.DISCORD_API_BASE)
    return DiscordTransport(client=client, page_size=settings.HISTORY_PAGE_SIZE)


def build_container(
    transport: DiscordTransport | MockTransport | None = None,
    clock: Callable[[], datetime] | None = None,
) -> Container:
    """Assemble the object graph. Everything shares one lock so events run one at a time."""
    lock = threading.RLock()
    transport = transport or get_transport()
    index = AvailabilityIndex()
    mentions = MentionLedger()
    directory = ParticipantDirectory()

    builder = ViewModelBuilder(index=index, mentions=mentions, display_name=directory.display_name)
    views = CalendarViewUseCase(builder=builder, renderer=transport, **({"clock": clock} if clock else {}))
    editor = EditAvailabilityUseCase(index=index, renderer=transport, views=views)
    extract = ExtractAvailabilityUseCase(
        index=index,
        mention_sink=mentions,
        resolver=DateparserResolver(
            languages=tuple(settings.RESOLVER_LANGUAGES),
            prefer_dates_from=settings.RESOLVER_PREFER_DATES_FROM,
        ),
    )
    chat_events = HandleChatEventUseCase(
        extract=extract,
        views=views,
        index=index,
        history=transport,
        directory=directory,
        lock=lock,
        command_prefix=settings.CALENDAR_COMMAND_PREFIX,
        lookback_days=settings.HISTORY_LOOKBACK_DAYS,
        redraw_enabled=settings.REDRAW_ENABLED,
        **({"clock": clock} if clock else {}),
    )
    interactions = HandleInteractionUseCase(
        chat_events=chat_events,
        views=views,
        editor=editor,
        renderer=transport,
        lock=lock,
    )
    return Container(
        lock=lock,
        index=index,
        mentions=mentions,
        directory=directory,
        transport=transport,
        views=views,
        editor=editor,
        chat_events=chat_events,
        interactions=interactions,
    )


@lru_cache
def get_container() -> Container:
    return build_container()
