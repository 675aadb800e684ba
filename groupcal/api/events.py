from __future__ import annotations

import json
import logging
from typing import TypeVar

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Request
from fastapi.concurrency import run_in_threadpool
from pydantic import BaseModel, ValidationError

from groupcal.api.schemas import (
    CalendarViewSchema,
    InteractionResponseSchema,
    InteractionSchema,
    MessageAcceptedSchema,
    MessageDeleteSchema,
    MessageEventSchema,
    MessageUpdateSchema,
)
from groupcal.application.exceptions import TransportFailure
from groupcal.core.config import settings
from groupcal.infrastructure.discord.discord_transport import DiscordTransport
from groupcal.infrastructure.discord.relay_verify import SIGNATURE_HEADER, verify_relay_signature
from groupcal.wiring.dependencies import Container, get_container

router = APIRouter()
logger = logging.getLogger(__name__)

SchemaT = TypeVar("SchemaT", bound=BaseModel)


async def _verified(request: Request, schema: type[SchemaT]) -> SchemaT:
    body = await request.body()
    signature = request.headers.get(SIGNATURE_HEADER)
    if not verify_relay_signature(body, signature, settings.RELAY_SHARED_SECRET, settings.ENV):
        raise HTTPException(status_code=403, detail="Invalid relay signature")
    try:
        payload = json.loads(body.decode("utf-8")) if body else {}
        return schema.model_validate(payload)
    except (ValueError, ValidationError) as e:
        logger.info("Rejected relay body", extra={"reason": str(e)})
        raise HTTPException(status_code=400, detail="Invalid event body")


def _run_logged(handler, *args) -> None:
    try:
        handler(*args)
    except TransportFailure as e:
        logger.warning("Transport failure while handling event", extra={"reason": str(e)})


@router.post("/events/messages/create", response_model=MessageAcceptedSchema)
async def message_created(
    request: Request,
    background_tasks: BackgroundTasks,
    container: Container = Depends(get_container),
) -> MessageAcceptedSchema:
    event = await _verified(request, MessageEventSchema)
    if isinstance(container.transport, DiscordTransport):
        container.transport.remember_channel(event.location, event.scope)
    background_tasks.add_task(_run_logged, container.chat_events.on_message_created, event.to_domain())
    logger.info("Message event received", extra={"message_id": event.id, "scope": event.scope})
    return MessageAcceptedSchema(message_id=event.id)


@router.post("/events/messages/update", response_model=MessageAcceptedSchema)
async def message_updated(
    request: Request,
    background_tasks: BackgroundTasks,
    container: Container = Depends(get_container),
) -> MessageAcceptedSchema:
    update = await _verified(request, MessageUpdateSchema)
    old = update.old.to_domain() if update.old else None
    background_tasks.add_task(_run_logged, container.chat_events.on_message_updated, old, update.new.to_domain())
    logger.info("Message update received", extra={"message_id": update.new.id, "scope": update.new.scope})
    return MessageAcceptedSchema(message_id=update.new.id)


@router.post("/events/messages/delete", response_model=MessageAcceptedSchema)
async def message_deleted(
    request: Request,
    background_tasks: BackgroundTasks,
    container: Container = Depends(get_container),
) -> MessageAcceptedSchema:
    deletion = await _verified(request, MessageDeleteSchema)
    background_tasks.add_task(_run_logged, container.chat_events.on_message_deleted, deletion.to_domain())
    logger.info("Message delete received", extra={"message_id": deletion.id})
    return MessageAcceptedSchema(message_id=deletion.id)


@router.post("/events/interactions", response_model=InteractionResponseSchema)
async def interaction(
    request: Request,
    container: Container = Depends(get_container),
) -> InteractionResponseSchema:
    payload = await _verified(request, InteractionSchema)
    if isinstance(container.transport, DiscordTransport):
        container.transport.remember_channel(payload.location, payload.scope)
        if payload.application_id and payload.token:
            container.transport.remember_interaction(payload.user_id, payload.application_id, payload.token)
    container.directory.remember(payload.user_id, payload.user_name)

    try:
        result = await run_in_threadpool(container.interactions.handle, payload.to_domain())
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except TransportFailure as e:
        raise HTTPException(status_code=502, detail=str(e))

    return InteractionResponseSchema(
        action=result.action,
        message=result.message,
        view=CalendarViewSchema.from_view_model(result.view_model) if result.view_model else None,
    )


@router.get("/calendar/{scope}/{location}", response_model=CalendarViewSchema)
def current_calendar(
    scope: str,
    location: str,
    container: Container = Depends(get_container),
) -> CalendarViewSchema:
    with container.lock:
        state = container.views.get_state(scope, location)
        if state is None:
            raise HTTPException(status_code=404, detail="No calendar open for this location")
        return CalendarViewSchema.from_view_model(container.views.render(state))
