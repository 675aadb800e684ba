from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from enum import Enum

from groupcal.application.ports.availability_store import AvailabilityStorePort
from groupcal.application.ports.mention_sink import MentionSinkPort
from groupcal.application.ports.temporal_resolver import TemporalAnchor, TemporalResolverPort
from groupcal.application.utils.statement_rules import DEFAULT_RULES, StatementRule, match_statement
from groupcal.domain.entities.availability import WORKING_HOURS, SourceEvent, TimeSlot
from groupcal.domain.entities.intent import (
    AvailabilityIntent,
    MentionRange,
    MentionSingle,
    SelfRange,
    SelfSingle,
)
from groupcal.domain.entities.message import MessageEvent


class ExtractionOutcome(str, Enum):
    RECORDED = "recorded"
    PARSE_MISS = "parse_miss"  # not an availability statement
    RESOLUTION_EMPTY = "resolution_empty"  # statement matched but named no date


@dataclass(frozen=True)
class ExtractionResult:
    outcome: ExtractionOutcome
    intent: AvailabilityIntent | None = None
    event: SourceEvent | None = None


class ExtractAvailabilityUseCase:
    """Turn one chat message into a source event in the index (and the mention sink)."""

    def __init__(
        self,
        index: AvailabilityStorePort,
        mention_sink: MentionSinkPort,
        resolver: TemporalResolverPort,
        rules: tuple[StatementRule, ...] = DEFAULT_RULES,
        working_hours: tuple[int, ...] = WORKING_HOURS,
    ) -> None:
        self._index = index
        self._mention_sink = mention_sink
        self._resolver = resolver
        self._rules = rules
        self._working_hours = working_hours
        self._logger = logging.getLogger(__name__)

    def execute(self, message: MessageEvent) -> ExtractionResult:
        matched = match_statement(message.text, self._rules)
        if matched is None:
            return ExtractionResult(outcome=ExtractionOutcome.PARSE_MISS)
        rule, intent = matched
        self._logger.debug("Statement matched %s", rule.name, extra={"message_id": message.id})
        if isinstance(intent, (SelfSingle, MentionSingle)):
            return self._record_single(message, intent)
        return self._record_range(message, intent)

    def _record_single(self, message: MessageEvent, intent: SelfSingle | MentionSingle) -> ExtractionResult:
        anchors = list(self._resolver.resolve(intent.when, message.created_at))
        if not anchors:
            return ExtractionResult(outcome=ExtractionOutcome.RESOLUTION_EMPTY, intent=intent)

        days: list[tuple[date, tuple[int, ...]]] = [
            (anchor.date, (anchor.hour,) if anchor.hour_specified else self._working_hours) for anchor in anchors
        ]
        slots = _unique_slots(TimeSlot(day, hour) for day, hours in days for hour in hours)
        event = self._build_event(message, intent, slots, text_range=None)

        if isinstance(intent, MentionSingle):
            for day, hours in days:
                self._mention_sink.record(message.scope, intent.name, day, intent.status, hours)
        self._index.record_event(event)
        return ExtractionResult(outcome=ExtractionOutcome.RECORDED, intent=intent, event=event)

    def _record_range(self, message: MessageEvent, intent: SelfRange | MentionRange) -> ExtractionResult:
        start = _first(self._resolver.resolve(intent.start, message.created_at))
        end = _first(self._resolver.resolve(intent.end, message.created_at))
        day = _first(self._resolver.resolve(intent.on, message.created_at)) if intent.on else start
        if start is None or end is None or day is None:
            return ExtractionResult(outcome=ExtractionOutcome.RESOLUTION_EMPTY, intent=intent)

        start_hour = start.hour if start.hour_specified else self._working_hours[0]
        end_hour = end.hour if end.hour_specified else self._working_hours[-1]
        # end before start expands to nothing; the event is still recorded
        hours = tuple(range(start_hour, end_hour + 1))
        slots = tuple(TimeSlot(day.date, hour) for hour in hours)
        event = self._build_event(message, intent, slots, text_range=(start_hour, end_hour))

        if isinstance(intent, MentionRange) and hours:
            self._mention_sink.record(message.scope, intent.name, day.date, intent.status, hours)
        self._index.record_event(event)
        return ExtractionResult(outcome=ExtractionOutcome.RECORDED, intent=intent, event=event)

    def _build_event(
        self,
        message: MessageEvent,
        intent: AvailabilityIntent,
        slots: tuple[TimeSlot, ...],
        text_range: tuple[int, int] | None,
    ) -> SourceEvent:
        mentioned = isinstance(intent, (MentionSingle, MentionRange))
        return SourceEvent(
            scope=message.scope,
            message_id=message.id,
            location=message.location,
            status=intent.status,
            created_on=message.created_at.date(),
            participant_id=None if mentioned else message.author_id,
            mentioned_name=intent.name if mentioned else None,
            produced_slots=slots,
            text_range=text_range,
        )


def _first(anchors) -> TemporalAnchor | None:
    return next(iter(anchors), None)


def _unique_slots(slots) -> tuple[TimeSlot, ...]:
    return tuple(dict.fromkeys(slots))
