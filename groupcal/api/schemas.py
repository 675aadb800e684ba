from __future__ import annotations

from datetime import date, datetime

from pydantic import BaseModel, Field

from groupcal.domain.entities.interaction import Interaction
from groupcal.domain.entities.message import MessageDeletion, MessageEvent
from groupcal.domain.entities.view_model import DayViewModel, ViewModel, WeekViewModel


class MessageEventSchema(BaseModel):
    id: str
    scope: str
    location: str
    author_id: str
    author_name: str | None = None
    is_bot: bool = False
    text: str = ""
    created_at: datetime

    def to_domain(self) -> MessageEvent:
        return MessageEvent(
            id=self.id,
            scope=self.scope,
            location=self.location,
            author_id=self.author_id,
            author_name=self.author_name,
            is_bot=self.is_bot,
            text=self.text,
            created_at=self.created_at,
        )


class MessageUpdateSchema(BaseModel):
    old: MessageEventSchema | None = None
    new: MessageEventSchema


class MessageDeleteSchema(BaseModel):
    id: str
    scope: str | None = None
    location: str | None = None

    def to_domain(self) -> MessageDeletion:
        return MessageDeletion(id=self.id, scope=self.scope, location=self.location)


class InteractionSchema(BaseModel):
    kind: str = "component"
    custom_id: str
    scope: str
    location: str
    user_id: str
    user_name: str | None = None
    values: list[str] = Field(default_factory=list)
    # present when relayed from a real interaction; used for private follow-ups
    application_id: str | None = None
    token: str | None = None

    def to_domain(self) -> Interaction:
        return Interaction(
            kind=self.kind,
            custom_id=self.custom_id,
            scope=self.scope,
            location=self.location,
            user_id=self.user_id,
            user_name=self.user_name,
            values=tuple(self.values),
        )


class DayCellSchema(BaseModel):
    day: date
    classification: str
    display_classification: str
    is_today: bool
    available: list[str]
    unavailable: list[str]


class HourCellSchema(BaseModel):
    hour: int
    classification: str
    available: list[str]
    unavailable: list[str]


class CalendarViewSchema(BaseModel):
    scope: str
    granularity: str
    anchor_date: date
    week_start: date | None = None
    days: list[DayCellSchema] = Field(default_factory=list)
    hours: list[HourCellSchema] = Field(default_factory=list)

    @classmethod
    def from_view_model(cls, view_model: ViewModel) -> "CalendarViewSchema":
        if isinstance(view_model, WeekViewModel):
            return cls(
                scope=view_model.scope,
                granularity=view_model.granularity.value,
                anchor_date=view_model.anchor_date,
                week_start=view_model.week_start,
                days=[
                    DayCellSchema(
                        day=cell.day,
                        classification=cell.classification.value,
                        display_classification=cell.display_classification.value,
                        is_today=cell.is_today,
                        available=list(cell.available),
                        unavailable=list(cell.unavailable),
                    )
                    for cell in view_model.days
                ],
            )
        assert isinstance(view_model, DayViewModel)
        return cls(
            scope=view_model.scope,
            granularity=view_model.granularity.value,
            anchor_date=view_model.anchor_date,
            hours=[
                HourCellSchema(
                    hour=cell.hour,
                    classification=cell.classification.value,
                    available=list(cell.available),
                    unavailable=list(cell.unavailable),
                )
                for cell in view_model.hours
            ],
        )


class InteractionResponseSchema(BaseModel):
    action: str
    message: str | None = None
    view: CalendarViewSchema | None = None


class MessageAcceptedSchema(BaseModel):
    status: str = "accepted"
    message_id: str
