from __future__ import annotations

import logging
import threading

from groupcal.application.exceptions import EditValidationError, NoEditSessionError
from groupcal.application.ports.chat_transport import RendererPort
from groupcal.application.use_cases.calendar_view import CalendarViewUseCase
from groupcal.application.use_cases.edit_availability import EditAvailabilityUseCase, describe_saved
from groupcal.application.use_cases.handle_chat_event import HandleChatEventUseCase
from groupcal.domain.entities.availability import Status
from groupcal.domain.entities.interaction import Interaction, InteractionResult
from groupcal.domain.entities.view_state import Direction, Granularity

CALENDAR_COMMAND = "calendar"
DAY_SELECT_PREFIX = "day_select_"

NAVIGATION = {
    "prev_day": (Direction.PREV, Granularity.DAY),
    "next_day": (Direction.NEXT, Granularity.DAY),
    "prev_week": (Direction.PREV, Granularity.WEEK),
    "next_week": (Direction.NEXT, Granularity.WEEK),
}

NO_SESSION = "No availability data found. Please try again."
EDIT_CANCELLED = "Edit cancelled."


class HandleInteractionUseCase:
    """Route commands, buttons and select menus to the view and editor use cases."""

    def __init__(
        self,
        chat_events: HandleChatEventUseCase,
        views: CalendarViewUseCase,
        editor: EditAvailabilityUseCase,
        renderer: RendererPort,
        lock: threading.RLock | None = None,
    ) -> None:
        self._chat_events = chat_events
        self._views = views
        self._editor = editor
        self._renderer = renderer
        self._lock = lock or threading.RLock()
        self._logger = logging.getLogger(__name__)

    def handle(self, interaction: Interaction) -> InteractionResult:
        with self._lock:
            try:
                return self._route(interaction)
            except NoEditSessionError:
                return self._reply(interaction, "no_session", NO_SESSION)
            except EditValidationError as e:
                self._logger.info(
                    "Edit rejected",
                    extra={"participant": interaction.user_id, "scope": interaction.scope, "reason": str(e)},
                )
                return self._reply(interaction, "validation_error", str(e))

    def _route(self, interaction: Interaction) -> InteractionResult:
        custom_id = interaction.custom_id
        scope, location, user_id = interaction.scope, interaction.location, interaction.user_id

        if interaction.kind == "command":
            if custom_id != CALENDAR_COMMAND:
                return InteractionResult(action="ignored")
            return InteractionResult(
                action="calendar_displayed",
                view_model=self._chat_events.run_calendar_command(scope, location),
            )

        if custom_id in NAVIGATION:
            direction, unit = NAVIGATION[custom_id]
            return self._view_result(self._views.navigate(scope, location, direction, unit))
        if custom_id == "today":
            return self._view_result(self._views.jump_to_today(scope, location))
        if custom_id.startswith(DAY_SELECT_PREFIX):
            index = _int_or_none(custom_id[len(DAY_SELECT_PREFIX):])
            if index is None:
                return InteractionResult(action="ignored")
            return self._view_result(self._views.select_day(scope, location, index))
        if custom_id == "view_select":
            granularity = Granularity.parse(_first_value(interaction))
            return self._view_result(self._views.change_granularity(scope, location, granularity))

        if custom_id in ("edit_availability", "edit_hours"):
            state = self._views.get_state(scope, location)
            target_date = state.anchor_date if state else self._views.today()
            variant = "toggle" if custom_id == "edit_hours" else "range"
            self._editor.start_edit(user_id, scope, location, target_date, variant=variant)
            return InteractionResult(action="editor_opened")
        if custom_id in ("select_start_time", "select_end_time"):
            bound = "start" if custom_id == "select_start_time" else "end"
            self._editor.set_range_bound(user_id, bound, _hour(_first_value(interaction)))
            return InteractionResult(action="session_updated")
        if custom_id == "select_status":
            self._editor.set_status(user_id, _status(_first_value(interaction)))
            return InteractionResult(action="session_updated")
        if custom_id in ("toggle_available", "toggle_unavailable"):
            status = Status.AVAILABLE if custom_id == "toggle_available" else Status.UNAVAILABLE
            for value in interaction.values:
                self._editor.toggle_hour(user_id, _hour(value), status)
            return InteractionResult(action="session_updated")
        if custom_id == "save_availability":
            session = self._editor.save(user_id)
            return self._reply(interaction, "saved", describe_saved(session))
        if custom_id == "cancel_edit":
            if not self._editor.cancel(user_id):
                raise NoEditSessionError(user_id)
            return self._reply(interaction, "cancelled", EDIT_CANCELLED)

        self._logger.debug("Unknown interaction ignored", extra={"custom_id": custom_id})
        return InteractionResult(action="ignored")

    def _view_result(self, view_model) -> InteractionResult:
        if view_model is None:
            return InteractionResult(action="no_calendar")
        return InteractionResult(action="view_updated", view_model=view_model)

    def _reply(self, interaction: Interaction, action: str, text: str) -> InteractionResult:
        self._renderer.notify(interaction.user_id, interaction.location, text)
        return InteractionResult(action=action, message=text)


def _first_value(interaction: Interaction) -> str:
    if not interaction.values:
        raise EditValidationError(f"{interaction.custom_id} requires a selected value")
    return interaction.values[0]


def _hour(value: str) -> int:
    hour = _int_or_none(value)
    if hour is None:
        raise EditValidationError(f"Not an hour: {value!r}")
    return hour


def _status(value: str) -> Status:
    try:
        return Status(value.strip().lower())
    except ValueError as e:
        raise EditValidationError(f"Unknown status: {value!r}") from e


def _int_or_none(value: str) -> int | None:
    try:
        return int(value)
    except (TypeError, ValueError):
        return None
