from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date

from groupcal.application.exceptions import EditValidationError, NoEditSessionError
from groupcal.application.ports.availability_store import AvailabilityStorePort
from groupcal.application.ports.chat_transport import EditorPromptRequest, RendererPort
from groupcal.application.use_cases.calendar_view import CalendarViewUseCase
from groupcal.domain.entities.availability import ALL_HOURS, Status
from groupcal.domain.entities.edit_session import EditSession, RangeEditSession, ToggleEditSession

MISSING_SELECTION = "Please select both start time, end time, and availability status."
END_BEFORE_START = "End time must be after start time. Please try again."
NO_CHANGES = "No changes to save. Toggle at least one hour first."


class EditAvailabilityUseCase:
    """
    Private per-participant editor for one day of the participant's own availability.

    Two variants share the session slot: "range" (start hour, end hour, status)
    and "toggle" (flip individual hours). Opening a new editor discards the old one.
    """

    def __init__(
        self,
        index: AvailabilityStorePort,
        renderer: RendererPort,
        views: CalendarViewUseCase,
    ) -> None:
        self._index = index
        self._renderer = renderer
        self._views = views
        self._sessions: dict[str, EditSession] = {}
        self._logger = logging.getLogger(__name__)

    def get_session(self, participant_id: str) -> EditSession | None:
        return self._sessions.get(participant_id)

    def start_edit(
        self,
        participant_id: str,
        scope: str,
        location: str,
        target_date: date,
        variant: str = "range",
    ) -> EditSession:
        projection = self._index.get_user_availability(scope, participant_id, target_date)
        if variant == "toggle":
            session: EditSession = ToggleEditSession(
                participant_id=participant_id,
                scope=scope,
                target_date=target_date,
                pending_available=projection.available,
                pending_unavailable=projection.unavailable,
                seeded_from=projection,
            )
        elif variant == "range":
            session = RangeEditSession(
                participant_id=participant_id,
                scope=scope,
                target_date=target_date,
                seeded_from=projection,
            )
        else:
            raise ValueError(f"Unknown editor variant: {variant!r}")

        self._sessions[participant_id] = session
        self._renderer.prompt_editor(
            EditorPromptRequest(
                participant_id=participant_id,
                scope=scope,
                location=location,
                date=target_date,
                current_projection=projection,
                variant=variant,
            )
        )
        self._logger.info(
            "Edit session started",
            extra={"participant": participant_id, "scope": scope, "day": target_date.isoformat()},
        )
        return session

    def set_range_bound(self, participant_id: str, bound: str, hour: int) -> RangeEditSession:
        session = self._range_session(participant_id)
        if hour not in ALL_HOURS:
            raise EditValidationError(f"Hour must be within 0..23, got {hour}")
        if bound == "start":
            session = replace(session, selected_start=hour)
        elif bound == "end":
            session = replace(session, selected_end=hour)
        else:
            raise ValueError(f"Unknown range bound: {bound!r}")
        self._sessions[participant_id] = session
        return session

    def set_status(self, participant_id: str, status: Status) -> RangeEditSession:
        session = replace(self._range_session(participant_id), status=status)
        self._sessions[participant_id] = session
        return session

    def toggle_hour(self, participant_id: str, hour: int, status: Status) -> ToggleEditSession:
        """Flip ``hour`` in the ``status`` set; switching it on removes it from the other set."""
        session = self._sessions.get(participant_id)
        if not isinstance(session, ToggleEditSession):
            raise NoEditSessionError(participant_id)
        if hour not in ALL_HOURS:
            raise EditValidationError(f"Hour must be within 0..23, got {hour}")

        available = set(session.pending_available)
        unavailable = set(session.pending_unavailable)
        chosen, other = (available, unavailable) if status is Status.AVAILABLE else (unavailable, available)
        if hour in chosen:
            chosen.discard(hour)
        else:
            chosen.add(hour)
            other.discard(hour)

        session = replace(
            session,
            pending_available=frozenset(available),
            pending_unavailable=frozenset(unavailable),
        )
        self._sessions[participant_id] = session
        return session

    def save(self, participant_id: str) -> EditSession:
        """
        Validate and apply the session, then redraw every open view of its scope.
        On validation failure the session is kept so the participant can fix it.
        """
        session = self._sessions.get(participant_id)
        if session is None:
            raise NoEditSessionError(participant_id)

        if isinstance(session, RangeEditSession):
            available, unavailable = _range_hours(session)
        else:
            if not session.has_changes:
                raise EditValidationError(NO_CHANGES)
            available, unavailable = set(session.pending_available), set(session.pending_unavailable)

        try:
            self._index.set_user_availability(
                session.scope, participant_id, session.target_date, available, unavailable
            )
        except ValueError as e:
            raise EditValidationError(str(e)) from e

        del self._sessions[participant_id]
        self._logger.info(
            "Edit session saved",
            extra={"participant": participant_id, "scope": session.scope, "day": session.target_date.isoformat()},
        )
        self._views.refresh_scope(session.scope)
        return session

    def cancel(self, participant_id: str) -> bool:
        return self._sessions.pop(participant_id, None) is not None

    def _range_session(self, participant_id: str) -> RangeEditSession:
        session = self._sessions.get(participant_id)
        if not isinstance(session, RangeEditSession):
            raise NoEditSessionError(participant_id)
        return session


def _range_hours(session: RangeEditSession) -> tuple[set[int], set[int]]:
    if session.selected_start is None or session.selected_end is None or session.status is None:
        raise EditValidationError(MISSING_SELECTION)
    if session.selected_end < session.selected_start:
        raise EditValidationError(END_BEFORE_START)

    hours = set(range(session.selected_start, session.selected_end + 1))
    if session.status is Status.AVAILABLE:
        return hours, set()
    return set(), hours


def describe_saved(session: EditSession) -> str:
    """Confirmation text shown to the participant after a successful save."""
    day = session.target_date.strftime("%A, %B %d")
    if isinstance(session, RangeEditSession):
        emoji = "✅" if session.status is Status.AVAILABLE else "❌"
        return (
            f"{emoji} Your availability for {day} has been updated!\n"
            f"You are {session.status.value} from {_clock(session.selected_start)} to {_clock(session.selected_end)}."
        )
    return (
        f"✅ Your availability for {day} has been updated!\n"
        f"Available: {_hour_list(session.pending_available)}\n"
        f"Unavailable: {_hour_list(session.pending_unavailable)}"
    )


def _clock(hour: int | None) -> str:
    if hour is None:
        return "?"
    suffix = "AM" if hour < 12 else "PM"
    return f"{hour % 12 or 12}:00 {suffix}"


def _hour_list(hours: frozenset[int]) -> str:
    return ", ".join(_clock(hour) for hour in sorted(hours)) or "none"
