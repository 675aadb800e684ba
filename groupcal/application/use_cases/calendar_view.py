from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import replace
from datetime import date, datetime, timedelta

from groupcal.application.exceptions import TransportFailure
from groupcal.application.ports.chat_transport import RedrawRequest, RendererPort
from groupcal.application.use_cases.build_view_model import ViewModelBuilder
from groupcal.domain.entities.availability import start_of_week
from groupcal.domain.entities.view_model import ViewModel
from groupcal.domain.entities.view_state import Direction, Granularity, ViewState


def navigate(state: ViewState, direction: Direction, unit: Granularity | None = None) -> ViewState:
    step = 1 if (unit or state.granularity) is Granularity.DAY else 7
    delta = step if direction is Direction.NEXT else -step
    return replace(state, anchor_date=state.anchor_date + timedelta(days=delta))


def jump_to_today(state: ViewState, today: date) -> ViewState:
    return replace(state, anchor_date=today)


def select_day(state: ViewState, index: int) -> ViewState:
    index = min(max(index, 0), 6)
    return replace(
        state,
        anchor_date=start_of_week(state.anchor_date) + timedelta(days=index),
        granularity=Granularity.DAY,
    )


def change_granularity(state: ViewState, granularity: Granularity) -> ViewState:
    return replace(state, granularity=granularity)


class CalendarViewUseCase:
    """
    One ViewState per (scope, location). Every transition rebuilds the view
    model and asks the renderer to redraw; state is committed only once the
    redraw went through.
    """

    def __init__(
        self,
        builder: ViewModelBuilder,
        renderer: RendererPort,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self._builder = builder
        self._renderer = renderer
        self._clock = clock
        self._views: dict[tuple[str, str], ViewState] = {}
        self._logger = logging.getLogger(__name__)

    def today(self) -> date:
        return self._clock().date()

    def get_state(self, scope: str, location: str) -> ViewState | None:
        return self._views.get((scope, location))

    def render(self, state: ViewState) -> ViewModel:
        return self._builder.build(state.scope, state.anchor_date, state.granularity, self.today())

    def open(self, scope: str, location: str, granularity: Granularity = Granularity.WEEK) -> ViewModel:
        """Post a new calendar in ``location``, replacing whatever view was tracked there."""
        state = ViewState(scope=scope, location=location, anchor_date=self.today(), granularity=granularity)
        view_model = self.render(state)
        self._renderer.redraw(RedrawRequest(scope=scope, location=location, view_model=view_model, is_new=True))
        self._views[(scope, location)] = state
        self._logger.info(
            "Calendar displayed",
            extra={"scope": scope, "location": location, "granularity": granularity.value},
        )
        return view_model

    def navigate(
        self, scope: str, location: str, direction: Direction, unit: Granularity | None = None
    ) -> ViewModel | None:
        return self._transition(scope, location, lambda state: navigate(state, direction, unit))

    def jump_to_today(self, scope: str, location: str) -> ViewModel | None:
        today = self.today()
        return self._transition(scope, location, lambda state: jump_to_today(state, today))

    def select_day(self, scope: str, location: str, index: int) -> ViewModel | None:
        return self._transition(scope, location, lambda state: select_day(state, index))

    def change_granularity(self, scope: str, location: str, granularity: Granularity) -> ViewModel | None:
        return self._transition(scope, location, lambda state: change_granularity(state, granularity))

    def refresh_scope(self, scope: str) -> int:
        """Redraw every open view of ``scope``. Returns how many redraws succeeded."""
        redrawn = 0
        for state in [state for (view_scope, _), state in self._views.items() if view_scope == scope]:
            try:
                self._renderer.redraw(
                    RedrawRequest(scope=scope, location=state.location, view_model=self.render(state))
                )
                redrawn += 1
            except TransportFailure as e:
                self._logger.warning(
                    "Calendar redraw failed",
                    extra={"scope": scope, "location": state.location, "reason": str(e)},
                )
        return redrawn

    def _transition(
        self, scope: str, location: str, transition: Callable[[ViewState], ViewState]
    ) -> ViewModel | None:
        state = self._views.get((scope, location))
        if state is None:
            self._logger.info("No calendar open", extra={"scope": scope, "location": location})
            return None

        next_state = transition(state)
        view_model = self.render(next_state)
        self._renderer.redraw(RedrawRequest(scope=scope, location=location, view_model=view_model))
        self._views[(scope, location)] = next_state
        return view_model
