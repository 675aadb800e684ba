"""
Tests for the per-location view state machine.
"""

from __future__ import annotations

from datetime import date, datetime

import pytest

from groupcal.application.exceptions import TransportFailure
from groupcal.application.use_cases.build_view_model import ViewModelBuilder
from groupcal.application.use_cases.calendar_view import (
    CalendarViewUseCase,
    change_granularity,
    jump_to_today,
    navigate,
    select_day,
)
from groupcal.domain.entities.view_model import DayViewModel, WeekViewModel
from groupcal.domain.entities.view_state import Direction, Granularity, ViewState
from groupcal.infrastructure.discord.mock_transport import MockTransport
from groupcal.infrastructure.store.availability_index import AvailabilityIndex
from groupcal.infrastructure.store.mention_ledger import MentionLedger

WEDNESDAY = date(2024, 1, 3)


def _state(granularity=Granularity.WEEK, anchor=WEDNESDAY):
    return ViewState(scope="guild", location="general", anchor_date=anchor, granularity=granularity)


def _use_case():
    transport = MockTransport()
    builder = ViewModelBuilder(index=AvailabilityIndex(), mentions=MentionLedger())
    views = CalendarViewUseCase(builder=builder, renderer=transport, clock=lambda: datetime(2024, 1, 3, 12, 0))
    return views, transport


@pytest.mark.parametrize(
    "granularity, direction, expected",
    [
        (Granularity.WEEK, Direction.NEXT, date(2024, 1, 10)),
        (Granularity.WEEK, Direction.PREV, date(2023, 12, 27)),
        (Granularity.DAY, Direction.NEXT, date(2024, 1, 4)),
        (Granularity.DAY, Direction.PREV, date(2024, 1, 2)),
    ],
)
def test_navigate_steps_by_granularity(granularity, direction, expected):
    assert navigate(_state(granularity), direction).anchor_date == expected


def test_navigate_with_explicit_unit():
    """prev_day pressed while in week view moves one day."""
    assert navigate(_state(Granularity.WEEK), Direction.NEXT, Granularity.DAY).anchor_date == date(2024, 1, 4)


def test_select_day_forces_day_granularity():
    state = select_day(_state(Granularity.WEEK), 4)
    assert state.anchor_date == date(2024, 1, 5)
    assert state.granularity is Granularity.DAY


@pytest.mark.parametrize("index, expected", [(-3, date(2024, 1, 1)), (9, date(2024, 1, 7))])
def test_select_day_clamps_index(index, expected):
    assert select_day(_state(), index).anchor_date == expected


def test_jump_to_today_and_change_granularity():
    state = jump_to_today(_state(anchor=date(2023, 5, 1)), WEDNESDAY)
    assert state.anchor_date == WEDNESDAY
    assert change_granularity(state, Granularity.DAY).granularity is Granularity.DAY


def test_open_posts_new_week_view_anchored_today():
    views, transport = _use_case()

    view = views.open("guild", "general")

    assert isinstance(view, WeekViewModel)
    assert view.anchor_date == WEDNESDAY
    assert transport.last_redraw.is_new is True
    assert views.get_state("guild", "general").granularity is Granularity.WEEK


def test_transition_redraws_and_commits():
    views, transport = _use_case()
    views.open("guild", "general")

    view = views.select_day("guild", "general", 0)

    assert isinstance(view, DayViewModel)
    assert view.anchor_date == date(2024, 1, 1)
    assert transport.last_redraw.is_new is False
    assert views.get_state("guild", "general").granularity is Granularity.DAY


def test_transition_without_open_view_returns_none():
    views, transport = _use_case()
    assert views.navigate("guild", "general", Direction.NEXT) is None
    assert transport.redraws == []


def test_failed_redraw_leaves_state_unchanged():
    views, transport = _use_case()
    views.open("guild", "general")
    transport.fail_next_redraw = True

    with pytest.raises(TransportFailure):
        views.navigate("guild", "general", Direction.NEXT)

    assert views.get_state("guild", "general").anchor_date == WEDNESDAY


def test_refresh_scope_redraws_each_open_location_and_survives_failures():
    views, transport = _use_case()
    views.open("guild", "general")
    views.open("guild", "events")
    views.open("other", "general")
    transport.redraws.clear()
    transport.fail_next_redraw = True

    redrawn = views.refresh_scope("guild")

    assert redrawn == 1
    assert [request.scope for request in transport.redraws] == ["guild"]
