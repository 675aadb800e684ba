"""
Tests for the private availability editor.
"""

from __future__ import annotations

from datetime import date, datetime

import pytest

from groupcal.application.exceptions import EditValidationError, NoEditSessionError
from groupcal.application.use_cases.build_view_model import ViewModelBuilder
from groupcal.application.use_cases.calendar_view import CalendarViewUseCase
from groupcal.application.use_cases.edit_availability import (
    END_BEFORE_START,
    MISSING_SELECTION,
    NO_CHANGES,
    EditAvailabilityUseCase,
    describe_saved,
)
from groupcal.domain.entities.availability import Status, TimeSlot
from groupcal.domain.entities.edit_session import RangeEditSession, ToggleEditSession
from groupcal.infrastructure.discord.mock_transport import MockTransport
from groupcal.infrastructure.store.availability_index import AvailabilityIndex
from groupcal.infrastructure.store.mention_ledger import MentionLedger

FRIDAY = date(2024, 1, 5)


def _editor():
    index = AvailabilityIndex()
    transport = MockTransport()
    views = CalendarViewUseCase(
        builder=ViewModelBuilder(index=index, mentions=MentionLedger()),
        renderer=transport,
        clock=lambda: datetime(2024, 1, 3, 12, 0),
    )
    editor = EditAvailabilityUseCase(index=index, renderer=transport, views=views)
    return editor, index, transport, views


def test_start_edit_prompts_with_current_projection():
    editor, index, transport, _ = _editor()
    index.add_slot("guild", TimeSlot(FRIDAY, 20), "u1", Status.UNAVAILABLE)

    session = editor.start_edit("u1", "guild", "general", FRIDAY)

    assert isinstance(session, RangeEditSession)
    assert transport.prompts[-1].current_projection.unavailable == frozenset({20})
    assert transport.prompts[-1].participant_id == "u1"


def test_range_save_overwrites_day_and_redraws_views():
    editor, index, transport, views = _editor()
    views.open("guild", "general")
    index.add_slot("guild", TimeSlot(FRIDAY, 8), "u1", Status.UNAVAILABLE)
    editor.start_edit("u1", "guild", "general", FRIDAY)
    editor.set_range_bound("u1", "start", 18)
    editor.set_range_bound("u1", "end", 21)
    editor.set_status("u1", Status.AVAILABLE)
    redraws_before = len(transport.redraws)

    editor.save("u1")

    projection = index.get_user_availability("guild", "u1", FRIDAY)
    assert projection.available == frozenset({18, 19, 20, 21})
    assert projection.unavailable == frozenset()
    assert editor.get_session("u1") is None
    assert len(transport.redraws) == redraws_before + 1


def test_same_start_and_end_is_a_single_hour():
    editor, index, _, _ = _editor()
    editor.start_edit("u1", "guild", "general", FRIDAY)
    editor.set_range_bound("u1", "start", 19)
    editor.set_range_bound("u1", "end", 19)
    editor.set_status("u1", Status.UNAVAILABLE)

    editor.save("u1")

    assert index.get_user_availability("guild", "u1", FRIDAY).unavailable == frozenset({19})


def test_missing_selection_keeps_session():
    editor, index, _, _ = _editor()
    editor.start_edit("u1", "guild", "general", FRIDAY)
    editor.set_range_bound("u1", "start", 18)

    with pytest.raises(EditValidationError, match=MISSING_SELECTION):
        editor.save("u1")

    assert editor.get_session("u1") is not None
    assert index.get_user_availability("guild", "u1", FRIDAY).is_empty


def test_end_before_start_is_rejected():
    editor, _, _, _ = _editor()
    editor.start_edit("u1", "guild", "general", FRIDAY)
    editor.set_range_bound("u1", "start", 20)
    editor.set_range_bound("u1", "end", 18)
    editor.set_status("u1", Status.AVAILABLE)

    with pytest.raises(EditValidationError) as excinfo:
        editor.save("u1")

    assert str(excinfo.value) == END_BEFORE_START
    assert editor.get_session("u1") is not None


def test_toggle_moves_hour_between_sets():
    editor, index, _, _ = _editor()
    index.add_slot("guild", TimeSlot(FRIDAY, 10), "u1", Status.AVAILABLE)
    editor.start_edit("u1", "guild", "general", FRIDAY, variant="toggle")

    session = editor.toggle_hour("u1", 10, Status.UNAVAILABLE)
    assert session.pending_available == frozenset()
    assert session.pending_unavailable == frozenset({10})

    session = editor.toggle_hour("u1", 10, Status.UNAVAILABLE)
    assert session.pending_unavailable == frozenset()
    assert session.has_changes

    session = editor.toggle_hour("u1", 11, Status.AVAILABLE)
    editor.save("u1")

    assert index.get_user_availability("guild", "u1", FRIDAY).available == frozenset({11})
    assert index.query_hour("guild", TimeSlot(FRIDAY, 10)).is_empty


def test_unchanged_toggle_session_is_not_saved():
    """Saving a toggle session that matches the stored day keeps the session and writes nothing."""
    editor, index, transport, views = _editor()
    views.open("guild", "general")
    index.add_slot("guild", TimeSlot(FRIDAY, 10), "u1", Status.AVAILABLE)
    editor.start_edit("u1", "guild", "general", FRIDAY, variant="toggle")
    redraws_before = len(transport.redraws)

    with pytest.raises(EditValidationError) as excinfo:
        editor.save("u1")

    assert str(excinfo.value) == NO_CHANGES
    assert isinstance(editor.get_session("u1"), ToggleEditSession)
    assert index.get_user_availability("guild", "u1", FRIDAY).available == frozenset({10})
    assert len(transport.redraws) == redraws_before

    editor.toggle_hour("u1", 10, Status.AVAILABLE)
    editor.toggle_hour("u1", 10, Status.AVAILABLE)
    with pytest.raises(EditValidationError):
        editor.save("u1")


def test_new_session_replaces_previous():
    editor, _, _, _ = _editor()
    editor.start_edit("u1", "guild", "general", FRIDAY)
    editor.start_edit("u1", "guild", "general", FRIDAY, variant="toggle")

    assert isinstance(editor.get_session("u1"), ToggleEditSession)
    with pytest.raises(NoEditSessionError):
        editor.set_status("u1", Status.AVAILABLE)


def test_cancel_and_missing_session():
    editor, _, _, _ = _editor()
    editor.start_edit("u1", "guild", "general", FRIDAY)

    assert editor.cancel("u1") is True
    assert editor.cancel("u1") is False
    with pytest.raises(NoEditSessionError):
        editor.save("u1")


def test_out_of_range_hour_is_rejected():
    editor, _, _, _ = _editor()
    editor.start_edit("u1", "guild", "general", FRIDAY)
    with pytest.raises(EditValidationError):
        editor.set_range_bound("u1", "start", 24)


def test_describe_saved_range():
    session = RangeEditSession(
        participant_id="u1",
        scope="guild",
        target_date=FRIDAY,
        selected_start=18,
        selected_end=21,
        status=Status.AVAILABLE,
    )
    assert describe_saved(session) == (
        "✅ Your availability for Friday, January 05 has been updated!\n"
        "You are available from 6:00 PM to 9:00 PM."
    )
