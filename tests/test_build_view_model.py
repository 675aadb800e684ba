"""
Tests for projecting the index and mention ledger into calendar view models.
"""

from __future__ import annotations

from datetime import date, timedelta

from groupcal.application.use_cases.build_view_model import ViewModelBuilder
from groupcal.domain.entities.availability import WORKING_HOURS, Status, TimeSlot
from groupcal.domain.entities.view_model import Classification, DayViewModel, WeekViewModel
from groupcal.domain.entities.view_state import Granularity
from groupcal.infrastructure.store.availability_index import AvailabilityIndex
from groupcal.infrastructure.store.mention_ledger import MentionLedger
from groupcal.infrastructure.store.participant_directory import ParticipantDirectory

MONDAY = date(2024, 1, 1)
WEDNESDAY = date(2024, 1, 3)
FRIDAY = date(2024, 1, 5)


def _builder():
    index = AvailabilityIndex()
    mentions = MentionLedger()
    directory = ParticipantDirectory()
    directory.remember("u1", "bob")
    directory.remember("u2", "Alice")
    builder = ViewModelBuilder(index=index, mentions=mentions, display_name=directory.display_name)
    return builder, index, mentions


def test_week_starts_on_monday_of_anchor_week():
    builder, _, _ = _builder()

    view = builder.week_view("guild", FRIDAY, today=WEDNESDAY)

    assert isinstance(view, WeekViewModel)
    assert view.week_start == MONDAY
    assert [cell.day for cell in view.days] == [MONDAY + timedelta(days=i) for i in range(7)]
    assert [cell.is_today for cell in view.days] == [False, False, True, False, False, False, False]


def test_week_cell_classification():
    builder, index, _ = _builder()
    index.add_slot("guild", TimeSlot(MONDAY, 10), "u1", Status.AVAILABLE)
    index.add_slot("guild", TimeSlot(date(2024, 1, 2), 10), "u1", Status.UNAVAILABLE)
    index.add_slot("guild", TimeSlot(WEDNESDAY, 10), "u1", Status.AVAILABLE)
    index.add_slot("guild", TimeSlot(WEDNESDAY, 11), "u2", Status.UNAVAILABLE)

    view = builder.week_view("guild", MONDAY, today=date(2024, 2, 1))

    assert [cell.classification for cell in view.days[:4]] == [
        Classification.ALL_AVAILABLE,
        Classification.ALL_UNAVAILABLE,
        Classification.MIXED,
        Classification.NO_DATA,
    ]


def test_today_is_display_only():
    builder, index, _ = _builder()
    index.add_slot("guild", TimeSlot(MONDAY, 10), "u1", Status.AVAILABLE)

    cell = builder.week_view("guild", MONDAY, today=MONDAY).days[0]

    assert cell.classification is Classification.ALL_AVAILABLE
    assert cell.display_classification is Classification.TODAY


def test_names_sorted_case_insensitively_then_mentions():
    builder, index, mentions = _builder()
    index.add_slot("guild", TimeSlot(FRIDAY, 10), "u1", Status.AVAILABLE)
    index.add_slot("guild", TimeSlot(FRIDAY, 12), "u2", Status.AVAILABLE)
    mentions.record("guild", "zed", FRIDAY, Status.AVAILABLE, [])
    mentions.record("guild", "carl", FRIDAY, Status.UNAVAILABLE, [])

    cell = builder.week_view("guild", FRIDAY, today=MONDAY).days[4]

    assert cell.available == ("Alice", "bob", "zed")
    assert cell.unavailable == ("carl",)
    assert cell.classification is Classification.MIXED


def test_day_view_has_one_cell_per_working_hour():
    builder, index, mentions = _builder()
    index.set_user_availability("guild", "u1", FRIDAY, [9, 10, 11], [])
    mentions.record("guild", "alex", FRIDAY, Status.UNAVAILABLE, [10])

    view = builder.build("guild", FRIDAY, Granularity.DAY, today=MONDAY)

    assert isinstance(view, DayViewModel)
    assert [cell.hour for cell in view.hours] == list(WORKING_HOURS)
    by_hour = {cell.hour: cell for cell in view.hours}
    assert by_hour[9].classification is Classification.ALL_AVAILABLE
    assert by_hour[10].classification is Classification.MIXED
    assert by_hour[10].unavailable == ("alex",)
    assert by_hour[12].classification is Classification.NO_DATA


def test_building_twice_gives_equal_view_models():
    builder, index, mentions = _builder()
    index.add_slot("guild", TimeSlot(FRIDAY, 10), "u1", Status.AVAILABLE)
    mentions.record("guild", "alex", FRIDAY, Status.AVAILABLE, [])

    for granularity in Granularity:
        first = builder.build("guild", FRIDAY, granularity, today=MONDAY)
        second = builder.build("guild", FRIDAY, granularity, today=MONDAY)
        assert first == second
