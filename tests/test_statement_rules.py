"""
Tests for the statement classifier and its rule priority policy.
"""

from __future__ import annotations

import pytest

from groupcal.application.utils.statement_rules import (
    DEFAULT_RULES,
    Subject,
    Tier,
    classify_statement,
    match_statement,
    normalize_text,
    prioritize,
)
from groupcal.domain.entities.availability import Status
from groupcal.domain.entities.intent import MentionRange, MentionSingle, SelfRange, SelfSingle


@pytest.mark.parametrize(
    "text, expected",
    [
        ("I'm available tomorrow at 7pm", SelfSingle(Status.AVAILABLE, "tomorrow at 7pm")),
        ("available friday", SelfSingle(Status.AVAILABLE, "friday")),
        ("im free on saturday", SelfSingle(Status.AVAILABLE, "saturday")),
        ("I am also free tomorrow", SelfSingle(Status.AVAILABLE, "tomorrow")),
        ("I can make it Friday", SelfSingle(Status.AVAILABLE, "friday")),
        ("I'm busy Friday", SelfSingle(Status.UNAVAILABLE, "friday")),
        ("I’m not available tomorrow", SelfSingle(Status.UNAVAILABLE, "tomorrow")),
        ("I can't do it on Sunday", SelfSingle(Status.UNAVAILABLE, "sunday")),
        ("i cannot attend friday", SelfSingle(Status.UNAVAILABLE, "friday")),
    ],
)
def test_self_single_statements(text, expected):
    assert classify_statement(text) == expected


@pytest.mark.parametrize(
    "text, expected",
    [
        ("Alex is free tomorrow", MentionSingle("alex", Status.AVAILABLE, "tomorrow")),
        ("alex can attend friday", MentionSingle("alex", Status.AVAILABLE, "friday")),
        ("Alex's busy Friday", MentionSingle("alex", Status.UNAVAILABLE, "friday")),
        ("Alex can't make it Friday", MentionSingle("alex", Status.UNAVAILABLE, "friday")),
        ("jo-anne is not available monday", MentionSingle("jo-anne", Status.UNAVAILABLE, "monday")),
    ],
)
def test_mention_single_statements(text, expected):
    assert classify_statement(text) == expected


@pytest.mark.parametrize(
    "text, expected",
    [
        ("I'm free from tomorrow 6pm to 9pm", SelfRange(Status.AVAILABLE, "tomorrow 6pm", "9pm")),
        ("i'm busy between friday 6pm and 9pm", SelfRange(Status.UNAVAILABLE, "friday 6pm", "9pm")),
        ("alex is available from friday 6pm until friday 9pm", MentionRange("alex", Status.AVAILABLE, "friday 6pm", "friday 9pm")),
        ("alex is unavailable from 6pm - 9pm", MentionRange("alex", Status.UNAVAILABLE, "6pm", "9pm")),
        ("I'm free tomorrow from 3pm to 5pm", SelfRange(Status.AVAILABLE, "3pm", "5pm", on="tomorrow")),
        ("i'm not available on friday between 2pm and 6pm", SelfRange(Status.UNAVAILABLE, "2pm", "6pm", on="friday")),
        ("alex is free friday from 6pm to 9pm", MentionRange("alex", Status.AVAILABLE, "6pm", "9pm", on="friday")),
    ],
)
def test_range_statements_are_reachable(text, expected):
    """Single-time rules never claim a from/between range, with or without a leading date."""
    assert classify_statement(text) == expected


@pytest.mark.parametrize(
    "text",
    [
        "",
        "hello everyone",
        "what time works for you?",
        "we should play friday",
        "is anyone free",
    ],
)
def test_non_statements_are_parse_misses(text):
    assert classify_statement(text) is None


def test_pronouns_are_never_mentioned_names():
    """'we are free friday' must not record availability for someone called 'we'."""
    intent = classify_statement("we are free friday")
    assert not isinstance(intent, MentionSingle)


def test_not_available_is_never_read_as_available():
    rule, intent = match_statement("I'm not available friday")
    assert rule.name == "self_unavailable"
    assert intent == SelfSingle(Status.UNAVAILABLE, "friday")


def test_priority_policy_orders_tier_then_subject():
    """Single before range; within a tier, self before mention; declaration order otherwise."""
    ordered = prioritize(reversed(DEFAULT_RULES))
    keys = [(rule.tier, rule.subject) for rule in ordered]

    assert keys == sorted(keys)
    assert ordered[0].tier is Tier.SINGLE and ordered[0].subject is Subject.SELF
    assert ordered[-1].tier is Tier.RANGE and ordered[-1].subject is Subject.MENTION


def test_self_statement_wins_over_mention_in_same_text():
    """Both a self and a mention rule match; the self rule has priority."""
    intent = classify_statement("I'm free friday but alex is busy friday")
    assert isinstance(intent, SelfSingle)
    assert intent.status is Status.AVAILABLE


def test_normalize_text_collapses_case_quotes_and_whitespace():
    assert normalize_text("  I’M   Free\tFriday ") == "i'm free friday"
