from __future__ import annotations

import re
from dataclasses import dataclass
from enum import IntEnum
from typing import Iterable

from groupcal.domain.entities.availability import Status
from groupcal.domain.entities.intent import (
    AvailabilityIntent,
    MentionRange,
    MentionSingle,
    SelfRange,
    SelfSingle,
)


class Tier(IntEnum):
    SINGLE = 0
    RANGE = 1


class Subject(IntEnum):
    SELF = 0
    MENTION = 1


# Words that look like a subject but never name a person.
NOT_A_NAME = (
    "i", "im", "we", "you", "they", "he", "she", "it", "us", "me",
    "is", "are", "am", "be", "was", "were", "not", "also", "still", "just", "so",
    "and", "but", "or", "if", "what", "who", "that", "this", "there", "here",
    "which", "when", "where", "how", "why", "anyone", "someone", "nobody", "totally",
)

_SELF = r"(?:^|\b(?:i'?m|im|i\s+am)\s+)(?:(?:also|still|totally|probably|definitely|only|actually)\s+)?"
_SELF_ACTOR = r"(?:^|\bi\s+)"
_NAME = r"\b(?P<name>(?!(?:" + "|".join(NOT_A_NAME) + r")\b)[a-z][\w-]+)"
_IS = r"(?:'s|\s+is)?"
_AVAILABLE = r"(?:available|free)"
_UNAVAILABLE = r"(?:not\s+available|not\s+free|busy|unavailable)"
_DO = r"(?:do|make|play|attend)\s+(?:it\s+)?"
_UNTIL = r"(?:to|until|till|and|-)"
# a single time never carries a from/between range, even after a date
_WHEN = r"(?!(?:from|between)\b)(?!.*\b(?:from|between)\s.+\s" + _UNTIL + r"\s)(?:on\s+)?(?P<when>\S.*)"
_RANGE = (
    r"(?:(?:on\s+)?(?P<on>\S.*?)\s+)?(?:from|between)\s+(?P<start>.+?)\s+" + _UNTIL + r"\s+(?P<end>\S.*)"
)


@dataclass(frozen=True)
class StatementRule:
    name: str
    tier: Tier
    subject: Subject
    status: Status
    pattern: re.Pattern

    @property
    def priority(self) -> tuple[int, int]:
        return (self.tier, self.subject)

    def match(self, text: str) -> AvailabilityIntent | None:
        found = self.pattern.search(text)
        if not found:
            return None
        groups = found.groupdict()
        if self.tier is Tier.SINGLE:
            when = groups["when"].strip()
            if self.subject is Subject.SELF:
                return SelfSingle(status=self.status, when=when)
            return MentionSingle(name=groups["name"], status=self.status, when=when)

        start, end = groups["start"].strip(), groups["end"].strip()
        on = (groups.get("on") or "").strip() or None
        if self.subject is Subject.SELF:
            return SelfRange(status=self.status, start=start, end=end, on=on)
        return MentionRange(name=groups["name"], status=self.status, start=start, end=end, on=on)


def _rule(name: str, tier: Tier, subject: Subject, status: Status, pattern: str) -> StatementRule:
    return StatementRule(name=name, tier=tier, subject=subject, status=status, pattern=re.compile(pattern))


DEFAULT_RULES: tuple[StatementRule, ...] = (
    _rule("self_available", Tier.SINGLE, Subject.SELF, Status.AVAILABLE, _SELF + _AVAILABLE + r"\s+" + _WHEN),
    _rule("self_can_do", Tier.SINGLE, Subject.SELF, Status.AVAILABLE, _SELF_ACTOR + r"can\s+" + _DO + _WHEN),
    _rule("self_unavailable", Tier.SINGLE, Subject.SELF, Status.UNAVAILABLE, _SELF + _UNAVAILABLE + r"\s+" + _WHEN),
    _rule(
        "self_cannot_do",
        Tier.SINGLE,
        Subject.SELF,
        Status.UNAVAILABLE,
        _SELF_ACTOR + r"(?:can'?t|cannot|can\s+not)\s+" + _DO + _WHEN,
    ),
    _rule(
        "mention_available",
        Tier.SINGLE,
        Subject.MENTION,
        Status.AVAILABLE,
        _NAME + _IS + r"\s+(?:available|free|can\s+attend|can\s+make\s+it|can\s+do\s+it)\s+" + _WHEN,
    ),
    _rule("mention_can_do", Tier.SINGLE, Subject.MENTION, Status.AVAILABLE, _NAME + r"\s+can\s+" + _DO + _WHEN),
    _rule(
        "mention_unavailable",
        Tier.SINGLE,
        Subject.MENTION,
        Status.UNAVAILABLE,
        _NAME + _IS + r"\s+(?:not\s+available|not\s+free|busy|unavailable|can'?t\s+attend)\s+" + _WHEN,
    ),
    _rule(
        "mention_cannot_do",
        Tier.SINGLE,
        Subject.MENTION,
        Status.UNAVAILABLE,
        _NAME + r"\s+(?:can'?t|cannot)\s+" + _DO + _WHEN,
    ),
    _rule("self_available_range", Tier.RANGE, Subject.SELF, Status.AVAILABLE, _SELF + _AVAILABLE + r"\s+" + _RANGE),
    _rule(
        "self_unavailable_range", Tier.RANGE, Subject.SELF, Status.UNAVAILABLE, _SELF + _UNAVAILABLE + r"\s+" + _RANGE
    ),
    _rule(
        "mention_available_range",
        Tier.RANGE,
        Subject.MENTION,
        Status.AVAILABLE,
        _NAME + _IS + r"\s+" + _AVAILABLE + r"\s+" + _RANGE,
    ),
    _rule(
        "mention_unavailable_range",
        Tier.RANGE,
        Subject.MENTION,
        Status.UNAVAILABLE,
        _NAME + _IS + r"\s+" + _UNAVAILABLE + r"\s+" + _RANGE,
    ),
)


def normalize_text(text: str) -> str:
    normalized = text.lower().replace("’", "'").replace("‘", "'")
    return re.sub(r"\s+", " ", normalized).strip()


def prioritize(rules: Iterable[StatementRule]) -> list[StatementRule]:
    """
    First-match policy order: single-time rules before range rules, and within a
    tier self statements before mentions. Declaration order breaks remaining ties.
    """
    return sorted(rules, key=lambda rule: rule.priority)


def match_statement(
    text: str, rules: Iterable[StatementRule] = DEFAULT_RULES
) -> tuple[StatementRule, AvailabilityIntent] | None:
    """Return the first matching rule with its intent, or None when the text states no availability."""
    normalized = normalize_text(text)
    if not normalized:
        return None
    for rule in prioritize(rules):
        intent = rule.match(normalized)
        if intent is not None:
            return rule, intent
    return None


def classify_statement(text: str, rules: Iterable[StatementRule] = DEFAULT_RULES) -> AvailabilityIntent | None:
    matched = match_statement(text, rules)
    return matched[1] if matched else None
