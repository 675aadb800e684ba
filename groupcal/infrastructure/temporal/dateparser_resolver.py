from __future__ import annotations

import logging
from collections.abc import Iterator
from datetime import datetime
from typing import Any

from dateparser import DateDataParser
from dateparser.date import DateData
from dateparser.search import search_dates

from groupcal.application.ports.temporal_resolver import TemporalAnchor, TemporalResolverPort


class DateparserResolver(TemporalResolverPort):
    """
    Temporal resolver backed by dateparser.

    ``search_dates`` finds the date expressions in free text. It skips a bare
    clock time such as "3pm", so when it finds nothing the whole text is parsed
    once more and a time-only result anchors to the reference day.
    """

    def __init__(self, languages: tuple[str, ...] = ("en",), prefer_dates_from: str = "future") -> None:
        self._languages = list(languages)
        self._prefer_dates_from = prefer_dates_from
        self._logger = logging.getLogger(__name__)

    def resolve(self, text: str, reference: datetime) -> Iterator[TemporalAnchor]:
        if not text or not text.strip():
            return
        found = self._search(text, reference)
        if not found:
            clock = self._clock_time(text, reference)
            if clock is not None:
                yield clock
            return
        for span, value in found:
            data = self._period_data(span, reference)
            hour = value.hour if data is not None and data.period == "time" else None
            yield TemporalAnchor(date=value.date(), hour=hour)

    def _settings(self, reference: datetime) -> dict[str, Any]:
        return {
            "RELATIVE_BASE": reference.replace(tzinfo=None),
            "PREFER_DATES_FROM": self._prefer_dates_from,
            "RETURN_AS_TIMEZONE_AWARE": False,
        }

    def _search(self, text: str, reference: datetime) -> list[tuple[str, datetime]]:
        try:
            found = search_dates(text, languages=self._languages, settings=self._settings(reference))
        except Exception as e:
            self._logger.debug("Date search failed", extra={"reason": str(e)})
            return []
        return list(found or [])

    def _clock_time(self, text: str, reference: datetime) -> TemporalAnchor | None:
        data = self._period_data(text, reference)
        if data is None or data.date_obj is None or data.period != "time":
            return None
        # a time without a date belongs to the day the message was written
        return TemporalAnchor(date=reference.date(), hour=data.date_obj.hour)

    def _period_data(self, text: str, reference: datetime) -> DateData | None:
        settings = {**self._settings(reference), "RETURN_TIME_AS_PERIOD": True}
        try:
            return DateDataParser(languages=self._languages, settings=settings).get_date_data(text)
        except Exception as e:
            self._logger.debug("Period detection failed", extra={"reason": str(e)})
            return None
