from __future__ import annotations

import logging

# record attributes passed through ``extra=`` that the formatter appends to each line
LOG_CONTEXT_KEYS = (
    "message_id",
    "scope",
    "location",
    "participant",
    "mentioned",
    "day",
    "custom_id",
    "granularity",
    "outcome",
    "slots",
    "messages",
    "pages",
    "path",
    "status",
    "text",
    "reason",
)


class ContextFormatter(logging.Formatter):
    def __init__(self, fmt: str | None = None, keys: tuple[str, ...] = LOG_CONTEXT_KEYS) -> None:
        super().__init__(fmt)
        self._keys = keys

    def format(self, record: logging.LogRecord) -> str:
        extras = []
        for key in self._keys:
            value = getattr(record, key, None)
            if value not in (None, ""):
                extras.append(f"{key}={value}")
        base = super().format(record)
        if extras:
            return f"{base} | " + " ".join(extras)
        return base
