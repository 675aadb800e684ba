#!/usr/bin/env python3
"""
Interactive local chat harness (no HTTP, no Discord).

Usage:
  python3 scripts/chat_local.py

What it does:
- Keeps one scope/location for the session and lets you switch speakers
- Feeds typed messages through the same HandleChatEventUseCase as the server
- Prints the extraction outcome and the week view after every message
"""

from __future__ import annotations

import sys
from datetime import datetime, timezone
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from groupcal.domain.entities.interaction import Interaction  # noqa: E402
from groupcal.domain.entities.message import MessageEvent  # noqa: E402
from groupcal.infrastructure.discord.calendar_format import calendar_message  # noqa: E402
from groupcal.infrastructure.discord.mock_transport import MockTransport  # noqa: E402
from groupcal.wiring.dependencies import build_container  # noqa: E402

SCOPE = "local-guild"
LOCATION = "local-channel"


def _print_header(speaker: str) -> None:
    print("\nLocal Calendar Harness")
    print("-" * 60)
    print(f"scope: {SCOPE}  location: {LOCATION}  speaker: {speaker}")
    print("Type a message and press Enter.")
    print("Commands: /as <name> (switch speaker), /click <custom_id> [values...], /quit, /help")
    print("-" * 60)


def _print_view(transport: MockTransport) -> None:
    request = transport.last_redraw
    if request is None:
        print("(no calendar shown yet, type !calendar)")
        return
    embed = calendar_message(request.view_model)["embeds"][0]
    print(embed["title"])
    print(embed["description"])


def main() -> None:
    transport = MockTransport()
    container = build_container(transport=transport)
    speaker = "alice"
    counter = 0
    _print_header(speaker)

    while True:
        try:
            text = input(f"{speaker}> ").strip()
        except (EOFError, KeyboardInterrupt):
            print()
            return
        if not text:
            continue
        if text == "/quit":
            return
        if text == "/help":
            _print_header(speaker)
            continue
        if text.startswith("/as "):
            speaker = text[4:].strip() or speaker
            continue
        if text.startswith("/click "):
            custom_id, *values = text[7:].split()
            result = container.interactions.handle(
                Interaction(
                    kind="component",
                    custom_id=custom_id,
                    scope=SCOPE,
                    location=LOCATION,
                    user_id=speaker,
                    user_name=speaker,
                    values=tuple(values),
                )
            )
            print(f"action={result.action}" + (f" message={result.message}" if result.message else ""))
            _print_view(transport)
            continue

        counter += 1
        message = _message(text, speaker, counter)
        transport.add_history(message)
        result = container.chat_events.on_message_created(message)
        if result is not None:
            print(f"outcome={result.outcome.value}" + (f" intent={result.intent}" if result.intent else ""))
        _print_view(transport)


def _message(text: str, speaker: str, counter: int) -> MessageEvent:
    return MessageEvent(
        id=f"local-{counter}",
        scope=SCOPE,
        location=LOCATION,
        author_id=speaker,
        author_name=speaker,
        text=text,
        created_at=datetime.now(timezone.utc),
    )


if __name__ == "__main__":
    main()
