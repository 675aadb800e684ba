from __future__ import annotations

from dataclasses import dataclass, field

from groupcal.domain.entities.view_model import ViewModel


@dataclass(frozen=True)
class Interaction:
    """A slash command, button press or select-menu choice coming from the chat."""

    kind: str  # "command" | "component"
    custom_id: str
    scope: str
    location: str
    user_id: str
    user_name: str | None = None
    values: tuple[str, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class InteractionResult:
    action: str
    view_model: ViewModel | None = None
    message: str | None = None
