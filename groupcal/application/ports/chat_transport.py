from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date, datetime

from groupcal.domain.entities.availability import UserAvailability
from groupcal.domain.entities.message import MessageEvent
from groupcal.domain.entities.view_model import ViewModel


@dataclass(frozen=True)
class RedrawRequest:
    scope: str
    location: str
    view_model: ViewModel
    is_new: bool = False  # True posts a fresh calendar, False edits the one already shown


@dataclass(frozen=True)
class EditorPromptRequest:
    participant_id: str
    scope: str
    location: str
    date: date
    current_projection: UserAvailability
    variant: str = "range"  # "range" | "toggle"


class HistoryPort(ABC):
    @abstractmethod
    def fetch_history(self, location: str, since: datetime) -> Iterable[MessageEvent]:
        """
        Return the messages posted in ``location`` after ``since``, oldest first.
        Pagination is the adapter's concern. Raises TransportFailure on error.
        """
        raise NotImplementedError


class RendererPort(ABC):
    @abstractmethod
    def redraw(self, request: RedrawRequest) -> None:
        """Show or update the calendar for a location. Raises TransportFailure on error."""
        raise NotImplementedError

    @abstractmethod
    def prompt_editor(self, request: EditorPromptRequest) -> None:
        """Show the availability editor privately to one participant."""
        raise NotImplementedError

    @abstractmethod
    def notify(self, participant_id: str, location: str, text: str) -> None:
        """Send a short message visible only to ``participant_id``."""
        raise NotImplementedError
