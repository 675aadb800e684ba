from __future__ import annotations

from abc import ABC, abstractmethod


class ParticipantDirectoryPort(ABC):
    @abstractmethod
    def remember(self, participant_id: str, display_name: str | None) -> None:
        raise NotImplementedError

    @abstractmethod
    def display_name(self, participant_id: str) -> str:
        """Last known name for ``participant_id``, or the id itself when none was seen."""
        raise NotImplementedError
